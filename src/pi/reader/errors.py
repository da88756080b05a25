"""Exceptions raised by the line reader."""

from __future__ import annotations


class InputInterrupt(KeyboardInterrupt):
    """Raised when the user hits the interrupt key (Ctrl+C).

    Subclasses ``KeyboardInterrupt`` so callers that already handle a
    plain keyboard interrupt keep working.
    """
