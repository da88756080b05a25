from __future__ import annotations

import io

import pytest

from pi.reader import Reader

TEST_ENV = {"PI_READER_TEST": "1"}


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def make_reader(output):
    """Build a reader over in-memory streams preloaded with *keys*."""

    def factory(keys: str = "", **options) -> Reader:
        options.setdefault("screen_width", 80)
        return Reader(io.StringIO(keys), output, dict(TEST_ENV), **options)

    return factory
