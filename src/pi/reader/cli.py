"""CLI entry point for pi-reader. Uses Click for argument parsing."""

from __future__ import annotations

import logging
import re

import click

from pi.reader.keys import KeyEvent
from pi.reader.reader import Reader

_EXIT_COMMAND = re.compile(r"^exit", re.IGNORECASE)


@click.group(invoke_without_command=True)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"]),
    default="warning",
    help="Logging level for diagnostics written to stderr",
)
@click.pass_context
def main(ctx, log_level):
    """Interactive line editing demos."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@main.command()
@click.option("--prompt", default="=> ", show_default=True, help="Prompt shown before each line")
@click.option("--word", "words", multiple=True, help="Completion candidate (repeatable)")
def shell(prompt, words):
    """Read lines until 'exit', Ctrl-X or ESC."""
    reader = Reader(exit_keys={"ctrl_x", "escape"})
    if words:
        reader.completion_handler = lambda word: [w for w in words if w.startswith(word)]

    click.echo("*** pi-reader shell ***")
    click.echo("Press Ctrl-X or ESC to exit")
    while True:
        line = reader.read_line(prompt)
        if not line.endswith("\n") or _EXIT_COMMAND.match(line):
            break
    click.echo("\nExiting...")


@main.command()
@click.option("--prompt", default=">> ", show_default=True, help="Prompt shown before each line")
def multiline(prompt):
    """Read lines until Ctrl-D or Ctrl-Z and print them."""
    reader = Reader()
    click.echo("Press Ctrl-D or Ctrl-Z to finish")
    answer = reader.read_multiline(prompt)
    click.echo(f"\nanswer: {answer!r}")


@main.command()
@click.option("--count", default=5, show_default=True, type=click.IntRange(min=1), help="Number of keys to read")
def keys(count):
    """Print the decoded key events for a number of keypresses."""
    reader = Reader()

    def show(event: KeyEvent) -> None:
        key = event.key
        flags = (("ctrl", key.ctrl), ("meta", key.meta), ("shift", key.shift))
        modifiers = [name for name, on in flags if on]
        click.echo(f"{event.key.name.value:<12} {'+'.join(modifiers) or '-':<16} {event.value!r}")

    reader.on("keypress", show)
    for _ in range(count):
        if reader.read_keypress() is None:
            break


if __name__ == "__main__":
    main()
