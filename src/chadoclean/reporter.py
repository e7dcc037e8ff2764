"""Diagnostics sinks for progress and error messages.

The tools never print directly.  They are handed a reporter and call
``report()`` once per logical event ("Stripping features...", "Done!",
collision warnings).  Two sinks exist:

- ConsoleReporter writes each message to stdout.
- CommandReporter appends each message to an external command object's
  ``stderr`` text and persists it by calling ``save()``.  This is how the
  tools run inside a submission pipeline that tracks a command record.
"""

from typing import Any, Optional, Protocol

from rich.console import Console

from .logger import get_logger

log = get_logger(__name__)


class Reporter(Protocol):
    """Anything that accepts one human-readable line per event."""

    def report(self, text: str) -> None:
        ...


class ConsoleReporter:
    """Default reporter: one message per line on stdout."""

    def __init__(self, console: Optional[Console] = None):
        self._console = console

    @property
    def console(self) -> Console:
        # Resolved lazily so stdout redirection after construction is honoured
        if self._console is None:
            self._console = Console(highlight=False, soft_wrap=True, emoji=False)
        return self._console

    def report(self, text: str) -> None:
        log.info("report: %s", text)
        self.console.print(text, markup=False, highlight=False, soft_wrap=True)


class CommandReporter:
    """Reporter that accumulates messages on a command object's stderr."""

    def __init__(self, command_object: Any):
        self.command_object = command_object

    def report(self, text: str) -> None:
        log.info("report (command): %s", text)
        if self.command_object.stderr is None:
            self.command_object.stderr = ""
        self.command_object.stderr += f"{text}\n"
        self.command_object.save()


def make_reporter(command_object: Any = None) -> Reporter:
    """Pick the reporter matching the presence of a command object."""
    if command_object is None:
        return ConsoleReporter()
    return CommandReporter(command_object)
