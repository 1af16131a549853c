"""
schemacli parse outcomes.

Every safe entry point returns exactly one of these value types. They are
NamedTuples: fresh per call, immutable, and compared by value, so parsing the
same argv twice against the same schema yields equal outcomes.

- Success(data, command=None): data is a read-only mapping of field -> typed
  value; command names the subcommand chosen by a CommandGroup.
- ValidationFailure(error, help_text): error is a CommandExit aggregating every
  fault of the call; help_text belongs to the schema that failed.
- HelpRequested(help_text, command=None): help was asked for, or a group got
  no command. command names the subcommand whose help was requested.
"""
from typing import NamedTuple

from rich.text import Text


class Success(NamedTuple):
    data: object
    command: str | None = None

    exit_code = 0

    def __rich_repr__(self):
        yield "data", dict(self.data)
        if self.command is not None:
            yield "command", self.command


class ValidationFailure(NamedTuple):
    error: Exception
    help_text: str

    exit_code = 1

    @property
    def message(self):
        return str(self.error)

    def __rich__(self):
        return self.error


class HelpRequested(NamedTuple):
    help_text: str
    command: str | None = None

    exit_code = 0

    def __rich__(self):
        return Text(self.help_text)


__all__ = (
    "Success",
    "ValidationFailure",
    "HelpRequested",
)
