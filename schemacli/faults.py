"""
schemacli faults (parse errors and control signals) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing parse
  problem. Codes are grouped by domain to keep logs and docs searchable.
- CommandFault: base type for a single problem (unknown option, missing value,
  coercion failure, unknown command). Carries a message plus structured options
  (field, token, value, hint, suggestions, ...) and renders itself through rich.
- CommandExit: an exception group aggregating every fault of one parse call,
  together with the help text of the governing schema.
- HelpExit: the strict-mode signal for “help was requested”; not a failure.

UX goals
- Soft but technical language: short titles, one-sentence bodies, a single hint.
- Styles are keyed by name and can be overridden with __styles__ in __main__.

Integration
- The parser collects faults into a CommandExit; safe entry points return it
  inside a ValidationFailure, strict entry points raise it.
- report() (see schemacli.parser) prints faults with rich and maps them to an
  exit code.
"""
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping
    - routing (1110x): UNKNOWN_COMMAND
    - options (1111x): UNKNOWN_OPTION, OPTION_VALUE_REQUIRED
    - values (1112x): MISSING_VALUE, COERCION_FAILURE
    """
    # --- routing errors ---
    UNKNOWN_COMMAND         = 11101

    # --- option errors ---
    UNKNOWN_OPTION          = 11112
    OPTION_VALUE_REQUIRED   = 11117

    # --- value errors ---
    MISSING_VALUE           = 11125
    COERCION_FAILURE        = 11126

    def normalize(self):
        """
        the label shown for this code in fault headers.

        defaults to the number itself; a host may relabel codes by defining
        __codes__ = {FaultCode.X: "label", ...} in its __main__ module.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _styles(defaults):
    return defaultdict(str, defaults | getattr(__import__("__main__"), "__styles__", {}))


def _text(fragment, style, colorful):
    if not fragment:
        return Text("")
    if not colorful:
        return Text(str(fragment))
    if isinstance(fragment, Text):
        return fragment
    return Text(str(fragment), style)


def _program(options):
    return getattr(__import__("__main__"), "__prog__", options.get("command") or "command")


class CommandFault(Exception):
    """
    one parse problem with a message and structured context.

    options
    - title, code, hint: presentation (class defaults apply when omitted).
    - field, token, value, command, suggestions: what went wrong and where.
    - colorful, fancy: rendering switches used by __rich__.

    faults compare by value so that two parses of the same input produce equal
    outcomes.
    """
    __code__ = Unset
    __title__ = "parse error"

    def __init__(self, message, /, **options):
        if not isinstance(message, str):
            raise TypeError(f"{type(self).__name__} message must be a string")
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code", type(self).__code__)

    @property
    def title(self):
        return self.options.get("title", type(self).__title__)

    @property
    def hint(self):
        return self.options.get("hint")

    @property
    def field(self):
        return self.options.get("field")

    def __str__(self):
        return self.message

    def __eq__(self, other):
        if not isinstance(other, CommandFault):
            return NotImplemented
        return type(self) is type(other) and self.message == other.message and dict(self.options) == dict(other.options)

    def __hash__(self):
        return hash((type(self), self.message))

    def __rich__(self):
        colorful = self.options.get("colorful", True)
        styles = _styles({
            # header parts
            "prog-name": "bold #E6E6F0",  # header: program
            "code": "bold #00E5FF",  # header: numeric code
            "error-title": "bold #FF4DA6",  # header: fault title

            # body
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        })

        def text(fragment, style=""):
            return _text(fragment, styles[style] if colorful else "", colorful)

        header = Text.assemble(
            "[ ",
            text(_program(self.options), "prog-name"),
            " — ",
            text(self.code.normalize() if self.code else "", "code"),
            " | ",
            text(self.title.title(), "error-title"),
            " ]"
        )
        message = text(self.message, "error-message")
        renders = [message]
        if self.hint:
            renders.append(Text.assemble(text(" → ", "hint-arrow"), text(self.hint, "hint")))

        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")
        return Group(header, *renders)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnknownOptionError(CommandFault):
    __code__ = FaultCode.UNKNOWN_OPTION
    __title__ = "unknown option"


class OptionValueRequiredError(CommandFault):
    __code__ = FaultCode.OPTION_VALUE_REQUIRED
    __title__ = "option value required"


class MissingValueError(CommandFault):
    __code__ = FaultCode.MISSING_VALUE
    __title__ = "missing required value"


class CoercionError(CommandFault):
    __code__ = FaultCode.COERCION_FAILURE
    __title__ = "invalid value"


class UnknownCommandError(CommandFault):
    __code__ = FaultCode.UNKNOWN_COMMAND
    __title__ = "unknown command"


class CommandExit(ExceptionGroup[CommandFault]):
    """
    every fault of one parse call, plus the help text of the governing schema.

    str(exit) lists all fault messages (not just the first) so a single line of
    output reports the complete set of problems.
    """
    exit_code = 1

    def __new__(cls, exceptions, /, **options):
        exceptions = tuple(exceptions)
        return super().__new__(cls, "; ".join(map(str, exceptions)), exceptions)

    def __init__(self, exceptions, /, **options):
        exceptions = tuple(exceptions)
        super().__init__("; ".join(map(str, exceptions)), exceptions)
        self.options = MappingProxyType(options)

    @property
    def help_text(self):
        return self.options.get("help_text", "")

    def __str__(self):
        return self.message

    def __eq__(self, other):
        if not isinstance(other, CommandExit):
            return NotImplemented
        return self.exceptions == other.exceptions and dict(self.options) == dict(other.options)

    def __hash__(self):
        return hash(self.exceptions)

    def derive(self, exceptions):
        return type(self)(exceptions, **self.options)

    def __rich__(self):
        colorful = self.options.get("colorful", True)
        styles = _styles({
            "prog-name": "bold #E6E6F0",  # header: program
            "title": "bold #FF4DA6",  # header: fault count
        })

        def text(fragment, style=""):
            return _text(fragment, styles[style] if colorful else "", colorful)

        count = len(self.exceptions)
        title = "%d error%s" % (count, "" if count == 1 else "s")
        header = Text.assemble(
            "[ ",
            text(_program(self.options), "prog-name"),
            " — ",
            text(title.title(), "title"),
            " ]"
        )
        renders = [
            exception.__replace__(colorful=colorful, fancy=self.options.get("fancy", False))
            for exception in self.exceptions
        ]
        if self.options.get("fancy", False):
            return Panel(Group(*renders), title=header, title_align="left")
        return Group(header, *renders)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.exceptions, **{**self.options, **overrides})


class HelpExit(Exception):
    """
    strict-mode signal: render help_text and stop normal processing.

    this is not an error; callers print the text and exit with exit_code (0).
    """
    exit_code = 0

    def __init__(self, help_text, /, *, command=None):
        super().__init__("help requested")
        self.help_text = help_text
        self.command = command

    def __eq__(self, other):
        if not isinstance(other, HelpExit):
            return NotImplemented
        return (self.help_text, self.command) == (other.help_text, other.command)

    def __hash__(self):
        return hash((self.help_text, self.command))

    def __rich__(self):
        return Text(self.help_text)


__all__ = (
    "FaultCode",
    "CommandFault",
    "UnknownOptionError",
    "OptionValueRequiredError",
    "MissingValueError",
    "CoercionError",
    "UnknownCommandError",
    "CommandExit",
    "HelpExit",
)
