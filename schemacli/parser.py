"""
schemacli parser: argv + schema -> outcome.

Pipeline (pure, synchronous, no I/O):
1. help detection: any --help/-h short-circuits to HelpRequested.
2. tokenize(): sort tokens into per-field raw values (schemacli.tokens).
3. resolve(): coerce every field in declaration order, apply defaults, and
   collect every missing or invalid value instead of stopping at the first.
4. result: Success(data) with a read-only mapping, or ValidationFailure
   carrying a CommandExit with all faults and the schema help text.

Entry points
- safe_parse(schema, argv) / safe_dispatch(group, argv): return an outcome.
- parse(schema, argv) / dispatch(group, argv): return the data (or Success for
  groups) and raise HelpExit / CommandExit otherwise.
- is_help(argv): empty argv or a help flag.

Console helpers (the only code that prints)
- report(outcome): help on stdout, faults plus help on stderr; returns the
  exit code.
- invoke(target, argv): parse sys.argv[1:] (or a shell string, or a list),
  report, run the command callback on success and return the exit code.
"""
import difflib
import shlex
import sys
from collections.abc import Iterable
from types import MappingProxyType

from rich.console import Console
from rich.text import Text

from . import utils
from .faults import CoercionError, CommandExit, HelpExit, MissingValueError, UnknownCommandError
from .outcomes import HelpRequested, Success, ValidationFailure
from .schemas import CommandGroup, CommandSchema, command
from .tokens import tokenize
from .utils import Unset, coalesce, debug

HELP_FLAGS = frozenset({"--help", "-h"})


def _sanitize(argv, /):
    if isinstance(argv, str) or not isinstance(argv, Iterable):
        raise TypeError("argv must be an iterable of strings")
    argv = list(argv)
    for token in argv:
        if not isinstance(token, str):
            raise TypeError(f"argv must be an iterable of strings, got {type(token).__name__} item")
    return argv


def _label(name, spec):
    if spec.positional:
        return f"<{name}>"
    return "--" + name.replace("_", "-")


def is_help(argv, /):
    """
    True when argv is empty or contains --help / -h.
    """
    argv = _sanitize(argv)
    return not argv or any(token in HELP_FLAGS for token in argv)


def resolve(schema, tokens, /):
    """
    Coerce tokenized values into typed data.

    Returns (data, faults). data holds every field that resolved, in
    declaration order; faults starts with the tokenizer faults and gains one
    entry per missing or invalid field.
    """
    data = {}
    faults = list(tokens.faults)

    def fail(name, spec, raw, exception):
        faults.append(CoercionError(
            "invalid value for %s: %s" % (_label(name, spec), exception),
            command=schema.name,
            field=name,
            value=getattr(exception, "value", raw),
            hint="expected <%s>" % spec.coerce.display,
        ))

    for name, spec in schema.args.items():
        raws = tokens.values.get(name, [])

        if spec.variadic:
            if spec.coerce.multiple:
                try:
                    data[name] = spec.coerce(raws)
                except ValueError as exception:
                    fail(name, spec, raws, exception)
                continue
            values = []
            for raw in raws:
                try:
                    values.append(spec.coerce(raw))
                except ValueError as exception:
                    fail(name, spec, raw, exception)
                    break
            else:
                data[name] = values
            continue

        if not raws:
            if spec.default is not Unset:
                data[name] = spec.default
            elif spec.optional:
                data[name] = None
            elif spec.coerce.flag:
                data[name] = False
            else:
                kind = "argument" if spec.positional else "option"
                faults.append(MissingValueError(
                    "missing required %s %s" % (kind, _label(name, spec)),
                    command=schema.name,
                    field=name,
                    hint="run '%s --help' to see the usage" % schema.name,
                ))
            continue

        raw = raws if spec.coerce.multiple else raws[-1]
        try:
            data[name] = spec.coerce(raw)
        except ValueError as exception:
            fail(name, spec, raw, exception)

    return data, faults


def safe_parse(schema, argv, /):
    """
    Parse argv against a CommandSchema and return an outcome; never raises for
    user input.
    """
    if not isinstance(schema, CommandSchema):
        raise TypeError("safe_parse() schema must be a command schema")
    argv = _sanitize(argv)

    if any(token in HELP_FLAGS for token in argv):
        debug(lambda: f"{schema.name}: help requested")
        return HelpRequested(schema.help())

    tokens = tokenize(schema, argv)
    data, faults = resolve(schema, tokens)
    if faults:
        debug(lambda: f"{schema.name}: {len(faults)} fault(s)")
        return ValidationFailure(CommandExit(faults, command=schema.name, help_text=schema.help()), schema.help())

    debug(lambda: f"{schema.name}: parsed {data!r}")
    return Success(MappingProxyType(data))


def parse(schema, argv, /):
    """
    Strict form of safe_parse(): return the data mapping, raise HelpExit when
    help was requested and CommandExit when parsing failed.
    """
    match safe_parse(schema, argv):
        case Success(data):
            return data
        case HelpRequested(help_text):
            raise HelpExit(help_text, command=schema.name)
        case ValidationFailure(error):
            raise error


def safe_dispatch(group, argv, /):
    """
    Resolve a subcommand from argv and parse the remaining tokens against it.

    Order of resolution
    1. empty argv, or a help flag first: group help.
    2. first token names a command: parse the tokens after it.
    3. a default command exists: parse the whole argv against it.
    4. a help flag anywhere: group help; otherwise an unknown-command failure.
    """
    if not isinstance(group, CommandGroup):
        raise TypeError("safe_dispatch() group must be a command group")
    argv = _sanitize(argv)
    commands = group.commands

    if not argv or argv[0] in HELP_FLAGS:
        debug(lambda: f"{group.name}: group help")
        return HelpRequested(group.help())

    if argv[0] in commands:
        name, argv = argv[0], argv[1:]
    elif group.default:
        name = group.default
    elif any(token in HELP_FLAGS for token in argv):
        debug(lambda: f"{group.name}: group help")
        return HelpRequested(group.help())
    else:
        suggestions = tuple(difflib.get_close_matches(argv[0], list(commands), n=3, cutoff=0.6))
        if suggestions:
            hint = "did you mean %s?" % " or ".join(map(repr, suggestions))
        else:
            hint = "run '%s --help' to see the available commands" % group.name
        fault = UnknownCommandError(
            "unknown command %r" % argv[0],
            command=group.name,
            token=argv[0],
            suggestions=suggestions,
            hint=hint,
        )
        debug(lambda: f"{group.name}: unknown command {argv[0]!r}")
        return ValidationFailure(CommandExit([fault], command=group.name, help_text=group.help()), group.help())

    debug(lambda: f"{group.name}: resolved command {name!r}")
    outcome = safe_parse(commands[name], argv)
    if isinstance(outcome, Success | HelpRequested):
        return outcome._replace(command=name)
    return outcome


def dispatch(group, argv, /):
    """
    Strict form of safe_dispatch(): return Success(data, command), raise
    HelpExit (carrying the subcommand name, None for group help) or
    CommandExit otherwise.
    """
    match safe_dispatch(group, argv):
        case Success() as outcome:
            return outcome
        case HelpRequested(help_text, command):
            raise HelpExit(help_text, command=command)
        case ValidationFailure(error):
            raise error


def report(outcome, /, *, console=Unset, colorful=True, fancy=False):
    """
    Print an outcome and return its exit code.

    HelpRequested prints the help text to stdout (0). ValidationFailure prints
    the faults followed by the help text to stderr (1). Success prints nothing
    (0). A custom rich console receives both streams.
    """
    match outcome:
        case HelpRequested(help_text):
            coalesced = coalesce(console, Console())
            coalesced.print(Text(help_text))
        case ValidationFailure(error, help_text):
            coalesced = coalesce(console, utils.console)
            coalesced.print(error.__replace__(colorful=colorful, fancy=fancy))
            coalesced.print()
            coalesced.print(Text(help_text))
        case Success():
            pass
        case _:
            raise TypeError("report() argument must be a parse outcome")
    return outcome.exit_code


def invoke(target, argv=Unset, /, *, console=Unset, colorful=True, fancy=False):
    """
    Convenience runner for schemas, groups and decorated functions.

    Parameters
    - target: CommandSchema, CommandGroup or a plain callable (wrapped with
      command()).
    - argv:
      • Unset: read sys.argv[1:].
      • str: split with shlex.split.
      • Iterable[str]: used as is.

    On success the callback of the selected command (if any) is called with
    the parsed data. Returns the exit code.
    """
    if argv is Unset:
        argv = sys.argv[1:]
    elif isinstance(argv, str):
        argv = shlex.split(argv)

    if isinstance(target, CommandGroup):
        outcome = safe_dispatch(target, argv)
        schema = target.commands.get(outcome.command) if isinstance(outcome, Success) else None
    elif isinstance(target, CommandSchema):
        outcome = safe_parse(target, argv)
        schema = target
    elif callable(target):
        return invoke(command(target), argv, console=console, colorful=colorful, fancy=fancy)
    else:
        raise TypeError("invoke() target must be a command schema, a command group or a callable")

    code = report(outcome, console=console, colorful=colorful, fancy=fancy)
    if isinstance(outcome, Success) and schema.callback:
        schema.run(outcome.data)
    return code


__all__ = (
    "HELP_FLAGS",
    "is_help",
    "resolve",
    "safe_parse",
    "parse",
    "safe_dispatch",
    "dispatch",
    "report",
    "invoke",
)
