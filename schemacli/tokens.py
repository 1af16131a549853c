"""
schemacli tokenizer: classify argv tokens against a CommandSchema.

tokenize() walks argv once, left to right, and sorts every token into a field
slot without converting anything:

- "--name" / "--name=value": long option (snake_case fields are also reachable
  with hyphens, --dry-run for dry_run).
- "-x" / "-x=value": short alias.
- anything else is positional. Positionals fill the cardinals in index order,
  then go to the rest field; with no rest field they are kept aside as excess
  and ignored.

Boolean options are presence switches: they record True and never consume the
next token (an inline literal, --verbose=false, is kept as is). Every other
option takes its inline value, or else the next token unless that token looks
like an option itself. A negative number ("-5", "-2.5") never looks like an
option unless a short alias of that name exists.

Nothing here raises: problems are collected as faults next to the slots so the
caller can report all of them at once.
"""
import difflib
import re
from typing import NamedTuple

from .faults import OptionValueRequiredError, UnknownOptionError
from .utils import debug

_numeral = re.compile(r"-(\d+(\.\d*)?|\.\d+)([eE][-+]?\d+)?")


class Tokens(NamedTuple):
    values: dict
    excess: list
    faults: list


def is_numeral(token, /):
    return _numeral.fullmatch(token) is not None


def is_option(token, /):
    """
    True for tokens shaped like an option: a leading '-' that is neither a lone
    '-' nor a negative number.
    """
    return token.startswith("-") and token != "-" and not is_numeral(token)


def _unknown(schema, name, token):
    suggestions = tuple(difflib.get_close_matches(name, [*schema.longs, *schema.shorts], n=3, cutoff=0.6))
    if suggestions:
        hint = "did you mean %s?" % " or ".join(map(repr, suggestions))
    else:
        hint = "run '%s --help' to see the available options" % schema.name
    return UnknownOptionError(
        "unknown option %r" % name,
        command=schema.name,
        token=token,
        suggestions=suggestions,
        hint=hint,
    )


def tokenize(schema, argv, /):
    """
    Sort argv into raw per-field values.

    Returns Tokens(values, excess, faults): values maps field names to the list
    of raw tokens seen for them (True for bare boolean switches), excess holds
    ignored surplus positionals and faults the unknown-option and missing
    option-value problems met along the way.
    """
    argv = list(argv)
    args, longs, shorts = schema.args, schema.longs, schema.shorts
    cardinals, rest = schema.cardinals, schema.rest
    values = {}
    excess = []
    faults = []
    cursor = 0
    index = 0

    while index < len(argv):
        token = argv[index]
        index += 1

        if not is_option(token) and token not in shorts:
            if cursor < len(cardinals):
                values[cardinals[cursor]] = [token]
                debug(lambda: f"positional {token!r} -> {cardinals[cursor]}")
                cursor += 1
            elif rest:
                values.setdefault(rest, []).append(token)
                debug(lambda: f"positional {token!r} -> {rest} (rest)")
            else:
                excess.append(token)
                debug(lambda: f"positional {token!r} ignored (excess)")
            continue

        name, separator, inline = token.partition("=")
        field = (longs if name.startswith("--") else shorts).get(name)
        if field is None:
            faults.append(_unknown(schema, name, token))
            debug(lambda: f"option {name!r} unknown")
            continue

        spec = args[field]
        if spec.coerce.flag:
            raw = inline if separator else True
        elif separator:
            raw = inline
        elif index < len(argv) and not is_option(argv[index]):
            raw = argv[index]
            index += 1
        else:
            faults.append(OptionValueRequiredError(
                "option %r requires a value" % name,
                command=schema.name,
                field=field,
                token=token,
                hint="pass it as '%s <%s>' or '%s=<%s>'" % (name, spec.coerce.display, name, spec.coerce.display),
            ))
            debug(lambda: f"option {name!r} has no value")
            continue

        values.setdefault(field, []).append(raw)
        debug(lambda: f"option {name!r} -> {field} = {raw!r}")

    return Tokens(values, excess, faults)


__all__ = (
    "Tokens",
    "tokenize",
    "is_option",
)
