"""
schemacli utilities shared by the spec, schema and parser layers.

- Unset: the "not provided" marker, kept apart from None because None is a
  legitimate default.
- coalesce(value, default): replace Unset (and only Unset) with a default.
- rename(...): give generated callables a readable __name__/__qualname__.
- mirror("attr"): read-only property over self._attr that never leaks a
  mutable container.
- set_debug(enable) / debug(message): process-wide parse trace on stderr.
"""
import functools
from collections.abc import Mapping, Sequence, Set
from types import MappingProxyType
from typing import final

from rich.console import Console
from rich.text import Text

console = Console(stderr=True)

_debugging = False


@final
class UnsetType:
    """
    Type of the Unset singleton. Falsy, not subclassable, and usable in
    isinstance() unions (str | Unset).
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    __or__ = __ror__

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __rich__(self):
        return Text("Unset", style="dim")


def coalesce(object, default=None, /):
    """
    Return `object` unless it is Unset, in which case return `default`.

    None, 0, "" and [] are real values and pass through unchanged.
    """
    return default if object is Unset else object


def rename(*parameters):
    """
    rename(callable, name) sets __name__ and __qualname__ and returns the
    callable; rename(name) returns a decorator doing the same.
    """
    if len(parameters) == 1:
        name, = parameters
        return lambda callable: rename(callable, name)
    if len(parameters) != 2:
        raise TypeError("rename() takes 1 or 2 arguments (%d given)" % len(parameters))

    callable, name = parameters
    if not isinstance(name, str):
        raise TypeError("rename() name must be a string")
    callable.__name__ = callable.__qualname__ = name
    return callable


def _frozen(object):
    # tuples and strings are already immutable
    if isinstance(object, tuple | str):
        return object
    if isinstance(object, Mapping):
        return MappingProxyType(dict(object))
    if isinstance(object, Set):
        return frozenset(object)
    if isinstance(object, Sequence):
        return list(object)
    return object


def mirror(name, /):
    """
    Property reading self._<name>. Mappings come back as read-only proxies,
    sets as frozensets and other sequences as fresh lists.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")
    return property(rename(lambda self: _frozen(getattr(self, "_" + name)), name))


def set_debug(enable, /):
    """
    Turn the parse trace on or off for the whole process.

    The trace goes to stderr through rich and never changes parse results.
    """
    global _debugging
    _debugging = bool(enable)


def debug(message, /):
    """
    Emit one trace line when debugging is enabled.

    message may be a string or a zero-argument callable producing one, so
    expensive formatting only happens when the trace is on.
    """
    if not _debugging:
        return
    if callable(message):
        message = message()
    console.print(Text.assemble(("debug", "dim cyan"), " ", str(message)))


Unset = UnsetType()


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "set_debug",
    "debug",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
