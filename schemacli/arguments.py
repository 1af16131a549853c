r"""
schemacli argument specifications.

Overview
- Specs (one class per field kind, never a bag of optional properties)
  • Cardinal: fixed positional slot, identified by its index (0, 1, 2, ...).
  • Rest: collects every positional token the cardinals did not take.
  • Option: named value, reachable as --<field> and optionally -<short>.
  • Flag: named presence switch (an Option with a boolean coercer, default False).

- Every spec class lists its public fields in __introspectable__; the
  ArgumentType metaclass turns them into read-only properties and uses them
  for repr() and rich pretty-printing.

Fields (checked when the spec is built)
- Shared
  • coerce: Coercer or plain callable (str, int, float, bool, any converter).
  • descr: one-line help (str or rich Text); blank strings are refused.
- Value-bearing (Cardinal, Option)
  • default: any value; Unset means “no default declared”.
  • optional: bool; an absent optional field resolves to None.
  default and optional are mutually exclusive.
- Named (Option, Flag)
  • short: single character alias, unique per schema (checked by the schema).

Validation highlights
- Cardinal index must be a non-negative integer.
- short must be one character, not '-' and not 'h' (reserved for help).
- descr strings are trimmed; empty strings are rejected.

Quick example:
    >>> from schemacli.arguments import Cardinal, Option, Flag
    >>> query = Cardinal(0, descr="search query")
    >>> limit = Option(int, short="l", default=5, descr="number of results")
    >>> verbose = Flag(short="v")
"""
import copy
import re

from rich.text import Text

from .coercers import Boolean, coercer
from .utils import *


def _rich_repr(self):
    for name in type(self).__introspectable__:
        yield name, getattr(self, name)


def _repr(self):
    # option(coerce=integer(), short='l', default=5, ...)
    fields = ", ".join("%s=%r" % field for field in self.__rich_repr__())
    return f"{type(self).__typename__}({fields})"


class ArgumentType(type):
    """
    Metaclass of every spec.

    Derives __typename__ from the class name (Option -> "option", used in
    messages), publishes each name of __introspectable__ as a read-only mirror()
    property (unless the class body defines it) and installs the shared
    repr()/rich pretty-printing.
    """
    __introspectable__ = ()

    def __new__(cls, name, bases, namespace, **options):
        namespace = dict(namespace)
        namespace["__typename__"] = re.sub(r"(?<!^)(?=[A-Z])", "-", name).lower()
        for field in namespace.get("__introspectable__", ()):
            namespace.setdefault(field, mirror(field))
        namespace.setdefault("__repr__", _repr)
        namespace.setdefault("__rich_repr__", _rich_repr)
        return super().__new__(cls, name, bases, namespace)


def _snapshot(name, /):
    # declared values come back unchanged, as a private copy
    def getter(self):
        value = getattr(self, "_" + name)
        return value if value is Unset else copy.deepcopy(value)
    return property(rename(getter, name))


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: normalize and validate metadata shared by every spec.

    - coerce: adapted through coercer(); non-callables are rejected.
    - descr: Unset becomes None; provided strings must be non-empty after trimming.
    """
    try:
        metadata["coerce"] = coercer(metadata["coerce"])
    except TypeError:
        raise TypeError(f"{cls.__typename__} 'coerce' must be a coercer or a callable") from None

    if not isinstance(descr := metadata["descr"], str | Text | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)


def _sanitize_valued_metadata(cls, metadata, /):
    """
    Internal: validate default/optional for value-bearing specs.

    A declared default already makes the field optional; declaring both is an
    authoring mistake and is rejected.
    """
    metadata["optional"] = bool(metadata["optional"])
    if metadata["optional"] and metadata["default"] is not Unset:
        raise TypeError(f"{cls.__typename__} cannot be both 'optional' and have a 'default'")


def _sanitize_named_metadata(cls, metadata, /):
    """
    Internal: validate the short alias of named specs.
    """
    if not isinstance(short := metadata["short"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'short' must be a string")
    if isinstance(short, str):
        if len(short) != 1 or short == "-" or short.isspace():
            raise ValueError(f"{cls.__typename__} 'short' must be a single character")
        if short == "h":
            raise ValueError(f"{cls.__typename__} 'short' cannot be 'h' (reserved for help)")
    metadata["short"] = coalesce(short)


class Argument(metaclass=ArgumentType):
    """
    Common base of every spec. Not instantiated directly.

    Subclasses store their sanitized metadata as private fields; the names in
    __introspectable__ are published as read-only properties.
    """
    __introspectable__ = ()

    positional = False
    variadic = False

    def __init__(self, metadata, /):
        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @property
    def required(self):
        """
        True when an absent value is a failure (no default, not optional,
        not a boolean switch).
        """
        return (
            getattr(self, "default", Unset) is Unset
            and not getattr(self, "optional", False)
            and not self.coerce.flag
            and not self.variadic
        )

    def __setattr__(self, name, value, /):
        if not name.startswith("_"):
            raise AttributeError(f"{type(self).__typename__} is read-only")
        super().__setattr__(name, value)


class Cardinal[_T](Argument):
    """
    Fixed positional slot.

    The token found at positional index `index` (options and their values do
    not count) is coerced and stored under the field name. Indices across a
    schema must form 0..N-1 with no gaps.
    """

    __introspectable__ = (
        "index",
        "coerce",
        "default",
        "optional",
        "descr",
    )

    default = _snapshot("default")

    positional = True

    def __init__(self, index, coerce=str, /, *, default=Unset, optional=False, descr=Unset):
        if not isinstance(index, int) or isinstance(index, bool):
            raise TypeError(f"{type(self).__typename__} 'index' must be an integer")
        if index < 0:
            raise ValueError(f"{type(self).__typename__} 'index' must be non-negative")

        metadata = {
            "index": index,
            "coerce": coerce,
            "default": default,
            "optional": optional,
            "descr": descr,
        }
        _sanitize_metadata(type(self), metadata)
        _sanitize_valued_metadata(type(self), metadata)
        super().__init__(metadata)


class Rest[_T](Argument):
    """
    Variadic positional slot.

    Receives, in order, every positional token left once all cardinals are
    filled. Always resolves to a list, empty when nothing was supplied. When the
    coercer is an Array, its element coercer is applied to each token.
    """

    __introspectable__ = (
        "coerce",
        "descr",
    )

    positional = True
    variadic = True

    def __init__(self, coerce=str, /, *, descr=Unset):
        metadata = {
            "coerce": coerce,
            "descr": descr,
        }
        _sanitize_metadata(type(self), metadata)
        super().__init__(metadata)


class Option[_T](Argument):
    """
    Named, value-bearing option.

    Reachable as --<field> (and --<field-with-hyphens> for snake_case names) and,
    when `short` is set, as -<short>. Long and short forms are interchangeable.
    Boolean coercers make the option a presence switch.
    """

    __introspectable__ = (
        "coerce",
        "short",
        "default",
        "optional",
        "descr",
    )

    default = _snapshot("default")

    def __init__(self, coerce=str, /, *, short=Unset, default=Unset, optional=False, descr=Unset):
        metadata = {
            "coerce": coerce,
            "short": short,
            "default": default,
            "optional": optional,
            "descr": descr,
        }
        _sanitize_metadata(type(self), metadata)
        _sanitize_valued_metadata(type(self), metadata)
        _sanitize_named_metadata(type(self), metadata)
        super().__init__(metadata)

    @property
    def multiple(self):
        """
        True when repeated occurrences accumulate (array coercers).
        """
        return self.coerce.multiple


class Flag(Option):
    """
    Named presence switch: absent -> default (False), present -> True.
    """

    def __init__(self, *, short=Unset, default=False, descr=Unset):
        if not isinstance(default, bool):
            raise TypeError(f"{type(self).__typename__} 'default' must be a boolean")
        super().__init__(Boolean(), short=short, default=default, descr=descr)


__all__ = (
    "Argument",
    "Cardinal",
    "Rest",
    "Option",
    "Flag",
)

del ArgumentType
