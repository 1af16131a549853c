"""
schemacli coercers: turn raw command-line tokens into typed values.

Overview
- Coercer: base protocol. A coercer is called with one raw token (a string, or
  True for a bare boolean option) and returns the typed value, or raises
  ValueError with a short reason.
- Primitives: String, Number, Integer, Boolean, Choice.
- Combinators: Array(inner) coerces each element; Validated(inner, predicate)
  adds a check (range, pattern, ...) on top of another coercer.
- coercer(x): adapt plain callables (str, int, float, bool or any converter
  raising ValueError/TypeError) into coercers.

Each coercer also knows how to present itself: `display` is the short type label
used by the help renderer (str, num, int, bool, a|b|c, str[]) and json_schema()
returns the matching JSON-Schema fragment.
"""
import builtins
import re

_INTEGRAL = re.compile(r"[+-]?[0-9]+")
_DECIMAL = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")


class Coercer:
    """
    Base coercer. Subclasses implement __call__ and set `display`.

    flag: True only for boolean coercers; the tokenizer treats such options as
    presence switches that never consume the following token.
    """
    display = "any"
    flag = False
    multiple = False

    def __call__(self, raw, /):
        raise NotImplementedError

    def json_schema(self):
        return {}

    def __repr__(self):
        return f"{type(self).__name__.lower()}()"

    def __eq__(self, other):
        return type(self) is type(other) and vars(self) == vars(other)

    def __hash__(self):
        return hash(type(self))


class String(Coercer):
    display = "str"

    def __call__(self, raw, /):
        if not isinstance(raw, str):
            raise ValueError("expected a string")
        return raw

    def json_schema(self):
        return {"type": "string"}


class Number(Coercer):
    """
    Decimal number. Integral literals stay int, others become float.

    Only plain ASCII decimal notation is read: no implicit rounding, no NaN or
    infinity, no digit separators.
    """
    display = "num"

    def __call__(self, raw, /):
        if not isinstance(raw, str):
            raise ValueError("expected a number, got %r" % raw)
        text = raw.strip()
        if _INTEGRAL.fullmatch(text):
            return int(text)
        if not _DECIMAL.fullmatch(text):
            raise ValueError("expected a number, got %r" % raw)
        return float(text)

    def json_schema(self):
        return {"type": "number"}


class Integer(Coercer):
    display = "int"

    def __call__(self, raw, /):
        if not isinstance(raw, str) or not _INTEGRAL.fullmatch(raw.strip()):
            raise ValueError("expected an integer, got %r" % raw)
        return int(raw.strip())

    def json_schema(self):
        return {"type": "integer"}


class Boolean(Coercer):
    """
    Presence switch. A bare option yields True; an inline literal
    (--flag=false) is read as true/false, yes/no, on/off, 1/0.
    """
    display = "bool"
    flag = True

    _truthy = frozenset({"", "true", "1", "yes", "on"})
    _falsy = frozenset({"false", "0", "no", "off"})

    def __call__(self, raw, /):
        if isinstance(raw, bool):
            return raw
        if isinstance(raw, str):
            if raw.lower() in self._truthy:
                return True
            if raw.lower() in self._falsy:
                return False
        raise ValueError("expected a boolean, got %r" % raw)

    def json_schema(self):
        return {"type": "boolean"}


class Choice(Coercer):
    """
    Enumerated value: the raw token must equal (the string form of) one of the
    declared choices; the matching choice itself is returned.
    """

    def __init__(self, *choices):
        if not choices:
            raise TypeError("choice() requires at least one value")
        if len(set(map(str, choices))) != len(choices):
            raise ValueError("choice() values cannot contain duplicates")
        self.choices = choices

    @property
    def display(self):
        return "|".join(map(str, self.choices))

    def __call__(self, raw, /):
        for choice in self.choices:
            if str(choice) == raw:
                return choice
        raise ValueError("invalid choice %r (expected one of %s)" % (
            raw, ", ".join(map(repr, map(str, self.choices)))
        ))

    def json_schema(self):
        if all(isinstance(choice, str) for choice in self.choices):
            return {"type": "string", "enum": list(self.choices)}
        return {"enum": list(self.choices)}

    def __repr__(self):
        return f"choice({', '.join(map(repr, self.choices))})"

    def __hash__(self):
        return hash((type(self), self.choices))


class ElementError(ValueError):
    """
    Raised by Array when one element fails; carries the offending raw token.
    """

    def __init__(self, message, /, *, index, value):
        super().__init__(message)
        self.index = index
        self.value = value


class Array(Coercer):
    """
    Sequence of values; each element is coerced independently by `inner`.

    Coercion stops at the first failing element, reported with its position
    and raw value.
    """
    multiple = True

    def __init__(self, inner=str, /):
        self.inner = coercer(inner)
        if isinstance(self.inner, Array):
            raise TypeError("array() cannot nest another array")

    @property
    def display(self):
        return self.inner.display + "[]"

    def __call__(self, raw, /):
        if isinstance(raw, str):
            raw = [raw]
        values = []
        for index, element in enumerate(raw):
            try:
                values.append(self.inner(element))
            except ValueError as exception:
                raise ElementError("element %d: %s" % (index, exception), index=index, value=element) from None
        return values

    def json_schema(self):
        return {"type": "array", "items": self.inner.json_schema()}

    def __repr__(self):
        return f"array({self.inner!r})"

    def __hash__(self):
        return hash((type(self), self.inner))


class Validated(Coercer):
    """
    Wrap another coercer with an extra predicate on the converted value.

    message may contain {value} which is replaced by the rejected value.
    """

    def __init__(self, inner, predicate, /, message="value {value!r} is not allowed"):
        if not callable(predicate):
            raise TypeError("validated() predicate must be callable")
        if not isinstance(message, str):
            raise TypeError("validated() message must be a string")
        self.inner = coercer(inner)
        self.predicate = predicate
        self.message = message

    @property
    def display(self):
        return self.inner.display

    @property
    def flag(self):
        return self.inner.flag

    @property
    def multiple(self):
        return self.inner.multiple

    def __call__(self, raw, /):
        value = self.inner(raw)
        if not self.predicate(value):
            raise ValueError(self.message.format(value=value))
        return value

    def json_schema(self):
        return self.inner.json_schema()

    def __repr__(self):
        return f"validated({self.inner!r}, {self.predicate!r})"

    def __hash__(self):
        return hash((type(self), self.inner))


class Converter(Coercer):
    """
    Adapter for an arbitrary converter callable (e.g. pathlib.Path, a parser
    function). ValueError/TypeError raised by the callable become coercion
    failures.
    """

    def __init__(self, function, /):
        if not callable(function):
            raise TypeError("converter must be callable")
        self.function = function

    @property
    def display(self):
        name = getattr(self.function, "__name__", "value")
        return re.sub(r"(?<!^)(?=[A-Z])", "-", name).lower()

    def __call__(self, raw, /):
        try:
            return self.function(raw)
        except (ValueError, TypeError) as exception:
            raise ValueError(str(exception) or "cannot convert %r" % raw) from None

    def __repr__(self):
        return f"converter({self.function!r})"

    def __hash__(self):
        return hash((type(self), self.function))


_builtins = {
    builtins.str: String(),
    builtins.int: Integer(),
    builtins.float: Number(),
    builtins.bool: Boolean(),
}


def coercer(object, /):
    """
    Return a Coercer for `object`.

    - Coercer instances are returned unchanged.
    - str, int, float and bool map to String, Integer, Number and Boolean.
    - any other callable is wrapped in a Converter.
    """
    if isinstance(object, Coercer):
        return object
    if isinstance(object, type) and issubclass(object, Coercer):
        return object()
    if object in _builtins:
        return _builtins[object]
    if callable(object):
        return Converter(object)
    raise TypeError("coercer() argument must be a coercer or a callable")


__all__ = (
    "Coercer",
    "String",
    "Number",
    "Integer",
    "Boolean",
    "Choice",
    "Array",
    "Validated",
    "Converter",
    "ElementError",
    "coercer",
)
