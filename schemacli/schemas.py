"""
schemacli command schemas.

Overview
- CommandSchema: a named, ordered mapping of field name -> argument spec. It is
  validated once at construction and then reused read-only by every parse call;
  the lookup tables the tokenizer needs (long names, short aliases, cardinal
  order, rest field) and the help text are precomputed here.
- CommandGroup: a set of named CommandSchemas with an optional default command,
  resolved by schemacli.parser.safe_dispatch.
- command(): build a CommandSchema from a function whose parameter defaults are
  argument specs; the function becomes the schema callback run by invoke().

Example:
    >>> from schemacli import command, Cardinal, Option, Flag
    >>> @command
    ... def search(query=Cardinal(0, descr="search query"), /,
    ...            limit=Option(int, short="l", default=5),
    ...            *, verbose=Flag(short="v")):
    ...     '''Search with custom parameters'''
    >>> search.parse(["hello", "-l", "10"])
    mappingproxy({'query': 'hello', 'limit': 10, 'verbose': False})
"""
import inspect
from collections.abc import Mapping
from inspect import Parameter

from rich.text import Text

from .arguments import Argument, Cardinal, Rest
from .help import render_group_help, render_help
from .utils import *


def _sanitize_name(cls, name, /):
    if not isinstance(name, str):
        raise TypeError(f"{cls.__name__} 'name' must be a string")
    if not name or name != name.strip() or any(char.isspace() for char in name):
        raise ValueError(f"{cls.__name__} 'name' must be a non-empty word")
    if name.startswith("-"):
        raise ValueError(f"{cls.__name__} 'name' cannot start with '-'")
    return name


def _sanitize_descr(cls, descr, /):
    if not isinstance(descr, str | Text | Unset):
        raise TypeError(f"{cls.__name__} 'descr' must be a string")
    if isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__name__} 'descr' cannot be empty")
    return coalesce(descr)


def _process_fields(cls, args, /):
    """
    Validate the field mapping and build the lookup tables.

    Returns (longs, shorts, cardinals, rest) where longs and shorts map the
    literal option tokens to field names, cardinals lists field names ordered by
    index and rest is the variadic field name (or None).
    """
    if not isinstance(args, Mapping):
        raise TypeError(f"{cls.__name__} 'args' must be a mapping of field names to arguments")

    longs = {}
    shorts = {}
    indices = {}
    rest = None

    for name, spec in args.items():
        if not isinstance(name, str) or not name.isidentifier():
            raise ValueError(f"{cls.__name__} field name {name!r} must be an identifier")
        if name == "help":
            raise ValueError(f"{cls.__name__} field name 'help' is reserved")
        if not isinstance(spec, Argument):
            raise TypeError(f"{cls.__name__} field {name!r} must be an argument spec")

        if isinstance(spec, Rest):
            if rest is not None:
                raise ValueError(f"{cls.__name__} cannot have more than one rest field ({rest!r}, {name!r})")
            rest = name
        elif isinstance(spec, Cardinal):
            if spec.index in indices:
                raise ValueError(f"{cls.__name__} fields {indices[spec.index]!r} and {name!r} share index {spec.index}")
            indices[spec.index] = name
        else:
            longs["--" + name] = name
            longs["--" + name.replace("_", "-")] = name
            if spec.short:
                if "-" + spec.short in shorts:
                    raise ValueError(f"{cls.__name__} fields {shorts['-' + spec.short]!r} and {name!r} share short '-{spec.short}'")
                shorts["-" + spec.short] = name

    if sorted(indices) != list(range(len(indices))):
        raise ValueError(f"{cls.__name__} cardinal indices must form 0..{len(indices) - 1} without gaps, got {sorted(indices)}")

    return longs, shorts, tuple(indices[index] for index in sorted(indices)), rest


class CommandSchema:
    """
    Immutable description of one command: name, description and fields.

    Fields keep their declaration order, which is also the order of the
    resulting data mapping and of the OPTIONS section in help.
    """

    name = mirror("name")
    descr = mirror("descr")
    args = mirror("args")
    callback = mirror("callback")
    cardinals = mirror("cardinals")
    rest = mirror("rest")
    longs = mirror("longs")
    shorts = mirror("shorts")

    def __init__(self, name, args, /, descr=Unset, *, callback=Unset):
        cls = type(self)
        if callback is not Unset and not callable(callback):
            raise TypeError(f"{cls.__name__} 'callback' must be callable")

        self._name = _sanitize_name(cls, name)
        self._descr = _sanitize_descr(cls, descr)
        self._args = dict(args) if isinstance(args, Mapping) else args
        self._longs, self._shorts, self._cardinals, self._rest = _process_fields(cls, self._args)
        self._callback = coalesce(callback)
        self._help = render_help(self)

    def __setattr__(self, name, value, /):
        if not name.startswith("_") or hasattr(self, "_help"):
            raise AttributeError(f"{type(self).__name__} is read-only")
        super().__setattr__(name, value)

    def __repr__(self):
        return f"{type(self).__name__}({self._name!r}, {list(self._args)!r})"

    def __rich_repr__(self):
        yield self._name
        yield "args", dict(self._args)
        if self._descr:
            yield "descr", self._descr

    def help(self):
        """
        Return the help text (computed once, identical on every call).
        """
        return self._help

    def json_schema(self):
        """
        Describe the parsed record as a JSON-Schema object.

        Required fields are those with no default that are neither optional,
        boolean switches nor the rest field.
        """
        properties = {}
        required = []
        for name, spec in self._args.items():
            property = dict(spec.coerce.json_schema())
            if spec.variadic and not spec.coerce.multiple:
                property = {"type": "array", "items": property}
            if spec.descr:
                property["description"] = str(spec.descr)
            if getattr(spec, "default", Unset) is not Unset:
                property["default"] = spec.default
            properties[name] = property
            if spec.required:
                required.append(name)

        schema = {"type": "object", "title": self._name}
        if self._descr:
            schema["description"] = str(self._descr)
        return schema | {"properties": properties, "required": required}

    def safe_parse(self, argv, /):
        from .parser import safe_parse
        return safe_parse(self, argv)

    def parse(self, argv, /):
        from .parser import parse
        return parse(self, argv)

    def run(self, data, /):
        """
        Call the schema callback with parsed data.

        Fields bound to positional-only parameters are passed positionally,
        everything else by keyword.
        """
        if self._callback is None:
            raise TypeError(f"command {self._name!r} has no callback")
        try:
            parameters = inspect.signature(self._callback).parameters.values()
        except (TypeError, ValueError):
            parameters = ()
        positional = [parameter.name for parameter in parameters if parameter.kind is Parameter.POSITIONAL_ONLY]
        return self._callback(
            *(data[name] for name in positional),
            **{name: value for name, value in data.items() if name not in positional},
        )


class CommandGroup:
    """
    Named set of commands, optionally with a default command used when the
    first token is not a command name.
    """

    name = mirror("name")
    descr = mirror("descr")
    commands = mirror("commands")
    default = mirror("default")

    def __init__(self, commands, /, name="command", descr="Command with subcommands", default=Unset):
        cls = type(self)
        if not isinstance(commands, Mapping):
            raise TypeError(f"{cls.__name__} 'commands' must be a mapping of names to command schemas")
        for key, schema in commands.items():
            _sanitize_name(cls, key)
            if not isinstance(schema, CommandSchema):
                raise TypeError(f"{cls.__name__} command {key!r} must be a command schema")
        if default is not Unset and default not in commands:
            raise ValueError(f"{cls.__name__} default command {default!r} not found in commands")

        self._name = _sanitize_name(cls, name)
        self._descr = _sanitize_descr(cls, descr)
        self._commands = dict(commands)
        self._default = coalesce(default)
        self._help = render_group_help(self)

    def __setattr__(self, name, value, /):
        if not name.startswith("_") or hasattr(self, "_help"):
            raise AttributeError(f"{type(self).__name__} is read-only")
        super().__setattr__(name, value)

    def __repr__(self):
        return f"{type(self).__name__}({list(self._commands)!r}, name={self._name!r})"

    def __rich_repr__(self):
        yield "commands", list(self._commands)
        yield "name", self._name
        if self._default:
            yield "default", self._default

    def help(self):
        return self._help

    def safe_parse(self, argv, /):
        from .parser import safe_dispatch
        return safe_dispatch(self, argv)

    def parse(self, argv, /):
        from .parser import dispatch
        return dispatch(self, argv)


def command(source=Unset, /, name=Unset, descr=Unset):
    """
    Build a CommandSchema from a function, or return a decorator doing so.

    Every parameter must have an argument spec as its default; the parameter
    name becomes the field name. The schema name defaults to the function name
    and the description to its docstring.

        @command
        def add(files=Rest(descr="files to stage"), *, force=Flag(short="f")):
            '''Add files'''
    """
    @rename("command")
    def wrapper(source, /):
        if not callable(source):
            raise TypeError("@command() must be applied to a callable")
        try:
            signature = inspect.signature(source)
        except (TypeError, ValueError):
            raise TypeError("@command() must be applied to an inspectable callable") from None

        args = {}
        for key, parameter in signature.parameters.items():
            if parameter.kind in (Parameter.VAR_POSITIONAL, Parameter.VAR_KEYWORD):
                raise TypeError(f"command 'callback' parameter {key!r} cannot be variadic")
            if not isinstance(parameter.default, Argument):
                raise TypeError(f"command 'callback' parameter {key!r} default must be an argument spec")
            args[key] = parameter.default

        return CommandSchema(
            coalesce(name, getattr(source, "__name__", "command")),
            args,
            descr=coalesce(descr, inspect.getdoc(source) or Unset),
            callback=source,
        )

    return wrapper(source) if source is not Unset else wrapper


__all__ = (
    "CommandSchema",
    "CommandGroup",
    "command",
)
