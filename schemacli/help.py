"""
schemacli help renderer.

render_help(schema) and render_group_help(group) derive a line-oriented usage
block from a schema. Both are pure: the same schema always yields the same
text (no terminal width, locale or environment lookups), which is why the
parser can compute help once per schema and hand it out with every outcome.

Layout (sections without entries are skipped):

    search
    > Search with custom parameters

    USAGE:
      search <query> [...files] [OPTIONS]

    ARGUMENTS:
      <query:str> - search query
      ...<files:str[]> - files to search

    OPTIONS:
      --limit, -l <num> - number of results (default: 5)

    FLAGS:
      --help, -h - show help
"""
import json

from .utils import Unset


def _default(value):
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError):
        return repr(value)


def _described(head, descr, *notes):
    notes = " ".join(f"({note})" for note in notes if note)
    tail = " ".join(part for part in (str(descr) if descr else "", notes) if part)
    return f"  {head} - {tail}" if tail else f"  {head}"


def _long(name):
    return "--" + name.replace("_", "-")


def _header(name, descr):
    lines = [name]
    if descr:
        lines.append(f"> {descr}")
    lines.append("")
    return lines


def _flags():
    return ["FLAGS:", "  --help, -h - show help"]


def render_help(schema, /):
    """
    Render the usage block of one CommandSchema.

    Positionals are listed in index order with the rest slot last and marked
    variadic; options keep their declaration order and show the short alias,
    the value type (omitted for boolean switches), the description and the
    default when one is declared.
    """
    cardinals = [(name, schema.args[name]) for name in schema.cardinals]
    rest = (schema.rest, schema.args[schema.rest]) if schema.rest else None
    options = [(name, spec) for name, spec in schema.args.items() if not spec.positional]

    lines = _header(schema.name, schema.descr)

    usage = [schema.name]
    for name, spec in cardinals:
        usage.append(f"<{name}>" if spec.required else f"[<{name}>]")
    if rest:
        usage.append(f"[...{rest[0]}]")
    if options:
        usage.append("[OPTIONS]")
    lines += ["USAGE:", "  " + " ".join(usage), ""]

    if cardinals or rest:
        lines.append("ARGUMENTS:")
        for name, spec in cardinals:
            default = "default: " + _default(spec.default) if spec.default is not Unset else ""
            lines.append(_described(f"<{name}:{spec.coerce.display}>", spec.descr, default))
        if rest:
            name, spec = rest
            display = spec.coerce.display if spec.coerce.multiple else spec.coerce.display + "[]"
            lines.append(_described(f"...<{name}:{display}>", spec.descr or "rest arguments"))
        lines.append("")

    if options:
        lines.append("OPTIONS:")
        for name, spec in options:
            head = _long(name)
            if spec.short:
                head += f", -{spec.short}"
            if not spec.coerce.flag:
                head += f" <{spec.coerce.display}>"
            default = "default: " + _default(spec.default) if spec.default is not Unset else ""
            lines.append(_described(head, spec.descr, default, "required" if spec.required else ""))
        lines.append("")

    return "\n".join(lines + _flags())


def render_group_help(group, /):
    """
    Render the top-level usage block of a CommandGroup: every command with its
    description, the default command marked as such.
    """
    lines = _header(group.name, group.descr)
    lines += ["USAGE:", f"  {group.name} <command> [ARGS...]", ""]

    if group.commands:
        lines.append("SUBCOMMANDS:")
        for name, schema in group.commands.items():
            lines.append(_described(name, schema.descr, "default" if name == group.default else ""))
        lines.append("")

    return "\n".join(lines + _flags())


__all__ = (
    "render_help",
    "render_group_help",
)
