from __future__ import annotations

from .builder import CodeBuilder
from .common import AUTOGEN_DISCLAIMER
from .options import RenderOptions
from .schema import Command, FieldSpec, Schema
from .typemap import SORT_TYPE_MEMBERS, cpp_field_type

HEADER_INCLUDES = ("datetime.h", "exception.h", "optional.h", "variant.h", "vector.h", "result.h")


def render_member(spec: FieldSpec) -> str:
    initializer = f" = {spec.default}" if spec.default is not None else ""
    return f"{cpp_field_type(spec)} {spec.name}{initializer};"


def render_record(builder: CodeBuilder, command: Command) -> None:
    with builder.block(f"struct {command.class_name} {{", "};"):
        for _, spec in command.fields:
            builder.line(render_member(spec))


def render_union(builder: CodeBuilder, schema: Schema) -> None:
    names = [command.class_name for command in schema]
    builder.line("using Command = Variant<")
    with builder.indented():
        for index, name in enumerate(names):
            builder.line(name + ("," if index + 1 < len(names) else ""))
    builder.line(">;")


def render_header(schema: Schema, options: RenderOptions) -> str:
    builder = CodeBuilder()
    builder.line(AUTOGEN_DISCLAIMER)
    builder.blank()
    builder.line(f"#ifndef {options.header_guard}")
    builder.line(f"#define {options.header_guard}")
    builder.blank()
    builder.line("#include <string>")
    builder.line("#include <string_view>")
    builder.blank()
    for include in HEADER_INCLUDES:
        builder.line(f'#include "{include}"')
    builder.blank()
    builder.line("/// Classes and parsers for commands.")
    builder.line(f"namespace {options.namespace} {{")
    builder.blank()
    builder.line(f"enum SortType {{ {', '.join(SORT_TYPE_MEMBERS)} }};")
    builder.blank()
    for command in schema:
        render_record(builder, command)
        builder.blank()
    render_union(builder, schema)
    builder.blank()
    builder.lines(
        [
            "/**",
            " * @brief parses the command stored in str.",
            " *",
            " * this function is autogenerated.",
            " */",
            "auto parse (std::string &str)",
            "  -> Result<Command, ParseException>;",
            "auto parse (const Vector<std::string_view> &argv)",
            "  -> Result<Command, ParseException>;",
        ]
    )
    builder.blank()
    builder.line(f"}} // namespace {options.namespace}")
    builder.blank()
    builder.line(f"#endif // {options.header_guard}")
    return builder.render()
