from __future__ import annotations

from .builder import CodeBuilder
from .common import AUTOGEN_DISCLAIMER
from .options import RenderOptions
from .schema import Command, FieldSpec, Schema
from .typemap import SORT_TYPE_NAMES, ts_field_type

PRIMITIVE_ALIASES = (
    f"export type SortType = {' | '.join(repr(name) for name in SORT_TYPE_NAMES)}",
    "export type Duration = number",
    "",
    "type Numeral = '0' | '1' | '2' | '3' | '4' | '5' | '6' | '7' | '8' | '9'",
    "type NumberSegment = `${Numeral}${Numeral}`",
    "export type DateString = `${NumberSegment}-${NumberSegment}`",
    "export type Instant = `${NumberSegment}:${NumberSegment}`",
)


def options_interface_name(command: Command) -> str:
    return f"{command.class_name}Options"


def render_interface_member(spec: FieldSpec) -> str:
    marker = "?" if spec.may_be_omitted else ""
    return f"{spec.name}{marker}: {ts_field_type(spec)}"


def render_interface(builder: CodeBuilder, command: Command) -> None:
    if not command.has_fields:
        return
    with builder.block(f"interface {options_interface_name(command)} {{"):
        for _, spec in command.fields:
            builder.line(render_interface_member(spec))


def render_declaration(command: Command) -> str:
    parameters = f"options: {options_interface_name(command)}" if command.has_fields else ""
    return f"export function {command.export_name}({parameters}): Response"


def render_dts(schema: Schema, options: RenderOptions) -> str:
    builder = CodeBuilder()
    builder.line(AUTOGEN_DISCLAIMER)
    builder.blank()
    builder.line(f"import {{ Response }} from '{options.response_module}'")
    builder.blank()
    builder.lines(PRIMITIVE_ALIASES)
    builder.blank()
    for command in schema:
        render_interface(builder, command)
    builder.blank()
    builder.lines(render_declaration(command) for command in schema)
    return builder.render()
