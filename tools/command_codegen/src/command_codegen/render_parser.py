from __future__ import annotations

from .builder import CodeBuilder
from .common import AUTOGEN_DISCLAIMER
from .options import RenderOptions
from .schema import Command, FieldSpec, Schema
from .typemap import from_token

TOKEN_EXPR = "argv[++i].data()"
ARRAY_DELIMITER = "|"


def seen_flag_name(spec: FieldSpec) -> str:
    return "seen" + spec.name[:1].upper() + spec.name[1:]


def render_array_assignment(builder: CodeBuilder, spec: FieldSpec) -> None:
    builder.line(f"std::string val = {TOKEN_EXPR};")
    if spec.type.name == "string" and not spec.type.opaque:
        builder.line(f"res.{spec.name} = copyStrings(split(val, '{ARRAY_DELIMITER}'));")
        return
    builder.line(f"auto values = split(val, '{ARRAY_DELIMITER}');")
    builder.line(f"res.{spec.name}.clear();")
    builder.line(f"res.{spec.name}.reserve(values.size());")
    with builder.block("for (auto &str : values) {"):
        builder.line(f"res.{spec.name}.push_back({from_token(spec.type, 'str.data()')});")


def render_flag_branches(builder: CodeBuilder, command: Command, options: RenderOptions) -> None:
    for index, (flag, spec) in enumerate(command.fields):
        opener = "if" if index == 0 else "} else if"
        builder.line(f'{opener} (arg == "{flag}") {{')
        with builder.indented():
            if spec.array:
                render_array_assignment(builder, spec)
            else:
                builder.line(f"res.{spec.name} = {from_token(spec.type, TOKEN_EXPR)};")
            if options.reject_missing_required and spec.required:
                builder.line(f"{seen_flag_name(spec)} = true;")
    builder.line("} else {")
    with builder.indented():
        builder.line("return ParseException();")
    builder.line("}")


def render_command_body(builder: CodeBuilder, command: Command, options: RenderOptions) -> None:
    if not command.has_fields:
        builder.line(f"return Command({command.class_name}());")
        return

    required = [spec for _, spec in command.fields if spec.required] if options.reject_missing_required else []
    builder.line(f"{command.class_name} res;")
    for spec in required:
        builder.line(f"bool {seen_flag_name(spec)} = false;")
    with builder.block("for (size_t i = 1; i < argv.size(); ++i) {"):
        builder.line("auto &arg = argv[i];")
        with builder.block("if (i + 1 == argv.size()) {"):
            builder.line("return ParseException();")
        render_flag_branches(builder, command, options)
    if required:
        condition = " || ".join(f"!{seen_flag_name(spec)}" for spec in required)
        with builder.block(f"if ({condition}) {{"):
            builder.line("return ParseException();")
    builder.line("return Command(res);")


def render_dispatcher(builder: CodeBuilder, schema: Schema, options: RenderOptions) -> None:
    builder.line("auto &argv0 = argv[0];")
    for index, command in enumerate(schema):
        opener = "if" if index == 0 else "} else if"
        builder.line(f'{opener} (argv0 == "{command.name}") {{')
        with builder.indented():
            render_command_body(builder, command, options)
    builder.line("} else {")
    with builder.indented():
        builder.line("return ParseException();")
    builder.line("}")


def render_parser(schema: Schema, options: RenderOptions) -> str:
    builder = CodeBuilder()
    builder.line(AUTOGEN_DISCLAIMER)
    builder.blank()
    builder.line(f'#include "{options.header_include}"')
    builder.blank()
    builder.line('#include "utility.h"')
    builder.blank()
    builder.line(f"namespace {options.namespace} {{")
    builder.blank()
    builder.line("auto parse (std::string &str)")
    with builder.block("  -> Result<Command, ParseException> {"):
        builder.line("auto argv = split(str, ' ');")
        builder.line("return parse(argv);")
    builder.blank()
    builder.line("auto parse (const Vector<std::string_view> &argv)")
    with builder.block("  -> Result<Command, ParseException> {"):
        with builder.block("if (argv.empty()) {"):
            builder.line("return ParseException();")
        render_dispatcher(builder, schema, options)
    builder.blank()
    builder.line(f"}} // namespace {options.namespace}")
    return builder.render()
