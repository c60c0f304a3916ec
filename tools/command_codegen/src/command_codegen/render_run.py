from __future__ import annotations

from .builder import CodeBuilder
from .common import AUTOGEN_DISCLAIMER
from .options import RenderOptions
from .schema import Command, Schema


def render_run_overload(command: Command) -> str:
    return f"auto run (const {command.class_name} &cmd) -> Result<Response, Exception>;"


def render_run_header(schema: Schema, options: RenderOptions) -> str:
    builder = CodeBuilder()
    builder.line(AUTOGEN_DISCLAIMER)
    builder.blank()
    builder.line(f"#ifndef {options.run_header_guard}")
    builder.line(f"#define {options.run_header_guard}")
    builder.blank()
    builder.line(f'#include "{options.header_include}"')
    builder.line('#include "result.h"')
    builder.line('#include "response.h"')
    builder.blank()
    builder.line(f"namespace {options.namespace} {{")
    builder.blank()
    builder.lines(
        [
            "/**",
            " * @brief handlers for the commands.",
            " *",
            " * Callers dispatch a parsed command to the matching",
            " * overload. The implementations live in the source",
            " * files of each feature, not in generated code.",
            " */",
        ]
    )
    builder.lines(render_run_overload(command) for command in schema)
    builder.blank()
    builder.line(f"}} // namespace {options.namespace}")
    builder.blank()
    builder.line(f"#endif // {options.run_header_guard}")
    return builder.render()
