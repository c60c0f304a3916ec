from .argv import CommandParseError, ParsedCommand, parse_argv, parse_command_line
from .common import CommandCodegenError, SchemaError, SpecSyntaxError, write_artifact_if_changed
from .generate import GenerateOptions, generate, load_config, render_artifacts
from .options import RenderOptions
from .schema import Command, FieldSpec, Schema, build_schema, load_schema, parse_field_spec
from .typemap import FieldType

__all__ = [
    "Command",
    "CommandCodegenError",
    "CommandParseError",
    "FieldSpec",
    "FieldType",
    "GenerateOptions",
    "ParsedCommand",
    "RenderOptions",
    "Schema",
    "SchemaError",
    "SpecSyntaxError",
    "build_schema",
    "generate",
    "load_config",
    "load_schema",
    "parse_argv",
    "parse_command_line",
    "parse_field_spec",
    "render_artifacts",
    "write_artifact_if_changed",
]
