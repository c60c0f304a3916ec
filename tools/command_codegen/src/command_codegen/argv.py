from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from .common import CommandCodegenError
from .render_parser import ARRAY_DELIMITER
from .schema import Command, FieldSpec, Schema
from .typemap import python_from_token


class CommandParseError(CommandCodegenError):
    pass


@dataclass
class ParsedCommand:
    command: Command
    values: dict[str, Any] = field(default_factory=dict)

    def missing_required(self) -> list[str]:
        return [spec.name for _, spec in self.command.fields if spec.required and spec.name not in self.values]

    def as_dict(self) -> dict[str, Any]:
        return {"command": self.command.name, "record": self.command.class_name, "values": dict(self.values)}


def split_tokens(text: str, delimiter: str) -> list[str]:
    # Matches the runtime split(): runs of delimiters collapse and no empty piece is kept.
    return [piece for piece in text.split(delimiter) if piece]


def convert_value(spec: FieldSpec, token: str) -> Any:
    if spec.array:
        return [python_from_token(spec.type, piece) for piece in split_tokens(token, ARRAY_DELIMITER)]
    return python_from_token(spec.type, token)


def parse_argv(schema: Schema, argv: Sequence[str], reject_missing_required: bool = False) -> ParsedCommand:
    """Parse ``argv`` the way the generated ``parse`` overload does.

    Fields that were never supplied are absent from ``values``; the generated
    record keeps their declared default there.
    """
    if not argv:
        raise CommandParseError("empty argument vector")
    command = schema.get(argv[0])
    if command is None:
        raise CommandParseError(f"unknown command '{argv[0]}'")

    parsed = ParsedCommand(command=command)
    if not command.has_fields:
        return parsed

    index = 1
    while index < len(argv):
        flag = argv[index]
        if index + 1 == len(argv):
            raise CommandParseError(f"{command.name}: flag '{flag}' has no value")
        spec = command.field_for_flag(flag)
        if spec is None:
            raise CommandParseError(f"{command.name}: unknown flag '{flag}'")
        parsed.values[spec.name] = convert_value(spec, argv[index + 1])
        index += 2

    if reject_missing_required:
        missing = parsed.missing_required()
        if missing:
            raise CommandParseError(f"{command.name}: missing required fields: {', '.join(missing)}")
    return parsed


def parse_command_line(schema: Schema, line: str, reject_missing_required: bool = False) -> ParsedCommand:
    return parse_argv(schema, split_tokens(line, " "), reject_missing_required=reject_missing_required)
