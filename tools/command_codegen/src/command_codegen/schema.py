from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, Iterator

from .common import SchemaError, SpecSyntaxError, load_document, validate_document
from .typemap import KNOWN_TYPES, FieldType

OPAQUE_KEY = "$opaque"

FIELD_SPEC_RE = re.compile(
    r"^(?P<type>[^ ]+) (?P<name>[a-zA-Z0-9]+)(?P<optional>\?)?(?P<array>\[\])?(?: = (?P<default>.+))?$"
)


def class_name(snake: str) -> str:
    return "".join(part[:1].upper() + part[1:] for part in snake.split("_"))


def lower_camel(snake: str) -> str:
    name = class_name(snake)
    return name[:1].lower() + name[1:]


@dataclass(frozen=True)
class FieldSpec:
    type: FieldType
    name: str
    optional: bool = False
    array: bool = False
    default: str | None = None

    @property
    def has_default(self) -> bool:
        return self.default is not None

    @property
    def may_be_omitted(self) -> bool:
        return self.optional or self.has_default

    @property
    def required(self) -> bool:
        return not self.may_be_omitted

    def to_spec(self) -> str:
        text = f"{self.type.name} {self.name}"
        if self.optional:
            text += "?"
        if self.array:
            text += "[]"
        if self.default is not None:
            text += f" = {self.default}"
        return text


def parse_field_spec(text: str, opaque_types: Iterable[str] = ()) -> FieldSpec:
    """Parse one ``<type> <name><?><[]>< = default>`` field specification.

    Raises ``SpecSyntaxError`` when the text does not match the grammar or names a
    type that is neither in the built-in vocabulary nor declared opaque.
    """
    if not isinstance(text, str):
        raise SpecSyntaxError(repr(text), "field specification must be a string")
    match = FIELD_SPEC_RE.match(text)
    if not match:
        raise SpecSyntaxError(text, "field specification does not match '<type> <name>[?][[]][ = default]'")
    field_type = FieldType.resolve(match.group("type"), frozenset(opaque_types))
    if field_type is None:
        known = ", ".join(sorted(KNOWN_TYPES))
        raise SpecSyntaxError(
            text,
            f"unknown type '{match.group('type')}' (known: {known}; declare other types as opaque)",
        )
    return FieldSpec(
        type=field_type,
        name=match.group("name"),
        optional=match.group("optional") is not None,
        array=match.group("array") is not None,
        default=match.group("default"),
    )


@dataclass(frozen=True)
class Command:
    name: str
    fields: tuple[tuple[str, FieldSpec], ...]

    @property
    def class_name(self) -> str:
        return class_name(self.name)

    @property
    def export_name(self) -> str:
        return lower_camel(self.name)

    @property
    def has_fields(self) -> bool:
        return bool(self.fields)

    @property
    def flags(self) -> tuple[str, ...]:
        return tuple(flag for flag, _ in self.fields)

    def field_for_flag(self, flag: str) -> FieldSpec | None:
        for candidate, spec in self.fields:
            if candidate == flag:
                return spec
        return None


@dataclass(frozen=True)
class Schema:
    commands: tuple[Command, ...]
    opaque_types: frozenset[str] = frozenset()

    def __iter__(self) -> Iterator[Command]:
        return iter(self.commands)

    def __len__(self) -> int:
        return len(self.commands)

    def names(self) -> list[str]:
        return [command.name for command in self.commands]

    def get(self, name: str) -> Command | None:
        for command in self.commands:
            if command.name == name:
                return command
        return None


def _check_string_keys(payload: dict[Any, Any], label: str) -> None:
    for key in payload:
        if not isinstance(key, str):
            raise SchemaError(f"{label} key {key!r} must be a string (quote it in YAML)")


def build_schema(payload: Any, opaque_types: Iterable[str] = (), source: str = "<schema>") -> Schema:
    if not isinstance(payload, dict):
        raise SchemaError(f"{source}: schema root must be a mapping of command names")
    _check_string_keys(payload, f"{source}: command")
    for name, fields in payload.items():
        if isinstance(fields, dict):
            _check_string_keys(fields, f"{source}: command '{name}' flag")
    validate_document("commands", payload, source)

    declared_opaque = frozenset(opaque_types) | frozenset(payload.get(OPAQUE_KEY) or ())
    clashing = sorted(declared_opaque & KNOWN_TYPES)
    if clashing:
        raise SchemaError(f"{source}: built-in types cannot be declared opaque: {', '.join(clashing)}")

    commands: list[Command] = []
    class_names: dict[str, str] = {}
    for name, raw_fields in payload.items():
        if name == OPAQUE_KEY:
            continue
        cls = class_name(name)
        if cls in class_names:
            raise SchemaError(f"{source}: commands '{class_names[cls]}' and '{name}' both map to class '{cls}'")
        class_names[cls] = name

        fields: list[tuple[str, FieldSpec]] = []
        field_owners: dict[str, str] = {}
        for flag, text in (raw_fields or {}).items():
            try:
                spec = parse_field_spec(text, declared_opaque)
            except SpecSyntaxError as exc:
                raise SpecSyntaxError(exc.text, exc.reason, command=name, flag=flag) from exc
            if spec.name in field_owners:
                raise SchemaError(
                    f"{source}: command '{name}' flags '{field_owners[spec.name]}' and '{flag}' "
                    f"both declare field '{spec.name}'"
                )
            field_owners[spec.name] = flag
            fields.append((flag, spec))
        commands.append(Command(name=name, fields=tuple(fields)))

    if not commands:
        raise SchemaError(f"{source}: schema declares no commands")
    return Schema(commands=tuple(commands), opaque_types=declared_opaque)


def load_schema(path: Path, opaque_types: Iterable[str] = ()) -> Schema:
    payload = load_document(path)
    return build_schema(payload, opaque_types=opaque_types, source=str(path))
