from __future__ import annotations

import difflib
import json
from pathlib import Path
from typing import Any

import jsonschema
import yaml

AUTOGEN_DISCLAIMER = "// This file is autogenerated. Do not modify."


class CommandCodegenError(Exception):
    pass


class SchemaError(CommandCodegenError):
    pass


class SpecSyntaxError(CommandCodegenError):
    def __init__(self, text: str, reason: str, command: str | None = None, flag: str | None = None) -> None:
        self.text = text
        self.reason = reason
        self.command = command
        self.flag = flag
        location = ""
        if command is not None:
            location = f"{command}.{flag}: " if flag is not None else f"{command}: "
        super().__init__(f"{location}{reason}: {text!r}")


class _UniqueKeyLoader(yaml.SafeLoader):
    pass


def _construct_unique_mapping(loader: _UniqueKeyLoader, node: yaml.MappingNode, deep: bool = False) -> dict[Any, Any]:
    seen: set[Any] = set()
    for key_node, _ in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in seen:
            raise SchemaError(f"duplicate key {key!r} at line {key_node.start_mark.line + 1}")
        seen.add(key)
    return loader.construct_mapping(node, deep=deep)


_UniqueKeyLoader.add_constructor(yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG, _construct_unique_mapping)


def load_document(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise SchemaError(f"Unable to read file '{path}': {exc}") from exc
    try:
        return yaml.load(text, Loader=_UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise SchemaError(f"Invalid YAML in '{path}': {exc}") from exc


def get_schema_path(kind: str) -> Path:
    base = Path(__file__).resolve().parent / "schemas"
    mapping = {
        "commands": base / "commands.schema.json",
        "config": base / "config.schema.json",
    }
    if kind not in mapping:
        raise CommandCodegenError(f"Unknown schema kind: {kind}")
    return mapping[kind]


def validate_document(kind: str, payload: Any, source: str) -> None:
    schema_payload = json.loads(get_schema_path(kind).read_text(encoding="utf-8"))
    try:
        jsonschema.validate(payload, schema_payload)
    except jsonschema.ValidationError as exc:
        location = "/".join(str(part) for part in exc.absolute_path) or "<root>"
        raise SchemaError(f"{source} failed {kind} schema validation at {location}: {exc.message}") from exc


def read_text_if_exists(path: Path) -> str:
    if not path.exists():
        return ""
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CommandCodegenError(f"Unable to read '{path}': {exc}") from exc


def compute_unified_diff(old: str, new: str, fromfile: str, tofile: str) -> str:
    diff = difflib.unified_diff(
        old.splitlines(),
        new.splitlines(),
        fromfile=fromfile,
        tofile=tofile,
        lineterm="",
    )
    return "\n".join(diff)


def write_artifact_if_changed(*, path: Path, content: str, dry_run: bool, check: bool) -> tuple[str, str]:
    old_content = read_text_if_exists(path)
    if old_content == content:
        return "unchanged", ""
    diff = compute_unified_diff(old_content, content, f"a/{path}", f"b/{path}")
    if check:
        return "drift", diff
    if dry_run:
        return "would_write", diff
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise CommandCodegenError(f"Unable to write '{path}': {exc}") from exc
    return "updated", diff
