from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Callable

from .common import SchemaError, load_document, validate_document, write_artifact_if_changed
from .options import RenderOptions
from .render_dts import render_dts
from .render_header import render_header
from .render_node import render_node
from .render_parser import render_parser
from .render_run import render_run_header
from .schema import Schema, load_schema

DEFAULT_SCHEMA_PATH = "commands.yml"
DEFAULT_OUTPUTS = {
    "header": "src/parser.h",
    "run_header": "src/run.h",
    "parser": "src/parser.cpp",
    "node": "src/node.cpp",
    "dts": "index.d.ts",
}

RENDERERS: dict[str, Callable[[Schema, RenderOptions], str]] = {
    "header": render_header,
    "run_header": render_run_header,
    "parser": render_parser,
    "node": render_node,
    "dts": render_dts,
}


@dataclass(frozen=True)
class GenerateOptions:
    schema_path: str = DEFAULT_SCHEMA_PATH
    outputs: dict[str, str] = field(default_factory=lambda: dict(DEFAULT_OUTPUTS))
    opaque_types: tuple[str, ...] = ()
    render: RenderOptions = field(default_factory=RenderOptions)

    def with_overrides(self, **overrides: Any) -> GenerateOptions:
        """Return a copy with every non-None override applied.

        ``namespace``, ``guard_prefix`` and ``reject_missing_required`` go to the
        render options; ``outputs`` is merged key by key.
        """
        render_keys = {"namespace", "guard_prefix", "reject_missing_required"}
        render_changes = {k: v for k, v in overrides.items() if k in render_keys and v is not None}
        changes = {k: v for k, v in overrides.items() if k not in render_keys and v is not None}
        if "outputs" in changes:
            changes["outputs"] = {**self.outputs, **changes["outputs"]}
        if "opaque_types" in changes:
            changes["opaque_types"] = tuple(dict.fromkeys([*self.opaque_types, *changes["opaque_types"]]))
        return replace(self, render=replace(self.render, **render_changes), **changes)


def load_config(path: Path) -> GenerateOptions:
    payload = load_document(path)
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise SchemaError(f"{path}: config root must be a mapping")
    validate_document("config", payload, str(path))
    return GenerateOptions().with_overrides(
        schema_path=payload.get("schema"),
        outputs=payload.get("outputs"),
        opaque_types=tuple(payload.get("opaque_types") or ()) or None,
        namespace=payload.get("namespace"),
        guard_prefix=payload.get("guard_prefix"),
        reject_missing_required=payload.get("reject_missing_required"),
    )


def render_options_for(options: GenerateOptions) -> RenderOptions:
    header_include = Path(options.outputs["header"]).name
    run_header_include = Path(options.outputs["run_header"]).name
    return replace(options.render, header_include=header_include, run_header_include=run_header_include)


def render_artifacts(schema: Schema, options: GenerateOptions) -> dict[str, str]:
    render = render_options_for(options)
    return {kind: renderer(schema, render) for kind, renderer in RENDERERS.items()}


def generate(
    *,
    repo_root: Path,
    options: GenerateOptions,
    check: bool = False,
    dry_run: bool = False,
) -> dict[str, Any]:
    schema_path = (repo_root / options.schema_path).resolve()
    schema = load_schema(schema_path, opaque_types=options.opaque_types)
    artifacts = render_artifacts(schema, options)

    results: dict[str, dict[str, Any]] = {}
    for kind, content in artifacts.items():
        path = (repo_root / options.outputs[kind]).resolve()
        status, diff = write_artifact_if_changed(path=path, content=content, dry_run=dry_run, check=check)
        results[kind] = {"path": path, "status": status, "diff": diff}

    return {
        "schema": schema_path,
        "commands": schema.names(),
        "artifacts": results,
        "has_drift": any(item["status"] == "drift" for item in results.values()),
    }
