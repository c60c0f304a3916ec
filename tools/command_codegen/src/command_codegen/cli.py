from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .argv import parse_argv, parse_command_line
from .common import CommandCodegenError
from .generate import DEFAULT_SCHEMA_PATH, GenerateOptions, generate, load_config
from .schema import load_schema


def resolve_generate_options(args: argparse.Namespace) -> GenerateOptions:
    options = load_config(Path(args.config).resolve()) if args.config else GenerateOptions()
    outputs: dict[str, str] = {}
    if args.src_dir:
        src_dir = args.src_dir.rstrip("/")
        for kind in ("header", "run_header", "parser", "node"):
            outputs[kind] = f"{src_dir}/{Path(options.outputs[kind]).name}"
    if args.dts_path:
        outputs["dts"] = args.dts_path
    return options.with_overrides(
        schema_path=args.schema,
        outputs=outputs or None,
        opaque_types=tuple(args.opaque_type or ()) or None,
        namespace=args.namespace,
        guard_prefix=args.guard_prefix,
        reject_missing_required=args.reject_missing_required,
    )


def command_generate(args: argparse.Namespace) -> int:
    repo_root = Path(args.repo_root).resolve()
    options = resolve_generate_options(args)
    result = generate(
        repo_root=repo_root,
        options=options,
        check=bool(args.check),
        dry_run=bool(args.dry_run),
    )

    for item in result["artifacts"].values():
        print(f"[{item['path'].name}] {item['status']}")
        if item["diff"] and (args.check or args.print_diff):
            print(item["diff"])
    print(f"commands: {len(result['commands'])}")

    if args.check and result["has_drift"]:
        return 1
    return 0


def command_parse_args(args: argparse.Namespace) -> int:
    schema = load_schema(Path(args.schema).resolve(), opaque_types=args.opaque_type or ())
    argv = list(args.argv or [])
    if argv and argv[0] == "--":
        argv = argv[1:]
    if args.line is not None:
        if argv:
            raise CommandCodegenError("--line cannot be combined with positional arguments.")
        parsed = parse_command_line(schema, args.line, reject_missing_required=bool(args.reject_missing_required))
    else:
        parsed = parse_argv(schema, argv, reject_missing_required=bool(args.reject_missing_required))
    print(json.dumps(parsed.as_dict(), indent=2))
    return 0


def command_list_commands(args: argparse.Namespace) -> int:
    schema = load_schema(Path(args.schema).resolve(), opaque_types=args.opaque_type or ())
    for command in schema:
        print(f"{command.name} ({command.class_name}, {command.export_name})")
        for flag, spec in command.fields:
            print(f"  {flag}: {spec.to_spec()}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="command-codegen",
        description="Generate typed command records, parsers, Node bridges and TypeScript declarations from a command schema.",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Render all artifacts from the command schema.")
    gen.add_argument(
        "--repo-root",
        default=".",
        help="Repository root used to resolve relative paths (default: current directory).",
    )
    gen.add_argument("--config", help="Optional generator config (JSON or YAML).")
    gen.add_argument("--schema", help=f"Command schema path relative to repo root (default: {DEFAULT_SCHEMA_PATH}).")
    gen.add_argument("--namespace", help="C++ namespace for generated code (default: ticket::command).")
    gen.add_argument("--guard-prefix", help="Include guard prefix (default: TICKET).")
    gen.add_argument("--src-dir", help="Directory for the C++ artifacts (default: src).")
    gen.add_argument("--dts-path", help="TypeScript declaration output path (default: index.d.ts).")
    gen.add_argument("--opaque-type", action="append", help="Declare an opaque pass-through type (repeatable).")
    gen.add_argument(
        "--reject-missing-required",
        action="store_true",
        default=None,
        help="Make the generated parser reject commands that omit a required flag.",
    )
    gen.add_argument("--check", action="store_true", help="Fail with a diff if any artifact is out of date.")
    gen.add_argument("--dry-run", action="store_true", help="Render artifacts without writing them.")
    gen.add_argument("--print-diff", action="store_true", help="Print diffs of changed artifacts.")
    gen.set_defaults(func=command_generate)

    parse_args = sub.add_parser("parse-args", help="Parse an argument vector against the schema and print it as JSON.")
    parse_args.add_argument("--schema", required=True, help="Path to the command schema.")
    parse_args.add_argument("--opaque-type", action="append", help="Declare an opaque pass-through type (repeatable).")
    parse_args.add_argument("--line", help="Whole command line, split on single spaces.")
    parse_args.add_argument("--reject-missing-required", action="store_true", help="Reject omitted required flags.")
    parse_args.add_argument("argv", nargs=argparse.REMAINDER, help="Argument vector after '--'.")
    parse_args.set_defaults(func=command_parse_args)

    list_commands = sub.add_parser("list-commands", help="List commands and their flags.")
    list_commands.add_argument("--schema", required=True, help="Path to the command schema.")
    list_commands.add_argument("--opaque-type", action="append", help="Declare an opaque pass-through type (repeatable).")
    list_commands.set_defaults(func=command_list_commands)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        return int(args.func(args))
    except CommandCodegenError as exc:
        print(f"command_codegen error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
