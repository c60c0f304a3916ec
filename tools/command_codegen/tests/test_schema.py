from __future__ import annotations

import sys
import tempfile
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[3]
SRC_ROOT = REPO_ROOT / "tools" / "command_codegen" / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from command_codegen.common import SchemaError, SpecSyntaxError
from command_codegen.schema import build_schema, class_name, load_schema, lower_camel

EXAMPLE_SCHEMA = REPO_ROOT / "tools" / "command_codegen" / "examples" / "commands.yml"


class SchemaModelTests(unittest.TestCase):
    def setUp(self) -> None:
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root = Path(self.temp_dir.name)

    def tearDown(self) -> None:
        self.temp_dir.cleanup()

    def _write(self, text: str) -> Path:
        path = self.root / "commands.yml"
        path.write_text(text, encoding="utf-8")
        return path

    def test_naming_helpers(self) -> None:
        self.assertEqual(class_name("add_user"), "AddUser")
        self.assertEqual(class_name("login"), "Login")
        self.assertEqual(lower_camel("query_transfer"), "queryTransfer")
        self.assertEqual(lower_camel("exit"), "exit")

    def test_preserves_command_and_flag_order(self) -> None:
        path = self._write(
            "zeta:\n"
            "  -b: string second\n"
            "  -a: string first\n"
            "alpha:\n"
            "  -x: int value\n"
            "middle: {}\n"
        )
        schema = load_schema(path)
        self.assertEqual(schema.names(), ["zeta", "alpha", "middle"])
        zeta = schema.get("zeta")
        assert zeta is not None
        self.assertEqual(zeta.flags, ("-b", "-a"))
        self.assertEqual([spec.name for _, spec in zeta.fields], ["second", "first"])
        middle = schema.get("middle")
        assert middle is not None
        self.assertFalse(middle.has_fields)

    def test_flag_and_field_names_are_independent(self) -> None:
        schema = build_schema({"logout": {"-u": "string username"}})
        command = schema.get("logout")
        assert command is not None
        self.assertEqual(command.flags, ("-u",))
        spec = command.field_for_flag("-u")
        assert spec is not None
        self.assertEqual(spec.name, "username")
        self.assertIsNone(command.field_for_flag("username"))

    def test_null_command_body_means_no_fields(self) -> None:
        schema = load_schema(self._write("clean:\nexit:\n"))
        self.assertEqual(schema.names(), ["clean", "exit"])
        self.assertTrue(all(not command.has_fields for command in schema))

    def test_malformed_field_spec_aborts_with_location(self) -> None:
        with self.assertRaises(SpecSyntaxError) as ctx:
            build_schema({"login": {"-u": "string username", "-p": "string pass word"}})
        self.assertEqual(ctx.exception.command, "login")
        self.assertEqual(ctx.exception.flag, "-p")
        self.assertIn("login.-p", str(ctx.exception))

    def test_rejects_duplicate_yaml_keys(self) -> None:
        path = self._write("login:\n  -u: string username\nlogin:\n  -u: string other\n")
        with self.assertRaises(SchemaError) as ctx:
            load_schema(path)
        self.assertIn("duplicate key 'login'", str(ctx.exception))

    def test_rejects_commands_with_the_same_class_name(self) -> None:
        with self.assertRaises(SchemaError):
            build_schema({"add_user": {}, "addUser": {}})

    def test_rejects_flags_sharing_a_field(self) -> None:
        with self.assertRaises(SchemaError):
            build_schema({"login": {"-u": "string username", "--user": "string username"}})

    def test_rejects_structurally_invalid_documents(self) -> None:
        for payload in [
            ["login"],
            {"bad-name": {}},
            {"login": {"-u": 5}},
            {"login": "string username"},
            {},
            {"$opaque": ["TrainId"]},
            {1: {}},
            {"login": {'-"u': "string username"}},
            {"login": {"-u\\": "string username"}},
            {"login": {"-u x": "string username"}},
        ]:
            with self.subTest(payload=payload):
                with self.assertRaises(SchemaError):
                    build_schema(payload)

    def test_opaque_types_from_document_and_arguments(self) -> None:
        schema = build_schema({"$opaque": ["TrainId"], "release": {"-i": "TrainId id", "-s": "Seat seat"}}, opaque_types=["Seat"])
        self.assertEqual(schema.opaque_types, frozenset({"TrainId", "Seat"}))
        self.assertEqual(schema.names(), ["release"])
        command = schema.get("release")
        assert command is not None
        self.assertTrue(all(spec.type.opaque for _, spec in command.fields))

    def test_builtin_types_cannot_be_opaque(self) -> None:
        with self.assertRaises(SchemaError):
            build_schema({"login": {"-u": "string username"}}, opaque_types=["string"])

    def test_missing_file_is_reported(self) -> None:
        with self.assertRaises(SchemaError):
            load_schema(self.root / "missing.yml")

    def test_loads_ticket_example(self) -> None:
        schema = load_schema(EXAMPLE_SCHEMA)
        self.assertEqual(len(schema), 16)
        self.assertEqual(schema.names()[:2], ["add_user", "login"])
        self.assertEqual(schema.names()[-2:], ["clean", "exit"])
        add_train = schema.get("add_train")
        assert add_train is not None
        self.assertEqual(add_train.export_name, "addTrain")
        self.assertEqual(len(add_train.fields), 10)


if __name__ == "__main__":
    unittest.main()
