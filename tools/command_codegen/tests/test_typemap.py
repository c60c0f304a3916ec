from __future__ import annotations

import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[3]
SRC_ROOT = REPO_ROOT / "tools" / "command_codegen" / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from command_codegen.schema import parse_field_spec
from command_codegen.typemap import (
    FieldType,
    atoi,
    cpp_field_type,
    cpp_type,
    from_dynamic,
    from_token,
    python_from_token,
    ts_field_type,
    ts_type,
)


class TypeMappingTests(unittest.TestCase):
    def test_declared_types_per_target(self) -> None:
        self.assertEqual(cpp_type(FieldType("string")), "std::string")
        self.assertEqual(cpp_type(FieldType("Date")), "Date")
        self.assertEqual(cpp_type(FieldType("TrainId", opaque=True)), "TrainId")
        self.assertEqual(ts_type(FieldType("int")), "number")
        self.assertEqual(ts_type(FieldType("bool")), "boolean")
        self.assertEqual(ts_type(FieldType("char")), "string")
        self.assertEqual(ts_type(FieldType("Date")), "DateString")
        self.assertEqual(ts_type(FieldType("Instant")), "Instant")
        self.assertEqual(ts_type(FieldType("SortType")), "SortType")

    def test_wrapping_is_layered_on_the_declared_type(self) -> None:
        self.assertEqual(cpp_field_type(parse_field_spec("int prices[]")), "Vector<int>")
        self.assertEqual(cpp_field_type(parse_field_spec("string name?")), "Optional<std::string>")
        self.assertEqual(cpp_field_type(parse_field_spec("string tags?[]")), "Vector<std::string>")
        self.assertEqual(cpp_field_type(parse_field_spec("bool queue = false")), "bool")
        self.assertEqual(ts_field_type(parse_field_spec("Date dates[]")), "DateString[]")
        self.assertEqual(ts_field_type(parse_field_spec("int privilege?")), "number")

    def test_token_conversions(self) -> None:
        expected = {
            "int": "atoi(tok)",
            "bool": "tok[0] == 't'",
            "char": "*tok",
            "SortType": "tok[0] == 't' ? kTime : kCost",
            "Duration": "Duration(atoi(tok))",
            "Date": "Date(tok)",
            "Instant": "Instant(tok)",
            "string": "tok",
        }
        for name, expr in expected.items():
            with self.subTest(type=name):
                self.assertEqual(from_token(FieldType(name), "tok"), expr)
        self.assertEqual(from_token(FieldType("TrainId", opaque=True), "tok"), "tok")

    def test_dynamic_conversions(self) -> None:
        expected = {
            "int": "CPP_INT(v)",
            "bool": "CPP_BOOL(v)",
            "char": "CPP_STR(v)[0]",
            "SortType": "CPP_STR(v)[0] == 't' ? kTime : kCost",
            "Duration": "Duration(CPP_INT(v))",
            "Date": "Date(CPP_STR(v).data())",
            "Instant": "Instant(CPP_STR(v).data())",
            "string": "CPP_STR(v)",
        }
        for name, expr in expected.items():
            with self.subTest(type=name):
                self.assertEqual(from_dynamic(FieldType(name), "v"), expr)
        self.assertEqual(from_dynamic(FieldType("TrainId", opaque=True), "v"), "CPP_STR(v)")

    def test_python_conversions_follow_the_same_rules(self) -> None:
        self.assertEqual(python_from_token(FieldType("int"), "42"), 42)
        self.assertEqual(python_from_token(FieldType("Duration"), "90"), 90)
        self.assertIs(python_from_token(FieldType("bool"), "true"), True)
        self.assertIs(python_from_token(FieldType("bool"), "false"), False)
        self.assertEqual(python_from_token(FieldType("char"), "G"), "G")
        self.assertEqual(python_from_token(FieldType("SortType"), "time"), "time")
        self.assertEqual(python_from_token(FieldType("SortType"), "cost"), "cost")
        self.assertEqual(python_from_token(FieldType("Date"), "06-01"), "06-01")

    def test_atoi_semantics(self) -> None:
        self.assertEqual(atoi("12abc"), 12)
        self.assertEqual(atoi("-7"), -7)
        self.assertEqual(atoi("abc"), 0)
        self.assertEqual(atoi(""), 0)


if __name__ == "__main__":
    unittest.main()
