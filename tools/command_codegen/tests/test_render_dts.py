from __future__ import annotations

import sys
import unittest
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[3]
SRC_ROOT = REPO_ROOT / "tools" / "command_codegen" / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

from command_codegen.options import RenderOptions
from command_codegen.render_dts import render_dts
from command_codegen.schema import build_schema

PAYLOAD = {
    "login": {"-u": "string username", "-p": "string password"},
    "add_train": {
        "-d": "Date dates[]",
        "-x": "Instant departure",
        "-y": "char type",
        "-q": "bool queue = false",
        "-g": "int privilege?",
    },
    "clean": None,
}


class DeclarationRenderTests(unittest.TestCase):
    def setUp(self) -> None:
        self.dts = render_dts(build_schema(PAYLOAD), RenderOptions())

    def test_preamble(self) -> None:
        self.assertTrue(self.dts.startswith("// This file is autogenerated. Do not modify.\n\nimport { Response } from './response'\n"))
        self.assertIn("export type SortType = 'time' | 'cost'", self.dts)
        self.assertIn("export type Duration = number", self.dts)
        self.assertIn("export type DateString = `${NumberSegment}-${NumberSegment}`", self.dts)
        self.assertIn("export type Instant = `${NumberSegment}:${NumberSegment}`", self.dts)

    def test_options_interfaces(self) -> None:
        self.assertIn("interface LoginOptions {\n  username: string\n  password: string\n}", self.dts)
        self.assertIn(
            "interface AddTrainOptions {\n"
            "  dates: DateString[]\n"
            "  departure: Instant\n"
            "  type: string\n"
            "  queue?: boolean\n"
            "  privilege?: number\n"
            "}",
            self.dts,
        )
        self.assertNotIn("CleanOptions", self.dts)

    def test_function_signatures(self) -> None:
        self.assertIn(
            "export function login(options: LoginOptions): Response\n"
            "export function addTrain(options: AddTrainOptions): Response\n"
            "export function clean(): Response\n",
            self.dts,
        )
        self.assertTrue(self.dts.endswith("export function clean(): Response\n"))

    def test_response_module_is_configurable(self) -> None:
        dts = render_dts(build_schema(PAYLOAD), RenderOptions(response_module="./types/response"))
        self.assertIn("import { Response } from './types/response'", dts)


if __name__ == "__main__":
    unittest.main()
