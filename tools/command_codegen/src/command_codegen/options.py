from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RenderOptions:
    namespace: str = "ticket::command"
    guard_prefix: str = "TICKET"
    header_include: str = "parser.h"
    run_header_include: str = "run.h"
    response_module: str = "./response"
    reject_missing_required: bool = False

    @property
    def header_guard(self) -> str:
        return f"{self.guard_prefix}_PARSER_H_"

    @property
    def run_header_guard(self) -> str:
        return f"{self.guard_prefix}_RUN_H_"
