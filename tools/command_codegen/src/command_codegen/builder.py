from __future__ import annotations

from contextlib import contextmanager
from typing import Iterable, Iterator


class CodeBuilder:
    """Accumulates source lines and owns indentation for one artifact."""

    def __init__(self, indent_width: int = 2) -> None:
        self._lines: list[str] = []
        self._level = 0
        self._indent_width = indent_width

    def line(self, text: str = "") -> CodeBuilder:
        if text:
            self._lines.append(" " * (self._level * self._indent_width) + text)
        else:
            self._lines.append("")
        return self

    def lines(self, texts: Iterable[str]) -> CodeBuilder:
        for text in texts:
            self.line(text)
        return self

    def blank(self) -> CodeBuilder:
        if self._lines and self._lines[-1] != "":
            self._lines.append("")
        return self

    @contextmanager
    def indented(self, levels: int = 1) -> Iterator[CodeBuilder]:
        self._level += levels
        try:
            yield self
        finally:
            self._level -= levels

    @contextmanager
    def block(self, opener: str, closer: str = "}") -> Iterator[CodeBuilder]:
        self.line(opener)
        with self.indented():
            yield self
        self.line(closer)

    def render(self) -> str:
        lines = [line.rstrip() for line in self._lines]
        while lines and lines[-1] == "":
            lines.pop()
        return "\n".join(lines) + "\n"
