from __future__ import annotations

import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .schema import FieldSpec

KNOWN_TYPES = frozenset({"string", "int", "bool", "char", "Date", "Instant", "Duration", "SortType"})

CPP_TYPE_MAP = {
    "string": "std::string",
}

TS_TYPE_MAP = {
    "int": "number",
    "bool": "boolean",
    "char": "string",
    "Date": "DateString",
}

SORT_TYPE_MEMBERS = ("kTime", "kCost")
SORT_TYPE_NAMES = ("time", "cost")

_ATOI_RE = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class FieldType:
    """One entry of the closed type vocabulary, or an explicitly declared opaque type."""

    name: str
    opaque: bool = False

    @classmethod
    def resolve(cls, name: str, opaque_types: frozenset[str] | set[str] | tuple[str, ...] = ()) -> FieldType | None:
        if name in KNOWN_TYPES:
            return cls(name)
        if name in opaque_types:
            return cls(name, opaque=True)
        return None

    def __str__(self) -> str:
        return self.name


def cpp_type(field_type: FieldType) -> str:
    if field_type.opaque:
        return field_type.name
    return CPP_TYPE_MAP.get(field_type.name, field_type.name)


def ts_type(field_type: FieldType) -> str:
    if field_type.opaque:
        return field_type.name
    return TS_TYPE_MAP.get(field_type.name, field_type.name)


def cpp_field_type(spec: FieldSpec) -> str:
    base = cpp_type(spec.type)
    if spec.array:
        return f"Vector<{base}>"
    if spec.optional:
        return f"Optional<{base}>"
    return base


def ts_field_type(spec: FieldSpec) -> str:
    base = ts_type(spec.type)
    return f"{base}[]" if spec.array else base


def from_token(field_type: FieldType, expr: str) -> str:
    """C++ expression converting a NUL-terminated token ``expr`` (a ``char *``)."""
    if field_type.opaque:
        return expr
    name = field_type.name
    if name == "int":
        return f"atoi({expr})"
    if name == "bool":
        return f"{expr}[0] == 't'"
    if name == "char":
        return f"*{expr}"
    if name == "SortType":
        return f"{expr}[0] == 't' ? {SORT_TYPE_MEMBERS[0]} : {SORT_TYPE_MEMBERS[1]}"
    if name == "Duration":
        return f"Duration(atoi({expr}))"
    if name in ("Date", "Instant"):
        return f"{name}({expr})"
    return expr


def from_dynamic(field_type: FieldType, expr: str) -> str:
    """C++ expression converting the ``Napi::Value`` ``expr``."""
    if field_type.opaque:
        return f"CPP_STR({expr})"
    name = field_type.name
    if name == "int":
        return f"CPP_INT({expr})"
    if name == "bool":
        return f"CPP_BOOL({expr})"
    if name == "char":
        return f"CPP_STR({expr})[0]"
    if name == "SortType":
        return f"CPP_STR({expr})[0] == 't' ? {SORT_TYPE_MEMBERS[0]} : {SORT_TYPE_MEMBERS[1]}"
    if name == "Duration":
        return f"Duration(CPP_INT({expr}))"
    if name in ("Date", "Instant"):
        return f"{name}(CPP_STR({expr}).data())"
    return f"CPP_STR({expr})"


def atoi(token: str) -> int:
    match = _ATOI_RE.match(token)
    return int(match.group(1)) if match else 0


def python_from_token(field_type: FieldType, token: str) -> Any:
    """Evaluate the ``from_token`` rule for ``field_type`` on ``token``.

    Domain types without a Python counterpart (``Date``, ``Instant`` and opaque
    types) are passed through as text, the way their C++ constructors receive it.
    """
    if field_type.opaque:
        return token
    name = field_type.name
    if name in ("int", "Duration"):
        return atoi(token)
    if name == "bool":
        return token[:1] == "t"
    if name == "char":
        return token[:1]
    if name == "SortType":
        return SORT_TYPE_NAMES[0] if token[:1] == "t" else SORT_TYPE_NAMES[1]
    return token
