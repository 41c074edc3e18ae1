"""Struct tag parsing and JSON key naming rules."""

from __future__ import annotations

import ast
import json
from dataclasses import dataclass
from typing import Optional, Tuple

from ..errors import AnnotationError

_OPTIONAL_FLAGS = {"omitempty", "omitzero"}


@dataclass(frozen=True)
class JSONTag:
    """Parsed value of the ``json`` key of a struct tag."""

    name: str
    options: Tuple[str, ...] = ()

    @property
    def omitted(self) -> bool:
        return self.name == "-"

    @property
    def optional(self) -> bool:
        return any(option in _OPTIONAL_FLAGS for option in self.options)


@dataclass(frozen=True)
class FieldName:
    """Externally visible JSON key of a struct member."""

    key: str
    optional: bool = False

    @property
    def display(self) -> str:
        return json.dumps(self.key, ensure_ascii=False)


def is_exported(name: str) -> bool:
    return bool(name) and name[0].isupper()


def unquote_tag(literal: str) -> str:
    """Return the contents of a raw or interpreted Go string literal."""
    if len(literal) >= 2 and literal[0] == literal[-1] == "`":
        return literal[1:-1].replace("\r", "")
    if len(literal) >= 2 and literal[0] == literal[-1] == '"':
        return _unquote_interpreted(literal)
    raise AnnotationError(f"malformed struct tag literal {literal!r}")


def _unquote_interpreted(literal: str) -> str:
    try:
        value = ast.literal_eval(literal)
    except (SyntaxError, ValueError) as exc:
        raise AnnotationError(f"malformed struct tag literal {literal!r}") from exc
    if not isinstance(value, str):
        raise AnnotationError(f"malformed struct tag literal {literal!r}")
    return value


def lookup_tag(tag: str, key: str) -> Optional[str]:
    """Return the value stored under ``key`` in a conventional ``key:"value"`` tag."""
    rest = tag
    while rest:
        rest = rest.lstrip(" ")
        if not rest:
            break
        i = 0
        while i < len(rest) and rest[i] > " " and rest[i] not in ':"\x7f':
            i += 1
        if i == 0 or i + 1 >= len(rest) or rest[i] != ":" or rest[i + 1] != '"':
            raise AnnotationError(f"malformed struct tag {tag!r}")
        name = rest[:i]
        rest = rest[i + 1 :]

        i = 1
        while i < len(rest) and rest[i] != '"':
            if rest[i] == "\\":
                i += 1
            i += 1
        if i >= len(rest):
            raise AnnotationError(f"unterminated value in struct tag {tag!r}")
        quoted = rest[: i + 1]
        rest = rest[i + 1 :]
        if name == key:
            return _unquote_interpreted(quoted)
    return None


def parse_json_tag(literal: Optional[str]) -> Optional[JSONTag]:
    """Parse the ``json`` entry of a struct tag literal, None when absent."""
    if literal is None:
        return None
    value = lookup_tag(unquote_tag(literal), "json")
    if value is None:
        return None
    name, separator, rest = value.partition(",")
    options = tuple(rest.split(",")) if separator else ()
    return JSONTag(name=name, options=options)


def resolve_field_name(name: str, tag: Optional[str]) -> Optional[FieldName]:
    """Return the JSON key for a named member, or None when it is not serialized."""
    if not is_exported(name):
        return None
    parsed = parse_json_tag(tag)
    if parsed is None:
        return FieldName(key=name)
    if parsed.omitted:
        return None
    return FieldName(key=parsed.name or name, optional=parsed.optional)


__all__ = [
    "FieldName",
    "JSONTag",
    "is_exported",
    "lookup_tag",
    "parse_json_tag",
    "resolve_field_name",
    "unquote_tag",
]
