"""Tree-sitter powered reader for Go declarations."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional

import tree_sitter_go
from tree_sitter import Language, Node, Parser

from ..errors import PackageLoadError
from ..models import (
    ArrayType,
    MapType,
    Member,
    NamedType,
    OpaqueType,
    PointerType,
    StructType,
    TypeExpr,
)

GO_LANGUAGE = Language(tree_sitter_go.language())

_MAJOR_VERSION = re.compile(r"^v[0-9]+$")

_ARRAY_NODES = {"slice_type", "array_type", "implicit_length_array_type"}


@dataclass
class ParsedSpec:
    """Top-level declaration as it appears in one source file."""

    name: str
    kind: str
    type: Optional[TypeExpr] = None
    doc: str = ""


@dataclass
class ParsedFile:
    """Declarations and imports of a single Go file."""

    path: Optional[Path]
    package_name: str = ""
    imports: Dict[str, str] = field(default_factory=dict)
    specs: List[ParsedSpec] = field(default_factory=list)
    error_line: Optional[int] = None


def default_import_alias(path: str) -> str:
    """Return the name an unnamed import is referenced by."""
    parts = [part for part in path.split("/") if part]
    if len(parts) > 1 and _MAJOR_VERSION.match(parts[-1]):
        parts.pop()
    return parts[-1] if parts else path


class GoSourceParser:
    """Extracts type, const, var and func declarations from Go sources."""

    def __init__(self) -> None:
        self._parser = Parser(GO_LANGUAGE)

    def parse_file(self, path: Path) -> ParsedFile:
        try:
            source = path.read_bytes()
        except OSError as exc:
            raise PackageLoadError(f"Cannot read {path}: {exc}") from exc
        return self.parse(source, path=path)

    def parse(self, source: bytes, *, path: Optional[Path] = None) -> ParsedFile:
        tree = self._parser.parse(source)
        root = tree.root_node
        parsed = ParsedFile(path=path)
        if root.has_error:
            error = self._first_error(root)
            parsed.error_line = (error.start_point[0] if error is not None else 0) + 1

        for child in root.named_children:
            if child.type == "package_clause":
                names = [c for c in child.named_children if c.type == "package_identifier"]
                if names:
                    parsed.package_name = self._node_text(names[0], source)
            elif child.type == "import_declaration":
                self._collect_imports(child, source, parsed.imports)
            elif child.type == "type_declaration":
                parsed.specs.extend(self._type_specs(child, source))
            elif child.type == "const_declaration":
                parsed.specs.extend(self._value_specs(child, source, "const"))
            elif child.type == "var_declaration":
                parsed.specs.extend(self._value_specs(child, source, "var"))
            elif child.type == "function_declaration":
                name_node = child.child_by_field_name("name")
                if name_node is not None:
                    parsed.specs.append(
                        ParsedSpec(name=self._node_text(name_node, source), kind="func")
                    )
        return parsed

    @staticmethod
    def _node_text(node: Node, source: bytes) -> str:
        return source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")

    def _first_error(self, node: Node) -> Optional[Node]:
        if node.type == "ERROR" or node.is_missing:
            return node
        for child in node.children:
            if child.has_error or child.is_missing:
                found = self._first_error(child)
                if found is not None:
                    return found
        return None

    def _collect_imports(self, node: Node, source: bytes, imports: Dict[str, str]) -> None:
        for child in node.named_children:
            if child.type == "import_spec_list":
                self._collect_imports(child, source, imports)
                continue
            if child.type != "import_spec":
                continue
            path_node = child.child_by_field_name("path")
            if path_node is None:
                continue
            path = self._node_text(path_node, source)[1:-1]
            name_node = child.child_by_field_name("name")
            if name_node is None:
                imports[default_import_alias(path)] = path
                continue
            alias = self._node_text(name_node, source)
            if alias in {"_", "."}:
                continue
            imports[alias] = path

    def _type_specs(self, node: Node, source: bytes) -> Iterable[ParsedSpec]:
        group_doc = self._leading_comments(node, source)
        for child in node.named_children:
            if child.type not in {"type_spec", "type_alias"}:
                continue
            name_node = child.child_by_field_name("name")
            type_node = child.child_by_field_name("type")
            if name_node is None or type_node is None:
                continue
            yield ParsedSpec(
                name=self._node_text(name_node, source),
                kind="type",
                type=self.convert_type(type_node, source),
                doc=self._leading_comments(child, source) or group_doc,
            )

    def _value_specs(self, node: Node, source: bytes, kind: str) -> Iterable[ParsedSpec]:
        for child in node.named_children:
            if child.type.endswith("_spec_list"):
                yield from self._value_specs(child, source, kind)
                continue
            if child.type not in {"const_spec", "var_spec"}:
                continue
            for name_node in child.children_by_field_name("name"):
                if name_node.type == "identifier":
                    yield ParsedSpec(name=self._node_text(name_node, source), kind=kind)

    def convert_type(self, node: Node, source: bytes) -> TypeExpr:
        kind = node.type
        if kind == "type_identifier":
            return NamedType(self._node_text(node, source))
        if kind == "qualified_type":
            package = node.child_by_field_name("package")
            name = node.child_by_field_name("name")
            if package is not None and name is not None:
                return NamedType(
                    name=self._node_text(name, source),
                    package=self._node_text(package, source),
                )
        elif kind == "pointer_type":
            inner = self._type_children(node)
            if inner:
                return PointerType(self.convert_type(inner[0], source))
        elif kind in _ARRAY_NODES:
            element = node.child_by_field_name("element")
            if element is not None:
                return ArrayType(self.convert_type(element, source))
        elif kind == "map_type":
            key = node.child_by_field_name("key")
            value = node.child_by_field_name("value")
            if key is not None and value is not None:
                return MapType(self.convert_type(key, source), self.convert_type(value, source))
        elif kind == "struct_type":
            body = next((c for c in node.named_children if c.type == "field_declaration_list"), None)
            return StructType(self._members(body, source) if body is not None else [])
        elif kind == "parenthesized_type":
            inner = self._type_children(node)
            if inner:
                return self.convert_type(inner[0], source)
        return OpaqueType(" ".join(self._node_text(node, source).split()))

    @staticmethod
    def _type_children(node: Node) -> List[Node]:
        return [child for child in node.named_children if child.type != "comment"]

    def _members(self, body: Node, source: bytes) -> List[Member]:
        members: List[Member] = []
        previous: List[Member] = []
        previous_row = -1
        doc_lines: List[str] = []
        for child in body.named_children:
            if child.type == "comment":
                text = self._comment_text(child, source)
                if previous and child.start_point[0] == previous_row:
                    for member in previous:
                        member.comment = f"{member.comment} {text}".strip()
                else:
                    doc_lines.append(text)
                continue
            if child.type != "field_declaration":
                continue
            previous = self._field_members(child, source, " ".join(doc_lines))
            previous_row = child.end_point[0]
            doc_lines = []
            members.extend(previous)
        return members

    def _field_members(self, node: Node, source: bytes, doc: str) -> List[Member]:
        type_node = node.child_by_field_name("type")
        if type_node is None:
            return []
        tag_node = node.child_by_field_name("tag")
        tag = self._node_text(tag_node, source) if tag_node is not None else None
        comment = " ".join(
            self._comment_text(child, source)
            for child in node.named_children
            if child.type == "comment"
        )
        names = [
            self._node_text(name, source)
            for name in node.children_by_field_name("name")
            if name.type == "field_identifier"
        ]
        if not names:
            return [
                Member(
                    name=None,
                    type=self.convert_type(type_node, source),
                    tag=tag,
                    comment=comment,
                    doc=doc,
                )
            ]
        # Each name gets its own expression so inline structs stay distinct sites.
        return [
            Member(
                name=name,
                type=self.convert_type(type_node, source),
                tag=tag,
                comment=comment,
                doc=doc,
            )
            for name in names
        ]

    def _leading_comments(self, node: Node, source: bytes) -> str:
        lines: List[str] = []
        expected_row = node.start_point[0] - 1
        sibling = node.prev_named_sibling
        while (
            sibling is not None
            and sibling.type == "comment"
            and sibling.end_point[0] == expected_row
            and not self._is_trailing(sibling)
        ):
            lines.append(self._comment_text(sibling, source))
            expected_row = sibling.start_point[0] - 1
            sibling = sibling.prev_named_sibling
        return " ".join(reversed(lines))

    @staticmethod
    def _is_trailing(comment: Node) -> bool:
        previous = comment.prev_named_sibling
        return (
            previous is not None
            and previous.type != "comment"
            and previous.end_point[0] == comment.start_point[0]
        )

    def _comment_text(self, node: Node, source: bytes) -> str:
        raw = self._node_text(node, source)
        if raw.startswith("//"):
            return raw[2:].strip()
        if raw.startswith("/*"):
            return " ".join(raw[2:-2].split())
        return raw.strip()


__all__ = ["GO_LANGUAGE", "GoSourceParser", "ParsedFile", "ParsedSpec", "default_import_alias"]
