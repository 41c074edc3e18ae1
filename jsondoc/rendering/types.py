"""Type expression rendering: field tables, container phrasing and links."""

from __future__ import annotations

import html
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Sequence, Set, Tuple

from jinja2 import Environment

from ..errors import (
    NameNotFoundError,
    NotATypeError,
    PackageLoadError,
    UnregisteredAliasError,
    UnsupportedMapKeyError,
)
from ..index.base import DeclarationIndex
from ..logging import get_logger
from ..models import (
    ArrayType,
    Declaration,
    MapType,
    Member,
    NamedType,
    PointerType,
    RenderItem,
    Scope,
    StructType,
    TypeExpr,
)
from .fields import FieldName, parse_json_tag, resolve_field_name
from .queue import LinkTable, RenderQueue, declaration_key, site_key

_MAX_ALIAS_DEPTH = 32

# Failures that degrade a qualified link to plain text. An unregistered alias is
# never among them.
_UNLINKABLE = (NameNotFoundError, NotATypeError, PackageLoadError)


def escape_text(value: object) -> str:
    return html.escape(str(value), quote=False)


def describe(expr: TypeExpr) -> str:
    """Return Go-like source text for a type expression."""
    if isinstance(expr, NamedType):
        return expr.text
    if isinstance(expr, PointerType):
        return "*" + describe(expr.element)
    if isinstance(expr, ArrayType):
        return "[]" + describe(expr.element)
    if isinstance(expr, MapType):
        return f"map[{describe(expr.key)}]{describe(expr.value)}"
    if isinstance(expr, StructType):
        return "struct{...}"
    return expr.text


def _container(kind: str, nested: bool) -> str:
    return f"{kind}s of" if nested else f"{kind} of"


def _is_bytes(expr: ArrayType) -> bool:
    element = expr.element
    return isinstance(element, NamedType) and element.package is None and element.name in {"byte", "uint8"}


@dataclass
class FieldRow:
    """One rendered table row."""

    name: str
    type: str
    description: str


@dataclass
class _Candidate:
    field: FieldName
    member: Member
    scope: Scope
    depth: int
    tagged: bool = False


class TypeRenderer:
    """Renders type expressions and queues every struct that needs its own table."""

    def __init__(
        self,
        index: DeclarationIndex,
        links: LinkTable,
        queue: RenderQueue,
        env: Environment,
        *,
        aliases: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.index = index
        self.links = links
        self.queue = queue
        self._env = env
        self.aliases: Mapping[str, str] = aliases if aliases is not None else {}
        self.logger = get_logger("rendering")

    def render_item(self, item: RenderItem) -> str:
        """Render a queued item: anchored heading, optional doc, then its body."""
        body = self.render_body(item.type, item.scope)
        return self._env.get_template("type.html.j2").render(item=item, body=body).strip()

    def render_body(
        self, expr: TypeExpr, scope: Scope, prefix: Sequence[str] = ()
    ) -> str:
        """Render the description of a whole type, unfolding root containers."""
        if isinstance(expr, PointerType):
            return self.render_body(expr.element, scope, prefix)
        if isinstance(expr, StructType):
            noun = "objects" if prefix else "object"
            rows = self.field_rows(expr, scope)
            return self._render_fragment(" ".join([*prefix, noun]), rows)
        if isinstance(expr, ArrayType) and not _is_bytes(expr):
            return self.render_body(
                expr.element, scope, [*prefix, _container("array", bool(prefix))]
            )
        if isinstance(expr, MapType):
            self.check_map_key(expr.key, scope)
            return self.render_body(
                expr.value, scope, [*prefix, _container("object", bool(prefix))]
            )
        leaf = self.type_string(expr, scope, "value", element=bool(prefix))
        return self._render_fragment(" ".join([*prefix, leaf]), None)

    def _render_fragment(self, phrase: str, rows: Optional[List[FieldRow]]) -> str:
        return self._env.get_template("body.html.j2").render(phrase=phrase, rows=rows).strip()

    def type_string(
        self, expr: TypeExpr, scope: Scope, key: str, *, element: bool = False
    ) -> str:
        """Return the value-type cell markup for a member named ``key``."""
        if isinstance(expr, PointerType):
            return self.type_string(expr.element, scope, key, element=element)
        if isinstance(expr, NamedType):
            return self.link_named(expr, scope)
        if isinstance(expr, ArrayType):
            if _is_bytes(expr):
                return "base64 string"
            inner = self.type_string(expr.element, scope, key, element=True)
            return f"{_container('array', element)} {inner}"
        if isinstance(expr, MapType):
            self.check_map_key(expr.key, scope)
            inner = self.type_string(expr.value, scope, key, element=True)
            return f"{_container('object', element)} {inner}"
        if isinstance(expr, StructType):
            name = f"of {key} element" if element else f"of {key}"
            return self.link_struct(expr, scope, name)
        return escape_text(expr.text)

    def link_struct(self, expr: StructType, scope: Scope, name: str) -> str:
        """Queue an anonymous struct (once per site) and link to it."""
        key = site_key(expr)
        anchor = self.links.get(key)
        if anchor is None:
            anchor = self.links.assign(key, f"type-{name}")
            self.queue.enqueue(RenderItem(name=name, type=expr, scope=scope, anchor=anchor))
        return f'<a href="#{anchor}">type {escape_text(name)}</a>'

    def link_named(self, ref: NamedType, scope: Scope) -> str:
        """Render a named reference as plain text or as a link to its table."""
        if ref.package is None:
            if self.index.is_builtin(ref.name):
                return escape_text(ref.name)
            declaration = self.index.find_declaration(ref.name, scope.namespace)
            if declaration is None:
                raise NameNotFoundError(ref.name, scope.namespace.path)
            if not declaration.is_type:
                raise NotATypeError(ref.name, declaration.kind)
            return self.link_declaration(declaration, ref.text)

        path = self.import_path(ref.package, scope)
        if path is not None and self.index.is_builtin(ref.name, path):
            return escape_text(ref.text)
        try:
            declaration = self.resolve_qualified(ref, scope)
        except _UNLINKABLE as exc:
            self.logger.warning("Cannot link %s: %s", ref.text, exc)
            return escape_text(ref.text)
        return self.link_declaration(declaration, ref.text)

    def link_declaration(self, declaration: Declaration, label: str) -> str:
        anchor = self.anchor_declaration(declaration, label)
        return f'<a href="#{anchor}">{escape_text(label)}</a>'

    def anchor_declaration(self, declaration: Declaration, label: str) -> str:
        """Return the declaration's anchor, queuing its table on first reference."""
        key = declaration_key(declaration)
        anchor = self.links.get(key)
        if anchor is None:
            anchor = self.links.assign(key, f"type-{declaration.name}")
            self.queue.enqueue(
                RenderItem(
                    name=label,
                    type=declaration.type,
                    scope=declaration.scope,
                    anchor=anchor,
                    doc=declaration.doc,
                )
            )
        return anchor

    def import_path(self, alias: str, scope: Scope) -> Optional[str]:
        """Map a package qualifier to an import path: file imports first, then document imports."""
        return scope.imports.get(alias) or self.aliases.get(alias)

    def resolve_qualified(self, ref: NamedType, scope: Scope) -> Declaration:
        path = self.import_path(ref.package or "", scope)
        if path is None:
            raise UnregisteredAliasError(ref.package or "")
        namespace = self.index.lookup(path)
        declaration = self.index.find_declaration(ref.name, namespace)
        if declaration is None:
            raise NameNotFoundError(ref.name, namespace.path)
        if not declaration.is_type:
            raise NotATypeError(ref.text, declaration.kind)
        return declaration

    def check_map_key(self, key: TypeExpr, scope: Scope) -> None:
        if not self._is_string_like(key, scope, 0):
            raise UnsupportedMapKeyError(describe(key))

    def _is_string_like(self, expr: TypeExpr, scope: Scope, depth: int) -> bool:
        if not isinstance(expr, NamedType) or depth > _MAX_ALIAS_DEPTH:
            return False
        if expr.package is None:
            if expr.name == "string":
                return True
            if self.index.is_builtin(expr.name):
                return False
            declaration = self.index.find_declaration(expr.name, scope.namespace)
            if declaration is None:
                raise NameNotFoundError(expr.name, scope.namespace.path)
            if not declaration.is_type:
                raise NotATypeError(expr.name, declaration.kind)
        else:
            try:
                declaration = self.resolve_qualified(expr, scope)
            except PackageLoadError as exc:
                self.logger.warning("Cannot inspect map key %s: %s", expr.text, exc)
                return False
        if declaration.type is None:
            return False
        return self._is_string_like(declaration.type, declaration.scope, depth + 1)

    def field_rows(self, struct: StructType, scope: Scope) -> List[FieldRow]:
        """Return the visible rows of a struct with embedded structs flattened.

        Keys follow encoding/json: the shallowest candidates win; among several
        at that depth a single tagged one wins, otherwise the key is dropped.
        """
        candidates = self._collect_fields(struct, scope, 0, set())
        by_key: Dict[str, List[_Candidate]] = {}
        for candidate in candidates:
            by_key.setdefault(candidate.field.key, []).append(candidate)

        winners: Dict[str, _Candidate] = {}
        for key, group in by_key.items():
            depth = min(candidate.depth for candidate in group)
            tied = [candidate for candidate in group if candidate.depth == depth]
            dominant = tied
            if len(tied) > 1:
                dominant = [candidate for candidate in tied if candidate.tagged]
            if len(dominant) == 1:
                winners[key] = dominant[0]
            else:
                self.logger.warning(
                    "Dropping JSON key %r: %d fields at the same depth use it", key, len(tied)
                )

        rows: List[FieldRow] = []
        for candidate in candidates:
            key = candidate.field.key
            if winners.get(key) is not candidate:
                continue
            description = candidate.member.description
            if candidate.field.optional:
                description = f"{description} (optional)".strip()
            rows.append(
                FieldRow(
                    name=candidate.field.display,
                    type=self.type_string(candidate.member.type, candidate.scope, key),
                    description=description,
                )
            )
        return rows

    def _collect_fields(
        self, struct: StructType, scope: Scope, depth: int, visiting: Set[int]
    ) -> List[_Candidate]:
        candidates: List[_Candidate] = []
        for member in struct.members:
            tag = parse_json_tag(member.tag)
            tagged = tag is not None and bool(tag.name)
            if not member.embedded:
                field = resolve_field_name(member.name or "", member.tag)
                if field is not None:
                    candidates.append(_Candidate(field, member, scope, depth, tagged))
                continue

            if tag is not None and tag.omitted:
                continue
            if tag is not None and tag.name:
                # A named tag turns an embedded member into an ordinary field.
                field = FieldName(key=tag.name, optional=tag.optional)
                candidates.append(_Candidate(field, member, scope, depth, tagged))
                continue

            embedded = self._embedded_struct(member.type, scope)
            if embedded is None:
                continue
            declaration, inner = embedded
            if id(declaration) in visiting:
                continue
            candidates.extend(
                self._collect_fields(
                    inner, declaration.scope, depth + 1, visiting | {id(declaration)}
                )
            )
        return candidates

    def _embedded_struct(
        self, expr: TypeExpr, scope: Scope
    ) -> Optional[Tuple[Declaration, StructType]]:
        while isinstance(expr, PointerType):
            expr = expr.element
        if not isinstance(expr, NamedType):
            return None
        try:
            if expr.package is None:
                declaration = self.index.find_declaration(expr.name, scope.namespace)
            else:
                declaration = self.resolve_qualified(expr, scope)
        except _UNLINKABLE as exc:
            self.logger.debug("Skipping embedded %s: %s", expr.text, exc)
            return None
        if declaration is None or not declaration.is_type:
            self.logger.debug("Skipping embedded %s: not a declared type", expr.text)
            return None
        target = declaration.type
        while isinstance(target, PointerType):
            target = target.element
        if not isinstance(target, StructType):
            return None
        return declaration, target


__all__ = ["FieldRow", "TypeRenderer", "describe", "escape_text"]
