"""Core data models shared across jsondoc components."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union


@dataclass(eq=False)
class NamedType:
    """Reference to a declared or built-in type, optionally package-qualified."""

    name: str
    package: Optional[str] = None

    @property
    def text(self) -> str:
        return f"{self.package}.{self.name}" if self.package else self.name


@dataclass(eq=False)
class StructType:
    """Struct literal type with its members in declaration order."""

    members: List["Member"] = field(default_factory=list)


@dataclass(eq=False)
class ArrayType:
    """Slice or fixed-length array type."""

    element: "TypeExpr"


@dataclass(eq=False)
class MapType:
    """Map type; only string-like keys can be rendered."""

    key: "TypeExpr"
    value: "TypeExpr"


@dataclass(eq=False)
class PointerType:
    """Pointer type, encoded as its element in JSON."""

    element: "TypeExpr"


@dataclass(eq=False)
class OpaqueType:
    """Any type expression jsondoc does not look into (interfaces, funcs, generics)."""

    text: str


# Type expressions compare by identity: two structurally equal anonymous
# structs declared at different sites are different render items.
TypeExpr = Union[NamedType, StructType, ArrayType, MapType, PointerType, OpaqueType]


@dataclass(eq=False)
class Member:
    """Struct member; ``name`` is None for embedded members."""

    name: Optional[str]
    type: TypeExpr
    tag: Optional[str] = None
    comment: str = ""
    doc: str = ""

    @property
    def embedded(self) -> bool:
        return self.name is None

    @property
    def description(self) -> str:
        return (self.comment or self.doc).strip()


@dataclass(eq=False)
class Namespace:
    """Declarations of one Go package, keyed by name."""

    path: str
    directory: Path
    package_name: str
    declarations: Dict[str, "Declaration"] = field(default_factory=dict)


@dataclass(eq=False)
class Scope:
    """Resolution context: the namespace and file imports an expression was written in."""

    namespace: Namespace
    imports: Dict[str, str] = field(default_factory=dict)


@dataclass(eq=False)
class Declaration:
    """Named top-level declaration of a Go package."""

    name: str
    kind: str
    type: Optional[TypeExpr]
    namespace: Namespace
    imports: Dict[str, str] = field(default_factory=dict)
    doc: str = ""

    @property
    def is_type(self) -> bool:
        return self.kind == "type"

    @property
    def scope(self) -> Scope:
        return Scope(namespace=self.namespace, imports=self.imports)


@dataclass(eq=False)
class RenderItem:
    """Queued type waiting for its table section."""

    name: str
    type: TypeExpr
    scope: Scope
    anchor: str
    doc: str = ""


__all__ = [
    "ArrayType",
    "Declaration",
    "MapType",
    "Member",
    "NamedType",
    "Namespace",
    "OpaqueType",
    "PointerType",
    "RenderItem",
    "Scope",
    "StructType",
    "TypeExpr",
]
