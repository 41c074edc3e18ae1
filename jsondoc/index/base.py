"""Base classes for declaration index collaborators."""

from abc import ABC, abstractmethod
from typing import Optional

from ..models import Declaration, Namespace

BUILTIN_TYPES = frozenset(
    {
        "any",
        "bool",
        "byte",
        "complex64",
        "complex128",
        "error",
        "float32",
        "float64",
        "int",
        "int8",
        "int16",
        "int32",
        "int64",
        "rune",
        "string",
        "uint",
        "uint8",
        "uint16",
        "uint32",
        "uint64",
        "uintptr",
    }
)


class DeclarationIndex(ABC):
    """Contract for collaborators that expose Go declarations per package."""

    @abstractmethod
    def root(self) -> Namespace:
        """Return the namespace unqualified directive names resolve in."""

    @abstractmethod
    def lookup(self, path: str) -> Namespace:
        """Return the namespace for an import path, loading it on first use."""

    def find_declaration(self, name: str, namespace: Namespace) -> Optional[Declaration]:
        return namespace.declarations.get(name)

    def is_builtin(self, name: str, package_path: Optional[str] = None) -> bool:
        """Return True for names rendered as plain text without lookup."""
        return package_path is None and name in BUILTIN_TYPES
