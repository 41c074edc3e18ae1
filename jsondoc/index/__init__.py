"""Declaration index implementations."""

from __future__ import annotations

from .base import BUILTIN_TYPES, DeclarationIndex
from .packages import PackageIndex
from .tree_sitter import GoSourceParser

__all__ = [
    "BUILTIN_TYPES",
    "DeclarationIndex",
    "GoSourceParser",
    "PackageIndex",
]
