"""Exception hierarchy shared across jsondoc components."""

from __future__ import annotations


class JSONDocError(RuntimeError):
    """Base class for every error that aborts a generation run."""


class ResolutionError(JSONDocError):
    """Raised when an identifier cannot be resolved to a type declaration."""


class NameNotFoundError(ResolutionError):
    """Raised when a name is neither declared nor a built-in type."""

    def __init__(self, name: str, namespace: str) -> None:
        super().__init__(f"Type {name} not found in {namespace}")
        self.name = name
        self.namespace = namespace


class NotATypeError(ResolutionError):
    """Raised when a name resolves to a const, var or func declaration."""

    def __init__(self, name: str, kind: str) -> None:
        super().__init__(f"Object named {name} is not a type (it is a {kind})")
        self.name = name
        self.kind = kind


class UnregisteredAliasError(ResolutionError):
    """Raised when a qualified name uses an alias that was never imported."""

    def __init__(self, alias: str) -> None:
        super().__init__(f"Package alias {alias!r} used before it was imported")
        self.alias = alias


class DuplicateImportAliasError(JSONDocError):
    """Raised when the same package alias is imported twice."""

    def __init__(self, alias: str) -> None:
        super().__init__(f"Package alias {alias!r} is already imported")
        self.alias = alias


class UnsupportedMapKeyError(JSONDocError):
    """Raised for map types whose key is not string-like."""

    def __init__(self, key: str) -> None:
        super().__init__(f"only maps with string keys are supported (got {key})")
        self.key = key


class AnnotationError(JSONDocError):
    """Raised when a struct tag cannot be parsed."""


class PackageLoadError(JSONDocError):
    """Raised when a Go package cannot be read or parsed."""


class PackageNotFoundError(PackageLoadError):
    """Raised when an import path does not map to a Go package directory."""


class ConfigError(JSONDocError):
    """Raised when the configuration file cannot be parsed."""


__all__ = [
    "AnnotationError",
    "ConfigError",
    "DuplicateImportAliasError",
    "JSONDocError",
    "NameNotFoundError",
    "NotATypeError",
    "PackageLoadError",
    "PackageNotFoundError",
    "ResolutionError",
    "UnregisteredAliasError",
    "UnsupportedMapKeyError",
]
