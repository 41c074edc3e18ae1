"""Go package discovery and the per-run namespace cache."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from ..errors import PackageLoadError, PackageNotFoundError
from ..logging import get_logger
from ..models import Declaration, Namespace
from .base import DeclarationIndex
from .tree_sitter import GoSourceParser

_MODULE_PATTERN = re.compile(r"^\s*module\s+\"?([^\s\"]+)\"?", re.MULTILINE)


def _is_package_dir(path: Path) -> bool:
    if not path.is_dir():
        return False
    return any(_is_source_file(child) for child in path.iterdir())


def _is_source_file(path: Path) -> bool:
    return path.suffix == ".go" and not path.name.endswith("_test.go") and path.is_file()


def _find_module(start: Path) -> Optional[Tuple[str, Path]]:
    for directory in (start, *start.parents):
        go_mod = directory / "go.mod"
        if not go_mod.is_file():
            continue
        try:
            match = _MODULE_PATTERN.search(go_mod.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError):
            return None
        return (match.group(1), directory) if match else None
    return None


def default_search_paths() -> List[Path]:
    """Return ``$GOPATH/src`` entries, falling back to ``~/go/src``."""
    gopath = os.environ.get("GOPATH", "")
    entries = [Path(entry) for entry in gopath.split(os.pathsep) if entry]
    if not entries:
        entries = [Path.home() / "go"]
    return [entry.expanduser() / "src" for entry in entries]


class PackageIndex(DeclarationIndex):
    """Loads Go packages from disk on first reference and memoizes them."""

    def __init__(
        self,
        root: Path,
        *,
        search_paths: Iterable[Path] = (),
        builtins: Iterable[str] = (),
        parser: GoSourceParser | None = None,
        use_gopath: bool = True,
    ) -> None:
        self.root_dir = Path(root).expanduser().resolve()
        self.search_paths = [Path(path).expanduser() for path in search_paths]
        if use_gopath:
            self.search_paths.extend(default_search_paths())
        self.extra_builtins = frozenset(builtins)
        self.parser = parser or GoSourceParser()
        self.logger = get_logger("index")
        self._by_path: Dict[str, Namespace] = {}
        self._by_directory: Dict[Path, Namespace] = {}
        self._module = _find_module(self.root_dir)

    def root(self) -> Namespace:
        return self._load(self.root_dir, ".")

    def lookup(self, path: str) -> Namespace:
        cached = self._by_path.get(path)
        if cached is not None:
            return cached
        namespace = self._load(self._resolve_directory(path), path)
        self._by_path[path] = namespace
        return namespace

    def is_builtin(self, name: str, package_path: Optional[str] = None) -> bool:
        if package_path is not None:
            return f"{package_path}.{name}" in self.extra_builtins
        return super().is_builtin(name) or name in self.extra_builtins

    def _resolve_directory(self, path: str) -> Path:
        requested = Path(path).expanduser()
        candidates: List[Path] = []
        if requested.is_absolute():
            candidates.append(requested)
        else:
            candidates.append(self.root_dir / requested)
            if self._module is not None:
                module_path, module_dir = self._module
                if path == module_path:
                    candidates.append(module_dir)
                elif path.startswith(module_path + "/"):
                    candidates.append(module_dir / path[len(module_path) + 1 :])
            candidates.extend(base / requested for base in self.search_paths)

        for candidate in candidates:
            if _is_package_dir(candidate):
                return candidate.resolve()
        raise PackageNotFoundError(
            f"Cannot find package {path!r} (searched {len(candidates)} locations)"
        )

    def _load(self, directory: Path, path: str) -> Namespace:
        cached = self._by_directory.get(directory)
        if cached is not None:
            return cached
        if not directory.is_dir():
            raise PackageNotFoundError(f"Package directory not found: {directory}")
        files = sorted(child for child in directory.iterdir() if _is_source_file(child))
        if not files:
            raise PackageNotFoundError(f"No Go source files in {directory}")

        namespace = Namespace(path=path, directory=directory, package_name="")
        for file_path in files:
            parsed = self.parser.parse_file(file_path)
            if parsed.error_line is not None:
                raise PackageLoadError(f"{file_path}:{parsed.error_line}: syntax error")
            if not namespace.package_name:
                namespace.package_name = parsed.package_name
            for spec in parsed.specs:
                if spec.name == "_" or spec.name in namespace.declarations:
                    continue
                namespace.declarations[spec.name] = Declaration(
                    name=spec.name,
                    kind=spec.kind,
                    type=spec.type,
                    namespace=namespace,
                    imports=parsed.imports,
                    doc=spec.doc,
                )

        self._by_directory[directory] = namespace
        self.logger.debug(
            "Loaded package %s from %s (%d files, %d declarations)",
            namespace.package_name or path,
            directory,
            len(files),
            len(namespace.declarations),
        )
        return namespace


__all__ = ["PackageIndex", "default_search_paths"]
