"""Helper utilities for constructing throwaway Go packages in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Any, Mapping

from jsondoc.generator import DocumentGenerator
from jsondoc.index.packages import PackageIndex


class GoPackageBuilder:
    """Writes Go sources under a temporary root and builds generators over them."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "api"
        self.root.mkdir()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries below the package root."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def index(self, **kwargs: Any) -> PackageIndex:
        kwargs.setdefault("use_gopath", False)
        return PackageIndex(self.root, **kwargs)

    def generator(self, **kwargs: Any) -> DocumentGenerator:
        builtins = kwargs.pop("builtins", ())
        return DocumentGenerator(self.index(builtins=builtins), **kwargs)

    def path(self) -> Path:
        return self.root


__all__ = ["GoPackageBuilder"]
