"""Configuration loading for jsondoc (.jsondoc.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .errors import ConfigError

CONFIG_FILENAME = ".jsondoc.yml"

DEFAULT_MARKDOWN_EXTENSIONS = ("tables", "fenced_code", "toc")


@dataclass
class MarkdownConfig:
    """Markdown renderer settings."""

    extensions: List[str] = field(default_factory=lambda: list(DEFAULT_MARKDOWN_EXTENSIONS))


@dataclass
class JSONDocConfig:
    """Represents the settings defined in .jsondoc.yml."""

    root: Path
    title: Optional[str] = None
    package: Optional[Path] = None
    search_paths: List[Path] = field(default_factory=list)
    builtins: List[str] = field(default_factory=list)
    markdown: MarkdownConfig = field(default_factory=MarkdownConfig)
    nav: bool = True


def load_config(config_path: Path) -> JSONDocConfig:
    """Load configuration from disk; a missing file yields defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return JSONDocConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    package_str = _as_str(data.get("package"))
    package = (root / package_str).resolve() if package_str else None
    search_paths = [root / entry for entry in _as_str_list(data.get("search_paths"))]

    markdown = MarkdownConfig()
    markdown_data = _as_dict(data.get("markdown"))
    if "extensions" in markdown_data:
        markdown.extensions = _as_str_list(markdown_data.get("extensions"))

    nav = _as_bool(data.get("nav"))

    return JSONDocConfig(
        root=root,
        title=_as_str(data.get("title")),
        package=package,
        search_paths=search_paths,
        builtins=_as_str_list(data.get("builtins")),
        markdown=markdown,
        nav=True if nav is None else nav,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.suffix not in {".yml", ".yaml"}:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "DEFAULT_MARKDOWN_EXTENSIONS",
    "JSONDocConfig",
    "MarkdownConfig",
    "load_config",
]
