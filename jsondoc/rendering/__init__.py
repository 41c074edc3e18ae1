"""Type rendering: field naming, anchors, the render queue and table output."""

from __future__ import annotations

from .fields import FieldName, resolve_field_name
from .queue import LinkTable, RenderQueue
from .types import TypeRenderer

__all__ = ["FieldName", "LinkTable", "RenderQueue", "TypeRenderer", "resolve_field_name"]
