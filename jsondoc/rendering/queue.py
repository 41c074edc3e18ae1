"""Anchor bookkeeping and the render worklist."""

from __future__ import annotations

import re
from collections import deque
from typing import Callable, Deque, Dict, Hashable, List, Optional, Set, Tuple

from ..logging import get_logger
from ..models import Declaration, RenderItem, TypeExpr

_SLUG_UNSAFE = re.compile(r"[^A-Za-z0-9_-]+")


def slugify(name: str) -> str:
    slug = _SLUG_UNSAFE.sub("-", name.strip()).strip("-")
    return slug or "type"


def declaration_key(declaration: Declaration) -> Tuple[str, object, str]:
    """Identity of a named declaration: its package directory plus its name."""
    return ("declaration", declaration.namespace.directory, declaration.name)


def site_key(expr: TypeExpr) -> Tuple[str, int]:
    """Identity of an anonymous type: the expression object itself."""
    return ("site", id(expr))


class LinkTable:
    """Issues unique anchors and remembers which types already own one."""

    def __init__(self) -> None:
        self._anchors: Dict[Hashable, str] = {}
        self._counters: Dict[str, int] = {}
        self._issued: Set[str] = set()

    def __contains__(self, key: Hashable) -> bool:
        return key in self._anchors

    def get(self, key: Hashable) -> Optional[str]:
        return self._anchors.get(key)

    def assign(self, key: Hashable, base: str) -> str:
        """Return the anchor for ``key``, issuing one derived from ``base`` on first use."""
        anchor = self._anchors.get(key)
        if anchor is None:
            anchor = self.reserve(base)
            self._anchors[key] = anchor
        return anchor

    def reserve(self, base: str) -> str:
        """Issue a fresh anchor not bound to any type."""
        slug = slugify(base)
        count = self._counters.get(slug, 0)
        while True:
            anchor = slug if count == 0 else f"{slug}-{count}"
            count += 1
            if anchor not in self._issued:
                break
        self._counters[slug] = count
        self._issued.add(anchor)
        return anchor


class RenderQueue:
    """FIFO worklist of types waiting for their table section."""

    def __init__(self) -> None:
        self._items: Deque[RenderItem] = deque()
        self.logger = get_logger("queue")

    def __len__(self) -> int:
        return len(self._items)

    def enqueue(self, item: RenderItem) -> None:
        self.logger.debug("Queued %s as #%s", item.name, item.anchor)
        self._items.append(item)

    def drain(self, emit: Callable[[RenderItem], str]) -> List[str]:
        """Emit every queued item, including items queued while draining."""
        sections: List[str] = []
        while self._items:
            sections.append(emit(self._items.popleft()))
        return sections


__all__ = ["LinkTable", "RenderQueue", "declaration_key", "site_key", "slugify"]
