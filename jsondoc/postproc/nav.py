"""Sidebar navigation generation."""

from __future__ import annotations

import re
from typing import List, Sequence, Tuple

_TAG = re.compile(r"<[^>]+>")


class NavigationBuilder:
    """Builds a nested ``<nav>`` list from anchored headings in rendered HTML."""

    def __init__(self, levels: Sequence[int] = (2, 3)) -> None:
        self.levels = tuple(sorted(levels))
        joined = "".join(str(level) for level in self.levels)
        self._pattern = re.compile(
            rf"<h([{joined}])\b[^>]*?\bid=\"([^\"]+)\"[^>]*>(.*?)</h\1>", re.DOTALL
        )

    def headings(self, html: str) -> List[Tuple[int, str, str]]:
        found: List[Tuple[int, str, str]] = []
        for match in self._pattern.finditer(html):
            title = " ".join(_TAG.sub("", match.group(3)).split())
            if title:
                found.append((int(match.group(1)), match.group(2), title))
        return found

    def build(self, html: str) -> str:
        headings = self.headings(html)
        if not headings:
            return ""

        base = min(level for level, _, _ in headings)
        output: List[str] = ["<nav>"]
        depth = 0
        for level, anchor, title in headings:
            target = level - base + 1
            # Nested lists live inside the item they belong to.
            if depth >= target:
                output[-1] += "</li>"
            while depth > target:
                output.extend(["</ul>", "</li>"])
                depth -= 1
            while depth < target:
                output.append("<ul>")
                depth += 1
                if depth < target:
                    output.append("<li>")
            output.append(f'<li><a href="#{anchor}">{title}</a>')
        output[-1] += "</li>"
        while depth > 1:
            output.extend(["</ul>", "</li>"])
            depth -= 1
        output.extend(["</ul>", "</nav>"])
        return "\n".join(output)


__all__ = ["NavigationBuilder"]
