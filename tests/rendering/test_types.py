"""Tests for value-type phrasing and body rendering."""

from __future__ import annotations

import pytest

from jsondoc.errors import UnsupportedMapKeyError
from jsondoc.models import ArrayType, MapType, NamedType, PointerType, StructType
from jsondoc.rendering.types import describe, escape_text
from tests._fixtures.go_package import GoPackageBuilder

SHAPES = """
package api

type Key string

type Nested map[string]map[Key][]int

type Blob []byte

type Widget struct {
    Grid   [][]int           `json:"grid"`
    Avatar []byte            `json:"avatar"`
    Index  map[string]string `json:"index"`
    Ref    *Key              `json:"ref"`
    Pairs  []map[string]struct {
        Left int
    } `json:"pairs"`
    Fn func() `json:"-"`
}
"""


def _body(go_package: GoPackageBuilder, name: str) -> str:
    generator = go_package.generator()
    declaration = generator.resolve(name)
    return generator.renderer.render_body(declaration.type, declaration.scope)


def test_nested_containers_at_the_root(go_package: GoPackageBuilder) -> None:
    go_package.write({"api.go": SHAPES})
    assert _body(go_package, "Nested") == "<p>JSON object of objects of arrays of int.</p>"


def test_byte_slices_are_base64_strings(go_package: GoPackageBuilder) -> None:
    go_package.write({"api.go": SHAPES})
    assert _body(go_package, "Blob") == "<p>JSON base64 string.</p>"


def test_field_value_types(go_package: GoPackageBuilder) -> None:
    go_package.write({"api.go": SHAPES})
    body = _body(go_package, "Widget")

    assert "<td>array of arrays of int</td>" in body
    assert "<td>base64 string</td>" in body
    assert "<td>object of string</td>" in body
    assert '<td><a href="#type-Key">Key</a></td>' in body
    assert (
        '<td>array of objects of <a href="#type-of-pairs-element">'
        "type of pairs element</a></td>"
    ) in body
    assert '"Fn"' not in body


def test_linked_types_are_queued_once(go_package: GoPackageBuilder) -> None:
    go_package.write({"api.go": SHAPES})
    generator = go_package.generator()
    declaration = generator.resolve("Widget")
    generator.renderer.render_body(declaration.type, declaration.scope)

    sections = generator.queue.drain(generator.renderer.render_item)
    assert len(sections) == 2
    assert sections[0].startswith('<h4 id="type-Key">Type Key</h4>')
    assert "<p>JSON string.</p>" in sections[0]
    assert sections[1].startswith('<h4 id="type-of-pairs-element">Type of pairs element</h4>')
    assert '<td>"Left"</td>' in sections[1]


def test_integer_map_keys_are_rejected(go_package: GoPackageBuilder) -> None:
    go_package.write({"api.go": "package api\n\ntype Bad map[int]string\n"})
    with pytest.raises(UnsupportedMapKeyError, match=r"got int"):
        _body(go_package, "Bad")


def test_describe_renders_go_like_text() -> None:
    expr = MapType(NamedType("string"), ArrayType(PointerType(NamedType("Item", "models"))))
    assert describe(expr) == "map[string][]*models.Item"
    assert describe(StructType()) == "struct{...}"


def test_escape_text_leaves_quotes() -> None:
    assert escape_text('"a" < b & c') == '"a" &lt; b &amp; c'
