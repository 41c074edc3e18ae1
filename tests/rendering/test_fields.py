"""Tests for struct tag parsing and JSON key naming."""

from __future__ import annotations

import pytest

from jsondoc.errors import AnnotationError
from jsondoc.rendering.fields import (
    FieldName,
    lookup_tag,
    parse_json_tag,
    resolve_field_name,
    unquote_tag,
)


def test_untagged_exported_member_keeps_its_name() -> None:
    assert resolve_field_name("Name", None) == FieldName(key="Name")


def test_unexported_member_is_skipped() -> None:
    assert resolve_field_name("hidden", '`json:"hidden"`') is None


@pytest.mark.parametrize(
    ("tag", "expected"),
    [
        ('`json:"test"`', FieldName("test")),
        ('`json:"error,omitempty"`', FieldName("error", optional=True)),
        ('`json:",omitempty"`', FieldName("Field", optional=True)),
        ('`json:"stamp,omitzero"`', FieldName("stamp", optional=True)),
        ('`json:"count,string"`', FieldName("count")),
        ('`xml:"other"`', FieldName("Field")),
        ('`yaml:"y" json:"j"`', FieldName("j")),
    ],
)
def test_json_tag_controls_key(tag: str, expected: FieldName) -> None:
    assert resolve_field_name("Field", tag) == expected


@pytest.mark.parametrize("tag", ['`json:"-"`', '`json:"-,"`', '`json:"-,omitempty"`'])
def test_dash_tag_suppresses_member(tag: str) -> None:
    assert resolve_field_name("Secret", tag) is None


def test_display_uses_json_quoting() -> None:
    assert FieldName('say "hi"').display == '"say \\"hi\\""'
    assert FieldName("héllo").display == '"héllo"'


def test_interpreted_tag_literal_is_unquoted() -> None:
    assert unquote_tag('"json:\\"name\\""') == 'json:"name"'
    assert parse_json_tag('"json:\\"name,omitempty\\""').options == ("omitempty",)


def test_lookup_tag_returns_none_for_missing_key() -> None:
    assert lookup_tag('xml:"a" yaml:"b"', "json") is None


@pytest.mark.parametrize("tag", ["json", 'json:"unterminated', "json:value", ':"x"'])
def test_malformed_tags_raise(tag: str) -> None:
    with pytest.raises(AnnotationError):
        lookup_tag(tag, "json")


def test_malformed_literal_raises() -> None:
    with pytest.raises(AnnotationError):
        unquote_tag("json")
