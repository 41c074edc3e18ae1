from __future__ import annotations

from jsondoc.postproc.nav import NavigationBuilder


HTML = """
<h1 id="api">API</h1>
<h2 id="users">Users</h2>
<div class="endpoint">
<h3 id="type-createUser">Input (createUser)</h3>
<h4 id="type-Address">Type Address</h4>
</div>
<h3 id="type-User">Output (<em>User</em>)</h3>
<h2 id="orders">Orders</h2>
<h2>Unanchored</h2>
"""


def test_headings_collects_anchored_levels() -> None:
    headings = NavigationBuilder().headings(HTML)
    assert headings == [
        (2, "users", "Users"),
        (3, "type-createUser", "Input (createUser)"),
        (3, "type-User", "Output (User)"),
        (2, "orders", "Orders"),
    ]


def test_build_nests_lists_by_level() -> None:
    nav = NavigationBuilder().build(HTML)
    assert nav == "\n".join(
        [
            "<nav>",
            "<ul>",
            '<li><a href="#users">Users</a>',
            "<ul>",
            '<li><a href="#type-createUser">Input (createUser)</a></li>',
            '<li><a href="#type-User">Output (User)</a></li>',
            "</ul>",
            "</li>",
            '<li><a href="#orders">Orders</a></li>',
            "</ul>",
            "</nav>",
        ]
    )


def test_build_without_headings_returns_empty() -> None:
    assert NavigationBuilder().build("<p>nothing here</p>") == ""


def test_levels_are_configurable() -> None:
    nav = NavigationBuilder(levels=(4,)).build(HTML)
    assert '<li><a href="#type-Address">Type Address</a></li>' in nav
    assert "users" not in nav


def test_skipped_levels_stay_inside_list_items() -> None:
    nav = NavigationBuilder(levels=(2, 3, 4)).build(
        '<h2 id="a">A</h2>\n<h4 id="b">B</h4>\n<h2 id="c">C</h2>'
    )
    assert nav == "\n".join(
        [
            "<nav>",
            "<ul>",
            '<li><a href="#a">A</a>',
            "<ul>",
            "<li>",
            "<ul>",
            '<li><a href="#b">B</a></li>',
            "</ul>",
            "</li>",
            "</ul>",
            "</li>",
            '<li><a href="#c">C</a></li>',
            "</ul>",
            "</nav>",
        ]
    )
