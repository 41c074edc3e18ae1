from __future__ import annotations

from pathlib import Path

import pytest

from jsondoc.cli import _build_parser, main
from tests._fixtures.go_package import GoPackageBuilder

SOURCE = """
package api

type pingInput struct {
    Message string `json:"message"`
}
"""


def test_parser_accepts_documented_options() -> None:
    args = _build_parser().parse_args(
        ["index.md", "-o", "out.html", "--package", "api", "--config", "c.yml", "-v"]
    )
    assert args.template == "index.md"
    assert args.output == "out.html"
    assert args.package == "api"
    assert args.config == "c.yml"
    assert args.verbose is True
    assert args.log_file is None


def test_main_writes_output_file(go_package: GoPackageBuilder, tmp_path) -> None:
    go_package.write({"api.go": SOURCE})
    template = go_package.path() / "index.md"
    template.write_text('## Ping\n\n{{ input("pingInput") }}\n', encoding="utf-8")
    output = tmp_path / "out.html"

    main([str(template), "-o", str(output)])

    page = output.read_text(encoding="utf-8")
    assert "<title>index</title>" in page
    assert '<td>"message"</td>' in page


def test_main_writes_to_stdout(go_package: GoPackageBuilder, capsys) -> None:
    go_package.write({"api.go": SOURCE, ".jsondoc.yml": "title: Ping API\n"})
    template = go_package.path() / "index.md"
    template.write_text('{{ input("pingInput") }}\n', encoding="utf-8")

    main([str(template)])

    assert "<title>Ping API</title>" in capsys.readouterr().out


def test_main_reports_resolution_errors(go_package: GoPackageBuilder, capsys) -> None:
    go_package.write({"api.go": SOURCE})
    template = go_package.path() / "index.md"
    template.write_text('{{ input("missingInput") }}\n', encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main([str(template)])

    assert excinfo.value.code == 1
    assert "jsondoc: Type missingInput not found" in capsys.readouterr().err


def test_main_renders_bundled_example(tmp_path) -> None:
    example = Path(__file__).resolve().parents[1] / "example"
    output = tmp_path / "example.html"

    main([str(example / "index.md"), "-o", str(output)])

    page = output.read_text(encoding="utf-8")
    assert "<title>Example API</title>" in page
    assert '<h3 id="type-itemGetOutput">Output (itemGetOutput)</h3>' in page
    assert '<h3 id="output-Owner">Output (Owner)</h3>' in page
    assert "<td>base64 string</td>" in page
    assert "<p>JSON array of objects with no fields.</p>" in page
    assert '"hidden"' not in page
