"""CLI entrypoint for jsondoc."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from jinja2 import TemplateError

from .config import load_config
from .errors import JSONDocError
from .generator import DocumentGenerator
from .logging import configure_logging


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jsondoc",
        description="Render HTML documentation of JSON bodies from Go struct declarations.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "template",
        help="Markdown template containing title/import/input/output directives.",
    )
    parser.add_argument(
        "-o",
        "--output",
        help="Write the HTML page to this file (defaults to standard output).",
    )
    parser.add_argument(
        "--package",
        help="Go package directory holding the documented types (defaults to the template's directory).",
    )
    parser.add_argument(
        "--config",
        help="Path to .jsondoc.yml (defaults to the template's directory).",
    )
    parser.add_argument(
        "--log-file",
        help="Also write diagnostics to this file.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for jsondoc."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        log_file=Path(args.log_file) if args.log_file else None,
    )

    template = Path(args.template)
    try:
        config = load_config(Path(args.config) if args.config else template.parent)
        package = Path(args.package) if args.package else config.package or template.parent
        generator = DocumentGenerator.from_config(config, package=package)
        page = generator.render(template)
        if args.output:
            Path(args.output).write_text(page, encoding="utf-8")
        else:
            sys.stdout.write(page)
    except (JSONDocError, TemplateError, OSError) as exc:
        parser.exit(1, f"jsondoc: {exc}\n")


if __name__ == "__main__":
    main(sys.argv[1:])
