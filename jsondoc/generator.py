"""Document generation: template directives, render queue draining and page assembly."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, Iterable, Optional

import markdown
from jinja2 import Environment, FileSystemLoader

from .config import DEFAULT_MARKDOWN_EXTENSIONS, JSONDocConfig
from .errors import (
    DuplicateImportAliasError,
    NameNotFoundError,
    NotATypeError,
    UnregisteredAliasError,
)
from .index.base import DeclarationIndex
from .index.packages import PackageIndex
from .logging import get_logger
from .models import Declaration
from .postproc.nav import NavigationBuilder
from .rendering.queue import LinkTable, RenderQueue, declaration_key
from .rendering.types import TypeRenderer, escape_text

_TEMPLATES_DIR = Path(__file__).with_name("templates")


def create_environment(templates_dir: Path | None = None) -> Environment:
    """Return the Jinja environment holding the HTML fragment templates."""
    loader = FileSystemLoader(str(templates_dir or _TEMPLATES_DIR))
    env = Environment(loader=loader, autoescape=False, trim_blocks=True, lstrip_blocks=True)
    env.filters["text"] = escape_text
    return env


class DocumentGenerator:
    """Generation context for one run: directives, dedup tables and the render queue."""

    def __init__(
        self,
        index: DeclarationIndex,
        *,
        title: Optional[str] = None,
        markdown_extensions: Iterable[str] = DEFAULT_MARKDOWN_EXTENSIONS,
        nav: bool = True,
        nav_builder: NavigationBuilder | None = None,
        env: Environment | None = None,
    ) -> None:
        self.index = index
        self.title = title
        self.markdown_extensions = list(markdown_extensions)
        self.nav = nav
        self.nav_builder = nav_builder or NavigationBuilder()
        self.aliases: Dict[str, str] = {}
        self.links = LinkTable()
        self.queue = RenderQueue()
        self._env = env or create_environment()
        self.renderer = TypeRenderer(
            index, self.links, self.queue, self._env, aliases=self.aliases
        )
        self.logger = get_logger("generator")

    @classmethod
    def from_config(
        cls, config: JSONDocConfig, *, package: Path | None = None
    ) -> "DocumentGenerator":
        """Build a generator reading Go sources from ``package`` (or the configured one)."""
        root = package or config.package or config.root
        index = PackageIndex(root, search_paths=config.search_paths, builtins=config.builtins)
        return cls(
            index,
            title=config.title,
            markdown_extensions=config.markdown.extensions,
            nav=config.nav,
        )

    # ------------------------------------------------------------------
    # Template directives

    def directives(self) -> Dict[str, Callable[..., str]]:
        return {
            "title": self.set_title,
            "import": self.import_package,
            "input": self.input,
            "output": self.output,
        }

    def set_title(self, title: str) -> str:
        self.title = title
        return ""

    def import_package(self, alias: str, path: str) -> str:
        if alias in self.aliases:
            raise DuplicateImportAliasError(alias)
        self.logger.debug("Registered package alias %s -> %s", alias, path)
        self.aliases[alias] = path
        return ""

    def input(self, name: str) -> str:
        return self._render_root("Input", name, name)

    def output(self, name: str) -> str:
        return self._render_root("Output", name.rpartition(".")[2], name)

    def _render_root(self, label: str, heading: str, name: str) -> str:
        declaration = self.resolve(name)
        key = declaration_key(declaration)
        if key in self.links:
            anchor = self.links.reserve(f"{label.lower()}-{declaration.name}")
        else:
            anchor = self.links.assign(key, f"type-{declaration.name}")

        body = self.renderer.render_body(declaration.type, declaration.scope)
        self.logger.debug("Draining %d queued types for %s %s", len(self.queue), label.lower(), name)
        sections = self.queue.drain(self.renderer.render_item)
        return (
            self._env.get_template("directive.html.j2")
            .render(
                label=label,
                name=heading,
                anchor=anchor,
                doc=declaration.doc,
                body=body,
                sections=sections,
            )
            .strip()
        )

    def resolve(self, name: str) -> Declaration:
        """Resolve a possibly alias-qualified directive name to a type declaration."""
        alias, dot, bare = name.rpartition(".")
        if dot:
            path = self.aliases.get(alias)
            if path is None:
                raise UnregisteredAliasError(alias)
            namespace = self.index.lookup(path)
        else:
            namespace = self.index.root()
        declaration = self.index.find_declaration(bare, namespace)
        if declaration is None:
            raise NameNotFoundError(bare, namespace.path)
        if not declaration.is_type:
            raise NotATypeError(name, declaration.kind)
        return declaration

    # ------------------------------------------------------------------
    # Template evaluation and page assembly

    def render_markdown(self, template_path: Path) -> str:
        """Evaluate the directives of a template file and return the resulting markdown."""
        template_path = Path(template_path)
        env = Environment(
            loader=FileSystemLoader(str(template_path.parent)),
            autoescape=False,
            keep_trailing_newline=True,
        )
        env.globals.update(self.directives())
        return env.get_template(template_path.name).render()

    def render_markdown_string(self, source: str) -> str:
        env = Environment(autoescape=False, keep_trailing_newline=True)
        env.globals.update(self.directives())
        return env.from_string(source).render()

    def render(self, template_path: Path) -> str:
        """Return the complete HTML page for a template file."""
        template_path = Path(template_path)
        markdown_source = self.render_markdown(template_path)
        if self.title is None:
            self.title = template_path.stem
        return self.assemble(markdown_source)

    def assemble(self, markdown_source: str) -> str:
        body = markdown.markdown(
            markdown_source, extensions=self.markdown_extensions, output_format="html"
        )
        nav = self.nav_builder.build(body) if self.nav else ""
        return self._env.get_template("page.html.j2").render(
            title=self.title or "", nav=nav, body=body
        )


__all__ = ["DocumentGenerator", "create_environment"]
