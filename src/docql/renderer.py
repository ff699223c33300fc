"""HTML rendering of schema types.

Each non-wrapper kind has exactly one content template.  A page is rendered in
two passes: the kind template produces the content fragment, then the layout
template wraps it with the page title and the generation date.
"""

from __future__ import annotations

import datetime
import functools
from importlib import resources
from typing import TYPE_CHECKING, Any

import jinja2
from loguru import logger
from markupsafe import Markup

from docql.errors import TemplateLoadError, TemplateRenderError
from docql.filters import docblock, kind_prefix, type_ref_html
from docql.schema import DOCUMENT_KINDS, FullType, Kind, Schema
from docql.uses import UsageIndex

if TYPE_CHECKING:
    from docql.uses import TypeUse

# ---------------------------------------------------------------------------
# Template registry
# ---------------------------------------------------------------------------

TEMPLATES: dict[Kind, str] = {
    Kind.OBJECT: "object",
    Kind.INPUT_OBJECT: "input_object",
    Kind.SCALAR: "scalar",
    Kind.ENUM: "enum",
    Kind.INTERFACE: "interface",
    Kind.UNION: "union",
}

LAYOUT_TEMPLATE = "layout"
INDEX_TEMPLATE = "index"

_KIND_HEADINGS: dict[Kind, str] = {
    Kind.OBJECT: "Objects",
    Kind.INTERFACE: "Interfaces",
    Kind.UNION: "Unions",
    Kind.ENUM: "Enums",
    Kind.INPUT_OBJECT: "Input objects",
    Kind.SCALAR: "Scalars",
}

STYLESHEET = "style.css"
SEARCH_SCRIPT = "script.js"

# English month abbreviations, independent of LC_TIME
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def template_for(kind: Kind) -> str:
    """Template name for *kind*; wrapper kinds have none."""
    try:
        return TEMPLATES[kind]
    except KeyError:
        raise ValueError(f"{kind.value} types are never rendered as documents") from None


def load_static(name: str) -> str:
    """Contents of a static asset shipped next to the templates."""
    return resources.files("docql").joinpath("templates", name).read_text(encoding="utf-8")


def format_dates(today: datetime.date) -> tuple[str, str]:
    """``(ISO 8601, human readable)`` forms of *today*, e.g. ``("2026-10-05", "5 Oct 2026")``."""
    return today.isoformat(), f"{today.day} {_MONTHS[today.month - 1]} {today.year}"


def _build_environment(schema: Schema) -> jinja2.Environment:
    env = jinja2.Environment(
        loader=jinja2.PackageLoader("docql", "templates"),
        autoescape=jinja2.select_autoescape(["html"]),
        undefined=jinja2.StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
        keep_trailing_newline=True,
    )
    env.filters["t"] = functools.partial(type_ref_html, schema=schema)
    env.filters["docblock"] = docblock
    env.filters["kind"] = kind_prefix
    return env


# ---------------------------------------------------------------------------
# Renderer
# ---------------------------------------------------------------------------


class Renderer:
    """Renders the index page and one page per named type of a schema.

    Safe to share between concurrent tasks: rendering only reads the schema
    and the precomputed usage index.
    """

    def __init__(
        self,
        schema_name: str,
        today: datetime.date,
        schema: Schema,
        *,
        environment: jinja2.Environment | None = None,
    ) -> None:
        self.schema_name = schema_name
        self.schema = schema
        self.date_iso, self.date_human = format_dates(today)
        self._env = environment or _build_environment(schema)
        self._templates = self._load_templates()
        self._usage = UsageIndex(schema)

    def _load_templates(self) -> dict[str, jinja2.Template]:
        names = [LAYOUT_TEMPLATE, INDEX_TEMPLATE, *TEMPLATES.values()]
        templates: dict[str, jinja2.Template] = {}
        for name in names:
            try:
                templates[name] = self._env.get_template(f"{name}.html")
            except jinja2.TemplateError as exc:
                raise TemplateLoadError(f"Failed to load template '{name}': {exc}") from exc
        return templates

    def uses_of(self, full_type: FullType) -> list[TypeUse]:
        return self._usage.uses_of(full_type)

    def render_index(self) -> str:
        groups = []
        for kind in DOCUMENT_KINDS:
            types = sorted((t for t in self.schema.types if t.kind is kind), key=lambda t: t.name)
            if types:
                groups.append({"kind": kind, "heading": _KIND_HEADINGS[kind], "types": types})

        context = {
            "schema_name": self.schema_name,
            "query_type": self.schema.query_type.name,
            "mutation_type": self.schema.mutation_type.name if self.schema.mutation_type else None,
            "groups": groups,
        }
        return self._render(INDEX_TEMPLATE, self.schema_name, context)

    def render_type(self, full_type: FullType) -> str:
        """Render *full_type* with the template for its kind.

        Raises ``ValueError`` for List/NonNull types.
        """
        template = template_for(full_type.kind)
        uses = self.uses_of(full_type)
        logger.debug("Rendering {} {} ({} uses)", template, full_type.name, len(uses))
        context = {
            "schema_name": self.schema_name,
            template: full_type,
            "type": full_type,
            "uses": uses,
        }
        return self._render(template, full_type.name, context)

    def _render(self, template: str, title: str, context: dict[str, Any]) -> str:
        content = self._render_template(template, context)
        return self._render_template(
            LAYOUT_TEMPLATE,
            {
                "schema_name": self.schema_name,
                "title": title,
                "content": Markup(content),
                "date_iso": self.date_iso,
                "date_human": self.date_human,
            },
        )

    def _render_template(self, name: str, context: dict[str, Any]) -> str:
        try:
            return self._templates[name].render(context)
        except jinja2.TemplateError as exc:
            raise TemplateRenderError(f"Failed to render template '{name}': {exc}") from exc
