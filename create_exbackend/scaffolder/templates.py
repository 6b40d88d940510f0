"""Template lookup and Jinja2 rendering for project scaffolding.

Two kinds of templates ship with the package:

* ``templates/copy/<name>/`` -- four static project trees, one per
  language x ORM combination, copied verbatim by the copy strategy.
  ``resolve_template`` picks one.
* ``templates/generate/`` -- Jinja2 ``.j2`` sources rendered by the
  generate strategy through ``TemplateRenderer``.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from create_exbackend.config import Language, OrmChoice


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_TEMPLATE_ROOT = Path(__file__).parent / "templates"
_DEFAULT_TEMPLATE_DIR = _TEMPLATE_ROOT / "generate"


# ---------------------------------------------------------------------------
# Copy-template resolution
# ---------------------------------------------------------------------------

_TEMPLATE_MAP: dict[tuple[Language, OrmChoice], str] = {
    (Language.JS, OrmChoice.MONGOOSE): "mongoosejs",
    (Language.TS, OrmChoice.MONGOOSE): "mongoosets",
    (Language.JS, OrmChoice.PRISMA): "prismajs",
    (Language.TS, OrmChoice.PRISMA): "prismats",
}

TEMPLATE_NAMES: tuple[str, ...] = tuple(sorted(_TEMPLATE_MAP.values()))


def resolve_template(language: Language, orm: OrmChoice) -> str:
    """Return the copy-template directory name for a language/ORM pair."""
    return _TEMPLATE_MAP[(Language(language), OrmChoice(orm))]


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates for the generate strategy.

    Templates are rendered with a context dictionary built from the user's
    answers (project name, language flags, ORM choice, etc.).  Undefined
    variables raise instead of rendering as empty strings.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        if template_dir is None:
            template_dir = _DEFAULT_TEMPLATE_DIR
        self.template_dir = Path(template_dir)
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=select_autoescape([]),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["slugify"] = _slugify_filter

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"src/app.j2"``).
            context: Dictionary of variables available inside the template.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)


def _slugify_filter(value: str) -> str:
    """Convert a string to a URL/database-name safe slug."""
    slug = re.sub(r"[^a-z0-9]+", "-", value.lower().strip())
    return slug.strip("-")
