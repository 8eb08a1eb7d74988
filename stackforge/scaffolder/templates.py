"""Jinja2 template rendering for generated project files.

Provides the TemplateRenderer class which loads Jinja2 templates from the
``stackforge/scaffolder/templates/`` directory (READMEs, licenses, entry
points, Python and Rust manifests) and renders them with project-specific
context data.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateNotFound, select_autoescape


# ---------------------------------------------------------------------------
# Template directory discovery
# ---------------------------------------------------------------------------

_DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------

class TemplateRenderer:
    """Renders Jinja2 templates for project scaffolding.

    The renderer discovers ``.j2`` template files under a configurable
    template directory.  Undefined variables raise instead of rendering as
    empty strings, so a template/context mismatch fails loudly in tests.
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

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the template directory (e.g.
                ``"entry/python/fastapi.j2"``).
            context: Dictionary of variables available inside the template.

        Returns:
            The rendered template content as a string.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)

    def has_template(self, template_path: str) -> bool:
        """Return ``True`` if *template_path* can be loaded."""
        try:
            self.env.get_template(template_path)
        except TemplateNotFound:
            return False
        return True


_default_renderer: TemplateRenderer | None = None


def get_renderer() -> TemplateRenderer:
    """Return the shared renderer for the bundled templates."""
    global _default_renderer
    if _default_renderer is None:
        _default_renderer = TemplateRenderer()
    return _default_renderer
