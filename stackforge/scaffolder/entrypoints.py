"""Entry-point source file synthesis."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from .manifest import resolve_entry_path
from .templates import TemplateRenderer, get_renderer


class EntryPoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str
    content: str


def entry_template_for(
    language: str,
    framework: str,
    renderer: TemplateRenderer | None = None,
) -> str | None:
    """Return the template key for the pair, falling back to the language's hello world."""
    renderer = renderer or get_renderer()
    for key in (f"entry/{language}/{framework}.j2", f"entry/{language}/none.j2"):
        if renderer.has_template(key):
            return key
    return None


def synthesize_entry_point(
    language: str,
    framework: str,
    name: str,
    renderer: TemplateRenderer | None = None,
) -> EntryPoint | None:
    """Render the starter source file for ``(language, framework)``.

    Returns ``None`` for languages that ship no entry template at all
    (csharp, java, kotlin, swift, cpp); callers decide how to report that.
    """
    renderer = renderer or get_renderer()
    path = resolve_entry_path(language, framework)
    template = entry_template_for(language, framework, renderer)
    if path is None or template is None:
        return None
    content = renderer.render(template, {"name": name, "language": language, "framework": framework})
    return EntryPoint(path=path, content=content)
