"""LICENSE file synthesis."""

from __future__ import annotations

from datetime import date

from .templates import TemplateRenderer, get_renderer

DEFAULT_HOLDER = "The Authors"


def render_license(
    license_id: str,
    year: int | None = None,
    holder: str | None = None,
    renderer: TemplateRenderer | None = None,
) -> str:
    """Return the LICENSE text for *license_id* with the year interpolated.

    Identifiers without a dedicated template get the proprietary
    copyright-notice stub.  ``"none"`` is a caller error: the generator
    skips the LICENSE file instead of calling this function.
    """
    if license_id == "none":
        raise ValueError("No license text exists for 'none'; skip the LICENSE file instead")
    renderer = renderer or get_renderer()
    template = f"licenses/{license_id}.j2"
    if not renderer.has_template(template):
        template = "licenses/proprietary.j2"
    return renderer.render(
        template,
        {"year": year or date.today().year, "holder": holder or DEFAULT_HOLDER},
    )
