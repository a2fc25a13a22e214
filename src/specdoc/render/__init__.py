"""Template rendering of page containers.

Built-in template sets live under ``specdoc/render/templates/`` (``markdown``
and ``html``); any directory with the same layout can be used instead.
"""

from specdoc.render.renderer import (
    TemplateRenderer,
    available_template_sets,
    render_page,
    resolve_templates_dir,
)

__all__ = [
    "TemplateRenderer",
    "available_template_sets",
    "render_page",
    "resolve_templates_dir",
]
