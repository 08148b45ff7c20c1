"""Alert batch to chat message renderers."""

from matrix_receiver.renderers.base import BaseRenderer
from matrix_receiver.renderers.fixed import FixedFormatRenderer
from matrix_receiver.renderers.template import (
    DEFAULT_HTML_TEMPLATE,
    TemplateRenderer,
    compile_template,
)

__all__ = [
    "BaseRenderer",
    "DEFAULT_HTML_TEMPLATE",
    "FixedFormatRenderer",
    "TemplateRenderer",
    "compile_template",
    "create_renderer",
]


def create_renderer(mode: str, html_template: str) -> BaseRenderer:
    """Create the renderer selected by configuration."""
    if mode == "fixed":
        return FixedFormatRenderer()
    elif mode == "template":
        return TemplateRenderer(compile_template(html_template))
    else:
        raise ValueError(f"Unknown rendering mode: {mode}")
