"""Template renderer: one message for the whole batch.

Templates are Jinja2 with HTML autoescaping. The context carries the batch
under its webhook field names, so a template reads like::

    {% for alert in alerts %}[{{ alert.status }}] {{ alert.labels.instance }}<br/>{% endfor %}

Missing labels or annotations, and lookups chained through them, render as
empty strings. `firingAlerts` and `resolvedAlerts` hold the alerts by status.
"""

import logging
from collections.abc import Mapping
from typing import Any

from jinja2 import ChainableUndefined, Environment, Template, TemplateSyntaxError

from matrix_receiver.exceptions import TemplateError
from matrix_receiver.models import AlertBatch, RenderedMessage
from matrix_receiver.renderers.base import BaseRenderer

logger = logging.getLogger(__name__)

DEFAULT_HTML_TEMPLATE = """\
{% for alert in alerts -%}
[{{ alert.status }}] {{ alert.labels.instance }} - {{ alert.annotations.summary }}<br/>
{% endfor -%}
"""


class AlertEnvironment(Environment):
    """Environment where `labels.items` means the label, not `dict.items`."""

    def getattr(self, obj: Any, attribute: str) -> Any:
        if isinstance(obj, Mapping) and attribute in obj:
            return obj[attribute]
        return super().getattr(obj, attribute)


_environment = AlertEnvironment(autoescape=True, undefined=ChainableUndefined)


def compile_template(text: str) -> Template:
    """Parse a message template without executing it."""
    if not text or not text.strip():
        raise TemplateError("Message template is empty")
    try:
        return _environment.from_string(text)
    except TemplateSyntaxError as e:
        raise TemplateError(f"Invalid message template (line {e.lineno}): {e.message}", lineno=e.lineno) from e


class TemplateRenderer(BaseRenderer):
    """Renders the whole batch through a pre-compiled template."""

    def __init__(self, template: Template):
        self._template = template

    @property
    def name(self) -> str:
        return "template"

    def render(self, batch: AlertBatch) -> list[RenderedMessage]:
        html = self._template.render(batch.template_context())
        logger.debug(f"Rendered {len(batch.alerts)} alert(s) into one message")
        return [RenderedMessage.from_html(html)]
