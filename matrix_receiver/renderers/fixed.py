"""Fixed layout renderer: one message per alert."""

from markupsafe import Markup

from matrix_receiver.models import Alert, AlertBatch, RenderedMessage
from matrix_receiver.renderers.base import BaseRenderer

FIRING_MARKER = Markup('<b><font color="red">FIRING</font></b>')
RESOLVED_MARKER = Markup('<b><font color="green">RESOLVED</font></b>')


def status_marker(status: str) -> Markup:
    if status == "firing":
        return FIRING_MARKER
    if status == "resolved":
        return RESOLVED_MARKER
    return Markup("<b>{}</b>").format(status)


class FixedFormatRenderer(BaseRenderer):
    """Renders `<marker> <name label> >> <summary annotation>` for each alert."""

    @property
    def name(self) -> str:
        return "fixed"

    def render_alert(self, alert: Alert) -> RenderedMessage:
        html = Markup("{} {} &gt;&gt; {}").format(
            status_marker(alert.status), alert.name, alert.summary
        )
        return RenderedMessage.from_html(html)

    def render(self, batch: AlertBatch) -> list[RenderedMessage]:
        return [self.render_alert(alert) for alert in batch.alerts]
