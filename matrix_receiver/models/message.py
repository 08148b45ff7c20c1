"""Rendered chat message."""

import re
from typing import Any

from markupsafe import Markup
from pydantic import BaseModel, ConfigDict

MESSAGE_EVENT_TYPE = "m.room.message"
HTML_FORMAT = "org.matrix.custom.html"

_LINE_BREAK_RE = re.compile(r"<br\s*/?>|</p>|</li>|</div>", re.IGNORECASE)


def html_to_text(html: str) -> str:
    """Strip markup, keeping one line per `<br>` or closed block element."""
    lines = (Markup(part).striptags() for part in _LINE_BREAK_RE.split(str(html)))
    return "\n".join(line for line in lines if line)


class RenderedMessage(BaseModel):
    """HTML message body plus its plain-text fallback."""

    model_config = ConfigDict(frozen=True)

    formatted_body: str
    body: str

    @classmethod
    def from_html(cls, html: str) -> "RenderedMessage":
        return cls(formatted_body=str(html), body=html_to_text(html))

    def to_event_content(self) -> dict[str, Any]:
        return {
            "msgtype": "m.text",
            "body": self.body,
            "format": HTML_FORMAT,
            "formatted_body": self.formatted_body,
        }
