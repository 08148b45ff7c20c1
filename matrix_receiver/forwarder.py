"""Best-effort delivery of rendered messages to the target room."""

import logging

from matrix_receiver.exceptions import DeliveryError, MatrixError
from matrix_receiver.models import RenderedMessage
from matrix_receiver.models.message import MESSAGE_EVENT_TYPE
from matrix_receiver.session import Session

logger = logging.getLogger(__name__)

LOG_TRUNCATE = 200


def _truncate(text: str, limit: int = LOG_TRUNCATE) -> str:
    return text if len(text) <= limit else text[:limit] + "..."


class Forwarder:
    """Sends rendered messages as room message events. No retries."""

    async def forward(self, session: Session, message: RenderedMessage) -> str:
        """Send one message and return its event id."""
        try:
            return await session.client.send_message_event(
                session.room_id, MESSAGE_EVENT_TYPE, message.to_event_content()
            )
        except MatrixError as e:
            raise DeliveryError(session.room_id, message.body, e.message) from e

    async def forward_all(self, session: Session, messages: list[RenderedMessage]) -> list[bool]:
        """Forward every message, logging and skipping the ones that fail."""
        results: list[bool] = []
        for message in messages:
            logger.info(f"> {message.body}")
            try:
                await self.forward(session, message)
            except DeliveryError as e:
                logger.error(
                    f">> Could not forward to {e.room_id}: {e.message} "
                    f"(message: {_truncate(e.body)!r})"
                )
                results.append(False)
            else:
                results.append(True)
        return results
