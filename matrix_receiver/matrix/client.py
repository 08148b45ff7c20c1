"""Adapter over matrix-nio exposing the calls the receiver needs."""

import asyncio
import logging
from typing import Any

import aiohttp
from nio import AsyncClient, AsyncClientConfig, ErrorResponse, LocalProtocolError

from matrix_receiver.exceptions import MatrixError

logger = logging.getLogger(__name__)


class MatrixClient:
    """Token-authenticated nio client that turns error responses into MatrixError."""

    def __init__(
        self,
        homeserver: str,
        user_id: str,
        access_token: str,
        *,
        timeout: float = 30.0,
    ):
        self._homeserver = homeserver.rstrip("/")
        self._user_id = user_id
        # Delivery is at most once, so nio must not retry timeouts or rate limits
        config = AsyncClientConfig(request_timeout=timeout, max_timeouts=0, max_limit_exceeded=0)
        self._client = AsyncClient(self._homeserver, user_id, config=config)
        self._client.access_token = access_token
        self._client.user_id = user_id

    @property
    def homeserver(self) -> str:
        return self._homeserver

    @property
    def user_id(self) -> str:
        return self._user_id

    async def _call(self, operation: str, call) -> Any:
        try:
            response = await call
        except (aiohttp.ClientError, asyncio.TimeoutError, LocalProtocolError) as e:
            raise MatrixError(f"{operation} failed: {str(e) or type(e).__name__}") from e

        if isinstance(response, ErrorResponse):
            # nio keeps the Matrix errcode (M_FORBIDDEN, ...) in status_code
            reason = f"{response.status_code} {response.message}" if response.status_code else response.message
            raise MatrixError(f"{operation} failed: {reason}", errcode=response.status_code)
        return response

    async def whoami(self) -> str:
        response = await self._call("whoami", self._client.whoami())
        return response.user_id or ""

    async def joined_rooms(self) -> set[str]:
        response = await self._call("joined_rooms", self._client.joined_rooms())
        return set(response.rooms)

    async def join_room(self, room_id: str) -> str:
        response = await self._call(f"join {room_id}", self._client.join(room_id))
        return response.room_id

    async def send_message_event(self, room_id: str, event_type: str, content: dict[str, Any]) -> str:
        response = await self._call(
            f"send to {room_id}",
            self._client.room_send(room_id, event_type, content, ignore_unverified_devices=True),
        )
        logger.debug(f"Sent {event_type} to {room_id}: {response.event_id}")
        return response.event_id

    async def aclose(self) -> None:
        await self._client.close()
