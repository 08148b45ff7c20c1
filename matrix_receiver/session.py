"""Session bootstrap: authenticate and make sure the target room is joined."""

import logging
from dataclasses import dataclass
from typing import Callable

from matrix_receiver.exceptions import AuthError, MatrixError, RoomAccessError
from matrix_receiver.matrix import MatrixClient

logger = logging.getLogger(__name__)

ClientFactory = Callable[[str, str, str], MatrixClient]


@dataclass(frozen=True)
class Session:
    """Authenticated, room-joined handle shared by all requests."""

    client: MatrixClient
    user_id: str
    room_id: str

    async def aclose(self) -> None:
        await self.client.aclose()


async def establish(
    homeserver: str,
    user_id: str,
    access_token: str,
    room_id: str,
    *,
    client_factory: ClientFactory = MatrixClient,
) -> Session:
    """Log in to the homeserver and join `room_id` unless already a member.

    Raises:
        AuthError: the credentials were rejected or belong to another user.
        RoomAccessError: joined rooms could not be listed or the join failed.
    """
    logger.info(f"Connecting to Matrix homeserver {homeserver} as {user_id}")
    client = client_factory(homeserver, user_id, access_token)
    try:
        await _authenticate(client, homeserver, user_id)
        await _ensure_membership(client, user_id, room_id)
    except (AuthError, RoomAccessError):
        await client.aclose()
        raise
    return Session(client=client, user_id=user_id, room_id=room_id)


async def _authenticate(client: MatrixClient, homeserver: str, user_id: str) -> None:
    try:
        whoami = await client.whoami()
    except MatrixError as e:
        raise AuthError(homeserver, user_id, e.message) from e
    if whoami != user_id:
        raise AuthError(homeserver, user_id, f"access token belongs to {whoami or 'an unknown user'}")


async def _ensure_membership(client: MatrixClient, user_id: str, room_id: str) -> None:
    try:
        joined_rooms = await client.joined_rooms()
    except MatrixError as e:
        raise RoomAccessError(room_id, f"could not fetch joined rooms: {e.message}") from e

    if room_id in joined_rooms:
        logger.info(f"{user_id} is already part of {room_id}")
        return

    logger.info(f"Joining {room_id}")
    try:
        await client.join_room(room_id)
    except MatrixError as e:
        raise RoomAccessError(room_id, f"failed to join: {e.message}") from e
