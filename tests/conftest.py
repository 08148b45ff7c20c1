from typing import Any

import pytest

from matrix_receiver.config import Settings
from matrix_receiver.exceptions import MatrixError

HOMESERVER = "https://matrix.example.org"
USER_ID = "@alertmanager:example.org"
ROOM_ID = "!alerts:example.org"


class FakeMatrixClient:
    """In-memory stand-in for MatrixClient that records every call."""

    def __init__(
        self,
        joined_rooms: set[str] | None = None,
        whoami: str = USER_ID,
        fail_whoami: bool = False,
        fail_joined_rooms: bool = False,
        fail_join: bool = False,
        fail_sends: set[int] | None = None,
    ):
        self._joined_rooms = set(joined_rooms or ())
        self._whoami = whoami
        self.fail_whoami = fail_whoami
        self.fail_joined_rooms = fail_joined_rooms
        self.fail_join = fail_join
        self.fail_sends = fail_sends or set()
        self.factory_args: tuple[str, ...] = ()
        self.joins: list[str] = []
        self.send_attempts: list[tuple[str, str, dict[str, Any]]] = []
        self.sent: list[tuple[str, str, dict[str, Any]]] = []
        self.closed = False

    def factory(self, homeserver: str, user_id: str, access_token: str) -> "FakeMatrixClient":
        self.factory_args = (homeserver, user_id, access_token)
        return self

    async def whoami(self) -> str:
        if self.fail_whoami:
            raise MatrixError("Unknown token", status_code=401, errcode="M_UNKNOWN_TOKEN")
        return self._whoami

    async def joined_rooms(self) -> set[str]:
        if self.fail_joined_rooms:
            raise MatrixError("Server error", status_code=500)
        return set(self._joined_rooms)

    async def join_room(self, room_id: str) -> str:
        self.joins.append(room_id)
        if self.fail_join:
            raise MatrixError("You are not invited to this room.", status_code=403, errcode="M_FORBIDDEN")
        self._joined_rooms.add(room_id)
        return room_id

    async def send_message_event(self, room_id: str, event_type: str, content: dict[str, Any]) -> str:
        self.send_attempts.append((room_id, event_type, content))
        if len(self.send_attempts) in self.fail_sends:
            raise MatrixError("Too many requests", status_code=429, errcode="M_LIMIT_EXCEEDED")
        self.sent.append((room_id, event_type, content))
        return f"$event{len(self.send_attempts)}"

    async def aclose(self) -> None:
        self.closed = True


def make_settings(http: dict[str, Any] | None = None, **general: Any) -> Settings:
    return Settings(
        matrix={"homeserver": HOMESERVER, "room_id": ROOM_ID},
        user={"id": USER_ID, "token": "secret-token"},
        http=http or {},
        general=general,
    )


def alert(status: str = "firing", name: str = "x", summary: str = "down", **labels: str) -> dict[str, Any]:
    return {
        "status": status,
        "labels": {"name": name, **labels},
        "annotations": {"summary": summary},
    }


@pytest.fixture
def fake_client() -> FakeMatrixClient:
    return FakeMatrixClient(joined_rooms={ROOM_ID})
