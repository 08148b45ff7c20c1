import pytest

from matrix_receiver.exceptions import AuthError, RoomAccessError
from matrix_receiver.session import establish
from tests.conftest import HOMESERVER, ROOM_ID, USER_ID, FakeMatrixClient


async def test_already_joined_room_skips_join():
    client = FakeMatrixClient(joined_rooms={"!other:example.org", ROOM_ID})

    session = await establish(HOMESERVER, USER_ID, "token", ROOM_ID, client_factory=client.factory)

    assert client.joins == []
    assert session.room_id == ROOM_ID
    assert session.user_id == USER_ID
    assert session.client is client
    assert client.factory_args == (HOMESERVER, USER_ID, "token")


async def test_joins_room_when_not_a_member():
    client = FakeMatrixClient(joined_rooms={"!other:example.org"})

    session = await establish(HOMESERVER, USER_ID, "token", ROOM_ID, client_factory=client.factory)

    assert client.joins == [ROOM_ID]
    assert session.room_id == ROOM_ID


async def test_second_bootstrap_is_idempotent():
    client = FakeMatrixClient()

    await establish(HOMESERVER, USER_ID, "token", ROOM_ID, client_factory=client.factory)
    await establish(HOMESERVER, USER_ID, "token", ROOM_ID, client_factory=client.factory)

    assert client.joins == [ROOM_ID]


async def test_rejected_token_raises_auth_error():
    client = FakeMatrixClient(fail_whoami=True)

    with pytest.raises(AuthError) as exc_info:
        await establish(HOMESERVER, USER_ID, "bad", ROOM_ID, client_factory=client.factory)

    assert exc_info.value.homeserver == HOMESERVER
    assert "Unknown token" in exc_info.value.message
    assert client.joins == []
    assert client.closed


async def test_token_for_other_user_raises_auth_error():
    client = FakeMatrixClient(whoami="@someone:example.org")

    with pytest.raises(AuthError, match="@someone:example.org"):
        await establish(HOMESERVER, USER_ID, "token", ROOM_ID, client_factory=client.factory)


async def test_join_failure_raises_room_access_error():
    client = FakeMatrixClient(fail_join=True)

    with pytest.raises(RoomAccessError) as exc_info:
        await establish(HOMESERVER, USER_ID, "token", ROOM_ID, client_factory=client.factory)

    assert exc_info.value.room_id == ROOM_ID
    assert client.joins == [ROOM_ID]
    assert client.closed


async def test_joined_rooms_failure_raises_room_access_error():
    client = FakeMatrixClient(fail_joined_rooms=True)

    with pytest.raises(RoomAccessError, match="joined rooms"):
        await establish(HOMESERVER, USER_ID, "token", ROOM_ID, client_factory=client.factory)

    assert client.joins == []


async def test_session_close_closes_client():
    client = FakeMatrixClient(joined_rooms={ROOM_ID})
    session = await establish(HOMESERVER, USER_ID, "token", ROOM_ID, client_factory=client.factory)

    await session.aclose()

    assert client.closed
