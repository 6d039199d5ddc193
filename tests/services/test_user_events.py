"""User Events — socket acks and peer broadcasts.

Invariants:
    - Handler return value is the ack: {success, data?} or {success: false, error}
    - create/update/delete broadcast to every peer except the sender (skip_sid)
    - Failed operations broadcast nothing
"""

import pytest

from userhub.api.events.user_events import UserEventHandlers

ALICE = {"username": "alice", "email": "a@x.com", "password": "p"}


def test_register_wires_every_event(sio, user_events):
    registered = set(sio.handlers["/"])
    assert {
        "connect", "disconnect",
        "user:get", "user:getAll", "user:create",
        "user:update", "user:delete", "user:count",
    } <= registered


async def test_create_acks_and_broadcasts_to_others(sio, user_events):
    ack = await user_events.create_user("sid-1", ALICE)

    assert ack["success"] is True
    user = ack["data"]
    assert user["username"] == "alice"
    assert user["id"] > 0
    assert "password" not in user
    sio.emit.assert_awaited_once_with(
        "user:created", {"user": user}, skip_sid="sid-1",
    )


async def test_create_missing_fields(sio, user_events):
    ack = await user_events.create_user("sid-1", {"username": "alice"})
    assert ack == {
        "success": False, "error": "Username, email, and password are required",
    }
    sio.emit.assert_not_awaited()


async def test_create_duplicate_email(sio, user_events):
    await user_events.create_user("sid-1", ALICE)
    sio.emit.reset_mock()

    ack = await user_events.create_user("sid-2", {**ALICE, "username": "bob"})
    assert ack == {"success": False, "error": "User with this email already exists"}
    sio.emit.assert_not_awaited()


async def test_get_and_get_all(user_events):
    created = (await user_events.create_user("sid-1", ALICE))["data"]

    ack = await user_events.get_user("sid-1", {"id": created["id"]})
    assert ack == {"success": True, "data": created}

    ack = await user_events.get_all_users("sid-1", {"limit": 5000})
    assert ack["success"] is True
    assert [u["id"] for u in ack["data"]] == [created["id"]]


async def test_get_all_without_payload_uses_defaults(user_events):
    ack = await user_events.get_all_users("sid-1")
    assert ack == {"success": True, "data": []}


async def test_get_missing_user(user_events):
    ack = await user_events.get_user("sid-1", {"id": 404})
    assert ack == {"success": False, "error": "User with ID 404 not found"}


async def test_get_oversized_id_is_not_found(sio, user_events):
    huge = 99999999999999999999
    ack = await user_events.get_user("sid-1", {"id": huge})
    assert ack == {"success": False, "error": f"User with ID {huge} not found"}

    ack = await user_events.update_user("sid-1", {"id": huge, "updates": {"email": "n@x.com"}})
    assert ack == {"success": False, "error": f"User with ID {huge} not found"}
    sio.emit.assert_not_awaited()


async def test_get_without_id_is_validation_error(user_events):
    ack = await user_events.get_user("sid-1", {})
    assert ack["success"] is False
    assert ack["error"].startswith("Invalid id")


async def test_update_acks_and_broadcasts(sio, user_events):
    created = (await user_events.create_user("sid-1", ALICE))["data"]
    sio.emit.reset_mock()

    ack = await user_events.update_user(
        "sid-2", {"id": created["id"], "updates": {"email": "new@x.com"}},
    )
    assert ack["success"] is True
    assert ack["data"]["email"] == "new@x.com"
    sio.emit.assert_awaited_once_with(
        "user:updated", {"user": ack["data"]}, skip_sid="sid-2",
    )


async def test_update_missing_user(sio, user_events):
    ack = await user_events.update_user("sid-1", {"id": 9, "updates": {"email": "n@x.com"}})
    assert ack == {"success": False, "error": "User with ID 9 not found"}
    sio.emit.assert_not_awaited()


async def test_delete_acks_without_data_and_broadcasts_id(sio, user_events):
    created = (await user_events.create_user("sid-1", ALICE))["data"]
    sio.emit.reset_mock()

    ack = await user_events.delete_user("sid-1", {"id": created["id"]})
    assert ack == {"success": True}
    sio.emit.assert_awaited_once_with(
        "user:deleted", {"id": created["id"]}, skip_sid="sid-1",
    )

    ack = await user_events.get_user("sid-1", {"id": created["id"]})
    assert ack["success"] is False


async def test_count(user_events):
    await user_events.create_user("sid-1", ALICE)
    assert await user_events.count_users("sid-1") == {
        "success": True, "data": {"count": 1},
    }


async def test_unexpected_error_acks_generic_message(sio):
    def broken_scope():
        raise RuntimeError("Database not initialized")

    handlers = UserEventHandlers(sio, broken_scope)
    ack = await handlers.count_users("sid-1")
    assert ack == {"success": False, "error": "Internal server error"}


@pytest.mark.parametrize("handler", ["on_connect", "on_disconnect"])
async def test_connection_hooks_accept_optional_args(user_events, handler):
    hook = getattr(user_events, handler)
    if handler == "on_connect":
        assert await hook("sid-1", {}) is None
        assert await hook("sid-1", {}, {"token": "t"}) is None
    else:
        assert await hook("sid-1") is None
        assert await hook("sid-1", "client disconnect") is None
