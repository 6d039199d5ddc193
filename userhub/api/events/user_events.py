"""User Events — Socket.IO adapter over UserService.

Invariants:
    - Every event opens its own DB session and closes it before acking
    - UserHubError → its ack; any other exception → logged with traceback,
      acked as "Internal server error"
    - create/update/delete broadcast user:created / user:updated / user:deleted
      to every peer except the sender, and only after the write succeeded
    - Payload parsing and pagination use the same helpers as the HTTP routes

Design Decisions:
    - session_scope injected as a callable: main.py hands in the app-owned
      DatabaseSessionManager, tests hand in a bare async_sessionmaker
    - Handlers registered with sio.on(name, handler=...) because event names
      contain ':' and cannot be AsyncNamespace method names
"""

import logging
from typing import Any, AsyncContextManager, Awaitable, Callable

import socketio
from sqlalchemy.ext.asyncio import AsyncSession

from userhub.core.errors import UserHubError
from userhub.core.pagination import clamp_pagination
from userhub.schemas.user import (
    UserCreate,
    UserIdPayload,
    UserListPayload,
    UserUpdatePayload,
    parse_payload,
    serialize_user,
)
from userhub.services.user_service import UserService, build_user_service

logger = logging.getLogger(__name__)

SessionScope = Callable[[], AsyncContextManager[AsyncSession]]
Notification = tuple[str, dict] | None
Operation = Callable[[UserService], Awaitable[tuple[Any, Notification]]]


class UserEventHandlers:
    """Registers and serves the user:* socket events."""

    def __init__(self, sio: socketio.AsyncServer, session_scope: SessionScope):
        self._sio = sio
        self._session_scope = session_scope

    def register(self) -> None:
        self._sio.on("connect", handler=self.on_connect)
        self._sio.on("disconnect", handler=self.on_disconnect)
        self._sio.on("user:get", handler=self.get_user)
        self._sio.on("user:getAll", handler=self.get_all_users)
        self._sio.on("user:create", handler=self.create_user)
        self._sio.on("user:update", handler=self.update_user)
        self._sio.on("user:delete", handler=self.delete_user)
        self._sio.on("user:count", handler=self.count_users)

    async def on_connect(self, sid: str, environ: dict, auth: Any = None) -> None:
        logger.info(f"Socket connected: {sid}", extra={"sid": sid})

    async def on_disconnect(self, sid: str, reason: Any = None) -> None:
        logger.info(f"Socket disconnected: {sid}", extra={"sid": sid})

    async def get_user(self, sid: str, data: Any = None) -> dict:
        async def operation(service: UserService):
            payload = parse_payload(UserIdPayload, data)
            return serialize_user(await service.get_user_by_id(payload.id)), None

        return await self._handle(sid, "user:get", operation)

    async def get_all_users(self, sid: str, data: Any = None) -> dict:
        async def operation(service: UserService):
            payload = parse_payload(UserListPayload, data)
            limit, offset = clamp_pagination(payload.limit, payload.offset)
            users = await service.get_all_users(limit, offset)
            return [serialize_user(u) for u in users], None

        return await self._handle(sid, "user:getAll", operation)

    async def create_user(self, sid: str, data: Any = None) -> dict:
        async def operation(service: UserService):
            username, email, password = parse_payload(
                UserCreate, data,
            ).require_complete()
            user = serialize_user(
                await service.create_user(username, email, password),
            )
            return user, ("user:created", {"user": user})

        return await self._handle(sid, "user:create", operation)

    async def update_user(self, sid: str, data: Any = None) -> dict:
        async def operation(service: UserService):
            payload = parse_payload(UserUpdatePayload, data)
            user = serialize_user(
                await service.update_user(payload.id, payload.updates.changes()),
            )
            return user, ("user:updated", {"user": user})

        return await self._handle(sid, "user:update", operation)

    async def delete_user(self, sid: str, data: Any = None) -> dict:
        async def operation(service: UserService):
            payload = parse_payload(UserIdPayload, data)
            await service.delete_user(payload.id)
            return None, ("user:deleted", {"id": payload.id})

        return await self._handle(sid, "user:delete", operation)

    async def count_users(self, sid: str, data: Any = None) -> dict:
        async def operation(service: UserService):
            return {"count": await service.get_user_count()}, None

        return await self._handle(sid, "user:count", operation)

    async def _handle(self, sid: str, event: str, operation: Operation) -> dict:
        try:
            async with self._session_scope() as db:
                result, notification = await operation(build_user_service(db))
        except UserHubError as e:
            logger.log(
                e.log_level,
                f"{event} failed: {e.message}",
                extra={"sid": sid, "event": event, "error_code": e.code},
            )
            return e.to_ack()
        except Exception as e:
            logger.error(
                f"Unhandled exception in {event}: {e}",
                exc_info=True, extra={"sid": sid, "event": event},
            )
            return {"success": False, "error": "Internal server error"}

        if notification:
            name, body = notification
            await self._sio.emit(name, body, skip_sid=sid)

        ack: dict[str, Any] = {"success": True}
        if result is not None:
            ack["data"] = result
        return ack
