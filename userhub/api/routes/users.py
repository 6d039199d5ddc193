"""User Routes — REST adapter over UserService.

Invariants:
    - /stats/count is declared before /{user_id}
    - Pagination goes through clamp_pagination(); creation presence through
      UserCreate.require_complete() — the socket adapter uses the same two
    - Responses carry serialize_user() output, never the password column
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from userhub.api.responses import success_response
from userhub.core.pagination import clamp_pagination
from userhub.infrastructure.database import get_db
from userhub.schemas.user import UserCreate, UserUpdate, serialize_user
from userhub.services.user_service import UserService, build_user_service

router = APIRouter(prefix="/api/users", tags=["users"])


def get_user_service(db: AsyncSession = Depends(get_db)) -> UserService:
    return build_user_service(db)


@router.get("/stats/count")
async def get_user_count(service: UserService = Depends(get_user_service)):
    count = await service.get_user_count()
    return success_response({"count": count}, "User count retrieved successfully")


@router.get("")
async def get_all_users(
    limit: str | None = Query(None),
    offset: str | None = Query(None),
    service: UserService = Depends(get_user_service),
):
    page_limit, page_offset = clamp_pagination(limit, offset)
    users = await service.get_all_users(page_limit, page_offset)
    return success_response(
        [serialize_user(u) for u in users], "Users retrieved successfully",
    )


@router.get("/{user_id}")
async def get_user(
    user_id: int, service: UserService = Depends(get_user_service),
):
    user = await service.get_user_by_id(user_id)
    return success_response(serialize_user(user), "User retrieved successfully")


@router.post("")
async def create_user(
    body: UserCreate | None = None,
    service: UserService = Depends(get_user_service),
):
    username, email, password = (body or UserCreate()).require_complete()
    user = await service.create_user(username, email, password)
    return success_response(
        serialize_user(user), "User created successfully",
        status.HTTP_201_CREATED,
    )


@router.put("/{user_id}")
async def update_user(
    user_id: int,
    body: UserUpdate | None = None,
    service: UserService = Depends(get_user_service),
):
    changes = body.changes() if body else {}
    user = await service.update_user(user_id, changes)
    return success_response(serialize_user(user), "User updated successfully")


@router.delete("/{user_id}")
async def delete_user(
    user_id: int, service: UserService = Depends(get_user_service),
):
    await service.delete_user(user_id)
    return success_response(None, "User deleted successfully")
