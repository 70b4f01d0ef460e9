"""用户管理路由（管理员）

GET/POST /api/users
GET /api/users/availability?username=  任意登录用户，排除自己
GET/PATCH/DELETE /api/users/{user_id}
"""

from fastapi import APIRouter, Depends, Query
from taskhub.core.models import User, UserCreate, UserUpdate

from ..deps import admin_user, current_user, get_row_store, get_sessions
from ..responses import envelope
from ..services.user_service import UserService

router = APIRouter()


@router.get("/api/users")
async def list_users(
    search: str | None = Query(default=None, description="按用户名或角色搜索"),
    _admin: User = Depends(admin_user),
    store=Depends(get_row_store),
):
    return envelope(await UserService(store).list_users(search))


@router.post("/api/users")
async def create_user(
    body: UserCreate,
    _admin: User = Depends(admin_user),
    store=Depends(get_row_store),
):
    return envelope(await UserService(store).create_user(body), success_status=201)


@router.get("/api/users/availability")
async def check_username_availability(
    username: str = Query(default=""),
    user: User = Depends(current_user),
    store=Depends(get_row_store),
):
    """用户名是否可用（不把自己算作占用者）"""
    return envelope(
        await UserService(store).check_username_availability(username, user.user_id)
    )


@router.get("/api/users/{user_id}")
async def get_user(
    user_id: int,
    _admin: User = Depends(admin_user),
    store=Depends(get_row_store),
):
    return envelope(await UserService(store).get_user(user_id))


@router.patch("/api/users/{user_id}")
async def update_user(
    user_id: int,
    body: UserUpdate,
    _admin: User = Depends(admin_user),
    store=Depends(get_row_store),
    sessions=Depends(get_sessions),
):
    result = await UserService(store).update_user(user_id, body)
    if result.ok:
        sessions.refresh(result.data)
    return envelope(result)


@router.delete("/api/users/{user_id}")
async def delete_user(
    user_id: int,
    _admin: User = Depends(admin_user),
    store=Depends(get_row_store),
    sessions=Depends(get_sessions),
):
    result = await UserService(store).delete_user(user_id)
    if result.ok:
        sessions.revoke_user(user_id)
    return envelope(result)
