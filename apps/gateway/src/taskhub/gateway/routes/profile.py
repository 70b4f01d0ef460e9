"""个人资料路由（当前登录用户）

GET/PATCH /api/profile
POST /api/profile/password
GET /api/profile/stats
GET /api/profile/dashboard
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from taskhub.core.models import User

from ..deps import current_user, get_row_store, get_sessions
from ..responses import envelope
from ..services.report_service import ReportService
from ..services.user_service import UserService

router = APIRouter()


class ProfileUpdate(BaseModel):
    username: str = ""


class PasswordChange(BaseModel):
    current_password: str = ""
    new_password: str = ""
    confirm_password: str = ""


@router.get("/api/profile")
async def get_profile(
    user: User = Depends(current_user),
    store=Depends(get_row_store),
):
    return envelope(await UserService(store).get_profile(user.user_id))


@router.patch("/api/profile")
async def update_profile(
    body: ProfileUpdate,
    user: User = Depends(current_user),
    store=Depends(get_row_store),
    sessions=Depends(get_sessions),
):
    """修改自己的用户名，成功后同步会话"""
    result = await UserService(store).update_profile(user.user_id, body.username)
    if result.ok:
        sessions.refresh(result.data)
    return envelope(result)


@router.post("/api/profile/password")
async def change_password(
    body: PasswordChange,
    user: User = Depends(current_user),
    store=Depends(get_row_store),
):
    return envelope(
        await UserService(store).change_password(
            user.user_id,
            body.current_password,
            body.new_password,
            body.confirm_password,
        )
    )


@router.get("/api/profile/stats")
async def personal_stats(
    user: User = Depends(current_user),
    store=Depends(get_row_store),
):
    return envelope(await ReportService(store).personal_stats(user.user_id))


@router.get("/api/profile/dashboard")
async def personal_dashboard(
    user: User = Depends(current_user),
    store=Depends(get_row_store),
):
    return envelope(await ReportService(store).personal_dashboard(user.user_id))
