"""认证路由

POST /api/auth/login: 用户名 + 密码换取 bearer token
POST /api/auth/logout: 注销当前 token
GET /api/auth/me: 当前登录用户
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from taskhub.core.models import Result, User

from ..deps import current_user, get_row_store, get_sessions, get_token
from ..responses import envelope
from ..services.auth_service import AuthService

router = APIRouter()


class LoginRequest(BaseModel):
    username: str = ""
    password: str = ""


class LoginResponse(BaseModel):
    token: str
    user: User


@router.post("/api/auth/login")
async def login(
    body: LoginRequest,
    store=Depends(get_row_store),
    sessions=Depends(get_sessions),
):
    """校验凭据并签发会话 token"""
    result = await AuthService(store).authenticate(body.username, body.password)
    if not result.ok:
        return envelope(result)

    token = sessions.issue(result.data)
    return envelope(Result.success(LoginResponse(token=token, user=result.data)))


@router.post("/api/auth/logout")
async def logout(
    user: User = Depends(current_user),
    token: str | None = Depends(get_token),
    sessions=Depends(get_sessions),
):
    sessions.revoke(token)
    return envelope(Result.success({"user_id": user.user_id}))


@router.get("/api/auth/me")
async def me(user: User = Depends(current_user)):
    return envelope(Result.success(user))
