"""依赖注入模块 -- 通过 FastAPI Depends 注入存储、会话与当前用户

RowStore 与 SessionRegistry 通过 app.state 管理，在 lifespan 中初始化/清理。
"""

from fastapi import Depends, Header, Request
from taskhub.core.models import ErrorKind, User
from taskhub.core.store import RowStore

from .services.session import SessionRegistry


class AccessDenied(Exception):
    """访问守卫拒绝（未登录 / 权限不足），由 main 中的异常处理器渲染"""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message


def get_row_store(request: Request) -> RowStore:
    """从 app.state 获取 RowStore 实例"""
    return request.app.state.row_store


def get_sessions(request: Request) -> SessionRegistry:
    """从 app.state 获取 SessionRegistry 实例"""
    return request.app.state.sessions


def get_token(authorization: str | None = Header(default=None)) -> str | None:
    """解析 Authorization: Bearer <token>"""
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def current_user(
    token: str | None = Depends(get_token),
    sessions: SessionRegistry = Depends(get_sessions),
) -> User:
    """当前登录用户；未登录或 token 无效时拒绝"""
    user = sessions.resolve(token)
    if user is None:
        raise AccessDenied(ErrorKind.AUTHENTICATION, "请先登录")
    return user


def admin_user(user: User = Depends(current_user)) -> User:
    """管理员守卫"""
    if not user.is_admin:
        raise AccessDenied(ErrorKind.AUTHORIZATION, "需要管理员权限")
    return user
