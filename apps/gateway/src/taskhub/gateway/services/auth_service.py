"""AuthService -- 登录校验

按用户名取唯一行并校验密码，成功时返回去除密码的用户记录。
失败信息不区分"用户不存在"与"密码错误"。
"""

import structlog
from taskhub.core.models import ErrorKind, Result, User
from taskhub.core.passwords import hash_password, is_hashed, verify_password
from taskhub.core.store import Eq, RowNotFoundError, RowStoreError
from taskhub.core.views import USER_AUTH_COLUMNS

from .base import StoreBackedService

log = structlog.get_logger()

INVALID_CREDENTIALS = "用户名或密码错误"
LOGIN_UNAVAILABLE = "登录验证失败，请稍后重试"


def sanitize_user(row: dict) -> User:
    """去掉 password 字段后构造 User"""
    return User.model_validate({k: v for k, v in row.items() if k != "password"})


class AuthService(StoreBackedService):
    """认证服务"""

    async def authenticate(self, username: str, password: str) -> Result:
        """校验用户名与密码

        Returns:
            Result[User]：成功时 data 为去除密码的用户
        """
        username = (username or "").strip()
        if not username or not password:
            return Result.failure(ErrorKind.VALIDATION, "请输入用户名和密码")

        try:
            row = await self._store.fetch_one(
                "users",
                columns=USER_AUTH_COLUMNS,
                filters=[Eq("username", username)],
            )
        except RowNotFoundError:
            log.info("login_rejected", reason="credentials")
            return Result.failure(ErrorKind.AUTHENTICATION, INVALID_CREDENTIALS)
        except RowStoreError as e:
            log.warning("login_store_error", kind=e.kind.value, error=str(e))
            return Result.failure(e.kind, LOGIN_UNAVAILABLE, code=e.code)

        stored = row.get("password")
        if not verify_password(stored, password):
            log.info("login_rejected", reason="credentials")
            return Result.failure(ErrorKind.AUTHENTICATION, INVALID_CREDENTIALS)

        if not is_hashed(stored):
            await self._upgrade_password(row["user_id"], password)

        user = sanitize_user(row)
        log.info("login_succeeded", user_id=user.user_id)
        return Result.success(user)

    async def _upgrade_password(self, user_id: int, password: str) -> None:
        """历史明文密码在登录成功后改写为哈希；失败只记录日志"""
        try:
            await self._store.update(
                "users",
                [Eq("user_id", user_id)],
                {"password": hash_password(password)},
            )
        except RowStoreError as e:
            log.warning("password_upgrade_failed", user_id=user_id, error=str(e))
        else:
            log.info("password_upgraded", user_id=user_id)
