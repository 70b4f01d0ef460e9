"""UserService -- 用户管理与个人资料

管理员路径：list/get/create/update/delete。
自助路径：get_profile / update_profile（仅用户名）/ change_password。
"""

import structlog
from taskhub.core.config import PASSWORD_MIN_LENGTH
from taskhub.core.models import (
    ErrorKind,
    Result,
    User,
    UserCreate,
    UsernameAvailability,
    UserUpdate,
)
from taskhub.core.passwords import hash_password, verify_password
from taskhub.core.store import AnyOf, Contains, Eq, Neq, Order
from taskhub.core.views import USER_AUTH_COLUMNS, USER_PUBLIC_COLUMNS

from .auth_service import sanitize_user
from .base import StoreBackedService

log = structlog.get_logger()

USERNAME_AVAILABLE = "用户名可用"
USERNAME_TAKEN = "用户名已被使用"
PASSWORD_TOO_SHORT = f"密码长度至少{PASSWORD_MIN_LENGTH}位"


def _to_users(rows: list[dict]) -> list[User]:
    return [sanitize_user(row) for row in rows]


class UserService(StoreBackedService):
    """用户服务"""

    async def list_users(self, search: str | None = None) -> Result:
        """用户列表，按创建时间倒序；search 对用户名和角色做不区分大小写的子串匹配"""
        filters = []
        if search and search.strip():
            text = search.strip()
            filters.append(AnyOf(Contains("username", text), Contains("role", text)))
        return await self._run(
            "list_users",
            self._store.fetch(
                "users",
                columns=USER_PUBLIC_COLUMNS,
                filters=filters,
                order=Order("created_at", ascending=False),
            ),
            _to_users,
        )

    async def get_user(self, user_id: int) -> Result:
        return await self._run(
            "get_user",
            self._store.fetch_one(
                "users",
                columns=USER_PUBLIC_COLUMNS,
                filters=[Eq("user_id", user_id)],
            ),
            sanitize_user,
        )

    async def create_user(self, data: UserCreate) -> Result:
        """新建用户，密码哈希后入库"""
        username = data.username.strip()
        if not username:
            return Result.failure(ErrorKind.VALIDATION, "请输入用户名")
        if not data.password:
            return Result.failure(ErrorKind.VALIDATION, "请输入密码")
        if len(data.password) < PASSWORD_MIN_LENGTH:
            return Result.failure(ErrorKind.VALIDATION, PASSWORD_TOO_SHORT)

        result = await self._run(
            "create_user",
            self._store.insert(
                "users",
                {
                    "username": username,
                    "password": hash_password(data.password),
                    "role": data.role,
                },
            ),
            sanitize_user,
        )
        if result.ok:
            log.info("user_created", user_id=result.data.user_id, role=result.data.role.value)
        return result

    async def update_user(self, user_id: int, data: UserUpdate) -> Result:
        """管理员更新用户；password 为空表示不修改"""
        changes: dict = {}
        if data.username is not None:
            username = data.username.strip()
            if not username:
                return Result.failure(ErrorKind.VALIDATION, "请输入用户名")
            changes["username"] = username
        if data.role is not None:
            changes["role"] = data.role
        if data.password:
            if len(data.password) < PASSWORD_MIN_LENGTH:
                return Result.failure(ErrorKind.VALIDATION, PASSWORD_TOO_SHORT)
            changes["password"] = hash_password(data.password)

        if not changes:
            return await self.get_user(user_id)

        return await self._run(
            "update_user",
            self._store.update("users", [Eq("user_id", user_id)], changes),
            sanitize_user,
        )

    async def delete_user(self, user_id: int) -> Result:
        """删除用户，返回被删除的行（不存在时为空列表）"""
        result = await self._run(
            "delete_user",
            self._store.delete("users", [Eq("user_id", user_id)]),
            _to_users,
        )
        if result.ok and result.data:
            log.info("user_deleted", user_id=user_id)
        return result

    async def check_username_availability(
        self,
        username: str,
        exclude_user_id: int | None = None,
    ) -> Result:
        """用户名可用性：除 exclude_user_id 外没有其他行使用该用户名"""
        username = (username or "").strip()
        if not username:
            return Result.failure(ErrorKind.VALIDATION, "请输入用户名")

        filters = [Eq("username", username)]
        if exclude_user_id is not None:
            filters.append(Neq("user_id", exclude_user_id))

        def _availability(rows: list[dict]) -> UsernameAvailability:
            if rows:
                return UsernameAvailability(available=False, message=USERNAME_TAKEN)
            return UsernameAvailability(available=True, message=USERNAME_AVAILABLE)

        return await self._run(
            "check_username_availability",
            self._store.fetch("users", columns=("user_id",), filters=filters, limit=1),
            _availability,
        )

    async def get_profile(self, user_id: int) -> Result:
        return await self.get_user(user_id)

    async def update_profile(self, user_id: int, username: str) -> Result:
        """用户自助修改用户名"""
        username = (username or "").strip()
        if not username:
            return Result.failure(ErrorKind.VALIDATION, "请输入新用户名")

        current = await self.get_user(user_id)
        if not current.ok:
            return current
        if current.data.username == username:
            return Result.failure(ErrorKind.VALIDATION, "用户名没有变化")

        availability = await self.check_username_availability(username, user_id)
        if not availability.ok:
            return availability
        if not availability.data.available:
            return Result.failure(ErrorKind.CONFLICT, USERNAME_TAKEN)

        result = await self._run(
            "update_profile",
            self._store.update("users", [Eq("user_id", user_id)], {"username": username}),
            sanitize_user,
        )
        if result.ok:
            log.info("profile_updated", user_id=user_id)
        return result

    async def change_password(
        self,
        user_id: int,
        current_password: str,
        new_password: str,
        confirm_password: str,
    ) -> Result:
        """修改密码：本地校验全部通过后才访问存储"""
        if not current_password:
            return Result.failure(ErrorKind.VALIDATION, "请输入当前密码")
        if not new_password:
            return Result.failure(ErrorKind.VALIDATION, "请输入新密码")
        if len(new_password) < PASSWORD_MIN_LENGTH:
            return Result.failure(ErrorKind.VALIDATION, f"新密码长度至少{PASSWORD_MIN_LENGTH}位")
        if new_password != confirm_password:
            return Result.failure(ErrorKind.VALIDATION, "两次输入的新密码不一致")
        if new_password == current_password:
            return Result.failure(ErrorKind.VALIDATION, "新密码不能与当前密码相同")

        stored = await self._run(
            "change_password",
            self._store.fetch_one(
                "users",
                columns=USER_AUTH_COLUMNS,
                filters=[Eq("user_id", user_id)],
            ),
        )
        if not stored.ok:
            return stored
        if not verify_password(stored.data.get("password"), current_password):
            return Result.failure(ErrorKind.VALIDATION, "当前密码不正确")

        result = await self._run(
            "change_password",
            self._store.update(
                "users",
                [Eq("user_id", user_id)],
                {"password": hash_password(new_password)},
            ),
            lambda row: True,
        )
        if result.ok:
            log.info("password_changed", user_id=user_id)
        return result
