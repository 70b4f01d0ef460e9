"""Row Store 异常体系

所有存储实现（SQLite / REST）抛出同一组异常，
上层服务只捕获 RowStoreError 并原样转为 {data: None, error}。
"""

from typing import Any

from ..models.enums import ErrorKind


class RowStoreError(Exception):
    """存储层基础异常"""

    kind: ErrorKind = ErrorKind.STORE

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: Any = None,
    ) -> None:
        """
        Args:
            message: 存储层返回的错误描述
            code: 存储层错误码（如 PostgREST 的 PGRST116、Postgres 的 23505）
            details: 存储层附加信息
        """
        super().__init__(message)
        self.code = code
        self.details = details


class RowNotFoundError(RowStoreError):
    """按条件查询单行时结果为 0 行或多行"""

    kind = ErrorKind.NOT_FOUND


class RowConflictError(RowStoreError):
    """违反唯一约束或外键约束"""

    kind = ErrorKind.CONFLICT


class RowStoreUnavailableError(RowStoreError):
    """存储不可达（连接失败、超时等）"""

    kind = ErrorKind.UNAVAILABLE

    def __init__(self, target: str, original_error: Exception) -> None:
        """
        Args:
            target: 尝试连接的地址或数据库路径
            original_error: 原始异常
        """
        super().__init__(f"存储服务不可达: {target} -- {original_error}", code="unavailable")
        self.target = target
        self.original_error = original_error
