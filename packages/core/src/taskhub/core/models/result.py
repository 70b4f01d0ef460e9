"""统一返回结构 -- {data, error}

每个对外操作都返回 Result：成功时 error 为 None，失败时 data 为 None。
data 可以合法地是空列表。
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field

from .enums import ErrorKind

T = TypeVar("T")


class ServiceError(BaseModel):
    """错误信息 -- message 面向用户可读"""

    kind: ErrorKind = Field(description="错误分类")
    message: str = Field(description="可读错误描述")
    code: str | None = Field(default=None, description="存储层错误码（透传）")
    details: Any = Field(default=None, description="存储层附加信息（透传）")


class Result(BaseModel, Generic[T]):
    """{data, error} 二元结果"""

    data: T | None = None
    error: ServiceError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, data: Any) -> "Result":
        return cls(data=data, error=None)

    @classmethod
    def failure(
        cls,
        kind: ErrorKind,
        message: str,
        code: str | None = None,
        details: Any = None,
    ) -> "Result":
        return cls(
            data=None,
            error=ServiceError(kind=kind, message=message, code=code, details=details),
        )

    @classmethod
    def from_store_error(cls, error: Exception) -> "Result":
        """将存储层异常原样转为错误结果（不改写分类与描述）"""
        return cls.failure(
            kind=getattr(error, "kind", ErrorKind.STORE),
            message=str(error),
            code=getattr(error, "code", None),
            details=getattr(error, "details", None),
        )
