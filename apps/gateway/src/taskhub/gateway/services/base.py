"""StoreBackedService -- 单次存储调用 + {data, error} 包装

服务层所有方法都通过 _run 访问存储：
存储异常原样转为错误结果，编程错误继续向上抛出。
"""

from collections.abc import Awaitable, Callable
from typing import Any

import structlog
from taskhub.core.models import Result
from taskhub.core.store import RowStore, RowStoreError

log = structlog.get_logger()


class StoreBackedService:
    """持有 RowStore 的服务基类"""

    def __init__(self, store: RowStore) -> None:
        self._store = store

    async def _run(
        self,
        operation: str,
        call: Awaitable[Any],
        convert: Callable[[Any], Any] | None = None,
    ) -> Result:
        """执行一次存储调用

        Args:
            operation: 操作名（写入日志）
            call: 存储调用协程
            convert: 成功时对返回值的转换（行 -> 模型）
        """
        try:
            value = await call
        except RowStoreError as e:
            log.warning(
                "store_operation_failed",
                operation=operation,
                kind=e.kind.value,
                code=e.code,
                error=str(e),
            )
            return Result.from_store_error(e)
        return Result.success(convert(value) if convert is not None else value)
