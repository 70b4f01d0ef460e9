"""Row Store Protocol 接口定义

对 users / categories / tasks 三张表的通用增删改查接口，
使用 Python Protocol 实现结构化子类型（duck typing）。
所有方法失败时抛出 RowStoreError 子类。
"""

from collections.abc import Sequence
from typing import Any, Protocol

from .query import Embed, Order, Predicate

Row = dict[str, Any]


class RowStore(Protocol):
    """行存储接口"""

    async def fetch(
        self,
        table: str,
        *,
        columns: Sequence[str] | None = None,
        filters: Sequence[Predicate] = (),
        order: Order | None = None,
        limit: int | None = None,
        embeds: Sequence[Embed] = (),
    ) -> list[Row]:
        """按条件查询多行，columns 为 None 时返回全部列"""
        ...

    async def fetch_one(
        self,
        table: str,
        *,
        columns: Sequence[str] | None = None,
        filters: Sequence[Predicate] = (),
        embeds: Sequence[Embed] = (),
    ) -> Row:
        """查询唯一一行，0 行或多行时抛出 RowNotFoundError"""
        ...

    async def insert(
        self,
        table: str,
        row: Row,
        *,
        embeds: Sequence[Embed] = (),
    ) -> Row:
        """插入一行，返回插入后的完整行"""
        ...

    async def update(
        self,
        table: str,
        filters: Sequence[Predicate],
        changes: Row,
        *,
        embeds: Sequence[Embed] = (),
    ) -> Row:
        """更新唯一一行，没有匹配行时抛出 RowNotFoundError"""
        ...

    async def delete(
        self,
        table: str,
        filters: Sequence[Predicate],
    ) -> list[Row]:
        """删除匹配行，返回被删除的行"""
        ...

    async def ping(self) -> None:
        """连通性检查，不可达时抛出 RowStoreUnavailableError"""
        ...

    async def close(self) -> None:
        """释放连接"""
        ...
