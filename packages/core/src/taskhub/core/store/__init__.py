"""TaskHub Core Store -- Row Store 接口与 SQLite 实现

提供工厂函数创建已初始化的 SQLite RowStore。
"""

from pathlib import Path

import aiosqlite

from .exceptions import (
    RowConflictError,
    RowNotFoundError,
    RowStoreError,
    RowStoreUnavailableError,
)
from .protocols import Row, RowStore
from .query import AnyOf, Contains, Embed, Eq, Gte, Neq, Order, Predicate
from .sqlite_init import TABLE_COLUMNS, init_db
from .sqlite_row_store import SqliteRowStore


async def create_sqlite_store(db_path: str) -> SqliteRowStore:
    """创建 SQLite RowStore

    Args:
        db_path: SQLite 数据库文件路径

    Returns:
        已建表的 SqliteRowStore 实例

    Raises:
        RowStoreUnavailableError: 数据库无法打开
    """
    # 确保数据库目录存在
    db_dir = Path(db_path).parent
    db_dir.mkdir(parents=True, exist_ok=True)

    try:
        conn = await aiosqlite.connect(db_path)
        conn.row_factory = aiosqlite.Row
        await init_db(conn)
    except aiosqlite.Error as e:
        raise RowStoreUnavailableError(db_path, e) from e

    return SqliteRowStore(conn, db_path)


__all__ = [
    "RowStore",
    "Row",
    "SqliteRowStore",
    "create_sqlite_store",
    "init_db",
    "TABLE_COLUMNS",
    # 查询描述
    "Eq",
    "Neq",
    "Gte",
    "Contains",
    "AnyOf",
    "Predicate",
    "Order",
    "Embed",
    # 异常
    "RowStoreError",
    "RowNotFoundError",
    "RowConflictError",
    "RowStoreUnavailableError",
]
