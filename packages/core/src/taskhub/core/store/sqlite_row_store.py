"""RowStore SQLite 实现

将通用查询描述（Eq/Neq/Gte/Contains/AnyOf + Order + Embed）翻译为 SQL。
写操作使用 RETURNING 返回受影响的行，单条语句即一个事务。
"""

from collections.abc import Sequence
from datetime import date, datetime
from enum import Enum
from typing import Any

import aiosqlite
import structlog

from .exceptions import (
    RowConflictError,
    RowNotFoundError,
    RowStoreError,
    RowStoreUnavailableError,
)
from .protocols import Row
from .query import AnyOf, Contains, Embed, Eq, Gte, Neq, Order, Predicate
from .sqlite_init import TABLE_COLUMNS

log = structlog.get_logger()


def _to_db(value: Any) -> Any:
    """Python 值 -> SQLite 可绑定的值"""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, bool):
        return int(value)
    return value


def _escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SqliteRowStore:
    """RowStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection, db_path: str = "") -> None:
        self._conn = conn
        self._db_path = db_path

    @property
    def conn(self) -> aiosqlite.Connection:
        return self._conn

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
        """按条件查询多行"""
        sql, params = self._select_sql(table, columns, filters)
        if order is not None:
            self._check_columns(table, [order.column])
            sql += f" ORDER BY {order.column} {'ASC' if order.ascending else 'DESC'}"
        if limit is not None:
            sql += " LIMIT ?"
            params.append(int(limit))

        rows = await self._query(sql, params)
        return await self._attach_embeds(rows, embeds)

    async def fetch_one(
        self,
        table: str,
        *,
        columns: Sequence[str] | None = None,
        filters: Sequence[Predicate] = (),
        embeds: Sequence[Embed] = (),
    ) -> Row:
        """查询唯一一行，0 行或多行时抛出 RowNotFoundError"""
        sql, params = self._select_sql(table, columns, filters)
        # 取两行即可判断是否唯一
        rows = await self._query(sql + " LIMIT 2", params)
        if len(rows) != 1:
            raise RowNotFoundError(
                f"{table}: 期望 1 行，实际 {'0' if not rows else '多'} 行",
                code="not_found",
            )
        return (await self._attach_embeds(rows, embeds))[0]

    async def insert(
        self,
        table: str,
        row: Row,
        *,
        embeds: Sequence[Embed] = (),
    ) -> Row:
        """插入一行，返回插入后的完整行"""
        if not row:
            raise RowStoreError(f"{table}: 插入数据为空", code="empty_insert")
        self._check_columns(table, row.keys())

        names = ", ".join(row)
        placeholders = ", ".join("?" * len(row))
        rows = await self._write(
            f"INSERT INTO {table} ({names}) VALUES ({placeholders}) RETURNING *",
            [_to_db(v) for v in row.values()],
        )
        return (await self._attach_embeds(rows, embeds))[0]

    async def update(
        self,
        table: str,
        filters: Sequence[Predicate],
        changes: Row,
        *,
        embeds: Sequence[Embed] = (),
    ) -> Row:
        """更新唯一一行，没有匹配行（或匹配多行）时回滚并抛出 RowNotFoundError"""
        if not filters:
            raise RowStoreError(f"{table}: 更新操作必须带过滤条件", code="missing_filter")
        if not changes:
            return await self.fetch_one(table, filters=filters, embeds=embeds)
        self._check_columns(table, changes.keys())

        where, params = self._where(table, filters)
        assignments = ", ".join(f"{name} = ?" for name in changes)
        rows = await self._write(
            f"UPDATE {table} SET {assignments}{where} RETURNING *",
            [_to_db(v) for v in changes.values()] + params,
            expect_single=True,
        )
        return (await self._attach_embeds(rows, embeds))[0]

    async def delete(
        self,
        table: str,
        filters: Sequence[Predicate],
    ) -> list[Row]:
        """删除匹配行，返回被删除的行"""
        if not filters:
            raise RowStoreError(f"{table}: 删除操作必须带过滤条件", code="missing_filter")
        where, params = self._where(table, filters)
        return await self._write(f"DELETE FROM {table}{where} RETURNING *", params)

    async def ping(self) -> None:
        """连通性检查；连接已关闭或不可用时抛出 RowStoreUnavailableError"""
        try:
            async with self._conn.execute("SELECT 1") as cursor:
                await cursor.fetchone()
        except (aiosqlite.Error, ValueError) as e:
            raise RowStoreUnavailableError(self._db_path, e) from e

    async def close(self) -> None:
        await self._conn.close()

    # ---- SQL 构建 ----

    def _check_columns(self, table: str, columns) -> None:
        allowed = TABLE_COLUMNS.get(table)
        if allowed is None:
            raise RowStoreError(f"未知的表: {table}", code="unknown_table")
        unknown = [c for c in columns if c not in allowed]
        if unknown:
            raise RowStoreError(
                f"{table}: 未知的列 {', '.join(unknown)}",
                code="unknown_column",
            )

    def _select_sql(
        self,
        table: str,
        columns: Sequence[str] | None,
        filters: Sequence[Predicate],
    ) -> tuple[str, list[Any]]:
        if columns:
            self._check_columns(table, columns)
            selected = ", ".join(columns)
        else:
            self._check_columns(table, ())
            selected = "*"
        where, params = self._where(table, filters)
        return f"SELECT {selected} FROM {table}{where}", params

    def _where(self, table: str, filters: Sequence[Predicate]) -> tuple[str, list[Any]]:
        if not filters:
            return "", []
        clauses: list[str] = []
        params: list[Any] = []
        for predicate in filters:
            clause, values = self._predicate_sql(table, predicate)
            clauses.append(clause)
            params.extend(values)
        return " WHERE " + " AND ".join(clauses), params

    def _predicate_sql(self, table: str, predicate: Predicate) -> tuple[str, list[Any]]:
        if isinstance(predicate, AnyOf):
            parts = [self._predicate_sql(table, p) for p in predicate.predicates]
            if not parts:
                return "0", []
            clause = " OR ".join(part[0] for part in parts)
            return f"({clause})", [v for part in parts for v in part[1]]

        self._check_columns(table, [predicate.column])
        column = predicate.column

        if isinstance(predicate, Eq):
            if predicate.value is None:
                return f"{column} IS NULL", []
            return f"{column} = ?", [_to_db(predicate.value)]
        if isinstance(predicate, Neq):
            if predicate.value is None:
                return f"{column} IS NOT NULL", []
            return f"{column} != ?", [_to_db(predicate.value)]
        if isinstance(predicate, Gte):
            return f"{column} >= ?", [_to_db(predicate.value)]
        if isinstance(predicate, Contains):
            return f"{column} LIKE ? ESCAPE '\\'", [f"%{_escape_like(predicate.text)}%"]

        raise RowStoreError(f"不支持的过滤条件: {predicate!r}", code="unsupported_filter")

    # ---- 执行 ----

    async def _query(self, sql: str, params: list[Any]) -> list[Row]:
        try:
            async with self._conn.execute(sql, params) as cursor:
                records = await cursor.fetchall()
                names = [d[0] for d in cursor.description]
        except aiosqlite.Error as e:
            raise self._translate(e) from e
        return [dict(zip(names, record)) for record in records]

    async def _write(
        self,
        sql: str,
        params: list[Any],
        expect_single: bool = False,
    ) -> list[Row]:
        """执行写语句并提交，失败时回滚"""
        try:
            async with self._conn.execute(sql, params) as cursor:
                records = await cursor.fetchall()
                names = [d[0] for d in cursor.description]
            rows = [dict(zip(names, record)) for record in records]
            if expect_single and len(rows) != 1:
                await self._conn.rollback()
                raise RowNotFoundError(
                    f"期望更新 1 行，实际 {len(rows)} 行",
                    code="not_found",
                )
            await self._conn.commit()
        except aiosqlite.Error as e:
            await self._conn.rollback()
            raise self._translate(e) from e
        return rows

    def _translate(self, error: aiosqlite.Error) -> RowStoreError:
        log.warning(
            "sqlite_operation_failed",
            db_path=self._db_path,
            error_type=type(error).__name__,
            error=str(error),
        )
        if isinstance(error, aiosqlite.IntegrityError):
            return RowConflictError(str(error), code="constraint_violation")
        return RowStoreError(str(error), code=type(error).__name__)

    async def _attach_embeds(self, rows: list[Row], embeds: Sequence[Embed]) -> list[Row]:
        """为每一行附加关联视图（每个 Embed 一次 IN 查询）"""
        for embed in embeds:
            keys = list({row.get(embed.column) for row in rows} - {None})
            related: dict[Any, Row] = {}
            if keys:
                self._check_columns(embed.table, (embed.remote_column, *embed.columns))
                selected = ", ".join(dict.fromkeys((embed.remote_column, *embed.columns)))
                placeholders = ", ".join("?" * len(keys))
                fetched = await self._query(
                    f"SELECT {selected} FROM {embed.table} "
                    f"WHERE {embed.remote_column} IN ({placeholders})",
                    keys,
                )
                related = {
                    item[embed.remote_column]: {c: item[c] for c in embed.columns}
                    for item in fetched
                }
            for row in rows:
                row[embed.alias] = related.get(row.get(embed.column))
        return rows
