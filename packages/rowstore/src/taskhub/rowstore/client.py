"""PostgrestRowStore -- 远端 REST 行存储客户端

通过 httpx 调用 PostgREST 兼容接口（Supabase 的 /rest/v1）。
查询描述翻译为 PostgREST 参数：eq./neq./gte./imatch./is.null、or=(...)、
order=、limit=，关联视图翻译为 select 中的 alias:table!column(cols)。
"""

import re
from collections.abc import Sequence
from datetime import date, datetime
from enum import Enum
from typing import Any

import httpx
import structlog
from taskhub.core.store import (
    AnyOf,
    Contains,
    Embed,
    Eq,
    Gte,
    Neq,
    Order,
    Predicate,
    Row,
    RowConflictError,
    RowNotFoundError,
    RowStoreError,
    RowStoreUnavailableError,
)

log = structlog.get_logger()

# 单对象响应：0 行或多行时服务端返回 406 + PGRST116
_SINGLE_OBJECT = "application/vnd.pgrst.object+json"

# 约束冲突错误码（unique_violation / foreign_key_violation）
_CONFLICT_CODES = {"23505", "23503"}

_NEEDS_QUOTING = re.compile(r'[,()"\s]')


def _format_value(value: Any) -> str:
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def _quote(value: str) -> str:
    """or=(...) 内部的值含保留字符时需要加双引号"""
    if _NEEDS_QUOTING.search(value):
        escaped = value.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return value


def _literal_pattern(text: str) -> str:
    """imatch（~*）子串模式，转义全部元字符；ilike 无法表达字面量 *"""
    return re.escape(text)


def _operator(predicate: Predicate) -> tuple[str, str]:
    """返回 (列名, 操作符.值)"""
    if isinstance(predicate, Eq):
        if predicate.value is None:
            return predicate.column, "is.null"
        return predicate.column, f"eq.{_format_value(predicate.value)}"
    if isinstance(predicate, Neq):
        if predicate.value is None:
            return predicate.column, "not.is.null"
        return predicate.column, f"neq.{_format_value(predicate.value)}"
    if isinstance(predicate, Gte):
        return predicate.column, f"gte.{_format_value(predicate.value)}"
    if isinstance(predicate, Contains):
        return predicate.column, f"imatch.{_literal_pattern(predicate.text)}"
    raise RowStoreError(f"不支持的过滤条件: {predicate!r}", code="unsupported_filter")


def _logic_expr(predicate: Predicate) -> str:
    """or=(...) 内部的单个表达式"""
    if isinstance(predicate, AnyOf):
        return f"or({','.join(_logic_expr(p) for p in predicate.predicates)})"
    column, op = _operator(predicate)
    name, _, value = op.partition(".")
    if name in ("is", "not"):
        return f"{column}.{op}"
    return f"{column}.{name}.{_quote(value)}"


def build_filter_params(filters: Sequence[Predicate]) -> list[tuple[str, str]]:
    """过滤条件 -> 查询参数（同名参数可重复）"""
    params: list[tuple[str, str]] = []
    for predicate in filters:
        if isinstance(predicate, AnyOf):
            params.append(("or", f"({','.join(_logic_expr(p) for p in predicate.predicates)})"))
        else:
            params.append(_operator(predicate))
    return params


def build_select(columns: Sequence[str] | None, embeds: Sequence[Embed]) -> str:
    """select 参数：列 + 关联视图"""
    parts = list(columns) if columns else ["*"]
    for embed in embeds:
        parts.append(f"{embed.alias}:{embed.table}!{embed.column}({','.join(embed.columns)})")
    return ",".join(parts)


class PostgrestRowStore:
    """RowStore 的远端 REST 实现"""

    def __init__(
        self,
        base_url: str = "http://localhost:54321",
        api_key: str = "",
        timeout_s: int = 30,
        rest_path: str = "/rest/v1",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """初始化远端存储客户端

        Args:
            base_url: 服务基础 URL
            api_key: 访问密钥（同时作为 apikey 头与 Bearer token）
            timeout_s: 请求超时（秒）
            rest_path: REST 接口前缀
            transport: 自定义 httpx transport（测试时注入 MockTransport）
        """
        self._base_url = base_url.rstrip("/")
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["apikey"] = api_key
            headers["Authorization"] = f"Bearer {api_key}"
        self._client = httpx.AsyncClient(
            base_url=f"{self._base_url}{rest_path}",
            headers=headers,
            timeout=timeout_s,
            transport=transport,
        )

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
        params = [("select", build_select(columns, embeds)), *build_filter_params(filters)]
        if order is not None:
            params.append(("order", f"{order.column}.{'asc' if order.ascending else 'desc'}"))
        if limit is not None:
            params.append(("limit", str(int(limit))))
        return await self._request("GET", table, params) or []

    async def fetch_one(
        self,
        table: str,
        *,
        columns: Sequence[str] | None = None,
        filters: Sequence[Predicate] = (),
        embeds: Sequence[Embed] = (),
    ) -> Row:
        """查询唯一一行"""
        params = [("select", build_select(columns, embeds)), *build_filter_params(filters)]
        return await self._request("GET", table, params, single=True)

    async def insert(
        self,
        table: str,
        row: Row,
        *,
        embeds: Sequence[Embed] = (),
    ) -> Row:
        """插入一行并返回服务端生成的完整行"""
        params = [("select", build_select(None, embeds))]
        return await self._request(
            "POST", table, params, payload=self._encode(row), single=True, returning=True
        )

    async def update(
        self,
        table: str,
        filters: Sequence[Predicate],
        changes: Row,
        *,
        embeds: Sequence[Embed] = (),
    ) -> Row:
        """更新唯一一行（多行匹配时服务端拒绝并回滚）"""
        if not filters:
            raise RowStoreError(f"{table}: 更新操作必须带过滤条件", code="missing_filter")
        params = [("select", build_select(None, embeds)), *build_filter_params(filters)]
        return await self._request(
            "PATCH", table, params, payload=self._encode(changes), single=True, returning=True
        )

    async def delete(
        self,
        table: str,
        filters: Sequence[Predicate],
    ) -> list[Row]:
        """删除匹配行，返回被删除的行"""
        if not filters:
            raise RowStoreError(f"{table}: 删除操作必须带过滤条件", code="missing_filter")
        return await self._request("DELETE", table, build_filter_params(filters), returning=True) or []

    async def ping(self) -> None:
        """连通性检查：对 users 表做一次最小查询"""
        await self._request("GET", "users", [("select", "user_id"), ("limit", "1")])

    async def close(self) -> None:
        await self._client.aclose()

    @staticmethod
    def _encode(row: Row) -> dict[str, Any]:
        return {
            key: _format_value(value) if isinstance(value, (Enum, datetime, date)) else value
            for key, value in row.items()
        }

    async def _request(
        self,
        method: str,
        table: str,
        params: list[tuple[str, str]],
        payload: dict[str, Any] | None = None,
        single: bool = False,
        returning: bool = False,
    ) -> Any:
        headers: dict[str, str] = {}
        if single:
            headers["Accept"] = _SINGLE_OBJECT
        if returning:
            headers["Prefer"] = "return=representation"

        log.debug("rowstore_request", method=method, table=table)
        try:
            response = await self._client.request(
                method,
                f"/{table}",
                params=params,
                json=payload,
                headers=headers,
            )
        except httpx.TransportError as e:
            log.error(
                "rowstore_unreachable",
                method=method,
                table=table,
                error_type=type(e).__name__,
            )
            raise RowStoreUnavailableError(self._base_url, e) from e

        if response.status_code >= 400:
            raise self._error_from_response(method, table, response)

        if not response.content:
            return None
        return response.json()

    @staticmethod
    def _error_from_response(method: str, table: str, response: httpx.Response) -> RowStoreError:
        """将服务端错误响应映射到异常体系，保留原始 code 与 message"""
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}

        message = body.get("message") or response.text or f"HTTP {response.status_code}"
        code = body.get("code") or str(response.status_code)
        details = body.get("details")

        log.warning(
            "rowstore_request_failed",
            method=method,
            table=table,
            status_code=response.status_code,
            code=code,
        )

        if code == "PGRST116" or response.status_code == 406:
            return RowNotFoundError(message, code=code, details=details)
        if code in _CONFLICT_CODES or response.status_code == 409:
            return RowConflictError(message, code=code, details=details)
        return RowStoreError(message, code=code, details=details)
