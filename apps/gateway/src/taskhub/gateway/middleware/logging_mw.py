"""LoggingMiddleware -- 请求级日志

每个请求一个 request_id（ULID，或沿用客户端传入的 X-Request-ID），
绑定到 structlog contextvars 并回写到响应头。
健康检查请求只记 debug，避免探针刷屏。
"""

import time

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from ulid import ULID

REQUEST_ID_HEADER = "X-Request-ID"

_HEALTH_PATHS = frozenset({"/health", "/ready"})

# 客户端传入的 request_id 最长保留长度
_MAX_REQUEST_ID_LENGTH = 64


def resolve_request_id(incoming: str | None) -> str:
    """沿用合法的客户端 request_id，否则生成新的 ULID"""
    if incoming:
        incoming = incoming.strip()
        if 0 < len(incoming) <= _MAX_REQUEST_ID_LENGTH and incoming.isprintable():
            return incoming
    return str(ULID())


class LoggingMiddleware(BaseHTTPMiddleware):
    """请求级日志中间件"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = resolve_request_id(request.headers.get(REQUEST_ID_HEADER))

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        log = structlog.get_logger()
        health_check = request.url.path in _HEALTH_PATHS
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            await log.aexception(
                "request_failed",
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
            )
            raise

        fields = {
            "status_code": response.status_code,
            "duration_ms": round((time.perf_counter() - started) * 1000, 1),
        }
        if health_check:
            await log.adebug("request_completed", **fields)
        elif response.status_code >= 500:
            await log.awarning("request_completed", **fields)
        else:
            await log.ainfo("request_completed", **fields)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
