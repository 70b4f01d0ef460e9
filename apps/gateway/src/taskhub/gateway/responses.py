"""Result -> HTTP 响应

响应体始终是 {data, error}；状态码由错误分类决定。
"""

from starlette.responses import JSONResponse
from taskhub.core.models import ErrorKind, Result

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.AUTHENTICATION: 401,
    ErrorKind.AUTHORIZATION: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.UNAVAILABLE: 503,
    ErrorKind.STORE: 502,
}


def envelope(result: Result, success_status: int = 200) -> JSONResponse:
    if result.ok:
        status_code = success_status
    else:
        status_code = STATUS_BY_KIND.get(result.error.kind, 502)
    return JSONResponse(
        status_code=status_code,
        content=result.model_dump(mode="json"),
    )


def failure(kind: ErrorKind, message: str, details=None) -> JSONResponse:
    return envelope(Result.failure(kind, message, details=details))
