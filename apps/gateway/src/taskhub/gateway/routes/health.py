"""健康检查路由

GET /health: Liveness 检查，永远返回 200。
GET /ready: Readiness 检查，探测存储连通性。
"""

import structlog
from fastapi import APIRouter, Request
from starlette.responses import JSONResponse
from taskhub.core.store import RowStoreError

log = structlog.get_logger()

router = APIRouter()


@router.get("/health")
async def health():
    """Liveness 检查 -- 永远返回 200"""
    return {"status": "ok"}


@router.get("/ready")
async def ready(request: Request):
    """Readiness 检查 -- 存储可达时返回 200，否则 503"""
    checks: dict[str, str] = {}
    all_ok = True

    config = getattr(request.app.state, "rowstore_config", None)
    mode = config.mode if config is not None else "sqlite"

    try:
        await request.app.state.row_store.ping()
        checks["row_store"] = "ok"
    except RowStoreError as e:
        log.warning("readiness_check_failed", kind=e.kind.value, error=str(e))
        checks["row_store"] = f"error: {e}"
        all_ok = False

    return JSONResponse(
        status_code=200 if all_ok else 503,
        content={
            "status": "ready" if all_ok else "not_ready",
            "mode": mode,
            "checks": checks,
        },
    )
