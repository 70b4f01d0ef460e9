"""FastAPI 应用主文件

app 创建 + lifespan 管理：根据配置创建 RowStore（SQLite / 远端 REST），
注册中间件、异常处理器与路由。
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from taskhub.core.config import get_db_path
from taskhub.core.models import ErrorKind
from taskhub.core.store import create_sqlite_store
from taskhub.rowstore import create_postgrest_store, load_rowstore_config

from .deps import AccessDenied
from .middleware.logging_config import setup_logging
from .middleware.logging_mw import LoggingMiddleware
from .middleware.trace_mw import TraceMiddleware
from .responses import failure
from .routes import auth, categories, health, profile, reports, tasks, users
from .services.session import SessionRegistry

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理：启动时创建存储客户端，关闭时释放连接"""
    config = load_rowstore_config()
    app.state.rowstore_config = config

    if config.mode == "rest":
        store = create_postgrest_store(config)
        log.info(
            "row_store_initialized",
            mode="rest",
            base_url=config.base_url,
            timeout_s=config.timeout_s,
        )
    else:
        db_path = get_db_path()
        store = await create_sqlite_store(db_path)
        log.info("row_store_initialized", mode="sqlite", db_path=db_path)

    app.state.row_store = store
    app.state.sessions = SessionRegistry()

    yield

    if getattr(app.state, "row_store", None) is not None:
        await app.state.row_store.close()


async def access_denied_handler(request: Request, exc: AccessDenied):
    log.info("access_denied", kind=exc.kind.value)
    return failure(exc.kind, exc.message)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    """请求体/参数校验失败也走 {data, error} 结构"""
    return failure(
        ErrorKind.VALIDATION,
        "请求参数不合法",
        details=jsonable_encoder(exc.errors()),
    )


def create_app() -> FastAPI:
    """创建 FastAPI 应用实例"""
    app = FastAPI(
        title="TaskHub Gateway",
        version="0.1.0",
        description="TaskHub 任务管理 API",
        lifespan=lifespan,
    )

    # 注册中间件（顺序：先 Trace 后 Logging）
    app.add_middleware(TraceMiddleware)
    app.add_middleware(LoggingMiddleware)

    app.add_exception_handler(AccessDenied, access_denied_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    setup_logging()

    app.include_router(auth.router, tags=["auth"])
    app.include_router(users.router, tags=["users"])
    app.include_router(profile.router, tags=["profile"])
    app.include_router(categories.router, tags=["categories"])
    app.include_router(tasks.router, tags=["tasks"])
    app.include_router(reports.router, tags=["reports"])
    app.include_router(health.router, tags=["health"])

    return app


# 默认 app 实例（uvicorn 入口）
app = create_app()
