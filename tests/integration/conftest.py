"""集成测试共享 fixture -- 走完整 lifespan 的 SQLite 模式应用"""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient


@pytest.fixture
def db_path(tmp_path: Path, monkeypatch) -> Path:
    """集成测试数据库路径（同时写入环境变量）"""
    path = tmp_path / "data" / "taskhub.db"
    monkeypatch.setenv("TASKHUB_DB_PATH", str(path))
    monkeypatch.delenv("TASKHUB_STORE_MODE", raising=False)
    return path


@pytest_asyncio.fixture
async def integration_app(db_path: Path):
    """集成测试用 FastAPI app（lifespan 负责建库与释放连接）"""
    from taskhub.gateway.main import create_app, lifespan

    app = create_app()
    async with lifespan(app):
        yield app


@pytest_asyncio.fixture
async def client(integration_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=integration_app),
        base_url="http://test",
    ) as ac:
        yield ac
