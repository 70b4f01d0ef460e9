"""apps/gateway 测试配置 -- FastAPI app + httpx AsyncClient + 登录 fixture"""

from collections.abc import AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from taskhub.core.store import RowStoreError, RowStoreUnavailableError


class UnavailableRowStore:
    """所有操作都报告存储不可达"""

    def __init__(self, target: str = "https://db.example.com") -> None:
        self.target = target
        self.calls: list[str] = []

    def _fail(self, name: str):
        self.calls.append(name)
        raise RowStoreUnavailableError(self.target, ConnectionError("connection refused"))

    async def fetch(self, table, **kwargs):
        self._fail("fetch")

    async def fetch_one(self, table, **kwargs):
        self._fail("fetch_one")

    async def insert(self, table, row, **kwargs):
        self._fail("insert")

    async def update(self, table, filters, changes, **kwargs):
        self._fail("update")

    async def delete(self, table, filters):
        self._fail("delete")

    async def ping(self):
        self._fail("ping")

    async def close(self):
        pass


class FailingUpdateStore:
    """委托给真实存储，但所有 update 都失败"""

    def __init__(self, inner) -> None:
        self._inner = inner
        self.update_calls = 0

    def __getattr__(self, name):
        return getattr(self._inner, name)

    async def update(self, table, filters, changes, **kwargs):
        self.update_calls += 1
        raise RowStoreError("disk I/O error", code="OperationalError")


@pytest_asyncio.fixture
async def app(row_store):
    """创建测试用 FastAPI app 实例（绕过 lifespan，手动注入存储与会话）"""
    from taskhub.gateway.main import create_app
    from taskhub.gateway.services.session import SessionRegistry

    application = create_app()
    application.state.row_store = row_store
    application.state.sessions = SessionRegistry()
    return application


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """提供 httpx AsyncClient 用于测试"""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


async def login(client: AsyncClient, username: str, password: str) -> dict[str, str]:
    resp = await client.post("/api/auth/login", json={"username": username, "password": password})
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['data']['token']}"}


@pytest_asyncio.fixture
async def admin(seed) -> dict:
    return await seed.user("admin", password="admin123", role="admin")


@pytest_asyncio.fixture
async def member(seed) -> dict:
    return await seed.user("alice", password="alice123")


@pytest_asyncio.fixture
async def admin_headers(client, admin) -> dict[str, str]:
    return await login(client, "admin", "admin123")


@pytest_asyncio.fixture
async def member_headers(client, member) -> dict[str, str]:
    return await login(client, "alice", "alice123")


@pytest_asyncio.fixture
async def login_as(client):
    """按用户名密码登录，返回 Authorization 头"""

    async def _login(username: str, password: str) -> dict[str, str]:
        return await login(client, username, password)

    return _login


@pytest_asyncio.fixture
async def unavailable_store() -> UnavailableRowStore:
    return UnavailableRowStore()


@pytest_asyncio.fixture
async def failing_update_store(row_store) -> FailingUpdateStore:
    return FailingUpdateStore(row_store)
