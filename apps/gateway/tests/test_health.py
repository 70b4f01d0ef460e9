"""健康检查测试

测试内容：
1. GET /health 返回 200 + ok
2. GET /ready 存储可达时 200
3. GET /ready 存储不可达时 503
"""

from httpx import AsyncClient


class TestHealthCheck:
    """健康检查"""

    async def test_health_returns_200(self, client: AsyncClient):
        resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"

    async def test_ready_returns_200(self, client: AsyncClient):
        resp = await client.get("/ready")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "ready"
        assert data["mode"] == "sqlite"
        assert data["checks"]["row_store"] == "ok"

    async def test_ready_store_unavailable(self, app, client: AsyncClient, unavailable_store):
        app.state.row_store = unavailable_store
        resp = await client.get("/ready")
        assert resp.status_code == 503
        data = resp.json()
        assert data["status"] == "not_ready"
        assert data["checks"]["row_store"].startswith("error:")

    async def test_ready_after_sqlite_closed(self, app, client: AsyncClient, tmp_db_path):
        from taskhub.core.store import create_sqlite_store

        store = await create_sqlite_store(str(tmp_db_path.with_name("closed.db")))
        await store.close()
        app.state.row_store = store

        resp = await client.get("/ready")
        assert resp.status_code == 503
