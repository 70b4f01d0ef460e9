"""重启与存量数据集成测试

1. 应用重启后数据保留、会话失效
2. 存量明文密码登录后升级为哈希
"""

from httpx import ASGITransport, AsyncClient
from taskhub.core.passwords import is_hashed
from taskhub.core.store import Eq, create_sqlite_store
from taskhub.gateway.main import create_app, lifespan


def _client_for(app) -> AsyncClient:
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


class TestRestart:
    """重启后的行为"""

    async def test_data_survives_sessions_do_not(self, db_path):
        store = await create_sqlite_store(str(db_path))
        await store.insert("users", {"username": "legacy", "password": "plain-pass", "role": "admin"})
        await store.close()

        first = create_app()
        async with lifespan(first):
            async with _client_for(first) as client:
                resp = await client.post(
                    "/api/auth/login", json={"username": "legacy", "password": "plain-pass"}
                )
                assert resp.status_code == 200
                token = resp.json()["data"]["token"]
                headers = {"Authorization": f"Bearer {token}"}
                resp = await client.post("/api/categories", json={"name": "保留"}, headers=headers)
                assert resp.status_code == 201

        second = create_app()
        async with lifespan(second):
            async with _client_for(second) as client:
                resp = await client.get("/api/categories", headers=headers)
                assert resp.status_code == 401

                resp = await client.post(
                    "/api/auth/login", json={"username": "legacy", "password": "plain-pass"}
                )
                headers = {"Authorization": f"Bearer {resp.json()['data']['token']}"}
                resp = await client.get("/api/categories", headers=headers)
                assert [c["name"] for c in resp.json()["data"]] == ["保留"]

    async def test_plaintext_password_upgraded_on_login(self, db_path, client: AsyncClient, integration_app):
        store = integration_app.state.row_store
        await store.insert("users", {"username": "old", "password": "oldpass1"})

        resp = await client.post(
            "/api/auth/login", json={"username": "old", "password": "oldpass1"}
        )
        assert resp.status_code == 200

        row = await store.fetch_one("users", filters=[Eq("username", "old")])
        assert is_hashed(row["password"])
