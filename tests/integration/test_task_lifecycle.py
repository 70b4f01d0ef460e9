"""任务全链路集成测试

CLI 创建管理员 -> 管理员建用户/分类/任务 -> 成员领取并完成 -> 报表反映结果
"""

from httpx import AsyncClient
from taskhub.core.__main__ import create_admin


async def _login(client: AsyncClient, username: str, password: str) -> dict[str, str]:
    resp = await client.post(
        "/api/auth/login", json={"username": username, "password": password}
    )
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['data']['token']}"}


class TestTaskLifecycle:
    """管理员发布任务，成员领取完成"""

    async def test_full_flow(self, db_path, client: AsyncClient):
        assert await create_admin("root", "rootpass") == 0
        admin = await _login(client, "root", "rootpass")

        # 1. 管理员创建成员、分类和两个任务
        resp = await client.post(
            "/api/users", json={"username": "alice", "password": "alice123"}, headers=admin
        )
        assert resp.status_code == 201
        alice_id = resp.json()["data"]["user_id"]

        resp = await client.post("/api/categories", json={"name": "开发"}, headers=admin)
        category_id = resp.json()["data"]["category_id"]

        task_ids = []
        for title in ("实现登录", "编写文档"):
            resp = await client.post(
                "/api/tasks",
                json={"title": title, "category_id": category_id},
                headers=admin,
            )
            assert resp.status_code == 201
            task_ids.append(resp.json()["data"]["task_id"])

        # 2. 成员领取第一个任务并完成
        alice = await _login(client, "alice", "alice123")
        resp = await client.post(f"/api/tasks/{task_ids[0]}/claim", headers=alice)
        assert resp.json()["data"]["status"] == "进行中"

        resp = await client.post(
            f"/api/tasks/{task_ids[0]}/status", json={"status": "已完成"}, headers=alice
        )
        assert resp.status_code == 200

        # 3. 管理员看到的统计
        resp = await client.get("/api/reports/overview", headers=admin)
        overview = resp.json()["data"]
        assert overview["users"]["total"] == 2
        assert overview["tasks"]["total"] == 2
        assert overview["tasks"]["by_status"]["已完成"] == 1
        assert overview["tasks"]["by_status"]["待领取"] == 1
        assert overview["categories"]["most_used_category"]["name"] == "开发"

        resp = await client.get("/api/reports/workload", headers=admin)
        workload = resp.json()["data"]
        assert workload["user_workloads"] == [
            {
                "user_id": alice_id,
                "username": "alice",
                "total": 1,
                "completed": 1,
                "in_progress": 0,
                "pending": 0,
                "overdue": 0,
                "high_priority": 0,
                "completion_rate": 100,
            }
        ]
        assert workload["summary"]["unassigned_tasks"] == 1

        resp = await client.get("/api/reports/trends", params={"days": 7}, headers=admin)
        assert resp.json()["data"]["summary"] == {
            "total_created": 2,
            "total_completed": 1,
            "completion_rate": 50,
        }

        # 4. 成员的个人主页
        resp = await client.get("/api/profile/dashboard", headers=alice)
        dashboard = resp.json()["data"]
        assert dashboard["profile"]["username"] == "alice"
        assert dashboard["stats"]["assigned"]["completed"] == 1
        assert dashboard["stats"]["created"]["total"] == 0

    async def test_admin_removes_member_mid_session(self, db_path, client: AsyncClient):
        assert await create_admin("root", "rootpass") == 0
        admin = await _login(client, "root", "rootpass")
        resp = await client.post(
            "/api/users", json={"username": "bob", "password": "bob12345"}, headers=admin
        )
        bob_id = resp.json()["data"]["user_id"]
        bob = await _login(client, "bob", "bob12345")

        resp = await client.delete(f"/api/users/{bob_id}", headers=admin)
        assert resp.status_code == 200

        resp = await client.get("/api/tasks", headers=bob)
        assert resp.status_code == 401
