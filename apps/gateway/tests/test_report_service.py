"""ReportService 测试 -- 存储取数 + 聚合引擎归约"""

from datetime import UTC, datetime

import pytest
from taskhub.core.models import ErrorKind, Result
from taskhub.gateway.services.report_service import ReportService, first_error

FIXED_NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


@pytest.fixture
def service(row_store) -> ReportService:
    return ReportService(row_store, clock=lambda: FIXED_NOW)


class TestTaskTrends:
    """任务趋势"""

    async def test_completion_rate_over_window(self, service, seed):
        for i in range(10):
            await seed.task(
                f"t{i}",
                status="已完成" if i < 6 else "进行中",
                created_at=f"2026-10-{15 + i % 3}T09:00:00.000+00:00",
            )
        # 窗口之外
        await seed.task("old", status="已完成", created_at="2026-08-01T09:00:00.000+00:00")

        result = await service.task_trends(30)
        trends = result.data
        assert trends.period_days == 30
        assert trends.summary.total_created == 10
        assert trends.summary.total_completed == 6
        assert trends.summary.completion_rate == 60
        assert [d.date for d in trends.daily_trends] == ["2026-10-15", "2026-10-16", "2026-10-17"]

    async def test_empty_window(self, service):
        result = await service.task_trends(7)
        assert result.data.daily_trends == []
        assert result.data.summary.completion_rate == 0

    @pytest.mark.parametrize("days", [0, -3])
    async def test_days_must_be_positive(self, unavailable_store, days):
        result = await ReportService(unavailable_store).task_trends(days)
        assert result.error.kind == ErrorKind.VALIDATION
        assert unavailable_store.calls == []

    @pytest.mark.parametrize("days", [3651, 1_000_000])
    async def test_days_upper_bound(self, unavailable_store, days):
        result = await ReportService(unavailable_store, clock=lambda: FIXED_NOW).task_trends(days)
        assert result.error.kind == ErrorKind.VALIDATION
        assert result.error.message == "统计天数不能超过3650天"
        assert unavailable_store.calls == []

    async def test_longest_window(self, service, seed):
        await seed.task("old", created_at="2017-01-01T00:00:00.000+00:00")
        result = await service.task_trends(3650)
        assert result.data.summary.total_created == 1


class TestTaskStatistics:
    """任务分布"""

    async def test_all_tasks(self, service, seed):
        await seed.task("a", status="已完成", priority="high")
        await seed.task("b", status="已逾期")
        await seed.task("c")

        stats = (await service.task_statistics()).data
        assert stats.total == 3
        assert stats.by_status == {"待领取": 1, "进行中": 0, "已完成": 1, "已逾期": 1}
        assert stats.by_priority == {"low": 0, "medium": 2, "high": 1}

    async def test_scoped_to_user(self, service, seed):
        alice = await seed.user("alice")
        bob = await seed.user("bob")
        await seed.task("负责", assignee_id=alice["user_id"])
        await seed.task("创建", creator_id=alice["user_id"], assignee_id=bob["user_id"])
        await seed.task("无关", creator_id=bob["user_id"])

        stats = (await service.task_statistics(alice["user_id"])).data
        assert stats.total == 2


class TestOtherReports:
    """用户 / 分类 / 工作量"""

    async def test_user_statistics(self, service, seed):
        await seed.user("admin", role="admin", created_at="2026-09-03T00:00:00.000+00:00")
        await seed.user("alice", created_at="2026-10-01T00:00:00.000+00:00")
        await seed.user("bob", created_at="2026-10-02T00:00:00.000+00:00")

        stats = (await service.user_statistics()).data
        assert stats.total == 3
        assert stats.by_role == {"admin": 1, "user": 2}
        assert [(m.month, m.count) for m in stats.registration_trend] == [
            ("2026-09", 1),
            ("2026-10", 2),
        ]

    async def test_category_statistics(self, service, seed):
        dev = await seed.category("开发")
        ops = await seed.category("运维")
        await seed.task("a", category_id=ops["category_id"])
        await seed.task("b", category_id=ops["category_id"])
        await seed.task("c", category_id=dev["category_id"])

        stats = (await service.category_statistics()).data
        assert stats.total == 2
        assert [c.task_count for c in stats.category_distribution] == [1, 2]
        assert stats.most_used_category.name == "运维"

    async def test_user_workload(self, service, seed):
        alice = await seed.user("alice")
        await seed.task("a", assignee_id=alice["user_id"], status="已完成", priority="high")
        await seed.task("b", assignee_id=alice["user_id"], status="已逾期")
        await seed.task("c")

        workload = (await service.user_workload()).data
        assert len(workload.user_workloads) == 1
        entry = workload.user_workloads[0]
        assert entry.username == "alice"
        assert (entry.total, entry.completed, entry.overdue, entry.high_priority) == (2, 1, 1, 1)
        assert entry.completion_rate == 50
        assert workload.summary.unassigned_tasks == 1
        assert workload.summary.average_tasks_per_user == 2


class TestPersonal:
    """个人统计与个人主页"""

    async def test_personal_stats_uses_due_date(self, service, seed):
        alice = await seed.user("alice")
        uid = alice["user_id"]
        await seed.task("过期未完成", assignee_id=uid, status="进行中", due_date="2026-10-01")
        await seed.task("过期已完成", assignee_id=uid, status="已完成", due_date="2026-10-01")
        await seed.task("未到期", assignee_id=uid, status="进行中", due_date="2026-12-01")
        await seed.task("自建", creator_id=uid)

        stats = (await service.personal_stats(uid)).data
        assert stats.assigned.total == 3
        assert stats.assigned.overdue == 1
        assert stats.assigned.completion_rate == 33
        assert stats.created.total == 1
        assert stats.created.pending == 1

    async def test_dashboard(self, service, seed):
        alice = await seed.user("alice")
        await seed.task("t", assignee_id=alice["user_id"])

        dashboard = (await service.personal_dashboard(alice["user_id"])).data
        assert dashboard.profile.username == "alice"
        assert dashboard.stats.assigned.total == 1

    async def test_dashboard_missing_user(self, service):
        result = await service.personal_dashboard(999)
        assert result.error.kind == ErrorKind.NOT_FOUND


class TestOverview:
    """系统概览"""

    async def test_overview(self, service, seed):
        await seed.user("admin", role="admin")
        await seed.category("开发")
        await seed.task("t")

        overview = (await service.system_overview()).data
        assert overview.users.total == 1
        assert overview.tasks.total == 1
        assert overview.categories.total == 1
        assert overview.last_updated == FIXED_NOW

    async def test_overview_store_unavailable(self, unavailable_store):
        result = await ReportService(unavailable_store).system_overview()
        assert result.data is None
        assert result.error.kind == ErrorKind.UNAVAILABLE


def test_first_error_keeps_declaration_order():
    ok = Result.success(1)
    first = Result.failure(ErrorKind.STORE, "first")
    second = Result.failure(ErrorKind.NOT_FOUND, "second")

    assert first_error(ok, first, second) is first
    assert first_error(ok, ok) is None
