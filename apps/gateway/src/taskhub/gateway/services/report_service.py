"""ReportService -- 统计报表

每个统计方法先从存储取原始行，再交给聚合引擎归约。
需要多个独立结果时用 asyncio.gather 并发获取，按声明顺序取第一个错误。
"""

import asyncio
from collections.abc import Callable
from datetime import UTC, datetime

import structlog
from taskhub.core import stats
from taskhub.core.config import DEFAULT_TREND_DAYS, MAX_TREND_DAYS
from taskhub.core.models import (
    ErrorKind,
    PersonalDashboard,
    Result,
    SystemOverview,
)
from taskhub.core.store import AnyOf, Eq, Gte, Order, RowStore
from taskhub.core.views import WORKLOAD_EMBEDS

from .base import StoreBackedService
from .user_service import UserService

log = structlog.get_logger()


def _utcnow() -> datetime:
    return datetime.now(UTC)


def first_error(*results: Result) -> Result | None:
    """按声明顺序返回第一个失败的结果"""
    for result in results:
        if not result.ok:
            return result
    return None


class ReportService(StoreBackedService):
    """报表服务"""

    def __init__(self, store: RowStore, clock: Callable[[], datetime] = _utcnow) -> None:
        super().__init__(store)
        self._clock = clock

    async def task_statistics(self, user_id: int | None = None) -> Result:
        """任务状态/优先级分布；指定 user_id 时只统计其负责或创建的任务"""
        filters = []
        if user_id is not None:
            filters.append(AnyOf(Eq("assignee_id", user_id), Eq("creator_id", user_id)))
        return await self._run(
            "task_statistics",
            self._store.fetch("tasks", columns=("status", "priority"), filters=filters),
            stats.summarize_tasks,
        )

    async def user_statistics(self) -> Result:
        return await self._run(
            "user_statistics",
            self._store.fetch(
                "users",
                columns=("role", "created_at"),
                order=Order("created_at"),
            ),
            stats.summarize_users,
        )

    async def category_statistics(self) -> Result:
        """分类分布：分类与任务两次独立查询"""
        categories, tasks = await asyncio.gather(
            self._run(
                "category_statistics",
                self._store.fetch(
                    "categories",
                    columns=("category_id", "name", "color"),
                    order=Order("category_id"),
                ),
            ),
            self._run(
                "category_statistics",
                self._store.fetch("tasks", columns=("category_id",)),
            ),
        )
        if error := first_error(categories, tasks):
            return error
        return Result.success(stats.summarize_categories(categories.data, tasks.data))

    async def task_trends(self, days: int = DEFAULT_TREND_DAYS) -> Result:
        """最近 days 天内创建的任务按日期分桶"""
        if days < 1:
            return Result.failure(ErrorKind.VALIDATION, "统计天数必须为正整数")
        if days > MAX_TREND_DAYS:
            return Result.failure(
                ErrorKind.VALIDATION, f"统计天数不能超过{MAX_TREND_DAYS}天"
            )

        since = stats.window_start(self._clock(), days)
        return await self._run(
            "task_trends",
            self._store.fetch(
                "tasks",
                columns=("created_at", "status"),
                filters=[Gte("created_at", since.isoformat())],
                order=Order("created_at"),
            ),
            lambda rows: stats.build_task_trends(rows, days),
        )

    async def user_workload(self) -> Result:
        return await self._run(
            "user_workload",
            self._store.fetch(
                "tasks",
                columns=("assignee_id", "status", "priority"),
                embeds=WORKLOAD_EMBEDS,
            ),
            stats.build_workload,
        )

    async def personal_stats(self, user_id: int) -> Result:
        """个人统计：负责的任务与创建的任务两次独立查询"""
        assigned, created = await asyncio.gather(
            self._run(
                "personal_stats",
                self._store.fetch(
                    "tasks",
                    columns=("status", "priority", "due_date", "created_at"),
                    filters=[Eq("assignee_id", user_id)],
                ),
            ),
            self._run(
                "personal_stats",
                self._store.fetch(
                    "tasks",
                    columns=("status",),
                    filters=[Eq("creator_id", user_id)],
                ),
            ),
        )
        if error := first_error(assigned, created):
            return error
        return Result.success(
            stats.build_personal_stats(assigned.data, created.data, now=self._clock())
        )

    async def system_overview(self) -> Result:
        """系统概览：用户/任务/分类统计并发获取"""
        users, tasks, categories = await asyncio.gather(
            self.user_statistics(),
            self.task_statistics(),
            self.category_statistics(),
        )
        if error := first_error(users, tasks, categories):
            return error
        return Result.success(
            SystemOverview(
                users=users.data,
                tasks=tasks.data,
                categories=categories.data,
                last_updated=self._clock(),
            )
        )

    async def personal_dashboard(self, user_id: int) -> Result:
        """个人主页：资料与个人统计并发获取"""
        profile, personal = await asyncio.gather(
            UserService(self._store).get_profile(user_id),
            self.personal_stats(user_id),
        )
        if error := first_error(profile, personal):
            return error
        return Result.success(PersonalDashboard(profile=profile.data, stats=personal.data))
