"""TaskService -- 任务管理、状态更新与领取

状态是存储字段：领取时强制写入"进行中"，
只有负责人可以更新自己任务的状态。
"""

from collections.abc import Callable
from datetime import UTC, datetime

import structlog
from taskhub.core.models import (
    ErrorKind,
    Result,
    Task,
    TaskCreate,
    TaskFilters,
    TaskStatus,
    TaskUpdate,
)
from taskhub.core.store import (
    AnyOf,
    Contains,
    Eq,
    Order,
    RowNotFoundError,
    RowStore,
    RowStoreError,
)
from taskhub.core.views import TASK_EMBEDS

from .base import StoreBackedService

log = structlog.get_logger()

ALREADY_ASSIGNED = "该任务已被分配给其他用户"
NOT_ASSIGNEE = "您只能更新分配给自己的任务状态"

# 不允许被显式置空的列
_NOT_NULL_COLUMNS = ("title", "status", "priority")


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _to_task(row: dict) -> Task:
    return Task.model_validate(row)


def _to_tasks(rows: list[dict]) -> list[Task]:
    return [Task.model_validate(row) for row in rows]


def build_task_filters(filters: TaskFilters | None) -> list:
    """筛选条件 -> 存储查询条件"""
    if filters is None:
        return []
    predicates = []
    for column in ("status", "priority", "category_id", "assignee_id"):
        value = getattr(filters, column)
        if value is not None:
            predicates.append(Eq(column, value))
    if filters.search and filters.search.strip():
        text = filters.search.strip()
        predicates.append(AnyOf(Contains("title", text), Contains("description", text)))
    return predicates


class TaskService(StoreBackedService):
    """任务服务"""

    def __init__(self, store: RowStore, clock: Callable[[], datetime] = _utcnow) -> None:
        super().__init__(store)
        self._clock = clock

    async def list_tasks(self, filters: TaskFilters | None = None) -> Result:
        """任务列表（含分类、负责人、创建者），按创建时间倒序"""
        return await self._run(
            "list_tasks",
            self._store.fetch(
                "tasks",
                filters=build_task_filters(filters),
                order=Order("created_at", ascending=False),
                embeds=TASK_EMBEDS,
            ),
            _to_tasks,
        )

    async def get_task(self, task_id: int) -> Result:
        return await self._run(
            "get_task",
            self._store.fetch_one(
                "tasks",
                filters=[Eq("task_id", task_id)],
                embeds=TASK_EMBEDS,
            ),
            _to_task,
        )

    async def create_task(self, data: TaskCreate) -> Result:
        """新建任务

        Args:
            data: 任务内容，creator_id 由调用方填入当前用户
        """
        title = data.title.strip()
        if not title:
            return Result.failure(ErrorKind.VALIDATION, "任务标题不能为空")
        if data.category_id is None:
            return Result.failure(ErrorKind.VALIDATION, "请选择任务分类")
        if data.creator_id is None:
            return Result.failure(ErrorKind.VALIDATION, "缺少创建者")

        result = await self._run(
            "create_task",
            self._store.insert(
                "tasks",
                {**data.model_dump(), "title": title},
                embeds=TASK_EMBEDS,
            ),
            _to_task,
        )
        if result.ok:
            structlog.contextvars.bind_contextvars(task_id=result.data.task_id)
            log.info("task_created", status=result.data.status.value)
        return result

    async def update_task(self, task_id: int, data: TaskUpdate) -> Result:
        """更新显式设置的字段并刷新 updated_at"""
        changes = data.model_dump(exclude_unset=True)
        for column in _NOT_NULL_COLUMNS:
            if column in changes and changes[column] is None:
                del changes[column]
        if "title" in changes:
            title = changes["title"].strip()
            if not title:
                return Result.failure(ErrorKind.VALIDATION, "任务标题不能为空")
            changes["title"] = title

        changes["updated_at"] = self._clock()
        return await self._run(
            "update_task",
            self._store.update(
                "tasks",
                [Eq("task_id", task_id)],
                changes,
                embeds=TASK_EMBEDS,
            ),
            _to_task,
        )

    async def delete_task(self, task_id: int) -> Result:
        result = await self._run(
            "delete_task",
            self._store.delete("tasks", [Eq("task_id", task_id)]),
        )
        if result.ok and result.data:
            log.info("task_deleted", task_id=task_id)
        return result

    async def update_status(self, task_id: int, actor_id: int, status: TaskStatus) -> Result:
        """负责人更新自己任务的状态；非负责人不会触发任何写操作"""
        current = await self._run(
            "update_status",
            self._store.fetch_one(
                "tasks",
                columns=("task_id", "assignee_id", "status"),
                filters=[Eq("task_id", task_id)],
            ),
        )
        if not current.ok:
            return current
        if current.data.get("assignee_id") != actor_id:
            log.info("status_update_rejected", task_id=task_id, actor_id=actor_id)
            return Result.failure(ErrorKind.AUTHORIZATION, NOT_ASSIGNEE)

        result = await self._run(
            "update_status",
            self._store.update(
                "tasks",
                [Eq("task_id", task_id), Eq("assignee_id", actor_id)],
                {"status": status, "updated_at": self._clock()},
                embeds=TASK_EMBEDS,
            ),
            _to_task,
        )
        if result.ok:
            log.info(
                "task_status_updated",
                task_id=task_id,
                from_status=current.data.get("status"),
                to_status=status.value,
            )
        return result

    async def claim_task(self, task_id: int, actor_id: int) -> Result:
        """领取待领取的任务：写入负责人并强制状态为进行中

        更新以 assignee_id 为空为前提，并发领取时只有一方成功。
        """
        current = await self._run(
            "claim_task",
            self._store.fetch_one(
                "tasks",
                columns=("task_id", "assignee_id"),
                filters=[Eq("task_id", task_id)],
            ),
        )
        if not current.ok:
            return current
        if current.data.get("assignee_id") is not None:
            return Result.failure(ErrorKind.VALIDATION, ALREADY_ASSIGNED)

        try:
            row = await self._store.update(
                "tasks",
                [Eq("task_id", task_id), Eq("assignee_id", None)],
                {
                    "assignee_id": actor_id,
                    "status": TaskStatus.IN_PROGRESS,
                    "updated_at": self._clock(),
                },
                embeds=TASK_EMBEDS,
            )
        except RowNotFoundError:
            log.info("claim_lost_race", task_id=task_id, actor_id=actor_id)
            return Result.failure(ErrorKind.VALIDATION, ALREADY_ASSIGNED)
        except RowStoreError as e:
            log.warning("store_operation_failed", operation="claim_task", error=str(e))
            return Result.from_store_error(e)

        log.info("task_claimed", task_id=task_id, actor_id=actor_id)
        return Result.success(_to_task(row))
