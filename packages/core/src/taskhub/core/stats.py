"""聚合引擎 -- 将原始行集合归约为统计结构

所有函数都是纯函数：不做 I/O，不修改输入。
行以 Mapping 形式传入（存储层原始行），缺失字段按 0/False 计。
"""

from collections.abc import Iterable, Mapping
from datetime import UTC, datetime, timedelta
from typing import Any

from .config import RECENT_ACTIVITY_DAYS, UNKNOWN_USERNAME
from .models.enums import (
    TASK_PRIORITY_VALUES,
    TASK_STATUS_VALUES,
    USER_ROLE_VALUES,
    TaskPriority,
    TaskStatus,
)
from .models.stats import (
    AssignedTaskStats,
    CategoryStatistics,
    CategoryUsage,
    CreatedTaskStats,
    DailyTrend,
    MonthlyCount,
    PersonalStats,
    RecentActivity,
    TaskStatistics,
    TaskTrends,
    TrendSummary,
    UserStatistics,
    UserWorkload,
    WorkloadStatistics,
    WorkloadSummary,
)

Row = Mapping[str, Any]

# 状态 -> 工作量计数字段
_STATUS_COUNTERS: dict[str, str] = {
    TaskStatus.COMPLETED: "completed",
    TaskStatus.IN_PROGRESS: "in_progress",
    TaskStatus.PENDING: "pending",
    TaskStatus.OVERDUE: "overdue",
}

_WORKLOAD_COUNTERS = (
    "total",
    "completed",
    "in_progress",
    "pending",
    "overdue",
    "high_priority",
)


def round_half_up(numerator: int, denominator: int) -> int:
    """整数除法并四舍五入（.5 向上）；分母为 0 时返回 0"""
    if denominator <= 0:
        return 0
    return (2 * numerator + denominator) // (2 * denominator)


def completion_rate(completed: int, total: int) -> int:
    """完成率百分比，total 为 0 时为 0"""
    return round_half_up(100 * completed, total)


def parse_timestamp(value: Any) -> datetime | None:
    """解析行中的时间字段（datetime 或 ISO 字符串），空值返回 None"""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def _as_aware(value: datetime) -> datetime:
    """无时区的时间按 UTC 处理，便于与 now 比较"""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def window_start(now: datetime, days: int) -> datetime:
    """时间窗口起点：now - days"""
    return _as_aware(now) - timedelta(days=days)


def count_by(rows: Iterable[Row], field: str, values: Iterable[str]) -> dict[str, int]:
    """按固定取值集合计数

    每个取值一个桶；数据中未识别的取值不计入任何桶。
    """
    counts = {value: 0 for value in values}
    for row in rows:
        value = row.get(field)
        if value in counts:
            counts[value] += 1
    return counts


def summarize_users(rows: Iterable[Row]) -> UserStatistics:
    """用户统计：按角色计数 + 按月注册趋势"""
    rows = list(rows)
    monthly: dict[str, int] = {}
    for row in rows:
        created_at = parse_timestamp(row.get("created_at"))
        if created_at is None:
            continue
        month = created_at.strftime("%Y-%m")
        monthly[month] = monthly.get(month, 0) + 1

    return UserStatistics(
        total=len(rows),
        by_role=count_by(rows, "role", USER_ROLE_VALUES),
        registration_trend=[
            MonthlyCount(month=month, count=monthly[month]) for month in sorted(monthly)
        ],
    )


def summarize_tasks(rows: Iterable[Row]) -> TaskStatistics:
    """任务统计：按状态、优先级计数"""
    rows = list(rows)
    return TaskStatistics(
        total=len(rows),
        by_status=count_by(rows, "status", TASK_STATUS_VALUES),
        by_priority=count_by(rows, "priority", TASK_PRIORITY_VALUES),
    )


def summarize_categories(
    categories: Iterable[Row],
    tasks: Iterable[Row],
) -> CategoryStatistics:
    """分类分布：每个分类的任务数 + 使用最多的分类

    并列时取迭代顺序中最先出现的分类；没有分类时 most_used_category 为 None。
    """
    tasks = list(tasks)
    distribution = [
        CategoryUsage(
            category_id=category.get("category_id"),
            name=category.get("name"),
            color=category.get("color"),
            task_count=sum(
                1
                for task in tasks
                if task.get("category_id") == category.get("category_id")
            ),
        )
        for category in categories
    ]

    most_used: CategoryUsage | None = None
    for usage in distribution:
        if most_used is None or usage.task_count > most_used.task_count:
            most_used = usage

    return CategoryStatistics(
        total=len(distribution),
        category_distribution=distribution,
        most_used_category=most_used,
    )


def build_task_trends(rows: Iterable[Row], days: int) -> TaskTrends:
    """按创建日期分桶的任务趋势

    日期取 created_at 自身的日历日期（不做时区换算）。
    completed 统计的是"当天创建且当前状态为已完成"的任务，
    而不是当天完成的任务（没有单独的完成时间戳）。
    """
    buckets: dict[str, DailyTrend] = {}
    for row in rows:
        created_at = parse_timestamp(row.get("created_at"))
        if created_at is None:
            continue
        day = created_at.date().isoformat()
        bucket = buckets.get(day)
        if bucket is None:
            bucket = buckets[day] = DailyTrend(date=day)
        bucket.created += 1
        if row.get("status") == TaskStatus.COMPLETED:
            bucket.completed += 1

    daily = [buckets[day] for day in sorted(buckets)]
    total_created = sum(item.created for item in daily)
    total_completed = sum(item.completed for item in daily)

    return TaskTrends(
        period_days=days,
        daily_trends=daily,
        summary=TrendSummary(
            total_created=total_created,
            total_completed=total_completed,
            completion_rate=completion_rate(total_completed, total_created),
        ),
    )


def _embedded_username(row: Row) -> str:
    assigned_user = row.get("assigned_user")
    if isinstance(assigned_user, Mapping) and assigned_user.get("username"):
        return assigned_user["username"]
    return UNKNOWN_USERNAME


def build_workload(rows: Iterable[Row]) -> WorkloadStatistics:
    """按负责人分组的工作量

    assignee_id 为空的任务只计入 unassigned_tasks。
    overdue 按存储的状态值统计，不比较截止时间。
    """
    groups: dict[Any, dict[str, Any]] = {}
    unassigned = 0

    for row in rows:
        assignee_id = row.get("assignee_id")
        if assignee_id is None:
            unassigned += 1
            continue

        group = groups.get(assignee_id)
        if group is None:
            group = groups[assignee_id] = {
                "user_id": assignee_id,
                "username": _embedded_username(row),
                **dict.fromkeys(_WORKLOAD_COUNTERS, 0),
            }

        group["total"] += 1
        counter = _STATUS_COUNTERS.get(row.get("status"))
        if counter is not None:
            group[counter] += 1
        if row.get("priority") == TaskPriority.HIGH:
            group["high_priority"] += 1

    workloads = [
        UserWorkload(**group, completion_rate=completion_rate(group["completed"], group["total"]))
        for group in groups.values()
    ]
    total_assigned = sum(item.total for item in workloads)

    return WorkloadStatistics(
        user_workloads=workloads,
        summary=WorkloadSummary(
            total_assigned_tasks=total_assigned,
            unassigned_tasks=unassigned,
            average_tasks_per_user=round_half_up(total_assigned, len(workloads)),
        ),
    )


def _is_past_due(row: Row, now: datetime) -> bool:
    due_date = parse_timestamp(row.get("due_date"))
    if due_date is None:
        return False
    return _as_aware(due_date) < now and row.get("status") != TaskStatus.COMPLETED


def build_personal_stats(
    assigned: Iterable[Row],
    created: Iterable[Row],
    now: datetime,
    recent_days: int = RECENT_ACTIVITY_DAYS,
) -> PersonalStats:
    """单个用户的个人统计

    assigned 中的 overdue 按截止时间动态计算
    （due_date 已设置、早于 now 且未完成），与工作量统计中按状态值计数不同。
    最近活动按任务自身的 created_at 过滤。
    """
    assigned = list(assigned)
    created = list(created)
    now = _as_aware(now)

    assigned_status = count_by(assigned, "status", TASK_STATUS_VALUES)
    assigned_stats = AssignedTaskStats(
        total=len(assigned),
        completed=assigned_status[TaskStatus.COMPLETED],
        in_progress=assigned_status[TaskStatus.IN_PROGRESS],
        pending=assigned_status[TaskStatus.PENDING],
        overdue=sum(1 for row in assigned if _is_past_due(row, now)),
        high_priority=sum(1 for row in assigned if row.get("priority") == TaskPriority.HIGH),
        completion_rate=completion_rate(assigned_status[TaskStatus.COMPLETED], len(assigned)),
    )

    created_status = count_by(created, "status", TASK_STATUS_VALUES)
    created_stats = CreatedTaskStats(
        total=len(created),
        completed=created_status[TaskStatus.COMPLETED],
        in_progress=created_status[TaskStatus.IN_PROGRESS],
        pending=created_status[TaskStatus.PENDING],
        completion_rate=completion_rate(created_status[TaskStatus.COMPLETED], len(created)),
    )

    since = window_start(now, recent_days)
    recent = []
    for row in assigned:
        created_at = parse_timestamp(row.get("created_at"))
        if created_at is not None and _as_aware(created_at) >= since:
            recent.append(row)

    return PersonalStats(
        assigned=assigned_stats,
        created=created_stats,
        recent_activity=RecentActivity(
            assigned_last_30_days=len(recent),
            completed_last_30_days=sum(
                1 for row in recent if row.get("status") == TaskStatus.COMPLETED
            ),
        ),
    )
