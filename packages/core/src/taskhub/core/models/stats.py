"""统计结果模型 -- 聚合引擎的输出结构

所有比率字段均为 [0, 100] 内的整数。
"""

from datetime import datetime

from pydantic import BaseModel, Field

from .user import User


class MonthlyCount(BaseModel):
    month: str = Field(description="YYYY-MM")
    count: int


class UserStatistics(BaseModel):
    """用户统计"""

    total: int
    by_role: dict[str, int]
    registration_trend: list[MonthlyCount] = Field(default_factory=list)


class TaskStatistics(BaseModel):
    """任务统计 -- 分桶之和可能小于 total（未识别取值不计入任何桶）"""

    total: int
    by_status: dict[str, int]
    by_priority: dict[str, int]


class CategoryUsage(BaseModel):
    category_id: int | None = None
    name: str | None = None
    color: str | None = None
    task_count: int = 0


class CategoryStatistics(BaseModel):
    """分类统计"""

    total: int
    category_distribution: list[CategoryUsage]
    most_used_category: CategoryUsage | None = None


class DailyTrend(BaseModel):
    date: str = Field(description="YYYY-MM-DD")
    created: int = 0
    completed: int = 0


class TrendSummary(BaseModel):
    total_created: int = 0
    total_completed: int = 0
    completion_rate: int = 0


class TaskTrends(BaseModel):
    """按创建日期统计的任务趋势"""

    period_days: int
    daily_trends: list[DailyTrend]
    summary: TrendSummary


class UserWorkload(BaseModel):
    user_id: int
    username: str
    total: int = 0
    completed: int = 0
    in_progress: int = 0
    pending: int = 0
    overdue: int = 0
    high_priority: int = 0
    completion_rate: int = 0


class WorkloadSummary(BaseModel):
    total_assigned_tasks: int = 0
    unassigned_tasks: int = 0
    average_tasks_per_user: int = 0


class WorkloadStatistics(BaseModel):
    """按负责人分组的工作量统计"""

    user_workloads: list[UserWorkload]
    summary: WorkloadSummary


class AssignedTaskStats(BaseModel):
    total: int = 0
    completed: int = 0
    in_progress: int = 0
    pending: int = 0
    overdue: int = Field(default=0, description="按截止时间动态计算")
    high_priority: int = 0
    completion_rate: int = 0


class CreatedTaskStats(BaseModel):
    total: int = 0
    completed: int = 0
    in_progress: int = 0
    pending: int = 0
    completion_rate: int = 0


class RecentActivity(BaseModel):
    assigned_last_30_days: int = 0
    completed_last_30_days: int = 0


class PersonalStats(BaseModel):
    """单个用户的个人统计"""

    assigned: AssignedTaskStats
    created: CreatedTaskStats
    recent_activity: RecentActivity


class SystemOverview(BaseModel):
    """系统概览（仪表板）"""

    users: UserStatistics
    tasks: TaskStatistics
    categories: CategoryStatistics
    last_updated: datetime


class PersonalDashboard(BaseModel):
    """个人主页：资料 + 个人统计"""

    profile: User
    stats: PersonalStats
