"""TaskHub Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .category import Category, CategoryCreate, CategoryRef, CategoryUpdate
from .enums import (
    TASK_PRIORITY_VALUES,
    TASK_STATUS_VALUES,
    USER_ROLE_VALUES,
    ErrorKind,
    TaskPriority,
    TaskStatus,
    UserRole,
)
from .result import Result, ServiceError
from .stats import (
    AssignedTaskStats,
    CategoryStatistics,
    CategoryUsage,
    CreatedTaskStats,
    DailyTrend,
    MonthlyCount,
    PersonalDashboard,
    PersonalStats,
    RecentActivity,
    SystemOverview,
    TaskStatistics,
    TaskTrends,
    TrendSummary,
    UserStatistics,
    UserWorkload,
    WorkloadStatistics,
    WorkloadSummary,
)
from .task import Task, TaskCreate, TaskFilters, TaskUpdate
from .user import User, UserCreate, UsernameAvailability, UserRef, UserUpdate

__all__ = [
    # 枚举
    "TaskStatus",
    "TaskPriority",
    "UserRole",
    "ErrorKind",
    "TASK_STATUS_VALUES",
    "TASK_PRIORITY_VALUES",
    "USER_ROLE_VALUES",
    # 结果
    "Result",
    "ServiceError",
    # User
    "User",
    "UserRef",
    "UserCreate",
    "UserUpdate",
    "UsernameAvailability",
    # Category
    "Category",
    "CategoryRef",
    "CategoryCreate",
    "CategoryUpdate",
    # Task
    "Task",
    "TaskCreate",
    "TaskUpdate",
    "TaskFilters",
    # 统计
    "UserStatistics",
    "MonthlyCount",
    "TaskStatistics",
    "CategoryStatistics",
    "CategoryUsage",
    "TaskTrends",
    "DailyTrend",
    "TrendSummary",
    "WorkloadStatistics",
    "UserWorkload",
    "WorkloadSummary",
    "PersonalStats",
    "AssignedTaskStats",
    "CreatedTaskStats",
    "RecentActivity",
    "PersonalDashboard",
    "SystemOverview",
]
