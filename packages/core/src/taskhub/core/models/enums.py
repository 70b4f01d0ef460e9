"""枚举定义

包含 TaskStatus、TaskPriority、UserRole、ErrorKind 枚举，
以及统计时使用的固定取值集合。
"""

from enum import StrEnum


class TaskStatus(StrEnum):
    """任务状态 -- 存储字段，不随 due_date 自动变化"""

    PENDING = "待领取"
    IN_PROGRESS = "进行中"
    COMPLETED = "已完成"
    OVERDUE = "已逾期"


class TaskPriority(StrEnum):
    """任务优先级"""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class UserRole(StrEnum):
    """用户角色"""

    ADMIN = "admin"
    USER = "user"


class ErrorKind(StrEnum):
    """错误分类

    store/not_found/conflict/unavailable 来自存储层，原样透传；
    其余为本地检测。
    """

    STORE = "store"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    UNAVAILABLE = "unavailable"
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"


# 统计分桶使用的固定取值（顺序即展示顺序）
TASK_STATUS_VALUES: tuple[str, ...] = tuple(s.value for s in TaskStatus)
TASK_PRIORITY_VALUES: tuple[str, ...] = tuple(p.value for p in TaskPriority)
USER_ROLE_VALUES: tuple[str, ...] = tuple(r.value for r in UserRole)
