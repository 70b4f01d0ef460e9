"""Task Domain Model

status 为存储字段："已逾期"需要显式写入，不会根据 due_date 自动推导。
assignee_id 为空表示任务待领取。
"""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, Field

from .category import CategoryRef
from .enums import TaskPriority, TaskStatus
from .user import UserRef


def _parse_due_date(value):
    """接受 "YYYY-MM-DD" 形式的截止日期"""
    if isinstance(value, str):
        if not value.strip():
            return None
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    return value


DueDate = Annotated[datetime | None, BeforeValidator(_parse_due_date)]


class Task(BaseModel):
    """任务数据模型（含关联视图）"""

    task_id: int = Field(description="任务 ID")
    title: str = Field(description="任务标题")
    description: str | None = Field(default=None, description="任务描述")
    status: TaskStatus = Field(default=TaskStatus.PENDING, description="当前状态")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM, description="优先级")
    due_date: DueDate = Field(default=None, description="截止时间")
    category_id: int | None = Field(default=None, description="分类 ID")
    assignee_id: int | None = Field(default=None, description="负责人 ID，空表示待领取")
    creator_id: int | None = Field(default=None, description="创建者 ID")
    created_at: datetime = Field(description="创建时间")
    updated_at: datetime = Field(description="更新时间")
    category: CategoryRef | None = Field(default=None, description="分类（关联视图）")
    assigned_user: UserRef | None = Field(default=None, description="负责人（关联视图）")
    creator: UserRef | None = Field(default=None, description="创建者（关联视图）")


class TaskCreate(BaseModel):
    """新建任务请求，creator_id 由调用方填入当前用户"""

    title: str = ""
    description: str | None = None
    status: TaskStatus = TaskStatus.PENDING
    priority: TaskPriority = TaskPriority.MEDIUM
    due_date: DueDate = None
    category_id: int | None = None
    assignee_id: int | None = None
    creator_id: int | None = None


class TaskUpdate(BaseModel):
    """更新任务请求，仅写入显式设置的字段"""

    title: str | None = None
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: DueDate = None
    category_id: int | None = None
    assignee_id: int | None = None


class TaskFilters(BaseModel):
    """任务列表筛选条件"""

    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    category_id: int | None = None
    assignee_id: int | None = None
    search: str | None = None
