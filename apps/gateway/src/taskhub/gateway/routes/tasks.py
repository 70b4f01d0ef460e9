"""任务路由

GET /api/tasks: 任务列表，支持 status/priority/category_id/assignee_id/search 筛选
GET /api/tasks/{task_id}: 任务详情（含分类、负责人、创建者）
POST/PATCH/DELETE: 仅管理员
POST /api/tasks/{task_id}/claim: 领取待领取的任务
POST /api/tasks/{task_id}/status: 负责人更新任务状态
"""

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from taskhub.core.models import (
    TaskCreate,
    TaskFilters,
    TaskPriority,
    TaskStatus,
    TaskUpdate,
    User,
)

from ..deps import admin_user, current_user, get_row_store
from ..responses import envelope
from ..services.task_service import TaskService

router = APIRouter()


class StatusChange(BaseModel):
    status: TaskStatus


@router.get("/api/tasks")
async def list_tasks(
    status: TaskStatus | None = Query(default=None, description="按状态筛选"),
    priority: TaskPriority | None = Query(default=None, description="按优先级筛选"),
    category_id: int | None = Query(default=None, description="按分类筛选"),
    assignee_id: int | None = Query(default=None, description="按负责人筛选"),
    search: str | None = Query(default=None, description="标题或描述关键字"),
    _user: User = Depends(current_user),
    store=Depends(get_row_store),
):
    """查询任务列表，按 created_at 倒序"""
    filters = TaskFilters(
        status=status,
        priority=priority,
        category_id=category_id,
        assignee_id=assignee_id,
        search=search,
    )
    return envelope(await TaskService(store).list_tasks(filters))


@router.get("/api/tasks/{task_id}")
async def get_task(
    task_id: int,
    _user: User = Depends(current_user),
    store=Depends(get_row_store),
):
    return envelope(await TaskService(store).get_task(task_id))


@router.post("/api/tasks")
async def create_task(
    body: TaskCreate,
    admin: User = Depends(admin_user),
    store=Depends(get_row_store),
):
    """创建任务，创建者为当前管理员"""
    data = body.model_copy(update={"creator_id": admin.user_id})
    return envelope(await TaskService(store).create_task(data), success_status=201)


@router.patch("/api/tasks/{task_id}")
async def update_task(
    task_id: int,
    body: TaskUpdate,
    _admin: User = Depends(admin_user),
    store=Depends(get_row_store),
):
    return envelope(await TaskService(store).update_task(task_id, body))


@router.delete("/api/tasks/{task_id}")
async def delete_task(
    task_id: int,
    _admin: User = Depends(admin_user),
    store=Depends(get_row_store),
):
    return envelope(await TaskService(store).delete_task(task_id))


@router.post("/api/tasks/{task_id}/claim")
async def claim_task(
    task_id: int,
    user: User = Depends(current_user),
    store=Depends(get_row_store),
):
    return envelope(await TaskService(store).claim_task(task_id, user.user_id))


@router.post("/api/tasks/{task_id}/status")
async def update_status(
    task_id: int,
    body: StatusChange,
    user: User = Depends(current_user),
    store=Depends(get_row_store),
):
    return envelope(await TaskService(store).update_status(task_id, user.user_id, body.status))
