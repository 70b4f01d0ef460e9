"""报表路由（管理员）

GET /api/reports/overview: 系统概览
GET /api/reports/tasks[?user_id]: 任务状态/优先级分布
GET /api/reports/users: 用户角色分布与注册趋势
GET /api/reports/categories: 分类分布
GET /api/reports/trends[?days=30]: 按创建日期的任务趋势
GET /api/reports/workload: 按负责人的工作量
"""

from fastapi import APIRouter, Depends, Query
from taskhub.core.config import DEFAULT_TREND_DAYS, MAX_TREND_DAYS
from taskhub.core.models import User

from ..deps import admin_user, get_row_store
from ..responses import envelope
from ..services.report_service import ReportService

router = APIRouter()


@router.get("/api/reports/overview")
async def system_overview(
    _admin: User = Depends(admin_user),
    store=Depends(get_row_store),
):
    return envelope(await ReportService(store).system_overview())


@router.get("/api/reports/tasks")
async def task_statistics(
    user_id: int | None = Query(default=None, description="只统计该用户负责或创建的任务"),
    _admin: User = Depends(admin_user),
    store=Depends(get_row_store),
):
    return envelope(await ReportService(store).task_statistics(user_id))


@router.get("/api/reports/users")
async def user_statistics(
    _admin: User = Depends(admin_user),
    store=Depends(get_row_store),
):
    return envelope(await ReportService(store).user_statistics())


@router.get("/api/reports/categories")
async def category_statistics(
    _admin: User = Depends(admin_user),
    store=Depends(get_row_store),
):
    return envelope(await ReportService(store).category_statistics())


@router.get("/api/reports/trends")
async def task_trends(
    days: int = Query(
        default=DEFAULT_TREND_DAYS, ge=1, le=MAX_TREND_DAYS, description="统计最近多少天"
    ),
    _admin: User = Depends(admin_user),
    store=Depends(get_row_store),
):
    return envelope(await ReportService(store).task_trends(days))


@router.get("/api/reports/workload")
async def user_workload(
    _admin: User = Depends(admin_user),
    store=Depends(get_row_store),
):
    return envelope(await ReportService(store).user_workload())
