"""分类路由

GET /api/categories[?search], GET /api/categories/{category_id}: 任意登录用户
POST/PATCH/DELETE: 仅管理员
"""

from fastapi import APIRouter, Depends, Query
from taskhub.core.models import CategoryCreate, CategoryUpdate, User

from ..deps import admin_user, current_user, get_row_store
from ..responses import envelope
from ..services.category_service import CategoryService

router = APIRouter()


@router.get("/api/categories")
async def list_categories(
    search: str | None = Query(default=None, description="按名称或描述搜索"),
    _user: User = Depends(current_user),
    store=Depends(get_row_store),
):
    return envelope(await CategoryService(store).list_categories(search))


@router.get("/api/categories/{category_id}")
async def get_category(
    category_id: int,
    _user: User = Depends(current_user),
    store=Depends(get_row_store),
):
    return envelope(await CategoryService(store).get_category(category_id))


@router.post("/api/categories")
async def create_category(
    body: CategoryCreate,
    admin: User = Depends(admin_user),
    store=Depends(get_row_store),
):
    """创建分类，创建者为当前管理员"""
    data = body.model_copy(update={"creator_id": admin.user_id})
    return envelope(await CategoryService(store).create_category(data), success_status=201)


@router.patch("/api/categories/{category_id}")
async def update_category(
    category_id: int,
    body: CategoryUpdate,
    _admin: User = Depends(admin_user),
    store=Depends(get_row_store),
):
    return envelope(await CategoryService(store).update_category(category_id, body))


@router.delete("/api/categories/{category_id}")
async def delete_category(
    category_id: int,
    _admin: User = Depends(admin_user),
    store=Depends(get_row_store),
):
    return envelope(await CategoryService(store).delete_category(category_id))
