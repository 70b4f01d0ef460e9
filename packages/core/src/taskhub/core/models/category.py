"""Category Domain Model"""

from datetime import datetime

from pydantic import BaseModel, Field

from ..config import DEFAULT_CATEGORY_COLOR
from .user import UserRef


class CategoryRef(BaseModel):
    """关联查询中嵌入的分类视图"""

    category_id: int
    name: str
    color: str = DEFAULT_CATEGORY_COLOR


class Category(BaseModel):
    """任务分类"""

    category_id: int = Field(description="分类 ID")
    name: str = Field(description="分类名称")
    description: str | None = Field(default=None, description="分类描述")
    color: str = Field(default=DEFAULT_CATEGORY_COLOR, description="展示颜色")
    creator_id: int | None = Field(default=None, description="创建者 ID")
    created_at: datetime = Field(description="创建时间")
    creator: UserRef | None = Field(default=None, description="创建者（关联视图）")


class CategoryCreate(BaseModel):
    """新建分类请求，creator_id 由调用方填入当前用户"""

    name: str = ""
    description: str | None = None
    color: str = DEFAULT_CATEGORY_COLOR
    creator_id: int | None = None


class CategoryUpdate(BaseModel):
    name: str | None = None
    description: str | None = None
    color: str | None = None
