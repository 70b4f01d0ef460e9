"""CategoryService -- 任务分类管理"""

import structlog
from taskhub.core.models import Category, CategoryCreate, CategoryUpdate, ErrorKind, Result
from taskhub.core.store import AnyOf, Contains, Eq, Order
from taskhub.core.views import CATEGORY_EMBEDS

from .base import StoreBackedService

log = structlog.get_logger()


def _to_category(row: dict) -> Category:
    return Category.model_validate(row)


def _to_categories(rows: list[dict]) -> list[Category]:
    return [Category.model_validate(row) for row in rows]


class CategoryService(StoreBackedService):
    """分类服务"""

    async def list_categories(self, search: str | None = None) -> Result:
        """分类列表（含创建者），按创建时间倒序"""
        filters = []
        if search and search.strip():
            text = search.strip()
            filters.append(AnyOf(Contains("name", text), Contains("description", text)))
        return await self._run(
            "list_categories",
            self._store.fetch(
                "categories",
                filters=filters,
                order=Order("created_at", ascending=False),
                embeds=CATEGORY_EMBEDS,
            ),
            _to_categories,
        )

    async def get_category(self, category_id: int) -> Result:
        return await self._run(
            "get_category",
            self._store.fetch_one(
                "categories",
                filters=[Eq("category_id", category_id)],
                embeds=CATEGORY_EMBEDS,
            ),
            _to_category,
        )

    async def create_category(self, data: CategoryCreate) -> Result:
        name = data.name.strip()
        if not name:
            return Result.failure(ErrorKind.VALIDATION, "请输入分类名称")
        if data.creator_id is None:
            return Result.failure(ErrorKind.VALIDATION, "缺少创建者")

        result = await self._run(
            "create_category",
            self._store.insert(
                "categories",
                {**data.model_dump(), "name": name},
                embeds=CATEGORY_EMBEDS,
            ),
            _to_category,
        )
        if result.ok:
            log.info("category_created", category_id=result.data.category_id)
        return result

    async def update_category(self, category_id: int, data: CategoryUpdate) -> Result:
        """仅写入显式设置的字段"""
        changes = data.model_dump(exclude_unset=True)
        if "name" in changes:
            name = (changes["name"] or "").strip()
            if not name:
                return Result.failure(ErrorKind.VALIDATION, "请输入分类名称")
            changes["name"] = name
        if changes.get("color") is None:
            changes.pop("color", None)

        if not changes:
            return await self.get_category(category_id)

        return await self._run(
            "update_category",
            self._store.update(
                "categories",
                [Eq("category_id", category_id)],
                changes,
                embeds=CATEGORY_EMBEDS,
            ),
            _to_category,
        )

    async def delete_category(self, category_id: int) -> Result:
        """删除分类；引用它的任务的 category_id 由存储层置空"""
        result = await self._run(
            "delete_category",
            self._store.delete("categories", [Eq("category_id", category_id)]),
        )
        if result.ok and result.data:
            log.info("category_deleted", category_id=category_id)
        return result
