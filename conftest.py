"""全局 pytest 配置 -- 临时 SQLite RowStore fixture"""

import os
from collections.abc import AsyncGenerator
from pathlib import Path

import pytest_asyncio

# 测试中降低 PBKDF2 迭代次数
os.environ.setdefault("TASKHUB_PASSWORD_HASH_ITERATIONS", "1000")


@pytest_asyncio.fixture
async def tmp_db_path(tmp_path: Path) -> Path:
    """提供临时 SQLite 数据库路径"""
    return tmp_path / "sqlite" / "test.db"


@pytest_asyncio.fixture
async def row_store(tmp_db_path: Path) -> AsyncGenerator:
    """提供已建表的临时 SqliteRowStore"""
    from taskhub.core.store import create_sqlite_store

    store = await create_sqlite_store(str(tmp_db_path))
    yield store
    await store.close()


class Seeder:
    """直接通过 RowStore 写入测试数据（绕过服务层校验）"""

    def __init__(self, store) -> None:
        self.store = store

    async def user(
        self,
        username: str,
        password: str = "secret123",
        role: str = "user",
        hashed: bool = True,
        **fields,
    ) -> dict:
        from taskhub.core.passwords import hash_password

        row = {
            "username": username,
            "password": hash_password(password) if hashed else password,
            "role": role,
            **fields,
        }
        return await self.store.insert("users", row)

    async def category(self, name: str, creator_id: int | None = None, **fields) -> dict:
        return await self.store.insert(
            "categories",
            {"name": name, "creator_id": creator_id, **fields},
        )

    async def task(self, title: str, category_id: int | None = None, **fields) -> dict:
        return await self.store.insert(
            "tasks",
            {"title": title, "category_id": category_id, **fields},
        )


@pytest_asyncio.fixture
async def seed(row_store) -> Seeder:
    return Seeder(row_store)
