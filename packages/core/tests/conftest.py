"""packages/core 测试配置 -- 聚合引擎用的行数据工厂"""

from datetime import UTC, datetime

import pytest


@pytest.fixture
def now() -> datetime:
    """固定的当前时间"""
    return datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


@pytest.fixture
def make_task():
    """构造任务行（只含聚合需要的字段）"""

    def _make(**fields) -> dict:
        row = {
            "status": "待领取",
            "priority": "medium",
            "assignee_id": None,
            "category_id": None,
            "due_date": None,
            "created_at": "2026-10-19T08:00:00+00:00",
        }
        row.update(fields)
        return row

    return _make
