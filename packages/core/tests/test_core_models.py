"""Domain Models 单元测试

测试内容：
1. 枚举取值
2. Result 结构与存储异常转换
3. 任务截止日期解析、关联视图
"""

from datetime import datetime

import pytest
from pydantic import ValidationError
from taskhub.core.models import (
    ErrorKind,
    Result,
    Task,
    TaskPriority,
    TaskStatus,
    TaskUpdate,
    User,
    UserRole,
)
from taskhub.core.store import (
    RowConflictError,
    RowNotFoundError,
    RowStoreError,
    RowStoreUnavailableError,
)


class TestEnums:
    """枚举取值"""

    def test_task_status_values(self):
        assert TaskStatus.PENDING == "待领取"
        assert TaskStatus.IN_PROGRESS == "进行中"
        assert TaskStatus.COMPLETED == "已完成"
        assert TaskStatus.OVERDUE == "已逾期"

    def test_priority_and_role(self):
        assert [p.value for p in TaskPriority] == ["low", "medium", "high"]
        assert UserRole("admin") == UserRole.ADMIN


class TestResult:
    """{data, error} 结构"""

    def test_success(self):
        result = Result.success([])
        assert result.ok
        assert result.data == []
        assert result.model_dump() == {"data": [], "error": None}

    def test_failure(self):
        result = Result.failure(ErrorKind.VALIDATION, "任务标题不能为空")
        assert not result.ok
        assert result.data is None
        assert result.error.kind == ErrorKind.VALIDATION
        assert result.error.message == "任务标题不能为空"

    @pytest.mark.parametrize(
        ("error", "kind"),
        [
            (RowStoreError("boom", code="XX000"), ErrorKind.STORE),
            (RowNotFoundError("none", code="PGRST116"), ErrorKind.NOT_FOUND),
            (RowConflictError("dup", code="23505"), ErrorKind.CONFLICT),
            (RowStoreUnavailableError("db", OSError("down")), ErrorKind.UNAVAILABLE),
        ],
    )
    def test_from_store_error_keeps_kind_and_code(self, error, kind):
        """存储异常原样透传分类、描述与错误码"""
        result = Result.from_store_error(error)
        assert result.error.kind == kind
        assert result.error.message == str(error)
        assert result.error.code == error.code

    def test_json_dump(self):
        result = Result.failure(ErrorKind.CONFLICT, "dup", code="23505")
        dumped = result.model_dump(mode="json")
        assert dumped["error"]["kind"] == "conflict"
        assert dumped["error"]["code"] == "23505"


class TestTaskModel:
    def _row(self, **fields):
        row = {
            "task_id": 1,
            "title": "t",
            "status": "进行中",
            "priority": "high",
            "created_at": "2026-10-19T08:00:00.000+00:00",
            "updated_at": "2026-10-19T08:00:00.000+00:00",
        }
        row.update(fields)
        return row

    def test_from_row_with_embeds(self):
        task = Task.model_validate(
            self._row(
                category={"category_id": 3, "name": "开发", "color": "#ff0000"},
                assigned_user={"user_id": 2, "username": "bob"},
                creator=None,
            )
        )
        assert task.status == TaskStatus.IN_PROGRESS
        assert task.category.name == "开发"
        assert task.assigned_user.username == "bob"
        assert task.creator is None

    def test_due_date_plain_date(self):
        task = Task.model_validate(self._row(due_date="2026-10-31"))
        assert task.due_date == datetime(2026, 10, 31)

    def test_due_date_blank(self):
        task = Task.model_validate(self._row(due_date=""))
        assert task.due_date is None

    def test_invalid_status(self):
        with pytest.raises(ValidationError):
            Task.model_validate(self._row(status="已取消"))

    def test_update_tracks_explicit_fields(self):
        update = TaskUpdate.model_validate({"assignee_id": None, "title": "新标题"})
        assert update.model_dump(exclude_unset=True) == {"assignee_id": None, "title": "新标题"}


class TestUserModel:
    def test_password_field_ignored(self):
        user = User.model_validate(
            {
                "user_id": 1,
                "username": "admin",
                "password": "secret",
                "role": "admin",
                "created_at": "2026-10-19T08:00:00+00:00",
            }
        )
        assert user.is_admin
        assert "password" not in user.model_dump()
