"""关联视图定义 -- 各实体查询时使用的列与嵌入关系

嵌入别名与模型字段同名（Task.category / Task.assigned_user / Task.creator、
Category.creator），行可直接交给 model_validate。
"""

from .store.query import Embed

# 对外可见的用户列（不含 password）
USER_PUBLIC_COLUMNS: tuple[str, ...] = ("user_id", "username", "role", "created_at")

# 认证时需要读取的用户列
USER_AUTH_COLUMNS: tuple[str, ...] = (*USER_PUBLIC_COLUMNS, "password")

CATEGORY_EMBEDS: tuple[Embed, ...] = (
    Embed(
        alias="creator",
        table="users",
        column="creator_id",
        remote_column="user_id",
        columns=("user_id", "username"),
    ),
)

TASK_EMBEDS: tuple[Embed, ...] = (
    Embed(
        alias="category",
        table="categories",
        column="category_id",
        remote_column="category_id",
        columns=("category_id", "name", "color"),
    ),
    Embed(
        alias="assigned_user",
        table="users",
        column="assignee_id",
        remote_column="user_id",
        columns=("user_id", "username"),
    ),
    Embed(
        alias="creator",
        table="users",
        column="creator_id",
        remote_column="user_id",
        columns=("user_id", "username"),
    ),
)

# 工作量统计只需要负责人的用户名
WORKLOAD_EMBEDS: tuple[Embed, ...] = (
    Embed(
        alias="assigned_user",
        table="users",
        column="assignee_id",
        remote_column="user_id",
        columns=("username",),
    ),
)
