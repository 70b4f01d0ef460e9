"""SQLite 数据库初始化

PRAGMA 配置 + 三张表 DDL + 索引创建。
使用 aiosqlite 异步操作。
"""

import aiosqlite

# 时间戳默认值：UTC ISO-8601，与 datetime.isoformat() 可按字符串比较
_NOW_ISO = "(strftime('%Y-%m-%dT%H:%M:%f+00:00', 'now'))"

# users 表 DDL
_USERS_DDL = f"""
CREATE TABLE IF NOT EXISTS users (
    user_id     INTEGER PRIMARY KEY AUTOINCREMENT,
    username    TEXT NOT NULL UNIQUE,
    password    TEXT NOT NULL,
    role        TEXT NOT NULL DEFAULT 'user',
    created_at  TEXT NOT NULL DEFAULT {_NOW_ISO}
);
"""

# categories 表 DDL
_CATEGORIES_DDL = f"""
CREATE TABLE IF NOT EXISTS categories (
    category_id  INTEGER PRIMARY KEY AUTOINCREMENT,
    name         TEXT NOT NULL,
    description  TEXT,
    color        TEXT NOT NULL DEFAULT '#007bff',
    creator_id   INTEGER,
    created_at   TEXT NOT NULL DEFAULT {_NOW_ISO},

    FOREIGN KEY (creator_id) REFERENCES users(user_id) ON DELETE SET NULL
);
"""

# tasks 表 DDL
_TASKS_DDL = f"""
CREATE TABLE IF NOT EXISTS tasks (
    task_id      INTEGER PRIMARY KEY AUTOINCREMENT,
    title        TEXT NOT NULL,
    description  TEXT,
    status       TEXT NOT NULL DEFAULT '待领取',
    priority     TEXT NOT NULL DEFAULT 'medium',
    due_date     TEXT,
    category_id  INTEGER,
    assignee_id  INTEGER,
    creator_id   INTEGER,
    created_at   TEXT NOT NULL DEFAULT {_NOW_ISO},
    updated_at   TEXT NOT NULL DEFAULT {_NOW_ISO},

    FOREIGN KEY (category_id) REFERENCES categories(category_id) ON DELETE SET NULL,
    FOREIGN KEY (assignee_id) REFERENCES users(user_id) ON DELETE SET NULL,
    FOREIGN KEY (creator_id) REFERENCES users(user_id) ON DELETE SET NULL
);
"""

_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_users_created_at ON users(created_at DESC);",
    "CREATE INDEX IF NOT EXISTS idx_categories_created_at ON categories(created_at DESC);",
    "CREATE INDEX IF NOT EXISTS idx_tasks_status ON tasks(status);",
    "CREATE INDEX IF NOT EXISTS idx_tasks_category_id ON tasks(category_id);",
    "CREATE INDEX IF NOT EXISTS idx_tasks_assignee_id ON tasks(assignee_id);",
    "CREATE INDEX IF NOT EXISTS idx_tasks_creator_id ON tasks(creator_id);",
    "CREATE INDEX IF NOT EXISTS idx_tasks_created_at ON tasks(created_at DESC);",
]

# 每张表允许出现在查询中的列（列名会拼接进 SQL，必须白名单校验）
TABLE_COLUMNS: dict[str, tuple[str, ...]] = {
    "users": ("user_id", "username", "password", "role", "created_at"),
    "categories": (
        "category_id",
        "name",
        "description",
        "color",
        "creator_id",
        "created_at",
    ),
    "tasks": (
        "task_id",
        "title",
        "description",
        "status",
        "priority",
        "due_date",
        "category_id",
        "assignee_id",
        "creator_id",
        "created_at",
        "updated_at",
    ),
}


async def init_db(conn: aiosqlite.Connection) -> None:
    """初始化数据库：设置 PRAGMA + 创建表 + 创建索引

    Args:
        conn: aiosqlite 数据库连接
    """
    # 设置 PRAGMA
    await conn.execute("PRAGMA journal_mode = WAL;")
    await conn.execute("PRAGMA foreign_keys = ON;")
    await conn.execute("PRAGMA busy_timeout = 5000;")

    # 创建表（按外键依赖顺序）
    await conn.execute(_USERS_DDL)
    await conn.execute(_CATEGORIES_DDL)
    await conn.execute(_TASKS_DDL)

    # 创建索引
    for idx_sql in _INDEXES:
        await conn.execute(idx_sql)

    await conn.commit()
