"""配置常量模块 -- 可通过环境变量覆盖

包含数据库路径、密码哈希迭代次数、统计窗口等可配置常量。
"""

import os
from pathlib import Path


def _get_base_dir() -> Path:
    """获取项目 data 基础目录"""
    return Path(os.environ.get("TASKHUB_DATA_DIR", "data"))


def get_db_path() -> str:
    """获取 SQLite 数据库路径"""
    return os.environ.get(
        "TASKHUB_DB_PATH",
        str(_get_base_dir() / "sqlite" / "taskhub.db"),
    )


def get_password_hash_iterations() -> int:
    """获取 PBKDF2 迭代次数（测试环境可调低）"""
    return int(os.environ.get("TASKHUB_PASSWORD_HASH_ITERATIONS", "260000"))


# 趋势分析默认天数
DEFAULT_TREND_DAYS: int = 30

# 趋势分析允许的最大天数
MAX_TREND_DAYS: int = 3650

# 个人统计中"最近活动"的窗口天数
RECENT_ACTIVITY_DAYS: int = 30

# 密码最小长度
PASSWORD_MIN_LENGTH: int = 6

# 新建分类的默认颜色
DEFAULT_CATEGORY_COLOR: str = "#007bff"

# 工作量统计中缺失用户名时的占位
UNKNOWN_USERNAME: str = "未知用户"
