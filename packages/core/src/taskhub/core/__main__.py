"""CLI 入口模块 -- python -m taskhub.core <command>

支持的命令：
  init-db                           初始化 SQLite 数据库
  create-admin <username> <password>  创建管理员账号
  check-store                       检查数据库连通性
"""

import asyncio
import sys

from .config import PASSWORD_MIN_LENGTH, get_db_path
from .models.enums import UserRole
from .passwords import hash_password
from .store import RowStoreError, create_sqlite_store

_USAGE = """用法: python -m taskhub.core <command>
命令:
  init-db                             初始化 SQLite 数据库
  create-admin <username> <password>  创建管理员账号
  check-store                         检查数据库连通性"""


def main() -> None:
    """CLI 主入口"""
    if len(sys.argv) < 2:
        print(_USAGE)
        sys.exit(1)

    command = sys.argv[1]

    if command == "init-db":
        asyncio.run(init_database())
    elif command == "create-admin":
        if len(sys.argv) != 4:
            print("用法: python -m taskhub.core create-admin <username> <password>")
            sys.exit(1)
        sys.exit(asyncio.run(create_admin(sys.argv[2], sys.argv[3])))
    elif command == "check-store":
        sys.exit(asyncio.run(check_store()))
    else:
        print(f"未知命令: {command}")
        print("可用命令: init-db, create-admin, check-store")
        sys.exit(1)


async def init_database() -> None:
    """建表（幂等）"""
    db_path = get_db_path()
    print(f"数据库路径: {db_path}")
    store = await create_sqlite_store(db_path)
    await store.close()
    print("初始化完成")


async def create_admin(username: str, password: str) -> int:
    """创建管理员账号，返回进程退出码"""
    if len(password) < PASSWORD_MIN_LENGTH:
        print(f"密码长度至少{PASSWORD_MIN_LENGTH}位")
        return 1

    store = await create_sqlite_store(get_db_path())
    try:
        row = await store.insert(
            "users",
            {
                "username": username,
                "password": hash_password(password),
                "role": UserRole.ADMIN.value,
            },
        )
    except RowStoreError as e:
        print(f"创建失败: {e}")
        return 1
    finally:
        await store.close()

    print(f"已创建管理员 {row['username']} (user_id={row['user_id']})")
    return 0


async def check_store() -> int:
    """数据库连通性检查，返回进程退出码"""
    db_path = get_db_path()
    store = await create_sqlite_store(db_path)
    try:
        await store.ping()
    except RowStoreError as e:
        print(f"连接失败: {e}")
        return 1
    finally:
        await store.close()

    print(f"连接正常: {db_path}")
    return 0


if __name__ == "__main__":
    main()
