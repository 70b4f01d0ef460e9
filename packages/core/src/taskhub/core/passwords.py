"""密码哈希 -- werkzeug.security 加盐哈希

存储格式为 werkzeug 的 <method>$<salt>$<hash>，method 形如 pbkdf2:sha256:<iterations>。
不带哈希前缀的存量值视为明文（历史数据），按恒定时间比较后由认证流程升级为哈希。
"""

import hmac

from werkzeug.security import check_password_hash, generate_password_hash

from .config import get_password_hash_iterations

_HASH_METHODS = ("pbkdf2:", "scrypt:")
_SALT_LENGTH = 16


def hash_password(password: str, iterations: int | None = None) -> str:
    """生成加盐哈希"""
    iterations = iterations or get_password_hash_iterations()
    return generate_password_hash(
        password,
        method=f"pbkdf2:sha256:{iterations}",
        salt_length=_SALT_LENGTH,
    )


def is_hashed(stored: str | None) -> bool:
    return bool(stored) and stored.count("$") == 2 and stored.startswith(_HASH_METHODS)


def verify_password(stored: str | None, candidate: str) -> bool:
    """校验密码

    Args:
        stored: 库中保存的值（哈希或历史明文）
        candidate: 用户输入

    Returns:
        True 如果匹配
    """
    if not stored:
        return False

    if not is_hashed(stored):
        return hmac.compare_digest(stored.encode("utf-8"), candidate.encode("utf-8"))

    try:
        return check_password_hash(stored, candidate)
    except ValueError:
        # 方法段无法解析（如迭代次数不是整数）
        return False
