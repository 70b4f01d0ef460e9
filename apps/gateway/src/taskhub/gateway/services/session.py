"""SessionRegistry -- 登录会话（不透明 bearer token -> 用户）

会话仅保存在进程内存中，服务重启后需要重新登录。
"""

import secrets

import structlog
from taskhub.core.models import User

log = structlog.get_logger()


class SessionRegistry:
    """token 到已去除密码的用户记录的映射"""

    def __init__(self) -> None:
        self._sessions: dict[str, User] = {}

    def issue(self, user: User) -> str:
        token = secrets.token_urlsafe(32)
        self._sessions[token] = user
        log.info("session_issued", user_id=user.user_id)
        return token

    def resolve(self, token: str | None) -> User | None:
        if not token:
            return None
        return self._sessions.get(token)

    def revoke(self, token: str) -> bool:
        user = self._sessions.pop(token, None)
        if user is None:
            return False
        log.info("session_revoked", user_id=user.user_id)
        return True

    def refresh(self, user: User) -> None:
        """用户资料变化后同步所有在线会话"""
        for token, current in self._sessions.items():
            if current.user_id == user.user_id:
                self._sessions[token] = user

    def revoke_user(self, user_id: int) -> int:
        """删除用户时注销其全部会话，返回注销数量"""
        tokens = [t for t, u in self._sessions.items() if u.user_id == user_id]
        for token in tokens:
            del self._sessions[token]
        return len(tokens)

    def __len__(self) -> int:
        return len(self._sessions)
