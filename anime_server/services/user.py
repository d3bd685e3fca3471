"""
用户和认证业务服务

提供用户创建、HTTP Basic 凭据校验与角色判断。
"""

import hashlib
import hmac
import secrets
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .base import (
    BaseService, ServiceResult, ValidationError, AuthenticationError, service_operation
)
from ..database.repositories.user import UserRepository

ROLE_PREFIX = "ROLE_"


@dataclass(frozen=True)
class AuthContext:
    """认证上下文"""
    user_id: int
    username: str
    authorities: List[str] = field(default_factory=list)

    def has_role(self, role: str) -> bool:
        """判断是否拥有角色，role 可带或不带 ROLE_ 前缀"""
        if not role.startswith(ROLE_PREFIX):
            role = f"{ROLE_PREFIX}{role}"
        return role in self.authorities


class UserService(BaseService):
    """用户业务服务"""

    def __init__(self, repository: UserRepository):
        super().__init__()
        self._repository = repository

    def _hash_password(self, password: str) -> str:
        """哈希密码"""
        # 使用SHA-256 + salt（简单实现，生产环境建议使用bcrypt）
        salt = secrets.token_hex(16)
        hashed = hashlib.sha256((password + salt).encode()).hexdigest()
        return f"{salt}:{hashed}"

    def _verify_password(self, password: str, hashed_password: str) -> bool:
        """验证密码"""
        try:
            salt, stored_hash = hashed_password.split(':', 1)
        except ValueError:
            return False
        computed_hash = hashlib.sha256((password + salt).encode()).hexdigest()
        return hmac.compare_digest(computed_hash, stored_hash)

    @staticmethod
    def _normalize_roles(roles: List[str]) -> List[str]:
        normalized = []
        for role in roles:
            role = role.strip().upper()
            if not role:
                continue
            if not role.startswith(ROLE_PREFIX):
                role = f"{ROLE_PREFIX}{role}"
            if role not in normalized:
                normalized.append(role)
        return normalized

    @service_operation("create_user")
    async def create_user(
        self,
        username: str,
        password: str,
        roles: List[str]
    ) -> AuthContext:
        """
        创建用户

        Args:
            username: 用户名
            password: 明文密码
            roles: 角色列表，例如 ["ADMIN", "USER"]

        Returns:
            新用户的认证上下文
        """
        if not username or not username.strip():
            raise ValidationError("用户名不能为空", field="username")
        if not password:
            raise ValidationError("密码不能为空", field="password")

        username = username.strip()
        if await self._repository.username_exists(username):
            raise ValidationError(f"用户名 '{username}' 已存在", field="username")

        user = await self._repository.create_user(
            username=username,
            hashed_password=self._hash_password(password),
            authorities=self._normalize_roles(roles)
        )
        self.logger.info(f"创建用户: {user.username} ({user.authorities})")
        return AuthContext(user.id, user.username, user.authority_list)

    @service_operation("ensure_user")
    async def ensure_user(
        self,
        username: Optional[str],
        password: Optional[str],
        roles: List[str]
    ) -> Optional[AuthContext]:
        """
        确保初始用户存在（用于启动时按配置创建账号）

        未配置用户名或密码时跳过，用户已存在时不修改。
        """
        if not username or not password:
            return None

        existing = await self._repository.get_by_username(username.strip())
        if existing:
            return AuthContext(existing.id, existing.username, existing.authority_list)

        result = await self.create_user(username, password, roles)
        if not result.success:
            return result
        return result.data

    @service_operation("authenticate_user")
    async def authenticate_user(self, username: str, password: str) -> AuthContext:
        """
        校验用户凭据

        Args:
            username: 用户名
            password: 密码

        Returns:
            认证上下文，失败时为 AuthenticationError
        """
        if not username or not password:
            raise AuthenticationError("用户名和密码不能为空")

        user = await self._repository.get_by_username(username.strip())
        if not user or not self._verify_password(password, user.hashed_password):
            raise AuthenticationError("用户名或密码错误")

        return AuthContext(user.id, user.username, user.authority_list)

    @service_operation("user_health_check")
    async def health_check(self) -> Dict[str, Any]:
        return {
            "service": "UserService",
            "status": "healthy",
            "total_users": await self._repository.count(),
        }
