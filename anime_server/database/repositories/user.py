"""
用户Repository

提供用户查询与创建方法，供认证流程使用。
"""

from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from .base import BaseRepository
from ..models.user import User


class UserRepository(BaseRepository[User]):
    """用户Repository"""

    def __init__(self, session: AsyncSession):
        super().__init__(session, User)

    async def get_by_username(self, username: str) -> Optional[User]:
        """
        根据用户名获取用户

        Args:
            username: 用户名

        Returns:
            用户对象或None
        """
        return await self.get_by_field("username", username)

    async def create_user(
        self,
        username: str,
        hashed_password: str,
        authorities: List[str]
    ) -> User:
        """
        创建用户

        Args:
            username: 用户名
            hashed_password: 已哈希的密码
            authorities: 角色列表，例如 ["ROLE_ADMIN", "ROLE_USER"]

        Returns:
            创建的用户
        """
        return await self.create(
            username=username,
            hashed_password=hashed_password,
            authorities=",".join(authorities)
        )

    async def username_exists(self, username: str) -> bool:
        """检查用户名是否已存在"""
        return await self.count(username=username) > 0
