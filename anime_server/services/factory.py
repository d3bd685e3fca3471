"""
服务层工厂

按请求创建，基于同一个 RepositoryFactory（同一个数据库会话）组装各个服务。
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, AsyncIterator, Dict, Optional

from sqlalchemy.ext.asyncio import async_sessionmaker

from .base import BaseService
from .anime import AnimeService
from .user import UserService
from ..database.repositories.factory import RepositoryFactory

logger = logging.getLogger(__name__)


class ServiceFactory:
    """服务层工厂类"""

    def __init__(self, repository_factory: RepositoryFactory):
        """
        初始化服务工厂

        Args:
            repository_factory: Repository工厂实例
        """
        self.repos = repository_factory
        self._anime: Optional[AnimeService] = None
        self._user: Optional[UserService] = None

    @property
    def anime(self) -> AnimeService:
        """获取番剧服务"""
        if self._anime is None:
            self._anime = AnimeService(self.repos.anime)
        return self._anime

    @property
    def user(self) -> UserService:
        """获取用户服务"""
        if self._user is None:
            self._user = UserService(self.repos.user)
        return self._user

    async def health_check(self) -> Dict[str, Any]:
        """
        服务层整体健康检查

        Returns:
            健康检查结果
        """
        health_results = {}
        overall_healthy = True

        services_to_check: Dict[str, BaseService] = {
            "anime": self.anime,
            "user": self.user,
        }

        for service_name, service in services_to_check.items():
            result = await service.health_check()
            health_results[service_name] = result.to_dict()
            if not result.success:
                overall_healthy = False

        return {
            "overall_status": "healthy" if overall_healthy else "unhealthy",
            "services": health_results,
            "timestamp": datetime.now(timezone.utc).isoformat()
        }


@asynccontextmanager
async def service_scope(session_factory: async_sessionmaker) -> AsyncIterator[ServiceFactory]:
    """
    在独立会话中获取服务工厂，成功时提交，异常时回滚

    用于请求之外的场景（例如启动时创建初始账号）。

    使用示例:
        async with service_scope(session_factory) as services:
            await services.user.ensure_user("admin", "secret", ["ADMIN", "USER"])
    """
    async with session_factory() as session:
        try:
            yield ServiceFactory(RepositoryFactory(session))
            await session.commit()
        except Exception:
            logger.error("服务会话回滚")
            await session.rollback()
            raise
