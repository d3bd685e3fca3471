"""
SQLAlchemy 2.0 数据库引擎配置

支持多种数据库类型：
- MySQL (使用 aiomysql)
- PostgreSQL (使用 asyncpg)
- SQLite (使用 aiosqlite)
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Any
from sqlalchemy.ext.asyncio import (
    create_async_engine,
    AsyncSession,
    async_sessionmaker,
    AsyncEngine
)
from sqlalchemy.engine import make_url
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from .models.base import Base

logger = logging.getLogger(__name__)


class DatabaseEngine:
    """数据库引擎管理类"""

    def __init__(self, database_url: str, **engine_kwargs):
        """
        初始化数据库引擎

        Args:
            database_url: 数据库连接字符串
            **engine_kwargs: 引擎参数，通常来自 DatabaseConfig.get_engine_config()
        """
        self.database_url = database_url
        self.url = make_url(database_url)

        self.engine: AsyncEngine = create_async_engine(
            database_url,
            **engine_kwargs
        )

        # 创建会话工厂
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

        logger.info(f"数据库引擎初始化完成: {self.url.drivername}://{self.url.host or ''}/{self.url.database}")

    @asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        """
        获取数据库会话

        自动处理事务：
        - 成功时提交事务
        - 异常时回滚事务
        - 确保会话正确关闭
        """
        async with self.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def create_all(self) -> None:
        """按ORM元数据创建缺失的表（不做结构迁移）"""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("数据表检查完成")

    async def close(self) -> None:
        """关闭数据库引擎"""
        await self.engine.dispose()
        logger.info("数据库引擎已关闭")

    async def test_connection(self) -> bool:
        """测试数据库连接"""
        try:
            async with self.engine.connect() as conn:
                await conn.execute(text("SELECT 1"))
            logger.debug("数据库连接测试成功")
            return True
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"数据库连接测试失败: {e}")
            return False

    @property
    def database_type(self) -> str:
        """获取数据库类型"""
        return self.url.drivername.split('+')[0]

    def __repr__(self) -> str:
        return f"DatabaseEngine(url='{self.url}', type='{self.database_type}')"
