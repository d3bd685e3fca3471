"""
数据库初始化模块

统一管理数据库引擎初始化与生命周期
"""

import logging
from typing import Optional

from .engine import DatabaseEngine
from .models.base import Base
from ..config import DatabaseConfig

logger = logging.getLogger(__name__)

# 全局数据库引擎实例
database_engine: Optional[DatabaseEngine] = None


async def initialize_database(config: DatabaseConfig) -> DatabaseEngine:
    """
    初始化数据库系统

    在FastAPI应用启动时调用：创建引擎、测试连接、建表
    """
    global database_engine

    if database_engine is not None:
        logger.warning("数据库引擎已初始化，关闭现有引擎")
        await database_engine.close()

    database_url = config.async_url
    logger.info(f"初始化数据库: {config.type}")
    logger.info(f"数据库URL: {database_url.split('@')[1] if '@' in database_url else database_url}")

    engine = DatabaseEngine(database_url, **config.get_engine_config())
    if not await engine.test_connection():
        await engine.close()
        raise RuntimeError("数据库连接失败")

    await engine.create_all()
    database_engine = engine
    logger.info("数据库初始化成功")
    return engine


async def shutdown_database() -> None:
    """
    关闭数据库连接

    在FastAPI应用关闭时调用
    """
    global database_engine
    if database_engine is not None:
        await database_engine.close()
        database_engine = None
        logger.info("数据库连接已关闭")


def get_engine() -> DatabaseEngine:
    """获取当前数据库引擎实例"""
    if database_engine is None:
        raise RuntimeError("数据库引擎未初始化")
    return database_engine


__all__ = [
    "Base",
    "DatabaseEngine",
    "initialize_database",
    "shutdown_database",
    "get_engine",
]
