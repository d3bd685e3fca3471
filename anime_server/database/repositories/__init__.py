"""
Repository 模式实现

Repository模式将数据访问逻辑封装在独立的类中，提供统一的数据访问接口。
服务层只依赖 AnimeRepositoryInterface，便于在测试中替换为内存实现。
"""

from .interfaces import AnimeRepositoryInterface
from .base import BaseRepository
from .anime import AnimeRepository
from .user import UserRepository
from .factory import RepositoryFactory

__all__ = [
    "AnimeRepositoryInterface",
    "BaseRepository",
    "AnimeRepository",
    "UserRepository",
    "RepositoryFactory",
]
