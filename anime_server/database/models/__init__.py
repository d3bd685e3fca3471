"""
SQLAlchemy ORM 模型定义

导入所有数据库模型，确保SQLAlchemy能够发现所有表
"""

from .base import Base, IDMixin, TimestampMixin
from .anime import Anime
from .user import User

__all__ = [
    "Base",
    "IDMixin",
    "TimestampMixin",
    "Anime",
    "User",
]
