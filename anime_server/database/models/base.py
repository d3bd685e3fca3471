"""
SQLAlchemy 基础模型定义

所有ORM模型的基类和混入类
"""

from datetime import datetime
from typing import Optional
from sqlalchemy import BigInteger, DateTime, Integer, func
from sqlalchemy.ext.asyncio import AsyncAttrs
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


# SQLite 只对 INTEGER PRIMARY KEY 自动分配ID，其余数据库使用 BIGINT
PrimaryKeyType = BigInteger().with_variant(Integer, "sqlite")


class Base(AsyncAttrs, DeclarativeBase):
    """
    所有ORM模型的基类

    继承自 AsyncAttrs 以支持异步属性访问
    """
    pass


class IDMixin:
    """ID混入类 - 自增主键，由存储层在创建时分配"""

    id: Mapped[int] = mapped_column(
        PrimaryKeyType,
        primary_key=True,
        autoincrement=True,
        comment="主键ID"
    )


class TimestampMixin:
    """时间戳混入类"""

    created_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime,
        server_default=func.now(),
        comment="创建时间"
    )
