"""
番剧模型

番剧只有两个字段：存储层分配的ID与名称。
名称的非空校验由服务层负责，数据库只保证 NOT NULL。
"""

from sqlalchemy import String, Index
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, IDMixin


class Anime(Base, IDMixin):
    """番剧表"""
    __tablename__ = "anime"

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="番剧名称"
    )

    __table_args__ = (
        Index('idx_anime_name', 'name'),
    )

    def __repr__(self) -> str:
        return f"<Anime(id={self.id}, name='{self.name}')>"
