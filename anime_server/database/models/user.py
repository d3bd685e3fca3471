"""
用户模型

authorities 以逗号分隔保存角色，例如 "ROLE_ADMIN,ROLE_USER"。
"""

from typing import List
from sqlalchemy import String, Index, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, IDMixin, TimestampMixin


class User(Base, IDMixin, TimestampMixin):
    """用户表"""
    __tablename__ = "users"

    username: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="用户名"
    )
    hashed_password: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="哈希后的密码"
    )
    authorities: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        default="ROLE_USER",
        comment="角色列表，逗号分隔"
    )

    __table_args__ = (
        UniqueConstraint('username', name='idx_username_unique'),
        Index('idx_username', 'username'),
    )

    @property
    def authority_list(self) -> List[str]:
        """拆分后的角色列表"""
        return [a.strip() for a in self.authorities.split(",") if a.strip()]

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username='{self.username}', authorities='{self.authorities}')>"
