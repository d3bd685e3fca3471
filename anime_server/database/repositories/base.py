"""
基础Repository类

提供通用的CRUD操作接口，所有具体的Repository都继承自这个基类。
使用SQLAlchemy 2.0的异步API进行数据库操作，数据库异常统一转换为 StorageError。
"""

from abc import ABC
from contextlib import contextmanager
from typing import Generic, TypeVar, Type, Optional, List, Dict, Any, AsyncIterator
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, func
from sqlalchemy.exc import SQLAlchemyError

from ..models.base import Base
from ...errors import StorageError

# 泛型类型
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType], ABC):
    """
    基础Repository类

    提供通用的CRUD操作和查询方法
    """

    def __init__(self, session: AsyncSession, model: Type[ModelType]):
        """
        初始化Repository

        Args:
            session: SQLAlchemy异步会话
            model: ORM模型类
        """
        self.session = session
        self.model = model

    @contextmanager
    def _storage_errors(self, operation: str):
        """将SQLAlchemy异常包装为 StorageError，保留原始异常链"""
        try:
            yield
        except SQLAlchemyError as e:
            raise StorageError(
                f"数据库操作失败: {e}",
                details={"operation": operation, "model": self.model.__name__}
            ) from e

    async def get_by_id(self, id: int) -> Optional[ModelType]:
        """
        根据ID获取单个记录

        Args:
            id: 记录ID

        Returns:
            找到的记录或None
        """
        with self._storage_errors("get_by_id"):
            stmt = select(self.model).where(self.model.id == id)
            result = await self.session.execute(stmt)
            return result.scalar_one_or_none()

    async def stream_all(self) -> AsyncIterator[ModelType]:
        """
        按ID顺序逐条获取所有记录

        Yields:
            记录
        """
        with self._storage_errors("stream_all"):
            stmt = select(self.model).order_by(self.model.id)
            result = await self.session.stream_scalars(stmt)
            try:
                async for instance in result:
                    yield instance
            finally:
                # 消费方提前停止迭代时释放游标
                await result.close()

    async def create(self, **kwargs) -> ModelType:
        """
        创建新记录

        Args:
            **kwargs: 字段值

        Returns:
            创建的记录
        """
        with self._storage_errors("create"):
            instance = self.model(**kwargs)
            self.session.add(instance)
            await self.session.flush()
            await self.session.refresh(instance)
            return instance

    async def create_many(self, items: List[Dict[str, Any]]) -> AsyncIterator[ModelType]:
        """
        批量创建记录

        一次flush写入全部记录，再按输入顺序逐条刷新并返回。

        Args:
            items: 要创建的记录列表

        Yields:
            创建的记录
        """
        with self._storage_errors("create_many"):
            instances = [self.model(**item) for item in items]
            self.session.add_all(instances)
            await self.session.flush()

            for instance in instances:
                await self.session.refresh(instance)
                yield instance

    async def delete(self, id: int) -> bool:
        """
        删除记录

        Args:
            id: 记录ID

        Returns:
            是否删除成功
        """
        with self._storage_errors("delete"):
            stmt = delete(self.model).where(self.model.id == id)
            result = await self.session.execute(stmt)
            return result.rowcount > 0

    async def count(self, **filters) -> int:
        """
        统计记录数

        Args:
            **filters: 过滤条件

        Returns:
            记录总数
        """
        with self._storage_errors("count"):
            stmt = select(func.count(self.model.id))

            # 添加过滤条件
            for field, value in filters.items():
                if hasattr(self.model, field):
                    stmt = stmt.where(getattr(self.model, field) == value)

            result = await self.session.execute(stmt)
            return result.scalar() or 0

    async def get_by_field(self, field: str, value: Any) -> Optional[ModelType]:
        """
        根据字段值获取单个记录

        Args:
            field: 字段名
            value: 字段值

        Returns:
            找到的记录或None
        """
        if not hasattr(self.model, field):
            return None

        with self._storage_errors("get_by_field"):
            stmt = select(self.model).where(getattr(self.model, field) == value)
            result = await self.session.execute(stmt)
            return result.scalar_one_or_none()
