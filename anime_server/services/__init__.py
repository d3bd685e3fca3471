"""
业务服务层

提供应用的业务逻辑处理，包括数据验证、存在性检查、错误类型化等。
服务层位于Repository层之上，为HTTP层提供返回 ServiceResult 的高级操作接口。
"""

from .base import (
    BaseService, ServiceResult, ServiceError, ValidationError,
    ResourceNotFoundError, StorageError
)
from .anime import AnimeService, is_valid_name
from .user import UserService, AuthContext
from .factory import ServiceFactory, service_scope

__all__ = [
    # 基础类
    "BaseService",
    "ServiceResult",
    "ServiceError",
    "ValidationError",
    "ResourceNotFoundError",
    "StorageError",

    # 业务服务
    "AnimeService",
    "is_valid_name",
    "UserService",
    "AuthContext",

    # 工厂
    "ServiceFactory",
    "service_scope",
]
