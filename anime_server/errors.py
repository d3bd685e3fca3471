"""
统一异常定义

服务层、Repository层与安全依赖共用的异常层级。
HTTP层根据异常类型映射状态码，服务层本身只负责产生可区分的类型化错误。
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional


class ServiceError(Exception):
    """服务层异常基类"""
    def __init__(self, message: str, error_code: str = None, details: Dict[str, Any] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or "SERVICE_ERROR"
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc)


class ValidationError(ServiceError):
    """数据验证异常"""
    def __init__(self, message: str, field: str = None, details: Dict[str, Any] = None):
        super().__init__(message, "VALIDATION_ERROR", details)
        self.field = field


class ResourceNotFoundError(ServiceError):
    """资源不存在异常"""
    def __init__(self, resource_type: str, resource_id: Any, details: Dict[str, Any] = None):
        message = f"{resource_type} with id {resource_id} not found"
        super().__init__(message, "RESOURCE_NOT_FOUND", details)
        self.resource_type = resource_type
        self.resource_id = resource_id


class StorageError(ServiceError):
    """存储层异常（连接失败、约束冲突等），原样向上传递"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "DATABASE_ERROR", details)


class AuthenticationError(ServiceError):
    """认证失败异常"""
    def __init__(self, message: str = "Authentication required", details: Dict[str, Any] = None):
        super().__init__(message, "AUTHENTICATION_FAILED", details)


class PermissionDeniedError(ServiceError):
    """权限拒绝异常"""
    def __init__(self, message: str = "Permission denied", details: Dict[str, Any] = None):
        super().__init__(message, "PERMISSION_DENIED", details)
