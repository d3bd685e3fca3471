"""
业务服务层基础架构

提供业务服务层的基础类、结果封装与错误处理。

服务方法内部以异常表达失败，在服务边界由 service_operation / service_stream
装饰器统一转换为 ServiceResult，调用方通过 result.success / result.error 分支处理，
不需要捕获异常。asyncio.CancelledError 不属于 Exception，始终原样传播。
"""

import functools
import logging
import time
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import TypeVar, Generic, Any, Dict, AsyncIterator, Callable

from ..errors import (
    ServiceError, ValidationError, ResourceNotFoundError, StorageError,
    AuthenticationError, PermissionDeniedError
)

# 泛型类型
T = TypeVar("T")
logger = logging.getLogger(__name__)

__all__ = [
    "ServiceError",
    "ValidationError",
    "ResourceNotFoundError",
    "StorageError",
    "AuthenticationError",
    "PermissionDeniedError",
    "ServiceResult",
    "BaseService",
    "service_operation",
    "service_stream",
]


class ServiceResult(Generic[T]):
    """服务结果封装"""

    def __init__(
        self,
        success: bool,
        data: T = None,
        error: ServiceError = None,
        message: str = None
    ):
        self.success = success
        self.data = data
        self.error = error
        self.message = message
        self.timestamp = datetime.now(timezone.utc)

    @classmethod
    def success_result(cls, data: T = None, message: str = None) -> "ServiceResult[T]":
        """创建成功结果"""
        return cls(success=True, data=data, message=message)

    @classmethod
    def error_result(cls, error: ServiceError, message: str = None) -> "ServiceResult[T]":
        """创建错误结果"""
        return cls(success=False, error=error, message=message or str(error))

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典"""
        result = {
            "success": self.success,
            "timestamp": self.timestamp.isoformat()
        }

        if self.success:
            result["data"] = self.data
            if self.message:
                result["message"] = self.message
        else:
            result["error"] = {
                "code": self.error.error_code,
                "message": self.error.message,
                "details": self.error.details
            }

        return result

    def __repr__(self) -> str:
        if self.success:
            return f"ServiceResult(success=True, data={self.data!r})"
        return f"ServiceResult(success=False, error={self.error.error_code})"


class BaseService(ABC):
    """业务服务基类，不持有任何可变状态"""

    def __init__(self):
        self.logger = logging.getLogger(f"{self.__class__.__module__}.{self.__class__.__name__}")

    def _to_service_error(self, operation: str, error: Exception) -> ServiceError:
        """
        将异常转换为服务层异常

        ServiceError（包括Repository抛出的 StorageError）原样返回，
        其余异常只可能来自存储协作者，统一包装为 StorageError。

        Args:
            operation: 操作名称
            error: 异常对象

        Returns:
            服务层异常
        """
        if isinstance(error, ServiceError):
            return error
        wrapped = StorageError(
            message=f"未知错误: {error}",
            details={"operation": operation}
        )
        wrapped.__cause__ = error
        return wrapped

    def _handle_service_error(self, operation: str, error: Exception) -> ServiceResult[Any]:
        """
        处理服务异常

        Args:
            operation: 操作名称
            error: 异常对象

        Returns:
            错误结果
        """
        service_error = self._to_service_error(operation, error)
        if isinstance(service_error, (ValidationError, ResourceNotFoundError, AuthenticationError)):
            self.logger.info(f"{operation} 失败: {service_error.message}")
        else:
            self.logger.error(f"{operation} 失败: {error}", exc_info=error)
        return ServiceResult.error_result(service_error)

    @abstractmethod
    async def health_check(self) -> ServiceResult[Dict[str, Any]]:
        """
        服务健康检查

        Returns:
            健康状态结果
        """


def service_operation(operation_name: str = None):
    """
    服务操作装饰器

    被装饰的协程返回普通值，装饰后返回 ServiceResult；
    已经是 ServiceResult 的返回值原样透传。

    Args:
        operation_name: 操作名称，默认使用方法名
    """
    def decorator(func: Callable):
        op_name = operation_name or func.__name__

        @functools.wraps(func)
        async def wrapper(self: BaseService, *args, **kwargs):
            start_time = time.perf_counter()
            try:
                data = await func(self, *args, **kwargs)
            except Exception as e:
                return self._handle_service_error(op_name, e)
            finally:
                duration = time.perf_counter() - start_time
                self.logger.debug(f"{op_name} 耗时 {duration * 1000:.2f}ms")

            if isinstance(data, ServiceResult):
                return data
            return ServiceResult.success_result(data=data)

        return wrapper
    return decorator


def service_stream(operation_name: str = None):
    """
    流式服务操作装饰器

    被装饰的异步生成器逐个产出值，装饰后逐个产出成功的 ServiceResult。
    生成器中途抛出异常时，产出一个错误结果并结束迭代，已产出的元素不受影响。

    Args:
        operation_name: 操作名称，默认使用方法名
    """
    def decorator(func: Callable):
        op_name = operation_name or func.__name__

        @functools.wraps(func)
        async def wrapper(self: BaseService, *args, **kwargs) -> AsyncIterator[ServiceResult[Any]]:
            emitted = 0
            stream = func(self, *args, **kwargs)
            try:
                async for item in stream:
                    emitted += 1
                    yield ServiceResult.success_result(data=item)
            except Exception as e:
                self.logger.debug(f"{op_name} 在产出 {emitted} 个元素后终止")
                yield self._handle_service_error(op_name, e)
            finally:
                await stream.aclose()

        return wrapper
    return decorator
