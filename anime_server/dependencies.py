"""
FastAPI依赖注入系统

提供数据库会话、服务层、认证与角色校验的依赖，以及服务层异常到HTTP响应的映射。
"""

import logging
from datetime import datetime, timezone
from typing import AsyncGenerator, Callable, Optional

from fastapi import Depends, Request
from fastapi.responses import JSONResponse
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from .config import settings
from .database import get_engine
from .database.repositories.factory import RepositoryFactory
from .services.anime import AnimeService
from .services.base import (
    ServiceError, ValidationError, ResourceNotFoundError,
    AuthenticationError, PermissionDeniedError
)
from .services.factory import ServiceFactory
from .services.user import AuthContext, UserService

logger = logging.getLogger(__name__)

# 认证相关
security = HTTPBasic(auto_error=False, realm=settings.security.realm)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    获取数据库会话依赖

    请求成功时提交，出现异常时回滚
    """
    async with get_engine().session() as session:
        yield session


async def get_repository_factory(
    session: AsyncSession = Depends(get_db_session)
) -> RepositoryFactory:
    """获取Repository工厂依赖"""
    return RepositoryFactory(session)


async def get_service_factory(
    repos: RepositoryFactory = Depends(get_repository_factory)
) -> ServiceFactory:
    """获取Service工厂依赖"""
    return ServiceFactory(repository_factory=repos)


# 快捷服务依赖
async def get_anime_service(services: ServiceFactory = Depends(get_service_factory)) -> AnimeService:
    """获取番剧服务"""
    return services.anime


async def get_user_service(services: ServiceFactory = Depends(get_service_factory)) -> UserService:
    """获取用户服务"""
    return services.user


# 认证相关依赖
async def get_current_user(
    credentials: Optional[HTTPBasicCredentials] = Depends(security),
    user_service: UserService = Depends(get_user_service)
) -> AuthContext:
    """
    获取当前用户（必须）

    未提供凭据或凭据错误时抛出 AuthenticationError（401）
    """
    if credentials is None:
        raise AuthenticationError("需要登录")

    result = await user_service.authenticate_user(credentials.username, credentials.password)
    if not result.success:
        raise result.error
    return result.data


def require_role(role: str) -> Callable:
    """
    生成角色校验依赖

    Args:
        role: 角色名，例如 "ADMIN"、"USER"
    """
    async def dependency(current_user: AuthContext = Depends(get_current_user)) -> AuthContext:
        if not current_user.has_role(role):
            logger.info(f"用户 {current_user.username} 缺少角色 {role}")
            raise PermissionDeniedError(f"需要 {role} 权限")
        return current_user

    dependency.__name__ = f"require_{role.lower()}_role"
    return dependency


require_admin_user = require_role("ADMIN")
require_regular_user = require_role("USER")


def handle_service_error(error: ServiceError) -> int:
    """将服务层异常映射为HTTP状态码"""
    if isinstance(error, ValidationError):
        return 400
    elif isinstance(error, AuthenticationError):
        return 401
    elif isinstance(error, PermissionDeniedError):
        return 403
    elif isinstance(error, ResourceNotFoundError):
        return 404
    else:
        return 500


def error_response(request: Request, error: ServiceError) -> JSONResponse:
    """
    构建结构化错误响应

    响应体包含状态码、错误码、面向用户的消息与面向开发者的消息
    """
    status_code = handle_service_error(error)
    headers = None
    if status_code == 401:
        headers = {"WWW-Authenticate": f'Basic realm="{settings.security.realm}"'}

    return JSONResponse(
        status_code=status_code,
        headers=headers,
        content={
            "status": status_code,
            "error": error.error_code,
            "message": error.message,
            "developerMessage": f"A {type(error).__name__} Happened",
            "details": error.details,
            "path": request.url.path,
            "timestamp": error.timestamp.isoformat(),
        }
    )


def internal_error_response(request: Request) -> JSONResponse:
    """未预期异常的500响应"""
    return JSONResponse(
        status_code=500,
        content={
            "status": 500,
            "error": "INTERNAL_SERVER_ERROR",
            "message": "服务器内部错误",
            "developerMessage": "An unexpected error Happened",
            "path": request.url.path,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
    )
