"""
FastAPI应用主入口

组装数据库引擎、服务层与 /animes 路由，提供完整的API服务
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import uvicorn

from . import __version__
from .api.anime import router as anime_router
from .config import Settings, settings
from .database import initialize_database, shutdown_database, get_engine
from .dependencies import error_response, internal_error_response
from .services.base import ServiceError, ValidationError
from .services.factory import service_scope

logger = logging.getLogger(__name__)


def configure_logging(app_settings: Settings) -> None:
    """设置日志"""
    logging.basicConfig(
        level=app_settings.logging.level.upper(),
        format=app_settings.logging.format
    )


async def seed_users(app_settings: Settings) -> None:
    """按配置创建初始管理员与普通用户"""
    async with service_scope(get_engine().session_factory) as services:
        admin = await services.user.ensure_user(
            app_settings.admin.initial_user,
            app_settings.admin.initial_password,
            ["ADMIN", "USER"]
        )
        user = await services.user.ensure_user(
            app_settings.user.initial_user,
            app_settings.user.initial_password,
            ["USER"]
        )

    for label, result in (("管理员", admin), ("普通用户", user)):
        if not result.success:
            logger.error(f"初始{label}创建失败: {result.error.message}")
        elif result.data is not None:
            logger.info(f"初始{label}就绪: {result.data.username}")


def create_app(app_settings: Settings = settings) -> FastAPI:
    """创建应用实例（用于测试和部署）"""

    @asynccontextmanager
    async def app_lifespan(app: FastAPI):
        """应用生命周期管理"""
        logger.info("🚀 启动 Anime Server")
        await initialize_database(app_settings.database)
        try:
            await seed_users(app_settings)
            logger.info("✅ 应用启动完成")
            yield
        finally:
            await shutdown_database()
            logger.info("🛑 应用关闭")

    app = FastAPI(
        title="Anime Server",
        description="按角色控制访问的番剧资源服务",
        version=__version__,
        lifespan=app_lifespan
    )

    # 全局异常处理器
    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError):
        """处理服务层异常（认证、权限等依赖中抛出的异常）"""
        return error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        """请求体或路径参数无法解析时，以400和统一错误结构返回"""
        first = exc.errors()[0] if exc.errors() else {}
        location = [
            part for part in first.get("loc", ())
            if isinstance(part, str) and part not in ("body", "path", "query")
        ]
        field = ".".join(location) or None
        error = ValidationError(
            f"请求参数无效: {first.get('msg', '无法解析请求')}",
            field=field,
            details={"field": field} if field else None
        )
        return error_response(request, error)

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception):
        """处理内部服务器错误"""
        logger.error(f"内部服务器错误: {exc}", exc_info=exc)
        return internal_error_response(request)

    # 基础API端点
    @app.get("/", tags=["基础"])
    async def root():
        """根端点"""
        return {
            "message": "Anime Server",
            "version": __version__,
            "status": "running"
        }

    @app.get("/health", tags=["监控"])
    async def health_check():
        """健康检查端点"""
        engine = get_engine()
        if not await engine.test_connection():
            raise HTTPException(status_code=503, detail={"overall_status": "unhealthy", "database": "unreachable"})

        async with service_scope(engine.session_factory) as services:
            health_info = await services.health_check()

        health_info["database"] = engine.database_type
        if health_info.get("overall_status") != "healthy":
            return JSONResponse(status_code=503, content=health_info)
        return health_info

    app.include_router(anime_router, prefix="/animes", tags=["Anime"])

    # 404处理中间件
    @app.middleware("http")
    async def log_404_requests(request: Request, call_next):
        """记录404请求的详细信息"""
        response = await call_next(request)

        if response.status_code == 404:
            logger.warning(
                f"404 请求: {request.method} {request.url.path} "
                f"来源: {request.client.host if request.client else 'unknown'}"
            )

        return response

    # 性能监控中间件
    @app.middleware("http")
    async def add_process_time_header(request: Request, call_next):
        """添加响应时间监控"""
        start_time = time.perf_counter()
        response = await call_next(request)
        response.headers["X-Process-Time"] = str(time.perf_counter() - start_time)
        return response

    return app


def main() -> None:
    configure_logging(settings)
    uvicorn.run(
        create_app(settings),
        host=settings.server.host,
        port=settings.server.port,
        log_level=settings.logging.level.lower()
    )


if __name__ == "__main__":
    main()
