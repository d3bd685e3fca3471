"""
番剧 API 路由

/animes 资源的增删改查，按角色控制访问：
- 查询单个番剧需要 USER 角色
- 列表与所有写操作需要 ADMIN 角色

服务层返回 ServiceResult，路由显式检查结果并构建响应。
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Request, Response, status

from ..dependencies import (
    get_anime_service,
    require_admin_user,
    require_regular_user,
    error_response,
)
from ..schemas.anime import AnimeSchema, AnimeCreate
from ..services.anime import AnimeService
from ..services.user import AuthContext

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("", response_model=List[AnimeSchema])
async def list_all(
    request: Request,
    anime_service: AnimeService = Depends(get_anime_service),
    current_user: AuthContext = Depends(require_admin_user)
):
    """列出全部番剧"""
    animes = []
    async for result in anime_service.list_all():
        if not result.success:
            return error_response(request, result.error)
        animes.append(result.data)
    return animes


@router.get("/{anime_id}", response_model=AnimeSchema)
async def find_by_id(
    anime_id: int,
    request: Request,
    anime_service: AnimeService = Depends(get_anime_service),
    current_user: AuthContext = Depends(require_regular_user)
):
    """按ID查询番剧"""
    result = await anime_service.find_by_id(anime_id)
    if not result.success:
        return error_response(request, result.error)
    return result.data


@router.post("", response_model=AnimeSchema, status_code=status.HTTP_201_CREATED)
async def save(
    anime: AnimeCreate,
    request: Request,
    anime_service: AnimeService = Depends(get_anime_service),
    current_user: AuthContext = Depends(require_admin_user)
):
    """创建番剧"""
    result = await anime_service.save(anime.to_schema())
    if not result.success:
        return error_response(request, result.error)
    logger.info(f"{current_user.username} 创建番剧: {result.data.id}")
    return result.data


@router.post("/batch", response_model=List[AnimeSchema], status_code=status.HTTP_201_CREATED)
async def save_batch(
    animes: List[AnimeCreate],
    request: Request,
    anime_service: AnimeService = Depends(get_anime_service),
    current_user: AuthContext = Depends(require_admin_user)
):
    """
    批量创建番剧

    在提交响应前收集全部结果：中途失败时返回错误响应，已写入的记录不回滚。
    """
    saved = []
    async for result in anime_service.save_all([anime.to_schema() for anime in animes]):
        if not result.success:
            if saved:
                logger.warning(f"批量创建在写入 {len(saved)} 条后失败: {result.error.message}")
            return error_response(request, result.error)
        saved.append(result.data)
    return saved


@router.put("/{anime_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update(
    anime_id: int,
    anime: AnimeCreate,
    request: Request,
    anime_service: AnimeService = Depends(get_anime_service),
    current_user: AuthContext = Depends(require_admin_user)
):
    """更新番剧，路径中的ID覆盖请求体中的ID"""
    result = await anime_service.update(anime.to_schema().with_id(anime_id))
    if not result.success:
        return error_response(request, result.error)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{anime_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete(
    anime_id: int,
    request: Request,
    anime_service: AnimeService = Depends(get_anime_service),
    current_user: AuthContext = Depends(require_admin_user)
):
    """删除番剧"""
    result = await anime_service.delete(anime_id)
    if not result.success:
        return error_response(request, result.error)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
