"""
跨层传递的数据结构
"""

from .anime import AnimeSchema, AnimeCreate

__all__ = [
    "AnimeSchema",
    "AnimeCreate",
]
