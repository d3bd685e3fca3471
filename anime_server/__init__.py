"""
Anime Server

基于 FastAPI 与 SQLAlchemy 2.0 异步 ORM 的番剧资源服务，按角色控制访问。
"""

__version__ = "1.0.0"
