"""
番剧值对象

服务层输入输出使用不可变的 AnimeSchema，与ORM实体解耦，
Repository 负责在两者之间转换。
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class AnimeSchema(BaseModel):
    """番剧值对象"""
    model_config = ConfigDict(frozen=True, from_attributes=True)

    id: Optional[int] = Field(None, description="存储层分配的ID，未保存时为空")
    # 名称不在这里做约束，由服务层校验并返回 ValidationError
    name: Optional[str] = Field(None, description="番剧名称")

    def with_name(self, name: Optional[str]) -> "AnimeSchema":
        return self.model_copy(update={"name": name})

    def with_id(self, id: Optional[int]) -> "AnimeSchema":
        return self.model_copy(update={"id": id})


class AnimeCreate(BaseModel):
    """创建/更新请求体"""
    id: Optional[int] = None
    name: Optional[str] = None

    def to_schema(self) -> AnimeSchema:
        return AnimeSchema(id=self.id, name=self.name)
