"""
浏览计数Schema模型
"""
from pydantic import BaseModel, Field
from typing import Optional


class InstitutionRef(BaseModel):
    """机构（租户）引用"""
    id: int = Field(..., gt=0, description="机构数据库ID")
    shortName: Optional[str] = Field(None, max_length=64, description="机构短名称")

    class Config:
        frozen = True


class ItemKey(BaseModel):
    """条目版本键"""
    uuid: str = Field(..., min_length=1, max_length=40, description="条目UUID")
    version: int = Field(..., gt=0, description="条目版本号")

    class Config:
        frozen = True

    def __str__(self) -> str:
        return f"{self.uuid}/{self.version}"
