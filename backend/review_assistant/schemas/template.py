"""
综述模板相关的请求模型
"""
from pydantic import BaseModel, Field
from typing import Optional


class TemplateCreate(BaseModel):
    name: Optional[str] = Field(default=None, description="模板名称")
    description: Optional[str] = None
    structure: Optional[str] = Field(default=None, description="Markdown 大纲结构")
    is_default: bool = False


class TemplateUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    structure: Optional[str] = None
    is_default: Optional[bool] = None
