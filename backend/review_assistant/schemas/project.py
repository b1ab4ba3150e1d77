"""
项目、关键词、大纲、草稿相关的请求模型
"""
from pydantic import BaseModel, Field
from typing import List, Optional


class ProjectCreate(BaseModel):
    """创建项目的请求模型"""
    name: Optional[str] = Field(default=None, description="项目名称")
    description: Optional[str] = Field(default=None, description="项目描述")


class ProjectUpdate(BaseModel):
    """更新项目的请求模型（仅更新传入的字段）"""
    name: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = Field(default=None, description="draft / analyzing / writing / completed")


class KeywordCreate(BaseModel):
    keyword: Optional[str] = Field(default=None, description="关键词")
    category: Optional[str] = Field(default=None, description="分类")
    is_primary: bool = Field(default=False, alias="isPrimary", description="是否核心关键词")

    class Config:
        populate_by_name = True


class KeywordSuggestRequest(BaseModel):
    user_keywords: List[str] = Field(default_factory=list, alias="userKeywords", description="用户已有关键词")
    project_description: Optional[str] = Field(default=None, alias="projectDescription")

    class Config:
        populate_by_name = True


class ApplyTemplateRequest(BaseModel):
    template_id: Optional[int] = Field(default=None, alias="templateId")

    class Config:
        populate_by_name = True


class DraftSave(BaseModel):
    """保存草稿（原地更新，版本号 +1）"""
    content: Optional[str] = Field(default=None, description="草稿内容")
    language: str = Field(default="zh", description="zh / en")


class GuideUpdate(BaseModel):
    writing_guide: Optional[str] = Field(default=None, alias="writingGuide")

    class Config:
        populate_by_name = True


class PlanUpdate(BaseModel):
    plan_content: Optional[str] = Field(default=None, alias="planContent")

    class Config:
        populate_by_name = True


class ProjectIdRequest(BaseModel):
    """只需要 projectId 的请求"""
    project_id: Optional[int] = Field(default=None, alias="projectId")

    class Config:
        populate_by_name = True
