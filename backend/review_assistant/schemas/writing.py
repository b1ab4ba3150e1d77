"""
写作、导出、图表相关的请求模型
"""
from pydantic import BaseModel, Field
from typing import Optional

from review_assistant.services.llm.prompts import WritingOptions


class WriteStartRequest(BaseModel):
    project_id: Optional[int] = Field(default=None, alias="projectId")
    language: Optional[str] = Field(default=None, description="zh / en")
    options: Optional[WritingOptions] = None

    class Config:
        populate_by_name = True


class WriteSectionRequest(BaseModel):
    project_id: Optional[int] = Field(default=None, alias="projectId")
    language: Optional[str] = None
    section_title: Optional[str] = Field(default=None, alias="sectionTitle")
    section: Optional[str] = Field(default=None, description="章节要点")
    previous_content: Optional[str] = Field(default="", alias="previousContent")
    options: Optional[WritingOptions] = None

    class Config:
        populate_by_name = True


class ExportRequest(BaseModel):
    project_id: Optional[int] = Field(default=None, alias="projectId")
    language: str = Field(default="zh")
    format: str = Field(default="markdown", description="markdown / word")
    renumber_citations: bool = Field(default=False, alias="renumberCitations", description="是否把正文引用改写为连续编号")

    class Config:
        populate_by_name = True


class DiagramRequest(BaseModel):
    project_id: Optional[int] = Field(default=None, alias="projectId")
    diagram_type: Optional[str] = Field(default=None, alias="diagramType", description="mechanism / flowchart / mindmap")
    description: Optional[str] = None
    format: str = Field(default="png", description="png / svg / jpg")
    use_article_content: bool = Field(default=False, alias="useArticleContent")
    language: str = Field(default="zh")

    class Config:
        populate_by_name = True
