"""
文献检索、保存、筛选、导出相关的请求模型
"""
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional, Union


class LiteratureItem(BaseModel):
    """待保存的文献（来自检索结果或导入）"""
    title: Optional[str] = Field(default=None, description="标题")
    authors: Optional[str] = Field(default="", description="作者，逗号分隔")
    abstract: Optional[str] = Field(default="", description="摘要")
    url: Optional[str] = Field(default=None)
    pdf_url: Optional[str] = Field(default=None)
    doi: Optional[str] = Field(default=None)
    journal: Optional[str] = Field(default=None)
    published: Optional[Union[str, int]] = Field(default=None, description="发表时间，年份可为数字")
    source: Optional[str] = Field(default=None, description="来源，缺省为 search")
    is_selected: bool = Field(default=True, description="是否可被引用")


class LiteratureSaveRequest(BaseModel):
    papers: Optional[List[LiteratureItem]] = Field(default=None, description="文献列表")


class SearchRequest(BaseModel):
    """arXiv / PubMed 检索请求"""
    query: Optional[str] = Field(default=None, description="检索式")
    max_results: int = Field(default=10, ge=1, le=1000, alias="maxResults")
    year_from: Optional[int] = Field(default=None, alias="yearFrom")
    year_to: Optional[int] = Field(default=None, alias="yearTo")
    high_impact_only: bool = Field(default=False, alias="highImpactOnly", description="仅 PubMed：只保留高影响力期刊")

    class Config:
        populate_by_name = True


class SearchQueryKeyword(BaseModel):
    keyword: str
    is_primary: bool = Field(default=False, alias="isPrimary")

    class Config:
        populate_by_name = True


class SearchQueryRequest(BaseModel):
    keywords: List[SearchQueryKeyword] = Field(default_factory=list)
    source: str = Field(default="arxiv", description="arxiv / pubmed")


class FilterLiteratureRequest(BaseModel):
    """逗号序号协议的 AI 筛选"""
    project_id: Optional[int] = Field(default=None, alias="projectId")
    papers: List[Dict[str, Any]] = Field(default_factory=list)
    max_results: Optional[int] = Field(default=None, alias="maxResults")
    custom_criteria: Optional[str] = Field(default=None, alias="customCriteria")

    class Config:
        populate_by_name = True


class SelectLiteratureRequest(BaseModel):
    """JSON 协议的 AI 筛选"""
    project_id: Optional[int] = Field(default=None, alias="projectId")
    papers: List[Dict[str, Any]] = Field(default_factory=list)
    top_n: int = Field(default=20, ge=1, alias="topN")

    class Config:
        populate_by_name = True


class TranslateRequest(BaseModel):
    title: Optional[str] = None
    abstract: Optional[str] = None


class LiteratureExportRequest(BaseModel):
    project_id: Optional[int] = Field(default=None, alias="projectId")
    format: str = Field(default="ris", description="ris / bibtex / csv")

    class Config:
        populate_by_name = True
