"""
LLM 结构化输出的 Pydantic schemas
"""
from pydantic import BaseModel, Field
from typing import List, Optional, Union


class KeywordSuggestion(BaseModel):
    """单个推荐关键词"""
    keyword: str = Field(..., description="关键词")
    category: Optional[str] = Field(default=None, description="分类：方法类/应用类/理论类/数据类")
    relevance: Optional[Union[str, float]] = Field(default=None, description="相关性说明或分值")


class KeywordSuggestionResult(BaseModel):
    keywords: List[KeywordSuggestion] = Field(default_factory=list)


class LiteratureClassification(BaseModel):
    """单篇文献的分类结果"""
    id: int = Field(..., description="文献ID")
    category: str = Field(..., description="分类")
    relevance: Optional[Union[str, float]] = Field(default=None, description="相关性说明或分值")
    keywords: List[str] = Field(default_factory=list, description="匹配的关键词")


class ClassificationResult(BaseModel):
    classifications: List[LiteratureClassification] = Field(default_factory=list)


class LiteratureSelection(BaseModel):
    """JSON 协议的文献筛选结果，序号从 1 开始"""
    selected_indices: List[int] = Field(default_factory=list, alias="selectedIndices")
    reason: Optional[str] = Field(default=None, description="筛选理由")

    class Config:
        populate_by_name = True
