"""
Pydantic schemas模块
"""
from review_assistant.schemas.ai import (
    KeywordSuggestionResult,
    ClassificationResult,
    LiteratureSelection,
)
from review_assistant.schemas.project import (
    ProjectCreate,
    ProjectUpdate,
    KeywordCreate,
    KeywordSuggestRequest,
    ApplyTemplateRequest,
    DraftSave,
    GuideUpdate,
    PlanUpdate,
    ProjectIdRequest,
)
from review_assistant.schemas.literature import (
    LiteratureItem,
    LiteratureSaveRequest,
    SearchRequest,
    SearchQueryRequest,
    FilterLiteratureRequest,
    SelectLiteratureRequest,
    TranslateRequest,
    LiteratureExportRequest,
)
from review_assistant.schemas.writing import (
    WriteStartRequest,
    WriteSectionRequest,
    ExportRequest,
    DiagramRequest,
)
from review_assistant.schemas.template import TemplateCreate, TemplateUpdate
from review_assistant.schemas.config import AIConfigSave, ModelListRequest

__all__ = [
    "KeywordSuggestionResult",
    "ClassificationResult",
    "LiteratureSelection",
    "ProjectCreate",
    "ProjectUpdate",
    "KeywordCreate",
    "KeywordSuggestRequest",
    "ApplyTemplateRequest",
    "DraftSave",
    "GuideUpdate",
    "PlanUpdate",
    "ProjectIdRequest",
    "LiteratureItem",
    "LiteratureSaveRequest",
    "SearchRequest",
    "SearchQueryRequest",
    "FilterLiteratureRequest",
    "SelectLiteratureRequest",
    "TranslateRequest",
    "LiteratureExportRequest",
    "WriteStartRequest",
    "WriteSectionRequest",
    "ExportRequest",
    "DiagramRequest",
    "TemplateCreate",
    "TemplateUpdate",
    "AIConfigSave",
    "ModelListRequest",
]
