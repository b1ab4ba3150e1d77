"""
数据库模型模块
"""
from review_assistant.models.project import Project, PROJECT_STATUSES
from review_assistant.models.keyword import ProjectKeyword
from review_assistant.models.reference_paper import ReferencePaper
from review_assistant.models.style_analysis import StyleAnalysis
from review_assistant.models.review_plan import ReviewPlan
from review_assistant.models.literature import SearchedLiterature
from review_assistant.models.draft import ReviewDraft
from review_assistant.models.ai_config import AIConfig
from review_assistant.models.template import ReviewTemplate, WritingPhrase

__all__ = [
    "Project",
    "PROJECT_STATUSES",
    "ProjectKeyword",
    "ReferencePaper",
    "StyleAnalysis",
    "ReviewPlan",
    "SearchedLiterature",
    "ReviewDraft",
    "AIConfig",
    "ReviewTemplate",
    "WritingPhrase",
]
