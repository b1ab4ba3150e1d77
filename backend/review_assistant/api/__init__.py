"""
API路由模块
"""
from review_assistant.api.projects import router as projects_router
from review_assistant.api.keywords import router as keywords_router
from review_assistant.api.literature import router as literature_router
from review_assistant.api.search import router as search_router
from review_assistant.api.analysis import router as analysis_router
from review_assistant.api.writing import router as writing_router
from review_assistant.api.templates import router as templates_router
from review_assistant.api.settings import router as settings_router

__all__ = [
    "projects_router",
    "keywords_router",
    "literature_router",
    "search_router",
    "analysis_router",
    "writing_router",
    "templates_router",
    "settings_router",
]
