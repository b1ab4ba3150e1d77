"""
项目关键词 API 路由
"""
from fastapi import APIRouter, Depends, HTTPException
from typing import Optional
import logging

from sqlalchemy.orm import Session

from review_assistant.api.deps import get_ai_service
from review_assistant.database import get_db
from review_assistant.models import ProjectKeyword, ReviewPlan, StyleAnalysis
from review_assistant.schemas.project import KeywordCreate, KeywordSuggestRequest
from review_assistant.services.llm.errors import UpstreamFormatError
from review_assistant.services.llm.openai_service import AIService
from review_assistant.services.project_service import get_project_or_404, list_keywords
from review_assistant.services.versions import latest_for_project

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/projects/{project_id}/keywords",
    tags=["keywords"],
)


@router.get("")
def get_keywords(project_id: int, db: Session = Depends(get_db)):
    """核心关键词在前，其余按添加顺序"""
    return {"success": True, "data": [k.to_dict() for k in list_keywords(db, project_id)]}


@router.post("")
def add_keyword(project_id: int, payload: KeywordCreate, db: Session = Depends(get_db)):
    if not payload.keyword or not payload.keyword.strip():
        raise HTTPException(status_code=400, detail="关键词不能为空")
    get_project_or_404(db, project_id)

    keyword = ProjectKeyword(
        project_id=project_id,
        keyword=payload.keyword.strip(),
        category=payload.category,
        is_primary=payload.is_primary,
    )
    db.add(keyword)
    db.commit()
    db.refresh(keyword)
    return {"success": True, "data": keyword.to_dict()}


@router.delete("")
def delete_keyword(project_id: int, keywordId: Optional[int] = None, db: Session = Depends(get_db)):
    if keywordId is None:
        raise HTTPException(status_code=400, detail="缺少关键词ID")

    db.query(ProjectKeyword).filter(
        ProjectKeyword.id == keywordId,
        ProjectKeyword.project_id == project_id,
    ).delete(synchronize_session=False)
    db.commit()
    return {"success": True, "message": "删除成功"}


@router.post("/suggest")
async def suggest_keywords(
    project_id: int,
    payload: KeywordSuggestRequest,
    db: Session = Depends(get_db),
    ai: AIService = Depends(get_ai_service),
):
    """基于最新写作指南和撰写计划推荐关键词"""
    if not payload.user_keywords:
        raise HTTPException(status_code=400, detail="请至少提供一个关键词")
    get_project_or_404(db, project_id)

    analysis = latest_for_project(db, StyleAnalysis, project_id)
    plan = latest_for_project(db, ReviewPlan, project_id)

    try:
        result = await ai.suggest_keywords(
            user_keywords=payload.user_keywords,
            description=payload.project_description,
            guide=analysis.writing_guide if analysis else None,
            plan=plan.plan_content if plan else None,
        )
    except UpstreamFormatError:
        raise HTTPException(status_code=500, detail="AI响应格式错误")
    except Exception as e:
        logger.error(f"推荐关键词失败: {e}")
        raise HTTPException(status_code=500, detail="推荐关键词失败")

    return {"success": True, "data": [k.model_dump() for k in result.keywords]}
