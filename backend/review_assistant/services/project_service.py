"""
项目相关的数据访问
"""
import logging
from typing import List

from fastapi import HTTPException
from sqlalchemy.orm import Session

from review_assistant.models import (
    Project,
    ProjectKeyword,
    ReferencePaper,
    ReviewDraft,
    ReviewPlan,
    SearchedLiterature,
    StyleAnalysis,
)

logger = logging.getLogger(__name__)

# 删除项目时需要先清理的子表
PROJECT_CHILD_MODELS = (
    ReferencePaper,
    StyleAnalysis,
    ReviewPlan,
    SearchedLiterature,
    ReviewDraft,
    ProjectKeyword,
)


def get_project_or_404(db: Session, project_id: int) -> Project:
    project = db.query(Project).filter(Project.id == project_id).first()
    if project is None:
        raise HTTPException(status_code=404, detail="项目不存在")
    return project


def delete_project_cascade(db: Session, project: Project) -> None:
    """
    在同一个事务里删除项目及其所有子记录，任一步失败整体回滚
    """
    project_id = project.id
    try:
        for model in PROJECT_CHILD_MODELS:
            deleted = (
                db.query(model)
                .filter(model.project_id == project_id)
                .delete(synchronize_session=False)
            )
            logger.debug(f"删除项目 {project_id} 的 {model.__tablename__}: {deleted} 行")
        db.delete(project)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception(f"删除项目 {project_id} 失败，已回滚")
        raise
    logger.info(f"项目 {project_id} 已删除")


def list_keywords(db: Session, project_id: int) -> List[ProjectKeyword]:
    """核心关键词优先，其次按创建顺序"""
    return (
        db.query(ProjectKeyword)
        .filter(ProjectKeyword.project_id == project_id)
        .order_by(ProjectKeyword.is_primary.desc(), ProjectKeyword.created_at.asc(), ProjectKeyword.id.asc())
        .all()
    )


def split_keywords(keywords: List[ProjectKeyword]):
    """返回 (核心关键词, 相关关键词)"""
    primary = [k.keyword for k in keywords if k.is_primary]
    secondary = [k.keyword for k in keywords if not k.is_primary]
    return primary, secondary


def list_selected_literature(db: Session, project_id: int) -> List[SearchedLiterature]:
    """
    可被引用的文献，按创建时间排序

    引用编号 [n] 即为该列表中的第 n 篇
    """
    return (
        db.query(SearchedLiterature)
        .filter(
            SearchedLiterature.project_id == project_id,
            SearchedLiterature.is_selected.is_(True),
        )
        .order_by(SearchedLiterature.created_at.asc(), SearchedLiterature.id.asc())
        .all()
    )
