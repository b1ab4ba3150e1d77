"""
项目相关 API 路由
"""
from fastapi import APIRouter, Depends, HTTPException
import logging

from sqlalchemy.orm import Session

from review_assistant.database import get_db
from review_assistant.models import (
    PROJECT_STATUSES,
    Project,
    ReferencePaper,
    ReviewDraft,
    ReviewPlan,
    ReviewTemplate,
    StyleAnalysis,
)
from review_assistant.schemas.project import (
    ApplyTemplateRequest,
    DraftSave,
    ProjectCreate,
    ProjectUpdate,
)
from review_assistant.services.project_service import delete_project_cascade, get_project_or_404
from review_assistant.services.versions import latest_for_project, save_in_place

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/projects",
    tags=["projects"],
)


@router.get("")
def list_projects(db: Session = Depends(get_db)):
    """获取所有项目（最新创建的在前）"""
    projects = db.query(Project).order_by(Project.created_at.desc(), Project.id.desc()).all()
    return {"success": True, "data": [p.to_dict() for p in projects]}


@router.post("")
def create_project(payload: ProjectCreate, db: Session = Depends(get_db)):
    """创建项目，初始状态为 draft"""
    if not payload.name or not payload.name.strip():
        raise HTTPException(status_code=400, detail="项目名称不能为空")

    project = Project(name=payload.name.strip(), description=payload.description, status="draft")
    db.add(project)
    db.commit()
    db.refresh(project)
    logger.info(f"创建项目: {project}")
    return {"success": True, "data": project.to_dict()}


@router.get("/{project_id}")
def get_project(project_id: int, db: Session = Depends(get_db)):
    project = get_project_or_404(db, project_id)
    return {"success": True, "data": project.to_dict()}


@router.patch("/{project_id}")
def update_project(project_id: int, payload: ProjectUpdate, db: Session = Depends(get_db)):
    """更新项目名称、描述或状态"""
    project = get_project_or_404(db, project_id)

    if payload.status is not None and payload.status not in PROJECT_STATUSES:
        raise HTTPException(status_code=400, detail=f"无效的项目状态: {payload.status}")
    if payload.name is not None and not payload.name.strip():
        raise HTTPException(status_code=400, detail="项目名称不能为空")

    for field, value in payload.model_dump(exclude_none=True).items():
        setattr(project, field, value.strip() if field == "name" else value)
    db.commit()
    db.refresh(project)
    return {"success": True, "data": project.to_dict()}


@router.delete("/{project_id}")
def delete_project(project_id: int, db: Session = Depends(get_db)):
    """删除项目及其所有关联数据"""
    project = get_project_or_404(db, project_id)
    try:
        delete_project_cascade(db, project)
    except Exception:
        raise HTTPException(status_code=500, detail="删除项目失败")
    return {"success": True, "message": "项目已删除"}


@router.get("/{project_id}/papers")
def list_reference_papers(project_id: int, db: Session = Depends(get_db)):
    """已上传的参考论文"""
    get_project_or_404(db, project_id)
    papers = (
        db.query(ReferencePaper)
        .filter(ReferencePaper.project_id == project_id)
        .order_by(ReferencePaper.created_at.desc(), ReferencePaper.id.desc())
        .all()
    )
    return {"success": True, "data": [p.to_dict() for p in papers]}


@router.get("/{project_id}/analysis")
def get_latest_analysis(project_id: int, db: Session = Depends(get_db)):
    """最新的风格分析，没有时返回 null"""
    analysis = latest_for_project(db, StyleAnalysis, project_id)
    return {"success": True, "data": analysis.to_dict() if analysis else None}


@router.get("/{project_id}/plan")
def get_latest_plan(project_id: int, db: Session = Depends(get_db)):
    """最新的撰写计划，没有时返回 null"""
    plan = latest_for_project(db, ReviewPlan, project_id)
    return {"success": True, "data": plan.to_dict() if plan else None}


@router.post("/{project_id}/apply-template")
def apply_template(project_id: int, payload: ApplyTemplateRequest, db: Session = Depends(get_db)):
    """
    把模板结构写入撰写计划

    已有计划时原地更新并 version + 1，否则新建 version = 1 的计划
    """
    if payload.template_id is None:
        raise HTTPException(status_code=400, detail="缺少模板ID")
    get_project_or_404(db, project_id)

    template = db.query(ReviewTemplate).filter(ReviewTemplate.id == payload.template_id).first()
    if template is None:
        raise HTTPException(status_code=404, detail="模板不存在")

    plan = save_in_place(db, ReviewPlan, project_id, "plan_content", template.structure)
    logger.info(f"项目 {project_id} 应用模板 {template.id}，计划版本 {plan.version}")
    return {"success": True, "data": plan.to_dict(), "message": "模板应用成功"}


@router.get("/{project_id}/draft")
def get_draft(project_id: int, language: str = "zh", db: Session = Depends(get_db)):
    """某语言的最新草稿，没有时返回 null"""
    draft = latest_for_project(db, ReviewDraft, project_id, language=language)
    return {"success": True, "data": draft.to_dict() if draft else None}


@router.put("/{project_id}/draft")
def save_draft(project_id: int, payload: DraftSave, db: Session = Depends(get_db)):
    """
    保存草稿

    同一 (项目, 语言) 首次保存创建 version = 1，之后原地更新并 version + 1
    """
    if payload.content is None:
        raise HTTPException(status_code=400, detail="缺少草稿内容")
    get_project_or_404(db, project_id)

    draft = save_in_place(db, ReviewDraft, project_id, "content", payload.content, language=payload.language)
    return {"success": True, "data": draft.to_dict(), "message": "草稿已保存"}
