"""
综述模板 API 路由
"""
from fastapi import APIRouter, Depends, HTTPException
import logging

from sqlalchemy.orm import Session

from review_assistant.database import get_db
from review_assistant.models import ReviewTemplate
from review_assistant.schemas.template import TemplateCreate, TemplateUpdate

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/templates",
    tags=["templates"],
)


def _get_template_or_404(db: Session, template_id: int) -> ReviewTemplate:
    template = db.query(ReviewTemplate).filter(ReviewTemplate.id == template_id).first()
    if template is None:
        raise HTTPException(status_code=404, detail="模板不存在")
    return template


@router.get("")
def list_templates(db: Session = Depends(get_db)):
    """默认模板在前，其余按创建时间倒序"""
    templates = (
        db.query(ReviewTemplate)
        .order_by(ReviewTemplate.is_default.desc(), ReviewTemplate.created_at.desc(), ReviewTemplate.id.desc())
        .all()
    )
    return {"success": True, "data": [t.to_dict() for t in templates]}


@router.post("")
def create_template(payload: TemplateCreate, db: Session = Depends(get_db)):
    if not payload.name or not payload.structure:
        raise HTTPException(status_code=400, detail="模板名称和结构不能为空")

    template = ReviewTemplate(
        name=payload.name,
        description=payload.description,
        structure=payload.structure,
        is_default=payload.is_default,
        is_builtin=False,
    )
    db.add(template)
    db.commit()
    db.refresh(template)
    return {"success": True, "data": template.to_dict()}


@router.get("/{template_id}")
def get_template(template_id: int, db: Session = Depends(get_db)):
    return {"success": True, "data": _get_template_or_404(db, template_id).to_dict()}


@router.put("/{template_id}")
def update_template(template_id: int, payload: TemplateUpdate, db: Session = Depends(get_db)):
    template = _get_template_or_404(db, template_id)
    if payload.name is not None and not payload.name.strip():
        raise HTTPException(status_code=400, detail="模板名称不能为空")
    if payload.structure is not None and not payload.structure.strip():
        raise HTTPException(status_code=400, detail="模板结构不能为空")

    for field, value in payload.model_dump(exclude_none=True).items():
        setattr(template, field, value)
    db.commit()
    db.refresh(template)
    return {"success": True, "data": template.to_dict()}


@router.delete("/{template_id}")
def delete_template(template_id: int, db: Session = Depends(get_db)):
    """内置模板不可删除"""
    template = _get_template_or_404(db, template_id)
    if template.is_builtin:
        raise HTTPException(status_code=400, detail="内置模板不能删除")

    db.delete(template)
    db.commit()
    logger.info(f"模板已删除: {template_id}")
    return {"success": True, "message": "模板删除成功"}
