"""
参考论文上传、风格分析与撰写计划 API 路由
"""
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool
from datetime import datetime
from typing import Optional
import logging
import os

from sqlalchemy.orm import Session

from review_assistant.api.deps import get_ai_service
from review_assistant.config import Settings, get_settings
from review_assistant.database import get_db
from review_assistant.models import ReferencePaper, ReviewPlan, StyleAnalysis
from review_assistant.schemas.project import GuideUpdate, PlanUpdate, ProjectIdRequest
from review_assistant.services.document_service import (
    DocumentService,
    ExtractionError,
    detect_file_type,
    get_document_service,
)
from review_assistant.services.llm.openai_service import AIService
from review_assistant.services.project_service import get_project_or_404, list_keywords
from review_assistant.services.versions import append_version, latest_for_project
from review_assistant.services.writing_service import format_keyword_block

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["analysis"],
)


@router.post("/upload")
async def upload_reference_paper(
    file: Optional[UploadFile] = File(None),
    projectId: Optional[int] = Form(None),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    document_service: DocumentService = Depends(get_document_service),
):
    """
    上传 PDF / DOCX 参考论文

    文本抽取失败不影响上传本身，extracted_text 留空
    """
    if file is None or projectId is None:
        raise HTTPException(status_code=400, detail="缺少必要参数")

    file_type = detect_file_type(file.filename, file.content_type)
    if file_type is None:
        raise HTTPException(status_code=400, detail="只支持 PDF 和 DOCX 格式")
    get_project_or_404(db, projectId)

    upload_dir = os.path.join(settings.UPLOADS_PATH, str(projectId))
    os.makedirs(upload_dir, exist_ok=True)
    safe_name = os.path.basename(file.filename or f"upload.{file_type}")
    timestamp = int(datetime.utcnow().timestamp() * 1000)
    file_path = os.path.join(upload_dir, f"{timestamp}-{safe_name}")

    content = await file.read()
    with open(file_path, "wb") as f:
        f.write(content)

    extracted_text = None
    try:
        extracted_text = await run_in_threadpool(document_service.extract_text, file_path, file_type)
    except ExtractionError as e:
        logger.warning(f"文件解析失败，已保存但没有文本: {safe_name}: {e}")

    paper = ReferencePaper(
        project_id=projectId,
        filename=safe_name,
        file_path=file_path,
        file_type=file_type,
        extracted_text=extracted_text or None,
    )
    db.add(paper)
    db.commit()
    db.refresh(paper)

    return {
        "success": True,
        "data": {
            "id": paper.id,
            "filename": paper.filename,
            "file_type": paper.file_type,
            "extractedLength": len(extracted_text or ""),
        },
    }


@router.post("/analyze/style")
async def analyze_style(
    payload: ProjectIdRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    ai: AIService = Depends(get_ai_service),
):
    """合并参考论文文本，生成风格分析和写作指南"""
    if payload.project_id is None:
        raise HTTPException(status_code=400, detail="缺少项目ID")
    project = get_project_or_404(db, payload.project_id)

    papers = (
        db.query(ReferencePaper)
        .filter(ReferencePaper.project_id == project.id)
        .order_by(ReferencePaper.created_at.asc(), ReferencePaper.id.asc())
        .all()
    )
    texts = [p.extracted_text for p in papers if p.extracted_text]
    if not texts:
        raise HTTPException(status_code=404, detail="未找到可分析的参考论文")

    combined = "\n\n".join(texts)[:settings.STYLE_TEXT_LIMIT]
    try:
        analysis_result = await ai.analyze_style(combined, limit=settings.ANALYZE_TEXT_LIMIT)
        writing_guide = await ai.generate_writing_guide(analysis_result)
    except Exception as e:
        logger.error(f"风格分析失败: {e}")
        raise HTTPException(status_code=500, detail="风格分析失败")

    analysis = StyleAnalysis(
        project_id=project.id,
        analysis_result=analysis_result,
        writing_guide=writing_guide,
    )
    db.add(analysis)
    project.status = "analyzing"
    db.commit()
    db.refresh(analysis)
    return {"success": True, "data": analysis.to_dict()}


@router.put("/analyze/guide/{analysis_id}")
def update_guide(analysis_id: int, payload: GuideUpdate, db: Session = Depends(get_db)):
    """原地编辑写作指南"""
    if payload.writing_guide is None:
        raise HTTPException(status_code=400, detail="缺少写作指南内容")
    analysis = db.query(StyleAnalysis).filter(StyleAnalysis.id == analysis_id).first()
    if analysis is None:
        raise HTTPException(status_code=404, detail="风格分析不存在")

    analysis.writing_guide = payload.writing_guide
    db.commit()
    db.refresh(analysis)
    return {"success": True, "data": analysis.to_dict(), "message": "写作指南已更新"}


@router.post("/generate/plan")
async def generate_plan(
    payload: ProjectIdRequest,
    db: Session = Depends(get_db),
    ai: AIService = Depends(get_ai_service),
):
    """基于最新写作指南和项目关键词生成撰写计划，每次生成新增一行"""
    if payload.project_id is None:
        raise HTTPException(status_code=400, detail="缺少项目ID")
    project = get_project_or_404(db, payload.project_id)

    analysis = latest_for_project(db, StyleAnalysis, project.id)
    if analysis is None:
        raise HTTPException(status_code=400, detail="请先完成风格分析")

    topic = f"{project.name}: {project.description}" if project.description else project.name
    guide = analysis.writing_guide or ""
    keyword_block = format_keyword_block(list_keywords(db, project.id))
    if keyword_block:
        guide += "\n\n项目关键词：\n" + keyword_block

    try:
        plan_content = await ai.generate_review_plan(guide, topic)
    except Exception as e:
        logger.error(f"生成撰写计划失败: {e}")
        raise HTTPException(status_code=500, detail="生成撰写计划失败")

    plan = append_version(db, ReviewPlan, project_id=project.id, plan_content=plan_content)
    return {"success": True, "data": plan.to_dict()}


@router.put("/generate/plan/{plan_id}")
def update_plan(plan_id: int, payload: PlanUpdate, db: Session = Depends(get_db)):
    """原地编辑撰写计划（不改变版本号）"""
    if payload.plan_content is None:
        raise HTTPException(status_code=400, detail="缺少计划内容")
    plan = db.query(ReviewPlan).filter(ReviewPlan.id == plan_id).first()
    if plan is None:
        raise HTTPException(status_code=404, detail="撰写计划不存在")

    plan.plan_content = payload.plan_content
    db.commit()
    db.refresh(plan)
    return {"success": True, "data": plan.to_dict(), "message": "撰写计划已更新"}
