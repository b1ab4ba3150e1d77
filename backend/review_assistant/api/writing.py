"""
综述写作、导出与图表 API 路由
"""
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response, StreamingResponse
from datetime import datetime
from typing import Callable, Optional
import logging
import os

from sqlalchemy.orm import Session

from review_assistant.api.deps import get_ai_service
from review_assistant.config import Settings, get_settings
from review_assistant.database import get_db, get_session_factory
from review_assistant.models import Project, ReviewDraft, ReviewPlan, StyleAnalysis, WritingPhrase
from review_assistant.schemas.writing import (
    DiagramRequest,
    ExportRequest,
    WriteSectionRequest,
    WriteStartRequest,
)
from review_assistant.services.diagram_service import DIAGRAM_FORMATS, build_image_url, clean_mermaid_code
from review_assistant.services.export_service import build_docx, build_markdown_export
from review_assistant.services.llm.openai_service import DIAGRAM_TYPES, AIService
from review_assistant.services.project_service import get_project_or_404, list_selected_literature
from review_assistant.services.versions import latest_for_project
from review_assistant.services.writing_service import build_reference_context

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["writing"],
)

STREAM_MEDIA_TYPE = "text/plain; charset=utf-8"
DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
DIAGRAM_CONTEXT_LIMIT = 8000


def _writing_context(db: Session, project_id: int):
    """返回 (最新计划, 写作指南, 参考资料)，没有计划时 400"""
    plan = latest_for_project(db, ReviewPlan, project_id)
    if plan is None:
        raise HTTPException(status_code=400, detail="请先生成撰写计划")
    analysis = latest_for_project(db, StyleAnalysis, project_id)
    guide = (analysis.writing_guide if analysis else None) or ""
    return plan, guide, build_reference_context(db, project_id)


@router.post("/write/start")
async def start_writing(
    payload: WriteStartRequest,
    db: Session = Depends(get_db),
    session_factory: Callable[[], Session] = Depends(get_session_factory),
    ai: AIService = Depends(get_ai_service),
):
    """
    流式生成整篇综述

    文本块边生成边返回，全部生成完后才写入一条新的草稿（version = 1）；
    中途出错或客户端断开时不保存任何内容
    """
    if payload.project_id is None or not payload.language:
        raise HTTPException(status_code=400, detail="缺少必要参数")
    project = get_project_or_404(db, payload.project_id)
    plan, guide, references = _writing_context(db, project.id)

    project_id = project.id
    language = payload.language
    stream = ai.stream_write_review(plan.plan_content, guide, references, language, payload.options)

    async def generate():
        chunks = []
        try:
            async for chunk in stream:
                chunks.append(chunk)
                yield chunk
        except Exception as e:
            logger.error(f"AI写作错误: {e}")
            raise

        session = session_factory()
        try:
            session.add(ReviewDraft(project_id=project_id, content="".join(chunks), language=language, version=1))
            saved_project = session.query(Project).filter(Project.id == project_id).first()
            if saved_project is not None:
                saved_project.status = "writing"
            session.commit()
            logger.info(f"项目 {project_id} 草稿已保存，长度: {sum(len(c) for c in chunks)}")
        finally:
            session.close()

    return StreamingResponse(generate(), media_type=STREAM_MEDIA_TYPE)


@router.post("/write/section")
async def write_section(
    payload: WriteSectionRequest,
    db: Session = Depends(get_db),
    ai: AIService = Depends(get_ai_service),
):
    """按章节流式生成，结果不入库，由前端拼接后通过草稿接口保存"""
    if payload.project_id is None or not payload.language or not payload.section_title or not payload.section:
        raise HTTPException(status_code=400, detail="缺少必要参数")
    get_project_or_404(db, payload.project_id)
    plan, guide, references = _writing_context(db, payload.project_id)

    stream = ai.stream_write_review_by_section(
        payload.section,
        payload.section_title,
        plan.plan_content,
        guide,
        references,
        payload.previous_content or "",
        payload.language,
        payload.options,
    )

    async def generate():
        try:
            async for chunk in stream:
                yield chunk
        except Exception as e:
            logger.error(f"AI章节写作错误: {e}")
            raise

    return StreamingResponse(generate(), media_type=STREAM_MEDIA_TYPE)


def _latest_draft_or_404(db: Session, project_id: int, language: str) -> ReviewDraft:
    draft = latest_for_project(db, ReviewDraft, project_id, language=language)
    if draft is None:
        raise HTTPException(status_code=404, detail="未找到草稿")
    return draft


@router.post("/export")
def export_draft(payload: ExportRequest, db: Session = Depends(get_db)):
    """导出草稿 + 被引用的参考文献列表（Markdown / Word）"""
    if payload.project_id is None or not payload.language or not payload.format:
        raise HTTPException(status_code=400, detail="缺少必要参数")
    if payload.format not in ("markdown", "word"):
        raise HTTPException(status_code=400, detail="不支持的格式")

    draft = _latest_draft_or_404(db, payload.project_id, payload.language)
    literature = list_selected_literature(db, payload.project_id)
    full_content = build_markdown_export(draft.content, literature, renumber=payload.renumber_citations)

    if payload.format == "markdown":
        return Response(
            content=full_content,
            media_type="text/markdown",
            headers={"Content-Disposition": f'attachment; filename="review_{payload.language}.md"'},
        )
    return Response(
        content=build_docx(full_content),
        media_type=DOCX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="review_{payload.language}.docx"'},
    )


@router.post("/export/markdown")
def export_markdown_file(
    payload: ExportRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """把带参考文献的 Markdown 写入输出目录"""
    if payload.project_id is None or not payload.language:
        raise HTTPException(status_code=400, detail="缺少必要参数")

    draft = _latest_draft_or_404(db, payload.project_id, payload.language)
    literature = list_selected_literature(db, payload.project_id)
    full_content = build_markdown_export(draft.content, literature, renumber=payload.renumber_citations)

    os.makedirs(settings.OUTPUTS_PATH, exist_ok=True)
    timestamp = datetime.utcnow().strftime("%Y-%m-%dT%H-%M-%S-%fZ")
    filename = f"review_{payload.project_id}_{payload.language}_{timestamp}.md"
    filepath = os.path.join(settings.OUTPUTS_PATH, filename)
    with open(filepath, "w", encoding="utf-8") as f:
        f.write(full_content)

    logger.info(f"Markdown 已导出: {filepath}")
    return {"success": True, "data": {"filename": filename, "filepath": filepath}}


@router.post("/diagram/generate")
async def generate_diagram(
    payload: DiagramRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
    ai: AIService = Depends(get_ai_service),
):
    """生成 Mermaid 图表代码和 Mermaid Ink 图片地址"""
    if payload.project_id is None or not payload.diagram_type:
        raise HTTPException(status_code=400, detail="缺少必要参数")

    description = payload.description or ""
    if payload.use_article_content:
        draft = latest_for_project(db, ReviewDraft, payload.project_id, language=payload.language)
        if draft is None:
            raise HTTPException(status_code=404, detail="未找到文章内容，请先生成文章")
        description = f"基于以下文章内容生成机制图：\n\n{draft.content[:DIAGRAM_CONTEXT_LIMIT]}"

    if not description:
        raise HTTPException(status_code=400, detail="缺少描述或文章内容")
    if payload.diagram_type not in DIAGRAM_TYPES:
        raise HTTPException(status_code=400, detail="无效的图表类型")
    if payload.format not in DIAGRAM_FORMATS:
        raise HTTPException(status_code=400, detail="无效的图片格式")

    try:
        raw_code = await ai.generate_diagram(payload.diagram_type, description)
    except Exception as e:
        logger.error(f"生成图表失败: {e}")
        raise HTTPException(status_code=500, detail="生成图表失败")

    code = clean_mermaid_code(raw_code)
    return {
        "success": True,
        "data": {
            "code": code,
            "type": payload.diagram_type,
            "imageUrl": build_image_url(code, payload.format, settings.MERMAID_INK_URL),
            "format": payload.format,
        },
    }


@router.get("/writing/phrases")
def list_phrases(category: Optional[str] = None, db: Session = Depends(get_db)):
    """学术写作用语，可按分类过滤"""
    query = db.query(WritingPhrase)
    if category:
        query = query.filter(WritingPhrase.category == category).order_by(WritingPhrase.id)
    else:
        query = query.order_by(WritingPhrase.category, WritingPhrase.id)
    return {"success": True, "data": [p.to_dict() for p in query.all()]}
