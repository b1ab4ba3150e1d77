"""
文献管理 API 路由：保存、删除、分类、导入导出、AI 筛选
"""
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from fastapi.responses import Response
from typing import Optional
import json
import logging

from sqlalchemy.orm import Session

from review_assistant.api.deps import get_ai_service
from review_assistant.database import get_db
from review_assistant.models import Project, SearchedLiterature
from review_assistant.schemas.literature import (
    FilterLiteratureRequest,
    LiteratureExportRequest,
    LiteratureSaveRequest,
    SelectLiteratureRequest,
)
from review_assistant.services.export_service import LITERATURE_FORMATS
from review_assistant.services.import_service import parse_csv
from review_assistant.services.llm.errors import UpstreamFormatError
from review_assistant.services.llm.openai_service import AIService
from review_assistant.services.project_service import (
    get_project_or_404,
    list_keywords,
    list_selected_literature,
)
from review_assistant.services.writing_service import format_keyword_block

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["literature"],
)


# ========== 项目下的文献 ==========

@router.get("/projects/{project_id}/literature")
def list_literature(project_id: int, db: Session = Depends(get_db)):
    literature = (
        db.query(SearchedLiterature)
        .filter(SearchedLiterature.project_id == project_id)
        .order_by(SearchedLiterature.created_at.asc(), SearchedLiterature.id.asc())
        .all()
    )
    return {"success": True, "data": [lit.to_dict() for lit in literature]}


@router.post("/projects/{project_id}/literature")
def save_literature(project_id: int, payload: LiteratureSaveRequest, db: Session = Depends(get_db)):
    """批量保存检索结果，没有标题的条目跳过"""
    if payload.papers is None:
        raise HTTPException(status_code=400, detail="缺少文献数据")
    get_project_or_404(db, project_id)

    saved = []
    skipped = 0
    for paper in payload.papers:
        if not paper.title or not paper.title.strip():
            skipped += 1
            continue
        metadata = {"published": str(paper.published) if paper.published is not None else None}
        if paper.journal:
            metadata["journal"] = paper.journal
        row = SearchedLiterature(
            project_id=project_id,
            source=paper.source or "search",
            title=paper.title.strip(),
            authors=paper.authors,
            abstract=paper.abstract,
            doi=paper.doi,
            url=paper.url,
            pdf_url=paper.pdf_url,
            metadata_json=json.dumps(metadata, ensure_ascii=False),
            is_selected=paper.is_selected,
        )
        db.add(row)
        saved.append(row)
    db.commit()

    logger.info(f"项目 {project_id} 保存文献 {len(saved)} 篇，跳过 {skipped} 篇")
    return {
        "success": True,
        "data": {"saved": len(saved), "skipped": skipped},
        "message": f"成功保存 {len(saved)} 篇文献",
    }


@router.delete("/projects/{project_id}/literature")
def delete_literature(project_id: int, id: Optional[int] = None, db: Session = Depends(get_db)):
    if id is None:
        raise HTTPException(status_code=400, detail="缺少文献ID")

    db.query(SearchedLiterature).filter(
        SearchedLiterature.id == id,
        SearchedLiterature.project_id == project_id,
    ).delete(synchronize_session=False)
    db.commit()
    return {"success": True, "message": "删除成功"}


@router.delete("/projects/{project_id}/literature/clear")
def clear_literature(project_id: int, db: Session = Depends(get_db)):
    deleted = (
        db.query(SearchedLiterature)
        .filter(SearchedLiterature.project_id == project_id)
        .delete(synchronize_session=False)
    )
    db.commit()
    return {"success": True, "data": {"deletedCount": deleted}, "message": f"已清空 {deleted} 篇文献"}


@router.post("/projects/{project_id}/literature/classify")
async def classify_literature(
    project_id: int,
    db: Session = Depends(get_db),
    ai: AIService = Depends(get_ai_service),
):
    """按项目关键词把已选文献分为方法/应用/理论/数据四类"""
    get_project_or_404(db, project_id)
    keywords = list_keywords(db, project_id)
    if not keywords:
        raise HTTPException(status_code=400, detail="请先添加项目关键词")

    literature = list_selected_literature(db, project_id)
    if not literature:
        raise HTTPException(status_code=400, detail="没有需要分类的文献")

    keyword_list = ", ".join(
        f"{k.keyword} ({k.category})" if k.category else k.keyword for k in keywords
    )
    try:
        result = await ai.classify_literature(keyword_list, literature)
    except UpstreamFormatError:
        raise HTTPException(status_code=500, detail="AI响应格式错误")
    except Exception as e:
        logger.error(f"分类文献失败: {e}")
        raise HTTPException(status_code=500, detail="分类文献失败")

    return {"success": True, "data": [c.model_dump() for c in result.classifications]}


# ========== 导入 / 导出 ==========

@router.post("/literature/import")
async def import_literature(
    file: Optional[UploadFile] = File(None),
    projectId: Optional[int] = Form(None),
):
    """解析 CSV 文献表，返回解析结果（不直接入库）"""
    if file is None or projectId is None:
        raise HTTPException(status_code=400, detail="缺少必要参数")
    if not (file.filename or "").lower().endswith(".csv"):
        raise HTTPException(status_code=400, detail="暂时只支持CSV格式")

    raw = await file.read()
    result = parse_csv(raw.decode("utf-8", errors="replace"))
    return {
        "success": True,
        "data": result.papers,
        "skipped": result.skipped,
        "message": f"成功导入 {len(result.papers)} 篇文献",
    }


@router.post("/literature/export")
def export_literature(payload: LiteratureExportRequest, db: Session = Depends(get_db)):
    """导出已选文献为 RIS / BibTeX / CSV"""
    if payload.project_id is None:
        raise HTTPException(status_code=400, detail="缺少必要参数")
    if payload.format not in LITERATURE_FORMATS:
        raise HTTPException(status_code=400, detail="不支持的格式")

    literature = list_selected_literature(db, payload.project_id)
    if not literature:
        raise HTTPException(status_code=404, detail="没有选择的文献")

    writer, media_type, filename = LITERATURE_FORMATS[payload.format]
    return Response(
        content=writer(literature),
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# ========== AI 筛选 ==========

@router.post("/literature/filter")
async def filter_literature(
    payload: FilterLiteratureRequest,
    db: Session = Depends(get_db),
    ai: AIService = Depends(get_ai_service),
):
    """逗号序号协议：模型返回 1-based 序号列表"""
    if payload.project_id is None or not payload.papers:
        raise HTTPException(status_code=400, detail="缺少必要参数")
    project = get_project_or_404(db, payload.project_id)

    keywords = [k.keyword for k in list_keywords(db, project.id)]
    max_results = payload.max_results if payload.max_results and payload.max_results > 0 else len(payload.papers)
    try:
        filtered = await ai.filter_literature(
            payload.papers,
            keywords,
            project.description or project.name,
            max_results,
            payload.custom_criteria,
        )
    except Exception as e:
        logger.error(f"AI筛选文献失败: {e}")
        raise HTTPException(status_code=500, detail="AI筛选文献失败")

    return {
        "success": True,
        "data": filtered,
        "message": f"从{len(payload.papers)}篇文献中筛选出{len(filtered)}篇最相关的文献",
    }


@router.post("/filter/literature")
async def select_literature(
    payload: SelectLiteratureRequest,
    db: Session = Depends(get_db),
    ai: AIService = Depends(get_ai_service),
):
    """JSON 协议：模型返回 {"selectedIndices": [...], "reason": ...}"""
    if not payload.papers:
        raise HTTPException(status_code=400, detail="没有文献可以筛选")

    project = None
    keyword_block = ""
    if payload.project_id is not None:
        project = db.query(Project).filter(Project.id == payload.project_id).first()
        keyword_block = format_keyword_block(list_keywords(db, payload.project_id))

    topic = f"项目主题: {project.name if project else ''}"
    if project is not None and project.description:
        topic += f"\n项目描述: {project.description}"

    try:
        filtered, reason = await ai.select_literature(payload.papers, topic, keyword_block, payload.top_n)
    except UpstreamFormatError:
        raise HTTPException(status_code=500, detail="AI响应格式错误")
    except Exception as e:
        logger.error(f"筛选文献失败: {e}")
        raise HTTPException(status_code=500, detail="筛选文献失败")

    return {
        "success": True,
        "data": {
            "filteredPapers": filtered,
            "reason": reason,
            "originalCount": len(payload.papers),
            "filteredCount": len(filtered),
        },
    }
