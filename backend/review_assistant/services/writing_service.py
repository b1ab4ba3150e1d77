"""
写作上下文组装：把上传论文、已选文献、项目关键词拼成提示词中的参考资料
"""
from typing import List

from sqlalchemy.orm import Session

from review_assistant.models import ProjectKeyword, ReferencePaper, SearchedLiterature
from review_assistant.services.project_service import (
    list_keywords,
    list_selected_literature,
    split_keywords,
)

PAPER_EXCERPT_LIMIT = 500


def format_keyword_block(keywords: List[ProjectKeyword]) -> str:
    primary, secondary = split_keywords(keywords)
    block = ""
    if primary:
        block += "核心关键词: " + ", ".join(primary) + "\n"
    if secondary:
        block += "相关关键词: " + ", ".join(secondary) + "\n"
    return block


def build_reference_context(db: Session, project_id: int) -> str:
    """
    组装参考资料文本

    已选文献的序号与导出时的引用编号一致（按创建时间排序的第 n 篇即 [n]）
    """
    papers = (
        db.query(ReferencePaper)
        .filter(ReferencePaper.project_id == project_id)
        .order_by(ReferencePaper.created_at.asc(), ReferencePaper.id.asc())
        .all()
    )
    literature: List[SearchedLiterature] = list_selected_literature(db, project_id)
    keywords = list_keywords(db, project_id)

    references = "## 上传的参考文献\n"
    for i, paper in enumerate(papers, start=1):
        references += f"\n{i}. {paper.filename}\n"
        if paper.extracted_text:
            references += f"摘要: {paper.extracted_text[:PAPER_EXCERPT_LIMIT]}...\n"

    references += "\n## 检索文献（引用时使用 [序号]）\n"
    for i, lit in enumerate(literature, start=1):
        references += f"\n[{i}] {lit.title}\n"
        references += f"作者: {lit.authors or ''}\n"
        references += f"摘要: {lit.abstract or ''}\n"

    keyword_block = format_keyword_block(keywords)
    if keyword_block:
        references += "\n## 项目关键词\n\n" + keyword_block
    return references
