"""
检索/导入/保存的文献数据模型
"""
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey
from datetime import datetime
import json
import logging

from review_assistant.database import Base

logger = logging.getLogger(__name__)


class SearchedLiterature(Base):
    """文献记录；is_selected 决定能否在写作和导出中被引用"""
    __tablename__ = "searched_literature"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)

    # 来源: search, arxiv, pubmed, import, ...
    source = Column(String(50))

    # 基本信息
    title = Column(String(1000), nullable=False)
    authors = Column(Text)  # 作者字符串，逗号或分号分隔
    abstract = Column(Text)
    doi = Column(String(255))
    url = Column(String(1000))
    pdf_url = Column(String(1000))

    # 自由格式 JSON 字符串，例如 {"published": "...", "journal": "..."}
    metadata_json = Column("metadata", Text)

    is_selected = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    @property
    def metadata_dict(self) -> dict:
        """
        尽力解析 metadata 字段
        解析失败或不是对象时返回空字典
        """
        if not self.metadata_json:
            return {}
        try:
            data = json.loads(self.metadata_json)
        except (TypeError, ValueError):
            logger.debug(f"文献 {self.id} 的 metadata 不是合法 JSON，已忽略")
            return {}
        return data if isinstance(data, dict) else {}

    def to_dict(self):
        """转换为字典"""
        return {
            "id": self.id,
            "project_id": self.project_id,
            "source": self.source,
            "title": self.title,
            "authors": self.authors,
            "abstract": self.abstract,
            "doi": self.doi,
            "url": self.url,
            "pdf_url": self.pdf_url,
            "metadata": self.metadata_json,
            "is_selected": bool(self.is_selected),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<SearchedLiterature(id={self.id}, title='{(self.title or '')[:50]}...')>"
