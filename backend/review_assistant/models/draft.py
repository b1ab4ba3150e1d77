"""
综述草稿数据模型
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from datetime import datetime

from review_assistant.database import Base


class ReviewDraft(Base):
    """综述草稿；按 (project, language) 取最新一条"""
    __tablename__ = "review_drafts"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)

    content = Column(Text, nullable=False)
    language = Column(String(10), default="zh", nullable=False)  # zh, en
    version = Column(Integer, default=1, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self, include_content=True):
        data = {
            "id": self.id,
            "project_id": self.project_id,
            "language": self.language,
            "version": self.version,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
        if include_content:
            data["content"] = self.content
        return data

    def __repr__(self):
        return f"<ReviewDraft(id={self.id}, project_id={self.project_id}, language='{self.language}', version={self.version})>"
