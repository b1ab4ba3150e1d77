"""
项目关键词数据模型
"""
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from datetime import datetime

from review_assistant.database import Base


class ProjectKeyword(Base):
    """项目关键词（检索与分类用），同一项目内不做唯一性约束"""
    __tablename__ = "project_keywords"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)

    keyword = Column(String(255), nullable=False)
    category = Column(String(100))  # 可为空，例如 method / application / theory
    is_primary = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "project_id": self.project_id,
            "keyword": self.keyword,
            "category": self.category,
            "is_primary": bool(self.is_primary),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<ProjectKeyword(id={self.id}, keyword='{self.keyword}', primary={self.is_primary})>"
