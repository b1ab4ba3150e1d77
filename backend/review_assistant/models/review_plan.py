"""
综述大纲（写作计划）
"""
from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey
from datetime import datetime

from review_assistant.database import Base


class ReviewPlan(Base):
    """综述大纲模型"""
    __tablename__ = "review_plans"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)

    plan_content = Column(Text, nullable=False)  # Markdown 大纲
    version = Column(Integer, default=1, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    def to_dict(self):
        return {
            "id": self.id,
            "project_id": self.project_id,
            "plan_content": self.plan_content,
            "version": self.version,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<ReviewPlan(id={self.id}, project_id={self.project_id}, version={self.version})>"
