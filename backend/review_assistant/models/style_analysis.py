"""
写作风格分析结果
"""
from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey
from datetime import datetime

from review_assistant.database import Base


class StyleAnalysis(Base):
    """风格分析 + 写作指南；同一项目可有多条，读取时取最新一条"""
    __tablename__ = "style_analysis"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)

    analysis_result = Column(Text)
    writing_guide = Column(Text)  # 用户可直接编辑

    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    def to_dict(self):
        return {
            "id": self.id,
            "project_id": self.project_id,
            "analysis_result": self.analysis_result,
            "writing_guide": self.writing_guide,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<StyleAnalysis(id={self.id}, project_id={self.project_id})>"
