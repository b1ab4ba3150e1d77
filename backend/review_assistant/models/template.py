"""
综述模板与学术写作用语
"""
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime
from datetime import datetime

from review_assistant.database import Base


class ReviewTemplate(Base):
    """可复用的综述大纲骨架"""
    __tablename__ = "review_templates"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    structure = Column(Text, nullable=False)  # Markdown

    is_default = Column(Boolean, default=False, nullable=False)
    is_builtin = Column(Boolean, default=False, nullable=False)  # 初始化写入的模板不可删除

    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "structure": self.structure,
            "is_default": bool(self.is_default),
            "is_builtin": bool(self.is_builtin),
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<ReviewTemplate(id={self.id}, name='{self.name}')>"


class WritingPhrase(Base):
    """学术写作常用语（静态参考表）"""
    __tablename__ = "writing_phrases"

    id = Column(Integer, primary_key=True, index=True)
    category = Column(String(100), nullable=False, index=True)
    phrase = Column(Text, nullable=False)
    usage = Column(Text)
    example = Column(Text)

    def to_dict(self):
        return {
            "id": self.id,
            "category": self.category,
            "phrase": self.phrase,
            "usage": self.usage,
            "example": self.example,
        }
