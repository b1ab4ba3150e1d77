"""
综述项目数据模型
"""
from sqlalchemy import Column, Integer, String, Text, DateTime
from datetime import datetime

from review_assistant.database import Base


PROJECT_STATUSES = ("draft", "analyzing", "writing", "completed")


class Project(Base):
    """综述项目模型"""
    __tablename__ = "projects"

    # 主键
    id = Column(Integer, primary_key=True, index=True)

    # 基本信息
    name = Column(String(500), nullable=False)
    description = Column(Text)

    # 状态: draft, analyzing, writing, completed（仅作提示，不做状态机校验）
    status = Column(String(50), default="draft", nullable=False)

    # 时间戳
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        """转换为字典"""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "status": self.status,
            "created_at": self.created_at.isoformat() if self.created_at is not None else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at is not None else None,
        }

    def __repr__(self):
        return f"<Project(id={self.id}, name='{self.name[:50]}', status='{self.status}')>"
