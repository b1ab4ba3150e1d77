"""
AI 服务商配置（单例表）
"""
from sqlalchemy import Column, Integer, String, DateTime
from datetime import datetime

from review_assistant.database import Base


class AIConfig(Base):
    """AI 配置；每次保存都会先清空再插入一条"""
    __tablename__ = "ai_config"

    id = Column(Integer, primary_key=True, index=True)
    api_endpoint = Column(String(500), nullable=False)
    api_key = Column(String(500), nullable=False)
    model_name = Column(String(200), default="gpt-4", nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)

    @property
    def masked_key(self):
        """只暴露前 8 位"""
        if not self.api_key:
            return None
        return f"{self.api_key[:8]}..."

    def to_dict(self):
        """转换为字典（密钥脱敏）"""
        return {
            "id": self.id,
            "api_endpoint": self.api_endpoint,
            "api_key_masked": self.masked_key,
            "model_name": self.model_name,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        return f"<AIConfig(id={self.id}, endpoint='{self.api_endpoint}', model='{self.model_name}')>"
