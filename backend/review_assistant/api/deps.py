"""
路由共用的依赖项
"""
from fastapi import Depends
from sqlalchemy.orm import Session

from review_assistant.database import get_db
from review_assistant.services.llm.openai_service import (
    AIClientProvider,
    AIService,
    get_ai_client_provider,
)


def get_ai_service(
    db: Session = Depends(get_db),
    provider: AIClientProvider = Depends(get_ai_client_provider),
) -> AIService:
    """按当前 AI 配置获取 AIService"""
    return provider.service_for(db)
