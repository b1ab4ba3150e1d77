from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session
import logging

from review_assistant.database import get_db
from review_assistant.models import AIConfig
from review_assistant.schemas.config import AIConfigSave, ModelListRequest
from review_assistant.services.llm.openai_service import (
    AIClientProvider,
    get_ai_client_provider,
    list_provider_models,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/config", tags=["settings"])


# ---- AI 服务商配置（单例） ----


@router.get("/ai")
def get_ai_config(db: Session = Depends(get_db)):
    """当前 AI 配置，密钥只返回前 8 位"""
    config = db.query(AIConfig).order_by(AIConfig.id.desc()).first()
    return {"success": True, "data": config.to_dict() if config else None}


@router.post("/ai")
def save_ai_config(
    payload: AIConfigSave,
    db: Session = Depends(get_db),
    provider: AIClientProvider = Depends(get_ai_client_provider),
):
    """删除旧配置后写入新配置，并让 AI 客户端按新配置重建"""
    if not payload.api_endpoint or not payload.api_key:
        raise HTTPException(status_code=400, detail="缺少必要参数")

    try:
        db.query(AIConfig).delete(synchronize_session=False)
        config = AIConfig(
            api_endpoint=payload.api_endpoint,
            api_key=payload.api_key,
            model_name=payload.model_name or "gpt-4",
        )
        db.add(config)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(config)

    provider.invalidate()
    logger.info(f"AI 配置已更新: {config}")
    return {"success": True, "data": {"id": config.id, "message": "AI 配置已保存"}}


# ---- 模型列表 ----


@router.post("/models")
async def list_models(payload: ModelListRequest):
    """从服务商获取可用模型；失败时把上游错误信息返回给前端"""
    if not payload.api_endpoint or not payload.api_key:
        raise HTTPException(status_code=400, detail="缺少 API 端点或密钥")

    try:
        models = await run_in_threadpool(list_provider_models, payload.api_endpoint, payload.api_key)
    except Exception as e:
        logger.error(f"获取模型列表失败: {e}")
        raise HTTPException(status_code=500, detail=str(e) or "获取模型列表失败")

    return {"success": True, "data": models}
