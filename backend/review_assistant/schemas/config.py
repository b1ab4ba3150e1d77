"""
AI 配置相关的请求模型
"""
from pydantic import BaseModel, Field
from typing import Optional


class AIConfigSave(BaseModel):
    api_endpoint: Optional[str] = Field(default=None, description="OpenAI 兼容接口地址")
    api_key: Optional[str] = Field(default=None, description="API Key")
    model_name: Optional[str] = Field(default=None, description="模型名称，缺省 gpt-4")


class ModelListRequest(BaseModel):
    api_endpoint: Optional[str] = None
    api_key: Optional[str] = None
