"""
应用配置管理
使用pydantic-settings进行环境变量管理
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List
import os


class Settings(BaseSettings):
    """应用设置"""

    # 应用基本配置
    APP_NAME: str = "Literature Review Assistant"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 8000

    # 数据库配置
    DATABASE_URL: str = "sqlite:///./data/app.db"

    # LLM / OpenAI 兼容API配置
    # 仅作为兜底：数据库 ai_config 表中有配置时优先使用数据库中的值
    OPENAI_API_KEY: str = ""
    OPENAI_BASE_URL: str = "https://api.openai.com/v1"
    OPENAI_MODEL: str = "gpt-4"

    # 提示词文本长度限制（字符数）
    STYLE_TEXT_LIMIT: int = 10000  # 风格分析时合并的参考文献文本上限
    ANALYZE_TEXT_LIMIT: int = 8000  # 单次风格分析 prompt 中的文本上限

    # 外部文献检索
    PUBMED_ESEARCH_URL: str = "https://eutils.ncbi.nlm.nih.gov/entrez/eutils/esearch.fcgi"
    PUBMED_EFETCH_URL: str = "https://eutils.ncbi.nlm.nih.gov/entrez/eutils/efetch.fcgi"
    SEARCH_TIMEOUT: int = 30

    # 图表渲染服务
    MERMAID_INK_URL: str = "https://mermaid.ink"

    # 文件存储路径
    DATA_DIR: str = "./data"
    UPLOADS_DIR: str = "./uploads"
    OUTPUTS_DIR: str = "./outputs"

    @property
    def UPLOADS_PATH(self) -> str:
        """上传文件存储绝对路径"""
        return os.path.abspath(self.UPLOADS_DIR)

    @property
    def OUTPUTS_PATH(self) -> str:
        """导出文件绝对路径"""
        return os.path.abspath(self.OUTPUTS_DIR)

    # CORS配置
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Pydantic v2配置
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    def create_directories(self):
        """创建必要的目录"""
        os.makedirs(os.path.abspath(self.DATA_DIR), exist_ok=True)
        os.makedirs(self.UPLOADS_PATH, exist_ok=True)
        os.makedirs(self.OUTPUTS_PATH, exist_ok=True)


# 创建全局设置实例
settings = Settings()

# 注意：不在模块导入时创建目录，避免阻塞导入
# 目录将在应用启动时通过lifespan创建


def get_settings() -> Settings:
    """获取全局Settings单例"""
    return settings
