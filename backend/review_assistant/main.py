"""
FastAPI主应用
AI 辅助文献综述写作系统后端
"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
import logging
import uvicorn

from review_assistant.config import settings
from review_assistant.database import init_db
from review_assistant.api import (
    projects_router,
    keywords_router,
    literature_router,
    search_router,
    analysis_router,
    writing_router,
    templates_router,
    settings_router,
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    应用生命周期管理
    启动时初始化数据库，关闭时清理资源
    """
    print("🚀 启动文献综述写作助手...")
    settings.create_directories()
    print(f"✓ 上传目录: {settings.UPLOADS_DIR}  导出目录: {settings.OUTPUTS_DIR}")

    # 建表并写入内置模板与学术用语
    init_db()
    print(f"✓ 数据库就绪: {settings.DATABASE_URL}")

    yield

    print("👋 文献综述写作助手已停止")


# 创建FastAPI应用实例
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="基于LLM的文献综述写作助手：风格分析、文献检索、大纲生成与流式写作",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan
)

# 全局 logger
logger = logging.getLogger("review_assistant")

# 配置CORS
logger.info(f"配置 CORS，允许来源: {settings.CORS_ORIGINS}")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# 根路由
@app.get("/")
async def root():
    """系统首页"""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/api/docs",
        "health": "/api/health",
    }


# 健康检查
@app.get("/api/health")
async def health_check(request: Request):
    """健康检查端点"""
    logger.info(
        "[health_check] from %s %s",
        request.client.host if request.client else "-",
        request.headers.get("user-agent", "-"),
    )
    return {
        "status": "healthy",
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION
    }


# 注册API路由
for router in (
    projects_router,
    keywords_router,
    literature_router,
    search_router,
    analysis_router,
    writing_router,
    templates_router,
    settings_router,
):
    app.include_router(router)


# 异常处理：统一返回 {"success": false, "error": "..."}
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """HTTP 错误（400 / 404 / 上游失败转换的 500）"""
    if exc.status_code >= 500:
        logger.warning("[http_error] path=%s status=%s detail=%s", request.url.path, exc.status_code, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """请求参数校验失败按 400 处理"""
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(loc) for loc in first.get("loc", ()) if loc != "body")
    message = f"请求参数错误: {field} {first.get('msg', '')}".strip()
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": message},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """全局异常处理器"""
    logger.exception(
        "[global_exception] path=%s method=%s error=%s",
        request.url.path,
        request.method,
        exc,
    )
    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "error": "服务器内部错误",
        }
    )


if __name__ == "__main__":
    # 直接运行此文件时使用uvicorn启动
    uvicorn.run(
        "review_assistant.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )
