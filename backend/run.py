"""
启动文献综述写作助手后端
"""
import uvicorn
from review_assistant.config import settings


def print_banner():
    base = f"http://{settings.HOST}:{settings.PORT}"
    lines = [
        "文献综述写作助手 - 后端服务",
        f"服务地址:   {base}",
        f"接口文档:   {base}/api/docs",
        f"数据库:     {settings.DATABASE_URL}",
        f"默认模型:   {settings.OPENAI_MODEL}",
    ]
    width = max(len(line) for line in lines) + 4
    print("=" * width)
    for line in lines:
        print(f"  {line}")
    print("=" * width)


if __name__ == "__main__":
    print_banner()
    uvicorn.run(
        "review_assistant.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="info",
    )
