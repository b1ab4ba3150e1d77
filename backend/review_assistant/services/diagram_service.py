"""
Mermaid 图表辅助：清理代码块标记、生成 Mermaid Ink 图片地址
"""
import base64
import re

DIAGRAM_FORMATS = ("png", "svg", "jpg")


def clean_mermaid_code(code: str) -> str:
    cleaned = (code or "").strip()
    cleaned = re.sub(r"^```mermaid\n?", "", cleaned, flags=re.IGNORECASE)
    cleaned = re.sub(r"^```\n?", "", cleaned)
    cleaned = re.sub(r"\n?```$", "", cleaned)
    return cleaned.strip()


def build_image_url(code: str, image_format: str, base_url: str = "https://mermaid.ink") -> str:
    """Mermaid 源码 base64 编码后拼到 /img/ 路径上"""
    encoded = base64.b64encode(code.encode("utf-8")).decode("ascii")
    return f"{base_url.rstrip('/')}/img/{encoded}?type={image_format}"
