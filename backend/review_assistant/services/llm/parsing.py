"""
LLM 响应解析工具
"""
import json
import re
from typing import List, Type, TypeVar

from pydantic import BaseModel, ValidationError

from review_assistant.services.llm.errors import UpstreamFormatError

T = TypeVar("T", bound=BaseModel)

_FENCED_BLOCK = re.compile(r"```[a-zA-Z]*[ \t]*\n?(.*?)\n?```", re.DOTALL)
_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def strip_code_fences(text: str) -> str:
    """
    去掉 Markdown 代码块标记（```json / ```mermaid / ```）

    响应中包含代码块时取第一个代码块的内容，否则只去掉首尾残留的标记
    """
    if not text:
        return ""
    match = _FENCED_BLOCK.search(text)
    if match:
        return match.group(1).strip()
    cleaned = re.sub(r"^```[a-zA-Z]*\s*", "", text.strip())
    cleaned = re.sub(r"\s*```$", "", cleaned)
    return cleaned.strip()


def parse_json_response(text: str, schema: Type[T]) -> T:
    """
    去掉代码块标记后按 schema 校验 JSON

    解析或校验失败抛出 UpstreamFormatError
    """
    cleaned = strip_code_fences(text)
    try:
        data = json.loads(cleaned)
    except (TypeError, ValueError) as e:
        raise UpstreamFormatError(f"AI响应格式错误: 无法解析JSON ({e})", raw=text) from e
    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise UpstreamFormatError(f"AI响应格式错误: {e.error_count()} 个字段不符合要求", raw=text) from e


def parse_index_list(text: str, count: int, limit: int = None) -> List[int]:
    """
    解析逗号分隔的 1-based 序号列表，返回 0-based 下标

    - 每一项取开头的整数，取不到的忽略
    - 越界的序号忽略
    - 重复的序号只保留第一次出现
    - 保持模型给出的顺序，最多返回 limit 个
    """
    indices: List[int] = []
    for token in strip_code_fences(text).split(","):
        match = _LEADING_INT.match(token)
        if not match:
            continue
        if len(match.group(1).lstrip("+-0")) > len(str(count)):
            continue
        number = int(match.group(1))
        if number < 1 or number > count:
            continue
        index = number - 1
        if index in indices:
            continue
        indices.append(index)
        if limit is not None and len(indices) >= limit:
            break
    return indices


_TRANSLATED_TITLE = re.compile(r"标题[：:]\s*(.+?)(?=\n|$)")
_TRANSLATED_ABSTRACT = re.compile(r"摘要[：:]\s*(.+)", re.DOTALL)


def parse_translation(text: str) -> dict:
    """
    解析“标题：/摘要：”格式的翻译结果

    找不到标题时取第一行，找不到摘要时返回全文
    """
    text = text or ""
    title_match = _TRANSLATED_TITLE.search(text)
    abstract_match = _TRANSLATED_ABSTRACT.search(text)
    return {
        "title": title_match.group(1).strip() if title_match else text.split("\n")[0],
        "abstract": abstract_match.group(1).strip() if abstract_match else text,
    }
