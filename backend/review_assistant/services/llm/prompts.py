"""
提示词模板

所有 AI 操作都是“模板 + 调用方上下文”的字符串拼接，
结构化输出的解析在 parsing.py 中完成。
"""
from typing import Dict, Optional
from pydantic import BaseModel, Field


class WritingOptions(BaseModel):
    """写作参数：只影响注入到提示词中的说明文字，不影响结果解析"""
    word_count: Optional[int] = Field(None, alias="wordCount", description="目标字数")
    detail_level: str = Field("detailed", alias="detailLevel", description="basic / detailed / comprehensive")
    citation_density: str = Field("medium", alias="citationDensity", description="low / medium / high")

    class Config:
        populate_by_name = True


LANGUAGE_NAMES: Dict[str, str] = {
    "zh": "中文",
    "en": "英文",
}

DETAIL_LEVEL_INSTRUCTIONS: Dict[str, str] = {
    "basic": "每个小节写 1-2 段，概述核心观点即可，避免展开细节。",
    "detailed": "每个小节写 3-4 段，说明主要方法、代表性研究及其结论。",
    "comprehensive": "每个小节写 5 段以上，系统比较不同研究的方法、数据、结论与局限，并给出批判性讨论。",
}

CITATION_DENSITY_INSTRUCTIONS: Dict[str, str] = {
    "low": "仅在关键论断处引用文献，每段最多 1 处引用。",
    "medium": "主要论断都需要引用支撑，每段 1-3 处引用。",
    "high": "尽可能为每个论断提供文献支撑，每段 3 处以上引用，可合并引用如 [1,2,3]。",
}

CITATION_FORMAT_INSTRUCTION = (
    "引用文献时使用方括号编号，编号对应“检索文献”列表中的序号，例如 [1] 或 [2,3]；"
    "不要编造列表中不存在的文献。"
)


def language_name(language: str) -> str:
    return LANGUAGE_NAMES.get(language, "中文")


def render_writing_requirements(options: Optional[WritingOptions]) -> str:
    """把写作参数转成固定的说明文字"""
    options = options or WritingOptions()
    lines = [
        DETAIL_LEVEL_INSTRUCTIONS.get(options.detail_level, DETAIL_LEVEL_INSTRUCTIONS["detailed"]),
        CITATION_DENSITY_INSTRUCTIONS.get(options.citation_density, CITATION_DENSITY_INSTRUCTIONS["medium"]),
        CITATION_FORMAT_INSTRUCTION,
    ]
    if options.word_count:
        lines.insert(0, f"目标字数约 {options.word_count} 字。")
    return "\n".join(f"- {line}" for line in lines)


# ========== 风格分析 / 写作指南 / 撰写计划 ==========

STYLE_ANALYSIS_SYSTEM_PROMPT = (
    "你是一个学术写作风格分析专家。请分析给定文献的写作特征，"
    "包括文章结构、语言风格、引用格式、论证逻辑等方面。"
)

STYLE_ANALYSIS_USER_TEMPLATE = "请分析以下学术文献的写作风格：\n\n{text}"

WRITING_GUIDE_SYSTEM_PROMPT = "你是一个学术写作指导专家。基于风格分析结果，生成详细的写作指南（Markdown格式）。"

WRITING_GUIDE_USER_TEMPLATE = "基于以下风格分析，生成一份详细的写作指南：\n\n{analysis}"

REVIEW_PLAN_SYSTEM_PROMPT = (
    "你是一个学术综述规划专家。生成详细的综述撰写计划（Markdown格式），"
    "包括章节大纲、关键词、预期字数等。"
)

REVIEW_PLAN_USER_TEMPLATE = "主题：{topic}\n\n写作指南：\n{guide}\n\n请生成详细的综述撰写计划。"


# ========== 综述写作（流式） ==========

WRITE_REVIEW_SYSTEM_TEMPLATE = (
    "你是一个专业的学术综述撰写专家。请严格按照提供的写作指南和撰写计划，"
    "用{language}撰写高质量的文献综述。"
)

WRITE_REVIEW_USER_TEMPLATE = (
    "写作指南：\n{guide}\n\n"
    "撰写计划：\n{plan}\n\n"
    "参考文献：\n{references}\n\n"
    "写作要求：\n{requirements}\n\n"
    "请开始撰写综述。"
)

WRITE_SECTION_SYSTEM_TEMPLATE = (
    "你是一个专业的学术综述撰写专家。请按照写作指南和撰写计划，"
    "用{language}只撰写指定的章节，不要重复已完成章节的内容。"
)

WRITE_SECTION_USER_TEMPLATE = (
    "写作指南：\n{guide}\n\n"
    "完整撰写计划：\n{plan}\n\n"
    "参考文献：\n{references}\n\n"
    "已完成的内容（节选，用于保持上下文连贯）：\n{previous}\n\n"
    "当前要撰写的章节：{title}\n"
    "章节要点：\n{section}\n\n"
    "写作要求：\n{requirements}\n\n"
    "请直接输出该章节的正文，以章节标题开头。"
)

PREVIOUS_CONTENT_LIMIT = 2000  # 只保留已完成内容的末尾部分


# ========== 文献筛选 ==========

FILTER_LITERATURE_SYSTEM_PROMPT = "你是一个学术文献筛选专家，擅长判断文献与研究主题的相关性。"

FILTER_LITERATURE_USER_TEMPLATE = (
    "研究主题：{topic}\n"
    "关键词：{keywords}\n"
    "{criteria}"
    "\n候选文献：\n{papers}\n\n"
    "请从中选出与研究主题最相关的最多 {max_results} 篇文献，"
    "按相关性从高到低排列，只输出文献序号（从 1 开始），用英文逗号分隔，"
    "例如：3,1,7。不要输出任何其他内容。"
)

SELECT_LITERATURE_SYSTEM_PROMPT = "你是一个学术文献筛选专家。只输出合法的 JSON。"

SELECT_LITERATURE_USER_TEMPLATE = (
    "请从以下 {count} 篇文献中筛选出最相关的 {top_n} 篇。\n\n"
    "{topic}\n"
    "{keywords}\n"
    "\n文献列表:\n{papers}\n\n"
    "筛选标准：\n"
    "1. 与项目主题和关键词的相关性\n"
    "2. 研究的创新性和重要性\n"
    "3. 发表时间（优先考虑近期文献）\n"
    "4. 作者权威性\n\n"
    "请返回JSON格式，包含筛选出的文献索引（从1开始）：\n"
    "{{\"selectedIndices\": [1, 3, 5], \"reason\": \"简要说明筛选理由\"}}"
)


# ========== 关键词 / 分类 / 检索式 ==========

KEYWORD_SUGGESTION_SYSTEM_PROMPT = "你是一个学术研究助手，擅长提炼检索关键词。只输出合法的 JSON。"

KEYWORD_SUGGESTION_USER_TEMPLATE = (
    "请基于以下信息推荐相关的研究关键词：\n\n"
    "用户提供的关键词：{user_keywords}\n"
    "{description}"
    "{context}\n\n"
    "请根据上述写作指南和撰写计划的内容，推荐10-15个高度相关的学术关键词，包括：\n"
    "1. 核心概念的同义词和相关术语\n"
    "2. 相关的研究方法\n"
    "3. 相关的应用领域\n"
    "4. 相关的技术和工具\n"
    "5. 与写作指南和计划主题相关的关键词\n\n"
    "请按以下JSON格式返回（不要包含markdown代码块标记）：\n"
    "{{\"keywords\": [{{\"keyword\": \"关键词1\", \"category\": \"方法类/应用类/理论类/数据类\", \"relevance\": \"相关性说明\"}}]}}"
)

KEYWORD_CONTEXT_LIMIT = 2000  # 写作指南和撰写计划各自截断长度

CLASSIFY_LITERATURE_SYSTEM_PROMPT = "你是一个学术文献分类专家。只输出合法的 JSON。"

CLASSIFY_LITERATURE_USER_TEMPLATE = (
    "项目关键词：{keywords}\n\n"
    "待分类文献：\n{papers}\n\n"
    "请将每篇文献归入 method（方法）、application（应用）、theory（理论）、data（数据）之一，"
    "给出 0-1 的相关度以及匹配到的关键词，输出 JSON：\n"
    "{{\"classifications\": [{{\"id\": 文献ID, \"category\": \"method\", \"relevance\": 0.8, \"keywords\": [\"...\"]}}]}}"
)

SEARCH_QUERY_SYSTEM_PROMPT = "你是一个文献检索专家，擅长构造布尔检索式。"

SEARCH_QUERY_USER_TEMPLATE = (
    "数据库：{source}\n"
    "核心关键词：{primary}\n"
    "相关关键词：{secondary}\n\n"
    "{syntax}\n"
    "只输出检索式本身，不要任何解释。"
)

SEARCH_QUERY_SYNTAX: Dict[str, str] = {
    "arxiv": "请构造 arXiv API 检索式，可使用 ti:、abs:、all: 字段以及 AND / OR / ANDNOT。",
    "pubmed": "请构造 PubMed 检索式，可使用 [Title/Abstract]、[MeSH Terms] 字段以及 AND / OR / NOT。",
}


# ========== 图表 / 翻译 ==========

DIAGRAM_SYSTEM_PROMPT = "你是一个科研绘图专家，精通 Mermaid 语法。只输出 Mermaid 代码。"

DIAGRAM_TYPE_INSTRUCTIONS: Dict[str, str] = {
    "mechanism": "请用 Mermaid graph TD 语法绘制机制图，展示各要素之间的作用关系，连线上标注作用方式。",
    "flowchart": "请用 Mermaid flowchart TD 语法绘制流程图，展示步骤和判断分支。",
    "mindmap": "请用 Mermaid mindmap 语法绘制思维导图，根节点为核心主题，逐层展开子主题。",
}

DIAGRAM_USER_TEMPLATE = "{instruction}\n\n内容描述：\n{description}"

TRANSLATE_SYSTEM_PROMPT = "你是一个专业的学术翻译，擅长把英文论文标题和摘要翻译成准确流畅的中文。"

TRANSLATE_USER_TEMPLATE = (
    "请将以下内容翻译成中文，并严格按下面格式输出：\n"
    "标题：<中文标题>\n"
    "摘要：<中文摘要>\n\n"
    "Title: {title}\n"
    "Abstract: {abstract}"
)


# ========== JSON 修正重试 ==========

JSON_CORRECTION_PROMPT = (
    "你上一次的回复不是符合要求的 JSON，解析错误：{error}\n"
    "请只输出修正后的合法 JSON，不要包含任何解释或 Markdown 代码块。"
)
