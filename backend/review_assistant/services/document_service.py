import re
import logging
from typing import Optional

from docx import Document
from pypdf import PdfReader

logger = logging.getLogger(__name__)


SUPPORTED_FILE_TYPES = ("pdf", "docx")


class ExtractionError(Exception):
    """文档文本抽取失败"""
    pass


class DocumentService:
    """
    参考论文文本抽取服务：
    1. PDF（pypdf）
    2. DOCX（python-docx）
    只返回纯文本，不保留版面和结构信息
    """

    def extract_text(self, file_path: str, file_type: str) -> str:
        """
        按声明的类型抽取文本

        失败时抛出 ExtractionError，由调用方决定是否视为“无文本”
        """
        file_type = (file_type or "").lower()
        if file_type == "pdf":
            return self.extract_pdf_text(file_path)
        if file_type == "docx":
            return self.extract_docx_text(file_path)
        raise ExtractionError(f"不支持的文件类型: {file_type}")

    def extract_pdf_text(self, file_path: str) -> str:
        """
        从 PDF 文件中提取所有文本
        """
        text = ""
        try:
            reader = PdfReader(file_path)
            for page in reader.pages:
                page_text = page.extract_text()
                if page_text:
                    text += page_text + "\n"
        except Exception as e:
            logger.error(f"Error extracting text from PDF {file_path}: {e}")
            raise ExtractionError(f"PDF解析失败: {e}") from e

        # 清理常见的 PDF 乱码/伪影
        # 例如 /gid00030/gid00035...
        text = re.sub(r'/gid\d+', '', text)
        return text.strip()

    def extract_docx_text(self, file_path: str) -> str:
        """
        从 DOCX 文件中提取段落和表格文本
        """
        try:
            document = Document(file_path)
        except Exception as e:
            logger.error(f"Error opening DOCX {file_path}: {e}")
            raise ExtractionError(f"DOCX解析失败: {e}") from e

        lines = [p.text for p in document.paragraphs if p.text.strip()]
        for table in document.tables:
            for row in table.rows:
                cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                if cells:
                    lines.append(" | ".join(cells))
        return "\n".join(lines).strip()


def detect_file_type(filename: str, content_type: Optional[str] = None) -> Optional[str]:
    """
    根据 MIME 类型或扩展名判断文件类型，返回 'pdf' / 'docx' / None
    """
    content_type = (content_type or "").lower()
    if content_type == "application/pdf":
        return "pdf"
    if content_type == "application/vnd.openxmlformats-officedocument.wordprocessingml.document":
        return "docx"

    name = (filename or "").lower()
    if name.endswith(".pdf"):
        return "pdf"
    if name.endswith(".docx"):
        return "docx"
    return None


_document_service = None


def get_document_service() -> DocumentService:
    global _document_service
    if _document_service is None:
        _document_service = DocumentService()
    return _document_service
