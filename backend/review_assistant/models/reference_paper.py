"""
上传的参考论文（写作风格样本）
"""
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey
from datetime import datetime

from review_assistant.database import Base


class ReferencePaper(Base):
    """参考论文模型"""
    __tablename__ = "reference_papers"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)

    # 文件信息
    filename = Column(String(500), nullable=False)
    file_path = Column(String(1000), nullable=False)
    file_type = Column(String(20), nullable=False)  # pdf, docx

    # 抽取出的纯文本，抽取失败时为空
    extracted_text = Column(Text)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    def to_dict(self, include_text=False):
        """转换为字典"""
        data = {
            "id": self.id,
            "project_id": self.project_id,
            "filename": self.filename,
            "file_type": self.file_type,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
        # 全文可能很大，按需包含
        if include_text:
            data["file_path"] = self.file_path
            data["extracted_text"] = self.extracted_text
        return data

    def __repr__(self):
        return f"<ReferencePaper(id={self.id}, filename='{self.filename}')>"
