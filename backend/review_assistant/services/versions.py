"""
“最新一条记录生效”的版本读写

风格分析、大纲、草稿都按追加日志保存，当前版本一律是
created_at 最新（同一时间取 id 最大）的那一行。
"""
from typing import Optional, Type, TypeVar

from sqlalchemy.orm import Session

T = TypeVar("T")


def latest_for_project(db: Session, model: Type[T], project_id: int, **filters) -> Optional[T]:
    """获取某项目下某张表的当前版本，可附加等值过滤条件（如 language）"""
    query = db.query(model).filter(model.project_id == project_id)
    for column, value in filters.items():
        query = query.filter(getattr(model, column) == value)
    return query.order_by(model.created_at.desc(), model.id.desc()).first()


def append_version(db: Session, model: Type[T], **values) -> T:
    """追加一行新版本（version = 1），重新生成时使用"""
    row = model(version=1, **values)
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def save_in_place(db: Session, model: Type[T], project_id: int, content_field: str, content: str, **filters) -> T:
    """
    编辑保存：当前版本存在时原地更新内容并 version + 1，
    不存在时插入 version = 1 的第一行
    """
    current = latest_for_project(db, model, project_id, **filters)
    if current is None:
        current = model(project_id=project_id, version=1, **{content_field: content}, **filters)
        db.add(current)
    else:
        setattr(current, content_field, content)
        current.version = (current.version or 0) + 1
    db.commit()
    db.refresh(current)
    return current
