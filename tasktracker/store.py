"""Server-side task store.

Every mutation is one transaction taken under a process-wide write lock, so
overlapping requests apply one after the other instead of racing on the
collection. Lookups go through the indexed ``id`` column.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Iterable, List, Optional

from sqlalchemy import func
from sqlmodel import Session, select

from .models import Task as TaskModel
from .schemas.task import Task as TaskSchema

logger = logging.getLogger(__name__)

_write_lock = threading.Lock()


@contextmanager
def _transaction(session: Session):
    with _write_lock:
        try:
            yield
            session.commit()
        except Exception:
            session.rollback()
            raise


def _to_schema(row: TaskModel) -> TaskSchema:
    return TaskSchema(
        id=row.id,
        text=row.text,
        completed=row.completed,
        priority=row.priority,
        due_date=row.due_date,
        tags=list(row.tags or []),
    )


def _apply(row: TaskModel, task: TaskSchema) -> None:
    row.id = task.id
    row.text = task.text
    row.completed = task.completed
    row.priority = task.priority.value
    row.due_date = task.due_date or ""
    row.tags = list(task.tags)


def _ordered_rows(session: Session, task_id: Optional[int] = None) -> List[TaskModel]:
    query = select(TaskModel)
    if task_id is not None:
        query = query.where(TaskModel.id == task_id)
    return list(session.exec(query.order_by(TaskModel.position, TaskModel.pk)).all())


def _next_position(session: Session) -> int:
    current = session.exec(select(func.max(TaskModel.position))).first()
    return 0 if current is None else current + 1


def list_all(session: Session) -> List[TaskSchema]:
    """Return the whole collection in stored order."""
    return [_to_schema(row) for row in _ordered_rows(session)]


def append(session: Session, task: TaskSchema) -> TaskSchema:
    """Store ``task`` at the end of the collection, exactly as submitted."""
    with _transaction(session):
        row = TaskModel(id=task.id, text=task.text, position=_next_position(session))
        _apply(row, task)
        session.add(row)
    logger.info("Appended task %s", task.id)
    return task


def replace(session: Session, task_id: int, task: TaskSchema) -> TaskSchema:
    """Overwrite the first task stored under ``task_id``.

    A missing id leaves the collection untouched; the submitted task is
    returned either way.
    """
    with _transaction(session):
        rows = _ordered_rows(session, task_id)
        if rows:
            _apply(rows[0], task)
            session.add(rows[0])
    if rows:
        logger.info("Replaced task %s", task_id)
    else:
        logger.warning("Replace of task %s matched nothing", task_id)
    return task


def remove(session: Session, task_id: int) -> int:
    """Delete every task stored under ``task_id``; return how many went."""
    with _transaction(session):
        rows = _ordered_rows(session, task_id)
        for row in rows:
            session.delete(row)
    if rows:
        logger.info("Removed %d task(s) with id %s", len(rows), task_id)
    else:
        logger.warning("Remove of task %s matched nothing", task_id)
    return len(rows)


def reorder(session: Session, dragged_id: int, target_id: int) -> List[TaskSchema]:
    """Move the dragged task to the slot held by the target task."""
    with _transaction(session):
        rows = _ordered_rows(session)
        ids = [row.id for row in rows]
        if dragged_id != target_id and dragged_id in ids and target_id in ids:
            dragged_index = ids.index(dragged_id)
            target_index = ids.index(target_id)
            rows.insert(target_index, rows.pop(dragged_index))
            for position, row in enumerate(rows):
                if row.position != position:
                    row.position = position
                    session.add(row)
            logger.info("Moved task %s to index %d", dragged_id, target_index)
    return [_to_schema(row) for row in rows]


def export_all(session: Session) -> List[dict]:
    return [task.to_wire() for task in list_all(session)]


def import_all(session: Session, data: Iterable[dict]) -> int:
    """Replace the whole collection with ``data`` (wire-format dicts)."""
    tasks = [TaskSchema.model_validate(item) for item in data]
    with _transaction(session):
        for row in _ordered_rows(session):
            session.delete(row)
        session.flush()
        for position, task in enumerate(tasks):
            row = TaskModel(id=task.id, text=task.text, position=position)
            _apply(row, task)
            session.add(row)
    logger.info("Imported %d tasks", len(tasks))
    return len(tasks)
