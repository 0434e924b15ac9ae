from typing import List

from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from .. import store
from ..database import get_db
from ..schemas.task import DeleteResponse, ReorderRequest, Task as TaskSchema

router = APIRouter()


@router.get("/tasks", response_model=List[TaskSchema])
def get_tasks(db: Session = Depends(get_db)):
    """Return the whole collection in stored order."""
    return store.list_all(db)


@router.post("/tasks", response_model=TaskSchema, status_code=status.HTTP_201_CREATED)
def create_task(task: TaskSchema, db: Session = Depends(get_db)):
    """Append a task exactly as submitted (no id uniqueness check)."""
    return store.append(db, task)


@router.post("/tasks/reorder", response_model=List[TaskSchema])
def reorder_tasks(move: ReorderRequest, db: Session = Depends(get_db)):
    """Persist a drag-and-drop move and return the new order."""
    return store.reorder(db, move.dragged_id, move.target_id)


@router.put("/tasks/{task_id}", response_model=TaskSchema)
def update_task(task_id: int, task: TaskSchema, db: Session = Depends(get_db)):
    """Replace the stored task under ``task_id`` with the submitted one.

    An unknown id is not an error: nothing is written and the submitted task
    is echoed back.
    """
    return store.replace(db, task_id, task)


@router.delete("/tasks/{task_id}", response_model=DeleteResponse)
def delete_task(task_id: int, db: Session = Depends(get_db)):
    """Delete every task stored under ``task_id``; always succeeds."""
    store.remove(db, task_id)
    return DeleteResponse()
