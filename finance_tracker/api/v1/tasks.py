"""Task board endpoints"""

import uuid

from fastapi import APIRouter, Depends

from finance_tracker.api.dependencies import get_store
from finance_tracker.api.v1.schemas import TaskBoardOut, TaskMove, TaskOut
from finance_tracker.domain.board import group_tasks
from finance_tracker.infrastructure.database.store import RecordStore

router = APIRouter()


@router.get("/tasks/board", response_model=TaskBoardOut)
def get_board(store: RecordStore = Depends(get_store)):
    """Tasks in their status columns, each ordered top to bottom"""
    return TaskBoardOut.model_validate(group_tasks(store.load_all().tasks))


@router.post("/tasks/{task_id}/move", response_model=TaskOut)
def move_task(task_id: uuid.UUID, body: TaskMove, store: RecordStore = Depends(get_store)):
    """Place a task in a column at the given position"""
    return TaskOut.model_validate(store.move_task(task_id, body.status, body.sort_order))
