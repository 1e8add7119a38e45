"""Task board columns and ordering"""

from typing import Dict, List, Sequence

from finance_tracker.domain.models import TASK_STATUSES, Task


def group_tasks(tasks: Sequence[Task]) -> Dict[str, List[Task]]:
    """Tasks per status column, each column ordered by sort_order"""
    columns: Dict[str, List[Task]] = {status: [] for status in TASK_STATUSES}
    for task in tasks:
        columns[task.status].append(task)

    for column in columns.values():
        column.sort(key=lambda t: t.sort_order)

    return columns
