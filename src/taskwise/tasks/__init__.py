from .task_models import MutationOutcome, Task, count_pending
from .task_operations import TASKS_STORAGE_KEY, TaskOperationsService
from .task_state import Subscription, TaskStateStore

__all__ = [
    "MutationOutcome",
    "Subscription",
    "TASKS_STORAGE_KEY",
    "Task",
    "TaskOperationsService",
    "TaskStateStore",
    "count_pending",
]
