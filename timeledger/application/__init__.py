"""Application services."""

from .tasks import TaskService, build_task_service, configure_task_service, get_task_service, reset_task_state

__all__ = [
    "TaskService",
    "build_task_service",
    "configure_task_service",
    "get_task_service",
    "reset_task_state",
]
