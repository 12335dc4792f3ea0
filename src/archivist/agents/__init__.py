"""Knowledge agents and the task queue that runs them."""

from .archivist import register_archivist
from .tasks import TaskQueue, create_suggestion

__all__ = ["TaskQueue", "create_suggestion", "register_archivist"]
