"""Task queue for agent capabilities.

Handlers are registered per queue under "agent:capability" keys. Tasks are
submitted, then run explicitly; running a task never raises into the caller,
failures are recorded on the task instead.
"""

import logging
import uuid
from datetime import date, datetime, timedelta
from typing import Any, Callable

from ..models import AgentTask, Suggestion, TaskResult

logger = logging.getLogger(__name__)

TaskHandler = Callable[[AgentTask], TaskResult]


def handler_key(agent_id: str, capability_id: str) -> str:
    return f"{agent_id}:{capability_id}"


def create_suggestion(
    agent_id: str,
    type: str,
    title: str,
    description: str,
    payload: dict[str, Any] | None = None,
    priority: int = 3,
) -> Suggestion:
    return Suggestion(
        id=str(uuid.uuid4()),
        agent_id=agent_id,
        type=type,
        title=title,
        description=description,
        payload=payload or {},
        priority=priority,
    )


class TaskQueue:
    """Registry, task list and daily run budget for agents."""

    def __init__(
        self,
        daily_budget: int = 50,
        today: Callable[[], date] = date.today,
        now: Callable[[], datetime] = datetime.now,
    ):
        self.daily_budget = daily_budget
        self._today = today
        self._now = now
        self._handlers: dict[str, TaskHandler] = {}
        self._tasks: dict[str, AgentTask] = {}
        self._suggestions: list[Suggestion] = []
        self._used = 0
        self._used_on = today()

    def register(self, agent_id: str, capability_id: str, handler: TaskHandler) -> None:
        self._handlers[handler_key(agent_id, capability_id)] = handler

    def capabilities(self) -> list[str]:
        return sorted(self._handlers)

    def _roll_budget(self) -> None:
        today = self._today()
        if today != self._used_on:
            self._used = 0
            self._used_on = today

    def has_budget(self, calls: int = 1) -> bool:
        self._roll_budget()
        return self._used + calls <= self.daily_budget

    def use_budget(self, calls: int = 1) -> bool:
        if not self.has_budget(calls):
            return False
        self._used += calls
        return True

    @property
    def budget_used(self) -> int:
        self._roll_budget()
        return self._used

    def submit(self, agent_id: str, capability_id: str, input: dict[str, Any] | None = None) -> AgentTask:
        task = AgentTask(
            id=str(uuid.uuid4()),
            agent_id=agent_id,
            capability_id=capability_id,
            input=input or {},
            created_at=self._now(),
        )
        self._tasks[task.id] = task
        return task

    def get(self, task_id: str) -> AgentTask | None:
        return self._tasks.get(task_id)

    def tasks(self, status: str | None = None) -> list[AgentTask]:
        return [t for t in self._tasks.values() if status is None or t.status == status]

    def suggestions(self, status: str | None = None) -> list[Suggestion]:
        return [s for s in self._suggestions if status is None or s.status == status]

    def _fail(self, task: AgentTask, error: str) -> None:
        task.status = "failed"
        task.error = error
        task.completed_at = self._now()
        logger.warning(f"Task {task.agent_id}:{task.capability_id} failed: {error}")

    def run(self, task_id: str) -> TaskResult | None:
        """Run one task. Returns its result, or None if it did not complete."""
        task = self._tasks.get(task_id)
        if task is None or task.status == "running":
            return None

        key = handler_key(task.agent_id, task.capability_id)
        handler = self._handlers.get(key)
        if handler is None:
            self._fail(task, f"No handler registered for {key}")
            return None

        if not self.has_budget():
            self._fail(task, "Daily budget exceeded")
            return None

        task.status = "running"
        task.progress = 0
        task.started_at = task.started_at or self._now()
        try:
            result = handler(task)
        except Exception as e:
            self._fail(task, str(e) or type(e).__name__)
            return None

        self.use_budget()
        task.status = "completed"
        task.progress = 100
        task.result = result
        task.completed_at = self._now()
        self._suggestions.extend(result.suggestions)
        logger.info(f"Task {key} completed: {result.summary}")
        return result

    def run_pending(self) -> list[TaskResult]:
        """Run every pending task in submission order."""
        results = []
        for task in self.tasks(status="pending"):
            result = self.run(task.id)
            if result is not None:
                results.append(result)
        return results

    def update_suggestion(self, suggestion_id: str, status: str) -> Suggestion | None:
        """Mark a suggestion accepted or dismissed."""
        for suggestion in self._suggestions:
            if suggestion.id == suggestion_id:
                suggestion.status = status
                return suggestion
        return None

    def tasks_for_agent(self, agent_id: str) -> list[AgentTask]:
        """An agent's tasks, newest first."""
        found = [t for t in self._tasks.values() if t.agent_id == agent_id]
        return sorted(found, key=lambda t: t.created_at, reverse=True)

    def suggestions_for_agent(self, agent_id: str) -> list[Suggestion]:
        """An agent's suggestions, newest first."""
        found = [s for s in self._suggestions if s.agent_id == agent_id]
        return sorted(found, key=lambda s: s.created_at, reverse=True)

    def clear_old_suggestions(self, max_age_days: int = 30) -> int:
        """Drop reviewed suggestions older than max_age_days.

        Pending suggestions are kept regardless of age. Returns the number
        removed.
        """
        cutoff = self._now() - timedelta(days=max_age_days)
        kept = [s for s in self._suggestions if s.created_at > cutoff or s.status == "pending"]
        removed = len(self._suggestions) - len(kept)
        self._suggestions = kept
        if removed:
            logger.info(f"Cleared {removed} old suggestion(s)")
        return removed

    def clear_finished_tasks(self, max_age_days: int = 30) -> int:
        """Drop completed or failed tasks that finished before the cutoff."""
        cutoff = self._now() - timedelta(days=max_age_days)
        old = [
            task_id for task_id, t in self._tasks.items()
            if t.status in ("completed", "failed") and t.completed_at is not None and t.completed_at <= cutoff
        ]
        for task_id in old:
            del self._tasks[task_id]
        if old:
            logger.info(f"Cleared {len(old)} finished task(s)")
        return len(old)
