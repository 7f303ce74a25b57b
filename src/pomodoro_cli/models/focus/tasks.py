"""Session task list worked through during focus intervals."""

from __future__ import annotations

import uuid
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field

from .scheduler import Handle, Scheduler


def _new_task_id() -> str:
    return uuid.uuid4().hex


@dataclass
class Task:
    """A single task entered for the current session."""

    text: str
    id: str = field(default_factory=_new_task_id)
    completed: bool = False


class TaskList:
    """Ordered task collection. Insertion order is display order.

    With ``auto_delete_completed`` enabled, a task that becomes completed
    stays visible for ``grace_ms`` and is then removed. Without a scheduler
    the removal happens immediately.
    """

    def __init__(
        self,
        scheduler: Scheduler | None = None,
        *,
        auto_delete_completed: bool = False,
        grace_ms: int = 1500,
        id_factory: Callable[[], str] = _new_task_id,
    ):
        self._scheduler = scheduler
        self._tasks: list[Task] = []
        self._removals: dict[str, Handle] = {}
        self._id_factory = id_factory
        self.auto_delete_completed = auto_delete_completed
        self.grace_ms = grace_ms

    def __iter__(self) -> Iterator[Task]:
        return iter(list(self._tasks))

    def __len__(self) -> int:
        return len(self._tasks)

    @property
    def tasks(self) -> list[Task]:
        """Snapshot of the tasks in display order."""
        return list(self._tasks)

    @property
    def incomplete_count(self) -> int:
        return sum(1 for task in self._tasks if not task.completed)

    def get(self, task_id: str) -> Task | None:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def is_pending_removal(self, task_id: str) -> bool:
        return task_id in self._removals

    def add(self, text: str) -> Task | None:
        """Append a task. Blank text is ignored and returns ``None``."""
        text = text.strip()
        if not text:
            return None
        task = Task(text=text, id=self._id_factory())
        self._tasks.append(task)
        return task

    def toggle(self, task_id: str) -> Task | None:
        """Flip completion of a task. Unknown ids are ignored."""
        task = self.get(task_id)
        if task is None:
            return None
        task.completed = not task.completed
        if task.completed:
            self._completed(task)
        else:
            self._cancel_removal(task.id)
        return task

    def delete(self, task_id: str) -> bool:
        """Remove a task. Returns ``False`` if the id is unknown."""
        task = self.get(task_id)
        if task is None:
            return False
        self._cancel_removal(task_id)
        self._tasks.remove(task)
        return True

    def first_incomplete(self) -> Task | None:
        return next((task for task in self._tasks if not task.completed), None)

    def first_completed(self) -> Task | None:
        return next((task for task in self._tasks if task.completed), None)

    def complete_first_incomplete(self) -> Task | None:
        """Mark the first incomplete task completed, if there is one."""
        task = self.first_incomplete()
        if task is None:
            return None
        task.completed = True
        self._completed(task)
        return task

    def _completed(self, task: Task) -> None:
        if not self.auto_delete_completed:
            return
        if self._scheduler is None or self.grace_ms == 0:
            self.delete(task.id)
            return
        self._cancel_removal(task.id)
        self._removals[task.id] = self._scheduler.schedule(
            lambda: self._remove_completed(task.id), self.grace_ms, repeat=False
        )

    def _remove_completed(self, task_id: str) -> None:
        self._removals.pop(task_id, None)
        task = self.get(task_id)
        if task is not None and task.completed:
            self._tasks.remove(task)

    def _cancel_removal(self, task_id: str) -> None:
        handle = self._removals.pop(task_id, None)
        if handle is not None and self._scheduler is not None:
            self._scheduler.cancel(handle)
