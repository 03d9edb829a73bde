from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from taskfilter.domain.entities import StatusConfig, TaskRecord


class StatusManager:
    """Classifies task statuses as completed or not.

    ``is_task_completed`` is the resolver handed to ``PropertyExtractor`` for
    the ``status.isCompleted`` property.
    """

    def __init__(self, statuses: Iterable[StatusConfig]) -> None:
        self._statuses = sorted(statuses, key=lambda status: status.order)
        self._by_value = {status.value: status for status in self._statuses}

    @classmethod
    def from_completed_values(cls, completed: Iterable[str]) -> StatusManager:
        return cls(
            StatusConfig(value=value, label=value, is_completed=True, order=index)
            for index, value in enumerate(completed)
        )

    @property
    def statuses(self) -> list[StatusConfig]:
        return list(self._statuses)

    def get_completed_statuses(self) -> list[str]:
        return [status.value for status in self._statuses if status.is_completed]

    def is_completed_status(self, value: str | None) -> bool:
        if not value:
            return False
        status = self._by_value.get(value)
        return bool(status and status.is_completed)

    def is_task_completed(self, task: TaskRecord, on: date | None = None) -> bool:
        # recurring tasks complete per instance, not through their status
        if task.recurrence:
            target = (on or date.today()).isoformat()
            return target in task.complete_instances
        return self.is_completed_status(task.status)
