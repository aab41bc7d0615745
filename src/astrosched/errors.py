"""Errors raised by the task store."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from astrosched.models import Task


class SchedulerError(Exception):
    """Base class for all scheduler errors."""


class InvalidTaskError(SchedulerError, ValueError):
    """A task (or a priority filter) breaks a field rule."""


class OverlapError(SchedulerError):
    """A task's time window intersects one or more stored tasks."""

    def __init__(self, task: Task, conflicts: list[Task]) -> None:
        self.task = task
        self.conflicts = conflicts
        names = ", ".join(repr(c.description) for c in conflicts)
        super().__init__(f"Task {task.description!r} overlaps with existing tasks: {names}")


class TaskNotFoundError(SchedulerError, LookupError):
    """No stored task matches the given reference."""

    def __init__(self, ref: object, message: str | None = None) -> None:
        self.ref = ref
        super().__init__(message or f"Task not found: {_describe_ref(ref)}")


class EditError(SchedulerError):
    """Base class for edit-specific failures."""


class OldTaskNotFoundError(EditError, TaskNotFoundError):
    """The task to edit is not in the store."""

    def __init__(self, ref: object) -> None:
        super().__init__(ref, f"Task to edit not found: {_describe_ref(ref)}")


def _describe_ref(ref: object) -> str:
    description = getattr(ref, "description", None)
    if description is not None:
        return repr(description)
    if isinstance(ref, int):
        return f"#{ref}"
    return repr(ref)
