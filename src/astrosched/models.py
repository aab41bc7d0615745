"""Task model for the schedule."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from typing import Any, Literal

from astrosched.errors import InvalidTaskError

MIN_PRIORITY = 1
MAX_PRIORITY = 5


def check_priority(priority: int) -> int:
    """Return ``priority`` if it is an int in 1-5, else raise InvalidTaskError."""
    if isinstance(priority, bool) or not isinstance(priority, int):
        raise InvalidTaskError(f"Priority must be an integer, got {priority!r}")
    if not MIN_PRIORITY <= priority <= MAX_PRIORITY:
        raise InvalidTaskError(
            f"Priority must be between {MIN_PRIORITY} and {MAX_PRIORITY}, got {priority}"
        )
    return priority


@dataclass(eq=False)
class Task:
    """A scheduled task occupying the half-open window [start, end).

    Equality is identity: two tasks with the same fields are still
    different entries in a store.
    """

    description: str
    start: datetime
    end: datetime
    priority: int = 3
    completed: bool = False
    id: int | None = field(default=None, compare=False)

    @property
    def duration(self) -> timedelta:
        """Length of the task window."""
        return self.end - self.start

    @property
    def status(self) -> Literal["pending", "completed"]:
        return "completed" if self.completed else "pending"

    def validate(self) -> None:
        """Raise InvalidTaskError for the first broken field rule."""
        if not isinstance(self.description, str) or not self.description.strip():
            raise InvalidTaskError("Task description must not be empty")
        if not isinstance(self.start, datetime) or not isinstance(self.end, datetime):
            raise InvalidTaskError("Task start and end must be datetimes")
        # The schedule runs on one naive local clock
        if self.start.tzinfo is not None or self.end.tzinfo is not None:
            raise InvalidTaskError("Task start and end must be naive local times")
        if self.start >= self.end:
            raise InvalidTaskError(
                f"Task start ({self.start}) must be before its end ({self.end})"
            )
        check_priority(self.priority)

    def overlaps(self, other: Task) -> bool:
        """Check whether two task windows intersect (touching ends do not)."""
        return self.start < other.end and other.start < self.end

    def complete(self) -> None:
        """Mark the task as completed."""
        self.completed = True

    def replace(self, **changes: Any) -> Task:
        """Return an unsaved copy with ``changes`` applied.

        The copy has no id and is pending unless told otherwise.
        """
        changes.setdefault("id", None)
        changes.setdefault("completed", False)
        return replace(self, **changes)

    def matches_description(self, description: str) -> bool:
        """Case-insensitive description match, ignoring surrounding whitespace."""
        return self.description.strip().casefold() == description.strip().casefold()

    def __str__(self) -> str:
        return (
            f"Task: {self.description} | Start: {self.start} | End: {self.end} "
            f"| Priority: {self.priority} | Completed: {self.completed}"
        )
