"""Structured events emitted by the task store."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Literal

from astrosched.models import Task

EventKind = Literal["added", "removed", "edited", "completed", "overlap", "not_found", "invalid"]

WARNING_KINDS: frozenset[str] = frozenset({"overlap", "not_found", "invalid"})


@dataclass(frozen=True)
class StoreEvent:
    """Outcome of a store operation, for whatever sink wants to record it."""

    kind: EventKind
    task: Task | None
    message: str
    replacement: Task | None = None
    conflicts: tuple[Task, ...] = field(default_factory=tuple)

    @property
    def is_warning(self) -> bool:
        """True for rejected operations."""
        return self.kind in WARNING_KINDS


Listener = Callable[[StoreEvent], None]
