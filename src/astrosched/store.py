"""In-memory task store with overlap checking.

The store keeps tasks in insertion order and guarantees that no two stored
tasks overlap. Ordering is applied when a view is requested, not on insert.

Tasks are looked up by a ``TaskRef``:

- a ``Task`` instance (the stored object itself, or one carrying the same id)
- an ``int`` id assigned by the store on insert
- a ``str`` description, matched case-insensitively (first match wins)

Ids are the stable key. Description lookups exist because that is how people
type task names at a prompt, and they become ambiguous when two tasks share
a description.
"""

from __future__ import annotations

import itertools
import threading
from collections.abc import Iterable, Iterator
from typing import Literal

from astrosched.errors import (
    InvalidTaskError,
    OldTaskNotFoundError,
    OverlapError,
    TaskNotFoundError,
)
from astrosched.events import EventKind, Listener, StoreEvent
from astrosched.models import Task, check_priority

TaskRef = Task | int | str
EditStrategy = Literal["atomic", "remove_then_add"]

EDIT_STRATEGIES: tuple[str, ...] = ("atomic", "remove_then_add")


class TaskStore:
    """Overlap-free collection of tasks.

    Edit strategies:

    - ``atomic``: the replacement is checked against every task except the
      one being edited before anything changes. A rejected edit leaves the
      store as it was.
    - ``remove_then_add``: the old task is removed first, then the
      replacement is added. If the replacement overlaps another task it is
      rejected and the old task is NOT put back.

    All public methods hold one re-entrant lock, since an overlap check needs
    the full task set.
    """

    def __init__(
        self,
        *,
        edit_strategy: EditStrategy = "atomic",
        listeners: Iterable[Listener] = (),
    ) -> None:
        if edit_strategy not in EDIT_STRATEGIES:
            raise ValueError(
                f"Unknown edit strategy {edit_strategy!r}, expected one of {EDIT_STRATEGIES}"
            )
        self.edit_strategy: EditStrategy = edit_strategy
        self._tasks: list[Task] = []
        self._ids = itertools.count(1)
        self._lock = threading.RLock()
        self._listeners: list[Listener] = list(listeners)

    # ---- events ----

    def subscribe(self, listener: Listener) -> None:
        """Register a callable that receives every StoreEvent.

        Listeners run after the change they report is final and must not
        raise. An exception from a listener propagates to the caller of the
        store operation; the change itself stays committed.
        """
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        self._listeners.remove(listener)

    def _emit(
        self,
        kind: EventKind,
        task: Task | None,
        message: str,
        *,
        replacement: Task | None = None,
        conflicts: Iterable[Task] = (),
    ) -> None:
        event = StoreEvent(
            kind=kind,
            task=task,
            message=message,
            replacement=replacement,
            conflicts=tuple(conflicts),
        )
        for listener in list(self._listeners):
            listener(event)

    # ---- lookups ----

    def _resolve(self, ref: TaskRef) -> Task | None:
        if isinstance(ref, Task):
            for task in self._tasks:
                if task is ref:
                    return task
            if ref.id is not None:
                return self._by_id(ref.id)
            return self._by_description(ref.description)
        # bool is an int subclass; True is not a task id
        if isinstance(ref, bool):
            raise TypeError(f"Unsupported task reference: {ref!r}")
        if isinstance(ref, int):
            return self._by_id(ref)
        if isinstance(ref, str):
            return self._by_description(ref)
        raise TypeError(f"Unsupported task reference: {ref!r}")

    def _by_id(self, task_id: int) -> Task | None:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def _by_description(self, description: str) -> Task | None:
        for task in self._tasks:
            if task.matches_description(description):
                return task
        return None

    def _conflicts(self, candidate: Task, ignore: Task | None = None) -> list[Task]:
        return [
            task
            for task in self._tasks
            if task is not ignore and task.overlaps(candidate)
        ]

    def _validate(self, task: Task) -> None:
        try:
            task.validate()
            if task.id is not None:
                if isinstance(task.id, bool) or not isinstance(task.id, int) or task.id < 1:
                    raise InvalidTaskError(
                        f"Task id must be a positive integer, got {task.id!r}"
                    )
                holder = self._by_id(task.id)
                if holder is not None and holder is not task:
                    raise InvalidTaskError(f"Task id {task.id} is already in use")
        except InvalidTaskError as e:
            self._emit("invalid", task, str(e))
            raise

    def get(self, ref: TaskRef) -> Task | None:
        """Return the stored task matching ``ref``, or None."""
        with self._lock:
            return self._resolve(ref)

    def find_conflicts(self, task: Task, *, ignore: TaskRef | None = None) -> list[Task]:
        """Stored tasks whose windows overlap ``task``.

        ``ignore`` excludes one stored task, e.g. the one about to be replaced.
        """
        with self._lock:
            skip = self._resolve(ignore) if ignore is not None else None
            return self._conflicts(task, ignore=skip)

    # ---- mutations ----

    def add(self, task: Task) -> Task:
        """Add a task if its window is free.

        Raises:
            InvalidTaskError: the task breaks a field rule.
            OverlapError: the window intersects stored tasks; nothing changes.
        """
        with self._lock:
            self._validate(task)
            conflicts = self._conflicts(task)
            if conflicts:
                error = OverlapError(task, conflicts)
                self._emit("overlap", task, str(error), conflicts=conflicts)
                raise error
            self._insert(task)
            self._emit("added", task, f"Task added: {task}")
            return task

    def _insert(self, task: Task) -> None:
        if task.id is None:
            task_id = next(self._ids)
            # Skip ids already taken by tasks added with an explicit id
            while self._by_id(task_id) is not None:
                task_id = next(self._ids)
            task.id = task_id
        self._tasks.append(task)

    def remove(self, ref: TaskRef) -> Task:
        """Remove the first task matching ``ref`` and return it.

        Raises:
            TaskNotFoundError: nothing matches; nothing changes.
        """
        with self._lock:
            task = self._resolve(ref)
            if task is None:
                error = TaskNotFoundError(ref)
                self._emit("not_found", None, str(error))
                raise error
            self._tasks.remove(task)
            self._emit("removed", task, f"Task removed: {task}")
            return task

    def edit(self, old_ref: TaskRef, new_task: Task) -> Task:
        """Replace a stored task with ``new_task``.

        The replacement inherits the old task's id when it has none.

        Raises:
            InvalidTaskError: ``new_task`` breaks a field rule; nothing changes.
            OldTaskNotFoundError: ``old_ref`` matches nothing; nothing is added.
            OverlapError: the replacement overlaps another task. Under
                ``atomic`` the old task stays; under ``remove_then_add`` it
                has already been removed and is not restored.
        """
        with self._lock:
            old = self._resolve(old_ref)
            if old is None:
                error = OldTaskNotFoundError(old_ref)
                self._emit("not_found", None, str(error))
                raise error

            if new_task.id is None or new_task.id == old.id:
                try:
                    new_task.validate()
                except InvalidTaskError as e:
                    self._emit("invalid", new_task, str(e))
                    raise
            else:
                self._validate(new_task)

            if self.edit_strategy == "atomic":
                conflicts = self._conflicts(new_task, ignore=old)
                if conflicts:
                    error = OverlapError(new_task, conflicts)
                    self._emit("overlap", new_task, str(error), conflicts=conflicts)
                    raise error
                self._tasks.remove(old)
            else:
                self._tasks.remove(old)
                conflicts = self._conflicts(new_task)
                if conflicts:
                    error = OverlapError(new_task, conflicts)
                    self._emit("removed", old, f"Task removed: {old}")
                    self._emit(
                        "overlap",
                        new_task,
                        f"{error} (old task {old.description!r} was removed)",
                        conflicts=conflicts,
                    )
                    raise error

            if new_task.id is None:
                new_task.id = old.id
            self._insert(new_task)
            self._emit(
                "edited",
                old,
                f"Task edited: {old.description} -> {new_task}",
                replacement=new_task,
            )
            return new_task

    def mark_completed(self, ref: TaskRef) -> Task:
        """Mark the matching task completed. Marking twice is fine.

        Raises:
            TaskNotFoundError: nothing matches.
        """
        with self._lock:
            task = self._resolve(ref)
            if task is None:
                error = TaskNotFoundError(ref)
                self._emit("not_found", None, str(error))
                raise error
            task.complete()
            self._emit("completed", task, f"Task marked as completed: {task}")
            return task

    # ---- views ----

    def list_all(self) -> list[Task]:
        """All tasks ordered by start time (ties keep insertion order)."""
        with self._lock:
            return sorted(self._tasks, key=lambda t: t.start)

    def list_by_priority(self, priority: int) -> list[Task]:
        """Tasks with the given priority, in insertion order.

        Raises:
            InvalidTaskError: priority is outside 1-5.
        """
        check_priority(priority)
        with self._lock:
            return [task for task in self._tasks if task.priority == priority]

    def list_pending(self) -> list[Task]:
        """Incomplete tasks ordered by start time."""
        return [task for task in self.list_all() if not task.completed]

    def list_completed(self) -> list[Task]:
        """Completed tasks ordered by start time."""
        return [task for task in self.list_all() if task.completed]

    def __len__(self) -> int:
        with self._lock:
            return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        with self._lock:
            return iter(list(self._tasks))

    def __contains__(self, ref: object) -> bool:
        if not isinstance(ref, (Task, int, str)) or isinstance(ref, bool):
            return False
        return self.get(ref) is not None
