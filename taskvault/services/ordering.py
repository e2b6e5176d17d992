"""Display ordering and counters over a user's task list."""

from typing import Iterable, Sequence, TypeVar

from taskvault.schemas.task import TaskCounts

T = TypeVar("T")


def sort_tasks(tasks: Iterable[T]) -> list[T]:
    """
    Return a new list: incomplete before completed, then urgent before
    non-urgent, then newest ``created_at`` first. Full ties keep input order.
    """
    # Python's sort is stable, so apply the least significant key first.
    ordered = sorted(tasks, key=lambda t: t.created_at, reverse=True)
    ordered.sort(key=lambda t: (bool(t.is_completed), not t.is_urgent))
    return ordered


def derive_counts(tasks: Sequence[T]) -> TaskCounts:
    active = [t for t in tasks if not t.is_completed]
    return TaskCounts(
        active=len(active),
        urgent=sum(1 for t in active if t.is_urgent),
        completed=len(tasks) - len(active),
    )
