"""Optional filters for list-style endpoints.

Each filter set produces two views of itself: the parameters that make up
its cache key and the query pairs actually sent to the remote service.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, fields

QueryPairs = list[tuple[str, str]]


@dataclass(slots=True)
class TaskFilters:
    """Filters for tasks of one list. Timestamps are Unix milliseconds."""

    archived: bool | None = None
    include_closed: bool | None = None
    page: int | None = None
    order_by: str | None = None
    reverse: bool | None = None
    subtasks: bool | None = None
    statuses: list[str] | None = None
    assignees: list[str] | None = None
    due_date_gt: int | None = None
    due_date_lt: int | None = None
    date_created_gt: int | None = None
    date_created_lt: int | None = None
    date_updated_gt: int | None = None
    date_updated_lt: int | None = None

    def cache_params(self) -> dict[str, object]:
        return _as_params(self)

    def query_params(self) -> QueryPairs:
        pairs: QueryPairs = []
        if self.archived is not None:
            pairs.append(("archived", _bool(self.archived)))
        _flag(pairs, "include_closed", self.include_closed)
        if self.page is not None:
            pairs.append(("page", str(self.page)))
        if self.order_by:
            pairs.append(("order_by", self.order_by))
        _flag(pairs, "reverse", self.reverse)
        _flag(pairs, "subtasks", self.subtasks)
        _repeat(pairs, "statuses[]", self.statuses)
        _repeat(pairs, "assignees[]", self.assignees)
        for name in (
            "due_date_gt",
            "due_date_lt",
            "date_created_gt",
            "date_created_lt",
            "date_updated_gt",
            "date_updated_lt",
        ):
            value = getattr(self, name)
            if value:
                pairs.append((name, str(value)))
        return pairs


@dataclass(slots=True)
class SearchFilters:
    """Filters for workspace-wide task search."""

    include_closed: bool | None = None
    assigned_to_me: bool | None = None
    list_ids: list[str] | None = None
    space_ids: list[str] | None = None
    folder_ids: list[str] | None = None
    statuses: list[str] | None = None
    page: int | None = None

    def cache_params(self) -> dict[str, object]:
        return _as_params(self)

    def query_params(self, query: str, *, assignee_id: str | None = None) -> QueryPairs:
        """Query pairs for ``query``; ``assignee_id`` is the resolved current user."""

        pairs: QueryPairs = []
        if query:
            pairs.append(("query", query))
        _flag(pairs, "include_closed", self.include_closed)
        if self.page is not None:
            pairs.append(("page", str(self.page)))
        _repeat(pairs, "list_ids[]", self.list_ids)
        _repeat(pairs, "space_ids[]", self.space_ids)
        _repeat(pairs, "folder_ids[]", self.folder_ids)
        _repeat(pairs, "statuses[]", self.statuses)
        if assignee_id is not None:
            pairs.append(("assignees[]", assignee_id))
        return pairs


@dataclass(slots=True)
class TimeEntryFilters:
    """Filters for workspace time entries."""

    start_date: int | None = None
    end_date: int | None = None
    assignee: int | None = None
    include_task_tags: bool | None = None
    include_location_names: bool | None = None
    space_id: str | None = None
    folder_id: str | None = None
    list_id: str | None = None
    task_id: str | None = None

    def cache_params(self) -> dict[str, object]:
        return _as_params(self)

    def query_params(self) -> QueryPairs:
        pairs: QueryPairs = []
        for name in ("start_date", "end_date", "assignee"):
            value = getattr(self, name)
            if value:
                pairs.append((name, str(value)))
        _flag(pairs, "include_task_tags", self.include_task_tags)
        _flag(pairs, "include_location_names", self.include_location_names)
        for name in ("space_id", "folder_id", "list_id", "task_id"):
            value = getattr(self, name)
            if value:
                pairs.append((name, value))
        return pairs


def _as_params(instance: object) -> dict[str, object]:
    names = [item.name for item in fields(instance)]  # type: ignore[arg-type]
    return {name: getattr(instance, name) for name in names}


def _bool(value: bool) -> str:
    return "true" if value else "false"


def _flag(pairs: QueryPairs, name: str, value: bool | None) -> None:
    if value:
        pairs.append((name, "true"))


def _repeat(pairs: QueryPairs, name: str, values: Iterable[str] | None) -> None:
    for value in values or ():
        pairs.append((name, str(value)))
