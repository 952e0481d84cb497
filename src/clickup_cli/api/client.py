"""ClickUp API client with read-through caching.

Reads derive a cache key from the operation name and every parameter that
shapes the remote query, then go through ``ReadThroughCache.get_or_fetch``.
Writes always hit the network and afterwards drop the cache entries they can
make stale. Cached values are the raw JSON payloads; records are built from
them on every call.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from clickup_cli.api.filters import SearchFilters, TaskFilters, TimeEntryFilters
from clickup_cli.api.models import (
    Comment,
    Folder,
    Space,
    Task,
    TaskCreate,
    TaskList,
    TaskUpdate,
    TimeEntry,
    User,
)
from clickup_cli.cache.keys import TTL, create_cache_key
from clickup_cli.cache.store import ReadThroughCache
from clickup_cli.http.transport import ApiTransport, QueryParams

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ClickUpClient:
    """Typed operations over one ClickUp workspace (team)."""

    def __init__(self, transport: ApiTransport, cache: ReadThroughCache, *, team_id: str) -> None:
        if not team_id:
            raise ValueError("team_id is required")
        self._transport = transport
        self._cache = cache
        self._team_id = team_id

    def disable_cache(self) -> None:
        self._cache.disable()

    def enable_cache(self) -> None:
        self._cache.enable()

    # Spaces

    def get_spaces(self) -> list[Space]:
        payload = self._cached(
            "spaces",
            TTL.HOUR,
            lambda: self._get(f"/team/{self._team_id}/space").get("spaces") or [],
        )
        return [Space.from_payload(item) for item in payload]

    def get_space(self, space_id: str) -> Space:
        _require(space_id, "space_id")
        payload = self._cached(
            create_cache_key("space", {"id": space_id}),
            TTL.HOUR,
            lambda: self._get(f"/space/{space_id}"),
        )
        return Space.from_payload(payload)

    # Folders and lists

    def get_folders(self, space_id: str) -> list[Folder]:
        _require(space_id, "space_id")
        payload = self._cached(
            create_cache_key("folders", {"space": space_id}),
            TTL.FIFTEEN_MINUTES,
            lambda: self._get(f"/space/{space_id}/folder").get("folders") or [],
        )
        return [Folder.from_payload(item) for item in payload]

    def get_lists(self, folder_id: str) -> list[TaskList]:
        _require(folder_id, "folder_id")
        payload = self._cached(
            create_cache_key("lists", {"folder": folder_id}),
            TTL.FIFTEEN_MINUTES,
            lambda: self._get(f"/folder/{folder_id}/list").get("lists") or [],
        )
        return [TaskList.from_payload(item) for item in payload]

    def get_folderless_lists(self, space_id: str) -> list[TaskList]:
        _require(space_id, "space_id")
        payload = self._cached(
            create_cache_key("folderless_lists", {"space": space_id}),
            TTL.FIFTEEN_MINUTES,
            lambda: self._get(f"/space/{space_id}/list").get("lists") or [],
        )
        return [TaskList.from_payload(item) for item in payload]

    def get_list(self, list_id: str) -> TaskList:
        _require(list_id, "list_id")
        payload = self._cached(
            create_cache_key("list", {"id": list_id}),
            TTL.FIFTEEN_MINUTES,
            lambda: self._get(f"/list/{list_id}"),
        )
        return TaskList.from_payload(payload)

    # Tasks

    def get_tasks(self, list_id: str, filters: TaskFilters | None = None) -> list[Task]:
        """Tasks of one list, 100 per page on the remote side."""

        _require(list_id, "list_id")
        filters = filters or TaskFilters()
        key = create_cache_key("tasks", {"list": list_id, **filters.cache_params()})
        payload = self._cached(
            key,
            TTL.FIVE_MINUTES,
            lambda: self._get(f"/list/{list_id}/task", filters.query_params()).get("tasks") or [],
        )
        return [Task.from_payload(item) for item in payload]

    def get_task(self, task_id: str, include_markdown: bool = False) -> Task:
        _require(task_id, "task_id")
        params = [("include_markdown_description", "true")] if include_markdown else None
        payload = self._cached(
            _task_key(task_id, markdown=include_markdown),
            TTL.FIVE_MINUTES,
            lambda: self._get(f"/task/{task_id}", params),
        )
        return Task.from_payload(payload)

    def search_tasks(self, query: str, filters: SearchFilters | None = None) -> list[Task]:
        """Search tasks by name across the workspace.

        Archived tasks are not returned by the remote search; the result is
        passed through as-is.
        """

        filters = filters or SearchFilters()
        key = create_cache_key("search", {"query": query or None, **filters.cache_params()})

        def _fetch() -> list[dict[str, Any]]:
            assignee_id = None
            if filters.assigned_to_me:
                assignee_id = str(self.get_authorized_user().id)
            params = filters.query_params(query, assignee_id=assignee_id)
            return self._get(f"/team/{self._team_id}/task", params).get("tasks") or []

        payload = self._cached(key, TTL.FIVE_MINUTES, _fetch)
        return [Task.from_payload(item) for item in payload]

    def create_task(self, list_id: str, data: TaskCreate) -> Task:
        _require(list_id, "list_id")
        result = self._transport.request("POST", f"/list/{list_id}/task", body=data.to_payload())
        self._invalidate_tags("tasks", "search")
        return Task.from_payload(result)

    def update_task(self, task_id: str, data: TaskUpdate) -> Task:
        """Apply a partial update. Both cached variants of the task are dropped."""

        _require(task_id, "task_id")
        result = self._transport.request("PUT", f"/task/{task_id}", body=data.to_payload())
        self._cache.invalidate(_task_key(task_id, markdown=False))
        self._cache.invalidate(_task_key(task_id, markdown=True))
        self._invalidate_tags("tasks", "search")
        return Task.from_payload(result)

    def delete_task(self, task_id: str) -> None:
        _require(task_id, "task_id")
        self._transport.request("DELETE", f"/task/{task_id}")
        self._invalidate_tags("task", "tasks", "search")

    # Comments

    def get_task_comments(
        self,
        task_id: str,
        *,
        start: int | None = None,
        start_id: str | None = None,
    ) -> list[Comment]:
        """Comments on a task; ``start``/``start_id`` page back from a known comment."""

        _require(task_id, "task_id")
        key = create_cache_key("comments", {"task": task_id, "start": start, "start_id": start_id})
        params: list[tuple[str, str]] = []
        if start:
            params.append(("start", str(start)))
        if start_id:
            params.append(("start_id", start_id))
        payload = self._cached(
            key,
            TTL.FIVE_MINUTES,
            lambda: self._get(f"/task/{task_id}/comment", params).get("comments") or [],
            tag=_comments_tag(task_id),
        )
        return [Comment.from_payload(item) for item in payload]

    def add_comment(self, task_id: str, comment_text: str, notify_all: bool = False) -> Comment:
        _require(task_id, "task_id")
        result = self._transport.request(
            "POST",
            f"/task/{task_id}/comment",
            body={"comment_text": comment_text, "notify_all": notify_all},
        )
        self._cache.invalidate_tag(_comments_tag(task_id))
        return Comment.from_payload(result)

    # Time tracking

    def get_time_entries(self, filters: TimeEntryFilters | None = None) -> list[TimeEntry]:
        filters = filters or TimeEntryFilters()
        payload = self._cached(
            create_cache_key("time_entries", filters.cache_params()),
            TTL.FIVE_MINUTES,
            lambda: (
                self._get(f"/team/{self._team_id}/time_entries", filters.query_params()).get(
                    "data",
                )
                or []
            ),
        )
        return [TimeEntry.from_payload(item) for item in payload]

    def create_time_entry(  # noqa: PLR0913
        self,
        task_id: str,
        *,
        start: int,
        duration: int,
        description: str | None = None,
        tags: list[str] | None = None,
        billable: bool | None = None,
    ) -> TimeEntry:
        """Log ``duration`` ms against a task starting at ``start`` (Unix ms)."""

        _require(task_id, "task_id")
        body: dict[str, Any] = {"start": start, "duration": duration, "tid": task_id}
        if description is not None:
            body["description"] = description
        if tags is not None:
            body["tags"] = tags
        if billable is not None:
            body["billable"] = billable
        result = self._transport.request("POST", f"/team/{self._team_id}/time_entries", body=body)
        self._cache.invalidate_tag("time_entries")
        if isinstance(result, dict) and isinstance(result.get("data"), dict):
            result = result["data"]
        return TimeEntry.from_payload(result)

    # Users

    def get_authorized_user(self) -> User:
        payload = self._cached(
            "authorized_user",
            TTL.HOUR,
            lambda: self._get("/user").get("user") or {},
        )
        return User.from_payload(payload)

    def get_team_members(self) -> list[User]:
        payload = self._cached(
            "team_members",
            TTL.HOUR,
            lambda: [
                member.get("user") or {}
                for member in self._get(f"/team/{self._team_id}").get("members") or []
            ],
        )
        return [User.from_payload(item) for item in payload]

    # Derived operations

    def search_spaces(self, query: str | None = None) -> list[Space]:
        """Spaces whose name contains ``query``, case-insensitively, in remote order."""

        spaces = self.get_spaces()
        if not query:
            return spaces
        needle = query.lower()
        return [space for space in spaces if needle in space.name.lower()]

    def get_all_lists(self) -> list[TaskList]:
        """Every list in the workspace, annotated with its space and folder names.

        Spaces and folders are walked one request at a time. Duplicates
        returned by the remote service are kept.
        """

        all_lists: list[TaskList] = []
        for space in self.get_spaces():
            if space.id is None:
                continue
            for task_list in self.get_folderless_lists(space.id):
                task_list.space_name = space.name
                all_lists.append(task_list)
            for folder in self.get_folders(space.id):
                if folder.id is None:
                    continue
                for task_list in self.get_lists(folder.id):
                    task_list.space_name = space.name
                    task_list.folder_name = folder.name
                    all_lists.append(task_list)
        return all_lists

    def _get(self, path: str, params: QueryParams | None = None) -> Any:
        return self._transport.request("GET", path, params=params)

    def _cached(
        self,
        key: str,
        ttl: int,
        producer: Callable[[], T],
        *,
        tag: str | None = None,
    ) -> T:
        return self._cache.get_or_fetch(key, producer, ttl=ttl, tag=tag)

    def _invalidate_tags(self, *tags: str) -> None:
        removed = sum(self._cache.invalidate_tag(tag) for tag in tags)
        logger.debug("Invalidated %d cache entries for tags %s", removed, ", ".join(tags))


def _task_key(task_id: str, *, markdown: bool) -> str:
    return create_cache_key("task", {"id": task_id, "markdown": markdown})


def _comments_tag(task_id: str) -> str:
    return f"comments:{task_id}"


def _require(value: str, name: str) -> None:
    if not value or not str(value).strip():
        raise ValueError(f"{name} must be a non-empty string")
