"""Controllers for ClickUp CLI commands.

Each method opens a client for one command, runs the operation and returns a
JSON-serializable value for the CLI to print.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from clickup_cli.api.client import ClickUpClient
from clickup_cli.api.filters import SearchFilters, TaskFilters, TimeEntryFilters
from clickup_cli.api.models import Task, TaskCreate, TaskUpdate
from clickup_cli.cache.keys import TTL
from clickup_cli.cache.store import ReadThroughCache
from clickup_cli.config import Settings
from clickup_cli.http.transport import ApiTransport

logger = logging.getLogger(__name__)

MS_PER_HOUR = 3_600_000


@dataclass(slots=True)
class CliOptions:
    """Global options shared by every command."""

    config_path: Path | None = None
    no_cache: bool = False


@dataclass(slots=True)
class CreateTaskCommand:
    """CLI inputs for task creation."""

    list_id: str
    name: str
    description: str | None = None
    priority: int | None = None
    status: str | None = None
    due_date: int | None = None
    tags: tuple[str, ...] = ()
    assignees: tuple[int, ...] = ()
    parent: str | None = None


@dataclass(slots=True)
class UpdateTaskCommand:
    """CLI inputs for a partial task update."""

    task_id: str
    name: str | None = None
    description: str | None = None
    priority: int | None = None
    status: str | None = None
    due_date: int | None = None
    list_id: str | None = None
    archived: bool | None = None


@dataclass(slots=True)
class CreateTimeEntryCommand:
    """CLI inputs for logging time that ends now."""

    task_id: str
    hours: float
    description: str | None = None
    billable: bool | None = None
    tags: tuple[str, ...] = ()


class ClickUpCliController:
    """Coordinates ClickUp command execution."""

    def __init__(self, options: CliOptions | None = None) -> None:
        self.options = options or CliOptions()

    # Hierarchy

    def spaces(self) -> list[dict[str, Any]]:
        with self._client() as client:
            return [space.to_dict() for space in client.get_spaces()]

    def space(self, space_id: str) -> dict[str, Any]:
        with self._client() as client:
            return client.get_space(space_id).to_dict()

    def search_spaces(self, query: str | None) -> dict[str, Any]:
        with self._client() as client:
            spaces = client.search_spaces(query)
        return {
            "count": len(spaces),
            "spaces": [
                {"id": space.id, "name": space.name, "private": space.private}
                for space in spaces
            ],
        }

    def folders(self, space_id: str) -> list[dict[str, Any]]:
        with self._client() as client:
            return [folder.to_dict() for folder in client.get_folders(space_id)]

    def lists(self, folder_id: str) -> list[dict[str, Any]]:
        with self._client() as client:
            return [task_list.to_dict() for task_list in client.get_lists(folder_id)]

    def folderless_lists(self, space_id: str) -> list[dict[str, Any]]:
        with self._client() as client:
            return [task_list.to_dict() for task_list in client.get_folderless_lists(space_id)]

    def get_list(self, list_id: str) -> dict[str, Any]:
        with self._client() as client:
            return client.get_list(list_id).to_dict()

    def all_lists(self) -> dict[str, Any]:
        with self._client() as client:
            lists = client.get_all_lists()
        return {"count": len(lists), "lists": [task_list.to_dict() for task_list in lists]}

    # Tasks

    def tasks(self, list_id: str, filters: TaskFilters) -> list[dict[str, Any]]:
        with self._client() as client:
            return [task.to_dict() for task in client.get_tasks(list_id, filters)]

    def task(self, task_id: str) -> dict[str, Any]:
        with self._client() as client:
            return client.get_task(task_id).to_dict()

    def task_description(self, task_id: str) -> dict[str, Any]:
        with self._client() as client:
            task = client.get_task(task_id, include_markdown=True)
        return {
            "id": task.id,
            "name": task.name,
            "description": task.description or "",
            "markdown_description": task.markdown_description or task.description or "",
            "url": task.url,
            "status": task.status.status if task.status else None,
        }

    def search(self, query: str | None, filters: SearchFilters) -> dict[str, Any]:
        with self._client() as client:
            tasks = client.search_tasks(query or "", filters)
        return {"count": len(tasks), "tasks": [_task_summary(task) for task in tasks]}

    def create_task(self, command: CreateTaskCommand) -> dict[str, Any]:
        data = TaskCreate(
            name=command.name,
            description=command.description,
            priority=command.priority,
            status=command.status,
            due_date=command.due_date,
            tags=list(command.tags) or None,
            assignees=list(command.assignees) or None,
            parent=command.parent,
        )
        with self._client() as client:
            return client.create_task(command.list_id, data).to_dict()

    def update_task(self, command: UpdateTaskCommand) -> dict[str, Any]:
        data = TaskUpdate(
            name=command.name,
            description=command.description,
            priority=command.priority,
            status=command.status,
            due_date=command.due_date,
            list_id=command.list_id,
            archived=command.archived,
        )
        if not data.to_payload():
            raise ValueError("Nothing to update: pass at least one field option.")
        with self._client() as client:
            return client.update_task(command.task_id, data).to_dict()

    def delete_task(self, task_id: str) -> dict[str, Any]:
        with self._client() as client:
            client.delete_task(task_id)
        return {"deleted": True, "id": task_id}

    # Comments

    def comments(
        self,
        task_id: str,
        *,
        start: int | None = None,
        start_id: str | None = None,
    ) -> dict[str, Any]:
        with self._client() as client:
            comments = client.get_task_comments(task_id, start=start, start_id=start_id)
        return {
            "count": len(comments),
            "comments": [
                {
                    "id": comment.id,
                    "text": comment.comment_text,
                    "user": comment.user.display_name if comment.user else None,
                    "date": _iso_from_ms(comment.date),
                }
                for comment in comments
            ],
        }

    def add_comment(self, task_id: str, text: str, *, notify_all: bool) -> dict[str, Any]:
        with self._client() as client:
            return client.add_comment(task_id, text, notify_all).to_dict()

    # Time tracking

    def time_entries(self, filters: TimeEntryFilters) -> dict[str, Any]:
        with self._client() as client:
            entries = client.get_time_entries(filters)
        return {
            "count": len(entries),
            "entries": [
                {
                    "id": entry.id,
                    "task": (entry.task or {}).get("name"),
                    "task_id": (entry.task or {}).get("id"),
                    "user": entry.user.display_name if entry.user else None,
                    "duration_ms": entry.duration,
                    "duration_hours": _hours(entry.duration),
                    "description": entry.description,
                    "start": _iso_from_ms(entry.start),
                }
                for entry in entries
            ],
        }

    def create_time_entry(self, command: CreateTimeEntryCommand) -> dict[str, Any]:
        if command.hours <= 0:
            raise ValueError("--hours must be > 0.")
        duration_ms = round(command.hours * MS_PER_HOUR)
        now_ms = int(time.time() * 1000)
        with self._client() as client:
            entry = client.create_time_entry(
                command.task_id,
                start=now_ms - duration_ms,
                duration=duration_ms,
                description=command.description,
                tags=list(command.tags) or None,
                billable=command.billable,
            )
        return entry.to_dict()

    # Users

    def whoami(self) -> dict[str, Any]:
        with self._client() as client:
            return client.get_authorized_user().to_dict()

    def team_members(self) -> list[dict[str, Any]]:
        with self._client() as client:
            return [user.to_dict() for user in client.get_team_members()]

    # Cache management

    def cache_stats(self) -> dict[str, Any]:
        with self._cache() as cache:
            return asdict(cache.get_stats())

    def cache_clear(self) -> dict[str, Any]:
        with self._cache() as cache:
            return {"cleared": cache.clear()}

    def cache_invalidate(self, key: str) -> dict[str, Any]:
        with self._cache() as cache:
            return {"key": key, "invalidated": cache.invalidate(key)}

    @contextmanager
    def _client(self) -> Iterator[ClickUpClient]:
        settings = Settings.from_env(config_path=self.options.config_path)
        with (
            ApiTransport(
                api_key=settings.credentials.api_key,
                base_url=settings.http.base_url,
                timeout_seconds=settings.http.timeout_seconds,
            ) as transport,
            _open_cache(settings) as cache,
        ):
            client = ClickUpClient(transport, cache, team_id=settings.team_id)
            if self.options.no_cache or not settings.cache.enabled:
                client.disable_cache()
            yield client

    @contextmanager
    def _cache(self) -> Iterator[ReadThroughCache]:
        settings = Settings.from_env(config_path=self.options.config_path)
        with _open_cache(settings) as cache:
            yield cache


def _open_cache(settings: Settings) -> ReadThroughCache:
    return ReadThroughCache(
        settings.cache.directory,
        namespace=settings.cache_namespace,
        default_ttl=TTL.FIVE_MINUTES,
        enabled=settings.cache.enabled,
    )


def _task_summary(task: Task) -> dict[str, Any]:
    return {
        "id": task.id,
        "name": task.name,
        "status": task.status.status if task.status else None,
        "priority": (task.priority or {}).get("priority"),
        "list": (task.list_ref or {}).get("name"),
        "url": task.url,
        "due_date": _iso_from_ms(task.due_date),
        "assignees": [user.display_name for user in task.assignees],
    }


def _iso_from_ms(value: str | int | None) -> str | None:
    if not value:
        return None
    try:
        millis = int(value)
    except (TypeError, ValueError):
        logger.debug("Unparseable millisecond timestamp: %r", value)
        return None
    moment = datetime.fromtimestamp(millis / 1000, tz=UTC)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _hours(duration_ms: str | int | None) -> str | None:
    if duration_ms is None:
        return None
    try:
        return f"{int(duration_ms) / MS_PER_HOUR:.2f}"
    except (TypeError, ValueError):
        return None
