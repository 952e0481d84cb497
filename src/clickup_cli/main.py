"""CLI entrypoint for clickup-cli."""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import httpx
import rich_click as click

from clickup_cli import __version__
from clickup_cli.api.filters import SearchFilters, TaskFilters, TimeEntryFilters
from clickup_cli.config import ConfigurationError, LoggingSettings
from clickup_cli.controllers import (
    ClickUpCliController,
    CliOptions,
    CreateTaskCommand,
    CreateTimeEntryCommand,
    UpdateTaskCommand,
)
from clickup_cli.http.transport import RemoteApiError

click.rich_click.USE_MARKDOWN = True
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@click.group()
@click.version_option(version=__version__, prog_name="clickup-cli")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Path to config.json. Defaults to CLICKUP_CONFIG_PATH or ./config.json.",
)
@click.option(
    "--no-cache",
    is_flag=True,
    default=False,
    help="Bypass the response cache for this command.",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Debug logging to stderr.")
@click.pass_context
def clickup(ctx: click.Context, config_path: Path | None, no_cache: bool, verbose: bool) -> None:
    """ClickUp task management."""

    _configure_logging(verbose)
    ctx.obj = CliOptions(config_path=config_path, no_cache=no_cache)


@clickup.command("list-tools")
def list_tools() -> None:
    """List all available commands."""

    _emit(
        [
            {"name": name, "description": command.get_short_help_str(limit=120)}
            for name, command in sorted(clickup.commands.items())
        ],
    )


# Hierarchy


@clickup.command("spaces")
@click.pass_obj
def spaces(options: CliOptions) -> None:
    """List all spaces in the workspace."""

    _run(ClickUpCliController(options).spaces)


@clickup.command("get-space")
@click.option("--id", "space_id", required=True, help="Space ID.")
@click.pass_obj
def get_space(options: CliOptions, space_id: str) -> None:
    """Get space details by ID."""

    _run(ClickUpCliController(options).space, space_id)


@clickup.command("search-spaces")
@click.option("--query", default=None, help="Case-insensitive substring of the space name.")
@click.pass_obj
def search_spaces(options: CliOptions, query: str | None) -> None:
    """Search spaces (projects) by name."""

    _run(ClickUpCliController(options).search_spaces, query)


@clickup.command("folders")
@click.option("--space", "space_id", required=True, help="Space ID.")
@click.pass_obj
def folders(options: CliOptions, space_id: str) -> None:
    """List folders in a space."""

    _run(ClickUpCliController(options).folders, space_id)


@clickup.command("lists")
@click.option("--folder", "folder_id", required=True, help="Folder ID.")
@click.pass_obj
def lists(options: CliOptions, folder_id: str) -> None:
    """List lists in a folder."""

    _run(ClickUpCliController(options).lists, folder_id)


@clickup.command("folderless-lists")
@click.option("--space", "space_id", required=True, help="Space ID.")
@click.pass_obj
def folderless_lists(options: CliOptions, space_id: str) -> None:
    """List lists that sit directly in a space."""

    _run(ClickUpCliController(options).folderless_lists, space_id)


@clickup.command("get-list")
@click.option("--id", "list_id", default=None, help="List ID.")
@click.option("--list", "list_alias", default=None, help="List ID (alias).")
@click.pass_obj
def get_list(options: CliOptions, list_id: str | None, list_alias: str | None) -> None:
    """Get list details."""

    resolved = list_id or list_alias
    if not resolved:
        raise click.UsageError("Either --id or --list is required.")
    _run(ClickUpCliController(options).get_list, resolved)


@clickup.command("all-lists")
@click.pass_obj
def all_lists(options: CliOptions) -> None:
    """List every list in the workspace with its space and folder names."""

    _run(ClickUpCliController(options).all_lists)


# Tasks


@clickup.command("tasks")
@click.option("--list", "list_id", required=True, help="List ID.")
@click.option("--archived/--no-archived", default=None, help="Include archived tasks.")
@click.option("--include-closed", is_flag=True, default=None, help="Include closed tasks.")
@click.option("--page", type=click.IntRange(min=0), default=None, help="Page number (0-indexed).")
@click.option("--order-by", default=None, help="Sort field, e.g. created, updated, due_date.")
@click.option("--reverse", is_flag=True, default=None, help="Reverse sort order.")
@click.option("--subtasks", is_flag=True, default=None, help="Include subtasks.")
@click.option("--status", "statuses", multiple=True, help="Status name. Can be repeated.")
@click.option("--assignee", "assignees", multiple=True, help="Assignee user ID. Can be repeated.")
@click.option("--due-date-gt", type=int, default=None, help="Due after (Unix ms).")
@click.option("--due-date-lt", type=int, default=None, help="Due before (Unix ms).")
@click.option("--date-created-gt", type=int, default=None, help="Created after (Unix ms).")
@click.option("--date-created-lt", type=int, default=None, help="Created before (Unix ms).")
@click.option("--date-updated-gt", type=int, default=None, help="Updated after (Unix ms).")
@click.option("--date-updated-lt", type=int, default=None, help="Updated before (Unix ms).")
@click.pass_obj
def tasks(  # noqa: PLR0913
    options: CliOptions,
    list_id: str,
    archived: bool | None,
    include_closed: bool | None,
    page: int | None,
    order_by: str | None,
    reverse: bool | None,
    subtasks: bool | None,
    statuses: tuple[str, ...],
    assignees: tuple[str, ...],
    due_date_gt: int | None,
    due_date_lt: int | None,
    date_created_gt: int | None,
    date_created_lt: int | None,
    date_updated_gt: int | None,
    date_updated_lt: int | None,
) -> None:
    """List tasks in a list with optional filters."""

    filters = TaskFilters(
        archived=archived,
        include_closed=include_closed or None,
        page=page,
        order_by=order_by,
        reverse=reverse or None,
        subtasks=subtasks or None,
        statuses=list(statuses) or None,
        assignees=list(assignees) or None,
        due_date_gt=due_date_gt,
        due_date_lt=due_date_lt,
        date_created_gt=date_created_gt,
        date_created_lt=date_created_lt,
        date_updated_gt=date_updated_gt,
        date_updated_lt=date_updated_lt,
    )
    _run(ClickUpCliController(options).tasks, list_id, filters)


@clickup.command("get-task")
@click.option("--id", "task_id", required=True, help="Task ID.")
@click.pass_obj
def get_task(options: CliOptions, task_id: str) -> None:
    """Get task details by ID."""

    _run(ClickUpCliController(options).task, task_id)


@clickup.command("get-task-description")
@click.option("--id", "task_id", required=True, help="Task ID.")
@click.pass_obj
def get_task_description(options: CliOptions, task_id: str) -> None:
    """Get task with full markdown description."""

    _run(ClickUpCliController(options).task_description, task_id)


@clickup.command("search")
@click.option("--query", default=None, help="Search text matched against task names.")
@click.option("--list", "list_ids", multiple=True, help="Filter by list ID. Can be repeated.")
@click.option("--space", "space_ids", multiple=True, help="Filter by space ID. Can be repeated.")
@click.option("--folder", "folder_ids", multiple=True, help="Filter by folder ID. Can be repeated.")
@click.option("--status", "statuses", multiple=True, help="Filter by status. Can be repeated.")
@click.option("--exclude-closed", is_flag=True, default=False, help="Exclude closed/done tasks.")
@click.option("--mine", is_flag=True, default=False, help="Only tasks assigned to me.")
@click.option("--page", type=click.IntRange(min=0), default=None, help="Page number (0-indexed).")
@click.pass_obj
def search(  # noqa: PLR0913
    options: CliOptions,
    query: str | None,
    list_ids: tuple[str, ...],
    space_ids: tuple[str, ...],
    folder_ids: tuple[str, ...],
    statuses: tuple[str, ...],
    exclude_closed: bool,
    mine: bool,
    page: int | None,
) -> None:
    """Search for tasks across the workspace."""

    filters = SearchFilters(
        include_closed=not exclude_closed,
        assigned_to_me=mine or None,
        list_ids=list(list_ids) or None,
        space_ids=list(space_ids) or None,
        folder_ids=list(folder_ids) or None,
        statuses=list(statuses) or None,
        page=page,
    )
    _run(ClickUpCliController(options).search, query, filters)


@clickup.command("create-task")
@click.option("--list", "list_id", required=True, help="List ID.")
@click.option("--name", required=True, help="Task name.")
@click.option("--description", default=None, help="Task description.")
@click.option(
    "--priority",
    type=click.IntRange(min=1, max=4),
    default=None,
    help="Priority (1=urgent, 2=high, 3=normal, 4=low).",
)
@click.option("--status", default=None, help="Task status.")
@click.option("--due-date", type=int, default=None, help="Due date (Unix timestamp in ms).")
@click.option("--tag", "tags", multiple=True, help="Tag name. Can be repeated.")
@click.option("--assignee", "assignees", type=int, multiple=True, help="Assignee user ID.")
@click.option("--parent", default=None, help="Parent task ID to create a subtask.")
@click.pass_obj
def create_task(  # noqa: PLR0913
    options: CliOptions,
    list_id: str,
    name: str,
    description: str | None,
    priority: int | None,
    status: str | None,
    due_date: int | None,
    tags: tuple[str, ...],
    assignees: tuple[int, ...],
    parent: str | None,
) -> None:
    """Create a new task in a list."""

    _run(
        ClickUpCliController(options).create_task,
        CreateTaskCommand(
            list_id=list_id,
            name=name,
            description=description,
            priority=priority,
            status=status,
            due_date=due_date,
            tags=tags,
            assignees=assignees,
            parent=parent,
        ),
    )


@clickup.command("update-task")
@click.option("--id", "task_id", required=True, help="Task ID.")
@click.option("--name", default=None, help="New task name.")
@click.option("--description", default=None, help="New task description.")
@click.option(
    "--priority",
    type=click.IntRange(min=1, max=4),
    default=None,
    help="Priority (1=urgent, 2=high, 3=normal, 4=low).",
)
@click.option("--status", default=None, help="New task status.")
@click.option("--due-date", type=int, default=None, help="Due date (Unix timestamp in ms).")
@click.option(
    "--list",
    "list_id",
    default=None,
    help="Target list ID. Forwarded as-is; ClickUp does not move tasks between lists.",
)
@click.option("--archived/--unarchived", default=None, help="Archive or unarchive the task.")
@click.pass_obj
def update_task(  # noqa: PLR0913
    options: CliOptions,
    task_id: str,
    name: str | None,
    description: str | None,
    priority: int | None,
    status: str | None,
    due_date: int | None,
    list_id: str | None,
    archived: bool | None,
) -> None:
    """Update an existing task."""

    _run(
        ClickUpCliController(options).update_task,
        UpdateTaskCommand(
            task_id=task_id,
            name=name,
            description=description,
            priority=priority,
            status=status,
            due_date=due_date,
            list_id=list_id,
            archived=archived,
        ),
    )


@clickup.command("delete-task")
@click.option("--id", "task_id", required=True, help="Task ID.")
@click.pass_obj
def delete_task(options: CliOptions, task_id: str) -> None:
    """Delete a task."""

    _run(ClickUpCliController(options).delete_task, task_id)


# Comments


@clickup.command("get-comments")
@click.option("--id", "task_id", required=True, help="Task ID.")
@click.option("--start", type=int, default=None, help="Page from this comment date (Unix ms).")
@click.option("--start-id", default=None, help="Page from this comment ID.")
@click.pass_obj
def get_comments(
    options: CliOptions,
    task_id: str,
    start: int | None,
    start_id: str | None,
) -> None:
    """Get comments on a task."""

    _run(ClickUpCliController(options).comments, task_id, start=start, start_id=start_id)


@clickup.command("add-comment")
@click.option("--id", "task_id", required=True, help="Task ID.")
@click.option("--comment", required=True, help="Comment text.")
@click.option("--notify-all", is_flag=True, default=False, help="Notify all task watchers.")
@click.pass_obj
def add_comment(options: CliOptions, task_id: str, comment: str, notify_all: bool) -> None:
    """Add a comment to a task."""

    _run(ClickUpCliController(options).add_comment, task_id, comment, notify_all=notify_all)


# Time tracking


@clickup.command("get-time-entries")
@click.option("--id", "task_id", default=None, help="Task ID to filter by.")
@click.option("--start-date", type=int, default=None, help="Range start (Unix ms).")
@click.option("--end-date", type=int, default=None, help="Range end (Unix ms).")
@click.option("--assignee", type=int, default=None, help="Filter by user ID.")
@click.option("--space", "space_id", default=None, help="Filter to a space.")
@click.option("--folder", "folder_id", default=None, help="Filter to a folder.")
@click.option("--list", "list_id", default=None, help="Filter to a list.")
@click.option("--include-task-tags", is_flag=True, default=None, help="Include task tags.")
@click.option(
    "--include-location-names",
    is_flag=True,
    default=None,
    help="Include space/folder/list names.",
)
@click.pass_obj
def get_time_entries(  # noqa: PLR0913
    options: CliOptions,
    task_id: str | None,
    start_date: int | None,
    end_date: int | None,
    assignee: int | None,
    space_id: str | None,
    folder_id: str | None,
    list_id: str | None,
    include_task_tags: bool | None,
    include_location_names: bool | None,
) -> None:
    """Get time tracking entries."""

    filters = TimeEntryFilters(
        start_date=start_date,
        end_date=end_date,
        assignee=assignee,
        include_task_tags=include_task_tags or None,
        include_location_names=include_location_names or None,
        space_id=space_id,
        folder_id=folder_id,
        list_id=list_id,
        task_id=task_id,
    )
    _run(ClickUpCliController(options).time_entries, filters)


@clickup.command("create-time-entry")
@click.option("--id", "task_id", required=True, help="Task ID.")
@click.option("--hours", type=click.FloatRange(min=0.01), required=True, help="Hours to log.")
@click.option("--description", default=None, help="Time entry description.")
@click.option("--billable/--not-billable", default=None, help="Mark the entry billable.")
@click.option("--tag", "tags", multiple=True, help="Tag name. Can be repeated.")
@click.pass_obj
def create_time_entry(  # noqa: PLR0913
    options: CliOptions,
    task_id: str,
    hours: float,
    description: str | None,
    billable: bool | None,
    tags: tuple[str, ...],
) -> None:
    """Log time to a task, ending now."""

    _run(
        ClickUpCliController(options).create_time_entry,
        CreateTimeEntryCommand(
            task_id=task_id,
            hours=hours,
            description=description,
            billable=billable,
            tags=tags,
        ),
    )


# Users


@clickup.command("whoami")
@click.pass_obj
def whoami(options: CliOptions) -> None:
    """Show the user that owns the API key."""

    _run(ClickUpCliController(options).whoami)


@clickup.command("team-members")
@click.pass_obj
def team_members(options: CliOptions) -> None:
    """List workspace members."""

    _run(ClickUpCliController(options).team_members)


# Cache


@clickup.command("cache-stats")
@click.pass_obj
def cache_stats(options: CliOptions) -> None:
    """Show cache statistics."""

    _run(ClickUpCliController(options).cache_stats)


@clickup.command("cache-clear")
@click.pass_obj
def cache_clear(options: CliOptions) -> None:
    """Clear all cached data."""

    _run(ClickUpCliController(options).cache_clear)


@clickup.command("cache-invalidate")
@click.option("--key", required=True, help="Exact cache key, e.g. 'task:id=abc&markdown=false'.")
@click.pass_obj
def cache_invalidate(options: CliOptions, key: str) -> None:
    """Invalidate a specific cache key."""

    _run(ClickUpCliController(options).cache_invalidate, key)


def _run(action: Callable[..., Any], *args: Any, **kwargs: Any) -> None:
    try:
        result = action(*args, **kwargs)
    except RemoteApiError as error:
        raise click.ClickException(str(error)) from error
    except httpx.HTTPError as error:
        raise click.ClickException(f"Request to ClickUp failed: {error}") from error
    except ValueError as error:
        raise click.ClickException(str(error)) from error
    _emit(result)


def _emit(value: Any) -> None:
    click.echo(json.dumps(value, indent=2, ensure_ascii=False))


def _configure_logging(verbose: bool) -> None:
    try:
        settings = LoggingSettings.from_env(verbose=verbose)
    except ConfigurationError as error:
        raise click.ClickException(str(error)) from error
    logging.basicConfig(
        level=settings.level,
        stream=sys.stderr,
        format=LOG_FORMAT,
    )


if __name__ == "__main__":  # pragma: no cover
    clickup()
