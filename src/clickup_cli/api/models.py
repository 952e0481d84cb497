"""Pass-through records mirroring ClickUp API payloads.

Modeled fields are the ones callers read; everything else the remote service
returns is kept verbatim in ``extra`` and written back by ``to_dict``.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, fields
from typing import Any, ClassVar, TypeVar

R = TypeVar("R", bound="Record")


class Record:
    """Mixin converting between raw payload dicts and dataclass records."""

    __slots__ = ()
    _nested: ClassVar[Mapping[str, Callable[[Any], Any]]] = {}

    @classmethod
    def from_payload(cls: type[R], payload: Mapping[str, Any]) -> R:
        extra = dict(payload)
        known: dict[str, Any] = {}
        for item in fields(cls):  # type: ignore[arg-type]
            if item.name == "extra":
                continue
            key = item.metadata.get("key", item.name)
            if key not in extra:
                continue
            value = extra.pop(key)
            convert = cls._nested.get(item.name)
            if convert is not None and value is not None:
                value = convert(value)
            known[item.name] = value
        return cls(**known, extra=extra)

    def to_dict(self) -> dict[str, Any]:
        """JSON-serializable dict using the remote field names; ``None`` fields are omitted."""

        out: dict[str, Any] = {}
        for item in fields(self):  # type: ignore[arg-type]
            if item.name == "extra":
                continue
            value = getattr(self, item.name)
            if value is None:
                continue
            out[item.metadata.get("key", item.name)] = _dump(value)
        out.update(getattr(self, "extra", {}))
        return out


def _dump(value: Any) -> Any:
    if isinstance(value, Record):
        return value.to_dict()
    if isinstance(value, list):
        return [_dump(item) for item in value]
    return value


def _many(convert: Callable[[Any], Any]) -> Callable[[Any], list[Any]]:
    def _convert_all(values: Any) -> list[Any]:
        return [convert(value) for value in values or []]

    return _convert_all


@dataclass(slots=True, kw_only=True)
class User(Record):
    id: int | str | None = None
    username: str | None = None
    email: str | None = None
    color: str | None = None
    initials: str | None = None
    profile_picture: str | None = field(default=None, metadata={"key": "profilePicture"})
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def display_name(self) -> str | None:
        return self.username or self.email


@dataclass(slots=True, kw_only=True)
class Status(Record):
    id: str | None = None
    status: str | None = None
    type: str | None = None
    orderindex: int | str | None = None
    color: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True, kw_only=True)
class Space(Record):
    id: str | None = None
    name: str = ""
    private: bool | None = None
    statuses: list[Status] = field(default_factory=list)
    multiple_assignees: bool | None = None
    features: dict[str, Any] | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    _nested: ClassVar[Mapping[str, Callable[[Any], Any]]] = {
        "statuses": _many(Status.from_payload),
    }


@dataclass(slots=True, kw_only=True)
class TaskList(Record):
    """A ClickUp List, optionally annotated with its owning space and folder names."""

    id: str | None = None
    name: str = ""
    orderindex: int | None = None
    content: str | None = None
    status: dict[str, Any] | None = None
    priority: dict[str, Any] | None = None
    assignee: User | None = None
    task_count: int | str | None = None
    due_date: str | None = None
    start_date: str | None = None
    folder: dict[str, Any] | None = None
    space: dict[str, Any] | None = None
    statuses: list[Status] | None = None
    space_name: str | None = None
    folder_name: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    _nested: ClassVar[Mapping[str, Callable[[Any], Any]]] = {
        "assignee": User.from_payload,
        "statuses": _many(Status.from_payload),
    }


@dataclass(slots=True, kw_only=True)
class Folder(Record):
    id: str | None = None
    name: str = ""
    orderindex: int | None = None
    hidden: bool | None = None
    space: dict[str, Any] | None = None
    task_count: int | str | None = None
    lists: list[TaskList] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)

    _nested: ClassVar[Mapping[str, Callable[[Any], Any]]] = {
        "lists": _many(TaskList.from_payload),
    }


@dataclass(slots=True, kw_only=True)
class Task(Record):
    """A ClickUp task. ``custom_fields`` and ``checklists`` are opaque."""

    id: str | None = None
    custom_id: str | None = None
    name: str = ""
    text_content: str | None = None
    description: str | None = None
    markdown_description: str | None = None
    status: Status | None = None
    orderindex: str | None = None
    date_created: str | None = None
    date_updated: str | None = None
    date_closed: str | None = None
    date_done: str | None = None
    creator: User | None = None
    assignees: list[User] = field(default_factory=list)
    watchers: list[User] | None = None
    checklists: list[Any] | None = None
    tags: list[dict[str, Any]] = field(default_factory=list)
    parent: str | None = None
    priority: dict[str, Any] | None = None
    due_date: str | None = None
    start_date: str | None = None
    time_estimate: int | None = None
    time_spent: int | None = None
    custom_fields: list[Any] | None = None
    list_ref: dict[str, Any] | None = field(default=None, metadata={"key": "list"})
    folder: dict[str, Any] | None = None
    space: dict[str, Any] | None = None
    url: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    _nested: ClassVar[Mapping[str, Callable[[Any], Any]]] = {
        "status": Status.from_payload,
        "creator": User.from_payload,
        "assignees": _many(User.from_payload),
        "watchers": _many(User.from_payload),
    }


@dataclass(slots=True, kw_only=True)
class Comment(Record):
    id: str | None = None
    comment_text: str | None = None
    user: User | None = None
    date: str | None = None
    resolved: bool | None = None
    assignee: User | None = None
    assigned_by: User | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    _nested: ClassVar[Mapping[str, Callable[[Any], Any]]] = {
        "user": User.from_payload,
        "assignee": User.from_payload,
        "assigned_by": User.from_payload,
    }


@dataclass(slots=True, kw_only=True)
class TimeEntry(Record):
    id: str | None = None
    task: dict[str, Any] | None = None
    wid: str | None = None
    user: User | None = None
    billable: bool | None = None
    start: str | None = None
    end: str | None = None
    duration: str | None = None
    description: str | None = None
    tags: list[Any] | None = None
    source: str | None = None
    at: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    _nested: ClassVar[Mapping[str, Callable[[Any], Any]]] = {
        "user": User.from_payload,
    }


@dataclass(slots=True)
class TaskCreate:
    """Fields accepted when creating a task. Only non-``None`` fields are sent."""

    name: str
    description: str | None = None
    markdown_description: str | None = None
    assignees: list[int] | None = None
    tags: list[str] | None = None
    status: str | None = None
    priority: int | None = None
    due_date: int | None = None
    due_date_time: bool | None = None
    start_date: int | None = None
    start_date_time: bool | None = None
    notify_all: bool | None = None
    parent: str | None = None
    links_to: str | None = None
    check_required_custom_fields: bool | None = None
    custom_fields: list[dict[str, Any]] | None = None

    def to_payload(self) -> dict[str, Any]:
        if not self.name or not self.name.strip():
            raise ValueError("Task name is required.")
        return _present_fields(self)


@dataclass(slots=True)
class TaskUpdate:
    """Partial task update.

    ``assignees`` takes ``{"add": [...], "rem": [...]}``. ``list_id`` is
    forwarded as-is; the remote service does not move tasks between lists.
    """

    name: str | None = None
    description: str | None = None
    markdown_description: str | None = None
    assignees: dict[str, list[int]] | None = None
    status: str | None = None
    priority: int | None = None
    due_date: int | None = None
    due_date_time: bool | None = None
    start_date: int | None = None
    start_date_time: bool | None = None
    parent: str | None = None
    time_estimate: int | None = None
    archived: bool | None = None
    list_id: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return _present_fields(self)


def _present_fields(instance: Any) -> dict[str, Any]:
    return {
        item.name: getattr(instance, item.name)
        for item in fields(instance)
        if getattr(instance, item.name) is not None
    }
