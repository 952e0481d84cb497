"""Tests for payload records."""

from __future__ import annotations

import pytest

from clickup_cli.api.models import Folder, Task, TaskCreate, TaskUpdate, User


class TestRecords:
    def test_unknown_fields_are_kept_in_extra(self):
        payload = {
            "id": "t1",
            "name": "Ship it",
            "custom_fields": [{"id": "cf1", "value": {"nested": [1, 2]}}],
            "points": 3,
            "sharing": {"public": False},
        }

        task = Task.from_payload(payload)

        assert task.custom_fields == [{"id": "cf1", "value": {"nested": [1, 2]}}]
        assert task.extra == {"points": 3, "sharing": {"public": False}}
        assert task.to_dict()["points"] == 3

    def test_nested_records_are_built(self):
        task = Task.from_payload(
            {
                "id": "t1",
                "status": {"status": "review", "color": "#fff"},
                "creator": {"id": 7, "email": "dev@example.com"},
                "assignees": [{"id": 1, "username": "ann"}, {"id": 2}],
                "list": {"id": "L1", "name": "Sprint"},
            },
        )

        assert task.status is not None
        assert task.status.status == "review"
        assert task.creator is not None
        assert task.creator.display_name == "dev@example.com"
        assert [user.id for user in task.assignees] == [1, 2]
        assert task.list_ref == {"id": "L1", "name": "Sprint"}

    def test_to_dict_uses_remote_names_and_omits_none(self):
        payload = {
            "id": "t1",
            "name": "Ship it",
            "list": {"id": "L1"},
            "assignees": [{"id": 1, "profilePicture": None}],
            "tags": [],
        }

        assert Task.from_payload(payload).to_dict() == {
            "id": "t1",
            "name": "Ship it",
            "list": {"id": "L1"},
            "assignees": [{"id": 1}],
            "tags": [],
        }

    def test_folder_lists_are_records(self):
        folder = Folder.from_payload({"id": "F1", "name": "Backend", "lists": [{"id": "L1"}]})

        assert folder.lists[0].id == "L1"
        assert folder.to_dict()["lists"] == [{"id": "L1", "name": ""}]

    def test_display_name_prefers_username(self):
        assert User(username="ann", email="ann@example.com").display_name == "ann"
        assert User().display_name is None


class TestWritePayloads:
    def test_create_payload_skips_unset_fields(self):
        payload = TaskCreate(name="Write docs", priority=3, tags=["docs"]).to_payload()

        assert payload == {"name": "Write docs", "priority": 3, "tags": ["docs"]}

    def test_create_requires_a_name(self):
        with pytest.raises(ValueError, match="Task name is required"):
            TaskCreate(name="").to_payload()

    def test_update_payload_keeps_false_values(self):
        payload = TaskUpdate(archived=False, assignees={"add": [1], "rem": []}).to_payload()

        assert payload == {"assignees": {"add": [1], "rem": []}, "archived": False}

    def test_empty_update_has_empty_payload(self):
        assert TaskUpdate().to_payload() == {}
