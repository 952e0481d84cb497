"""Tests for the authenticated JSON transport."""

from __future__ import annotations

import httpx
import pytest

from clickup_cli.http.transport import ApiTransport, RemoteApiError


class TestApiTransport:
    def test_sends_api_key_and_json_content_type(
        self,
        fake_api,
        transport: ApiTransport,
    ):
        fake_api.add("GET", "/user", {"user": {"id": 1}})

        assert transport.request("GET", "/user") == {"user": {"id": 1}}

        request = fake_api.requests[0]
        assert request.headers["Authorization"] == "pk_test"
        assert request.headers["Content-Type"] == "application/json"
        assert str(request.url) == "https://api.clickup.com/api/v2/user"

    def test_encodes_body_as_json(self, fake_api, transport: ApiTransport):
        fake_api.add("POST", "/list/L1/task", {"id": "t1"})

        transport.request("POST", "/list/L1/task", body={"name": "Write docs", "priority": 2})

        assert fake_api.body(fake_api.requests[0]) == {"name": "Write docs", "priority": 2}

    def test_repeats_list_query_pairs(self, fake_api, transport: ApiTransport):
        fake_api.add("GET", "/list/L1/task", {"tasks": []})

        transport.request(
            "GET",
            "/list/L1/task",
            params=[("statuses[]", "open"), ("statuses[]", "review")],
        )

        assert fake_api.requests[0].url.params.get_list("statuses[]") == ["open", "review"]

    def test_non_success_status_raises_with_body(
        self,
        fake_api,
        transport: ApiTransport,
    ):
        fake_api.add("GET", "/task/missing-id", '{"err":"Task not found"}', status=404)

        with pytest.raises(RemoteApiError) as caught:
            transport.request("GET", "/task/missing-id")

        assert caught.value.status_code == 404
        assert caught.value.body == '{"err":"Task not found"}'
        assert caught.value.method == "GET"
        assert caught.value.path == "/task/missing-id"
        assert "404" in str(caught.value)
        assert "Task not found" in str(caught.value)

    def test_empty_body_decodes_to_empty_dict(
        self,
        fake_api,
        transport: ApiTransport,
    ):
        fake_api.add("DELETE", "/task/t1", handler=lambda _request: httpx.Response(204))

        assert transport.request("DELETE", "/task/t1") == {}

    def test_transport_errors_propagate(self):
        def _refuse(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with (
            ApiTransport(api_key="pk_test", transport=httpx.MockTransport(_refuse)) as api,
            pytest.raises(httpx.ConnectError),
        ):
            api.request("GET", "/user")

    def test_custom_base_url_is_used(self, fake_api):
        fake_api.add("GET", "/user", {"user": {}})
        with ApiTransport(
            api_key="pk_test",
            base_url="http://localhost:9999/api/v2/",
            transport=httpx.MockTransport(fake_api.handle),
        ) as api:
            api.request("GET", "/user")

        assert str(fake_api.requests[0].url) == "http://localhost:9999/api/v2/user"
