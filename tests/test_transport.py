"""Tests for transport.py — GraphQL board reads/writes, pagination, retries."""

import pytest

from ghproject_cli.exceptions import ClientError
from ghproject_cli.queries import (
    ADD_PROJECT_ITEM,
    GET_ORG_PROJECT,
    GET_PROJECT_ITEMS,
    GET_USER_PROJECT,
    UPDATE_PROJECT_ITEM_FIELD,
)
from ghproject_cli.transport import GraphQLTransport

PROJECT_NODE = {
    "id": "PVT_1",
    "title": "Roadmap",
    "number": 7,
    "url": "https://github.com/orgs/acme/projects/7",
    "fields": {
        "nodes": [
            {"__typename": "ProjectV2Field", "id": "F_title", "name": "Title", "dataType": "TITLE"},
            {
                "__typename": "ProjectV2SingleSelectField",
                "id": "F_status",
                "name": "Status",
                "dataType": "SINGLE_SELECT",
                "options": [
                    {"id": "o1", "name": "Todo"},
                    {"id": "o2", "name": "In Progress"},
                    {"id": "o3", "name": "Done"},
                ],
            },
        ]
    },
}


def _item_node(n):
    return {
        "id": f"PVTI_{n}",
        "fieldValues": {"nodes": [{"name": "Todo", "optionId": "o1", "field": {"name": "Status"}}]},
        "content": {"__typename": "Issue", "id": f"I_{n}", "number": n, "title": f"Task {n}"},
    }


class FakeGraphQL:
    """Scripted request_fn: each call pops the next response (dict or exception)."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def __call__(self, query, variables, *, token, url=None):
        self.calls.append((query, variables, token))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def _transport(fake, **kwargs):
    sleeps = []
    kwargs.setdefault("max_retries", 2)
    kwargs.setdefault("retry_base_seconds", 1.0)
    t = GraphQLTransport(
        "fake-token",
        request_fn=fake,
        sleeper=sleeps.append,
        clock=lambda: 500.0,
        **kwargs,
    )
    return t, sleeps


class TestFetchBoard:
    def test_org_project(self):
        fake = FakeGraphQL({"organization": {"projectV2": PROJECT_NODE}})
        transport, _ = _transport(fake)
        board = transport.fetch_board("acme", 7, is_org=True)
        assert board.board_id == "PVT_1"
        assert board.status_field_id == "F_status"
        assert board.status_options == {"todo": "o1", "in progress": "o2", "done": "o3"}
        assert board.status_names == ["Todo", "In Progress", "Done"]
        assert board.captured_at == 500.0
        query, variables, token = fake.calls[0]
        assert query == GET_ORG_PROJECT
        assert variables == {"login": "acme", "number": 7}
        assert token == "fake-token"

    def test_falls_back_to_user(self):
        fake = FakeGraphQL(
            {"organization": None},
            {"user": {"projectV2": PROJECT_NODE}},
        )
        transport, _ = _transport(fake)
        board = transport.fetch_board("ana", 7, is_org=True)
        assert board.title == "Roadmap"
        assert [c[0] for c in fake.calls] == [GET_ORG_PROJECT, GET_USER_PROJECT]

    def test_user_first_when_not_org(self):
        fake = FakeGraphQL({"user": {"projectV2": PROJECT_NODE}})
        transport, _ = _transport(fake)
        transport.fetch_board("ana", 7, is_org=False)
        assert fake.calls[0][0] == GET_USER_PROJECT

    def test_not_found(self):
        fake = FakeGraphQL({"organization": {"projectV2": None}}, {"user": None})
        transport, _ = _transport(fake)
        with pytest.raises(ClientError) as exc_info:
            transport.fetch_board("acme", 99)
        assert "Project #99 not found" in str(exc_info.value)
        assert exc_info.value.retryable is False

    def test_missing_status_field(self):
        project = dict(PROJECT_NODE, fields={"nodes": PROJECT_NODE["fields"]["nodes"][:1]})
        fake = FakeGraphQL({"organization": {"projectV2": project}})
        transport, _ = _transport(fake)
        with pytest.raises(ClientError) as exc_info:
            transport.fetch_board("acme", 7)
        assert "No Status field" in str(exc_info.value)

    def test_custom_status_field_name(self):
        fields = [dict(PROJECT_NODE["fields"]["nodes"][1], name="Stage")]
        project = dict(PROJECT_NODE, fields={"nodes": fields})
        fake = FakeGraphQL({"organization": {"projectV2": project}})
        transport, _ = _transport(fake, status_field_name="stage")
        assert transport.fetch_board("acme", 7).status_field_id == "F_status"


class TestFetchItems:
    def test_paginates_in_order(self):
        fake = FakeGraphQL(
            {
                "node": {
                    "items": {
                        "pageInfo": {"hasNextPage": True, "endCursor": "c1"},
                        "nodes": [_item_node(1), _item_node(2)],
                    }
                }
            },
            {
                "node": {
                    "items": {
                        "pageInfo": {"hasNextPage": False, "endCursor": "c2"},
                        "nodes": [_item_node(3), None],
                    }
                }
            },
        )
        transport, _ = _transport(fake, page_size=2)
        items = transport.fetch_items("PVT_1")
        assert [i.number for i in items] == [1, 2, 3]
        assert items[0].status() == "Todo"
        assert [c[1]["after"] for c in fake.calls] == [None, "c1"]
        assert all(c[0] == GET_PROJECT_ITEMS and c[1]["first"] == 2 for c in fake.calls)

    def test_missing_node(self):
        fake = FakeGraphQL({"node": None})
        transport, _ = _transport(fake)
        assert transport.fetch_items("PVT_gone") == []

    def test_lowercase_status_field_name_reads_item_status(self):
        fake = FakeGraphQL(
            {"organization": {"projectV2": PROJECT_NODE}},
            {
                "node": {
                    "items": {
                        "pageInfo": {"hasNextPage": False, "endCursor": None},
                        "nodes": [_item_node(1)],
                    }
                }
            },
        )
        transport, _ = _transport(fake, status_field_name="status")
        board = transport.fetch_board("acme", 7)
        items = transport.fetch_items(board.board_id)
        assert board.status_field_id == "F_status"
        assert items[0].status("status") == "Todo"


class TestMutations:
    def test_update_item_status(self):
        fake = FakeGraphQL({"updateProjectV2ItemFieldValue": {"projectV2Item": {"id": "PVTI_1"}}})
        transport, _ = _transport(fake)
        assert transport.update_item_status("PVT_1", "PVTI_1", "F_status", "o3") == "PVTI_1"
        query, variables, _ = fake.calls[0]
        assert query == UPDATE_PROJECT_ITEM_FIELD
        assert variables == {
            "projectId": "PVT_1",
            "itemId": "PVTI_1",
            "fieldId": "F_status",
            "singleSelectOptionId": "o3",
        }

    def test_update_without_item(self):
        fake = FakeGraphQL({"updateProjectV2ItemFieldValue": None})
        transport, _ = _transport(fake)
        with pytest.raises(ClientError):
            transport.update_item_status("PVT_1", "PVTI_1", "F_status", "o3")

    def test_add_item(self):
        fake = FakeGraphQL({"addProjectV2ItemById": {"item": {"id": "PVTI_9"}}})
        transport, _ = _transport(fake)
        assert transport.add_item("PVT_1", "I_9") == "PVTI_9"
        assert fake.calls[0][0] == ADD_PROJECT_ITEM
        assert fake.calls[0][1] == {"projectId": "PVT_1", "contentId": "I_9"}


class TestRetries:
    def test_retries_transient_failure(self):
        fake = FakeGraphQL(
            ClientError("[ERROR] HTTP 502", status_code=502, retryable=True),
            {"organization": {"projectV2": PROJECT_NODE}},
        )
        transport, sleeps = _transport(fake)
        assert transport.fetch_board("acme", 7).board_id == "PVT_1"
        assert len(fake.calls) == 2
        assert sleeps == [1.0]

    def test_no_retry_on_client_error(self):
        fake = FakeGraphQL(ClientError("[ERROR] HTTP 404", status_code=404))
        transport, sleeps = _transport(fake)
        with pytest.raises(ClientError):
            transport.add_item("PVT_1", "I_9")
        assert len(fake.calls) == 1
        assert sleeps == []

    def test_exhaustion_raises_last_error(self):
        errors = [
            ClientError(f"[ERROR] attempt {n}", status_code=503, retryable=True) for n in range(3)
        ]
        fake = FakeGraphQL(*errors)
        transport, sleeps = _transport(fake)
        with pytest.raises(ClientError) as exc_info:
            transport.fetch_items("PVT_1")
        assert exc_info.value is errors[-1]
        assert exc_info.value.retryable is True
        assert exc_info.value.status_code == 503
        assert sleeps == [1.0, 2.0]

    def test_retry_mid_pagination_keeps_pages(self):
        fake = FakeGraphQL(
            {
                "node": {
                    "items": {
                        "pageInfo": {"hasNextPage": True, "endCursor": "c1"},
                        "nodes": [_item_node(1)],
                    }
                }
            },
            ClientError("[ERROR] Rate limited", status_code=429, retryable=True, retry_after=3),
            {
                "node": {
                    "items": {
                        "pageInfo": {"hasNextPage": False, "endCursor": None},
                        "nodes": [_item_node(2)],
                    }
                }
            },
        )
        transport, sleeps = _transport(fake)
        assert [i.number for i in transport.fetch_items("PVT_1")] == [1, 2]
        assert sleeps == [3.0]
        assert fake.calls[2][1]["after"] == "c1"
