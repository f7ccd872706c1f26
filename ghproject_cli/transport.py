"""
Stateless GraphQL transport for GitHub Projects boards.

Every call goes through ``api.with_retry``; caching lives one layer up in
``board.BoardClient``.
"""

import time

from ghproject_cli import api, config
from ghproject_cli.exceptions import ClientError
from ghproject_cli.models import BoardContext, BoardItem
from ghproject_cli.queries import (
    ADD_PROJECT_ITEM,
    GET_ORG_PROJECT,
    GET_PROJECT_ITEMS,
    GET_USER_PROJECT,
    UPDATE_PROJECT_ITEM_FIELD,
)


def _dig(data, *keys):
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


class GraphQLTransport:
    """Board reads and writes over the GitHub GraphQL API.

    Args:
        token: GitHub token with ``repo`` and ``project`` scopes.
        endpoint: GraphQL URL; defaults to ``config.GRAPHQL_URL``.
        request_fn: ``(query, variables, *, token, url) -> data``; defaults
            to ``api.graphql_request``.
        max_retries, retry_base_seconds, retry_max_seconds, sleeper: passed
            to ``api.with_retry``; None means the config default.
        status_field_name: name of the single-select status field.
        clock: returns the capture timestamp for fetched boards.
    """

    def __init__(
        self,
        token,
        *,
        endpoint=None,
        request_fn=None,
        max_retries=None,
        retry_base_seconds=None,
        retry_max_seconds=None,
        sleeper=None,
        status_field_name=None,
        clock=time.time,
        page_size=None,
    ):
        self.token = token
        self.endpoint = endpoint
        self._request_fn = request_fn
        self.max_retries = max_retries
        self.retry_base_seconds = retry_base_seconds
        self.retry_max_seconds = retry_max_seconds
        self.sleeper = sleeper
        self.status_field_name = status_field_name or config.STATUS_FIELD_NAME
        self.clock = clock
        self.page_size = page_size or config.ITEMS_PAGE_SIZE

    def _execute(self, query, variables, operation):
        request = self._request_fn or api.graphql_request

        def attempt():
            return request(query, variables, token=self.token, url=self.endpoint)

        return api.with_retry(
            attempt,
            max_retries=self.max_retries,
            base_seconds=self.retry_base_seconds,
            max_seconds=self.retry_max_seconds,
            sleeper=self.sleeper,
            operation=operation,
        )

    def fetch_board(self, org, project_number, is_org=True):
        """Fetch board metadata, trying the other owner type if not found."""
        variables = {"login": org, "number": int(project_number)}
        lookups = [(GET_ORG_PROJECT, "organization"), (GET_USER_PROJECT, "user")]
        if not is_org:
            lookups.reverse()
        for query, owner_key in lookups:
            data = self._execute(query, variables, "fetch_board")
            project = _dig(data, owner_key, "projectV2")
            if project:
                return BoardContext.from_project(project, self.status_field_name, self.clock())
        raise ClientError(
            f"[ERROR] Project #{project_number} not found for {org}. "
            "Ensure the project exists and your token has access."
        )

    def fetch_items(self, board_id):
        """All items on the board, following the pagination cursor."""
        items = []
        cursor = None
        while True:
            data = self._execute(
                GET_PROJECT_ITEMS,
                {"projectId": board_id, "first": self.page_size, "after": cursor},
                "fetch_items",
            )
            connection = _dig(data, "node", "items")
            if not connection:
                break
            items.extend(BoardItem.from_node(n) for n in connection.get("nodes") or [] if n)
            page_info = connection.get("pageInfo") or {}
            cursor = page_info.get("endCursor")
            if not page_info.get("hasNextPage") or not cursor:
                break
        return items

    def update_item_status(self, board_id, item_id, field_id, option_id):
        data = self._execute(
            UPDATE_PROJECT_ITEM_FIELD,
            {
                "projectId": board_id,
                "itemId": item_id,
                "fieldId": field_id,
                "singleSelectOptionId": option_id,
            },
            "update_item_status",
        )
        updated = _dig(data, "updateProjectV2ItemFieldValue", "projectV2Item", "id")
        if not updated:
            raise ClientError("[ERROR] Status update returned no item.")
        return updated

    def add_item(self, board_id, content_id):
        data = self._execute(
            ADD_PROJECT_ITEM,
            {"projectId": board_id, "contentId": content_id},
            "add_item",
        )
        item_id = _dig(data, "addProjectV2ItemById", "item", "id")
        if not item_id:
            raise ClientError("[ERROR] Adding the item returned no item id.")
        return item_id
