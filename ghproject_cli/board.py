"""
Board client: TTL cache of board metadata over a retrying transport.
"""

import time


class BoardCache:
    """Key -> value store whose entries expire ``ttl_seconds`` after insert."""

    def __init__(self, ttl_seconds, clock=time.time):
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._entries = {}

    def get(self, key):
        entry = self._entries.get(key)
        if entry is None:
            return None
        stored_at, value = entry
        if self.clock() - stored_at >= self.ttl_seconds:
            del self._entries[key]
            return None
        return value

    def put(self, key, value):
        self._entries[key] = (self.clock(), value)

    def invalidate(self, key=None):
        """Drop one key, or everything when ``key`` is None."""
        if key is None:
            self._entries.clear()
        else:
            self._entries.pop(key, None)

    def __len__(self):
        return len(self._entries)


class BoardClient:
    """Supplies board state to the updater.

    Board metadata is cached per ``(org, project_number)``; items are always
    fetched fresh. The transport is any object with ``fetch_board``,
    ``fetch_items``, ``update_item_status`` and ``add_item``.
    """

    def __init__(self, transport, *, cache_ttl=3600.0, clock=time.time):
        self.transport = transport
        self.cache = BoardCache(cache_ttl, clock=clock)

    def get_board(self, org, project_number, is_org=True, force_refresh=False):
        key = (org, int(project_number))
        if not force_refresh:
            cached = self.cache.get(key)
            if cached is not None:
                return cached
        board = self.transport.fetch_board(org, project_number, is_org)
        self.cache.put(key, board)
        return board

    def get_items(self, board_id):
        return self.transport.fetch_items(board_id)

    def update_item_status(self, board_id, item_id, field_id, option_id):
        return self.transport.update_item_status(board_id, item_id, field_id, option_id)

    def add_item(self, board_id, content_id):
        return self.transport.add_item(board_id, content_id)

    def clear_cache(self):
        self.cache.invalidate()
