"""LSP message log and its details pane."""

import json
from typing import Any

from ..logging_config import get_logger
from ..models import LogEntry

logger = get_logger(__name__)


class LSPLogDetailsView:
    """Parameters of the selected message: names sorted, values pretty-printed."""

    def __init__(self):
        self.params: list[tuple[str, str]] = []

    def set_message(self, message: dict[str, Any]) -> None:
        self.params = []
        if "params" not in message:
            return

        params = message["params"]
        if isinstance(params, dict):
            items = {str(name): value for name, value in params.items()}
        elif isinstance(params, list):
            items = {str(index): value for index, value in enumerate(params)}
        else:
            return

        for name in sorted(items):
            self.params.append((name, json.dumps(items[name], indent=2, ensure_ascii=False)))


class LSPLogView:
    """Client-to-server LSP messages, in arrival order, with single selection."""

    def __init__(self, details_view: LSPLogDetailsView | None = None):
        self.details_view = details_view if details_view is not None else LSPLogDetailsView()
        self._entries: dict[int, LogEntry] = {}  # Key is the entry handle
        self._next_id = 1
        self._selected: LogEntry | None = None

    @property
    def entries(self) -> list[LogEntry]:
        return list(self._entries.values())

    @property
    def selected(self) -> LogEntry | None:
        return self._selected

    def get(self, entry_id: int) -> LogEntry | None:
        return self._entries.get(entry_id)

    def add_client_to_server_message(self, timestamp: int, body: bytes | str) -> LogEntry | None:
        """Parse body as JSON-RPC and append it. Malformed bodies are logged and dropped."""
        try:
            message = json.loads(body)
        except ValueError as e:
            logger.warning("Dropping malformed LSP message body: %s", e)
            return None
        if not isinstance(message, dict):
            logger.warning("Dropping non-object LSP message: %s", type(message).__name__)
            return None

        entry = LogEntry(id=self._next_id, timestamp=timestamp, message=message)
        self._next_id += 1
        self._entries[entry.id] = entry
        return entry

    def select(self, entry_id: int) -> LogEntry | None:
        """Select an entry by handle. Unknown handles leave the selection alone."""
        entry = self._entries.get(entry_id)
        if entry is None:
            return None

        if self._selected is not None:
            self._selected.selected = False
        entry.selected = True
        self._selected = entry

        self.details_view.set_message(entry.message)
        return entry
