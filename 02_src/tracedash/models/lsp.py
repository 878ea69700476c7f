"""LSP log data models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class MessageCategory(str, Enum):
    """Display category of a JSON-RPC message."""

    REQUEST = "request"
    RESPONSE = "response"
    NOTIFICATION = "notification"


@dataclass
class LogEntry:
    """A parsed client-to-server JSON-RPC message, as shown in the LSP log."""

    id: int
    timestamp: int
    message: dict[str, Any]
    selected: bool = False
    has_id: bool = field(init=False)
    has_method: bool = field(init=False)
    has_error: bool = field(init=False)
    has_params: bool = field(init=False)

    def __post_init__(self) -> None:
        self.has_id = "id" in self.message
        self.has_method = "method" in self.message
        self.has_error = "error" in self.message
        self.has_params = "params" in self.message

    @property
    def category(self) -> MessageCategory | None:
        """Request, response or notification; None for a message with neither id nor method."""
        if self.has_id and self.has_method:
            return MessageCategory.REQUEST
        if self.has_id:
            return MessageCategory.RESPONSE
        if self.has_method:
            return MessageCategory.NOTIFICATION
        return None

    @property
    def summary(self) -> str:
        """One-line summary: the method name, if any."""
        if not self.has_method:
            return ""
        return str(self.message["method"])

    def css_classes(self) -> list[str]:
        classes = ["lsp-message", "lsp-client-to-server"]
        if self.category is not None:
            classes.append(f"lsp-{self.category.value}")
        if self.has_error:
            classes.append("lsp-error")
        if self.selected:
            classes.append("selected")
        return classes
