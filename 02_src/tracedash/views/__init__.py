"""Dashboard views."""

from .lsp_log import LSPLogDetailsView, LSPLogView
from .vector_profile import VectorProfileView, format_percentage

__all__ = [
    "LSPLogDetailsView",
    "LSPLogView",
    "VectorProfileView",
    "format_percentage",
]
