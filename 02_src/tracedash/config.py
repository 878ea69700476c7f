"""Project-level configuration and path helpers."""

import os
from dataclasses import dataclass
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_LOG_PATH = LOGS_DIR / "app.log"

DEFAULT_DEBUG_SERVER_URL = "http://localhost:9000/"
TRACE_PATH = "/api/trace"
VECTOR_PROFILER_STATS_PATH = "/vector-profiler-stats"
DEFAULT_POLL_INTERVAL = 1.0


def env_flag(name: str, default: bool = False) -> bool:
    """Read a boolean environment variable ("1", "true", "yes", "on")."""
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """Runtime settings for the dashboard."""

    debug_server_url: str = DEFAULT_DEBUG_SERVER_URL
    poll_interval: float = DEFAULT_POLL_INTERVAL
    debug_lsp_log: bool = False
    api_host: str = "localhost"
    api_port: int = 8000

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables."""
        return cls(
            debug_server_url=os.getenv("DEBUG_SERVER_URL", DEFAULT_DEBUG_SERVER_URL),
            poll_interval=float(os.getenv("POLL_INTERVAL", str(DEFAULT_POLL_INTERVAL))),
            debug_lsp_log=env_flag("DEBUG_LSP_LOG"),
            api_host=os.getenv("API_HOST", "localhost"),
            api_port=int(os.getenv("API_PORT", "8000")),
        )
