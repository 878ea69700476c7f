"""Vector profile polling loop."""

from .poller import VectorProfilePoller, server_origin

__all__ = ["VectorProfilePoller", "server_origin"]
