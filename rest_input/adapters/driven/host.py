"""Host name resolution, done once per process."""

import functools
import socket

__all__ = ["get_host_name"]


@functools.lru_cache(maxsize=1)
def get_host_name() -> str:
    """Return this machine's host name (cached for the process lifetime)."""
    return socket.gethostname()
