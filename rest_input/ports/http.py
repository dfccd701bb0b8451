"""HTTP port definitions (DTOs)."""

from collections.abc import Mapping
from dataclasses import dataclass, field

__all__ = ["RequestPort", "PollResult", "DEFAULT_TIMEOUT_SEC", "SUCCESS_STATUS"]

DEFAULT_TIMEOUT_SEC = 60.0
SUCCESS_STATUS = 200


@dataclass(frozen=True)
class RequestPort:
    """HTTP request issued on every poll.

    Decouples core scheduling logic from HTTP implementation details.

    Attributes:
        url: Target HTTP endpoint URL.
        headers: Static headers sent on every request.
        timeout_sec: Upper bound for the whole request (connect + read).
        method: Always GET.
        accept: Media type negotiated through the Accept header.
    """

    url: str
    headers: Mapping[str, str] = field(default_factory=dict)
    timeout_sec: float = DEFAULT_TIMEOUT_SEC
    method: str = field(default="GET", init=False)
    accept: str = field(default="application/json", init=False)


@dataclass(slots=True, frozen=True)
class PollResult:
    """Outcome of one request that reached the server.

    Attributes:
        status_code: HTTP status code of the response.
        body: Raw response body.
    """

    status_code: int
    body: bytes = b""

    @property
    def success(self) -> bool:
        """True only for status 200; other 2xx codes count as failures."""
        return self.status_code == SUCCESS_STATUS
