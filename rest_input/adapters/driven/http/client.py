"""HTTP client adapter executing the poll request."""

import asyncio
import logging
from types import TracebackType

import aiohttp
from aiohttp import ClientTimeout

from rest_input.core.errors import TransportError
from rest_input.ports.http import PollResult, RequestPort

__all__ = ["HttpClient", "TRANSPORT_ERRORS"]

logger = logging.getLogger(__name__)

# Failures where no HTTP response was received
TRANSPORT_ERRORS = (
    aiohttp.ClientError,  # Connection refused, DNS failed, TLS, payload errors
    asyncio.TimeoutError,  # Total timeout exceeded
)


class HttpClient:
    """HTTP client issuing the configured GET request.

    Features:
    - Every received response becomes a PollResult, whatever its status.
    - Connection-level failures are raised as TransportError.
    - Context manager for proper resource cleanup.
    """

    def __init__(self) -> None:
        """Initialize HTTP client (session opened on enter)."""
        self.session: aiohttp.ClientSession | None = None

    async def __aenter__(self) -> "HttpClient":
        """Enter async context manager (start session).

        Returns:
            Self for use in async with statement.
        """
        self.session = aiohttp.ClientSession()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        """Exit async context manager (close session).

        Args:
            exc_type: Exception type if raised in context.
            exc: Exception instance if raised in context.
            tb: Traceback if raised in context.
        """
        if self.session:
            await self.session.close()

    @staticmethod
    def build_headers(req: RequestPort) -> dict[str, str]:
        """Merge the Accept header with configured headers (configured win).

        Args:
            req: Request definition.

        Returns:
            Headers to send.
        """
        return {"Accept": req.accept, **req.headers}

    async def get(self, req: RequestPort) -> PollResult:
        """Send the GET request and capture status and body.

        Args:
            req: Request definition.

        Returns:
            Poll result for any HTTP status (2xx, 4xx and 5xx alike).

        Raises:
            RuntimeError: If session not initialized.
            TransportError: On timeout, DNS, connection or TLS failure.
        """
        if self.session is None:
            raise RuntimeError("Session not initialized; use 'async with' context manager")

        client_timeout = ClientTimeout(total=req.timeout_sec)
        try:
            resp = await self.session.request(
                req.method,
                req.url,
                headers=self.build_headers(req),
                timeout=client_timeout,
                allow_redirects=True,
            )
            body = await resp.read()
        except TRANSPORT_ERRORS as e:
            raise TransportError(
                f"{req.method} {req.url} failed: {type(e).__name__}: {e}"
            ) from e

        logger.debug(f"{req.method} {req.url} -> {resp.status} ({len(body)} bytes)")
        return PollResult(status_code=resp.status, body=body)
