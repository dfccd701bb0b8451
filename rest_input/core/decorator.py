"""Turn a poll result into decorated events pushed to the sink."""

import logging

from rest_input.core.errors import DecodeError
from rest_input.ports.events import CodecPort, DecorateFn, Event, SinkPort
from rest_input.ports.http import PollResult, RequestPort

__all__ = ["Decorator"]

logger = logging.getLogger(__name__)


def _no_decoration(event: Event) -> Event:
    return event


class Decorator:
    """Decode, stamp provenance metadata and forward events.

    Every event receives meta_name, meta_host, meta_url, meta_success and
    meta_responseCode before the decoration hook runs, whatever the status.
    """

    def __init__(
        self,
        *,
        name: str,
        host: str,
        codec: CodecPort,
        sink: SinkPort,
        decorate: DecorateFn | None = None,
    ) -> None:
        """Initialize decorator.

        Args:
            name: Symbolic name for meta_name.
            host: Host name resolved once at startup.
            codec: Decoder for response bodies.
            sink: Destination for finished events.
            decorate: Optional pipeline hook applied before push.
        """
        self.name = name
        self.host = host
        self.codec = codec
        self.sink = sink
        self.decorate = decorate or _no_decoration

    def decorate_and_emit(self, result: PollResult, request: RequestPort) -> int:
        """Decode result body and push one event per payload.

        A malformed body drops the whole response: nothing is pushed.

        Args:
            result: Response captured by the poller.
            request: Request that produced the response.

        Returns:
            Number of events pushed.
        """
        try:
            payloads = list(self.codec.decode(result.body))
        except DecodeError as e:
            logger.warning(
                f"Dropping response from {request.url} "
                f"(status {result.status_code}): {e}"
            )
            return 0

        for payload in payloads:
            event: Event = payload
            event["meta_name"] = self.name
            event["meta_host"] = self.host
            event["meta_url"] = request.url
            event["meta_success"] = result.success
            event["meta_responseCode"] = result.status_code

            decorated = self.decorate(event)
            self.sink.push(event if decorated is None else decorated)

        logger.debug(f"Pushed {len(payloads)} event(s) from {request.url}")
        return len(payloads)
