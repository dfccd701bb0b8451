"""Error taxonomy for the REST input."""

__all__ = ["RestInputError", "ConfigurationError", "TransportError", "DecodeError"]


class RestInputError(Exception):
    """Base class for all REST input errors."""


class ConfigurationError(RestInputError, ValueError):
    """Invalid or missing configuration (bad URL, bad cron expression, ...).

    Fatal at startup: raised before any request is issued.
    """


class TransportError(RestInputError):
    """Request never produced an HTTP response (timeout, DNS, refused, TLS).

    HTTP error statuses are NOT transport errors; they are returned as data.
    """


class DecodeError(RestInputError, ValueError):
    """Response body could not be decoded by the codec."""
