"""Errors raised at the boundaries of the funnel core.

Structural store operations never raise for input the editor can produce.
These errors are reserved for node creation with an unknown kind, document
decoding and host storage access.
"""

from __future__ import annotations


class FunnelError(RuntimeError):
    """Base error carrying a user-facing message and an HTTP status."""

    status_code: int = 400

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.__class__.__name__
        super().__init__(self.message)


class UnknownNodeKind(FunnelError):
    status_code = 400

    def __init__(self, kind: object) -> None:
        self.kind = kind
        super().__init__(f"Template not found for node type: {kind}")


class MalformedDocument(FunnelError):
    status_code = 400


class InvalidEncoding(FunnelError):
    status_code = 400


class StorageUnavailable(FunnelError):
    status_code = 503
