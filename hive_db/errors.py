"""Error taxonomy for database API calls."""
from __future__ import annotations

from typing import Any


class HiveError(Exception):
    """Base class for every error raised by this package."""


class ValidationError(HiveError, ValueError):
    """Call arguments rejected locally, before anything is sent."""

    def __init__(self, field: str, constraint: str) -> None:
        self.field = field
        self.constraint = constraint
        super().__init__(f"{field}: {constraint}")


class TransportError(HiveError):
    """The remote node could not be reached or did not answer usefully."""


class MalformedResponseError(TransportError):
    """A response was received but does not have the expected shape."""


class RemoteError(HiveError):
    """The node answered with an explicit JSON-RPC error object."""

    def __init__(self, code: int | str, message: str, data: Any = None) -> None:
        self.code = code
        self.message = message
        self.data = data
        super().__init__(code, message)

    def __str__(self) -> str:
        if self.data:
            return f"code={self.code}, message={self.message}, data={self.data}"
        return f"code={self.code}, message={self.message}"


class NotFoundError(HiveError):
    """A lookup that expects an existing object found nothing."""

    def __init__(self, kind: str, key: str, remote: RemoteError | None = None) -> None:
        self.kind = kind
        self.key = key
        self.remote = remote
        super().__init__(f"{kind} not found: {key}")
