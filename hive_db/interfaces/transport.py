"""Transport protocol: the one capability the database API depends on."""
from typing import Any, Protocol


class Transport(Protocol):
    """Abstract interface for dispatching a named remote call.

    Implementations raise ``TransportError`` when the node cannot be reached
    and ``RemoteError`` when it answers with an error object.
    """

    async def invoke(self, namespace: str, method: str, params: list[Any]) -> Any: ...
