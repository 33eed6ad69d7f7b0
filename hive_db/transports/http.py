"""JSON-RPC over HTTP transport with endpoint fallback."""
import asyncio
import itertools
import logging
import ssl
from typing import Any

import aiohttp
import certifi

from ..config import NodeConfig
from ..errors import MalformedResponseError, RemoteError, TransportError

logger = logging.getLogger(__name__)


class HttpTransport:
    """Hive node RPC transport with automatic endpoint fallback.

    Connection failures, timeouts and undecodable responses move on to the
    next endpoint. An error object from the node is final and raised as
    ``RemoteError`` without trying other endpoints.
    """

    def __init__(self, config: NodeConfig) -> None:
        if not config.rpc_endpoints:
            raise ValueError("HttpTransport needs at least one RPC endpoint")
        self.endpoints = list(config.rpc_endpoints)
        self.timeout = config.rpc_timeout
        self.current_rpc_index = 0
        self._ids = itertools.count(1)

    async def invoke(self, namespace: str, method: str, params: list[Any]) -> Any:
        """Call ``namespace.method`` with fallback to alternative endpoints."""
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": "call",
            "params": [namespace, method, params],
        }

        ssl_context = ssl.create_default_context(cafile=certifi.where())

        last_error: Exception | None = None
        for attempt in range(len(self.endpoints)):
            rpc_index = (self.current_rpc_index + attempt) % len(self.endpoints)
            rpc_url = self.endpoints[rpc_index]

            try:
                connector = aiohttp.TCPConnector(ssl=ssl_context)
                async with aiohttp.ClientSession(connector=connector) as session:
                    async with session.post(
                        rpc_url,
                        json=payload,
                        timeout=aiohttp.ClientTimeout(total=self.timeout),
                    ) as response:
                        body = await response.json()
                        result = self._unwrap(body)

                        if rpc_index != self.current_rpc_index:
                            logger.info("Switched to RPC endpoint: %s", rpc_url)
                            self.current_rpc_index = rpc_index

                        return result
            except (
                aiohttp.ClientError,
                asyncio.TimeoutError,
                OSError,
                ValueError,
                MalformedResponseError,
            ) as e:
                last_error = e
                logger.warning(
                    "RPC endpoint %s failed on %s.%s: %s", rpc_url, namespace, method, e
                )
                if attempt < len(self.endpoints) - 1:
                    logger.info("Trying next endpoint...")
                continue

        raise TransportError(
            f"All RPC endpoints failed. Last error: {last_error}"
        ) from last_error

    @staticmethod
    def _unwrap(body: Any) -> Any:
        """Return the ``result`` member of a JSON-RPC response body."""
        if not isinstance(body, dict):
            raise MalformedResponseError(
                f"Expected a JSON-RPC object, got {type(body).__name__}"
            )

        if body.get("error") is not None:
            error = body["error"]
            if isinstance(error, dict):
                code = error.get("code", 0)
                try:
                    code = int(code)
                except (TypeError, ValueError):
                    pass  # keep a non-numeric code as sent
                raise RemoteError(
                    code,
                    str(error.get("message", "")),
                    error.get("data"),
                )
            raise RemoteError(0, str(error))

        if "result" not in body:
            raise MalformedResponseError("Response has neither result nor error")
        return body["result"]
