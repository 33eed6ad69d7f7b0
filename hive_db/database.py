"""Typed facade over a node's ``database_api``."""
from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any, Iterable

from .errors import MalformedResponseError, NotFoundError, RemoteError, ValidationError
from .interfaces.transport import Transport
from .models import (
    DiscussionQuery,
    DiscussionSortKey,
    HistoryEntry,
    OperationBitmaskFilter,
)
from .normalizer import normalize

NAMESPACE = "database_api"

_UNKNOWN_TRANSACTION_RE = re.compile(
    r"unknown transaction|unable to find transaction", re.IGNORECASE
)
_MISSING_AUTHORITY_RE = re.compile(
    r"missing (?:required )?(?:active|owner|posting) authority|tx_missing_\w+_auth",
    re.IGNORECASE,
)


def _expect(method: str, result: Any, *kinds: type | None) -> Any:
    """Raise ``MalformedResponseError`` unless ``result`` is one of ``kinds``."""
    for kind in kinds:
        if kind is None and result is None:
            return result
        if kind is not None and isinstance(result, kind):
            return result
    names = " or ".join("null" if k is None else k.__name__ for k in kinds)
    raise MalformedResponseError(
        f"{method}: expected {names}, got {type(result).__name__}"
    )


def _cursor(query: DiscussionQuery | Mapping[str, Any]) -> tuple[Any, Any]:
    if isinstance(query, Mapping):
        return query.get("start_author"), query.get("start_permlink")
    return query.start_author, query.start_permlink


class DatabaseAPI:
    """Query surface of a Hive node: accounts, blocks, posts and history.

    Holds a reference to a :class:`~hive_db.interfaces.Transport` and never
    manages its lifecycle. Arguments are checked locally and raise
    ``ValidationError`` before anything is sent; transport failures propagate
    unchanged; error objects from the node surface as ``RemoteError``.
    Instances keep no mutable state and may be shared between tasks.
    """

    def __init__(self, transport: Transport) -> None:
        self._transport = transport

    @property
    def transport(self) -> Transport:
        return self._transport

    async def _call(self, method: str, **values: Any) -> Any:
        params = normalize(method, **values)
        return await self._transport.invoke(NAMESPACE, method, params)

    # ------------------------------------------------------------------
    # Chain state
    # ------------------------------------------------------------------

    async def get_dynamic_global_properties(self) -> dict[str, Any]:
        """Return the chain head state (head block, supply, ...)."""
        method = "get_dynamic_global_properties"
        return _expect(method, await self._call(method), dict)

    async def get_chain_properties(self) -> dict[str, Any]:
        """Return median chain properties decided by the witnesses."""
        method = "get_chain_properties"
        return _expect(method, await self._call(method), dict)

    async def get_state(self, path: str) -> dict[str, Any] | list[Any]:
        """Return all of the state required for a particular url path.

        Args:
            path: Path component of a url, e.g. ``@almost-digital`` or
                ``trending/travel``. The returned blob is not inspected.
        """
        return _expect("get_state", await self._call("get_state", path=path), dict, list)

    async def get_current_median_history_price(self) -> dict[str, Any]:
        """Return the median HBD price of 1 HIVE as ``{"base": ..., "quote": ...}``."""
        method = "get_current_median_history_price"
        return _expect(method, await self._call(method), dict)

    async def get_config(self) -> dict[str, Any]:
        """Return the node's compile-time configuration values, uncoerced."""
        return _expect("get_config", await self._call("get_config"), dict)

    async def get_version(self) -> dict[str, Any]:
        """Return the node's version descriptor (blockchain version, chain id)."""
        return _expect("get_version", await self._call("get_version"), dict)

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    async def get_block_header(self, block_num: int) -> dict[str, Any] | None:
        """Return the header of ``block_num``, or ``None`` past the chain head."""
        result = await self._call("get_block_header", block_num=block_num)
        return _expect("get_block_header", result, dict, None)

    async def get_block(self, block_num: int) -> dict[str, Any] | None:
        """Return block ``block_num``, or ``None`` past the chain head."""
        result = await self._call("get_block", block_num=block_num)
        return _expect("get_block", result, dict, None)

    async def get_operations(
        self, block_num: int, only_virtual: bool | None = None
    ) -> list[dict[str, Any]]:
        """Return the operations applied in ``block_num``, in on-chain order.

        With ``only_virtual`` the node returns just the virtual operations,
        in the same relative order. Unset means ``False``.
        """
        result = await self._call(
            "get_ops_in_block", block_num=block_num, only_virtual=only_virtual
        )
        return _expect("get_ops_in_block", result, list)

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    async def get_accounts(self, usernames: Iterable[str]) -> list[dict[str, Any]]:
        """Return account objects for ``usernames``.

        Unknown names are simply absent and the result order may differ from
        the input order.
        """
        result = await self._call("get_accounts", usernames=usernames)
        return _expect("get_accounts", result, list)

    async def get_vesting_delegations(
        self, account: str, from_: str = "", limit: int | None = None
    ) -> list[dict[str, Any]]:
        """Return delegations made by ``account``, ordered by delegatee.

        Args:
            account: Delegating account.
            from_: Delegatee to start from; empty starts at the beginning.
            limit: Number of results, at most 1000 (the default).
        """
        result = await self._call(
            "get_vesting_delegations", account=account, from_=from_, limit=limit
        )
        return _expect("get_vesting_delegations", result, list)

    async def get_account_history(
        self,
        account: str,
        from_: int,
        limit: int,
        operation_filter: OperationBitmaskFilter | tuple[int, int] | None = None,
    ) -> list[HistoryEntry]:
        """Return history entries of ``account``, newest first.

        History is walked backward from sequence number ``from_`` (``-1`` for
        the newest entry). ``limit`` may not exceed ``from_ + 1``.

        ``operation_filter`` (see :func:`~hive_db.bitmask.make_bitmask_filter`)
        is applied by the node. Depending on the node version ``limit`` counts
        entries before or after filtering, so a filtered page can hold fewer
        than ``limit`` entries even when older matches exist. Callers needing
        exact counts should over-fetch without a filter and filter locally.
        """
        method = "get_account_history"
        result = _expect(
            method,
            await self._call(
                method,
                account=account,
                from_=from_,
                limit=limit,
                operation_filter=operation_filter,
            ),
            list,
        )

        entries: list[HistoryEntry] = []
        for item in result:
            if (
                not isinstance(item, (list, tuple))
                or len(item) != 2
                or isinstance(item[0], bool)
                or not isinstance(item[0], int)
            ):
                raise MalformedResponseError(f"{method}: bad history entry {item!r}")
            entries.append(HistoryEntry(item[0], item[1]))

        entries.sort(key=lambda e: e.sequence, reverse=True)
        for newer, older in zip(entries, entries[1:]):
            if newer.sequence == older.sequence:
                raise MalformedResponseError(
                    f"{method}: duplicate sequence number {newer.sequence}"
                )
        if from_ >= 0 and entries and entries[0].sequence > from_:
            raise MalformedResponseError(
                f"{method}: sequence {entries[0].sequence} is past from={from_}"
            )
        return entries

    # ------------------------------------------------------------------
    # Posts
    # ------------------------------------------------------------------

    async def get_discussions(
        self,
        sort_key: DiscussionSortKey | str,
        query: DiscussionQuery | Mapping[str, Any],
    ) -> list[dict[str, Any]]:
        """Return discussions (posts) in the order implied by ``sort_key``.

        For ``blog`` and ``feed`` the query tag is a username. The
        ``start_author``/``start_permlink`` cursor is exclusive: the post at
        the cursor closed the previous page and is dropped if the node echoes
        it, so such a page can hold ``limit - 1`` posts.
        """
        try:
            key = DiscussionSortKey(sort_key)
        except ValueError:
            raise ValidationError("sort_key", f"unknown sort key {sort_key!r}") from None

        method = f"get_discussions_by_{key.value}"
        posts = _expect(method, await self._call(method, query=query), list)

        author, permlink = _cursor(query)
        if author is not None and posts:
            head = posts[0]
            if (
                isinstance(head, dict)
                and head.get("author") == author
                and head.get("permlink") == permlink
            ):
                posts = posts[1:]
        return posts

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    async def get_transaction(self, tx_id: str) -> dict[str, Any]:
        """Return the transaction with id ``tx_id``.

        Raises:
            NotFoundError: the node does not know the transaction.
        """
        try:
            result = await self._call("get_transaction", tx_id=tx_id)
        except RemoteError as e:
            if _UNKNOWN_TRANSACTION_RE.search(e.message):
                raise NotFoundError("transaction", tx_id, e) from e
            raise
        if result is None:
            raise NotFoundError("transaction", tx_id)
        return _expect("get_transaction", result, dict)

    async def verify_authority(self, signed_transaction: Mapping[str, Any]) -> bool:
        """Return whether the signatures of ``signed_transaction`` suffice.

        Insufficient authority is ``False``, not an error.
        """
        try:
            result = await self._call(
                "verify_authority", signed_transaction=signed_transaction
            )
        except RemoteError as e:
            if _MISSING_AUTHORITY_RE.search(e.message):
                return False
            raise
        if isinstance(result, dict) and isinstance(result.get("valid"), bool):
            return result["valid"]
        return _expect("verify_authority", result, bool)
