"""Cursor pagination over the paged database API calls."""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import fields, replace
from typing import Any, AsyncIterator

from .database import DatabaseAPI
from .errors import ValidationError
from .models import DiscussionQuery, DiscussionSortKey, HistoryEntry, OperationBitmaskFilter
from .normalizer import DELEGATION_LIMIT_MAX, DISCUSSION_LIMIT_MAX, HISTORY_LIMIT_MAX


async def iter_account_history(
    api: DatabaseAPI,
    account: str,
    page_size: int = HISTORY_LIMIT_MAX,
    operation_filter: OperationBitmaskFilter | None = None,
) -> AsyncIterator[HistoryEntry]:
    """Yield the whole history of ``account``, newest entry first.

    With an ``operation_filter`` an empty page ends the walk, so on nodes that
    apply the limit before filtering older matches may be missed.
    """
    start = -1
    while True:
        limit = page_size if start < 0 else min(page_size, start + 1)
        page = await api.get_account_history(account, start, limit, operation_filter)
        if not page:
            return
        for entry in page:
            yield entry
        lowest = page[-1].sequence
        if lowest <= 0:
            return
        start = lowest - 1


async def iter_vesting_delegations(
    api: DatabaseAPI,
    account: str,
    page_size: int = DELEGATION_LIMIT_MAX,
) -> AsyncIterator[dict[str, Any]]:
    """Yield every delegation made by ``account``, ordered by delegatee.

    The node's cursor is inclusive, so pages after the first ask for one
    extra record to make up for the echoed cursor delegatee.
    """
    cursor = ""
    limit = page_size
    while True:
        page = await api.get_vesting_delegations(account, cursor, limit)
        fresh = page
        if cursor and fresh and fresh[0].get("delegatee") == cursor:
            fresh = fresh[1:]
        for delegation in fresh:
            yield delegation
        if len(page) < limit or not fresh:
            return
        cursor = fresh[-1]["delegatee"]
        limit = min(page_size + 1, DELEGATION_LIMIT_MAX)


def _with_room_for_cursor(query: DiscussionQuery) -> DiscussionQuery:
    """Ask for one extra post when the node will echo the cursor post."""
    limit = query.limit
    if not query.has_cursor or isinstance(limit, bool) or not isinstance(limit, int):
        return query
    return replace(query, limit=min(limit + 1, DISCUSSION_LIMIT_MAX))


async def iter_discussions(
    api: DatabaseAPI,
    sort_key: DiscussionSortKey | str,
    query: DiscussionQuery | Mapping[str, Any],
    max_pages: int | None = None,
) -> AsyncIterator[dict[str, Any]]:
    """Yield posts page by page, feeding the last post back as the cursor.

    Every page holds up to ``query.limit`` new posts.
    """
    if isinstance(query, Mapping):
        unknown = set(query) - {f.name for f in fields(DiscussionQuery)}
        if unknown:
            raise ValidationError(f"query.{sorted(unknown)[0]}", "unexpected query field")
        if query.get("limit") is None:
            raise ValidationError("query.limit", "is required")
        query = DiscussionQuery(**query)

    pages = 0
    while max_pages is None or pages < max_pages:
        posts = await api.get_discussions(sort_key, _with_room_for_cursor(query))
        pages += 1
        if not posts:
            return
        for post in posts:
            yield post
        last = posts[-1]
        query = query.next_page(last["author"], last["permlink"])
