"""Value objects passed to and returned from the database API: all frozen."""
from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, NamedTuple


class DiscussionSortKey(str, Enum):
    """Sort orders for ``get_discussions_by_*``.

    For ``BLOG`` and ``FEED`` the query tag is a username, not a topic tag.
    """

    ACTIVE = "active"
    BLOG = "blog"
    CASHOUT = "cashout"
    CHILDREN = "children"
    COMMENTS = "comments"
    CREATED = "created"
    FEED = "feed"
    HOT = "hot"
    PROMOTED = "promoted"
    TRENDING = "trending"
    VOTES = "votes"


@dataclass(frozen=True)
class DiscussionQuery:
    """Query object for discussion (post) listings."""

    limit: int
    tag: str | None = None
    filter_tags: tuple[str, ...] | None = None
    select_authors: tuple[str, ...] | None = None
    select_tags: tuple[str, ...] | None = None
    # Bytes of body to return, 0 means the full body
    truncate_body: int | None = None
    start_author: str | None = None
    start_permlink: str | None = None
    parent_author: str | None = None
    parent_permlink: str | None = None

    @property
    def has_cursor(self) -> bool:
        return self.start_author is not None or self.start_permlink is not None

    def next_page(self, author: str, permlink: str) -> DiscussionQuery:
        """Copy of this query positioned after the given post."""
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        values.update(start_author=author, start_permlink=permlink)
        return DiscussionQuery(**values)


class OperationBitmaskFilter(NamedTuple):
    """Two 32-bit words selecting operation ids 0-31 (low) and 32-63 (high).

    Behaves as the plain ``(low, high)`` pair for equality and unpacking.
    """

    low: int = 0
    high: int = 0

    def __contains__(self, op_id: object) -> bool:
        if not isinstance(op_id, int) or op_id < 0:
            return False
        if op_id < 32:
            return bool((self.low >> op_id) & 1)
        if op_id < 64:
            return bool((self.high >> (op_id - 32)) & 1)
        return False

    def operation_ids(self) -> tuple[int, ...]:
        """Decompose the masks back into sorted operation ids."""
        return tuple(i for i in range(64) if i in self)

    def as_params(self) -> list[int]:
        return [self.low, self.high]


class HistoryEntry(NamedTuple):
    """One account history item: ``(sequence, operation)``."""

    sequence: int
    operation: Any
