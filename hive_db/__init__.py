"""Typed client for a Hive node's database API."""
from .bitmask import make_bitmask_filter
from .database import DatabaseAPI
from .errors import (
    HiveError,
    MalformedResponseError,
    NotFoundError,
    RemoteError,
    TransportError,
    ValidationError,
)
from .models import DiscussionQuery, DiscussionSortKey, HistoryEntry, OperationBitmaskFilter
from .normalizer import normalize
from .operations import OperationType
from .transports import HttpTransport

__all__ = [
    "DatabaseAPI",
    "DiscussionQuery",
    "DiscussionSortKey",
    "HistoryEntry",
    "HiveError",
    "HttpTransport",
    "MalformedResponseError",
    "NotFoundError",
    "OperationBitmaskFilter",
    "OperationType",
    "RemoteError",
    "TransportError",
    "ValidationError",
    "make_bitmask_filter",
    "normalize",
]
