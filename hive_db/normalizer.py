"""Turn keyword call arguments into the positional params a remote method expects.

Every remote method has a registered :class:`Signature`. ``normalize`` checks
each field against it and produces a gap-free list: optional trailing params
marked ``omit_if_unset`` are dropped when nothing after them is set, and are
filled with their default when a later param is set. All failures raise
:class:`~hive_db.errors.ValidationError` before any call is attempted.
"""
from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, fields
from typing import Any, Callable

from .errors import ValidationError
from .models import DiscussionQuery, DiscussionSortKey, OperationBitmaskFilter

DISCUSSION_LIMIT_MAX = 100
DELEGATION_LIMIT_MAX = 1000
HISTORY_LIMIT_MAX = 1000
DEFAULT_DELEGATION_LIMIT = DELEGATION_LIMIT_MAX

_TX_ID_RE = re.compile(r"^[0-9a-fA-F]{40}$")
_WORD_MAX = 0xFFFFFFFF

Check = Callable[[str, Any], Any]


@dataclass(frozen=True)
class Param:
    """One positional parameter of a remote method."""

    name: str
    check: Check
    required: bool = True
    default: Any = None
    omit_if_unset: bool = False
    # Checked value is a list whose items are appended individually
    spread: bool = False

    @property
    def label(self) -> str:
        return self.name.rstrip("_")


@dataclass(frozen=True)
class Signature:
    params: tuple[Param, ...] = ()
    constraints: tuple[Callable[[dict[str, Any]], None], ...] = ()


# ---------------------------------------------------------------------------
# Field checks: each returns the wire value
# ---------------------------------------------------------------------------


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _string(field: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ValidationError(field, f"expected a string, got {type(value).__name__}")
    return value


def _non_empty_string(field: str, value: Any) -> str:
    value = _string(field, value)
    if not value:
        raise ValidationError(field, "must not be empty")
    return value


def _flag(field: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValidationError(field, f"expected a boolean, got {type(value).__name__}")
    return value


def _integer(field: str, value: Any, minimum: int) -> int:
    if not _is_int(value):
        raise ValidationError(field, f"expected an integer, got {type(value).__name__}")
    if value < minimum:
        raise ValidationError(field, f"must be at least {minimum}")
    return int(value)


def _block_num(field: str, value: Any) -> int:
    return _integer(field, value, 1)


def _history_start(field: str, value: Any) -> int:
    return _integer(field, value, -1)


def _limit(maximum: int) -> Check:
    def check(field: str, value: Any) -> int:
        value = _integer(field, value, 1)
        if value > maximum:
            raise ValidationError(field, f"exceeds maximum of {maximum}")
        return value

    return check


def _transaction_id(field: str, value: Any) -> str:
    value = _string(field, value)
    if not _TX_ID_RE.match(value):
        raise ValidationError(field, "expected a 40 character hex transaction id")
    return value


def _string_list(field: str, value: Any) -> list[str]:
    if isinstance(value, (str, bytes)) or not hasattr(value, "__iter__"):
        raise ValidationError(field, "expected a sequence of strings")
    items = list(value)
    for item in items:
        _non_empty_string(field, item)
    return items


def _unique_string_list(field: str, value: Any) -> list[str]:
    return list(dict.fromkeys(_string_list(field, value)))


def _mapping(field: str, value: Any) -> dict[str, Any]:
    if not isinstance(value, Mapping):
        raise ValidationError(field, f"expected a mapping, got {type(value).__name__}")
    return dict(value)


def _operation_filter(field: str, value: Any) -> list[int]:
    if isinstance(value, OperationBitmaskFilter):
        words = value.as_params()
    elif isinstance(value, (list, tuple)) and len(value) == 2:
        words = list(value)
    else:
        raise ValidationError(
            field, "expected an OperationBitmaskFilter or a (low, high) pair"
        )
    for word in words:
        if not _is_int(word) or not 0 <= word <= _WORD_MAX:
            raise ValidationError(field, f"{word!r} is not an unsigned 32-bit word")
    return words


_QUERY_CHECKS: dict[str, Check] = {
    "limit": _limit(DISCUSSION_LIMIT_MAX),
    "tag": _string,
    "filter_tags": _unique_string_list,
    "select_authors": _unique_string_list,
    "select_tags": _unique_string_list,
    "truncate_body": lambda field, value: _integer(field, value, 0),
    "start_author": _non_empty_string,
    "start_permlink": _non_empty_string,
    "parent_author": _non_empty_string,
    "parent_permlink": _non_empty_string,
}


def _discussion_query(field: str, value: Any) -> dict[str, Any]:
    if isinstance(value, DiscussionQuery):
        raw = {f.name: getattr(value, f.name) for f in fields(value)}
    elif isinstance(value, Mapping):
        raw = dict(value)
    else:
        raise ValidationError(field, "expected a DiscussionQuery")

    if raw.get("limit") is None:
        raise ValidationError(f"{field}.limit", "is required")
    if (raw.get("start_author") is None) != (raw.get("start_permlink") is None):
        raise ValidationError(
            f"{field}.start_author",
            "start_author and start_permlink must be given together",
        )

    query: dict[str, Any] = {}
    for key, item in raw.items():
        check = _QUERY_CHECKS.get(key)
        if check is None:
            raise ValidationError(f"{field}.{key}", "unexpected query field")
        if item is not None:
            query[key] = check(f"{field}.{key}", item)
    return query


def _history_window(values: dict[str, Any]) -> None:
    start = values["from_"]
    if start >= 0 and values["limit"] > start + 1:
        raise ValidationError("limit", f"must not exceed from + 1 ({start + 1})")


# ---------------------------------------------------------------------------
# Method registry
# ---------------------------------------------------------------------------

_NO_PARAMS = Signature()
_BLOCK = Signature((Param("block_num", _block_num),))

SIGNATURES: dict[str, Signature] = {
    "get_dynamic_global_properties": _NO_PARAMS,
    "get_chain_properties": _NO_PARAMS,
    "get_current_median_history_price": _NO_PARAMS,
    "get_config": _NO_PARAMS,
    "get_version": _NO_PARAMS,
    "get_state": Signature((Param("path", _non_empty_string),)),
    "get_vesting_delegations": Signature(
        (
            Param("account", _non_empty_string),
            Param("from_", _string, required=False, default=""),
            Param(
                "limit",
                _limit(DELEGATION_LIMIT_MAX),
                required=False,
                default=DEFAULT_DELEGATION_LIMIT,
            ),
        )
    ),
    "get_block_header": _BLOCK,
    "get_block": _BLOCK,
    "get_ops_in_block": Signature(
        (
            Param("block_num", _block_num),
            Param("only_virtual", _flag, required=False, default=False, omit_if_unset=True),
        )
    ),
    "get_accounts": Signature((Param("usernames", _string_list),)),
    "get_transaction": Signature((Param("tx_id", _transaction_id),)),
    "get_account_history": Signature(
        (
            Param("account", _non_empty_string),
            Param("from_", _history_start),
            Param("limit", _limit(HISTORY_LIMIT_MAX)),
            Param(
                "operation_filter",
                _operation_filter,
                required=False,
                omit_if_unset=True,
                spread=True,
            ),
        ),
        constraints=(_history_window,),
    ),
    "verify_authority": Signature((Param("signed_transaction", _mapping),)),
}

for _key in DiscussionSortKey:
    SIGNATURES[f"get_discussions_by_{_key.value}"] = Signature(
        (Param("query", _discussion_query),)
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def build_params(signature: Signature, values: Mapping[str, Any]) -> list[Any]:
    """Check ``values`` against ``signature`` and lay them out positionally.

    A value of ``None`` means the field is unset.
    """
    known = {p.name for p in signature.params}
    for name in values:
        if name not in known:
            raise ValidationError(name.rstrip("_"), "unexpected parameter")

    checked: dict[str, Any] = {}
    for param in signature.params:
        value = values.get(param.name)
        if value is None:
            if param.required:
                raise ValidationError(param.label, "is required")
            continue
        checked[param.name] = param.check(param.label, value)

    for constraint in signature.constraints:
        constraint(checked)

    # Everything up to the last param that is set or always emitted
    emitted = [
        i
        for i, p in enumerate(signature.params)
        if p.name in checked or not p.omit_if_unset
    ]
    end = emitted[-1] + 1 if emitted else 0

    params: list[Any] = []
    for param in signature.params[:end]:
        value = checked.get(param.name, param.default)
        if param.spread:
            params.extend(value)
        else:
            params.append(value)
    return params


def normalize(method: str, **values: Any) -> list[Any]:
    """Return the positional params for ``method``.

    Example:
        >>> normalize("get_vesting_delegations", account="alice")
        ['alice', '', 1000]
    """
    signature = SIGNATURES.get(method)
    if signature is None:
        raise ValidationError("method", f"unknown method {method!r}")
    return build_params(signature, values)
