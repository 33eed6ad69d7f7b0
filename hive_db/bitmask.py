"""Operation bitmask filters for account history queries: pure, no I/O."""
from __future__ import annotations

from typing import Iterable

from .errors import ValidationError
from .models import OperationBitmaskFilter

WORD_BITS = 32
MAX_OPERATION_ID = 2 * WORD_BITS - 1


def make_bitmask_filter(operation_ids: Iterable[int]) -> OperationBitmaskFilter:
    """Build the ``(low, high)`` filter selecting the given operation ids.

    Ids 0-31 go to the low word, 32-63 to the high word. Order and
    duplicates do not matter. Ids outside 0-63 are rejected.

    Example:
        >>> from hive_db.operations import OperationType as op
        >>> make_bitmask_filter([op.TRANSFER, op.CLAIM_REWARD_BALANCE])
        OperationBitmaskFilter(low=4, high=128)
    """
    low = 0
    high = 0
    for op_id in operation_ids:
        if isinstance(op_id, bool) or not isinstance(op_id, int):
            raise ValidationError("operation_ids", f"{op_id!r} is not an operation id")
        if op_id < 0 or op_id > MAX_OPERATION_ID:
            raise ValidationError(
                "operation_ids",
                f"{int(op_id)} outside supported range 0..{MAX_OPERATION_ID}",
            )
        if op_id < WORD_BITS:
            low |= 1 << op_id
        else:
            high |= 1 << (op_id - WORD_BITS)
    return OperationBitmaskFilter(low=low, high=high)
