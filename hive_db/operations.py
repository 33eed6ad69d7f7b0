"""Operation type ids as assigned by the Hive protocol."""
from __future__ import annotations

from enum import IntEnum


class OperationType(IntEnum):
    """Protocol operation enumeration; ids 50 and up are virtual operations."""

    VOTE = 0
    COMMENT = 1
    TRANSFER = 2
    TRANSFER_TO_VESTING = 3
    WITHDRAW_VESTING = 4
    LIMIT_ORDER_CREATE = 5
    LIMIT_ORDER_CANCEL = 6
    FEED_PUBLISH = 7
    CONVERT = 8
    ACCOUNT_CREATE = 9
    ACCOUNT_UPDATE = 10
    WITNESS_UPDATE = 11
    ACCOUNT_WITNESS_VOTE = 12
    ACCOUNT_WITNESS_PROXY = 13
    POW = 14
    CUSTOM = 15
    REPORT_OVER_PRODUCTION = 16
    DELETE_COMMENT = 17
    CUSTOM_JSON = 18
    COMMENT_OPTIONS = 19
    SET_WITHDRAW_VESTING_ROUTE = 20
    LIMIT_ORDER_CREATE2 = 21
    CLAIM_ACCOUNT = 22
    CREATE_CLAIMED_ACCOUNT = 23
    REQUEST_ACCOUNT_RECOVERY = 24
    RECOVER_ACCOUNT = 25
    CHANGE_RECOVERY_ACCOUNT = 26
    ESCROW_TRANSFER = 27
    ESCROW_DISPUTE = 28
    ESCROW_RELEASE = 29
    POW2 = 30
    ESCROW_APPROVE = 31
    TRANSFER_TO_SAVINGS = 32
    TRANSFER_FROM_SAVINGS = 33
    CANCEL_TRANSFER_FROM_SAVINGS = 34
    CUSTOM_BINARY = 35
    DECLINE_VOTING_RIGHTS = 36
    RESET_ACCOUNT = 37
    SET_RESET_ACCOUNT = 38
    CLAIM_REWARD_BALANCE = 39
    DELEGATE_VESTING_SHARES = 40
    ACCOUNT_CREATE_WITH_DELEGATION = 41
    WITNESS_SET_PROPERTIES = 42
    ACCOUNT_UPDATE2 = 43
    CREATE_PROPOSAL = 44
    UPDATE_PROPOSAL_VOTES = 45
    REMOVE_PROPOSAL = 46
    UPDATE_PROPOSAL = 47
    COLLATERALIZED_CONVERT = 48
    RECURRENT_TRANSFER = 49
    # virtual
    FILL_CONVERT_REQUEST = 50
    AUTHOR_REWARD = 51
    CURATION_REWARD = 52
    COMMENT_REWARD = 53
    LIQUIDITY_REWARD = 54
    INTEREST = 55
    FILL_VESTING_WITHDRAW = 56
    FILL_ORDER = 57
    SHUTDOWN_WITNESS = 58
    FILL_TRANSFER_FROM_SAVINGS = 59
    HARDFORK = 60
    COMMENT_PAYOUT_UPDATE = 61
    RETURN_VESTING_DELEGATION = 62
    COMMENT_BENEFACTOR_REWARD = 63
    PRODUCER_REWARD = 64
    CLEAR_NULL_ACCOUNT_BALANCE = 65
    PROPOSAL_PAY = 66
    SPS_FUND = 67
    HARDFORK_HIVE = 68
    HARDFORK_HIVE_RESTORE = 69
    DELAYED_VOTING = 70
    CONSOLIDATE_TREASURY_BALANCE = 71
    EFFECTIVE_COMMENT_VOTE = 72
    INEFFECTIVE_DELETE_COMMENT = 73
    SPS_CONVERT = 74
    EXPIRED_ACCOUNT_NOTIFICATION = 75
    CHANGED_RECOVERY_ACCOUNT = 76
    TRANSFER_TO_VESTING_COMPLETED = 77
    POW_REWARD = 78
    VESTING_SHARES_SPLIT = 79
    ACCOUNT_CREATED = 80
    FILL_COLLATERALIZED_CONVERT_REQUEST = 81
    SYSTEM_WARNING = 82
    FILL_RECURRENT_TRANSFER = 83
    FAILED_RECURRENT_TRANSFER = 84

    @property
    def is_virtual(self) -> bool:
        return self.value >= OperationType.FILL_CONVERT_REQUEST


def operation_from_name(name: str) -> OperationType:
    """Resolve an operation name such as ``transfer`` or ``transfer_operation``."""
    key = name.strip().lower()
    if key.endswith("_operation"):
        key = key[: -len("_operation")]
    try:
        return OperationType[key.upper()]
    except KeyError:
        raise ValueError(f"Unknown operation: {name}") from None
