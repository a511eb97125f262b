"""Ledger error codes

Every failure a ledger use case can report, as Error factories.
"""

from decimal import Decimal
from typing import List
from libs.result import Error

INVALID_AMOUNT = "INVALID_AMOUNT"
INSUFFICIENT_BALANCE = "INSUFFICIENT_BALANCE"
ACCOUNT_NOT_FOUND = "ACCOUNT_NOT_FOUND"
NO_OP_TRANSITION = "NO_OP_TRANSITION"
INVALID_STATUS_TRANSITION = "INVALID_STATUS_TRANSITION"
CONCURRENT_MODIFICATION = "CONCURRENT_MODIFICATION"
PERSISTENCE_FAILURE = "PERSISTENCE_FAILURE"
RECONCILIATION_FAILED = "RECONCILIATION_FAILED"
IDEMPOTENCY_CONFLICT = "IDEMPOTENCY_CONFLICT"


def invalid_amount(amount: Decimal) -> Error:
    return Error(
        code=INVALID_AMOUNT,
        message=f"Amount must be greater than 0 and below 10^16 with at most 2 decimal places, got {amount}",
    )


def insufficient_balance(available: Decimal, required: Decimal) -> Error:
    return Error(
        code=INSUFFICIENT_BALANCE,
        message=f"Insufficient balance. Required: {required}, Available: {available}",
        reason=f"available_balance={available}, required={required}",
    )


def account_not_found(user_id: str) -> Error:
    return Error(
        code=ACCOUNT_NOT_FOUND,
        message=f"No account found for user {user_id}",
        reason="Account must be provisioned before it can be used",
    )


def no_op_transition(status: str) -> Error:
    return Error(
        code=NO_OP_TRANSITION,
        message=f"Status is already {status}",
    )


def invalid_status_transition(old_status: str, new_status: str, reason: str) -> Error:
    return Error(
        code=INVALID_STATUS_TRANSITION,
        message=f"Cannot change status from {old_status} to {new_status}",
        reason=reason,
    )


def concurrent_modification(user_id: str, attempts: int) -> Error:
    return Error(
        code=CONCURRENT_MODIFICATION,
        message=f"Account for user {user_id} kept changing during the update",
        reason=f"gave up after {attempts} attempts",
    )


def persistence_failure(operation: str, exc: Exception) -> Error:
    return Error(
        code=PERSISTENCE_FAILURE,
        message=f"Failed to {operation}",
        reason=str(exc),
    )


def idempotency_conflict(idempotency_key: str, mismatches: List[str]) -> Error:
    return Error(
        code=IDEMPOTENCY_CONFLICT,
        message=f"Idempotency key {idempotency_key} was already used for a different request",
        reason="recorded " + ", ".join(mismatches),
    )
