"""Ledger Rules

The single rule table mapping a transaction type and its unsigned amount onto
the four account totals. Used by every posting and by reconciliation replay,
so the stored totals can always be rebuilt from the event log.
"""

from decimal import Decimal
from src.domain.account import AccountTotals
from src.domain.money import ZERO, to_money
from src.domain.transaction import TransactionType


def _floored(value: Decimal) -> Decimal:
    return max(ZERO, to_money(value))


def apply_entry(totals: AccountTotals, transaction_type: TransactionType, amount: Decimal) -> AccountTotals:
    """
    Return the totals after applying one entry.

    Subtractions from a running total are floored at zero: a reversal or
    release larger than what remains is capped, never driven negative.

    Raises:
        ValueError: amount is negative or the type is unknown
    """
    amount = to_money(amount)
    if amount < ZERO:
        raise ValueError(f"Entry amount must be unsigned, got {amount}")

    earned = totals.total_earned
    withdrawn = totals.total_withdrawn
    pending = totals.total_pending_withdrawals
    orders = totals.total_orders

    if transaction_type in (TransactionType.CASHBACK, TransactionType.REFERRAL):
        earned = earned + amount
    elif transaction_type == TransactionType.REFERRAL_REVERSED:
        earned = _floored(earned - amount)
    elif transaction_type == TransactionType.WITHDRAWAL_PROCESSING:
        pending = pending + amount
    elif transaction_type == TransactionType.WITHDRAWAL_COMPLETED:
        pending = _floored(pending - amount)
        withdrawn = withdrawn + amount
    elif transaction_type == TransactionType.WITHDRAWAL_CANCELLED:
        pending = _floored(pending - amount)
    elif transaction_type == TransactionType.ORDER_CREATED:
        orders = orders + amount
    elif transaction_type == TransactionType.ORDER_CANCELLED:
        orders = _floored(orders - amount)
    else:
        raise ValueError(f"Unknown transaction type: {transaction_type}")

    return AccountTotals(
        total_earned=to_money(earned),
        total_withdrawn=to_money(withdrawn),
        total_pending_withdrawals=to_money(pending),
        total_orders=to_money(orders),
    )


def replay(entries) -> AccountTotals:
    """Rebuild totals from (transaction_type, amount) pairs in posting order."""
    totals = AccountTotals()
    for transaction_type, amount in entries:
        totals = apply_entry(totals, TransactionType(transaction_type), Decimal(amount))
    return totals
