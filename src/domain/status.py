"""Status vocabularies for the withdrawal and order state machines"""

from enum import Enum


class WithdrawalStatus(str, Enum):
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# processing -> completed | cancelled; both terminal
WITHDRAWAL_TRANSITIONS = {
    (WithdrawalStatus.PROCESSING, WithdrawalStatus.COMPLETED),
    (WithdrawalStatus.PROCESSING, WithdrawalStatus.CANCELLED),
}

# Order statuses are owned by the store; the ledger only cares whether a
# status holds a reservation or not.
ORDER_CANCELLED_STATUS = "cancelled"


def is_order_cancelled(status: str) -> bool:
    return status.strip().lower() == ORDER_CANCELLED_STATUS
