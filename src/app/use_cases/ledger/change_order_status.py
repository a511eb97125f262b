"""ChangeOrderStatus Use Case

The ledger only sees whether an order holds a reservation:

    active    -> cancelled : release, total_orders -= amount (floored)
    cancelled -> active    : re-reserve, balance re-checked now
    active    -> active    : no balance effect, nothing written

Unlike withdrawals, a cancelled order can be reactivated by an operator.
"""

from typing import Optional
from libs.result import Error, Result, Return
from src.domain.account import Account
from src.domain.immutable_event import EventType
from src.domain.money import ZERO
from src.domain.status import is_order_cancelled
from src.domain.transaction import TransactionType
from . import errors
from .dtos import ChangeOrderStatusCommandDTO
from .posting import LedgerPostingUseCase, Posting

ORDER_TYPES = [TransactionType.ORDER_CREATED, TransactionType.ORDER_CANCELLED]


class ChangeOrderStatus(LedgerPostingUseCase):
    """
    Use Case: Apply an order status change to the reservation

    Business Rules:
    1. old_status != new_status (NO_OP_TRANSITION)
    2. Into cancelled: Transaction(order_cancelled, 0), reservation released
    3. Out of cancelled: available_balance >= amount at this moment, since the
       balance may have moved since the original reservation;
       Transaction(order_created, 0), reservation restored
    4. When the log already knows the order, its reservation state must agree
       with old_status (INVALID_STATUS_TRANSITION otherwise)
    """

    operation = "change order status"
    transaction_types = tuple(ORDER_TYPES)

    def _precheck(self, command: ChangeOrderStatusCommandDTO) -> Optional[Error]:
        if command.old_status == command.new_status:
            return errors.no_op_transition(command.new_status)
        return None

    async def _plan(self, command: ChangeOrderStatusCommandDTO, account: Account) -> Result[Optional[Posting]]:
        was_cancelled = is_order_cancelled(command.old_status)
        becomes_cancelled = is_order_cancelled(command.new_status)

        if was_cancelled == becomes_cancelled:
            return Return.ok(None)

        latest = await self.transaction_repo.get_latest_by_reference(
            account.user_id, command.reference_id, ORDER_TYPES
        )
        if latest is not None:
            recorded_cancelled = TransactionType(latest.transaction_type) == TransactionType.ORDER_CANCELLED
            if recorded_cancelled != was_cancelled:
                recorded = "cancelled" if recorded_cancelled else "active"
                return Return.err(
                    errors.invalid_status_transition(
                        command.old_status,
                        command.new_status,
                        reason=f"order {command.reference_id} reservation is recorded as {recorded}",
                    )
                )

        status_change = {"old_status": command.old_status, "new_status": command.new_status}

        if becomes_cancelled:
            return Return.ok(
                Posting(
                    transaction_type=TransactionType.ORDER_CANCELLED,
                    amount=command.amount,
                    signed_amount=ZERO,
                    event_type=EventType.ORDER_STATUS_CHANGED,
                    resource_type="order",
                    metadata=status_change,
                    event_data=status_change,
                )
            )

        insufficient = self._require_available(account, command.amount)
        if insufficient:
            return Return.err(insufficient)

        return Return.ok(
            Posting(
                transaction_type=TransactionType.ORDER_CREATED,
                amount=command.amount,
                signed_amount=ZERO,
                event_type=EventType.ORDER_STATUS_CHANGED,
                resource_type="order",
                metadata={**status_change, "reactivated": True},
                event_data={
                    **status_change,
                    "reactivated": True,
                    "available_balance_before": str(account.available_balance),
                },
            )
        )
