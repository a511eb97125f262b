"""CreateOrder Use Case

Reserves funds for a store purchase in total_orders.
"""

from typing import Optional
from libs.result import Result, Return
from src.domain.account import Account
from src.domain.immutable_event import EventType
from src.domain.transaction import TransactionType
from .dtos import CreateOrderCommandDTO
from .posting import LedgerPostingUseCase, Posting


class CreateOrder(LedgerPostingUseCase):
    """
    Use Case: Reserve funds for an order

    Business Rules:
    1. amount > 0
    2. available_balance >= amount, checked on the locked account row
    3. total_orders += amount
    4. Transaction(order_created, -amount)
    """

    operation = "create order"
    transaction_types = (TransactionType.ORDER_CREATED,)

    async def _plan(self, command: CreateOrderCommandDTO, account: Account) -> Result[Optional[Posting]]:
        insufficient = self._require_available(account, command.amount)
        if insufficient:
            return Return.err(insufficient)

        return Return.ok(
            Posting(
                transaction_type=TransactionType.ORDER_CREATED,
                amount=command.amount,
                signed_amount=-command.amount,
                event_type=EventType.ORDER_CREATED,
                resource_type="order",
                event_data={"available_balance_before": str(account.available_balance)},
            )
        )
