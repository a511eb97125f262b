"""AddReferralCommission Use Case"""

from typing import Optional
from libs.result import Result, Return
from src.domain.account import Account
from src.domain.immutable_event import EventType
from src.domain.transaction import TransactionType
from .dtos import AddReferralCommissionCommandDTO
from .posting import LedgerPostingUseCase, Posting


class AddReferralCommission(LedgerPostingUseCase):
    """Credits a referral commission: total_earned += amount."""

    operation = "add referral commission"
    transaction_types = (TransactionType.REFERRAL,)

    async def _plan(
        self, command: AddReferralCommissionCommandDTO, account: Account
    ) -> Result[Optional[Posting]]:
        return Return.ok(
            Posting(
                transaction_type=TransactionType.REFERRAL,
                amount=command.amount,
                signed_amount=command.amount,
                event_type=EventType.REFERRAL_ADDED,
                resource_type="referral_commission",
            )
        )
