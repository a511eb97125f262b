"""ReverseReferralCommission Use Case

Claws back a previously granted referral commission, e.g. after the referred
order itself was reversed.
"""

from typing import Optional
from libs.result import Result, Return
from src.domain.account import Account
from src.domain.immutable_event import EventType
from src.domain.transaction import TransactionType
from .dtos import ReverseReferralCommissionCommandDTO
from .posting import LedgerPostingUseCase, Posting


class ReverseReferralCommission(LedgerPostingUseCase):
    """
    Use Case: Reverse a referral commission

    Business Rules:
    1. amount > 0
    2. total_earned = max(0, total_earned - amount)
       A reversal larger than what remains is capped at zero
    3. The transaction records -amount and the reason
    """

    operation = "reverse referral commission"
    transaction_types = (TransactionType.REFERRAL_REVERSED,)

    async def _plan(
        self, command: ReverseReferralCommissionCommandDTO, account: Account
    ) -> Result[Optional[Posting]]:
        return Return.ok(
            Posting(
                transaction_type=TransactionType.REFERRAL_REVERSED,
                amount=command.amount,
                signed_amount=-command.amount,
                event_type=EventType.REFERRAL_REVERSED,
                resource_type="referral_commission",
                metadata={"reason": command.reason},
                event_data={
                    "reason": command.reason,
                    "total_earned_before": str(account.totals().total_earned),
                },
            )
        )
