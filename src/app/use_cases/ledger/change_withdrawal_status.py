"""ChangeWithdrawalStatus Use Case

Moves a withdrawal out of processing.

    processing -> completed : pending -= amount (floored), withdrawn += amount
    processing -> cancelled : pending -= amount (floored)

completed and cancelled are terminal.
"""

from typing import Optional
from libs.result import Error, Result, Return
from src.domain.account import Account
from src.domain.immutable_event import EventType
from src.domain.status import WITHDRAWAL_TRANSITIONS, WithdrawalStatus
from src.domain.money import ZERO
from src.domain.transaction import TransactionType
from . import errors
from .dtos import ChangeWithdrawalStatusCommandDTO
from .posting import LedgerPostingUseCase, Posting

RECORDED_STATUS = {
    TransactionType.WITHDRAWAL_PROCESSING: WithdrawalStatus.PROCESSING,
    TransactionType.WITHDRAWAL_COMPLETED: WithdrawalStatus.COMPLETED,
    TransactionType.WITHDRAWAL_CANCELLED: WithdrawalStatus.CANCELLED,
}

TRANSITION_TYPES = {
    WithdrawalStatus.COMPLETED: TransactionType.WITHDRAWAL_COMPLETED,
    WithdrawalStatus.CANCELLED: TransactionType.WITHDRAWAL_CANCELLED,
}


class ChangeWithdrawalStatus(LedgerPostingUseCase):
    """
    Use Case: Complete or cancel a processing withdrawal

    Business Rules:
    1. old_status != new_status (NO_OP_TRANSITION)
    2. Only processing -> completed | cancelled (INVALID_STATUS_TRANSITION)
    3. The log must hold the withdrawal and its recorded status must equal
       old_status; unknown withdrawals and a second completion are rejected
    4. Transaction amount is 0: the money already left the available
       balance when the withdrawal was created
    """

    operation = "change withdrawal status"
    transaction_types = tuple(TRANSITION_TYPES.values())

    def _precheck(self, command: ChangeWithdrawalStatusCommandDTO) -> Optional[Error]:
        if command.old_status == command.new_status:
            return errors.no_op_transition(command.new_status.value)

        if (command.old_status, command.new_status) not in WITHDRAWAL_TRANSITIONS:
            return errors.invalid_status_transition(
                command.old_status.value,
                command.new_status.value,
                reason="withdrawals only move from processing to completed or cancelled",
            )
        return None

    async def _plan(
        self, command: ChangeWithdrawalStatusCommandDTO, account: Account
    ) -> Result[Optional[Posting]]:
        latest = await self.transaction_repo.get_latest_by_reference(
            account.user_id, command.reference_id, list(RECORDED_STATUS)
        )
        if latest is None:
            return Return.err(
                errors.invalid_status_transition(
                    command.old_status.value,
                    command.new_status.value,
                    reason=f"withdrawal {command.reference_id} has no processing record",
                )
            )

        recorded = RECORDED_STATUS[TransactionType(latest.transaction_type)]
        if recorded != command.old_status:
            return Return.err(
                errors.invalid_status_transition(
                    command.old_status.value,
                    command.new_status.value,
                    reason=f"withdrawal {command.reference_id} is recorded as {recorded.value}",
                )
            )

        status_change = {
            "old_status": command.old_status.value,
            "new_status": command.new_status.value,
        }

        return Return.ok(
            Posting(
                transaction_type=TRANSITION_TYPES[command.new_status],
                amount=command.amount,
                signed_amount=ZERO,
                event_type=EventType.WITHDRAWAL_STATUS_CHANGED,
                resource_type="withdrawal",
                metadata=status_change,
                event_data=status_change,
            )
        )
