"""Ledger posting

Shared write path of every balance-affecting use case. One posting runs in a
single unit of work:

1. Return the recorded result if the user already used the idempotency key
2. Read the account with a row lock
3. Validate and plan the entry (subclass)
4. Append the transaction
5. Append the immutable event
6. Compare-and-update the account totals
7. Append the audit log
8. Commit

Any failure after step 2 rolls the whole unit back. A version conflict in
step 6 restarts the posting from step 1.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Tuple
from pydantic_core import to_jsonable_python
from sqlalchemy.exc import IntegrityError

from libs.result import Error, Result, Return
from src.app.repositories.account_repository import AccountRepository, StaleAccountError
from src.app.repositories.audit_log_repository import AuditLogRepository
from src.app.repositories.immutable_event_repository import ImmutableEventRepository
from src.app.repositories.transaction_repository import TransactionRepository
from src.app.services.unit_of_work import UnitOfWork
from src.domain.account import Account
from src.domain.audit_log import AuditLog
from src.domain.immutable_event import EventType, ImmutableEvent
from src.domain.ledger_rules import apply_entry
from src.domain.money import is_valid_amount, to_money
from src.domain.transaction import Transaction, TransactionType
from . import errors
from .dtos import (
    AccountDTO,
    AuditLogDTO,
    ImmutableEventDTO,
    LedgerEntryResponseDTO,
    PostingCommandDTO,
    TransactionDTO,
)

logger = logging.getLogger(__name__)


@dataclass
class Posting:
    """A planned ledger entry, ready to be written"""

    transaction_type: TransactionType
    amount: Decimal
    signed_amount: Decimal
    event_type: EventType
    resource_type: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    event_data: Dict[str, Any] = field(default_factory=dict)


class LedgerPostingUseCase(ABC):
    """
    Base class for use cases that move money

    Subclasses implement _plan() and list the transaction types they write in
    transaction_types; everything else (locking, idempotency, the four writes,
    retry on version conflict, rollback) lives here.
    """

    operation = "post ledger entry"
    transaction_types: Tuple[TransactionType, ...] = ()

    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: AccountRepository,
        transaction_repo: TransactionRepository,
        event_repo: ImmutableEventRepository,
        audit_repo: AuditLogRepository,
        max_attempts: int = 3,
    ):
        self.uow = uow
        self.account_repo = account_repo
        self.transaction_repo = transaction_repo
        self.event_repo = event_repo
        self.audit_repo = audit_repo
        self.max_attempts = max(1, max_attempts)

    async def execute(self, command: PostingCommandDTO) -> Result[Optional[LedgerEntryResponseDTO]]:
        """
        Validate, then post with retries on concurrent account updates

        Returns:
            Result with the composite entry, None when the request has no
            balance effect, or an error (nothing written)
        """
        if not is_valid_amount(command.amount):
            return Return.err(errors.invalid_amount(command.amount))

        precheck_error = self._precheck(command)
        if precheck_error:
            return Return.err(precheck_error)

        for attempt in range(1, self.max_attempts + 1):
            try:
                return await self._execute_once(command)
            except StaleAccountError as e:
                await self.uow.rollback()
                logger.warning(f"{e}; retrying {self.operation} (attempt {attempt}/{self.max_attempts})")
            except IntegrityError as e:
                await self.uow.rollback()
                if command.idempotency_key:
                    recorded = await self._recorded_response(command)
                    if recorded.is_err() or recorded.value:
                        return recorded
                logger.error(f"Failed to {self.operation} for user {command.user_id}: {e}")
                return Return.err(errors.persistence_failure(self.operation, e))
            except Exception as e:
                await self.uow.rollback()
                logger.error(f"Failed to {self.operation} for user {command.user_id}: {e}")
                return Return.err(errors.persistence_failure(self.operation, e))

        return Return.err(errors.concurrent_modification(command.user_id, self.max_attempts))

    def _precheck(self, command: PostingCommandDTO) -> Optional[Error]:
        """Validation that needs no data; runs before anything is read."""
        return None

    @abstractmethod
    async def _plan(self, command: PostingCommandDTO, account: Account) -> Result[Optional[Posting]]:
        """Check the command against the locked account and describe the entry to write."""
        pass

    async def _execute_once(self, command: PostingCommandDTO) -> Result[Optional[LedgerEntryResponseDTO]]:
        if command.idempotency_key:
            recorded = await self._recorded_response(command)
            if recorded.is_err():
                await self.uow.rollback()
                return recorded
            if recorded.value:
                return recorded

        account = await self.account_repo.get_by_user_id(command.user_id, for_update=True)
        if not account:
            await self.uow.rollback()
            return Return.err(errors.account_not_found(command.user_id))

        planned = await self._plan(command, account)
        if planned.is_err():
            await self.uow.rollback()
            return Return.err(planned.error)

        if planned.value is None:
            await self.uow.rollback()
            return Return.ok(None)

        response = await self._post(command, account, planned.value)
        return Return.ok(response)

    async def _post(
        self, command: PostingCommandDTO, account: Account, posting: Posting
    ) -> LedgerEntryResponseDTO:
        before = account.totals()
        after = apply_entry(before, posting.transaction_type, posting.amount)

        transaction = await self.transaction_repo.create(
            Transaction(
                user_id=account.user_id,
                transaction_type=posting.transaction_type,
                amount=to_money(posting.signed_amount),
                reference_id=command.reference_id,
                metadata_json=to_jsonable_python({**(command.metadata or {}), **posting.metadata}),
                idempotency_key=command.idempotency_key,
            )
        )

        event = await self.event_repo.create(
            ImmutableEvent(
                transaction_id=transaction.id,
                event_type=posting.event_type.value,
                event_data=to_jsonable_python({
                    **posting.event_data,
                    "user_id": account.user_id,
                    "transaction_type": posting.transaction_type.value,
                    "amount": str(to_money(posting.amount)),
                    "reference_id": command.reference_id,
                }),
            )
        )

        updated_account = await self.account_repo.update_totals(account, after)

        audit_log = await self.audit_repo.create(
            AuditLog(
                user_id=account.user_id,
                transaction_id=transaction.id,
                action=posting.event_type.value,
                resource_type=posting.resource_type,
                resource_id=command.reference_id,
                before=before.as_dict(),
                after=updated_account.totals().as_dict(),
                ip_address=command.ip_address,
                user_agent=command.user_agent,
            )
        )

        await self.uow.commit()

        logger.info(
            f"Posted {posting.transaction_type.value} of {posting.amount} for user {account.user_id} "
            f"(transaction_id={transaction.id}, reference_id={command.reference_id})"
        )

        return LedgerEntryResponseDTO(
            transaction=TransactionDTO.from_entity(transaction),
            event=ImmutableEventDTO.from_entity(event),
            audit_log=AuditLogDTO.from_entity(audit_log),
            updated_account=AccountDTO.from_entity(updated_account),
        )

    async def _recorded_response(
        self, command: PostingCommandDTO
    ) -> Result[Optional[LedgerEntryResponseDTO]]:
        """
        Rebuild the composite result of the user's earlier posting with the
        same key

        Returns:
            Result with the composite, None when the key is unused, or
            IDEMPOTENCY_CONFLICT when the key was used for a different request
        """
        transaction = await self.transaction_repo.get_by_idempotency_key(
            command.user_id, command.idempotency_key
        )
        if not transaction:
            return Return.ok(None)

        event = await self.event_repo.get_by_transaction_id(transaction.id)

        mismatches = self._replay_mismatches(command, transaction, event)
        if mismatches:
            logger.warning(
                f"Idempotency key {command.idempotency_key} of user {command.user_id} reused for a "
                f"different request: {', '.join(mismatches)}"
            )
            return Return.err(errors.idempotency_conflict(command.idempotency_key, mismatches))

        audit_log = await self.audit_repo.get_by_transaction_id(transaction.id)
        account = await self.account_repo.get_by_user_id(transaction.user_id)

        logger.info(f"Idempotent replay of transaction {transaction.id} for key {command.idempotency_key}")

        return Return.ok(
            LedgerEntryResponseDTO(
                transaction=TransactionDTO.from_entity(transaction),
                event=ImmutableEventDTO.from_entity(event),
                audit_log=AuditLogDTO.from_entity(audit_log),
                updated_account=AccountDTO.from_entity(account),
            )
        )

    def _replay_mismatches(
        self, command: PostingCommandDTO, transaction: Transaction, event: Optional[ImmutableEvent]
    ) -> List[str]:
        # Status markers record a signed amount of 0; the event keeps the requested amount.
        mismatches = []

        recorded_type = TransactionType(transaction.transaction_type)
        if recorded_type not in self.transaction_types:
            mismatches.append(f"transaction_type={recorded_type.value}")

        if transaction.reference_id != command.reference_id:
            mismatches.append(f"reference_id={transaction.reference_id}")

        recorded_amount = (event.event_data or {}).get("amount") if event else None
        try:
            same_amount = recorded_amount is not None and Decimal(recorded_amount) == to_money(command.amount)
        except InvalidOperation:
            same_amount = False
        if not same_amount:
            mismatches.append(f"amount={recorded_amount}")

        return mismatches

    @staticmethod
    def _require_available(account: Account, amount: Decimal) -> Optional[Error]:
        available = account.available_balance
        if available < amount:
            return errors.insufficient_balance(available, amount)
        return None
