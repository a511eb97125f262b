"""ReconcileLedger Use Case

Rebuilds every account's totals from its immutable event log and reports
accounts whose stored totals disagree.
"""

import logging
import time
from typing import List
from libs.result import Error, Result, Return
from src.app.repositories.account_repository import AccountRepository
from src.app.repositories.immutable_event_repository import ImmutableEventRepository
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utcnow
from src.domain.ledger_rules import replay
from . import errors
from .dtos import AccountDiscrepancyDTO, ReconciliationResultDTO

logger = logging.getLogger(__name__)

TOTAL_FIELDS = ("total_earned", "total_withdrawn", "total_pending_withdrawals", "total_orders")


class ReconcileLedger:
    """
    Use Case: Reconcile account totals against the event log

    Business Rules:
    1. Every account is checked
    2. Events are replayed in transaction order from zero totals through the
       same rule table the postings use
    3. Any total that differs is reported with both values
    4. Read-only: nothing is modified

    Flow:
    1. Get all accounts
    2. For each account:
       a. Load its (type, amount) entries
       b. Replay them
       c. Compare field by field
    3. Return the result with all discrepancies
    """

    def __init__(
        self,
        uow: UnitOfWork,
        account_repo: AccountRepository,
        event_repo: ImmutableEventRepository,
    ):
        self.uow = uow
        self.account_repo = account_repo
        self.event_repo = event_repo

    async def execute(self) -> Result[ReconciliationResultDTO]:
        start_time = time.time()
        reconciliation_time = utcnow()

        try:
            logger.info("Starting ledger reconciliation")

            accounts = await self.account_repo.get_all()
            total_accounts = len(accounts)

            logger.info(f"Found {total_accounts} accounts to reconcile")

            discrepancies: List[AccountDiscrepancyDTO] = []

            for account in accounts:
                entries = await self.event_repo.get_replay_entries(account.user_id)
                stored = account.totals()
                replayed = replay(entries)

                mismatched = [
                    name for name in TOTAL_FIELDS
                    if getattr(stored, name) != getattr(replayed, name)
                ]
                if not mismatched:
                    continue

                discrepancies.append(
                    AccountDiscrepancyDTO(
                        user_id=account.user_id,
                        stored={name: getattr(stored, name) for name in TOTAL_FIELDS},
                        replayed={name: getattr(replayed, name) for name in TOTAL_FIELDS},
                        mismatched_fields=mismatched,
                    )
                )

                logger.warning(
                    f"Discrepancy found for user {account.user_id}: "
                    + ", ".join(
                        f"{name} stored={getattr(stored, name)} replayed={getattr(replayed, name)}"
                        for name in mismatched
                    )
                )

            execution_time_ms = int((time.time() - start_time) * 1000)

            if discrepancies:
                logger.warning(
                    f"Reconciliation complete. Found {len(discrepancies)} discrepancies "
                    f"out of {total_accounts} accounts in {execution_time_ms}ms"
                )
            else:
                logger.info(
                    f"Reconciliation complete. All {total_accounts} accounts balanced "
                    f"in {execution_time_ms}ms"
                )

            return Return.ok(
                ReconciliationResultDTO(
                    total_accounts_checked=total_accounts,
                    discrepancies_found=len(discrepancies),
                    discrepancies=discrepancies,
                    reconciliation_time=reconciliation_time,
                    execution_time_ms=execution_time_ms,
                )
            )

        except Exception as e:
            logger.error(f"Ledger reconciliation failed: {e}")
            return Return.err(
                Error(
                    code=errors.RECONCILIATION_FAILED,
                    message="Failed to reconcile ledger",
                    reason=str(e),
                )
            )
        finally:
            await self.uow.rollback()
