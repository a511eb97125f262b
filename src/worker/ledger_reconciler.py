"""Ledger Reconciliation Background Worker

Replays every account's event log and compares it with the stored totals.
Can be run as a standalone script or integrated with a scheduler.
"""

import asyncio
import logging
from typing import Optional

from config import ApplicationConfig
from src.adapter.database import Database
from src.adapter.repositories import SqlAlchemyAccountRepository, SqlAlchemyImmutableEventRepository
from src.adapter.services import SqlAlchemyUnitOfWork
from src.app.use_cases.ledger import ReconcileLedger, ReconciliationResultDTO
from src.domain.base import utcnow

logger = logging.getLogger(__name__)


class LedgerReconcilerWorker:
    """
    Background worker for ledger reconciliation

    Usage:
        # Run once
        worker = LedgerReconcilerWorker()
        result = await worker.run_once()

        # Run continuously
        await worker.run_forever(interval_seconds=86400)
    """

    def __init__(self, database: Optional[Database] = None, config=ApplicationConfig):
        """
        Args:
            database: Database to reconcile (default: built from config.DB_URI)
            config: ApplicationConfig-like object
        """
        self.config = config
        self.database = database or Database(config.DB_URI, echo=config.DB_ECHO)

        logger.info("LedgerReconcilerWorker initialized")

    async def run_once(self) -> ReconciliationResultDTO:
        """
        Run reconciliation once

        Raises:
            RuntimeError: The reconciliation query failed
        """
        if not self.config.RECONCILIATION_ENABLED:
            logger.info("Ledger reconciliation is disabled, skipping")
            return ReconciliationResultDTO(
                total_accounts_checked=0,
                discrepancies_found=0,
                discrepancies=[],
                reconciliation_time=utcnow(),
                execution_time_ms=0,
            )

        async with self.database.session() as session:
            use_case = ReconcileLedger(
                uow=SqlAlchemyUnitOfWork(session),
                account_repo=SqlAlchemyAccountRepository(session),
                event_repo=SqlAlchemyImmutableEventRepository(session),
            )
            result = await use_case.execute()

        if result.is_err():
            logger.error(f"Reconciliation failed: {result.error.message} ({result.error.reason})")
            raise RuntimeError(f"Reconciliation failed: {result.error.message}")

        response = result.value

        if response.discrepancies_found > 0:
            logger.error(f"ALERT: {response.discrepancies_found} account discrepancies found!")
            for d in response.discrepancies:
                for name in d.mismatched_fields:
                    logger.error(
                        f"  - User {d.user_id}: {name} stored={d.stored[name]}, replayed={d.replayed[name]}"
                    )

        return response

    async def run_forever(self, interval_seconds: int = 86400):
        logger.info(f"Starting continuous ledger reconciliation with {interval_seconds}s interval")

        while True:
            try:
                result = await self.run_once()
                logger.info(
                    f"Reconciliation cycle complete. "
                    f"Checked {result.total_accounts_checked} accounts, "
                    f"found {result.discrepancies_found} discrepancies "
                    f"in {result.execution_time_ms}ms"
                )
            except RuntimeError as e:
                logger.error(f"Reconciliation cycle failed: {e}")

            await asyncio.sleep(interval_seconds)

    async def shutdown(self):
        await self.database.dispose()
        logger.info("LedgerReconcilerWorker shutdown complete")


async def main():
    """
    Usage:
        python -m src.worker.ledger_reconciler --once
        python -m src.worker.ledger_reconciler --interval 3600
    """
    import argparse

    logging.basicConfig(
        level=ApplicationConfig.LOG_LEVEL,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(description="Ledger Reconciliation Worker")
    parser.add_argument("--once", action="store_true", help="Run once and exit")
    parser.add_argument(
        "--interval", type=int, default=ApplicationConfig.RECONCILIATION_INTERVAL_SECONDS,
        help="Interval between runs in seconds"
    )
    args = parser.parse_args()

    worker = LedgerReconcilerWorker()

    try:
        if args.once:
            result = await worker.run_once()
            print("Reconciliation complete:")
            print(f"  Total accounts checked: {result.total_accounts_checked}")
            print(f"  Discrepancies found: {result.discrepancies_found}")
            print(f"  Execution time: {result.execution_time_ms}ms")
            for d in result.discrepancies:
                print(f"  - User {d.user_id}: {', '.join(d.mismatched_fields)}")
        else:
            await worker.run_forever(interval_seconds=args.interval)
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
    finally:
        await worker.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
