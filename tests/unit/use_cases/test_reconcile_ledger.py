"""Unit tests for ReconcileLedger

Tests cover:
- Balanced accounts produce no discrepancies
- Drift in any total is reported field by field
- Failures are reported as RECONCILIATION_FAILED
- Nothing is written
"""

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock

from src.app.use_cases.ledger import ReconcileLedger
from src.domain.transaction import TransactionType
from tests.unit.use_cases.conftest import make_account


@pytest.fixture
def use_case(mock_uow, mock_account_repo, mock_event_repo):
    return ReconcileLedger(uow=mock_uow, account_repo=mock_account_repo, event_repo=mock_event_repo)


@pytest.mark.asyncio
class TestReconcileLedger:
    async def test_balanced_accounts(self, use_case, mock_uow, mock_account_repo, mock_event_repo):
        mock_account_repo.get_all = AsyncMock(
            return_value=[make_account(total_earned="100.00", total_pending_withdrawals="30.00")]
        )
        mock_event_repo.get_replay_entries = AsyncMock(
            return_value=[
                (TransactionType.CASHBACK, Decimal("100.00")),
                (TransactionType.WITHDRAWAL_PROCESSING, Decimal("30.00")),
            ]
        )

        result = await use_case.execute()

        assert result.is_ok()
        assert result.value.total_accounts_checked == 1
        assert result.value.discrepancies_found == 0
        mock_uow.commit.assert_not_called()

    async def test_reports_drifted_fields(self, use_case, mock_account_repo, mock_event_repo):
        """
        Given: user_a's stored total_earned is 120.00 but its events add up to 100.00
        When: Reconciliation runs
        Then: One discrepancy naming total_earned with both values
        """
        mock_account_repo.get_all = AsyncMock(
            return_value=[
                make_account(user_id="user_a", total_earned="120.00"),
                make_account(user_id="user_b", total_earned="5.00"),
            ]
        )

        async def entries(user_id):
            if user_id == "user_a":
                return [(TransactionType.CASHBACK, Decimal("100.00"))]
            return [(TransactionType.REFERRAL, Decimal("5.00"))]

        mock_event_repo.get_replay_entries = AsyncMock(side_effect=entries)

        result = await use_case.execute()

        assert result.is_ok()
        assert result.value.total_accounts_checked == 2
        assert result.value.discrepancies_found == 1
        discrepancy = result.value.discrepancies[0]
        assert discrepancy.user_id == "user_a"
        assert discrepancy.mismatched_fields == ["total_earned"]
        assert discrepancy.stored["total_earned"] == Decimal("120.00")
        assert discrepancy.replayed["total_earned"] == Decimal("100.00")

    async def test_no_accounts(self, use_case):
        result = await use_case.execute()

        assert result.is_ok()
        assert result.value.total_accounts_checked == 0

    async def test_failure_is_reported(self, use_case, mock_account_repo):
        mock_account_repo.get_all = AsyncMock(side_effect=RuntimeError("connection lost"))

        result = await use_case.execute()

        assert result.is_err()
        assert result.error.code == "RECONCILIATION_FAILED"
        assert result.error.reason == "connection lost"
