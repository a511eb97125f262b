"""Unit tests for AddReferralCommission and ReverseReferralCommission"""

import pytest
from decimal import Decimal
from unittest.mock import AsyncMock

from src.app.use_cases.ledger import (
    AddReferralCommission,
    AddReferralCommissionCommandDTO,
    ReverseReferralCommission,
    ReverseReferralCommissionCommandDTO,
)
from tests.unit.use_cases.conftest import make_account


@pytest.mark.asyncio
class TestAddReferralCommission:
    async def test_credits_total_earned(self, repos, mock_account_repo):
        mock_account_repo.get_by_user_id = AsyncMock(return_value=make_account(total_earned="5.00"))
        command = AddReferralCommissionCommandDTO(user_id="user_123", amount=Decimal("2.50"), reference_id="ref_1")

        result = await AddReferralCommission(**repos).execute(command)

        assert result.is_ok()
        assert result.value.transaction.transaction_type == "referral"
        assert result.value.event.event_type == "REFERRAL_ADDED"
        assert result.value.audit_log.resource_type == "referral_commission"
        assert result.value.updated_account.total_earned == Decimal("7.50")


@pytest.mark.asyncio
class TestReverseReferralCommission:
    async def test_records_negative_amount_and_reason(self, repos, mock_account_repo):
        mock_account_repo.get_by_user_id = AsyncMock(return_value=make_account(total_earned="20.00"))
        command = ReverseReferralCommissionCommandDTO(
            user_id="user_123", amount=Decimal("5.00"), reference_id="ref_1", reason="referee refunded"
        )

        result = await ReverseReferralCommission(**repos).execute(command)

        assert result.is_ok()
        entry = result.value
        assert entry.transaction.transaction_type == "referral_reversed"
        assert entry.transaction.amount == Decimal("-5.00")
        assert entry.transaction.metadata["reason"] == "referee refunded"
        assert entry.event.event_type == "REFERRAL_REVERSED"
        assert entry.event.event_data["amount"] == "5.00"
        assert entry.updated_account.total_earned == Decimal("15.00")

    async def test_reversal_floors_total_earned_at_zero(self, repos, mock_account_repo):
        """
        Given: total_earned is 3.00
        When: A 10.00 commission is reversed
        Then: total_earned becomes 0.00, never negative
        """
        mock_account_repo.get_by_user_id = AsyncMock(return_value=make_account(total_earned="3.00"))
        command = ReverseReferralCommissionCommandDTO(
            user_id="user_123", amount=Decimal("10.00"), reference_id="ref_1", reason="fraud"
        )

        result = await ReverseReferralCommission(**repos).execute(command)

        assert result.is_ok()
        assert result.value.updated_account.total_earned == Decimal("0.00")
