"""Shared mocks for ledger use case tests

The repository mocks behave like an append-only store: created rows get ids
and update_totals writes the new totals onto the account it was given.
"""

import itertools
import pytest
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock

from src.domain.account import Account
from src.domain.base import utcnow


def make_account(
    user_id="user_123",
    total_earned="0.00",
    total_withdrawn="0.00",
    total_pending_withdrawals="0.00",
    total_orders="0.00",
    version=0,
):
    return Account(
        id=1,
        user_id=user_id,
        total_earned=Decimal(total_earned),
        total_withdrawn=Decimal(total_withdrawn),
        total_pending_withdrawals=Decimal(total_pending_withdrawals),
        total_orders=Decimal(total_orders),
        version=version,
        created_at=utcnow(),
        updated_at=utcnow(),
    )


def _assigning_ids():
    ids = itertools.count(100)

    async def create(entity):
        entity.id = next(ids)
        return entity

    return create


async def _update_totals(account, totals):
    account.total_earned = totals.total_earned
    account.total_withdrawn = totals.total_withdrawn
    account.total_pending_withdrawals = totals.total_pending_withdrawals
    account.total_orders = totals.total_orders
    account.version += 1
    return account


@pytest.fixture
def mock_account_repo():
    repo = MagicMock()
    repo.get_by_user_id = AsyncMock(return_value=None)
    repo.create = AsyncMock()
    repo.update_totals = AsyncMock(side_effect=_update_totals)
    repo.get_all = AsyncMock(return_value=[])
    return repo


@pytest.fixture
def mock_transaction_repo():
    repo = MagicMock()
    repo.create = AsyncMock(side_effect=_assigning_ids())
    repo.get_by_idempotency_key = AsyncMock(return_value=None)
    repo.get_latest_by_reference = AsyncMock(return_value=None)
    repo.get_by_user_id = AsyncMock(return_value=([], 0))
    return repo


@pytest.fixture
def mock_event_repo():
    repo = MagicMock()
    repo.create = AsyncMock(side_effect=_assigning_ids())
    repo.get_by_transaction_id = AsyncMock(return_value=None)
    repo.get_replay_entries = AsyncMock(return_value=[])
    return repo


@pytest.fixture
def mock_audit_repo():
    repo = MagicMock()
    repo.create = AsyncMock(side_effect=_assigning_ids())
    repo.get_by_transaction_id = AsyncMock(return_value=None)
    return repo


@pytest.fixture
def repos(mock_uow, mock_account_repo, mock_transaction_repo, mock_event_repo, mock_audit_repo):
    """Constructor arguments shared by every posting use case"""
    return dict(
        uow=mock_uow,
        account_repo=mock_account_repo,
        transaction_repo=mock_transaction_repo,
        event_repo=mock_event_repo,
        audit_repo=mock_audit_repo,
    )
