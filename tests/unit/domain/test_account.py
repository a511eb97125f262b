"""Unit tests for Account, AccountTotals, money helpers and entity timestamps"""

import pytest
from decimal import Decimal

from src.domain.account import Account, AccountTotals
from src.domain.audit_log import AuditLog
from src.domain.immutable_event import ImmutableEvent
from src.domain.transaction import Transaction, TransactionType
from src.domain.money import has_valid_precision, is_valid_amount, to_money


class TestAvailableBalance:
    def test_subtracts_every_outflow(self):
        totals = AccountTotals(
            total_earned=Decimal("150.00"),
            total_withdrawn=Decimal("20.00"),
            total_pending_withdrawals=Decimal("30.00"),
            total_orders=Decimal("0.00"),
        )

        assert totals.available_balance == Decimal("100.00")

    def test_is_clamped_at_zero(self):
        totals = AccountTotals(
            total_earned=Decimal("50.00"),
            total_withdrawn=Decimal("30.00"),
            total_pending_withdrawals=Decimal("20.00"),
            total_orders=Decimal("10.00"),
        )

        assert totals.available_balance == Decimal("0.00")

    def test_new_account_has_zero_totals(self):
        account = Account(user_id="user_new")

        assert account.totals() == AccountTotals()
        assert account.available_balance == Decimal("0.00")
        assert account.version == 0

    def test_as_dict_is_json_safe(self):
        totals = AccountTotals(total_earned=Decimal("12.5"))

        snapshot = totals.as_dict()

        assert snapshot == {
            "total_earned": "12.50",
            "total_withdrawn": "0.00",
            "total_pending_withdrawals": "0.00",
            "total_orders": "0.00",
            "available_balance": "12.50",
        }


class TestMoney:
    def test_to_money_rounds_half_up_to_cents(self):
        assert to_money(Decimal("1.005")) == Decimal("1.01")
        assert to_money(3) == Decimal("3.00")

    def test_precision(self):
        assert has_valid_precision(Decimal("10.25"))
        assert has_valid_precision(Decimal("10"))
        assert not has_valid_precision(Decimal("10.255"))
        assert not has_valid_precision(Decimal("1e30"))

    @pytest.mark.parametrize("amount", ["0.01", "50", "9999999999999999.99"])
    def test_accepts_amounts_that_fit_the_column(self, amount):
        assert is_valid_amount(Decimal(amount))

    @pytest.mark.parametrize(
        "amount", ["0", "-1.00", "0.001", "10000000000000000", "1e30", "NaN", "Infinity"]
    )
    def test_rejects_out_of_range_amounts(self, amount):
        assert not is_valid_amount(Decimal(amount))


class TestTimestamps:
    def test_defaults_are_timezone_aware(self):
        account = Account(user_id="user_1")
        transaction = Transaction(user_id="user_1", transaction_type=TransactionType.CASHBACK, amount=Decimal("1.00"))
        event = ImmutableEvent(transaction_id=1, event_type="CASHBACK_ADDED")
        audit_log = AuditLog(user_id="user_1", transaction_id=1, action="CASHBACK_ADDED")

        for value in (account.created_at, account.updated_at, transaction.created_at, event.created_at, audit_log.created_at):
            assert value.tzinfo is not None
            assert value.utcoffset().total_seconds() == 0

    @pytest.mark.parametrize("model", [Account, Transaction, ImmutableEvent, AuditLog])
    def test_columns_store_timezone(self, model):
        assert model.__table__.c.created_at.type.timezone is True
