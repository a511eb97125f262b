"""Integration tests for Ledger API endpoints"""

import pytest
from decimal import Decimal
from httpx import AsyncClient
from sqlmodel import select

from config import ApplicationConfig
from src.domain.audit_log import AuditLog

PREFIX = ApplicationConfig.API_PREFIX


async def provision(client: AsyncClient, user_id: str, earned: str = None):
    response = await client.put(f"{PREFIX}/ledger/accounts/{user_id}")
    assert response.status_code == 200
    if earned:
        response = await client.post(
            f"{PREFIX}/ledger/cashback",
            json={"user_id": user_id, "amount": earned, "reference_id": f"seed_{user_id}"},
        )
        assert response.status_code == 200


class TestLedgerAPIIntegration:
    """Integration test suite for Ledger API endpoints"""

    @pytest.mark.asyncio
    async def test_ensure_account_is_idempotent(self, client: AsyncClient):
        first = await client.put(f"{PREFIX}/ledger/accounts/user_api_1")
        second = await client.put(f"{PREFIX}/ledger/accounts/user_api_1")

        assert first.status_code == 200
        assert first.json()["created"] is True
        assert second.json()["created"] is False

    @pytest.mark.asyncio
    async def test_cashback_returns_composite(self, client: AsyncClient):
        await provision(client, "user_api_2")

        response = await client.post(
            f"{PREFIX}/ledger/cashback",
            json={
                "user_id": "user_api_2",
                "amount": "50.00",
                "reference_id": "cb_api_1",
                "metadata": {"broker": "acme"},
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["transaction"]["transaction_type"] == "cashback"
        assert Decimal(data["transaction"]["amount"]) == Decimal("50.00")
        assert data["event"]["event_type"] == "CASHBACK_ADDED"
        assert data["audit_log"]["resource_type"] == "cashback"
        assert Decimal(data["updated_account"]["total_earned"]) == Decimal("50.00")

    @pytest.mark.asyncio
    async def test_balance(self, client: AsyncClient):
        await provision(client, "user_api_3", earned="100.00")
        await client.post(
            f"{PREFIX}/ledger/withdrawals",
            json={"user_id": "user_api_3", "amount": "30.00", "reference_id": "wd_api_1"},
        )

        response = await client.get(f"{PREFIX}/ledger/accounts/user_api_3/balance")

        assert response.status_code == 200
        data = response.json()
        assert Decimal(data["available_balance"]) == Decimal("70.00")
        assert Decimal(data["total_pending_withdrawals"]) == Decimal("30.00")

    @pytest.mark.asyncio
    async def test_unknown_account_is_404(self, client: AsyncClient):
        response = await client.get(f"{PREFIX}/ledger/accounts/ghost/balance")

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "ACCOUNT_NOT_FOUND"

    @pytest.mark.asyncio
    async def test_insufficient_balance_is_402(self, client: AsyncClient):
        await provision(client, "user_api_4", earned="10.00")

        response = await client.post(
            f"{PREFIX}/ledger/withdrawals",
            json={"user_id": "user_api_4", "amount": "100.00", "reference_id": "wd_api_2"},
        )

        assert response.status_code == 402
        error = response.json()["error"]
        assert error["code"] == "INSUFFICIENT_BALANCE"
        assert error["message"] == "Insufficient balance. Required: 100.00, Available: 10.00"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", ["0", "-1.00", "1.005", "1e30", "10000000000000000.00"])
    async def test_invalid_amount_is_400(self, client: AsyncClient, amount):
        await provision(client, "user_api_5")

        response = await client.post(
            f"{PREFIX}/ledger/cashback",
            json={"user_id": "user_api_5", "amount": amount, "reference_id": "cb_bad"},
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_AMOUNT"

    @pytest.mark.asyncio
    async def test_malformed_request_is_validation_error(self, client: AsyncClient):
        response = await client.post(f"{PREFIX}/ledger/cashback", json={"user_id": "user_api_6"})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_withdrawal_status_flow(self, client: AsyncClient):
        await provision(client, "user_api_7", earned="100.00")
        await client.post(
            f"{PREFIX}/ledger/withdrawals",
            json={"user_id": "user_api_7", "amount": "40.00", "reference_id": "wd_api_3"},
        )
        payload = {
            "user_id": "user_api_7",
            "amount": "40.00",
            "reference_id": "wd_api_3",
            "old_status": "processing",
            "new_status": "completed",
        }

        completed = await client.post(f"{PREFIX}/ledger/withdrawals/status", json=payload)
        repeated = await client.post(f"{PREFIX}/ledger/withdrawals/status", json=payload)
        no_op = await client.post(
            f"{PREFIX}/ledger/withdrawals/status",
            json={**payload, "old_status": "completed", "new_status": "completed"},
        )

        assert completed.status_code == 200
        assert Decimal(completed.json()["updated_account"]["total_withdrawn"]) == Decimal("40.00")
        assert repeated.status_code == 409
        assert repeated.json()["error"]["code"] == "INVALID_STATUS_TRANSITION"
        assert no_op.status_code == 409
        assert no_op.json()["error"]["code"] == "NO_OP_TRANSITION"

    @pytest.mark.asyncio
    async def test_reused_idempotency_key_is_409(self, client: AsyncClient):
        await provision(client, "user_api_11")
        payload = {"user_id": "user_api_11", "amount": "5.00", "reference_id": "cb_api_7", "idempotency_key": "k-1"}

        first = await client.post(f"{PREFIX}/ledger/cashback", json=payload)
        replay = await client.post(f"{PREFIX}/ledger/cashback", json=payload)
        conflict = await client.post(f"{PREFIX}/ledger/cashback", json={**payload, "amount": "6.00"})

        assert first.status_code == 200
        assert replay.status_code == 200
        assert replay.json()["transaction"]["id"] == first.json()["transaction"]["id"]
        assert conflict.status_code == 409
        assert conflict.json()["error"]["code"] == "IDEMPOTENCY_CONFLICT"

    @pytest.mark.asyncio
    async def test_order_status_without_balance_effect_returns_null(self, client: AsyncClient):
        await provision(client, "user_api_8", earned="100.00")
        await client.post(
            f"{PREFIX}/ledger/orders",
            json={"user_id": "user_api_8", "amount": "25.00", "reference_id": "order_api_1"},
        )

        response = await client.post(
            f"{PREFIX}/ledger/orders/status",
            json={
                "user_id": "user_api_8",
                "amount": "25.00",
                "reference_id": "order_api_1",
                "old_status": "pending",
                "new_status": "shipped",
            },
        )

        assert response.status_code == 200
        assert response.json() is None

    @pytest.mark.asyncio
    async def test_transactions_are_listed_newest_first(self, client: AsyncClient):
        await provision(client, "user_api_9", earned="100.00")
        await client.post(
            f"{PREFIX}/ledger/orders",
            json={"user_id": "user_api_9", "amount": "25.00", "reference_id": "order_api_2"},
        )

        response = await client.get(f"{PREFIX}/ledger/accounts/user_api_9/transactions", params={"limit": 1})
        filtered = await client.get(
            f"{PREFIX}/ledger/accounts/user_api_9/transactions", params={"type": "cashback"}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert len(data["transactions"]) == 1
        assert data["transactions"][0]["transaction_type"] == "order_created"
        assert filtered.json()["total"] == 1

    @pytest.mark.asyncio
    async def test_client_info_reaches_audit_log(self, client: AsyncClient, db_session):
        await provision(client, "user_api_10")

        response = await client.post(
            f"{PREFIX}/ledger/referrals",
            json={"user_id": "user_api_10", "amount": "3.00", "reference_id": "ref_api_1"},
            headers={"X-Forwarded-For": "203.0.113.7, 10.0.0.1", "User-Agent": "ledger-tests"},
        )

        assert response.status_code == 200
        assert response.json()["audit_log"]["ip_address"] == "203.0.113.7"
        audit_log = (
            await db_session.execute(select(AuditLog).where(AuditLog.resource_id == "ref_api_1"))
        ).scalar_one()
        assert audit_log.user_agent == "ledger-tests"
