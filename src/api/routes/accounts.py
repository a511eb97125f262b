"""Account API Routes

Provisioning and read-only queries over ledger accounts.
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories import SqlAlchemyAccountRepository, SqlAlchemyTransactionRepository
from src.adapter.services import SqlAlchemyUnitOfWork
from src.api.error import ClientError
from src.app.use_cases.ledger import (
    AccountDTO,
    AvailableBalanceDTO,
    EnsureAccount,
    EnsureAccountResponseDTO,
    GetAccount,
    GetAvailableBalance,
    ListTransactions,
    ListTransactionsResponseDTO,
)
from src.depends import get_config, get_session
from src.domain.transaction import TransactionType

router = APIRouter(prefix="/ledger/accounts", tags=["Accounts"])

NOT_FOUND_RESPONSE = {
    404: {
        "description": "Account not found",
        "content": {
            "application/json": {
                "example": {
                    "error": {
                        "code": "ACCOUNT_NOT_FOUND",
                        "message": "No account found for user user_4f2a"
                    }
                }
            }
        }
    }
}


@router.put(
    "/{user_id}",
    response_model=EnsureAccountResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def ensure_account(
    user_id: str,
    session: AsyncSession = Depends(get_session)
):
    """
    Provision the account of a user, or return it if it already exists.

    New accounts start with all four totals at zero. Calling this again is
    harmless; `created` tells whether this call did the provisioning.
    """
    use_case = EnsureAccount(SqlAlchemyUnitOfWork(session), SqlAlchemyAccountRepository(session))
    result = await use_case.execute(user_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/{user_id}",
    response_model=AccountDTO,
    status_code=status.HTTP_200_OK,
    responses=NOT_FOUND_RESPONSE,
)
async def get_account(
    user_id: str,
    session: AsyncSession = Depends(get_session)
):
    """Return the four running totals of a user's account."""
    result = await GetAccount(SqlAlchemyAccountRepository(session)).execute(user_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/{user_id}/balance",
    response_model=AvailableBalanceDTO,
    status_code=status.HTTP_200_OK,
    responses=NOT_FOUND_RESPONSE,
)
async def get_balance(
    user_id: str,
    session: AsyncSession = Depends(get_session)
):
    """
    Get the spendable balance of a user.

    **Example response:**
    ```json
    {
      "user_id": "user_4f2a",
      "total_earned": "150.00",
      "total_withdrawn": "20.00",
      "total_pending_withdrawals": "30.00",
      "total_orders": "0.00",
      "available_balance": "100.00"
    }
    ```
    """
    result = await GetAvailableBalance(SqlAlchemyAccountRepository(session)).execute(user_id)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


@router.get(
    "/{user_id}/transactions",
    response_model=ListTransactionsResponseDTO,
    status_code=status.HTTP_200_OK,
)
async def list_transactions(
    user_id: str,
    limit: int = Query(20, ge=1),
    offset: int = Query(0, ge=0),
    transaction_type: Optional[TransactionType] = Query(None, alias="type"),
    session: AsyncSession = Depends(get_session),
    config=Depends(get_config),
):
    """
    List a user's ledger transactions, newest first.

    **Query parameters:**
    - `limit`: page size (capped by TRANSACTIONS_PAGE_LIMIT)
    - `offset`: number of transactions to skip
    - `type`: only return one transaction type
    """
    limit = min(limit, config.TRANSACTIONS_PAGE_LIMIT)

    use_case = ListTransactions(SqlAlchemyTransactionRepository(session))
    result = await use_case.execute(user_id, limit=limit, offset=offset, transaction_type=transaction_type)

    if result.is_err():
        raise ClientError(result.error)

    return result.value
