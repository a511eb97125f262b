"""Ledger API Routes

FastAPI routes for every balance-affecting operation. Each request runs one
posting: transaction, immutable event, account update and audit log commit
together or not at all.
"""

from typing import Optional, Type
from fastapi import APIRouter, Depends, Request, status
from sqlmodel.ext.asyncio.session import AsyncSession

from src.adapter.repositories import (
    SqlAlchemyAccountRepository,
    SqlAlchemyAuditLogRepository,
    SqlAlchemyImmutableEventRepository,
    SqlAlchemyTransactionRepository,
)
from src.adapter.services import SqlAlchemyUnitOfWork
from src.api.error import ClientError
from src.api.schemas.ledger_request import (
    CashbackRequestSchema,
    LedgerPostingRequestSchema,
    OrderRequestSchema,
    OrderStatusRequestSchema,
    ReferralCommissionRequestSchema,
    ReverseReferralCommissionRequestSchema,
    WithdrawalRequestSchema,
    WithdrawalStatusRequestSchema,
)
from src.app.use_cases.ledger import (
    AddCashback,
    AddCashbackCommandDTO,
    AddReferralCommission,
    AddReferralCommissionCommandDTO,
    ChangeOrderStatus,
    ChangeOrderStatusCommandDTO,
    ChangeWithdrawalStatus,
    ChangeWithdrawalStatusCommandDTO,
    CreateOrder,
    CreateOrderCommandDTO,
    CreateWithdrawal,
    CreateWithdrawalCommandDTO,
    LedgerEntryResponseDTO,
    LedgerPostingUseCase,
    ReverseReferralCommission,
    ReverseReferralCommissionCommandDTO,
)
from src.depends import get_config, get_session

router = APIRouter(prefix="/ledger", tags=["Ledger"])


def _error_example(code: str, message: str) -> dict:
    return {"application/json": {"example": {"error": {"code": code, "message": message}}}}


POSTING_RESPONSES = {
    400: {
        "description": "Invalid amount or request",
        "content": _error_example("INVALID_AMOUNT", "Amount must be greater than 0 with at most 2 decimal places, got 0"),
    },
    404: {
        "description": "Account not found",
        "content": _error_example("ACCOUNT_NOT_FOUND", "No account found for user user_4f2a"),
    },
    409: {
        "description": "Concurrent modification",
        "content": _error_example("CONCURRENT_MODIFICATION", "Account for user user_4f2a kept changing during the update"),
    },
}

SPENDING_RESPONSES = {
    **POSTING_RESPONSES,
    402: {
        "description": "Insufficient balance",
        "content": _error_example("INSUFFICIENT_BALANCE", "Insufficient balance. Required: 100.00, Available: 50.00"),
    },
}

STATUS_RESPONSES = {
    **SPENDING_RESPONSES,
    409: {
        "description": "Status transition rejected",
        "content": _error_example("INVALID_STATUS_TRANSITION", "Cannot change status from completed to cancelled"),
    },
}


def client_ip(request: Request) -> Optional[str]:
    """First X-Forwarded-For hop, else X-Real-IP, else the socket peer."""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()

    return request.client.host if request.client else None


async def _post(
    use_case_class: Type[LedgerPostingUseCase],
    command,
    session: AsyncSession,
    config,
):
    use_case = use_case_class(
        SqlAlchemyUnitOfWork(session),
        SqlAlchemyAccountRepository(session),
        SqlAlchemyTransactionRepository(session),
        SqlAlchemyImmutableEventRepository(session),
        SqlAlchemyAuditLogRepository(session),
        max_attempts=config.LEDGER_MAX_ATTEMPTS,
    )
    result = await use_case.execute(command)

    if result.is_err():
        raise ClientError(result.error)

    return result.value


def _command_fields(payload: LedgerPostingRequestSchema, request: Request) -> dict:
    return {
        **payload.model_dump(),
        "ip_address": client_ip(request),
        "user_agent": request.headers.get("user-agent"),
    }


@router.post(
    "/cashback",
    response_model=LedgerEntryResponseDTO,
    status_code=status.HTTP_200_OK,
    responses=POSTING_RESPONSES,
)
async def add_cashback(
    payload: CashbackRequestSchema,
    request: Request,
    session: AsyncSession = Depends(get_session),
    config=Depends(get_config),
):
    """
    Credit cashback earned from a broker trade.

    **Example request:**
    ```json
    {
      "user_id": "user_4f2a",
      "amount": "50.00",
      "reference_id": "cashback_8812",
      "metadata": {"broker": "acme"}
    }
    ```

    **Returns:**
    - 200: transaction, immutable event, audit log and updated account
    - 400: amount not positive or more than 2 decimal places
    - 404: user has no account
    """
    command = AddCashbackCommandDTO(**_command_fields(payload, request))
    return await _post(AddCashback, command, session, config)


@router.post(
    "/referrals",
    response_model=LedgerEntryResponseDTO,
    status_code=status.HTTP_200_OK,
    responses=POSTING_RESPONSES,
)
async def add_referral_commission(
    payload: ReferralCommissionRequestSchema,
    request: Request,
    session: AsyncSession = Depends(get_session),
    config=Depends(get_config),
):
    """Credit a referral commission to the referrer."""
    command = AddReferralCommissionCommandDTO(**_command_fields(payload, request))
    return await _post(AddReferralCommission, command, session, config)


@router.post(
    "/referrals/reverse",
    response_model=LedgerEntryResponseDTO,
    status_code=status.HTTP_200_OK,
    responses=POSTING_RESPONSES,
)
async def reverse_referral_commission(
    payload: ReverseReferralCommissionRequestSchema,
    request: Request,
    session: AsyncSession = Depends(get_session),
    config=Depends(get_config),
):
    """
    Claw back a referral commission.

    total_earned is reduced by the amount but never below zero.
    """
    command = ReverseReferralCommissionCommandDTO(**_command_fields(payload, request))
    return await _post(ReverseReferralCommission, command, session, config)


@router.post(
    "/withdrawals",
    response_model=LedgerEntryResponseDTO,
    status_code=status.HTTP_200_OK,
    responses=SPENDING_RESPONSES,
)
async def create_withdrawal(
    payload: WithdrawalRequestSchema,
    request: Request,
    session: AsyncSession = Depends(get_session),
    config=Depends(get_config),
):
    """
    Request a withdrawal. The amount is held as pending until the
    withdrawal is completed or cancelled.

    **Returns:**
    - 200: withdrawal recorded as processing
    - 402: available balance is lower than the amount
    """
    command = CreateWithdrawalCommandDTO(**_command_fields(payload, request))
    return await _post(CreateWithdrawal, command, session, config)


@router.post(
    "/withdrawals/status",
    response_model=LedgerEntryResponseDTO,
    status_code=status.HTTP_200_OK,
    responses=STATUS_RESPONSES,
)
async def change_withdrawal_status(
    payload: WithdrawalStatusRequestSchema,
    request: Request,
    session: AsyncSession = Depends(get_session),
    config=Depends(get_config),
):
    """
    Complete or cancel a processing withdrawal.

    **Returns:**
    - 200: status change recorded
    - 409: same status, unsupported transition, or the withdrawal is
      already recorded in another status
    """
    command = ChangeWithdrawalStatusCommandDTO(**_command_fields(payload, request))
    return await _post(ChangeWithdrawalStatus, command, session, config)


@router.post(
    "/orders",
    response_model=LedgerEntryResponseDTO,
    status_code=status.HTTP_200_OK,
    responses=SPENDING_RESPONSES,
)
async def create_order(
    payload: OrderRequestSchema,
    request: Request,
    session: AsyncSession = Depends(get_session),
    config=Depends(get_config),
):
    """Reserve funds for a store order."""
    command = CreateOrderCommandDTO(**_command_fields(payload, request))
    return await _post(CreateOrder, command, session, config)


@router.post(
    "/orders/status",
    response_model=Optional[LedgerEntryResponseDTO],
    status_code=status.HTTP_200_OK,
    responses=STATUS_RESPONSES,
)
async def change_order_status(
    payload: OrderStatusRequestSchema,
    request: Request,
    session: AsyncSession = Depends(get_session),
    config=Depends(get_config),
):
    """
    Apply a store order status change to the reservation.

    Cancelling releases the reservation; reactivating a cancelled order
    reserves the amount again if the balance still covers it. A change
    between two non-cancelled statuses has no balance effect and returns
    `null`.
    """
    command = ChangeOrderStatusCommandDTO(**_command_fields(payload, request))
    return await _post(ChangeOrderStatus, command, session, config)
