"""Ledger use cases"""
from .add_cashback import AddCashback
from .add_referral_commission import AddReferralCommission
from .reverse_referral_commission import ReverseReferralCommission
from .create_withdrawal import CreateWithdrawal
from .change_withdrawal_status import ChangeWithdrawalStatus
from .create_order import CreateOrder
from .change_order_status import ChangeOrderStatus
from .ensure_account import EnsureAccount
from .get_account import GetAccount
from .get_balance import GetAvailableBalance
from .list_transactions import ListTransactions
from .reconcile_ledger import ReconcileLedger
from .posting import LedgerPostingUseCase, Posting
from .dtos import (
    AccountDTO,
    AccountDiscrepancyDTO,
    AddCashbackCommandDTO,
    AddReferralCommissionCommandDTO,
    AuditLogDTO,
    AvailableBalanceDTO,
    ChangeOrderStatusCommandDTO,
    ChangeWithdrawalStatusCommandDTO,
    CreateOrderCommandDTO,
    CreateWithdrawalCommandDTO,
    EnsureAccountResponseDTO,
    ImmutableEventDTO,
    LedgerEntryResponseDTO,
    ListTransactionsResponseDTO,
    ReconciliationResultDTO,
    ReverseReferralCommissionCommandDTO,
    TransactionDTO,
)

__all__ = [
    "AddCashback",
    "AddReferralCommission",
    "ReverseReferralCommission",
    "CreateWithdrawal",
    "ChangeWithdrawalStatus",
    "CreateOrder",
    "ChangeOrderStatus",
    "EnsureAccount",
    "GetAccount",
    "GetAvailableBalance",
    "ListTransactions",
    "ReconcileLedger",
    "LedgerPostingUseCase",
    "Posting",
    "AccountDTO",
    "AccountDiscrepancyDTO",
    "AddCashbackCommandDTO",
    "AddReferralCommissionCommandDTO",
    "AuditLogDTO",
    "AvailableBalanceDTO",
    "ChangeOrderStatusCommandDTO",
    "ChangeWithdrawalStatusCommandDTO",
    "CreateOrderCommandDTO",
    "CreateWithdrawalCommandDTO",
    "EnsureAccountResponseDTO",
    "ImmutableEventDTO",
    "LedgerEntryResponseDTO",
    "ListTransactionsResponseDTO",
    "ReconciliationResultDTO",
    "ReverseReferralCommissionCommandDTO",
    "TransactionDTO",
]
