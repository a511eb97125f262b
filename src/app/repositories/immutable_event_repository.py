"""Immutable Event Repository Interface"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import List, Optional, Tuple
from src.domain.immutable_event import ImmutableEvent
from src.domain.transaction import TransactionType


class ImmutableEventRepository(ABC):
    @abstractmethod
    async def create(self, event: ImmutableEvent) -> ImmutableEvent:
        pass

    @abstractmethod
    async def get_by_transaction_id(self, transaction_id: int) -> Optional[ImmutableEvent]:
        pass

    @abstractmethod
    async def get_replay_entries(self, user_id: str) -> List[Tuple[TransactionType, Decimal]]:
        """
        (transaction_type, applied amount) pairs for a user in posting order

        The amount comes from the event snapshot, not the signed
        transaction amount, because status markers are recorded as zero.
        """
        pass
