from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(frozen=True, slots=True)
class Transaction:
    id: int
    user_id: str
    title: str
    amount: Decimal
    category: str
    created_at: datetime


@dataclass(frozen=True, slots=True)
class TransactionDraft:
    """A transaction that has not been stored yet."""

    user_id: str
    title: str
    amount: Decimal
    category: str
    created_at: datetime | None = None
