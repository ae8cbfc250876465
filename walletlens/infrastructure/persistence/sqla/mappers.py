from __future__ import annotations

from datetime import datetime, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from sqlalchemy.engine import Row

from walletlens.domain.models.transaction import Transaction

_CENTS = Decimal("100")


def amount_to_cents(amount: Decimal) -> int:
    return int((Decimal(amount) * _CENTS).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def cents_to_amount(cents: int) -> Decimal:
    return (Decimal(int(cents)) / _CENTS).quantize(Decimal("0.01"))


def to_utc_text(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def from_utc_text(value: str) -> datetime:
    parsed = datetime.fromisoformat(str(value))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def row_to_transaction(row: Row[Any]) -> Transaction:
    data = row._mapping
    return Transaction(
        id=int(data["id"]),
        user_id=str(data["user_id"]),
        title=str(data["title"]),
        amount=cents_to_amount(data["amount_cents"]),
        category=str(data["category"]),
        created_at=from_utc_text(data["created_at"]),
    )
