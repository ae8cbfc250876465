from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Protocol

from walletlens.domain.models.transaction import Transaction, TransactionDraft


class TransactionRepositoryPort(Protocol):
    def query_by_user_and_date_range(
        self,
        user_id: str,
        start: date,
        end: date,
        *,
        end_inclusive: bool = True,
    ) -> list[Transaction]: ...

    def list_for_user(self, user_id: str, *, limit: int = 200) -> list[Transaction]: ...

    def summary_for_user(self, user_id: str) -> dict[str, Decimal]: ...

    def add(self, draft: TransactionDraft) -> Transaction: ...
