from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from pathlib import Path

import sqlalchemy as sa
from sqlalchemy.engine import Connection

from walletlens.domain.models.transaction import Transaction, TransactionDraft

from .engine import get_engine
from .mappers import (
    amount_to_cents,
    cents_to_amount,
    row_to_transaction,
    to_utc_text,
)
from .models import metadata, transactions
from .session import connection_scope


def ensure_transactions_schema(conn: Connection) -> None:
    metadata.create_all(bind=conn, checkfirst=True)


def _day_floor(day: date) -> str:
    return to_utc_text(datetime.combine(day, time.min, tzinfo=timezone.utc))


class SqlTransactionRepository:
    def __init__(self, db_path: Path) -> None:
        self.engine = get_engine(db_path)
        with connection_scope(self.engine) as conn:
            ensure_transactions_schema(conn)

    def query_by_user_and_date_range(
        self,
        user_id: str,
        start: date,
        end: date,
        *,
        end_inclusive: bool = True,
    ) -> list[Transaction]:
        upper = end + timedelta(days=1) if end_inclusive else end
        stmt = (
            sa.select(transactions)
            .where(transactions.c.user_id == user_id)
            .where(transactions.c.created_at >= _day_floor(start))
            .where(transactions.c.created_at < _day_floor(upper))
            .order_by(transactions.c.created_at.desc(), transactions.c.id.desc())
        )
        with connection_scope(self.engine) as conn:
            rows = conn.execute(stmt).fetchall()
        return [row_to_transaction(row) for row in rows]

    def list_for_user(self, user_id: str, *, limit: int = 200) -> list[Transaction]:
        stmt = (
            sa.select(transactions)
            .where(transactions.c.user_id == user_id)
            .order_by(transactions.c.created_at.desc(), transactions.c.id.desc())
            .limit(max(1, int(limit)))
        )
        with connection_scope(self.engine) as conn:
            rows = conn.execute(stmt).fetchall()
        return [row_to_transaction(row) for row in rows]

    def summary_for_user(self, user_id: str) -> dict[str, Decimal]:
        cents = transactions.c.amount_cents
        stmt = sa.select(
            sa.func.coalesce(sa.func.sum(cents), 0).label("balance"),
            sa.func.coalesce(
                sa.func.sum(sa.case((cents > 0, cents), else_=0)), 0
            ).label("income"),
            sa.func.coalesce(
                sa.func.sum(sa.case((cents < 0, cents), else_=0)), 0
            ).label("expenses"),
        ).where(transactions.c.user_id == user_id)
        with connection_scope(self.engine) as conn:
            row = conn.execute(stmt).one()
        return {
            "balance": cents_to_amount(row.balance),
            "income": cents_to_amount(row.income),
            "expenses": cents_to_amount(row.expenses),
        }

    def add(self, draft: TransactionDraft) -> Transaction:
        created_at = draft.created_at or datetime.now(timezone.utc)
        values = {
            "user_id": draft.user_id,
            "title": draft.title,
            "amount_cents": amount_to_cents(draft.amount),
            "category": draft.category,
            "created_at": to_utc_text(created_at),
        }
        with connection_scope(self.engine) as conn:
            result = conn.execute(sa.insert(transactions).values(**values))
            new_id = int(result.inserted_primary_key[0])
            row = conn.execute(
                sa.select(transactions).where(transactions.c.id == new_id)
            ).one()
        return row_to_transaction(row)
