from __future__ import annotations

from sqlalchemy import Column, Index, Integer, MetaData, String, Table

metadata = MetaData()

transactions = Table(
    "transactions",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_id", String, nullable=False),
    Column("title", String, nullable=False),
    Column("amount_cents", Integer, nullable=False),
    Column("category", String, nullable=False),
    # UTC ISO-8601, so lexical order matches chronological order.
    Column("created_at", String, nullable=False),
)

Index("idx_transactions_user_created", transactions.c.user_id, transactions.c.created_at)
