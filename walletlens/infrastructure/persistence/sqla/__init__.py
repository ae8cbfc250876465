from __future__ import annotations

from .engine import build_db_url, get_engine
from .repositories import SqlTransactionRepository, ensure_transactions_schema
from .session import connection_scope

__all__ = [
    "SqlTransactionRepository",
    "build_db_url",
    "connection_scope",
    "ensure_transactions_schema",
    "get_engine",
]
