from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError

from walletlens.domain.errors import StoreUnavailableError, ValidationError
from walletlens.domain.models.transaction import Transaction
from walletlens.domain.ports.transaction_repository import TransactionRepositoryPort
from walletlens.observability.logging import get_logger

MAX_LIST_LIMIT = 200


def _require_user(user_id: str) -> str:
    user_key = str(user_id or "").strip()
    if not user_key:
        raise ValidationError("user_id is required")
    return user_key


def transaction_payload(tx: Transaction) -> dict[str, object]:
    return {
        "id": tx.id,
        "user_id": tx.user_id,
        "title": tx.title,
        "amount": f"{tx.amount:.2f}",
        "category": tx.category,
        "created_at": tx.created_at.isoformat(),
    }


def list_transactions_payload(
    repository: TransactionRepositoryPort, user_id: str, *, limit: int = MAX_LIST_LIMIT
) -> dict[str, object]:
    user_key = _require_user(user_id)
    capped = max(1, min(MAX_LIST_LIMIT, int(limit)))
    try:
        rows = repository.list_for_user(user_key, limit=capped)
    except SQLAlchemyError as exc:
        get_logger().bind(user_id=user_key).opt(exception=True).error(
            "listing transactions failed"
        )
        raise StoreUnavailableError("failed to load transactions") from exc
    return {
        "user_id": user_key,
        "count": len(rows),
        "transactions": [transaction_payload(tx) for tx in rows],
    }


def transaction_summary_payload(
    repository: TransactionRepositoryPort, user_id: str
) -> dict[str, object]:
    user_key = _require_user(user_id)
    try:
        totals = repository.summary_for_user(user_key)
    except SQLAlchemyError as exc:
        get_logger().bind(user_id=user_key).opt(exception=True).error(
            "transaction summary failed"
        )
        raise StoreUnavailableError("failed to load transaction summary") from exc
    return {
        "user_id": user_key,
        "balance": f"{totals['balance']:.2f}",
        "income": f"{totals['income']:.2f}",
        "expenses": f"{totals['expenses']:.2f}",
    }
