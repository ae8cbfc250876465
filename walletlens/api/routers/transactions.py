from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from walletlens.api.dependencies import ApiContext, get_ctx
from walletlens.api.schemas.common import ok
from walletlens.application.services.transaction_service import (
    MAX_LIST_LIMIT,
    list_transactions_payload,
    transaction_summary_payload,
)
from walletlens.observability.request_context import current_request_id

router = APIRouter(tags=["transactions"])


@router.get("/transactions/summary/{user_id}")
async def get_summary(user_id: str, ctx: Annotated[ApiContext, Depends(get_ctx)]) -> dict:
    payload = transaction_summary_payload(ctx.transactions, user_id)
    return ok(payload, request_id=current_request_id())


@router.get("/transactions/{user_id}")
async def get_transactions(
    user_id: str,
    ctx: Annotated[ApiContext, Depends(get_ctx)],
    limit: int = Query(default=MAX_LIST_LIMIT, ge=1, le=MAX_LIST_LIMIT),
) -> dict:
    payload = list_transactions_payload(ctx.transactions, user_id, limit=limit)
    return ok(payload, request_id=current_request_id())
