from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from walletlens.api.dependencies import ApiContext, get_ctx
from walletlens.api.schemas.common import ok
from walletlens.api.schemas.insights import GenerateInsightsPayload, InsightReportOut
from walletlens.observability.request_context import current_request_id

router = APIRouter(tags=["insights"])


@router.post("/insights/generate")
async def generate_insights(
    payload: GenerateInsightsPayload,
    ctx: Annotated[ApiContext, Depends(get_ctx)],
) -> dict:
    report = ctx.insights.generate(payload.user_id, payload.period)
    data = InsightReportOut.model_validate(report).model_dump(mode="json")
    return ok(data, request_id=current_request_id())
