from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request

from walletlens.application.services.insights_service import InsightsService
from walletlens.domain.ports.summary_writer import SummaryWriterPort
from walletlens.infrastructure.persistence.sqla import SqlTransactionRepository
from walletlens.infrastructure.summary.static_writer import get_summary_writer
from walletlens.settings import Settings


@dataclass(slots=True)
class ApiContext:
    settings: Settings
    transactions: SqlTransactionRepository
    insights: InsightsService


def build_context(settings: Settings, writer: SummaryWriterPort | None = None) -> ApiContext:
    repository = SqlTransactionRepository(settings.db_path)
    insights = InsightsService(
        repository,
        writer or get_summary_writer(),
        thresholds=settings.thresholds,
        currency=settings.currency_symbol,
    )
    return ApiContext(
        settings=settings,
        transactions=repository,
        insights=insights,
    )


def get_ctx(request: Request) -> ApiContext:
    return request.app.state.ctx
