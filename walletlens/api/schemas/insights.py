from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal

from pydantic import ConfigDict, Field

from walletlens.api.schemas.common import RequestModel, ResponseModel
from walletlens.domain.enums import (
    AnomalyType,
    Period,
    SummaryVariant,
    TrendDirection,
    TrendType,
)


class GenerateInsightsPayload(RequestModel):
    user_id: str = Field(min_length=1, max_length=128)
    period: Period = Period.WEEK


class _FromDomain(ResponseModel):
    model_config = ConfigDict(extra="ignore", from_attributes=True)


class TransactionOut(_FromDomain):
    id: int
    title: str
    amount: Decimal
    category: str
    created_at: datetime


class CategoryBucketOut(_FromDomain):
    name: str
    total: Decimal
    count: int
    percentage: Decimal
    transactions: list[TransactionOut]


class CurrentPeriodOut(_FromDomain):
    start: date
    end: date
    total_spent: Decimal
    total_income: Decimal
    net_balance: Decimal
    categories: list[CategoryBucketOut]
    transaction_count: int


class PreviousPeriodOut(_FromDomain):
    start: date
    end: date
    total_spent: Decimal
    total_income: Decimal


class TrendOut(_FromDomain):
    type: TrendType
    category: str | None = None
    change: Decimal
    change_percent: Decimal
    direction: TrendDirection
    comparable: bool


class AnomalyOut(_FromDomain):
    type: AnomalyType
    merchant: str
    count: int | None = None
    total: Decimal | None = None
    amount: Decimal | None = None
    category: str | None = None
    date: datetime | None = None


class MerchantRankOut(_FromDomain):
    merchant: str
    total: Decimal


class InsightsOut(_FromDomain):
    period: Period
    current_period: CurrentPeriodOut
    previous_period: PreviousPeriodOut
    trends: list[TrendOut]
    anomalies: list[AnomalyOut]
    top_merchants: list[MerchantRankOut]


class InsightReportOut(_FromDomain):
    insights: InsightsOut
    summary: str
    summary_variant: SummaryVariant
