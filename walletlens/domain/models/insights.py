from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from walletlens.domain.enums import (
    AnomalyType,
    Period,
    SummaryVariant,
    TrendDirection,
    TrendType,
)
from walletlens.domain.models.transaction import Transaction

TREND_SIGNIFICANCE_PERCENT = Decimal("20")
LARGE_EXPENSE_AMOUNT = Decimal("100")
FREQUENT_MERCHANT_VISITS = 3
TOP_MERCHANT_LIMIT = 5
LOW_DATA_TRANSACTION_COUNT = 5


@dataclass(frozen=True, slots=True)
class InsightThresholds:
    trend_significance_percent: Decimal = TREND_SIGNIFICANCE_PERCENT
    large_expense_amount: Decimal = LARGE_EXPENSE_AMOUNT
    frequent_merchant_visits: int = FREQUENT_MERCHANT_VISITS
    top_merchant_limit: int = TOP_MERCHANT_LIMIT
    low_data_transaction_count: int = LOW_DATA_TRANSACTION_COUNT


@dataclass(frozen=True, slots=True)
class DateWindow:
    start: date
    end: date


@dataclass(frozen=True, slots=True)
class DateRanges:
    current_start: date
    current_end: date
    previous_start: date
    previous_end: date

    @property
    def current(self) -> DateWindow:
        return DateWindow(start=self.current_start, end=self.current_end)

    @property
    def previous(self) -> DateWindow:
        return DateWindow(start=self.previous_start, end=self.previous_end)


@dataclass(frozen=True, slots=True)
class CategoryBucket:
    name: str
    total: Decimal
    count: int
    percentage: Decimal
    transactions: tuple[Transaction, ...] = ()


@dataclass(frozen=True, slots=True)
class PeriodBreakdown:
    total_spent: Decimal
    total_income: Decimal
    net_balance: Decimal
    categories: tuple[CategoryBucket, ...] = ()

    def category(self, name: str) -> CategoryBucket | None:
        for bucket in self.categories:
            if bucket.name == name:
                return bucket
        return None


@dataclass(frozen=True, slots=True)
class TrendRecord:
    type: TrendType
    change: Decimal
    change_percent: Decimal
    direction: TrendDirection
    category: str | None = None
    # False when the previous-period base was zero and change_percent is a placeholder.
    comparable: bool = True


@dataclass(frozen=True, slots=True)
class AnomalyRecord:
    type: AnomalyType
    merchant: str
    count: int | None = None
    total: Decimal | None = None
    amount: Decimal | None = None
    category: str | None = None
    date: datetime | None = None


@dataclass(frozen=True, slots=True)
class MerchantRank:
    merchant: str
    total: Decimal


@dataclass(frozen=True, slots=True)
class CurrentPeriodSummary:
    start: date
    end: date
    total_spent: Decimal
    total_income: Decimal
    net_balance: Decimal
    categories: tuple[CategoryBucket, ...]
    transaction_count: int


@dataclass(frozen=True, slots=True)
class PreviousPeriodSummary:
    start: date
    end: date
    total_spent: Decimal
    total_income: Decimal


@dataclass(frozen=True, slots=True)
class InsightResult:
    period: Period
    current_period: CurrentPeriodSummary
    previous_period: PreviousPeriodSummary
    trends: tuple[TrendRecord, ...] = ()
    anomalies: tuple[AnomalyRecord, ...] = ()
    top_merchants: tuple[MerchantRank, ...] = ()


@dataclass(slots=True)
class InsightReport:
    insights: InsightResult
    summary: str
    summary_variant: SummaryVariant
