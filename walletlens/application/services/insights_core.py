from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Sequence

from walletlens.domain.enums import AnomalyType, Period, TrendDirection, TrendType
from walletlens.domain.models.insights import (
    AnomalyRecord,
    CategoryBucket,
    CurrentPeriodSummary,
    DateRanges,
    InsightResult,
    InsightThresholds,
    MerchantRank,
    PeriodBreakdown,
    PreviousPeriodSummary,
    TOP_MERCHANT_LIMIT,
    TrendRecord,
)
from walletlens.domain.models.transaction import Transaction

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")
_CENT = Decimal("0.01")
_TENTH = Decimal("0.1")


def _round2(value: Decimal) -> Decimal:
    return value.quantize(_CENT, rounding=ROUND_HALF_UP)


def _round1(value: Decimal) -> Decimal:
    return value.quantize(_TENTH, rounding=ROUND_HALF_UP)


def _as_decimal(value: object) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        # repr-based conversion keeps 12.34 as 12.34 instead of its binary expansion
        return Decimal(repr(value))
    return Decimal(str(value).strip())


def _percent(part: Decimal, whole: Decimal) -> Decimal:
    if whole == 0:
        return Decimal("0.0")
    return _round1(part / whole * _HUNDRED)


def _today(now: datetime | date) -> date:
    if isinstance(now, datetime):
        if now.tzinfo is not None:
            now = now.astimezone(timezone.utc)
        return now.date()
    return now


def resolve_date_ranges(period: Period, now: datetime | date) -> DateRanges:
    """
    Compute the current and previous calendar windows for ``period``.

    ``week`` is a rolling 7-day window anchored on today, and the previous week
    ends where the current one starts. ``month`` compares month-to-date against
    the full previous calendar month.
    """
    today = _today(now)
    if Period(period) is Period.WEEK:
        current_start = today - timedelta(days=7)
        return DateRanges(
            current_start=current_start,
            current_end=today,
            previous_start=current_start - timedelta(days=7),
            previous_end=current_start,
        )

    current_start = today.replace(day=1)
    previous_end = current_start - timedelta(days=1)
    return DateRanges(
        current_start=current_start,
        current_end=today,
        previous_start=previous_end.replace(day=1),
        previous_end=previous_end,
    )


def calculate_category_breakdown(transactions: Iterable[Transaction]) -> PeriodBreakdown:
    total_spent = _ZERO
    total_income = _ZERO
    category_total: dict[str, Decimal] = {}
    category_count: dict[str, int] = {}
    category_rows: dict[str, list[Transaction]] = {}

    for tx in transactions:
        amount = _as_decimal(tx.amount)
        if amount < 0:
            value = abs(amount)
            total_spent += value
            if tx.category not in category_total:
                category_total[tx.category] = _ZERO
                category_count[tx.category] = 0
                category_rows[tx.category] = []
            category_total[tx.category] += value
            category_count[tx.category] += 1
            category_rows[tx.category].append(tx)
        else:
            total_income += amount

    buckets = [
        CategoryBucket(
            name=name,
            total=_round2(total),
            count=category_count[name],
            percentage=_percent(total, total_spent),
            transactions=tuple(category_rows[name]),
        )
        for name, total in category_total.items()
    ]
    # list.sort is stable with reverse=True, so equal totals keep encounter order.
    buckets.sort(key=lambda bucket: bucket.total, reverse=True)

    return PeriodBreakdown(
        total_spent=_round2(total_spent),
        total_income=_round2(total_income),
        net_balance=_round2(total_income - total_spent),
        categories=tuple(buckets),
    )


def _direction(change: Decimal) -> TrendDirection:
    return TrendDirection.INCREASE if change > 0 else TrendDirection.DECREASE


def detect_trends(
    current: PeriodBreakdown,
    previous: PeriodBreakdown,
    thresholds: InsightThresholds | None = None,
) -> list[TrendRecord]:
    limits = thresholds or InsightThresholds()

    overall_change = current.total_spent - previous.total_spent
    trends = [
        TrendRecord(
            type=TrendType.OVERALL,
            change=_round2(overall_change),
            change_percent=_percent(overall_change, previous.total_spent),
            direction=_direction(overall_change),
            comparable=previous.total_spent > 0,
        )
    ]

    for bucket in current.categories:
        prev_bucket = previous.category(bucket.name)
        if prev_bucket is None or prev_bucket.total <= 0:
            continue
        change = bucket.total - prev_bucket.total
        change_percent = _percent(change, prev_bucket.total)
        if abs(change_percent) <= limits.trend_significance_percent:
            continue
        trends.append(
            TrendRecord(
                type=TrendType.CATEGORY,
                category=bucket.name,
                change=_round2(change),
                change_percent=change_percent,
                direction=_direction(change),
            )
        )
    return trends


def _expenses(transactions: Iterable[Transaction]) -> list[tuple[Transaction, Decimal]]:
    rows: list[tuple[Transaction, Decimal]] = []
    for tx in transactions:
        amount = _as_decimal(tx.amount)
        if amount < 0:
            rows.append((tx, abs(amount)))
    return rows


def _merchant_totals(
    expenses: Sequence[tuple[Transaction, Decimal]],
) -> tuple[dict[str, int], dict[str, Decimal]]:
    counts: dict[str, int] = {}
    totals: dict[str, Decimal] = {}
    for tx, value in expenses:
        counts[tx.title] = counts.get(tx.title, 0) + 1
        totals[tx.title] = totals.get(tx.title, _ZERO) + value
    return counts, totals


def find_anomalies(
    transactions: Iterable[Transaction],
    thresholds: InsightThresholds | None = None,
) -> list[AnomalyRecord]:
    limits = thresholds or InsightThresholds()
    expenses = _expenses(transactions)
    counts, totals = _merchant_totals(expenses)

    anomalies: list[AnomalyRecord] = []
    for merchant, count in counts.items():
        if count >= limits.frequent_merchant_visits:
            anomalies.append(
                AnomalyRecord(
                    type=AnomalyType.FREQUENT,
                    merchant=merchant,
                    count=count,
                    total=_round2(totals[merchant]),
                )
            )

    for tx, value in expenses:
        if value > limits.large_expense_amount:
            anomalies.append(
                AnomalyRecord(
                    type=AnomalyType.LARGE,
                    merchant=tx.title,
                    amount=_round2(value),
                    category=tx.category,
                    date=tx.created_at,
                )
            )
    return anomalies


def top_merchants(
    transactions: Iterable[Transaction],
    n: int = TOP_MERCHANT_LIMIT,
) -> list[MerchantRank]:
    _, totals = _merchant_totals(_expenses(transactions))
    ranked = sorted(totals.items(), key=lambda pair: pair[1], reverse=True)
    return [
        MerchantRank(merchant=merchant, total=_round2(total))
        for merchant, total in ranked[: max(0, int(n))]
    ]


def compute_insights(
    current_transactions: Iterable[Transaction],
    previous_transactions: Iterable[Transaction],
    period: Period,
    ranges: DateRanges,
    thresholds: InsightThresholds | None = None,
) -> InsightResult:
    limits = thresholds or InsightThresholds()
    current_rows = tuple(current_transactions)
    previous_rows = tuple(previous_transactions)

    current = calculate_category_breakdown(current_rows)
    previous = calculate_category_breakdown(previous_rows)

    return InsightResult(
        period=Period(period),
        current_period=CurrentPeriodSummary(
            start=ranges.current_start,
            end=ranges.current_end,
            total_spent=current.total_spent,
            total_income=current.total_income,
            net_balance=current.net_balance,
            categories=current.categories,
            transaction_count=len(current_rows),
        ),
        previous_period=PreviousPeriodSummary(
            start=ranges.previous_start,
            end=ranges.previous_end,
            total_spent=previous.total_spent,
            total_income=previous.total_income,
        ),
        trends=tuple(detect_trends(current, previous, limits)),
        anomalies=tuple(find_anomalies(current_rows, limits)),
        top_merchants=tuple(top_merchants(current_rows, limits.top_merchant_limit)),
    )
