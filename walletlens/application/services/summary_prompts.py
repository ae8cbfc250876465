from __future__ import annotations

from decimal import Decimal

from walletlens.domain.enums import AnomalyType, Period, SummaryVariant, TrendType
from walletlens.domain.models.insights import AnomalyRecord, InsightResult, TrendRecord

FULL_SUMMARY_FALLBACK = "Unable to generate AI summary at this time."
LOW_DATA_SUMMARY_FALLBACK = (
    "It looks like a quiet period! Keep adding transactions to see more detailed insights."
)

_PROMPT_ITEM_LIMIT = 3


def _period_label(period: Period) -> str:
    return "This Week" if Period(period) is Period.WEEK else "This Month"


def _money(value: Decimal, currency: str) -> str:
    return f"{currency}{value:.2f}"


def _trend_line(trend: TrendRecord) -> str:
    verb = f"{trend.direction.value}d"
    pct = abs(trend.change_percent)
    if trend.type is TrendType.OVERALL:
        if not trend.comparable:
            return f"- Overall spending {verb} (no spending in the previous period)"
        return f"- Overall spending {verb} by {pct}%"
    return f"- {trend.category}: {verb} by {pct}%"


def _anomaly_line(anomaly: AnomalyRecord, currency: str) -> str:
    if anomaly.type is AnomalyType.FREQUENT:
        return f"- {anomaly.merchant}: {anomaly.count} visits ({_money(anomaly.total or Decimal(0), currency)})"
    return f"- Large expense: {anomaly.merchant} ({_money(anomaly.amount or Decimal(0), currency)})"


def _lines_or_none(lines: list[str]) -> str:
    return "\n".join(lines) if lines else "- None"


def select_summary_variant(insights: InsightResult, low_data_transaction_count: int) -> SummaryVariant:
    if insights.current_period.transaction_count < low_data_transaction_count:
        return SummaryVariant.LOW_DATA
    return SummaryVariant.FULL


def build_full_summary_prompt(insights: InsightResult, *, currency: str = "₹") -> str:
    current = insights.current_period
    categories = [
        f"- {bucket.name}: {_money(bucket.total, currency)} ({bucket.percentage}%)"
        for bucket in current.categories[:_PROMPT_ITEM_LIMIT]
    ]
    trends = [_trend_line(trend) for trend in insights.trends[:_PROMPT_ITEM_LIMIT]]
    anomalies = [
        _anomaly_line(anomaly, currency)
        for anomaly in insights.anomalies[:_PROMPT_ITEM_LIMIT]
    ]

    return f"""
You are a friendly financial advisor. Write a personalized spending summary for the user.

Period: {_period_label(insights.period)}

Current Period:
- Total Spent: {_money(current.total_spent, currency)}
- Total Income: {_money(current.total_income, currency)}
- Net Balance: {_money(current.net_balance, currency)}
- Transactions: {current.transaction_count}

Top Categories:
{_lines_or_none(categories)}

Trends:
{_lines_or_none(trends)}

Anomalies:
{_lines_or_none(anomalies)}

Write a friendly, concise summary (3-4 paragraphs) that:
1. Highlights the overall spending situation
2. Points out interesting trends or changes
3. Mentions any concerning patterns (if any)
4. Gives ONE actionable savings tip

All amounts are in {currency}.
Keep it positive and encouraging. Use emojis sparingly.
""".strip()


def build_low_data_summary_prompt(insights: InsightResult, *, currency: str = "₹") -> str:
    current = insights.current_period
    return f"""
You are a friendly financial advisor. The user has very few transactions ({current.transaction_count}) for this period ({_period_label(insights.period)}).

Total Spent: {_money(current.total_spent, currency)}
Total Income: {_money(current.total_income, currency)}

Write a short, encouraging message (1-2 paragraphs) that:
1. Acknowledges the low activity (e.g., "It looks like a quiet week!").
2. Mentions the total spent if > 0.
3. Encourages them to keep tracking their expenses to unlock more detailed insights.

Keep it light and friendly.
""".strip()


def build_summary_prompt(
    insights: InsightResult, variant: SummaryVariant, *, currency: str = "₹"
) -> str:
    if variant is SummaryVariant.LOW_DATA:
        return build_low_data_summary_prompt(insights, currency=currency)
    return build_full_summary_prompt(insights, currency=currency)


def summary_fallback(variant: SummaryVariant) -> str:
    if variant is SummaryVariant.LOW_DATA:
        return LOW_DATA_SUMMARY_FALLBACK
    return FULL_SUMMARY_FALLBACK
