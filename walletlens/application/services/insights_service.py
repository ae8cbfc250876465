from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError

from walletlens.application.services.insights_core import (
    compute_insights,
    resolve_date_ranges,
)
from walletlens.application.services.summary_prompts import (
    build_summary_prompt,
    select_summary_variant,
    summary_fallback,
)
from walletlens.domain.enums import Period
from walletlens.domain.errors import StoreUnavailableError, ValidationError
from walletlens.domain.models.insights import InsightReport, InsightThresholds
from walletlens.domain.ports.summary_writer import SummaryWriterPort
from walletlens.domain.ports.transaction_repository import TransactionRepositoryPort
from walletlens.observability.logging import get_logger


def parse_period(value: str | Period) -> Period:
    try:
        return Period(value)
    except ValueError as exc:
        raise ValidationError(
            "period must be 'week' or 'month'", details={"period": str(value)}
        ) from exc


class InsightsService:
    def __init__(
        self,
        repository: TransactionRepositoryPort,
        writer: SummaryWriterPort,
        *,
        thresholds: InsightThresholds | None = None,
        currency: str = "₹",
    ) -> None:
        self.repository = repository
        self.writer = writer
        self.thresholds = thresholds or InsightThresholds()
        self.currency = currency

    def generate(
        self,
        user_id: str,
        period: str | Period = Period.WEEK,
        *,
        now: datetime | None = None,
    ) -> InsightReport:
        user_key = str(user_id or "").strip()
        if not user_key:
            raise ValidationError("user_id is required")
        resolved_period = parse_period(period)
        logger = get_logger().bind(user_id=user_key)

        ranges = resolve_date_ranges(resolved_period, now or datetime.now(timezone.utc))
        try:
            current_rows = self.repository.query_by_user_and_date_range(
                user_key, ranges.current_start, ranges.current_end, end_inclusive=True
            )
            # The previous window stops strictly before the current one starts.
            previous_rows = self.repository.query_by_user_and_date_range(
                user_key, ranges.previous_start, ranges.current_start, end_inclusive=False
            )
        except SQLAlchemyError as exc:
            logger.opt(exception=True).error("transaction store query failed")
            raise StoreUnavailableError("failed to load transactions") from exc

        insights = compute_insights(
            current_rows, previous_rows, resolved_period, ranges, self.thresholds
        )
        variant = select_summary_variant(
            insights, self.thresholds.low_data_transaction_count
        )
        logger.info(
            f"insights computed period={resolved_period} "
            f"current_tx={len(current_rows)} previous_tx={len(previous_rows)} "
            f"trends={len(insights.trends)} anomalies={len(insights.anomalies)} "
            f"variant={variant}"
        )

        prompt = build_summary_prompt(insights, variant, currency=self.currency)
        try:
            summary = str(self.writer.write(prompt) or "").strip()
        except Exception:
            logger.opt(exception=True).warning("summary generation failed, using fallback text")
            summary = ""
        if not summary:
            summary = summary_fallback(variant)

        return InsightReport(insights=insights, summary=summary, summary_variant=variant)
