from __future__ import annotations

import os
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from pathlib import Path

from walletlens.domain.models.insights import InsightThresholds


def _env(key: str, default: str | None = None, *, legacy: tuple[str, ...] = ()) -> str | None:
    """
    Read an env var with optional legacy fallbacks.

    Empty strings are treated as "unset" so an exported-but-blank variable
    falls back to the default instead of breaking parsing.
    """
    for k in (key, *legacy):
        v = os.environ.get(k)
        if v is not None and str(v).strip() != "":
            return v
    return default


def _parse_bool(v: str | None, default: bool) -> bool:
    if v is None:
        return default
    s = str(v).strip().lower()
    if s in {"1", "true", "yes", "y", "on"}:
        return True
    if s in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _parse_int(v: str | None, default: int) -> int:
    if v is None:
        return default
    try:
        return int(str(v).strip())
    except ValueError:
        return default


def _parse_decimal(v: str | None, default: Decimal) -> Decimal:
    if v is None:
        return default
    try:
        value = Decimal(str(v).strip())
    except InvalidOperation:
        return default
    if not value.is_finite():
        return default
    return value


@dataclass(frozen=True)
class Settings:
    host: str
    port: int
    log_level: str
    log_json: bool
    log_path: str | None
    log_rotation_mb: int
    log_retention_days: int
    db_path: Path
    currency_symbol: str
    thresholds: InsightThresholds


def _load_thresholds() -> InsightThresholds:
    defaults = InsightThresholds()
    trend = _parse_decimal(
        _env("WALLETLENS_TREND_THRESHOLD_PERCENT"), defaults.trend_significance_percent
    )
    large = _parse_decimal(
        _env("WALLETLENS_LARGE_EXPENSE_AMOUNT"), defaults.large_expense_amount
    )
    visits = _parse_int(
        _env("WALLETLENS_FREQUENT_MERCHANT_VISITS"), defaults.frequent_merchant_visits
    )
    top_n = _parse_int(_env("WALLETLENS_TOP_MERCHANT_LIMIT"), defaults.top_merchant_limit)
    low_data = _parse_int(
        _env("WALLETLENS_LOW_DATA_TRANSACTION_COUNT"), defaults.low_data_transaction_count
    )
    # Non-positive counts would flag every merchant or hide the ranking.
    if visits <= 0:
        visits = defaults.frequent_merchant_visits
    if top_n <= 0:
        top_n = defaults.top_merchant_limit
    if low_data < 0:
        low_data = defaults.low_data_transaction_count
    return InsightThresholds(
        trend_significance_percent=trend,
        large_expense_amount=large,
        frequent_merchant_visits=visits,
        top_merchant_limit=top_n,
        low_data_transaction_count=low_data,
    )


def load_settings() -> Settings:
    host = _env("WALLETLENS_HOST", "127.0.0.1") or "127.0.0.1"
    port = _parse_int(_env("WALLETLENS_PORT", "8000", legacy=("PORT",)), 8000)

    log_level = (_env("WALLETLENS_LOG_LEVEL", "INFO") or "INFO").upper()
    log_json = _parse_bool(_env("WALLETLENS_LOG_JSON", None), False)
    log_path = _env("WALLETLENS_LOG_PATH", None)
    log_rotation_mb = _parse_int(_env("WALLETLENS_LOG_ROTATION_MB", "20"), 20)
    if log_rotation_mb <= 0:
        log_rotation_mb = 20
    log_retention_days = _parse_int(_env("WALLETLENS_LOG_RETENTION_DAYS", "14"), 14)
    if log_retention_days <= 0:
        log_retention_days = 14

    db_raw = _env("WALLETLENS_DB_PATH", "data/walletlens.db") or "data/walletlens.db"
    db_path = Path(db_raw)
    if not db_path.is_absolute():
        db_path = (Path.cwd() / db_path).resolve()

    currency_symbol = _env("WALLETLENS_CURRENCY_SYMBOL", "₹") or "₹"

    return Settings(
        host=host,
        port=port,
        log_level=log_level,
        log_json=log_json,
        log_path=log_path,
        log_rotation_mb=log_rotation_mb,
        log_retention_days=log_retention_days,
        db_path=db_path,
        currency_symbol=currency_symbol,
        thresholds=_load_thresholds(),
    )
