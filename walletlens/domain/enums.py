from __future__ import annotations

from enum import StrEnum


class Period(StrEnum):
    WEEK = "week"
    MONTH = "month"


class TrendType(StrEnum):
    OVERALL = "overall"
    CATEGORY = "category"


class TrendDirection(StrEnum):
    INCREASE = "increase"
    DECREASE = "decrease"


class AnomalyType(StrEnum):
    FREQUENT = "frequent"
    LARGE = "large"


class SummaryVariant(StrEnum):
    FULL = "full"
    LOW_DATA = "low_data"
