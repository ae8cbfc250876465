import os
import unittest
from contextlib import contextmanager
from decimal import Decimal

from walletlens.settings import load_settings


@contextmanager
def temp_environ(update: dict[str, str | None]):
    old = dict(os.environ)
    try:
        for k, v in update.items():
            if v is None:
                os.environ.pop(k, None)
            else:
                os.environ[k] = v
        yield
    finally:
        os.environ.clear()
        os.environ.update(old)


class TestSettings(unittest.TestCase):
    def test_legacy_port_var_still_works(self) -> None:
        with temp_environ({"WALLETLENS_PORT": None, "PORT": "9999"}):
            s = load_settings()
            self.assertEqual(s.port, 9999)

    def test_threshold_defaults(self) -> None:
        with temp_environ(
            {
                "WALLETLENS_TREND_THRESHOLD_PERCENT": None,
                "WALLETLENS_LARGE_EXPENSE_AMOUNT": None,
                "WALLETLENS_FREQUENT_MERCHANT_VISITS": None,
                "WALLETLENS_TOP_MERCHANT_LIMIT": None,
                "WALLETLENS_LOW_DATA_TRANSACTION_COUNT": None,
            }
        ):
            t = load_settings().thresholds
            self.assertEqual(t.trend_significance_percent, Decimal("20"))
            self.assertEqual(t.large_expense_amount, Decimal("100"))
            self.assertEqual(t.frequent_merchant_visits, 3)
            self.assertEqual(t.top_merchant_limit, 5)
            self.assertEqual(t.low_data_transaction_count, 5)

    def test_threshold_overrides_and_bad_values(self) -> None:
        with temp_environ(
            {
                "WALLETLENS_TREND_THRESHOLD_PERCENT": "15.5",
                "WALLETLENS_LARGE_EXPENSE_AMOUNT": "not-a-number",
                "WALLETLENS_FREQUENT_MERCHANT_VISITS": "0",
                "WALLETLENS_TOP_MERCHANT_LIMIT": "10",
            }
        ):
            t = load_settings().thresholds
            self.assertEqual(t.trend_significance_percent, Decimal("15.5"))
            self.assertEqual(t.large_expense_amount, Decimal("100"))
            self.assertEqual(t.frequent_merchant_visits, 3)
            self.assertEqual(t.top_merchant_limit, 10)

    def test_blank_values_fall_back(self) -> None:
        with temp_environ({"WALLETLENS_LOG_LEVEL": "  ", "WALLETLENS_LOG_JSON": "yes"}):
            s = load_settings()
            self.assertEqual(s.log_level, "INFO")
            self.assertTrue(s.log_json)
            self.assertTrue(s.db_path.is_absolute())


if __name__ == "__main__":
    unittest.main()
