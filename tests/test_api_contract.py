import dataclasses
import tempfile
import unittest
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

from walletlens.api.app import create_app
from walletlens.domain.models.transaction import TransactionDraft
from walletlens.infrastructure.persistence.sqla.engine import dispose_engine
from walletlens.settings import load_settings

try:
    from fastapi.testclient import TestClient
except Exception:  # pragma: no cover - httpx may be missing
    TestClient = None


class _CannedWriter:
    def write(self, prompt: str) -> str:
        return "Spending looks steady."


class ApiContractTests(unittest.TestCase):
    def setUp(self) -> None:
        if TestClient is None:
            self.skipTest("fastapi TestClient unavailable (httpx missing)")
        self._tmp = tempfile.TemporaryDirectory()
        self.db_path = Path(self._tmp.name) / "wallet.db"
        self.settings = dataclasses.replace(load_settings(), db_path=self.db_path)
        self.app = create_app(self.settings, writer=_CannedWriter())

    def tearDown(self) -> None:
        dispose_engine(self.db_path)
        self._tmp.cleanup()

    def _seed(self, title: str, amount: str, category: str, days_ago: int) -> None:
        repo = self.app.state.ctx.transactions
        repo.add(
            TransactionDraft(
                user_id="u1",
                title=title,
                amount=Decimal(amount),
                category=category,
                created_at=datetime.now(timezone.utc) - timedelta(days=days_ago),
            )
        )

    def test_health_and_error_envelope(self) -> None:
        with TestClient(self.app) as client:
            health = client.get("/api/v1/health", headers={"X-Request-Id": "req-123"})
            self.assertEqual(health.status_code, 200)
            payload = health.json()
            self.assertTrue(payload["data"]["ok"])
            self.assertEqual(payload["meta"]["request_id"], "req-123")
            self.assertEqual(health.headers["X-Request-Id"], "req-123")

            not_found = client.get("/api/v1/not-found")
            self.assertEqual(not_found.status_code, 404)
            error_payload = not_found.json()
            self.assertEqual(error_payload["error"]["code"], "not_found")
            self.assertTrue(error_payload["request_id"])

    def test_generate_insights(self) -> None:
        self._seed("Cafe", "-50", "food", 1)
        self._seed("Cafe", "-60", "food", 2)
        self._seed("Cafe", "-40", "food", 3)
        self._seed("Power", "-160", "bills", 4)
        self._seed("Employer", "2000", "salary", 5)
        self._seed("Power", "-100", "bills", 10)

        with TestClient(self.app) as client:
            resp = client.post("/api/v1/insights/generate", json={"user_id": "u1"})
            self.assertEqual(resp.status_code, 200)
            data = resp.json()["data"]

        self.assertEqual(data["summary"], "Spending looks steady.")
        self.assertEqual(data["summary_variant"], "full")
        insights = data["insights"]
        self.assertEqual(insights["period"], "week")
        current = insights["current_period"]
        self.assertEqual(current["transaction_count"], 5)
        self.assertEqual(Decimal(current["total_spent"]), Decimal("310"))
        self.assertEqual([c["name"] for c in current["categories"]], ["bills", "food"])
        self.assertEqual(len(current["categories"][1]["transactions"]), 3)
        self.assertEqual(Decimal(insights["previous_period"]["total_spent"]), Decimal("100"))

        trends = insights["trends"]
        self.assertEqual(trends[0]["type"], "overall")
        self.assertEqual(trends[0]["direction"], "increase")
        self.assertEqual(Decimal(trends[0]["change_percent"]), Decimal("210"))
        self.assertEqual(trends[1]["category"], "bills")
        self.assertEqual(Decimal(trends[1]["change_percent"]), Decimal("60"))

        anomalies = insights["anomalies"]
        self.assertEqual([a["type"] for a in anomalies], ["frequent", "large"])
        self.assertEqual(anomalies[0]["count"], 3)
        self.assertEqual(Decimal(anomalies[0]["total"]), Decimal("150"))
        self.assertEqual(anomalies[1]["merchant"], "Power")

        self.assertEqual(
            [m["merchant"] for m in insights["top_merchants"]], ["Power", "Cafe"]
        )

    def test_generate_insights_validation(self) -> None:
        with TestClient(self.app) as client:
            bad_period = client.post(
                "/api/v1/insights/generate", json={"user_id": "u1", "period": "year"}
            )
            self.assertEqual(bad_period.status_code, 422)
            self.assertEqual(bad_period.json()["error"]["code"], "validation_error")

            capitalised = client.post(
                "/api/v1/insights/generate", json={"user_id": "u1", "period": "Month"}
            )
            self.assertEqual(capitalised.status_code, 422)

            missing_user = client.post("/api/v1/insights/generate", json={"period": "month"})
            self.assertEqual(missing_user.status_code, 422)

            empty = client.post(
                "/api/v1/insights/generate", json={"user_id": "nobody", "period": "month"}
            )
            self.assertEqual(empty.status_code, 200)
            data = empty.json()["data"]
            self.assertEqual(data["summary_variant"], "low_data")
            self.assertEqual(data["insights"]["current_period"]["categories"], [])
            self.assertEqual(len(data["insights"]["trends"]), 1)

    def test_transactions_endpoints(self) -> None:
        self._seed("Salary", "1000", "salary", 3)
        self._seed("Cafe", "-4.5", "food", 1)

        with TestClient(self.app) as client:
            listing = client.get("/api/v1/transactions/u1")
            self.assertEqual(listing.status_code, 200)
            rows = listing.json()["data"]["transactions"]
            self.assertEqual([row["title"] for row in rows], ["Cafe", "Salary"])

            summary = client.get("/api/v1/transactions/summary/u1")
            self.assertEqual(summary.status_code, 200)
            self.assertEqual(
                summary.json()["data"],
                {"user_id": "u1", "balance": "995.50", "income": "1000.00", "expenses": "-4.50"},
            )

            too_many = client.get("/api/v1/transactions/u1", params={"limit": 1000})
            self.assertEqual(too_many.status_code, 422)


if __name__ == "__main__":
    unittest.main()
