"""
Integration tests for the fintrack HTTP endpoints.
"""

import pytest

RECEIPT_METADATA = {
    "merchant": "Cafe Coffee Day",
    "transactionDate": "2025-03-14T00:00:00",
    "items": [{"name": "Cappuccino", "price": 3.5}, {"name": "Sandwich", "price": None}],
    "confidence": {"merchant": 0.92, "total": 0.88, "date": 0.75},
}


def _create(client, headers, **overrides):
    body = {"type": "expense", "amount": 120, "category": "Food & Dining"}
    body.update(overrides)
    resp = client.post("/api/transactions", json=body, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


class TestCreate:
    def test_create_success(self, client, auth_a):
        body = _create(client, auth_a, amount=19.6, description="Lunch", date="2025-01-05T12:00:00")
        assert body["id"]
        assert body["amount"] == 20
        assert body["currency"] == "INR"
        assert body["ownerId"] == "user-a"
        assert body["receiptMetadata"]["hasReceipt"] is False
        assert body["receiptMetadata"]["merchant"] is None
        assert body["receiptMetadata"]["items"] == []

    def test_owner_cannot_be_supplied(self, client, auth_a):
        resp = client.post(
            "/api/transactions",
            json={"type": "income", "amount": 10, "category": "Salary", "ownerId": "user-b"},
            headers=auth_a,
        )
        assert resp.status_code == 400

    def test_missing_fields(self, client, auth_a):
        resp = client.post("/api/transactions", json={"description": "x"}, headers=auth_a)
        assert resp.status_code == 400
        assert resp.json() == {"message": "Please provide type, amount, and category"}

    @pytest.mark.parametrize("amount", [0, -10])
    def test_non_positive_amount(self, client, auth_a, amount):
        resp = client.post(
            "/api/transactions",
            json={"type": "expense", "amount": amount, "category": "Other"},
            headers=auth_a,
        )
        assert resp.status_code == 400
        assert resp.json() == {"message": "Amount must be greater than 0"}

    def test_huge_amount_rejected(self, client, auth_a):
        resp = client.post(
            "/api/transactions",
            json={"type": "income", "amount": 1e30, "category": "Salary"},
            headers=auth_a,
        )
        assert resp.status_code == 400
        assert resp.json() == {"message": "Amount is too large"}
        assert client.get("/api/transactions", headers=auth_a).json() == []

    def test_receipt_metadata_round_trip(self, client, auth_a):
        created = _create(client, auth_a, receiptMetadata=RECEIPT_METADATA)
        (listed,) = client.get("/api/transactions", headers=auth_a).json()
        for body in (created, listed):
            meta = body["receiptMetadata"]
            assert meta["hasReceipt"] is True
            assert meta["merchant"] == RECEIPT_METADATA["merchant"]
            assert meta["items"] == RECEIPT_METADATA["items"]
            assert meta["confidence"] == RECEIPT_METADATA["confidence"]
            assert meta["transactionDate"] == "2025-03-14T00:00:00"


class TestList:
    def test_requires_auth(self, client):
        assert client.get("/api/transactions").status_code == 401

    def test_bad_token(self, client):
        resp = client.get("/api/transactions", headers={"Authorization": "Bearer nope"})
        assert resp.status_code == 401
        assert "message" in resp.json()

    def test_sorted_desc_regardless_of_insert_order(self, client, auth_a):
        for day in ("2025-01-02", "2025-01-03", "2025-01-01"):
            _create(client, auth_a, date=f"{day}T10:00:00")
        dates = [t["date"][:10] for t in client.get("/api/transactions", headers=auth_a).json()]
        assert dates == ["2025-01-03", "2025-01-02", "2025-01-01"]

    def test_users_see_only_their_own(self, client, auth_a, auth_b):
        _create(client, auth_a)
        assert client.get("/api/transactions", headers=auth_b).json() == []


class TestUpdateDelete:
    def test_update(self, client, auth_a):
        tx = _create(client, auth_a)
        resp = client.put(
            f"/api/transactions/{tx['id']}",
            json={"amount": 99.5, "description": "Dinner"},
            headers=auth_a,
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["amount"] == 100
        assert body["description"] == "Dinner"
        assert body["category"] == "Food & Dining"

    def test_update_rejects_non_positive(self, client, auth_a):
        tx = _create(client, auth_a)
        resp = client.put(f"/api/transactions/{tx['id']}", json={"amount": 0}, headers=auth_a)
        assert resp.status_code == 400

    def test_update_round_trip_keeps_no_receipt(self, client, auth_a):
        tx = _create(client, auth_a, description="Groceries run")
        fetched = client.get(f"/api/transactions/{tx['id']}", headers=auth_a).json()
        body = {
            "type": fetched["type"],
            "amount": fetched["amount"],
            "category": fetched["category"],
            "description": fetched["description"],
            "date": fetched["date"],
            "receiptMetadata": {"hasReceipt": False},
        }
        resp = client.put(f"/api/transactions/{tx['id']}", json=body, headers=auth_a)
        assert resp.status_code == 200
        meta = resp.json()["receiptMetadata"]
        assert meta["hasReceipt"] is False
        assert meta["merchant"] is None
        assert meta["items"] == []
        assert meta["confidence"] is None

    def test_update_has_receipt_false_clears_sidecar(self, client, auth_a):
        tx = _create(client, auth_a, receiptMetadata=RECEIPT_METADATA)
        resp = client.put(
            f"/api/transactions/{tx['id']}",
            json={"receiptMetadata": {**RECEIPT_METADATA, "hasReceipt": False}},
            headers=auth_a,
        )
        assert resp.status_code == 200
        meta = resp.json()["receiptMetadata"]
        assert meta["hasReceipt"] is False
        assert meta["merchant"] is None

    def test_update_rejects_huge_amount(self, client, auth_a):
        tx = _create(client, auth_a)
        resp = client.put(f"/api/transactions/{tx['id']}", json={"amount": 1e30}, headers=auth_a)
        assert resp.status_code == 400
        assert resp.json() == {"message": "Amount is too large"}

    def test_update_other_user_is_404_and_unchanged(self, client, auth_a, auth_b):
        tx = _create(client, auth_b, amount=300)
        resp = client.put(f"/api/transactions/{tx['id']}", json={"amount": 1}, headers=auth_a)
        assert resp.status_code == 404
        assert resp.json() == {"message": "Transaction not found"}
        got = client.get(f"/api/transactions/{tx['id']}", headers=auth_b).json()
        assert got["amount"] == 300

    def test_delete(self, client, auth_a):
        tx = _create(client, auth_a)
        resp = client.delete(f"/api/transactions/{tx['id']}", headers=auth_a)
        assert resp.status_code == 200
        assert resp.json() == {"message": "Transaction deleted"}
        assert client.get("/api/transactions", headers=auth_a).json() == []

    def test_delete_other_user_is_404(self, client, auth_a, auth_b):
        tx = _create(client, auth_b)
        resp = client.delete(f"/api/transactions/{tx['id']}", headers=auth_a)
        assert resp.status_code == 404
        assert len(client.get("/api/transactions", headers=auth_b).json()) == 1

    def test_get_missing(self, client, auth_a):
        assert client.get("/api/transactions/nonexistent", headers=auth_a).status_code == 404


class TestReceiptTransaction:
    def test_create_from_receipt(self, client, auth_a):
        resp = client.post(
            "/api/receipts/create-transaction",
            json={
                "type": "expense",
                "amount": 45.6,
                "category": "Food & Dining",
                "description": "Cappuccino, Sandwich",
                "receiptMetadata": RECEIPT_METADATA,
            },
            headers=auth_a,
        )
        assert resp.status_code == 201
        body = resp.json()
        assert body["success"] is True
        assert body["data"]["amount"] == 46
        assert body["data"]["receiptMetadata"]["hasReceipt"] is True

    def test_validation_uses_receipt_envelope(self, client, auth_a):
        resp = client.post(
            "/api/receipts/create-transaction",
            json={"type": "expense", "amount": -1, "category": "Other"},
            headers=auth_a,
        )
        assert resp.status_code == 400
        assert resp.json() == {"success": False, "message": "Amount must be greater than 0"}


class TestReports:
    def _seed(self, client, headers):
        _create(client, headers, type="income", amount=1000, category="Salary", date="2025-01-01T09:00:00")
        _create(client, headers, amount=200, category="Groceries", date="2025-01-01T18:00:00")
        _create(client, headers, amount=300, category="Food & Dining", date="2025-01-02T12:00:00")
        _create(client, headers, amount=50, category="Utilities", date="2024-12-31T12:00:00")

    def test_monthly_report(self, client, auth_a):
        self._seed(client, auth_a)
        resp = client.get("/api/reports", params={"year": 2025, "month": 1}, headers=auth_a)
        assert resp.status_code == 200
        body = resp.json()
        assert body["summary"] == {"totalIncome": 1000, "totalExpenses": 500, "balance": 500, "count": 3}
        assert [c["value"] for c in body["categories"]] == [300, 200]
        assert len(body["daily"]) == 31
        assert body["daily"][0]["runningBalance"] == 800
        assert body["daily"][1]["runningBalance"] == 500
        assert body["monthly"] == [{"month": "2025-01", "label": "Jan 2025", "income": 1000, "expenses": 500}]

    def test_dashboard_summary(self, client, auth_a, auth_b):
        self._seed(client, auth_a)
        _create(client, auth_a, amount=75, category="Groceries", date="2025-02-10T08:00:00")
        _create(client, auth_b, amount=999, category="Shopping")
        resp = client.get("/api/reports/summary", params={"recent": 3}, headers=auth_a)
        assert resp.status_code == 200
        body = resp.json()
        assert body["summary"] == {"totalIncome": 1000, "totalExpenses": 625, "balance": 375, "count": 5}
        assert [(c["name"], c["value"], c["count"]) for c in body["categories"]] == [
            ("Food & Dining", 300, 1),
            ("Groceries", 275, 2),
            ("Utilities", 50, 1),
        ]
        assert [t["date"][:10] for t in body["recent"]] == ["2025-02-10", "2025-01-02", "2025-01-01"]
        assert all(t["ownerId"] == "user-a" for t in body["recent"])

    def test_dashboard_defaults_to_five_recent(self, client, auth_a):
        for day in range(1, 8):
            _create(client, auth_a, date=f"2025-03-{day:02d}T10:00:00")
        body = client.get("/api/reports/summary", headers=auth_a).json()
        assert len(body["recent"]) == 5
        assert body["recent"][0]["date"][:10] == "2025-03-07"
        assert body["summary"]["count"] == 7

    def test_dashboard_empty(self, client, auth_a):
        body = client.get("/api/reports/summary", headers=auth_a).json()
        assert body == {
            "summary": {"totalIncome": 0, "totalExpenses": 0, "balance": 0, "count": 0},
            "categories": [],
            "recent": [],
        }

    def test_dashboard_requires_auth(self, client):
        assert client.get("/api/reports/summary").status_code == 401

    def test_invalid_month(self, client, auth_a):
        resp = client.get("/api/reports", params={"year": 2025, "month": 13}, headers=auth_a)
        assert resp.status_code == 400

    def test_csv_export(self, client, auth_a):
        self._seed(client, auth_a)
        resp = client.get(
            "/api/reports/export",
            params={"year": 2025, "month": 1, "type": "expense"},
            headers=auth_a,
        )
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/csv")
        assert "transactions-January-2025.csv" in resp.headers["content-disposition"]
        lines = resp.text.split("\n")
        assert lines[0] == "Date,Type,Category,Description,Amount"
        assert lines[1:] == ["1/2/2025,expense,Food & Dining,,300", "1/1/2025,expense,Groceries,,200"]


class TestHealth:
    def test_root(self, client):
        assert client.get("/").json()["status"] == "running"

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "healthy"}
