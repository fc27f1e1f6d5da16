from fastapi.testclient import TestClient

from api.server import app

client = TestClient(app)

STOCK = {"_id": "s1", "category": "Cogged", "subcategory": "Ax", "quantity": 30, "sizes": ["RU40", "RU42"], "sizePrefix": "RU"}


def test_health():
    assert client.get("/api/health").json() == {"status": "ok"}


def test_derive_range():
    r = client.post("/api/sizes/derive", json={"mode": "multiple", "start": 38, "end": 42, "interval": 2, "prefix": "ru"})
    assert r.status_code == 200
    assert r.json() == {"count": 3, "sizes": ["RU38", "RU40", "RU42"]}


def test_derive_invalid_range_is_bad_request():
    r = client.post("/api/sizes/derive", json={"mode": "multiple", "start": 5, "end": 1, "interval": 1})
    assert r.status_code == 400
    assert r.json()["detail"] == "invalid range"


def test_count_preview():
    assert client.post("/api/sizes/count", json={"sizes": "40,42,40"}).json() == {"count": 2}
    assert client.post("/api/sizes/count", json={"mode": "multiple", "start": 1, "end": 10, "interval": 3}).json() == {"count": 4}
    assert client.post("/api/sizes/count", json={"mode": "multiple", "start": 1}).json() == {"count": 0}


def test_validate_sizes_against_stock():
    ok = client.post("/api/sizes/validate", json={"spec": {"sizes": [40, 42], "prefix": "RU"}, "stock": STOCK})
    assert ok.status_code == 200
    assert ok.json()["sizes"] == ["RU40", "RU42"]

    bad = client.post("/api/sizes/validate", json={"spec": {"sizes": "40,99", "prefix": "RU"}, "stock": STOCK})
    assert bad.status_code == 400
    assert bad.json()["detail"] == "sizes not found: RU99"


def test_adjustment_body():
    r = client.post("/api/sizes/adjustment", json={
        "spec": {"sizes": "40", "prefix": "RU"},
        "stock": STOCK,
        "quantity": 4,
        "operation": "add",
        "date": "2024-01-02",
    })
    assert r.status_code == 200
    assert r.json() == {"sizes": ["RU40"], "stockInQuantity": 4, "date": "2024-01-02", "sizePrefix": "RU"}


def test_register():
    records = [
        {"category": "Cogged", "subcategory": "Ax", "size": "RU40", "stockin": 5, "date": "2024-01-01"},
        {"category": "Cogged", "subcategory": "Ax", "size": "RU40", "stockout": 2, "date": "2024-01-02"},
        {"category": "Cogged", "subcategory": "Ax", "size": "RU42", "stockin": 3, "date": "2024-01-02"},
        {"category": "Cogged", "subcategory": "Ax", "size": "RU42", "stockout": 9, "date": "2024-01-03"},
    ]
    r = client.post("/api/ledger/register", json={"records": records, "date": "2024-01-02"})
    assert r.status_code == 200
    body = r.json()
    assert body["count"] == 4
    assert [e["size"] for e in body["entries"]] == ["RU42", "RU40", "RU42", "RU40"]
    assert [e["remaining_stock"] for e in body["entries"]] == [0, 3, 3, 5]
    assert body["stats"] == {"total_stock": 6, "today_stock_in": 3, "today_stock_out": 2}
    assert body["initial_quantity"] == 8
    assert len(body["over_withdrawals"]) == 1
    assert body["over_withdrawals"][0]["shortfall"] == 6

    with_stock = client.post("/api/ledger/register", json={"records": records, "date": "2024-01-02", "stock": {**STOCK, "initialQuantity": 50}})
    assert with_stock.json()["initial_quantity"] == 50


def test_initial_quantity_for_size():
    records = [
        {"size": 40, "stockin": 3, "date": "2024-01-05"},
        {"size": "40", "stockin": 8, "date": "2024-01-01"},
    ]
    r = client.post("/api/ledger/initial-quantity", json={"records": records, "size": 40})
    assert r.json() == {"size": "40", "initial_quantity": 8}


def test_stock_status():
    stocks = [STOCK, {**STOCK, "_id": "s2", "subcategory": "Bx", "quantity": 600, "status": {"high": 1000, "medium": 500, "low": 100}}]
    r = client.post("/api/stocks/status", json=stocks)
    assert r.status_code == 200
    body = r.json()
    assert body["total_stock"] == 630
    assert [s["status"] for s in body["stocks"]] == ["low", "medium"]
    assert body["stocks"][1]["id"] == "s2"


def test_adjustment_uses_stock_prefix_when_spec_has_none():
    r = client.post("/api/sizes/adjustment", json={"spec": {"sizes": "40"}, "stock": STOCK, "quantity": 2})
    assert r.status_code == 200
    assert r.json() == {"sizes": ["RU40"], "stockInQuantity": 2, "sizePrefix": "RU"}

    ok = client.post("/api/sizes/validate", json={"spec": {"sizes": "42"}, "stock": STOCK})
    assert ok.json()["sizes"] == ["RU42"]

    plain = client.post("/api/sizes/validate", json={"spec": {"sizes": "40", "prefix": ""}, "stock": STOCK})
    assert plain.status_code == 400
    assert plain.json()["detail"] == "sizes not found: 40"


def test_count_preview_numeric_only():
    assert client.post("/api/sizes/count", json={"sizes": "40,A1,42"}).json() == {"count": 3}
    assert client.post("/api/sizes/count", json={"sizes": "40,A1,42", "numeric_only": True}).json() == {"count": 2}


def test_create_stock_body():
    r = client.post("/api/stocks/create-body", json={
        "category": "Cogged",
        "subcategory": "Ax",
        "spec": {"sizes": "40, A1, 42", "prefix": "ru"},
        "quantity": 2,
        "stock_in": "2024-01-02",
        "status": {"high": 500, "medium": 200, "low": 50},
    })
    assert r.status_code == 200
    body = r.json()
    assert body["singleSize"] == ["40", "42"]
    assert body["sizePrefix"] == "RU"
    assert body["stockIn"] == "2024-01-02"
    assert body["status"] == {"high": 500, "medium": 200, "low": 50}

    bad = client.post("/api/stocks/create-body", json={"category": "", "spec": {"sizes": "40"}})
    assert bad.status_code == 400
    assert bad.json()["detail"] == "category is required"


def test_stock_update_body_defaults_to_stock_in_day():
    stock = {**STOCK, "stockIn": "2024-01-05T00:00:00.000Z"}
    r = client.post("/api/stocks/update-body", json={
        "stock": stock,
        "spec": {"mode": "multiple", "start": 44, "end": 46, "interval": 2, "prefix": "yh"},
        "quantity": 3,
    })
    assert r.status_code == 200
    assert r.json() == {
        "operation": "add",
        "sizeMode": "multiple",
        "sizes": ["YH44", "YH46"],
        "category": "Cogged",
        "subcategory": "Ax",
        "date": "2024-01-05",
        "stockInQuantity": 3,
        "sizePrefix": "YH",
    }

    missing = client.post("/api/stocks/update-body", json={"stock": stock, "spec": {"sizes": "RU99"}, "operation": "delete"})
    assert missing.status_code == 400
    assert missing.json()["detail"] == "sizes not found: RU99"
