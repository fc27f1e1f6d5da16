import pytest
import requests
from utils.backend_client import InventoryBackendClient
from utils.errors import BackendError


class FakeResponse:
    def __init__(self, status_code=200, payload=None):
        self.status_code = status_code
        self.ok = status_code < 400
        self._payload = payload

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response or FakeResponse(payload=[])
        self.error = error
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if self.error:
            raise self.error
        return self.response


def test_history_query_drops_empty_filters():
    session = FakeSession(FakeResponse(payload=[{"category": "PK"}]))
    client = InventoryBackendClient(base_url="http://backend/api/", timeout=3, session=session)
    out = client.get_stock_history(category="PK", subcategory=None, start_date="2024-01-01")
    assert out == [{"category": "PK"}]
    method, url, kwargs = session.calls[0]
    assert (method, url) == ("GET", "http://backend/api/stocks/history")
    assert kwargs["params"] == {"category": "PK", "startDate": "2024-01-01"}
    assert kwargs["timeout"] == 3


def test_adjustment_is_sent_as_json():
    session = FakeSession(FakeResponse(payload={"ok": True}))
    client = InventoryBackendClient(base_url="http://backend/api", session=session)
    body = {"sizes": ["RU40"], "stockOutQuantity": 2}
    client.delete_stock_quantity("s1", body)
    method, url, kwargs = session.calls[0]
    assert (method, url) == ("PATCH", "http://backend/api/stocks/s1/delete-quantity")
    assert kwargs["json"] == body


def test_backend_error_message_is_surfaced():
    session = FakeSession(FakeResponse(status_code=400, payload={"error": "Size RU99 does not exist"}))
    client = InventoryBackendClient(base_url="http://backend/api", session=session)
    with pytest.raises(BackendError, match="RU99") as exc:
        client.add_stock_quantity("s1", {"sizes": ["RU99"], "stockInQuantity": 1})
    assert exc.value.status_code == 400


def test_backend_error_without_body_uses_fallback():
    session = FakeSession(FakeResponse(status_code=500))
    client = InventoryBackendClient(base_url="http://backend/api", session=session)
    with pytest.raises(BackendError, match="Failed to fetch stocks"):
        client.get_stocks()


def test_transport_failure_wrapped():
    session = FakeSession(error=requests.exceptions.ConnectionError("refused"))
    client = InventoryBackendClient(base_url="http://backend/api", session=session)
    with pytest.raises(BackendError, match="refused"):
        client.get_products()


def test_find_stock_and_argument_checks():
    stocks = [{"_id": "a", "category": "Cogged", "subcategory": "Ax"}, {"_id": "b", "category": "Cogged", "subcategory": "Bx"}]
    client = InventoryBackendClient(base_url="http://backend/api", session=FakeSession(FakeResponse(payload=stocks)))
    assert client.find_stock("Cogged", "Bx")["_id"] == "b"
    assert client.find_stock("Timing", "88ZA19") is None
    with pytest.raises(ValueError):
        client.get_stock("")
    with pytest.raises(ValueError):
        client.delete_stock_quantity("a", {"sizes": ["40"]})


@pytest.mark.parametrize("call,expected", [
    (lambda c: c.create_product({"name": "Cogged"}), ("POST", "/products")),
    (lambda c: c.update_product("p1", {"name": "Raw"}), ("PUT", "/products/p1")),
    (lambda c: c.delete_product("p1"), ("DELETE", "/products/p1")),
    (lambda c: c.create_stock({"category": "Cogged"}), ("POST", "/stocks")),
    (lambda c: c.update_stock("s1", {"operation": "add"}), ("PUT", "/stocks/s1")),
    (lambda c: c.delete_stock("s1"), ("DELETE", "/stocks/s1")),
    (lambda c: c.get_dashboard_stats(), ("GET", "/dashboard/stats")),
    (lambda c: c.get_transactions(), ("GET", "/transactions")),
    (lambda c: c.create_transaction({"type": "in"}), ("POST", "/transactions")),
    (lambda c: c.delete_transaction("t1"), ("DELETE", "/transactions/t1")),
])
def test_resource_endpoints(call, expected):
    session = FakeSession(FakeResponse(payload={"ok": True}))
    client = InventoryBackendClient(base_url="http://backend/api", session=session)
    assert call(client) == {"ok": True}
    method, url, _ = session.calls[0]
    assert (method, url) == (expected[0], "http://backend/api" + expected[1])


def test_create_stock_error_uses_backend_message():
    session = FakeSession(FakeResponse(status_code=400, payload={"error": "Stock already exists"}))
    client = InventoryBackendClient(base_url="http://backend/api", session=session)
    with pytest.raises(BackendError, match="Stock already exists"):
        client.create_stock({"category": "Cogged"})


def test_resource_ids_required():
    client = InventoryBackendClient(base_url="http://backend/api", session=FakeSession())
    for call in (client.update_product, client.update_stock):
        with pytest.raises(ValueError):
            call("", {})
    for call in (client.delete_product, client.delete_stock, client.delete_transaction):
        with pytest.raises(ValueError):
            call("")
    assert client.session.calls == []
