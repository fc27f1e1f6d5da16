from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from utils.config import BACKEND_API_BASE, REQUEST_TIMEOUT_SECONDS
from utils.errors import BackendError

logger = logging.getLogger(__name__)


class InventoryBackendClient:
    """Thin JSON client for the inventory backend (products, stocks, stock history, transactions)."""

    def __init__(self, base_url: str = BACKEND_API_BASE, timeout: float = REQUEST_TIMEOUT_SECONDS,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _request(self, method: str, path: str, failure: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        logger.debug("%s %s", method, url)
        try:
            response = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.RequestException as e:
            raise BackendError(f"{failure}: {e}") from e

        if not response.ok:
            try:
                detail = response.json().get("error")
            except (ValueError, AttributeError):
                detail = None
            raise BackendError(detail or f"{failure} (HTTP {response.status_code})", status_code=response.status_code)
        return response.json()

    def get_products(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/products", "Failed to fetch products")

    def create_product(self, product: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/products", "Failed to create product", json=product)

    def update_product(self, product_id: str, updates: Dict[str, Any]) -> Dict[str, Any]:
        if not product_id:
            raise ValueError("Product ID is required for update")
        return self._request("PUT", f"/products/{product_id}", "Failed to update product", json=updates)

    def delete_product(self, product_id: str) -> Dict[str, Any]:
        if not product_id:
            raise ValueError("Product ID is required for delete")
        return self._request("DELETE", f"/products/{product_id}", "Failed to delete product")

    def get_stocks(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/stocks", "Failed to fetch stocks")

    def get_stock(self, stock_id: str) -> Dict[str, Any]:
        if not stock_id:
            raise ValueError("Stock ID is required")
        return self._request("GET", f"/stocks/{stock_id}", "Failed to fetch stock")

    def create_stock(self, body: Dict[str, Any]) -> Dict[str, Any]:
        """Send a body built by ``SizeSetAgent.build_create_stock``."""
        return self._request("POST", "/stocks", "Failed to create stock. Please try again.", json=body)

    def update_stock(self, stock_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        """Send a body built by ``SizeSetAgent.build_stock_update``."""
        if not stock_id:
            raise ValueError("Stock ID is required")
        return self._request("PUT", f"/stocks/{stock_id}", "Failed to update stock", json=body)

    def delete_stock(self, stock_id: str) -> Dict[str, Any]:
        if not stock_id:
            raise ValueError("Stock ID is required")
        return self._request("DELETE", f"/stocks/{stock_id}", "Failed to delete stock")

    def find_stock(self, category: str, subcategory: str) -> Optional[Dict[str, Any]]:
        return next(
            (s for s in self.get_stocks() if s.get("category") == category and s.get("subcategory") == subcategory),
            None,
        )

    def get_stock_history(self, category: Optional[str] = None, subcategory: Optional[str] = None,
                          start_date: Optional[str] = None, end_date: Optional[str] = None) -> List[Dict[str, Any]]:
        params = {
            "category": category,
            "subcategory": subcategory,
            "startDate": start_date,
            "endDate": end_date,
        }
        params = {k: v for k, v in params.items() if v}
        return self._request("GET", "/stocks/history", "Failed to fetch stock history", params=params)

    def add_stock_quantity(self, stock_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        """Send a body built by ``SizeSetAgent.build_adjustment(..., operation="add")``."""
        if not stock_id:
            raise ValueError("Stock ID is required")
        return self._request("PATCH", f"/stocks/{stock_id}/add-quantity", "Failed to add stock quantity", json=body)

    def delete_stock_quantity(self, stock_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        if not stock_id:
            raise ValueError("Stock ID is required")
        if not body.get("stockOutQuantity"):
            raise ValueError("Stock out quantity must be provided")
        return self._request("PATCH", f"/stocks/{stock_id}/delete-quantity", "Failed to delete stock quantity", json=body)

    def get_dashboard_stats(self) -> Dict[str, Any]:
        return self._request("GET", "/dashboard/stats", "Failed to fetch dashboard stats")

    def get_transactions(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/transactions", "Failed to fetch transactions")

    def create_transaction(self, transaction: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/transactions", "Failed to create transaction", json=transaction)

    def delete_transaction(self, transaction_id: str) -> Dict[str, Any]:
        if not transaction_id:
            raise ValueError("Transaction ID is required")
        return self._request("DELETE", f"/transactions/{transaction_id}", "Failed to delete transaction")
