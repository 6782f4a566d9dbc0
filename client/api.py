"""
client/api.py -- HTTP client for the ProductDesk REST API.

Thin wrapper over a requests.Session: one method per endpoint, bearer token
attached automatically, every non-2xx response turned into ApiError carrying
the status code and the server's message.

The client never validates anything authoritatively -- main.py runs the
shared core.validators rules for early feedback, and the server re-checks.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import requests

logger = logging.getLogger("productdesk.client")

DEFAULT_API_URL = "http://localhost:5001"
_TIMEOUT = 10


class ApiError(Exception):
    """A failed API call. status is 0 when the server could not be reached."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = status
        self.message = message


class ApiClient:
    """Usage:
    client = ApiClient("http://localhost:5001")
    data = client.login("a@b.com", "Abcdef1!")
    client.token = data["token"]
    client.list_products()
    """

    def __init__(self, base_url: str = DEFAULT_API_URL, token: Optional[str] = None) -> None:
        self.base_url = base_url.rstrip("/")
        self.token = token
        self._session = requests.Session()
        self._session.max_redirects = 3

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def _request(self, method: str, path: str, json: Optional[dict] = None) -> dict[str, Any]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        url = f"{self.base_url}{path}"
        logger.debug("%s %s", method, url)
        try:
            resp = self._session.request(method, url, json=json, headers=headers, timeout=_TIMEOUT)
        except requests.RequestException as exc:
            raise ApiError(0, f"Could not reach {self.base_url}: {exc}") from exc

        try:
            data = resp.json()
        except ValueError:
            data = {}
        if not resp.ok:
            message = data.get("message") if isinstance(data, dict) else None
            raise ApiError(resp.status_code, message or f"HTTP {resp.status_code}")
        return data

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    def signup(self, name: str, email: str, password: str) -> dict[str, Any]:
        return self._request("POST", "/api/auth/signup", {"name": name, "email": email, "password": password})

    def login(self, email: str, password: str) -> dict[str, Any]:
        return self._request("POST", "/api/auth/login", {"email": email, "password": password})

    def me(self) -> dict[str, Any]:
        return self._request("GET", "/api/auth/me")

    # ------------------------------------------------------------------
    # Products
    # ------------------------------------------------------------------

    def list_products(self) -> dict[str, Any]:
        return self._request("GET", "/api/products")

    def get_product(self, product_id: int) -> dict[str, Any]:
        return self._request("GET", f"/api/products/{product_id}")

    def create_product(self, fields: dict[str, Any]) -> dict[str, Any]:
        return self._request("POST", "/api/products", fields)

    def update_product(self, product_id: int, fields: dict[str, Any]) -> dict[str, Any]:
        return self._request("PUT", f"/api/products/{product_id}", fields)

    def delete_product(self, product_id: int) -> dict[str, Any]:
        return self._request("DELETE", f"/api/products/{product_id}")
