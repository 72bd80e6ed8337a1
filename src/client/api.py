"""HTTP client for the storefront API."""

import os

import httpx

from shared.logging import get_logger

logger = get_logger(__name__)

DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_TIMEOUT = 10.0


class StorefrontAPIError(Exception):
    """The API answered with a non-success status."""

    def __init__(self, status_code: int, message: str, details=None):
        self.status_code = status_code
        self.message = message
        self.details = details
        super().__init__(f"{status_code}: {message}")


class StorefrontUnavailable(Exception):
    """The API could not be reached."""


def _get_client() -> httpx.Client:
    """Get a configured httpx client."""
    return httpx.Client(
        base_url=os.environ.get("STOREFRONT_API_URL", DEFAULT_BASE_URL),
        timeout=float(os.environ.get("STOREFRONT_API_TIMEOUT", DEFAULT_TIMEOUT)),
    )


def _handle_response(response: httpx.Response):
    if response.is_success:
        content_type = response.headers.get("content-type", "")
        if content_type.startswith("application/json"):
            return response.json()
        return response.text

    try:
        body = response.json()
    except ValueError:
        raise StorefrontAPIError(response.status_code, response.text or response.reason_phrase) from None

    error = body.get("error", body.get("detail")) if isinstance(body, dict) else body
    message = error if isinstance(error, str) else response.reason_phrase
    raise StorefrontAPIError(response.status_code, message, details=error)


class StorefrontAPI:
    """Thin wrapper over the REST endpoints.

    Any ``httpx.Client`` works, including ``fastapi.testclient.TestClient``.
    """

    def __init__(self, http_client: httpx.Client | None = None, token: str | None = None):
        self.http = http_client or _get_client()
        self.token = token

    def _headers(self):
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    def _request(self, method, path, **kwargs):
        try:
            response = self.http.request(method, path, headers=self._headers(), **kwargs)
        except httpx.RequestError as exc:
            logger.warning("storefront_api_unreachable", path=path, error=str(exc))
            raise StorefrontUnavailable(str(exc)) from exc
        return _handle_response(response)

    # --- Identity ---------------------------------------------------------

    def register(self, name, email, password, phone=None):
        return self._request("POST", "/users", json={"name": name, "email": email, "password": password, "phone": phone})

    def login(self, email, password) -> dict:
        return self._request("POST", "/auth/login", json={"email": email, "password": password})

    def logout(self):
        return self._request("POST", "/auth/logout")

    def me(self) -> dict:
        return self._request("GET", "/users/me")

    # --- Cart -------------------------------------------------------------

    def get_cart(self) -> dict:
        return self._request("GET", "/cart")

    def add_to_cart(self, product_id, quantity=1) -> dict:
        return self._request("POST", "/cart/items", json={"product_id": product_id, "quantity": quantity})

    def update_cart_item(self, product_id, quantity) -> dict:
        return self._request("PUT", f"/cart/items/{product_id}", json={"quantity": quantity})

    def remove_cart_item(self, product_id) -> dict:
        return self._request("DELETE", f"/cart/items/{product_id}")

    def clear_cart(self) -> dict:
        return self._request("DELETE", "/cart")

    # --- Orders and invoices ------------------------------------------------

    def checkout(self, shipping_address, payment_method="cod", tax=0.0, shipping=0.0, notes=None) -> dict:
        payload = {
            "shipping_address": shipping_address,
            "payment_method": payment_method,
            "tax": tax,
            "shipping": shipping,
            "notes": notes,
        }
        return self._request("POST", "/orders", json=payload)

    def list_orders(self, status=None) -> list:
        params = {"status": status} if status else None
        return self._request("GET", "/orders", params=params)

    def get_order(self, order_id) -> dict:
        return self._request("GET", f"/orders/{order_id}")

    def get_invoice(self, order_id) -> dict:
        return self._request("GET", f"/invoices/{order_id}")

    def invoice_html(self, order_id, download=False) -> str:
        suffix = "download" if download else "html"
        return self._request("GET", f"/invoices/{order_id}/{suffix}")
