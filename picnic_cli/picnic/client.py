"""Picnic API client wrapper using python-picnic-api2."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any
from urllib.parse import quote

import requests
from python_picnic_api2 import PicnicAPI
from python_picnic_api2.client import DEFAULT_URL
from python_picnic_api2.helper import _url_generator
from python_picnic_api2.session import PicnicAuthError

logger = logging.getLogger(__name__)

DEFAULT_API_VERSION = "15"
BASE_URL = "https://storefront-prod.{country}.picnicinternational.com"

# Headers the storefront expects for the server-driven page endpoints
PICNIC_HEADERS = {
    "x-picnic-agent": "30100;1.15.272-15295;",
    "x-picnic-did": "3C417201548B2E3B",
}

METHODS = ("GET", "POST", "PUT", "DELETE")


class PicnicAPIError(Exception):
    """Raised when a Picnic API call fails.

    `code` holds the error code from the response body (e.g. AUTH_ERROR)
    when the server sent one.
    """

    def __init__(self, message: str, code: str | None = None):
        super().__init__(message)
        self.message = message
        self.code = code


@contextmanager
def _api_errors(action: str):
    try:
        yield
    except PicnicAuthError as e:
        raise PicnicAPIError(f"{action} failed (auth): {e}", code="AUTH_ERROR") from e
    except requests.RequestException as e:
        raise PicnicAPIError(f"{action} failed: {e}") from e


def _check(response: Any) -> Any:
    """Raise on Picnic's `{"error": {...}}` bodies, return anything else as-is."""
    if not isinstance(response, dict):
        return response
    error = response.get("error")
    if isinstance(error, dict) and error.get("code"):
        raise PicnicAPIError(error.get("message") or error["code"], code=error["code"])
    if error == {}:
        # python-picnic-api2 inserts an empty error key while checking for auth errors
        response.pop("error")
    return response


class PicnicClient:
    """Thin wrapper around python-picnic-api2.

    Keeps our interface stable so the command modules don't need to know
    about the underlying library. Endpoints the library has no method for go
    through `send_request` on the library's authenticated session.
    """

    def __init__(
        self,
        country_code: str = "NL",
        api_version: str = DEFAULT_API_VERSION,
        auth_key: str | None = None,
    ):
        self.country_code = country_code.upper()
        self.api_version = api_version
        self._api = PicnicAPI(country_code=self.country_code, auth_token=auth_key)
        # The library pins its own base URL to one API version
        self._api._base_url = _url_generator(DEFAULT_URL, self.country_code, self.api_version)

    @classmethod
    def from_config(cls, config, country: str | None = None) -> PicnicClient:
        """Build a client from the stored config; `country` overrides it."""
        return cls(
            country_code=country or config.country_code,
            api_version=config.api_version,
            auth_key=config.auth_key,
        )

    @property
    def auth_key(self) -> str | None:
        return self._api.session.auth_token

    @property
    def static_url(self) -> str:
        return BASE_URL.format(country=self.country_code.lower())

    @property
    def api_url(self) -> str:
        return f"{self.static_url}/api/{self.api_version}"

    def _ensure_api(self) -> PicnicAPI:
        if not self._api.session.authenticated:
            raise PicnicAPIError("Not authenticated. Run: picnic login")
        return self._api

    # --- Auth ---

    def login(self, username: str, password: str) -> dict:
        """Authenticate and return the login result with the issued `auth_key`."""
        with _api_errors("Login"):
            result = _check(self._api.login(username, password))
        if not self.auth_key:
            raise PicnicAPIError("Login failed: no auth key returned")
        logger.info("Logged in to Picnic (%s)", self.country_code)
        return {**result, "auth_key": self.auth_key}

    def generate_2fa_code(self, channel: str = "SMS") -> Any:
        return self.send_request("POST", "/user/2fa/generate", {"channel": channel})

    def verify_2fa_code(self, code: str) -> Any:
        return self.send_request("POST", "/user/2fa/verify", {"otp": code})

    # --- User ---

    def get_user_details(self) -> dict:
        api = self._ensure_api()
        with _api_errors("Get user"):
            return _check(api.get_user())

    def get_user_info(self) -> dict:
        return self.send_request("GET", "/user-info")

    def get_profile_menu(self) -> dict:
        return self.send_request("GET", "/profile-menu")

    def get_mgm_details(self) -> dict:
        return self.send_request("GET", "/mgm")

    def get_consent_settings(self, general: bool = False) -> list[dict]:
        return self.send_request("GET", "/consents/general" if general else "/consents")

    # --- Search ---

    def search(self, query: str) -> list[dict]:
        """Search for products.

        Returns a flat list of product dicts with id, name, display_price, etc.
        """
        api = self._ensure_api()
        with _api_errors("Search"):
            raw = _check(api.search(query))
        # Library returns [{"items": [...]}]; flatten to the articles
        items = []
        for group in raw or []:
            if isinstance(group, dict):
                items.extend(i for i in group.get("items", []) if isinstance(i, dict) and i.get("name"))
        logger.debug("Search '%s' returned %d results", query, len(items))
        return items

    def get_suggestions(self, query: str) -> list[dict]:
        return self.send_request("GET", f"/suggest?search_term={quote(query)}")

    # --- Cart ---

    def get_cart(self) -> dict:
        """Get the current shopping cart."""
        api = self._ensure_api()
        with _api_errors("Get cart"):
            return _check(api.get_cart())

    def add_product(self, product_id: str, count: int = 1) -> dict:
        """Add a product to the shopping cart."""
        api = self._ensure_api()
        with _api_errors("Add product"):
            result = _check(api.add_product(product_id, count))
        logger.info("Added %dx %s to cart", count, product_id)
        return result

    def remove_product(self, product_id: str, count: int = 1) -> dict:
        """Remove a product from the shopping cart."""
        api = self._ensure_api()
        with _api_errors("Remove product"):
            result = _check(api.remove_product(product_id, count))
        logger.info("Removed %dx %s from cart", count, product_id)
        return result

    def clear_cart(self) -> dict:
        """Clear all items from the shopping cart."""
        api = self._ensure_api()
        with _api_errors("Clear cart"):
            return _check(api.clear_cart())

    # --- Delivery slots ---

    def get_delivery_slots(self) -> dict:
        """Get available delivery slots."""
        api = self._ensure_api()
        with _api_errors("Get delivery slots"):
            return _check(api.get_delivery_slots())

    def set_delivery_slot(self, slot_id: str) -> dict:
        result = self.send_request("POST", "/cart/set_delivery_slot", {"slot_id": slot_id})
        logger.info("Selected delivery slot %s", slot_id)
        return result

    # --- Deliveries ---

    def get_deliveries(self, statuses: list[str] | None = None) -> list[dict]:
        """List delivery summaries, optionally filtered by status."""
        api = self._ensure_api()
        with _api_errors("Get deliveries"):
            return _check(api.get_deliveries(data=list(statuses or [])))

    def get_delivery(self, delivery_id: str) -> dict:
        api = self._ensure_api()
        with _api_errors("Get delivery"):
            return _check(api.get_delivery(delivery_id))

    def get_delivery_position(self, delivery_id: str) -> dict:
        api = self._ensure_api()
        with _api_errors("Get delivery position"):
            return _check(api.get_delivery_position(delivery_id))

    def get_delivery_scenario(self, delivery_id: str) -> dict:
        api = self._ensure_api()
        with _api_errors("Get delivery scenario"):
            return _check(api.get_delivery_scenario(delivery_id))

    def cancel_delivery(self, delivery_id: str) -> Any:
        result = self.send_request("POST", f"/order/delivery/{quote(delivery_id)}/cancel")
        logger.info("Cancelled delivery %s", delivery_id)
        return result

    def set_delivery_rating(self, delivery_id: str, rating: int) -> Any:
        return self.send_request("POST", f"/deliveries/{quote(delivery_id)}/rating", {"rating": rating})

    def send_delivery_invoice_email(self, delivery_id: str) -> Any:
        return self.send_request("POST", f"/deliveries/{quote(delivery_id)}/resend_invoice_email")

    def get_order_status(self, order_id: str) -> dict:
        return self.send_request("GET", f"/cart/checkout/order/{quote(order_id)}/status")

    # --- Products & categories ---

    def get_product_details_page(self, product_id: str) -> dict:
        return self.send_request(
            "GET",
            f"/pages/product-details-page-root?id={quote(product_id)}",
            add_picnic_headers=True,
        )

    def get_categories_page(self) -> dict:
        return self.send_request("GET", "/pages/search-page-root", add_picnic_headers=True)

    def get_category_page(self, category_id: str) -> dict:
        return self.send_request(
            "GET",
            f"/pages/L1-category-page-root?category_id={quote(category_id)}",
            add_picnic_headers=True,
        )

    def get_image(self, image_id: str, size: str = "medium") -> bytes:
        """Download a product image from the static image host."""
        self._ensure_api()
        url = f"{self.static_url}/static/images/{quote(image_id)}/{size}.png"
        logger.debug("GET %s", url)
        with _api_errors("Get image"):
            response = self._api.session.get(url)
            response.raise_for_status()
        return response.content

    # --- Wallet ---

    def get_payment_profile(self) -> dict:
        return self.send_request("GET", "/payment-profile")

    def get_wallet_transactions(self, page: int = 0) -> list[dict]:
        return self.send_request("GET", f"/wallet/transactions?page={page}")

    def get_wallet_transaction_details(self, transaction_id: str) -> dict:
        return self.send_request("GET", f"/wallet/transactions/{quote(transaction_id)}")

    # --- Misc ---

    def get_messages(self) -> Any:
        return self.send_request("GET", "/messages")

    def get_reminders(self) -> Any:
        return self.send_request("GET", "/reminders")

    def get_parcels(self) -> Any:
        return self.send_request("GET", "/parcels")

    def get_customer_service_contact_info(self) -> dict:
        return self.send_request("GET", "/cs-contact-info")

    def send_request(
        self,
        method: str,
        path: str,
        data: Any = None,
        add_picnic_headers: bool = False,
    ) -> Any:
        """Send a request to any API path using the authenticated session.

        Returns the decoded JSON body, or None for an empty body.
        """
        method = method.upper()
        if method not in METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")
        self._ensure_api()
        if not path.startswith("/"):
            path = "/" + path
        url = self.api_url + path
        headers = PICNIC_HEADERS if add_picnic_headers else None
        session = self._api.session

        logger.debug("%s %s", method, url)
        with _api_errors(f"{method} {path}"):
            # session.get/post keep the stored auth token in sync with the response
            if method == "GET":
                response = session.get(url, headers=headers)
            elif method == "POST":
                response = session.post(url, json=data, headers=headers)
            else:
                response = session.request(method, url, json=data, headers=headers)

            if not response.content:
                body = None
            else:
                try:
                    body = response.json()
                except ValueError:
                    body = None

        _check(body)
        if response.status_code >= 400:
            raise PicnicAPIError(
                f"{method} {path} failed with HTTP {response.status_code}",
                code=str(response.status_code),
            )
        if body is None and response.content:
            raise PicnicAPIError(f"{method} {path} returned a non-JSON response")
        return body

    def close(self) -> None:
        """Close the HTTP session."""
        self._api.session.close()
