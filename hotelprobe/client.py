"""HTTP client for the hotel management API.

One method per business operation, each returning the raw httpx.Response so
the calling case can assert on status and body. The underlying httpx.Client
keeps the session cookie set by login, so one ApiClient is one session.
"""

from __future__ import annotations

from typing import Any, Optional

import httpx
from rich.console import Console

from hotelprobe.config import Settings

_RULE = "═" * 42

JSON_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


class ApiError(Exception):
    """Raised when a response that should carry a created ID is not 2xx."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"HTTP {status_code}: {body[:500]}")
        self.status_code = status_code
        self.body = body


def stock_adjustments(*pairs: tuple[str, int]) -> list[dict[str, Any]]:
    """[(product_id, qty), ...] -> stockAdjustmentData payload."""
    return [{"productId": product_id, "quantity": qty} for product_id, qty in pairs]


class ApiClient:
    """Thin wrapper over httpx.Client bound to the API base URL."""

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.BaseTransport] = None,
        console: Optional[Console] = None,
    ) -> None:
        self.settings = settings
        self.console = console or Console()
        self._http = httpx.Client(
            base_url=settings.base_url,
            headers=JSON_HEADERS,
            timeout=httpx.Timeout(settings.request_timeout_s),
            transport=transport,
        )

    def __enter__(self) -> ApiClient:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        self._http.close()

    # -- raw verbs ---------------------------------------------------------

    def get(self, path: str) -> httpx.Response:
        return self._http.get(path)

    def post(self, path: str, json: Any = None) -> httpx.Response:
        return self._http.post(path, json=json)

    def put(self, path: str, json: Any = None) -> httpx.Response:
        return self._http.put(path, json=json)

    def delete(self, path: str) -> httpx.Response:
        return self._http.delete(path)

    # -- account -----------------------------------------------------------

    def register_admin(self, username: str, password: str, admin_code: str) -> httpx.Response:
        return self.post(
            "/api/account/register-admin",
            {"userName": username, "password": password, "adminCode": admin_code},
        )

    def register(self, username: str, password: str) -> httpx.Response:
        return self.post("/api/account/register", {"userName": username, "password": password})

    def login(self, username: str, password: str) -> httpx.Response:
        return self.post("/api/account/login", {"userName": username, "password": password})

    def logout(self) -> httpx.Response:
        return self.post("/api/account/logout")

    def get_user_info(self) -> httpx.Response:
        return self.get("/api/account/manage/info")

    def check_admin_registration_status(self) -> httpx.Response:
        return self.get("/api/account/admin-register-status")

    # -- guests ------------------------------------------------------------

    def create_guest(self, full_name: str, phone_number: str, date_of_birth: str) -> httpx.Response:
        return self.post(
            "/api/guests",
            {"fullName": full_name, "phoneNumber": phone_number, "dateOfBirth": date_of_birth},
        )

    def get_guests(self) -> httpx.Response:
        return self.get("/api/guests")

    def update_guest(self, guest_id: str, data: dict[str, Any]) -> httpx.Response:
        return self.put(f"/api/guests/{guest_id}", data)

    def delete_guest(self, guest_id: str) -> httpx.Response:
        return self.delete(f"/api/guests/{guest_id}")

    # -- room property groups ----------------------------------------------

    def create_room_property_group(self, name: str) -> httpx.Response:
        return self.post("/api/room-property-groups", {"name": name})

    def get_room_property_groups(self) -> httpx.Response:
        return self.get("/api/room-property-groups")

    def update_room_property_group(self, group_id: str, data: dict[str, Any]) -> httpx.Response:
        return self.put(f"/api/room-property-groups/{group_id}", data)

    def delete_room_property_group(self, group_id: str) -> httpx.Response:
        return self.delete(f"/api/room-property-groups/{group_id}")

    # -- rooms -------------------------------------------------------------

    def create_room(self, name: str) -> httpx.Response:
        return self.post("/api/rooms", {"name": name})

    def update_room(self, room_id: str, data: dict[str, Any]) -> httpx.Response:
        return self.put(f"/api/rooms/{room_id}", data)

    def delete_room(self, room_id: str) -> httpx.Response:
        return self.delete(f"/api/rooms/{room_id}")

    def get_room_availability(self) -> httpx.Response:
        return self.get("/api/rooms/availability")

    # -- reservations ------------------------------------------------------

    def create_reservation(
        self,
        guest_id: str,
        room_id: str,
        check_in: str,
        check_out: str,
        price: float,
    ) -> httpx.Response:
        return self.post(
            "/api/reservations",
            {
                "guestId": guest_id,
                "roomId": room_id,
                "checkInDate": check_in,
                "checkOutDate": check_out,
                "price": price,
            },
        )

    def checkout(self, reservation_id: str) -> httpx.Response:
        return self.put(f"/api/reservations/{reservation_id}/checkout")

    # -- inventory ---------------------------------------------------------

    def create_product_stock(self, product_name: str, stock_quantity: int, ideal_quantity: int) -> httpx.Response:
        return self.post(
            "/api/inventory",
            {"productName": product_name, "stockQuantity": stock_quantity, "idealQuantity": ideal_quantity},
        )

    def get_inventory(self) -> httpx.Response:
        return self.get("/api/inventory")

    def update_product_stock(self, stock_id: str, data: dict[str, Any]) -> httpx.Response:
        return self.put(f"/api/inventory/{stock_id}", data)

    def delete_product_stock(self, stock_id: str) -> httpx.Response:
        return self.delete(f"/api/inventory/{stock_id}")

    # -- reports -----------------------------------------------------------

    def create_purchase_report(self, adjustments: list[dict[str, Any]], price: float) -> httpx.Response:
        return self.post("/api/reports/purchases", {"stockAdjustmentData": adjustments, "price": price})

    def get_purchase_reports(self) -> httpx.Response:
        return self.get("/api/reports/purchases")

    def create_usage_report(self, adjustments: list[dict[str, Any]], concept: str) -> httpx.Response:
        return self.post("/api/reports/usages", {"stockAdjustmentData": adjustments, "concept": concept})

    def get_usage_reports(self) -> httpx.Response:
        return self.get("/api/reports/usages")

    # -- helpers -----------------------------------------------------------

    @staticmethod
    def extract_id(response: httpx.Response) -> Any:
        """Return the JSON body of a successful create call.

        Create endpoints answer with the bare identifier (a JSON string), or
        with an object of identifiers for inventory items.
        """
        if not response.is_success:
            raise ApiError(response.status_code, response.text)
        return response.json()

    def log_exchange(self, case: str, response: httpx.Response) -> None:
        """Print a framed request/response block for diagnosis."""
        request = response.request
        elapsed_ms = int(response.elapsed.total_seconds() * 1000)
        self.console.print(_RULE, markup=False)
        self.console.print(f"Test: {case}", markup=False)
        self.console.print(f"Request: {request.method} {request.url}", markup=False)
        self.console.print(f"Status: {response.status_code} ({elapsed_ms}ms)", markup=False)
        self.console.print(f"Response: {response.text}", markup=False)
        self.console.print(_RULE, markup=False)
