"""
inventory_client.py

A small synchronous client for the Restaurant Inventory API.

The caller owns the session state: `login()`/`register()` return an `AuthSession`
(token + user profile) and every request method takes the session explicitly, so
several users can be driven from one process without shared globals.

Environment variables used by `make_client_from_env()`:
- INVENTORY_API_URL: e.g. "https://your-domain.com" (the `/api` prefix is added here)

Dependencies:
- requests (pip install requests)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional

import requests


class ApiError(RuntimeError):
    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


@dataclass(frozen=True)
class AuthSession:
    token: str
    user: Dict[str, Any]

    @property
    def is_admin(self) -> bool:
        return self.user.get("role") == "ADMIN"


@dataclass
class InventoryApiClient:
    base_url: str
    timeout: float = 30
    http: requests.Session = field(default_factory=requests.Session)

    def _url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/api/{path.lstrip('/')}"

    def _request(
        self,
        method: str,
        path: str,
        session: Optional[AuthSession] = None,
        *,
        json: Any = None,
        params: Dict[str, Any] | None = None,
    ) -> Any:
        headers = {"Accept": "application/json"}
        if session is not None:
            headers["Authorization"] = f"Bearer {session.token}"

        resp = self.http.request(
            method,
            self._url(path),
            json=json,
            params=params,
            headers=headers,
            timeout=self.timeout,
        )
        if resp.status_code >= 400:
            try:
                message = resp.json().get("error", resp.text)
            except ValueError:
                message = resp.text
            raise ApiError(resp.status_code, message)

        if resp.status_code == 204 or not resp.content:
            return None
        return resp.json()

    # ----------------------------
    # Auth
    # ----------------------------

    def register(self, *, email: str, password: str, name: str, organization_name: str) -> AuthSession:
        data = self._request(
            "POST",
            "/auth/register",
            json={"email": email, "password": password, "name": name, "organizationName": organization_name},
        )
        return AuthSession(token=data["token"], user=data["user"])

    def login(self, *, email: str, password: str) -> AuthSession:
        data = self._request("POST", "/auth/login", json={"email": email, "password": password})
        return AuthSession(token=data["token"], user=data["user"])

    def create_user(
        self, session: AuthSession, *, email: str, password: str, name: str, role: str = "MANAGER"
    ) -> Dict[str, Any]:
        """admin-only"""
        payload = {"email": email, "password": password, "name": name, "role": role}
        return self._request("POST", "/auth/create-user", session, json=payload)["user"]

    def list_users(self, session: AuthSession) -> list:
        return self._request("GET", "/auth/users", session)

    # ----------------------------
    # Catalog: locations, ingredients, menu items
    # ----------------------------

    def list_locations(self, session: AuthSession) -> list:
        return self._request("GET", "/locations", session)

    def create_location(self, session: AuthSession, *, name: str) -> Dict[str, Any]:
        return self._request("POST", "/locations", session, json={"name": name})

    def rename_location(self, session: AuthSession, location_id: str, *, name: str) -> Dict[str, Any]:
        return self._request("PATCH", f"/locations/{location_id}", session, json={"name": name})

    def delete_location(self, session: AuthSession, location_id: str) -> None:
        self._request("DELETE", f"/locations/{location_id}", session)

    def list_ingredients(self, session: AuthSession) -> list:
        return self._request("GET", "/ingredients", session)

    def create_ingredient(self, session: AuthSession, *, name: str, price: float, unit: str) -> Dict[str, Any]:
        return self._request("POST", "/ingredients", session, json={"name": name, "price": price, "unit": unit})

    def update_ingredient(self, session: AuthSession, ingredient_id: str, **fields: Any) -> Dict[str, Any]:
        return self._request("PATCH", f"/ingredients/{ingredient_id}", session, json=fields)

    def delete_ingredient(self, session: AuthSession, ingredient_id: str) -> None:
        self._request("DELETE", f"/ingredients/{ingredient_id}", session)

    def list_menu_items(self, session: AuthSession) -> list:
        return self._request("GET", "/menu-items", session)

    def create_menu_item(
        self, session: AuthSession, *, name: str, description: Optional[str] = None
    ) -> Dict[str, Any]:
        return self._request("POST", "/menu-items", session, json={"name": name, "description": description})

    def update_menu_item(self, session: AuthSession, menu_item_id: str, **fields: Any) -> Dict[str, Any]:
        return self._request("PATCH", f"/menu-items/{menu_item_id}", session, json=fields)

    def delete_menu_item(self, session: AuthSession, menu_item_id: str) -> None:
        self._request("DELETE", f"/menu-items/{menu_item_id}", session)

    # ----------------------------
    # Recipes (mix mappings)
    # ----------------------------

    def list_mix_mappings(self, session: AuthSession, *, menu_item_id: str, location_id: str) -> list:
        params = {"menuItemId": menu_item_id, "locationId": location_id}
        return self._request("GET", "/mix-mappings", session, params=params)

    def add_recipe_line(
        self, session: AuthSession, *, menu_item_id: str, location_id: str, ingredient_id: str, quantity: float
    ) -> Dict[str, Any]:
        payload = {
            "menuItemId": menu_item_id,
            "locationId": location_id,
            "ingredientId": ingredient_id,
            "quantity": quantity,
        }
        return self._request("POST", "/mix-mappings", session, json=payload)

    def update_recipe_line(self, session: AuthSession, mapping_id: str, *, quantity: float) -> Dict[str, Any]:
        return self._request("PATCH", f"/mix-mappings/{mapping_id}", session, json={"quantity": quantity})

    def delete_recipe_line(self, session: AuthSession, mapping_id: str) -> None:
        self._request("DELETE", f"/mix-mappings/{mapping_id}", session)

    def copy_menu(self, session: AuthSession, *, from_location_id: str, to_location_id: str) -> int:
        """
        Calls: POST /mix-mappings/copy
        Replaces every recipe at the destination; returns the number of lines copied.
        """
        payload = {"fromLocationId": from_location_id, "toLocationId": to_location_id}
        return self._request("POST", "/mix-mappings/copy", session, json=payload)["copiedCount"]

    def recipe_cost(self, session: AuthSession, *, menu_item_id: str, location_id: str) -> Decimal:
        mappings = self.list_mix_mappings(session, menu_item_id=menu_item_id, location_id=location_id)
        return recipe_total_cost(mappings)


def recipe_total_cost(mappings: Iterable[Dict[str, Any]]) -> Decimal:
    """Sum of ingredient price times quantity over mappings with an embedded ingredient"""
    total = Decimal("0")
    for mapping in mappings:
        price = Decimal(str(mapping["ingredient"]["price"]))
        total += price * Decimal(str(mapping["quantity"]))
    return total.quantize(Decimal("0.01"))


def make_client_from_env() -> InventoryApiClient:
    base_url = os.getenv("INVENTORY_API_URL", "").strip()
    if not base_url:
        raise RuntimeError("Missing INVENTORY_API_URL")
    return InventoryApiClient(base_url=base_url)


if __name__ == "__main__":
    client = make_client_from_env()
    email = os.getenv("INVENTORY_API_EMAIL", "").strip()
    password = os.getenv("INVENTORY_API_PASSWORD", "").strip()
    if not email or not password:
        raise SystemExit("Set INVENTORY_API_EMAIL and INVENTORY_API_PASSWORD to log in")

    session = client.login(email=email, password=password)
    for location in client.list_locations(session):
        print(location["name"])
