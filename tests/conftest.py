"""pytest comum: VTEX falsa sobre httpx.MockTransport."""

from __future__ import annotations

from typing import Any

import httpx
import pytest

from app.clients.vtex import VtexClient
from app.services.vtex_orders import VtexOrderService


def make_order(
    order_id: str,
    *,
    email: str = "ana@example.com",
    document: str = "123.456.789-09",
    status: str = "invoiced",
    value: int = 12345,
    creation_date: str = "2024-03-10T15:30:00.0000000+00:00",
) -> dict[str, Any]:
    return {
        "orderId": order_id,
        "creationDate": creation_date,
        "clientProfileData": {
            "firstName": "Ana",
            "lastName": "Souza",
            "email": email,
            "document": document,
            "phone": "+55 (11) 91234-5678",
        },
        "shippingData": {
            "address": {
                "addressName": "casa",
                "street": "Rua das Flores",
                "number": "10",
                "complement": None,
                "neighborhood": "Centro",
                "city": "São Paulo",
                "state": "SP",
                "postalCode": "01000-000",
                "country": "BRA",
            },
        },
        "value": value,
        "currencyCode": "BRL",
        "status": status,
        "statusDescription": "Faturado",
    }


class FakeVtex:
    """VTEX mínima em memória (OMS + busca CL/AD) respondendo requisições httpx."""

    def __init__(self) -> None:
        self.orders: list[dict[str, Any]] = []
        self.details: dict[str, dict[str, Any]] = {}
        self.clients: list[dict[str, Any]] = []
        self.addresses: list[dict[str, Any]] = []
        self.fail: dict[str, int] = {}
        # (parâmetro, valor) → status: falha só as requisições com esse filtro
        self.fail_params: dict[tuple[str, str], int] = {}
        self.requests: list[httpx.Request] = []

    def add_order(self, order: dict[str, Any], *, with_details: bool = True) -> None:
        self.orders.append(order)
        if with_details:
            self.details[order["orderId"]] = order

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        params = request.url.params

        for prefix, status in self.fail.items():
            if path.startswith(prefix):
                return httpx.Response(status, json={"error": "fail"})
        for (name, value), status in self.fail_params.items():
            if params.get(name) == value:
                return httpx.Response(status, json={"error": "fail"})

        if path == "/api/oms/pvt/orders":
            items = self.orders
            if "f_clientEmail" in params:
                wanted = params["f_clientEmail"]
                items = [
                    o for o in items
                    if ((o.get("clientProfileData") or {}).get("email") or "").lower() == wanted
                ]
            if "f_status" in params:
                items = [o for o in items if o.get("status", "").lower() == params["f_status"].lower()]
            page = int(params.get("page", "1"))
            per_page = int(params.get("per_page", "50"))
            start = (page - 1) * per_page
            return httpx.Response(200, json={
                "list": items[start:start + per_page],
                "paging": {"total": len(items), "pages": 1, "currentPage": page, "perPage": per_page},
            })

        if path.startswith("/api/oms/pvt/orders/"):
            order_id = path.rsplit("/", 1)[1]
            if order_id in self.details:
                return httpx.Response(200, json=self.details[order_id])
            return httpx.Response(404, json={"error": "not found"})

        if path == "/api/dataentities/CL/search":
            records = self.clients
            if "email" in params:
                records = [c for c in records if (c.get("email") or "").lower() == params["email"]]
            if "document" in params:
                records = [c for c in records if c.get("document") == params["document"]]
            if "isNewsletterOptIn" in params or "_where" in params:
                records = [c for c in records if c.get("isNewsletterOptIn")]
            return httpx.Response(200, json=records)

        if path == "/api/dataentities/AD/search":
            records = self.addresses
            if "customer" in params:
                keys = set(params["customer"].split(","))
                records = [a for a in records if a.get("customer") in keys]
            if "_where" in params:
                key = params["_where"].split("=", 1)[1]
                records = [a for a in records if a.get("customer") == key]
            return httpx.Response(200, json=records)

        return httpx.Response(404, json={"error": "unknown path"})


@pytest.fixture
def fake_vtex() -> FakeVtex:
    return FakeVtex()


@pytest.fixture
def vtex_client(fake_vtex: FakeVtex) -> VtexClient:
    return VtexClient("minhaloja", "secret-cookie", transport=httpx.MockTransport(fake_vtex))


@pytest.fixture
def service(vtex_client: VtexClient) -> VtexOrderService:
    return VtexOrderService(vtex_client, details_interval_ms=0, per_page=2, max_orders=100, max_pages=10)
