"""Testes das rotas HTTP (proxy VTEX, newsletter, painel e health)."""

from __future__ import annotations

from io import BytesIO

import pytest
from fastapi.testclient import TestClient
from openpyxl import load_workbook

from app.api.deps import get_order_service, get_vtex_client
from app.clients.vtex import VtexClient
from app.core.config import settings
from app.core.errors import MISSING_CONFIG, TOKEN_EXPIRED
from app.main import start_server
from app.services.vtex_orders import VtexOrderService
from conftest import FakeVtex, make_order

ANA = {
    "id": "cl-1",
    "firstName": "Ana",
    "lastName": "Souza",
    "email": "ana@example.com",
    "document": "12345678909",
    "isNewsletterOptIn": True,
}


@pytest.fixture
def api(vtex_client: VtexClient, service: VtexOrderService):
    start_server.dependency_overrides[get_vtex_client] = lambda: vtex_client
    start_server.dependency_overrides[get_order_service] = lambda: service
    yield TestClient(start_server)
    start_server.dependency_overrides.clear()


class TestOrdersProxy:
    """/api/v1/vtex/orders*"""

    def test_list_is_passed_through(self, api: TestClient, fake_vtex: FakeVtex) -> None:
        fake_vtex.add_order(make_order("v1"))
        resp = api.get("/api/v1/vtex/orders", params={"f_creationDate": "creationDate:[a TO b]"})
        assert resp.status_code == 200
        assert resp.json()["list"][0]["orderId"] == "v1"
        assert fake_vtex.requests[0].url.params["f_creationDate"] == "creationDate:[a TO b]"

    def test_auth_cookie_is_sent(self, api: TestClient, fake_vtex: FakeVtex) -> None:
        api.get("/api/v1/vtex/orders")
        request = fake_vtex.requests[0]
        assert request.url.host == "minhaloja.vtexcommercestable.com.br"
        assert request.headers["Cookie"] == "VtexIdclientAutCookie=secret-cookie"

    def test_expired_token(self, api: TestClient, fake_vtex: FakeVtex) -> None:
        fake_vtex.fail["/api/oms"] = 401
        resp = api.get("/api/v1/vtex/orders")
        assert resp.status_code == 401
        assert resp.json()["error"] == TOKEN_EXPIRED
        assert "details" in resp.json()

    def test_order_not_found(self, api: TestClient) -> None:
        resp = api.get("/api/v1/vtex/orders/nao-existe")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Pedido não encontrado"}

    def test_orders_by_email_requires_email(self, api: TestClient) -> None:
        resp = api.get("/api/v1/vtex/orders-by-email")
        assert resp.status_code == 400
        assert resp.json() == {"error": "Parâmetro email é obrigatório"}

    def test_orders_by_email_normalizes_and_filters(self, api: TestClient, fake_vtex: FakeVtex) -> None:
        fake_vtex.add_order(make_order("v1"))
        resp = api.get(
            "/api/v1/vtex/orders-by-email",
            params={"email": " Ana@Example.com ", "dateFrom": "2024-01-01", "dateTo": "2024-01-31"},
        )
        assert resp.status_code == 200
        params = fake_vtex.requests[0].url.params
        assert params["f_clientEmail"] == "ana@example.com"
        assert params["f_creationDate"] == (
            "creationDate:[2024-01-01T00:00:00.000Z TO 2024-01-31T23:59:59.999Z]"
        )

    def test_missing_configuration(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(settings, "VTEX_ACCOUNT", "")
        monkeypatch.setattr(settings, "VTEX_AUTH_COOKIE", "")
        resp = TestClient(start_server).get("/api/v1/vtex/orders")
        assert resp.status_code == 500
        assert resp.json() == {"error": MISSING_CONFIG}


class TestDataEntitiesProxy:
    """/api/v1/vtex/dataentities, newsletter-clients, ad-data"""

    def test_requires_email_or_document(self, api: TestClient) -> None:
        resp = api.get("/api/v1/vtex/dataentities")
        assert resp.status_code == 400

    def test_search_by_document(self, api: TestClient, fake_vtex: FakeVtex) -> None:
        fake_vtex.clients = [ANA]
        resp = api.get("/api/v1/vtex/dataentities", params={"document": "12345678909"})
        assert resp.status_code == 200
        assert resp.json()[0]["id"] == "cl-1"

    def test_forbidden(self, api: TestClient, fake_vtex: FakeVtex) -> None:
        fake_vtex.fail["/api/dataentities"] = 403
        resp = api.get("/api/v1/vtex/dataentities", params={"email": "ana@example.com"})
        assert resp.status_code == 403
        assert "Data Entities" in resp.json()["error"]

    def test_newsletter_clients_rest_range(self, api: TestClient, fake_vtex: FakeVtex) -> None:
        api.get("/api/v1/vtex/newsletter-clients", params={"page": 2, "pageSize": 10})
        assert fake_vtex.requests[0].headers["REST-Range"] == "resources=10-19"

    def test_ad_data_requires_customer(self, api: TestClient) -> None:
        assert api.get("/api/v1/vtex/ad-data").status_code == 400

    def test_ad_data_customers_list(self, api: TestClient, fake_vtex: FakeVtex) -> None:
        fake_vtex.addresses = [{"id": "ad-1", "customer": "a@x.com"}, {"id": "ad-2", "customer": "b@x.com"}]
        resp = api.get("/api/v1/vtex/ad-data", params={"customers": "a@x.com, b@x.com,"})
        assert [r["id"] for r in resp.json()] == ["ad-1", "ad-2"]
        assert fake_vtex.requests[0].url.params["customer"] == "a@x.com,b@x.com"


class TestNewsletterRoutes:
    """/api/v1/vtex/newsletter-orders e /getallclients"""

    def test_newsletter_orders_camel_case(self, api: TestClient, fake_vtex: FakeVtex) -> None:
        fake_vtex.clients = [ANA]
        fake_vtex.addresses = [{"id": "ad-1", "customer": "ana@example.com"}]
        fake_vtex.add_order(make_order("v1"))

        resp = api.get("/api/v1/vtex/newsletter-orders", params={"pageSize": 10})
        assert resp.status_code == 200
        body = resp.json()
        assert body["total"] == 1
        assert body["pageSize"] == 10
        assert body["dateRange"] is None
        order = body["orders"][0]
        assert order["orderId"] == "v1"
        assert order["clStatus"] == "Está na CL"
        assert order["clientNewsletterStatus"] is True
        assert order["adData"]["id"] == "ad-1"

    def test_getallclients_csv(self, api: TestClient, fake_vtex: FakeVtex) -> None:
        fake_vtex.clients = [ANA]
        fake_vtex.addresses = [{"customer": "cl-1", "street": "Rua A", "city": "Campinas", "state": "SP"}]
        fake_vtex.add_order(make_order("v1"))

        resp = api.get("/api/v1/vtex/getallclients")
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/csv")
        assert resp.headers["content-disposition"] == "attachment; filename=clientes-com-pedidos.csv"
        lines = resp.text.strip().split("\n")
        assert lines[0] == '"ClienteID","Nome","Email","Rua","Cidade","Estado","PedidoID","Status","ValorTotal","Data"'
        assert lines[1].startswith(
            '"cl-1","Ana Souza","ana@example.com","Rua A","Campinas","SP","v1","invoiced",123.45,"2024-03-10'
        )

    def test_getallclients_whole_value_and_failed_client(self, api: TestClient, fake_vtex: FakeVtex) -> None:
        fake_vtex.clients = [ANA, {"id": "cl-9", "firstName": "Zeca", "email": "zeca@example.com", "isNewsletterOptIn": True}]
        fake_vtex.addresses = [{"customer": "cl-1", "street": "Rua A", "city": "Campinas", "state": "SP"}]
        fake_vtex.fail_params[("_where", "customer=cl-9")] = 500
        fake_vtex.add_order(make_order("v1", value=10000))

        resp = api.get("/api/v1/vtex/getallclients")
        assert resp.status_code == 200
        lines = resp.text.strip().split("\n")
        assert len(lines) == 2
        assert '"v1","invoiced",100,"2024-03-10' in lines[1]


class TestDashboard:
    """/api/v1/dashboard/*"""

    def _seed(self, fake_vtex: FakeVtex) -> None:
        fake_vtex.clients = [ANA]
        fake_vtex.add_order(make_order("v1", value=1000))
        fake_vtex.add_order(make_order("v2", value=3000, email="bia@example.com", document="111"))
        fake_vtex.add_order(make_order("v3", value=2000))

    def test_sorted_and_paginated(self, api: TestClient, fake_vtex: FakeVtex) -> None:
        self._seed(fake_vtex)
        resp = api.get(
            "/api/v1/dashboard/orders",
            params={"sort_by": "totalValue", "sort_dir": "desc", "page_size": 2, "page_index": 0},
        )
        assert resp.status_code == 200
        body = resp.json()
        assert body["total"] == 3
        assert body["loaded"] == 3
        assert body["page_count"] == 2
        assert [r["orderId"] for r in body["rows"]] == ["v2", "v3"]
        assert body["rows"][0]["clStatus"] == "Ausente na CL"
        assert body["rows"][0]["statusClass"] == "gray"
        assert body["limit_message"] == ""
        assert set(body["date_range"]) == {"from", "to"}

    def test_only_in_cl(self, api: TestClient, fake_vtex: FakeVtex) -> None:
        self._seed(fake_vtex)
        body = api.get("/api/v1/dashboard/orders", params={"only_in_cl": "true"}).json()
        assert body["loaded"] == 3
        assert sorted(r["orderId"] for r in body["rows"]) == ["v1", "v3"]

    def test_bad_sort_column(self, api: TestClient) -> None:
        assert api.get("/api/v1/dashboard/orders", params={"sort_by": "senha"}).status_code == 422

    def test_bad_preset(self, api: TestClient) -> None:
        assert api.get("/api/v1/dashboard/orders", params={"preset": "2y"}).status_code == 422

    def test_single_day_range_reaches_end_of_day(self, api: TestClient, fake_vtex: FakeVtex) -> None:
        body = api.get(
            "/api/v1/dashboard/orders",
            params={"date_from": "2024-01-31", "date_to": "2024-01-31"},
        ).json()
        assert body["date_range"] == {"from": "2024-01-31T00:00:00.000Z", "to": "2024-01-31T23:59:59.999Z"}
        assert fake_vtex.requests[0].url.params["f_creationDate"] == (
            "creationDate:[2024-01-31T00:00:00.000Z TO 2024-01-31T23:59:59.999Z]"
        )

    def test_newsletter_mode_counts_ad_matches(self, api: TestClient, fake_vtex: FakeVtex) -> None:
        fake_vtex.clients = [ANA]
        fake_vtex.addresses = [{"id": "ad-1", "customer": "ana@example.com"}]
        fake_vtex.add_order(make_order("v1"))
        body = api.get("/api/v1/dashboard/orders", params={"mode": "newsletter"}).json()
        assert body["mode"] == "newsletter"
        assert body["ad_matches"] == 1

    def test_export_csv(self, api: TestClient, fake_vtex: FakeVtex) -> None:
        self._seed(fake_vtex)
        resp = api.get("/api/v1/dashboard/orders/export", params={"format": "csv", "filename": "x.csv"})
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/csv")
        assert resp.headers["content-disposition"] == 'attachment; filename="x.csv"'
        assert resp.text.startswith("ID do Pedido,Data de Criação,")

    def test_export_xlsx(self, api: TestClient, fake_vtex: FakeVtex) -> None:
        self._seed(fake_vtex)
        resp = api.get("/api/v1/dashboard/orders/export")
        assert resp.status_code == 200
        assert "pedidos_vtex_" in resp.headers["content-disposition"]
        ws = load_workbook(BytesIO(resp.content))["Pedidos"]
        assert ws.max_row == 4

    def test_export_empty(self, api: TestClient) -> None:
        resp = api.get("/api/v1/dashboard/orders/export")
        assert resp.status_code == 404
        assert "error" in resp.json()

    def test_date_presets(self, api: TestClient) -> None:
        keys = [p["key"] for p in api.get("/api/v1/dashboard/date-presets").json()]
        assert keys == ["7d", "30d", "3m", "6m", "12m"]


class TestHealth:
    """/health e /api/v1/health/vtex"""

    def test_root_health(self, api: TestClient) -> None:
        body = api.get("/health").json()
        assert body["status"] == "ok"
        assert "vtex_configured" in body

    def test_vtex_ok(self, api: TestClient, fake_vtex: FakeVtex) -> None:
        fake_vtex.add_order(make_order("v1"))
        body = api.get("/api/v1/health/vtex").json()
        assert body["vtex"] == "ok"
        assert body["account"] == "minhaloja"
        assert body["orders_total"] == 1

    def test_vtex_down(self, api: TestClient, fake_vtex: FakeVtex) -> None:
        fake_vtex.fail["/api/oms"] = 401
        resp = api.get("/api/v1/health/vtex")
        assert resp.status_code == 503
        assert resp.json()["detail"]["status"] == 401
