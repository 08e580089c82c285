# Copyright (c) 2025 Alexandre Tavares
# Licensed under the Creative Commons Attribution-NonCommercial 4.0 International (CC BY-NC 4.0)
# See the LICENSE file in the project root for more information.
from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional
import httpx
from app.core.config import settings

"""
Client HTTP (VTEX – OMS e Data Entities).


- Monta base URL `https://{account}.{environment}.com.br/api` e o cookie de autenticação.
- Define a exceção `VtexHttpError` (carrega o status HTTP do provider).
- `list_orders`, `get_order`, `search_clients` (CL) e `search_addresses` (AD) retornam JSON bruto.
"""

log = logging.getLogger("vtex")


class VtexHttpError(RuntimeError):
    """Erro HTTP (ou de rede) ao consultar a VTEX."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class VtexClient:
    """
    Client assíncrono das APIs privadas da VTEX.

    Cada chamada abre um `httpx.AsyncClient` curto; `transport` permite injetar
    um `httpx.MockTransport` nos testes.
    """

    def __init__(
        self,
        account: str,
        auth_cookie: str,
        *,
        environment: str = "vtexcommercestable",
        timeout_s: int = 30,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.account = account
        self.environment = environment
        self.timeout_s = timeout_s
        self._auth_cookie = auth_cookie
        self._transport = transport

    @classmethod
    def from_settings(cls, transport: Optional[httpx.AsyncBaseTransport] = None) -> "VtexClient":
        return cls(
            settings.VTEX_ACCOUNT,
            settings.VTEX_AUTH_COOKIE,
            environment=settings.VTEX_ENVIRONMENT,
            timeout_s=settings.VTEX_TIMEOUT_S,
            transport=transport,
        )

    @property
    def base_url(self) -> str:
        return f"https://{self.account}.{self.environment}.com.br/api"

    @property
    def headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Cookie": f"VtexIdclientAutCookie={self._auth_cookie}",
        }

    async def _get(
        self,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        *,
        headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        url = f"{self.base_url}{path}"
        log.info("vtex_request", extra={"method": "GET", "url": url, "params": params})

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_s,
                headers=self.headers,
                transport=self._transport,
            ) as client:
                resp = await client.get(url, params=params, headers=headers)
                resp.raise_for_status()
                return resp.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            log.error("vtex_http_error", extra={"url": url, "status": status})
            raise VtexHttpError(f"VTEX request failed: {status} for {path}", status_code=status) from e
        except httpx.RequestError as e:
            log.error("vtex_network_error", extra={"url": url, "error": str(e)})
            raise VtexHttpError(f"VTEX request failed: {e}") from e

    # OMS
    async def list_orders(
        self,
        page: int = 1,
        per_page: int = 50,
        *,
        f_creation_date: Optional[str] = None,
        f_client_email: Optional[str] = None,
        f_status: Optional[str] = None,
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {"page": str(page), "per_page": str(per_page)}
        if f_creation_date:
            params["f_creationDate"] = f_creation_date
        if f_client_email:
            params["f_clientEmail"] = f_client_email
        if f_status:
            params["f_status"] = f_status
        return await self._get("/oms/pvt/orders", params)

    async def get_order(self, order_id: str) -> Dict[str, Any]:
        return await self._get(f"/oms/pvt/orders/{order_id}")

    # Data Entities
    async def search_clients(
        self,
        params: Dict[str, Any],
        *,
        rest_range: Optional[tuple[int, int]] = None,
    ) -> List[Dict[str, Any]]:
        """
        Busca na entidade CL. `rest_range=(de, até)` vira o header `REST-Range: resources=de-até`.
        """
        headers = None
        if rest_range is not None:
            headers = {"REST-Range": f"resources={rest_range[0]}-{rest_range[1]}"}
        data = await self._get("/dataentities/CL/search", params, headers=headers)
        return data if isinstance(data, list) else []

    async def search_addresses(self, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        data = await self._get("/dataentities/AD/search", params)
        return data if isinstance(data, list) else []
