# Copyright (c) 2025 Alexandre Tavares
# Licensed under the Creative Commons Attribution-NonCommercial 4.0 International (CC BY-NC 4.0)
# See the LICENSE file in the project root for more information.
from __future__ import annotations
import logging
from typing import Any, Optional
from fastapi import APIRouter, Depends, Path, Query
from app.api.deps import get_vtex_client
from app.clients.vtex import VtexClient, VtexHttpError
from app.core.errors import (
    ORDER_DETAILS_ERRORS, ORDERS_BY_EMAIL_ERRORS, ORDERS_ERRORS, VtexProxyError, to_proxy_error,
)
from app.utils.date_range import optional_date_range

"""
Proxy dos pedidos (OMS VTEX).


- `GET /vtex/orders` lista paginada (repassa `f_creationDate`).
- `GET /vtex/orders/{order_id}` detalhes de um pedido.
- `GET /vtex/orders-by-email` pedidos de um email (filtro de data só com as duas pontas).
- JSON da VTEX repassado sem alteração; status 401/403/404 viram mensagens fixas.
"""

log = logging.getLogger("vtex.api")

router = APIRouter()


@router.get("/orders", summary="Listar pedidos (proxy OMS)")
async def list_orders(
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=100),
    f_creation_date: Optional[str] = Query(None, alias="f_creationDate", description="creationDate:[ISO TO ISO]"),
    client: VtexClient = Depends(get_vtex_client),
) -> Any:
    try:
        return await client.list_orders(page, per_page, f_creation_date=f_creation_date)
    except VtexHttpError as e:
        raise to_proxy_error(e, ORDERS_ERRORS) from e


@router.get("/orders-by-email", summary="Pedidos por email do cliente")
async def orders_by_email(
    email: Optional[str] = Query(None),
    page: int = Query(1, ge=1),
    per_page: int = Query(100, ge=1, le=100),
    date_from: Optional[str] = Query(None, alias="dateFrom"),
    date_to: Optional[str] = Query(None, alias="dateTo"),
    client: VtexClient = Depends(get_vtex_client),
) -> Any:
    if not email:
        raise VtexProxyError(400, "Parâmetro email é obrigatório")
    try:
        date_range = optional_date_range(date_from, date_to)
    except ValueError as e:
        raise VtexProxyError(400, f"Período inválido: {e}") from e

    try:
        return await client.list_orders(
            page,
            per_page,
            f_client_email=email.strip().lower(),
            f_creation_date=date_range.vtex_creation_filter() if date_range else None,
        )
    except VtexHttpError as e:
        raise to_proxy_error(e, ORDERS_BY_EMAIL_ERRORS) from e


@router.get("/orders/{order_id}", summary="Detalhes de um pedido")
async def get_order(
    order_id: str = Path(..., description="ID do pedido VTEX"),
    client: VtexClient = Depends(get_vtex_client),
) -> Any:
    try:
        return await client.get_order(order_id)
    except VtexHttpError as e:
        log.error("order_details_failed", extra={"order_id": order_id, "status": e.status_code})
        raise to_proxy_error(e, ORDER_DETAILS_ERRORS) from e
