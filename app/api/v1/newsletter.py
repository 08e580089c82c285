# Copyright (c) 2025 Alexandre Tavares
# Licensed under the Creative Commons Attribution-NonCommercial 4.0 International (CC BY-NC 4.0)
# See the LICENSE file in the project root for more information.
from __future__ import annotations
import logging
from typing import Any, Optional
from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from app.api.deps import get_order_service, get_vtex_client
from app.clients.vtex import VtexClient, VtexHttpError
from app.core.errors import VtexProxyError
from app.schemas.vtex import NewsletterOrdersOut
from app.services.clients_report import REPORT_COLUMNS, build_clients_report
from app.services.export import records_to_csv
from app.services.vtex_orders import VtexOrderService
from app.utils.date_range import optional_date_range

"""
Cruzamentos CL x AD x Pedidos para clientes com newsletter.


- `GET /vtex/newsletter-orders` pedidos (finalizados) de clientes com newsletter ativo.
- `GET /vtex/getallclients` CSV "clientes com pedidos" (endereço validado na AD + pedidos faturados).
"""

log = logging.getLogger("vtex.api")

router = APIRouter()


@router.get(
    "/newsletter-orders",
    response_model=NewsletterOrdersOut,
    response_model_by_alias=True,
    summary="Pedidos de clientes com newsletter (CL → AD → Orders)",
)
async def newsletter_orders(
    page: int = Query(1, ge=1),
    page_size: int = Query(100, ge=1, le=1000, alias="pageSize"),
    date_from: Optional[str] = Query(None, alias="dateFrom"),
    date_to: Optional[str] = Query(None, alias="dateTo"),
    service: VtexOrderService = Depends(get_order_service),
) -> Any:
    try:
        date_range = optional_date_range(date_from, date_to)
    except ValueError as e:
        raise VtexProxyError(400, f"Período inválido: {e}") from e

    log.info("newsletter_orders_start", extra={"page": page, "page_size": page_size})
    try:
        rows = await service.get_newsletter_client_orders(date_range, page, page_size)
    except VtexHttpError as e:
        raise VtexProxyError(500, f"Falha ao buscar pedidos de clientes com newsletter: {e}") from e

    return NewsletterOrdersOut(
        orders=rows,
        total=len(rows),
        page=page,
        page_size=page_size,
        date_range=date_range.as_dict() if date_range else None,
    )


@router.get("/getallclients", summary="CSV de clientes newsletter com pedidos faturados")
async def get_all_clients(client: VtexClient = Depends(get_vtex_client)) -> Response:
    try:
        rows = await build_clients_report(client)
    except VtexHttpError as e:
        raise VtexProxyError(500, str(e)) from e

    return Response(
        content=records_to_csv(rows, REPORT_COLUMNS),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=clientes-com-pedidos.csv"},
    )
