# Copyright (c) 2025 Alexandre Tavares
# Licensed under the Creative Commons Attribution-NonCommercial 4.0 International (CC BY-NC 4.0)
# See the LICENSE file in the project root for more information.
from __future__ import annotations
import logging
from typing import Any, Dict, List, Literal, Optional, Tuple
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from app.api.deps import get_order_service
from app.clients.vtex import VtexHttpError
from app.core.constants import get_limit_message
from app.core.errors import ORDERS_ERRORS, VtexProxyError, to_proxy_error
from app.schemas.vtex import OrdersPageOut, OrderTableRow
from app.services.export import ExportError, default_filename, export_to_csv, export_to_excel
from app.services.table_view import (
    DEFAULT_PAGE_SIZE, filter_in_cl, page_count, paginate, sort_rows, status_class,
)
from app.services.vtex_orders import VtexOrderService
from app.utils.date_range import DateRange, list_presets, resolve_date_range

"""
Painel de pedidos: tabela (ordenação/paginação/filtro CL) e exportação.


- `GET /dashboard/orders` modo "all" (pedidos + status CL) ou "newsletter" (CL → AD → pedidos).
- `GET /dashboard/orders/export` baixa a mesma seleção em .xlsx ou .csv.
- `GET /dashboard/date-presets` períodos rápidos (7/30 dias, 3/6/12 meses).
"""

log = logging.getLogger("vtex.dashboard")

router = APIRouter()

Mode = Literal["all", "newsletter"]

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _date_range_or_422(preset: Optional[str], date_from: Optional[str], date_to: Optional[str]) -> DateRange:
    try:
        return resolve_date_range(preset, date_from, date_to)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


async def _load_rows(
    service: VtexOrderService,
    mode: Mode,
    date_range: DateRange,
    only_in_cl: bool,
) -> Tuple[List[OrderTableRow], int]:
    """Retorna (linhas filtradas, total carregado antes do filtro CL)."""
    try:
        if mode == "newsletter":
            rows: List[OrderTableRow] = list(
                await service.get_newsletter_client_orders(date_range, 1, service.per_page)
            )
            return rows, len(rows)
        rows = await service.load_orders(date_range)
    except VtexHttpError as e:
        raise to_proxy_error(e, ORDERS_ERRORS) from e

    loaded = len(rows)
    if only_in_cl:
        rows = filter_in_cl(rows)
    return rows, loaded


def _row_payload(row: OrderTableRow) -> Dict[str, Any]:
    payload = row.model_dump(by_alias=True, mode="json")
    payload["statusClass"] = status_class(row.status_description)
    return payload


@router.get("/orders", response_model=OrdersPageOut, summary="Tabela de pedidos (ordenada/paginada)")
async def dashboard_orders(
    mode: Mode = Query("all"),
    preset: Optional[str] = Query(None, description="7d|30d|3m|6m|12m"),
    date_from: Optional[str] = Query(None, description="YYYY-MM-DD ou ISO"),
    date_to: Optional[str] = Query(None, description="YYYY-MM-DD ou ISO"),
    only_in_cl: bool = Query(False, description="Só pedidos de clientes presentes na CL (modo all)"),
    sort_by: Optional[str] = Query(None, description="Coluna (camelCase), ex.: creationDate"),
    sort_dir: Literal["asc", "desc"] = Query("asc"),
    page_index: int = Query(0, ge=0),
    page_size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=500),
    service: VtexOrderService = Depends(get_order_service),
) -> Dict[str, Any]:
    date_range = _date_range_or_422(preset, date_from, date_to)
    rows, loaded = await _load_rows(service, mode, date_range, only_in_cl and mode == "all")

    try:
        rows = sort_rows(rows, sort_by, sort_dir)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    page_rows = paginate(rows, page_index, page_size)
    ad_matches = None
    if mode == "newsletter":
        ad_matches = sum(1 for r in rows if getattr(r, "ad_data", None) is not None)

    log.info(
        "dashboard_orders",
        extra={"mode": mode, "loaded": loaded, "total": len(rows), "page_index": page_index},
    )

    return {
        "mode": mode,
        "rows": [_row_payload(r) for r in page_rows],
        "total": len(rows),
        "loaded": loaded,
        "page_index": page_index,
        "page_size": page_size,
        "page_count": page_count(len(rows), page_size),
        "date_range": date_range.as_dict(),
        "limit_message": get_limit_message(loaded, service.max_orders) if mode == "all" else "",
        "ad_matches": ad_matches,
    }


@router.get("/orders/export", summary="Exportar pedidos (xlsx/csv)")
async def export_orders(
    format: Literal["xlsx", "csv"] = Query("xlsx"),
    mode: Mode = Query("all"),
    preset: Optional[str] = Query(None),
    date_from: Optional[str] = Query(None),
    date_to: Optional[str] = Query(None),
    only_in_cl: bool = Query(False),
    sort_by: Optional[str] = Query(None),
    sort_dir: Literal["asc", "desc"] = Query("asc"),
    filename: Optional[str] = Query(None),
    service: VtexOrderService = Depends(get_order_service),
) -> Response:
    date_range = _date_range_or_422(preset, date_from, date_to)
    rows, _ = await _load_rows(service, mode, date_range, only_in_cl and mode == "all")
    try:
        rows = sort_rows(rows, sort_by, sort_dir)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    if not rows:
        raise VtexProxyError(404, "Nenhum pedido para exportar no período selecionado")

    try:
        if format == "csv":
            content: bytes = export_to_csv(rows).encode("utf-8")
            media_type = "text/csv; charset=utf-8"
        else:
            content = export_to_excel(rows)
            media_type = XLSX_MEDIA_TYPE
    except ExportError as e:
        raise VtexProxyError(500, str(e)) from e

    name = filename or default_filename(format)
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{name}"'},
    )


@router.get("/date-presets", summary="Períodos rápidos do filtro de datas")
async def date_presets() -> List[Dict[str, str]]:
    return list_presets()
