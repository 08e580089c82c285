# Copyright (c) 2025 Alexandre Tavares
# Licensed under the Creative Commons Attribution-NonCommercial 4.0 International (CC BY-NC 4.0)
# See the LICENSE file in the project root for more information.
from __future__ import annotations
from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, Query
from app.api.deps import get_vtex_client
from app.clients.vtex import VtexClient, VtexHttpError
from app.core.constants import AD_FIELDS, CL_FIELDS, CL_NEWSLETTER_FIELDS
from app.core.errors import (
    AD_ERRORS, CLIENTS_ERRORS, NEWSLETTER_CLIENTS_ERRORS, VtexProxyError, to_proxy_error,
)

"""
Proxy das Data Entities (CL = clientes, AD = endereços).


- `GET /vtex/dataentities` busca cliente na CL por email e/ou documento.
- `GET /vtex/newsletter-clients` clientes com newsletter ativo (paginado via REST-Range).
- `GET /vtex/ad-data` registros da AD por `customer` (um ou vários, separados por vírgula).
"""

router = APIRouter()


@router.get("/dataentities", summary="Buscar cliente na CL (email/documento)")
async def search_client(
    email: Optional[str] = Query(None),
    document: Optional[str] = Query(None),
    fields: str = Query(CL_FIELDS, alias="_fields"),
    client: VtexClient = Depends(get_vtex_client),
) -> Any:
    if not email and not document:
        raise VtexProxyError(400, "Parâmetro email ou document é obrigatório")

    params: Dict[str, Any] = {"_fields": fields}
    if email:
        params["email"] = email.strip().lower()
    if document:
        params["document"] = document.strip()

    try:
        return await client.search_clients(params)
    except VtexHttpError as e:
        raise to_proxy_error(e, CLIENTS_ERRORS) from e


@router.get("/newsletter-clients", summary="Clientes com newsletter ativo (CL)")
async def newsletter_clients(
    page: int = Query(1, ge=1),
    page_size: int = Query(100, ge=1, le=1000, alias="pageSize"),
    client: VtexClient = Depends(get_vtex_client),
) -> Any:
    start = (page - 1) * page_size
    try:
        return await client.search_clients(
            {"_fields": CL_NEWSLETTER_FIELDS, "isNewsletterOptIn": "true"},
            rest_range=(start, start + page_size - 1),
        )
    except VtexHttpError as e:
        raise to_proxy_error(e, NEWSLETTER_CLIENTS_ERRORS) from e


@router.get("/ad-data", summary="Endereços (AD) por customer")
async def ad_data(
    customer: Optional[str] = Query(None),
    customers: Optional[str] = Query(None, description="Lista separada por vírgula"),
    client: VtexClient = Depends(get_vtex_client),
) -> Any:
    if not customer and not customers:
        raise VtexProxyError(400, "Parâmetro customer ou customers é obrigatório")

    params: Dict[str, Any] = {"_fields": AD_FIELDS}
    if customer:
        params["customer"] = customer.strip()
    if customers:
        customer_list = [c.strip() for c in customers.split(",") if c.strip()]
        if customer_list:
            params["customer"] = ",".join(customer_list)

    try:
        return await client.search_addresses(params)
    except VtexHttpError as e:
        raise to_proxy_error(e, AD_ERRORS) from e
