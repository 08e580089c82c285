# Copyright (c) 2025 Alexandre Tavares
# Licensed under the Creative Commons Attribution-NonCommercial 4.0 International (CC BY-NC 4.0)
# See the LICENSE file in the project root for more information.
from fastapi import Depends
from app.clients.vtex import VtexClient
from app.core.config import settings
from app.core.errors import MISSING_CONFIG, VtexProxyError
from app.services.vtex_orders import VtexOrderService
from app.utils.request_queue import RequestQueue

"""
Dependências reutilizáveis da API.


- `get_vtex_client()` valida VTEX_ACCOUNT/VTEX_AUTH_COOKIE e injeta o client.
- `get_order_service()` monta o serviço com a fila de detalhes compartilhada (throttle único).
"""

_details_queue = RequestQueue(settings.ORDER_DETAILS_INTERVAL_MS)


def get_vtex_client() -> VtexClient:
    if not settings.VTEX_ACCOUNT or not settings.VTEX_AUTH_COOKIE:
        raise VtexProxyError(500, MISSING_CONFIG)
    return VtexClient.from_settings()


def get_order_service(client: VtexClient = Depends(get_vtex_client)) -> VtexOrderService:
    return VtexOrderService(client, details_queue=_details_queue)
