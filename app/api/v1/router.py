# Copyright (c) 2025 Alexandre Tavares
# Licensed under the Creative Commons Attribution-NonCommercial 4.0 International (CC BY-NC 4.0)
# See the LICENSE file in the project root for more information.
from fastapi import APIRouter
from app.api.v1 import orders, dataentities, newsletter
from app.api.v1 import dashboard
from app.api.v1 import health

"""
Roteador principal da API v1.


- Agrega e inclui sub-routers (proxy VTEX, cruzamentos newsletter, painel, health).
- Centraliza prefixos/tags; importado por `main.py` como `/api/v1`.
"""

router_v1 = APIRouter(tags=["v1"])

# Proxy VTEX
router_v1.include_router(orders.router,       prefix="/vtex", tags=["orders"])
router_v1.include_router(dataentities.router, prefix="/vtex", tags=["dataentities"])
router_v1.include_router(newsletter.router,   prefix="/vtex", tags=["newsletter"])

router_v1.include_router(dashboard.router, prefix="/dashboard", tags=["dashboard"])
router_v1.include_router(health.router,    prefix="/health",    tags=["Health"])
