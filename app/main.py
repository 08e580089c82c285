# Copyright (c) 2025 Alexandre Tavares
# Licensed under the Creative Commons Attribution-NonCommercial 4.0 International (CC BY-NC 4.0)
# See the LICENSE file in the project root for more information.
import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from app.core.config import settings
from app.core.errors import VtexProxyError
from app.core.log_setup import setup_logging
from app.api.v1.router import router_v1

"""
Painel de pedidos VTEX – FastAPI entrypoint.

- Cria a instância principal do FastAPI (title/version) e monta /api/v1.
- Traduz `VtexProxyError` para `{"error": ..., "details": ...}` com o status certo.
- Configura CORS conforme settings (origens, headers, métodos).
- Expõe /health para diagnóstico rápido do ambiente.
"""

setup_logging()
log = logging.getLogger("vtex")

start_server = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
)

start_server.include_router(router_v1, prefix="/api/v1")


@start_server.exception_handler(VtexProxyError)
async def vtex_proxy_error_handler(request: Request, exc: VtexProxyError) -> JSONResponse:
    log.error("vtex_proxy_error", extra={"path": request.url.path, "status": exc.status_code, "error": exc.message})
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


# CORS_ORIGINS vem do .env como CSV; sem valor, libera o front local
origins = list(settings.CORS_ORIGINS) or ["http://localhost:3000", "http://127.0.0.1:3000"]

start_server.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

log.info("CORS habilitado para: %s", origins)

@start_server.get("/health", tags=["Health"])
def health():
    return {
        "status": "ok",
        "env": settings.APP_ENV,
        "vtex_configured": bool(settings.VTEX_ACCOUNT and settings.VTEX_AUTH_COOKIE),
    }
