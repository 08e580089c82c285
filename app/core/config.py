# Copyright (c) 2025 Alexandre Tavares
# Licensed under the Creative Commons Attribution-NonCommercial 4.0 International (CC BY-NC 4.0)
# See the LICENSE file in the project root for more information.
import os
from dataclasses import dataclass
from dotenv import load_dotenv

"""
Central de configurações (Settings) do painel de pedidos VTEX.


- Carrega variáveis do .env (app/log/cors/vtex/limites/exportação).
- Fornece defaults seguros e tipados via dataclass.
- Expõe `settings` como singleton para uso em toda a app.
"""

load_dotenv()

@dataclass
class Settings:
    APP_NAME: str = os.getenv("APP_NAME", "VTEX Orders Dashboard")
    APP_ENV: str = os.getenv("APP_ENV", "local")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    CORS_ORIGINS: tuple[str, ...] = tuple(
        origin.strip() for origin in os.getenv("CORS_ORIGINS", "").split(",") if origin.strip()
    )

    VTEX_ACCOUNT: str = os.getenv("VTEX_ACCOUNT", "")
    VTEX_AUTH_COOKIE: str = os.getenv("VTEX_AUTH_COOKIE", "")
    VTEX_ENVIRONMENT: str = os.getenv("VTEX_ENVIRONMENT", "vtexcommercestable")
    VTEX_TIMEOUT_S: int = int(os.getenv("VTEX_TIMEOUT_S", "30"))

    # limites da carga de pedidos (evita timeout)
    MAX_ORDERS: int = int(os.getenv("MAX_ORDERS", "5000"))
    MAX_PAGES: int = int(os.getenv("MAX_PAGES", "100"))
    PER_PAGE: int = int(os.getenv("PER_PAGE", "50"))

    # 1 requisição de detalhes a cada 250ms (~4 por segundo)
    ORDER_DETAILS_INTERVAL_MS: int = int(os.getenv("ORDER_DETAILS_INTERVAL_MS", "250"))

    EXPORT_TIMEZONE: str = os.getenv("EXPORT_TIMEZONE", "America/Sao_Paulo")

settings = Settings()
