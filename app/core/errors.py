# Copyright (c) 2025 Alexandre Tavares
# Licensed under the Creative Commons Attribution-NonCommercial 4.0 International (CC BY-NC 4.0)
# See the LICENSE file in the project root for more information.
from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Optional
from app.clients.vtex import VtexHttpError

"""
Erros expostos pela API e tradução dos status HTTP da VTEX.


- `VtexProxyError`: erro com status + mensagem fixa para o usuário (vira `{"error": ...}`).
- `ErrorMessages` por recurso (403/404/fallback).
- `to_proxy_error()` mapeia 401/403/404/outros para as mensagens fixas.
"""

TOKEN_EXPIRED = "Token VTEX expirado! Obtenha um novo VtexIdclientAutCookie e atualize o arquivo .env."
TOKEN_EXPIRED_DETAILS = (
    "O VtexIdclientAutCookie expirou. Acesse sua loja VTEX, copie o novo cookie "
    "e atualize a variável VTEX_AUTH_COOKIE"
)
MISSING_CONFIG = "Configurações VTEX não encontradas: defina VTEX_ACCOUNT e VTEX_AUTH_COOKIE"
NETWORK_ERROR = "Erro de rede"


class VtexProxyError(Exception):
    """Erro já traduzido para resposta HTTP."""

    def __init__(self, status_code: int, message: str, details: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.details = details

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


@dataclass(frozen=True)
class ErrorMessages:
    not_found: str
    fallback: str
    forbidden: Optional[str] = None


_DE_FORBIDDEN = "Erro de permissão: Sua conta não tem acesso à API Data Entities"

ORDERS_ERRORS = ErrorMessages(
    forbidden="Erro de permissão: Sua conta não tem acesso à API OMS",
    not_found="Conta VTEX não encontrada: Verifique se o VTEX_ACCOUNT está correto",
    fallback="Falha ao buscar pedidos da VTEX",
)
ORDER_DETAILS_ERRORS = ErrorMessages(
    not_found="Pedido não encontrado",
    fallback="Falha ao buscar detalhes do pedido",
)
ORDERS_BY_EMAIL_ERRORS = ErrorMessages(
    forbidden="Erro de permissão: Sua conta não tem acesso à API de Pedidos",
    not_found="Nenhum pedido encontrado para este email",
    fallback="Falha ao buscar pedidos por email",
)
CLIENTS_ERRORS = ErrorMessages(
    forbidden=_DE_FORBIDDEN,
    not_found="Cliente não encontrado na Data Entities",
    fallback="Falha ao buscar cliente na Data Entities",
)
NEWSLETTER_CLIENTS_ERRORS = ErrorMessages(
    forbidden=_DE_FORBIDDEN,
    not_found="Nenhum cliente com newsletter ativo encontrado",
    fallback="Falha ao buscar clientes com newsletter",
)
AD_ERRORS = ErrorMessages(
    forbidden=_DE_FORBIDDEN,
    not_found="Dados não encontrados na tabela AD para os customers fornecidos",
    fallback="Falha ao buscar dados da tabela AD",
)


def to_proxy_error(exc: VtexHttpError, messages: ErrorMessages) -> VtexProxyError:
    status = exc.status_code
    if status == 401:
        return VtexProxyError(401, TOKEN_EXPIRED, TOKEN_EXPIRED_DETAILS)
    if status == 403 and messages.forbidden:
        return VtexProxyError(403, messages.forbidden)
    if status == 404:
        return VtexProxyError(404, messages.not_found)
    return VtexProxyError(status or 500, f"{messages.fallback}: {status or NETWORK_ERROR}")
