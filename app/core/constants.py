# Copyright (c) 2025 Alexandre Tavares
# Licensed under the Creative Commons Attribution-NonCommercial 4.0 International (CC BY-NC 4.0)
# See the LICENSE file in the project root for more information.
from __future__ import annotations
from app.core.config import settings

"""
Constantes de domínio e limites da carga de pedidos.


- Rótulos de status na CL e status de pedido considerados finalizados.
- Campos padrão pedidos às Data Entities (CL / AD).
- `is_limit_reached()` / `get_limit_message()` para o aviso de limite.
"""

CL_PRESENT = "Está na CL"
CL_ABSENT = "Ausente na CL"

# status finalizado: invoiced, delivered, complete (inglês/português)
FINISHED_STATUSES = frozenset({
    "invoiced", "delivered", "complete",
    "faturado", "entregue", "completo",
})

CL_FIELDS = "id,firstName,lastName,email,document,isNewsletterOptIn"
CL_NEWSLETTER_FIELDS = "id,firstName,lastName,email,document,isNewsletterOptIn,createdIn"
AD_FIELDS = "id,customer,email,additionalData"
AD_ADDRESS_FIELDS = "street,city,state"

NEWSLETTER_ORDERS_PER_PAGE = 100


def is_limit_reached(current_count: int, max_orders: int | None = None) -> bool:
    limit = settings.MAX_ORDERS if max_orders is None else max_orders
    return current_count >= limit


def get_limit_message(current_count: int, max_orders: int | None = None) -> str:
    limit = settings.MAX_ORDERS if max_orders is None else max_orders
    if is_limit_reached(current_count, limit):
        return f"⚠️ Limite de {limit} pedidos atingido. Reduza o período para ver mais pedidos."
    return ""
