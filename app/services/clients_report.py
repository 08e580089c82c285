# Copyright (c) 2025 Alexandre Tavares
# Licensed under the Creative Commons Attribution-NonCommercial 4.0 International (CC BY-NC 4.0)
# See the LICENSE file in the project root for more information.
from __future__ import annotations
import logging
from typing import Any, Dict, List, Union
from app.clients.vtex import VtexClient, VtexHttpError
from app.core.constants import AD_ADDRESS_FIELDS

"""
Relatório "clientes com pedidos" (newsletter → endereço → pedidos faturados).


- Para cada cliente CL com newsletter ativo, valida endereço na AD (`customer = id`).
- Busca pedidos `Invoiced` do email; cliente sem endereço ou sem pedidos é ignorado.
- Falha da VTEX na AD/pedidos de um cliente só pula aquele cliente.
- Retorna uma linha por pedido, pronta para CSV.
"""

log = logging.getLogger("vtex.report")

REPORT_COLUMNS = [
    "ClienteID", "Nome", "Email", "Rua", "Cidade", "Estado",
    "PedidoID", "Status", "ValorTotal", "Data",
]


def _valor_total(value_cents: Any) -> Union[int, float]:
    """Centavos → reais; valor inteiro sai como int (100, não 100.0)."""
    value = value_cents or 0
    if value % 100 == 0:
        return int(value // 100)
    return value / 100


async def build_clients_report(client: VtexClient) -> List[Dict[str, Any]]:
    clientes = await client.search_clients({
        "_where": "isNewsletterOptIn=true",
        "_fields": "id,email,firstName,lastName",
    })

    linhas: List[Dict[str, Any]] = []
    for cliente in clientes:
        cliente_id = cliente.get("id")
        email = cliente.get("email")
        if not cliente_id or not email:
            continue

        try:
            enderecos = await client.search_addresses({
                "_where": f"customer={cliente_id}",
                "_fields": AD_ADDRESS_FIELDS,
            })
            if not enderecos:
                continue
            pedidos = await client.list_orders(f_status="Invoiced", f_client_email=email)
        except VtexHttpError as e:
            log.warning("clients_report_skip", extra={"client_id": cliente_id, "error": str(e)})
            continue

        lista = (pedidos or {}).get("list") or []
        if not lista:
            continue

        endereco = enderecos[0]
        for pedido in lista:
            linhas.append({
                "ClienteID": cliente_id,
                "Nome": f"{cliente.get('firstName') or ''} {cliente.get('lastName') or ''}",
                "Email": email,
                "Rua": endereco.get("street"),
                "Cidade": endereco.get("city"),
                "Estado": endereco.get("state"),
                "PedidoID": pedido.get("orderId"),
                "Status": pedido.get("status"),
                "ValorTotal": _valor_total(pedido.get("value")),
                "Data": pedido.get("creationDate"),
            })

    log.info("clients_report", extra={"clients": len(clientes), "rows": len(linhas)})
    return linhas
