# Copyright (c) 2025 Alexandre Tavares
# Licensed under the Creative Commons Attribution-NonCommercial 4.0 International (CC BY-NC 4.0)
# See the LICENSE file in the project root for more information.
from time import perf_counter
from fastapi import APIRouter, Depends, HTTPException
from app.api.deps import get_vtex_client
from app.clients.vtex import VtexClient, VtexHttpError

"""
Diagnóstico da conexão com a VTEX.


- `GET /vtex` consulta 1 pedido no OMS e mede latência.
- Retorna conta/ambiente e total de pedidos; cookie expirado ou rede fora viram 503.
"""

router = APIRouter(tags=["Health"])

@router.get("/vtex")
async def health_vtex(client: VtexClient = Depends(get_vtex_client)):
    """
    Verifica credenciais/conectividade com o OMS e retorna alguns metadados úteis.
    """
    try:
        t0 = perf_counter()
        data = await client.list_orders(1, 1)
        latency_ms = (perf_counter() - t0) * 1000.0

        return {
            "vtex": "ok",
            "latency_ms": round(latency_ms, 2),
            "account": client.account,
            "environment": client.environment,
            "orders_total": ((data or {}).get("paging") or {}).get("total"),
        }
    except VtexHttpError as e:
        raise HTTPException(
            status_code=503,
            detail={"vtex": "error", "status": e.status_code, "message": str(e)},
        )
