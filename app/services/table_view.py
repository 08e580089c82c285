# Copyright (c) 2025 Alexandre Tavares
# Licensed under the Creative Commons Attribution-NonCommercial 4.0 International (CC BY-NC 4.0)
# See the LICENSE file in the project root for more information.
from __future__ import annotations
import math
from typing import Any, Dict, List, Literal, Sequence, Tuple, TypeVar
from app.core.constants import CL_PRESENT
from app.schemas.vtex import OrderTableRow

"""
Visão de tabela: filtro CL, ordenação e paginação das linhas carregadas.


- Colunas ordenáveis identificadas pelo id camelCase (mesmo nome do JSON).
- Paginação por `page_index` (base 0) e `page_size` (padrão 10).
- `status_class()` sugere a cor do badge de status.
"""

RowT = TypeVar("RowT", bound=OrderTableRow)

DEFAULT_PAGE_SIZE = 10

SORTABLE_COLUMNS: Dict[str, str] = {
    "orderId": "order_id",
    "creationDate": "creation_date",
    "customerName": "customer_name",
    "email": "email",
    "document": "document",
    "phone": "phone",
    "deliveryAddress": "delivery_address",
    "totalValue": "total_value",
    "statusDescription": "status_description",
    "clStatus": "cl_status",
    "newsletterOptIn": "newsletter_opt_in",
}


def filter_in_cl(rows: Sequence[RowT]) -> List[RowT]:
    return [r for r in rows if r.cl_status == CL_PRESENT]


def _sort_key(value: Any) -> Tuple[int, Any]:
    # vazios/None sempre no fim (asc)
    if value is None or value == "":
        return (1, "")
    if isinstance(value, str):
        return (0, value.lower())
    return (0, value)


def sort_rows(rows: Sequence[RowT], sort_by: str | None, direction: Literal["asc", "desc"] = "asc") -> List[RowT]:
    if not sort_by:
        return list(rows)
    if sort_by not in SORTABLE_COLUMNS:
        raise ValueError(f"coluna não ordenável: {sort_by}")
    attr = SORTABLE_COLUMNS[sort_by]
    return sorted(rows, key=lambda r: _sort_key(getattr(r, attr)), reverse=(direction == "desc"))


def page_count(total: int, page_size: int) -> int:
    return math.ceil(total / page_size) if page_size > 0 else 0


def paginate(rows: Sequence[RowT], page_index: int = 0, page_size: int = DEFAULT_PAGE_SIZE) -> List[RowT]:
    start = max(page_index, 0) * page_size
    return list(rows[start:start + page_size])


def status_class(status: str | None) -> str:
    s = (status or "").lower()
    if "confirmado" in s:
        return "green"
    if "pendente" in s or "pending" in s:
        return "yellow"
    if "cancelado" in s or "cancelled" in s:
        return "red"
    if "entregue" in s or "delivered" in s:
        return "blue"
    return "gray"
