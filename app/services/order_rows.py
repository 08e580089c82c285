# Copyright (c) 2025 Alexandre Tavares
# Licensed under the Creative Commons Attribution-NonCommercial 4.0 International (CC BY-NC 4.0)
# See the LICENSE file in the project root for more information.
from __future__ import annotations
from typing import Optional
from app.core.constants import CL_ABSENT, CL_PRESENT
from app.schemas.vtex import (
    Address, ADData, NewsletterClientOrder, Order, OrderTableRow, VtexClientRecord,
)
from app.utils.data_cleaner import clean_document, clean_email, clean_name, clean_phone

"""
Conversão de pedidos VTEX para linhas da tabela.


- `format_address()` junta as partes não vazias do endereço de entrega.
- `convert_to_table_row()` limpa nome/email/documento/telefone; status CL opcional.
- `newsletter_placeholder_row()` representa cliente newsletter sem pedidos no período.
"""


def format_address(address: Optional[Address]) -> str:
    if address is None:
        return ""
    parts = [
        address.street,
        address.number,
        address.complement,
        address.neighborhood,
        address.city,
        address.state,
        address.postal_code,
    ]
    return ", ".join(p for p in parts if p)


def convert_to_table_row(order: Order, client: Optional[VtexClientRecord] = None) -> OrderTableRow:
    """
    Sem `client` a linha fica "Ausente na CL" e newsletter=False;
    com `client` (encontrado na CL) usa o opt-in do registro.
    """
    profile = order.client_profile_data
    shipping = order.shipping_data

    first = (profile.first_name if profile else None) or ""
    last = (profile.last_name if profile else None) or ""

    return OrderTableRow(
        order_id=order.order_id,
        creation_date=order.creation_date,
        customer_name=clean_name(f"{first} {last}"),
        email=clean_email(profile.email if profile else None),
        document=clean_document(profile.document if profile else None),
        phone=clean_phone(profile.phone if profile else None),
        delivery_address=format_address(shipping.address if shipping else None),
        total_value=order.value,
        currency_code=order.currency_code,
        status=order.status,
        status_description=order.status_description,
        cl_status=CL_PRESENT if client else CL_ABSENT,
        newsletter_opt_in=bool(client.is_newsletter_opt_in) if client else False,
    )


def newsletter_placeholder_row(client: VtexClientRecord, ad_data: Optional[ADData]) -> NewsletterClientOrder:
    address = ""
    if ad_data and ad_data.additional_data:
        address = str(ad_data.additional_data.get("address") or "")

    return NewsletterClientOrder(
        customer_name=f"{client.first_name or ''} {client.last_name or ''}",
        email=client.email or "",
        document=client.document or "",
        delivery_address=address,
        total_value=0,
        cl_status=CL_PRESENT,
        newsletter_opt_in=client.is_newsletter_opt_in,
        client_newsletter_status=True,
        ad_data=ad_data,
    )
