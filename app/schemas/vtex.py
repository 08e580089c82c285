# Copyright (c) 2025 Alexandre Tavares
# Licensed under the Creative Commons Attribution-NonCommercial 4.0 International (CC BY-NC 4.0)
# See the LICENSE file in the project root for more information.
from __future__ import annotations
from typing import Any, Dict, List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

"""
Schemas (pydantic) dos recursos VTEX e das linhas da tabela.


- Campos em snake_case com alias camelCase (formato da VTEX e da resposta JSON).
- `extra="allow"` preserva campos não mapeados do provider.
- `OrderTableRow` / `NewsletterClientOrder` são as linhas exibidas e exportadas.
"""


class VtexModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


# Pedidos (OMS)
class ClientProfileData(VtexModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    document: Optional[str] = None
    phone: Optional[str] = None


class Address(VtexModel):
    address_name: Optional[str] = None
    street: Optional[str] = None
    number: Optional[str] = None
    complement: Optional[str] = None
    neighborhood: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None


class ShippingData(VtexModel):
    address: Optional[Address] = None


class OrderItem(VtexModel):
    id: Optional[str] = None
    name: Optional[str] = None
    quantity: Optional[int] = None
    price: Optional[float] = None


class Order(VtexModel):
    order_id: str
    creation_date: str = ""
    client_profile_data: Optional[ClientProfileData] = None
    shipping_data: Optional[ShippingData] = None
    value: float = 0
    currency_code: str = "BRL"
    status: str = ""
    status_description: str = ""
    items: Optional[List[OrderItem]] = None


class Paging(VtexModel):
    total: int = 0
    pages: int = 0
    current_page: int = 1
    per_page: int = 0


class OrdersResponse(VtexModel):
    orders: List[Order] = Field(default_factory=list, alias="list")
    paging: Paging = Field(default_factory=Paging)


# Data Entities
class VtexClientRecord(VtexModel):
    """Registro da entidade CL."""
    id: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    document: Optional[str] = None
    is_newsletter_opt_in: Optional[bool] = None


class ADData(VtexModel):
    """Registro da entidade AD (endereços); `customer` cruza com a CL."""
    id: Optional[str] = None
    customer: Optional[str] = None
    email: Optional[str] = None
    additional_data: Optional[Dict[str, Any]] = None
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None


# Linhas da tabela
CLStatus = Literal["Está na CL", "Ausente na CL"]


class OrderTableRow(VtexModel):
    order_id: str = ""
    creation_date: str = ""
    customer_name: str = ""
    email: str = ""
    document: str = ""
    phone: str = ""
    delivery_address: str = ""
    total_value: float = 0
    currency_code: str = ""
    status: str = ""
    status_description: str = ""
    cl_status: CLStatus = "Ausente na CL"
    newsletter_opt_in: Optional[bool] = False


class NewsletterClientOrder(OrderTableRow):
    client_newsletter_status: bool = True
    ad_data: Optional[ADData] = None


class NewsletterOrdersOut(VtexModel):
    orders: List[NewsletterClientOrder]
    total: int
    page: int
    page_size: int
    date_range: Optional[Dict[str, str]] = None


class OrdersPageOut(BaseModel):
    mode: Literal["all", "newsletter"]
    rows: List[Dict[str, Any]]
    total: int
    loaded: int
    page_index: int
    page_size: int
    page_count: int
    date_range: Dict[str, str]
    limit_message: str = ""
    ad_matches: Optional[int] = None
