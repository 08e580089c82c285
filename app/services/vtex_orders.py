# Copyright (c) 2025 Alexandre Tavares
# Licensed under the Creative Commons Attribution-NonCommercial 4.0 International (CC BY-NC 4.0)
# See the LICENSE file in the project root for more information.
from __future__ import annotations
import logging
import re
from typing import Dict, List, Optional, Sequence, Union
from pydantic import ValidationError
from app.clients.vtex import VtexClient, VtexHttpError
from app.core.config import settings
from app.core.constants import (
    CL_FIELDS, CL_NEWSLETTER_FIELDS, AD_FIELDS, FINISHED_STATUSES, NEWSLETTER_ORDERS_PER_PAGE,
)
from app.schemas.vtex import (
    ADData, NewsletterClientOrder, Order, OrdersResponse, OrderTableRow, VtexClientRecord,
)
from app.services.order_rows import convert_to_table_row, newsletter_placeholder_row
from app.utils.data_cleaner import clean_document, clean_email, is_valid_email
from app.utils.date_range import DateRange
from app.utils.request_queue import RequestQueue

"""
Serviço de agregação e cruzamento Pedidos x CL x AD.


- Busca pedidos (OMS) paginados e detalhes via fila com intervalo fixo.
- Cruza pedido → cliente CL por email (válido) e, em fallback, por documento (com/sem máscara).
- Fluxo newsletter: CL (opt-in) → AD (por email) → pedidos finalizados do período.
- Erros de busca na CL/AD são logados e viram "não encontrado"; erros do OMS propagam.
"""

log = logging.getLogger("vtex.service")

_NON_DIGIT = re.compile(r"\D")


def _digits(value: str) -> str:
    return _NON_DIGIT.sub("", value)


def is_finished(order: Order) -> bool:
    return (order.status or "").lower() in FINISHED_STATUSES


class VtexOrderService:
    def __init__(
        self,
        client: VtexClient,
        *,
        details_interval_ms: Optional[int] = None,
        details_queue: Optional[RequestQueue] = None,
        per_page: Optional[int] = None,
        max_orders: Optional[int] = None,
        max_pages: Optional[int] = None,
    ) -> None:
        self.client = client
        if details_queue is None:
            interval = settings.ORDER_DETAILS_INTERVAL_MS if details_interval_ms is None else details_interval_ms
            details_queue = RequestQueue(interval)
        self.details_queue = details_queue
        self.per_page = per_page if per_page is not None else settings.PER_PAGE
        self.max_orders = max_orders if max_orders is not None else settings.MAX_ORDERS
        self.max_pages = max_pages if max_pages is not None else settings.MAX_PAGES

    # Pedidos
    async def get_orders(
        self,
        page: int = 1,
        per_page: int = 100,
        date_range: Optional[DateRange] = None,
    ) -> OrdersResponse:
        raw = await self.client.list_orders(
            page,
            per_page,
            f_creation_date=date_range.vtex_creation_filter() if date_range else None,
        )
        return OrdersResponse.model_validate(raw or {})

    async def get_order_details(self, order_id: str) -> Order:
        raw = await self.details_queue.add(lambda: self.client.get_order(order_id))
        return Order.model_validate(raw)

    async def get_orders_by_email(
        self,
        email: str,
        date_range: Optional[DateRange] = None,
        page: int = 1,
        per_page: int = 100,
    ) -> OrdersResponse:
        raw = await self.client.list_orders(
            page,
            per_page,
            f_client_email=email.strip().lower(),
            f_creation_date=date_range.vtex_creation_filter() if date_range else None,
        )
        log.info("orders_by_email", extra={"email": email, "count": len((raw or {}).get("list") or [])})
        return OrdersResponse.model_validate(raw or {})

    # Clientes (CL)
    async def get_client_from_data_entities_by_email(self, email: str) -> Optional[VtexClientRecord]:
        if not email:
            return None
        wanted = email.strip().lower()
        try:
            records = await self.client.search_clients({"email": wanted, "_fields": CL_FIELDS})
        except VtexHttpError as e:
            log.error("cl_lookup_failed", extra={"email": email, "error": str(e)})
            return None

        for rec in records:
            candidate = rec.get("email") if isinstance(rec, dict) else None
            if isinstance(candidate, str) and candidate.strip().lower() == wanted:
                return VtexClientRecord.model_validate(rec)

        log.info("cl_not_found_by_email", extra={"email": email})
        return None

    async def _search_document(self, document: str) -> Optional[VtexClientRecord]:
        records = await self.client.search_clients({"document": document.strip(), "_fields": CL_FIELDS})
        wanted = _digits(document)
        for rec in records:
            candidate = rec.get("document") if isinstance(rec, dict) else None
            if isinstance(candidate, str) and _digits(candidate) == wanted:
                return VtexClientRecord.model_validate(rec)
        return None

    async def get_client_from_data_entities_by_document(self, document: str) -> Optional[VtexClientRecord]:
        """
        Tenta primeiro o documento como veio (se tiver máscara) e depois só os dígitos.
        """
        if not document:
            return None
        candidates = [document] if re.search(r"\D", document) else []
        candidates.append(_digits(document))
        try:
            for candidate in dict.fromkeys(c for c in candidates if c):
                found = await self._search_document(candidate)
                if found:
                    return found
        except VtexHttpError as e:
            log.error("cl_lookup_failed", extra={"document": document, "error": str(e)})
            return None

        log.info("cl_not_found_by_document", extra={"document": document})
        return None

    async def get_client_from_data_entities(
        self,
        email: str,
        document: Optional[str] = None,
    ) -> Optional[VtexClientRecord]:
        if email and is_valid_email(email):
            found = await self.get_client_from_data_entities_by_email(email)
            if found:
                return found
        if document:
            return await self.get_client_from_data_entities_by_document(document)
        return None

    async def convert_to_table_row_with_cl_status(self, order: Order) -> OrderTableRow:
        profile = order.client_profile_data
        email = clean_email(profile.email if profile else None)
        document = clean_document(profile.document if profile else None)

        client = await self.get_client_from_data_entities(email, document)
        log.debug(
            "order_cl_status",
            extra={"order_id": order.order_id, "email": email, "found": client is not None},
        )
        return convert_to_table_row(order, client)

    async def get_orders_with_details(
        self,
        page: int = 1,
        per_page: int = 100,
        date_range: Optional[DateRange] = None,
    ) -> List[OrderTableRow]:
        listing = await self.get_orders(page, per_page, date_range)
        rows: List[OrderTableRow] = []
        for order in listing.orders:
            try:
                details = await self.get_order_details(order.order_id)
            except (VtexHttpError, ValidationError) as e:
                log.warning("order_details_failed", extra={"order_id": order.order_id, "error": str(e)})
                details = order
            rows.append(await self.convert_to_table_row_with_cl_status(details))
        return rows

    async def load_orders(self, date_range: Optional[DateRange] = None) -> List[OrderTableRow]:
        """
        Carrega páginas de `per_page` até página vazia/incompleta, `max_orders` ou `max_pages`.
        """
        all_rows: List[OrderTableRow] = []
        page = 1
        while len(all_rows) < self.max_orders and page <= self.max_pages:
            log.info("load_orders_page", extra={"page": page, "loaded": len(all_rows)})
            rows = await self.get_orders_with_details(page, self.per_page, date_range)
            if not rows:
                break
            all_rows.extend(rows)
            if len(rows) < self.per_page:
                break
            page += 1

        if len(all_rows) >= self.max_orders:
            log.warning("orders_limit_reached", extra={"max_orders": self.max_orders})
        return all_rows

    # Newsletter (CL) e endereços (AD)
    async def get_newsletter_clients(
        self,
        page: int = 1,
        page_size: int = 100,
        date_range: Optional[DateRange] = None,
    ) -> List[VtexClientRecord]:
        # a busca na CL não filtra por data de criação; o período vale para os pedidos
        start = (max(page, 1) - 1) * page_size
        try:
            records = await self.client.search_clients(
                {"_fields": CL_NEWSLETTER_FIELDS, "isNewsletterOptIn": "true"},
                rest_range=(start, start + page_size - 1),
            )
        except VtexHttpError as e:
            log.error("newsletter_clients_failed", extra={"page": page, "error": str(e)})
            return []
        clients = [VtexClientRecord.model_validate(r) for r in records if isinstance(r, dict)]
        log.info("newsletter_clients", extra={"page": page, "count": len(clients)})
        return clients

    async def get_ad_data(self, customers: Union[str, Sequence[str]]) -> List[ADData]:
        keys = [customers] if isinstance(customers, str) else list(customers)
        keys = [k.strip() for k in keys if k and k.strip()]
        if not keys:
            return []
        try:
            records = await self.client.search_addresses({"_fields": AD_FIELDS, "customer": ",".join(keys)})
        except VtexHttpError as e:
            log.error("ad_data_failed", extra={"customers": len(keys), "error": str(e)})
            return []
        return [ADData.model_validate(r) for r in records if isinstance(r, dict)]

    async def _finished_orders(self, date_range: Optional[DateRange]) -> List[Order]:
        orders: List[Order] = []
        page = 1
        while page <= self.max_pages:
            resp = await self.get_orders(page, NEWSLETTER_ORDERS_PER_PAGE, date_range)
            orders.extend(o for o in resp.orders if is_finished(o))
            if len(resp.orders) < NEWSLETTER_ORDERS_PER_PAGE:
                break
            page += 1
        return orders

    async def get_newsletter_client_orders(
        self,
        date_range: Optional[DateRange] = None,
        page: int = 1,
        page_size: int = 100,
    ) -> List[NewsletterClientOrder]:
        """
        CL (newsletter ativo) → AD (por email) → pedidos finalizados do período.

        Cliente sem pedidos no período gera uma linha "placeholder" (sem pedido).
        """
        clients = await self.get_newsletter_clients(page, page_size, date_range)
        if not clients:
            return []

        emails = [c.email for c in clients if c.email]
        ad_by_customer: Dict[str, ADData] = {}
        for ad in await self.get_ad_data(emails):
            if ad.customer:
                ad_by_customer[ad.customer.strip().lower()] = ad

        finished = await self._finished_orders(date_range)

        result: List[NewsletterClientOrder] = []
        for client in clients:
            client_email = (client.email or "").strip().lower()
            ad_data = ad_by_customer.get(client_email)
            client_orders = [
                o for o in finished
                if o.client_profile_data
                and (o.client_profile_data.email or "").strip().lower() == client_email
            ]

            if not client_orders:
                result.append(newsletter_placeholder_row(client, ad_data))
                continue

            for order in client_orders:
                try:
                    details = await self.get_order_details(order.order_id)
                except (VtexHttpError, ValidationError) as e:
                    log.warning("order_details_failed", extra={"order_id": order.order_id, "error": str(e)})
                    details = order
                base = await self.convert_to_table_row_with_cl_status(details)
                result.append(NewsletterClientOrder(
                    **base.model_dump(),
                    client_newsletter_status=True,
                    ad_data=ad_data,
                ))

        log.info("newsletter_client_orders", extra={"clients": len(clients), "rows": len(result)})
        return result
