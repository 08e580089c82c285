# Copyright (c) 2025 Alexandre Tavares
# Licensed under the Creative Commons Attribution-NonCommercial 4.0 International (CC BY-NC 4.0)
# See the LICENSE file in the project root for more information.
from __future__ import annotations
import csv
import logging
from datetime import datetime
from io import BytesIO
from typing import Any, Dict, Iterable, List, Optional, Sequence
from zoneinfo import ZoneInfo
import pandas as pd
from openpyxl.utils import get_column_letter
from app.core.config import settings
from app.schemas.vtex import OrderTableRow
from app.utils.data_cleaner import format_document, format_phone
from app.utils.date_range import parse_datetime

"""
Exportação da tabela de pedidos (Excel/CSV).


- Layout fixo de colunas (nome + largura) na aba "Pedidos".
- Datas em `dd/MM/yyyy HH:mm` no fuso EXPORT_TIMEZONE; valores em R$ (centavos / 100).
- `export_to_excel()` → bytes .xlsx (pandas + openpyxl); `export_to_csv()` → texto, dados entre aspas.
- Falhas viram `ExportError`.
"""

log = logging.getLogger("export")

SHEET_NAME = "Pedidos"

EXPORT_COLUMNS: List[tuple[str, int]] = [
    ("ID do Pedido", 15),
    ("Data de Criação", 20),
    ("Nome do Cliente", 25),
    ("Email", 30),
    ("Documento", 15),
    ("Telefone", 15),
    ("Endereço de Entrega", 40),
    ("Valor Total", 15),
    ("Status", 20),
    ("Status CL", 15),
    ("Newsletter", 12),
]

_CURRENCY_SYMBOLS = {"BRL": "R$", "USD": "US$", "EUR": "€"}


class ExportError(RuntimeError):
    """Falha ao gerar o arquivo de exportação."""


def format_currency(value: Optional[float], currency_code: Optional[str] = "BRL") -> str:
    """Valor VTEX (centavos) no padrão pt-BR, ex.: 123456 → "R$ 1.234,56"."""
    amount = (value or 0) / 100
    symbol = _CURRENCY_SYMBOLS.get(currency_code or "BRL", currency_code or "R$")
    digits = f"{abs(amount):,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol} {digits}"


def format_creation_date(value: Optional[str], tz_name: Optional[str] = None) -> str:
    if not value:
        return ""
    try:
        parsed = parse_datetime(value)
    except ValueError:
        log.warning("invalid_creation_date", extra={"value": value})
        return value
    return parsed.astimezone(ZoneInfo(tz_name or settings.EXPORT_TIMEZONE)).strftime("%d/%m/%Y %H:%M")


def build_export_records(rows: Iterable[OrderTableRow], tz_name: Optional[str] = None) -> List[Dict[str, Any]]:
    records: List[Dict[str, Any]] = []
    for row in rows:
        records.append({
            "ID do Pedido": row.order_id,
            "Data de Criação": format_creation_date(row.creation_date, tz_name),
            "Nome do Cliente": row.customer_name,
            "Email": row.email,
            "Documento": format_document(row.document),
            "Telefone": format_phone(row.phone),
            "Endereço de Entrega": row.delivery_address,
            "Valor Total": format_currency(row.total_value, row.currency_code),
            "Status": row.status_description,
            "Status CL": row.cl_status,
            "Newsletter": "Sim" if row.newsletter_opt_in else "Não",
        })
    return records


def default_filename(extension: str, now: Optional[datetime] = None) -> str:
    stamp = (now or datetime.now()).strftime("%Y-%m-%d_%H-%M-%S")
    return f"pedidos_vtex_{stamp}.{extension}"


def export_to_excel(rows: Sequence[OrderTableRow], tz_name: Optional[str] = None) -> bytes:
    try:
        columns = [name for name, _ in EXPORT_COLUMNS]
        df = pd.DataFrame(build_export_records(rows, tz_name), columns=columns)

        buffer = BytesIO()
        with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
            df.to_excel(writer, sheet_name=SHEET_NAME, index=False)
            sheet = writer.sheets[SHEET_NAME]
            for idx, (_, width) in enumerate(EXPORT_COLUMNS, start=1):
                sheet.column_dimensions[get_column_letter(idx)].width = width

        log.info("excel_exported", extra={"rows": len(df)})
        return buffer.getvalue()
    except Exception as e:
        log.error("excel_export_failed", extra={"error": str(e)})
        raise ExportError("Falha ao exportar dados para Excel") from e


def export_to_csv(rows: Sequence[OrderTableRow], tz_name: Optional[str] = None) -> str:
    try:
        records = build_export_records(rows, tz_name)
        if not records:
            return ""
        columns = [name for name, _ in EXPORT_COLUMNS]
        df = pd.DataFrame(records, columns=columns)
        # cabeçalho sem aspas; células de dados sempre entre aspas
        body = df.to_csv(index=False, header=False, quoting=csv.QUOTE_ALL, lineterminator="\n")
        log.info("csv_exported", extra={"rows": len(df)})
        return f"{','.join(columns)}\n{body}".rstrip("\n")
    except Exception as e:
        log.error("csv_export_failed", extra={"error": str(e)})
        raise ExportError("Falha ao exportar dados para CSV") from e


def records_to_csv(records: Sequence[Dict[str, Any]], columns: Sequence[str]) -> str:
    """
    CSV de relatório: cabeçalho e textos entre aspas, números sem aspas.
    `dtype=object` preserva int e float lado a lado na mesma coluna.
    """
    df = pd.DataFrame(list(records), columns=list(columns), dtype=object)
    return df.to_csv(index=False, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
