# Copyright (c) 2025 Alexandre Tavares
# Licensed under the Creative Commons Attribution-NonCommercial 4.0 International (CC BY-NC 4.0)
# See the LICENSE file in the project root for more information.
from __future__ import annotations
import calendar
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

"""
Períodos de consulta (DateRange) e presets do filtro de datas.


- `DateRange(start_date, end_date)` com conversão para o formato ISO da VTEX.
- Presets: últimos 7/30 dias e 3/6/12 meses; padrão = últimos 30 dias.
- `resolve_date_range()` escolhe preset, intervalo explícito ou o padrão.
"""

_FRACTION = re.compile(r"\.(\d+)")
_DATE_ONLY = re.compile(r"^\d{4}-\d{2}-\d{2}$")


@dataclass(frozen=True)
class DateRange:
    start_date: datetime
    end_date: datetime

    def vtex_creation_filter(self) -> str:
        """Filtro `f_creationDate` do OMS."""
        return f"creationDate:[{to_vtex_iso(self.start_date)} TO {to_vtex_iso(self.end_date)}]"

    def as_dict(self) -> Dict[str, str]:
        return {"from": to_vtex_iso(self.start_date), "to": to_vtex_iso(self.end_date)}


def to_vtex_iso(value: datetime) -> str:
    """ISO UTC com milissegundos e sufixo Z (ex.: 2024-01-31T03:00:00.000Z)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    utc = value.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"


def parse_datetime(value: str) -> datetime:
    """Aceita `YYYY-MM-DD` ou ISO completo (com `Z` e fração de qualquer tamanho, como a VTEX envia)."""
    raw = value.strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    # fromisoformat do 3.10 só aceita 3 ou 6 casas
    raw = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), raw)
    parsed = datetime.fromisoformat(raw)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_end_datetime(value: str) -> datetime:
    """Como `parse_datetime`, mas `YYYY-MM-DD` vira o fim do dia (23:59:59.999)."""
    parsed = parse_datetime(value)
    if _DATE_ONLY.match(value.strip()):
        parsed = parsed.replace(hour=23, minute=59, second=59, microsecond=999000)
    return parsed


def sub_months(value: datetime, months: int) -> datetime:
    month_index = value.month - 1 - months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def _last_days(days: int) -> Callable[[datetime], DateRange]:
    return lambda now: DateRange(now - timedelta(days=days), now)


def _last_months(months: int) -> Callable[[datetime], DateRange]:
    return lambda now: DateRange(sub_months(now, months), now)


PRESETS: Dict[str, tuple[str, Callable[[datetime], DateRange]]] = {
    "7d": ("Últimos 7 dias", _last_days(7)),
    "30d": ("Últimos 30 dias", _last_days(30)),
    "3m": ("Últimos 3 meses", _last_months(3)),
    "6m": ("Últimos 6 meses", _last_months(6)),
    "12m": ("Últimos 12 meses", _last_months(12)),
}

DEFAULT_PRESET = "30d"


def preset_range(key: str, now: Optional[datetime] = None) -> DateRange:
    if key not in PRESETS:
        raise ValueError(f"unknown preset: {key}")
    now = now or datetime.now(timezone.utc)
    return PRESETS[key][1](now)


def list_presets(now: Optional[datetime] = None) -> List[Dict[str, str]]:
    now = now or datetime.now(timezone.utc)
    out: List[Dict[str, str]] = []
    for key, (label, build) in PRESETS.items():
        rng = build(now)
        out.append({
            "key": key,
            "label": label,
            "start_date": rng.start_date.date().isoformat(),
            "end_date": rng.end_date.date().isoformat(),
        })
    return out


def resolve_date_range(
    preset: Optional[str] = None,
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    *,
    now: Optional[datetime] = None,
) -> DateRange:
    """
    Precedência: preset > (date_from + date_to) > padrão (últimos 30 dias).
    Lança ValueError para preset desconhecido, datas inválidas ou início > fim.
    """
    if preset:
        return preset_range(preset, now)
    if date_from and date_to:
        start = parse_datetime(date_from)
        end = parse_end_datetime(date_to)
        if start > end:
            raise ValueError("date_from não pode ser maior que date_to")
        return DateRange(start, end)
    return preset_range(DEFAULT_PRESET, now)


def optional_date_range(date_from: Optional[str], date_to: Optional[str]) -> Optional[DateRange]:
    """Só cria o filtro quando as duas pontas foram informadas."""
    if date_from and date_to:
        return DateRange(parse_datetime(date_from), parse_end_datetime(date_to))
    return None
