# Copyright (c) 2025 Alexandre Tavares
# Licensed under the Creative Commons Attribution-NonCommercial 4.0 International (CC BY-NC 4.0)
# See the LICENSE file in the project root for more information.
from __future__ import annotations
import logging
import re
from typing import Any, Dict, Mapping, Optional

"""
Limpeza e formatação de identificadores vindos da VTEX.


- Remove máscaras/caracteres especiais de email, telefone, documento e nome.
- Descarta emails internos da VTEX (`@vtex.com.br`, `@ct.vtex.com.br`, hashes).
- Formata CPF/CNPJ e telefones brasileiros para exibição/exportação.
"""

log = logging.getLogger("vtex.cleaner")

# ex.: lu_bellevicari@hotmail.com-253800444819b.ct.vtex.com.br
_VTEX_MASKED_EMAIL = re.compile(r"^(.+@[^-]+)-(\d+[a-z]?\.ct\.vtex\.com\.br)$")
_HEX_HASH = re.compile(r"^[a-f0-9]{32}$")
_EMAIL = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_VTEX_DOMAINS = ("@vtex.com.br", "@ct.vtex.com.br")


def _is_vtex_domain(email: str) -> bool:
    return any(domain in email for domain in _VTEX_DOMAINS)


def clean_email(email: Optional[str]) -> str:
    """
    Limpa email removendo máscaras da VTEX.
    Retorna "" para emails inválidos ou internos da VTEX.
    """
    if not email:
        return ""

    cleaned = email.strip()

    match = _VTEX_MASKED_EMAIL.match(cleaned)
    if match:
        cleaned = match.group(1)
        log.debug("Email VTEX detectado: %r -> extraído: %r", email, cleaned)

    if cleaned.endswith("@ct.vtex.com.br"):
        local_part = cleaned.split("@")[0]
        if _HEX_HASH.match(local_part):
            log.warning("Email VTEX interno detectado (hash): %r", email)
            return ""

    # máscaras como [email], <email>, "email"
    cleaned = re.sub(r'^[\[<"]+', "", cleaned)
    cleaned = re.sub(r'[\]>"]+$', "", cleaned)
    cleaned = re.sub(r"\s+", " ", cleaned)
    cleaned = re.sub(r"[^a-zA-Z0-9@._-]", "", cleaned)

    if not _EMAIL.match(cleaned):
        log.warning("Email inválido detectado: %r -> %r", email, cleaned)
        return ""

    if _is_vtex_domain(cleaned):
        log.warning("Email VTEX interno detectado: %r", email)
        return ""

    return cleaned


def is_valid_email(email: Optional[str]) -> bool:
    if not email:
        return False
    return bool(_EMAIL.match(email)) and not _is_vtex_domain(email)


def clean_phone(phone: Optional[str]) -> str:
    """Só dígitos, mantendo o `+` inicial (código do país)."""
    if not phone:
        return ""
    cleaned = phone.strip()
    if cleaned.startswith("+"):
        return "+" + re.sub(r"\D", "", cleaned[1:])
    return re.sub(r"\D", "", cleaned)


def clean_document(document: Optional[str]) -> str:
    """CPF/CNPJ sem máscara (só alfanuméricos)."""
    if not document:
        return ""
    cleaned = re.sub(r"[^a-zA-Z0-9]", "", document).strip()
    log.debug("Limpando documento: %r -> %r", document, cleaned)
    return cleaned


def clean_name(name: Optional[str]) -> str:
    if not name:
        return ""
    cleaned = re.sub(r"\s+", " ", name.strip())
    # mantém letras (unicode), números e espaços
    cleaned = re.sub(r"[^\w\s]|_", "", cleaned)
    return cleaned.strip()


def format_document(document: Optional[str]) -> str:
    if not document:
        return ""
    doc = clean_document(document)
    if len(doc) == 11:
        return re.sub(r"(\d{3})(\d{3})(\d{3})(\d{2})", r"\1.\2.\3-\4", doc)
    if len(doc) == 14:
        return re.sub(r"(\d{2})(\d{3})(\d{3})(\d{4})(\d{2})", r"\1.\2.\3/\4-\5", doc)
    return doc


def format_phone(phone: Optional[str]) -> str:
    if not phone:
        return ""
    cleaned = clean_phone(phone)
    if cleaned.startswith("+55") and len(cleaned) == 14:
        return re.sub(r"(\+55)(\d{2})(\d{5})(\d{4})", r"\1 (\2) \3-\4", cleaned)
    if len(cleaned) == 11:
        return re.sub(r"(\d{2})(\d{5})(\d{4})", r"(\1) \2-\3", cleaned)
    if len(cleaned) == 10:
        return re.sub(r"(\d{2})(\d{4})(\d{4})", r"(\1) \2-\3", cleaned)
    return cleaned


def clean_order_data(order_data: Mapping[str, Any]) -> Dict[str, Any]:
    """Aplica os limpadores aos campos de uma linha (chaves camelCase)."""
    return {
        **order_data,
        "customerName": clean_name(str(order_data.get("customerName") or "")),
        "email": clean_email(str(order_data.get("email") or "")),
        "document": clean_document(str(order_data.get("document") or "")),
        "phone": clean_phone(str(order_data.get("phone") or "")),
    }
