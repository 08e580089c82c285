# Copyright (c) 2025 Alexandre Tavares
# Licensed under the Creative Commons Attribution-NonCommercial 4.0 International (CC BY-NC 4.0)
# See the LICENSE file in the project root for more information.
import logging
from app.core.config import settings

"""
Configuração de logging da aplicação (stdlib `logging`).


- `setup_logging()` define nível (LOG_LEVEL) e formato único com timestamp.
- Idempotente: não duplica handlers se chamado mais de uma vez.
"""

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str | None = None) -> logging.Logger:
    root = logging.getLogger()
    root.setLevel((level or settings.LOG_LEVEL).upper())

    if not any(getattr(h, "_vtex_dashboard", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT))
        handler._vtex_dashboard = True  # type: ignore[attr-defined]
        root.addHandler(handler)

    return logging.getLogger("vtex")
