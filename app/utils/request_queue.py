# Copyright (c) 2025 Alexandre Tavares
# Licensed under the Creative Commons Attribution-NonCommercial 4.0 International (CC BY-NC 4.0)
# See the LICENSE file in the project root for more information.
from __future__ import annotations
import asyncio
from collections import deque
from typing import Any, Awaitable, Callable, Deque, Optional, Set, Tuple, TypeVar

"""
Fila de requisições com intervalo fixo (throttle simples).


- `RequestQueue(interval_ms).add(fn)` agenda a corrotina e devolve o resultado dela.
- Um job pendente é iniciado a cada `interval_ms`; a drenagem para quando a fila esvazia.
- Sem backpressure, sem prioridade, sem cancelamento.
"""

T = TypeVar("T")


class RequestQueue:
    def __init__(self, interval_ms: int):
        self.interval = max(interval_ms, 0) / 1000.0
        self._queue: Deque[Tuple[Callable[[], Awaitable[Any]], asyncio.Future]] = deque()
        self._worker: Optional[asyncio.Task] = None
        self._running: Set[asyncio.Task] = set()

    def __len__(self) -> int:
        return len(self._queue)

    @property
    def is_processing(self) -> bool:
        return self._worker is not None and not self._worker.done()

    async def add(self, fn: Callable[[], Awaitable[T]]) -> T:
        future: asyncio.Future = asyncio.get_running_loop().create_future()
        self._queue.append((fn, future))
        self._process()
        return await future

    def _process(self) -> None:
        if not self._queue:
            return
        # worker preso a um loop anterior (ex.: outro TestClient) é descartado
        if self.is_processing and self._worker.get_loop() is asyncio.get_running_loop():
            return
        self._worker = asyncio.create_task(self._drain())

    async def _drain(self) -> None:
        while self._queue:
            await asyncio.sleep(self.interval)
            fn, future = self._queue.popleft()
            # o job roda em paralelo; o próximo sai no próximo tick
            task = asyncio.create_task(self._run(fn, future))
            self._running.add(task)
            task.add_done_callback(self._running.discard)

    @staticmethod
    async def _run(fn: Callable[[], Awaitable[Any]], future: asyncio.Future) -> None:
        try:
            result = await fn()
        except Exception as exc:
            if not future.done():
                future.set_exception(exc)
            return
        if not future.done():
            future.set_result(result)
