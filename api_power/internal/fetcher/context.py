"""
Контекст одного запуска генерации
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Hashable, Optional

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class RunContext:
    """HTTP-клиент и кэш запросов, общие для всех задач одного запуска"""

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=timeout, follow_redirects=True)
        self._tasks: Dict[Hashable, asyncio.Task] = {}

    async def __aenter__(self) -> "RunContext":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def memoize(self, key: Hashable, factory: Callable[[], Awaitable[Any]]) -> Any:
        """
        Однократное выполнение запроса по ключу.

        Параллельные вызовы с одним ключом ждут одну и ту же задачу.
        """
        task = self._tasks.get(key)
        if task is None:
            logger.debug("Запрос %s", key)
            task = asyncio.ensure_future(factory())
            self._tasks[key] = task
        else:
            logger.debug("Из кэша %s", key)
        return await task

    async def aclose(self) -> None:
        pending = [task for task in self._tasks.values() if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._tasks.clear()
        if self._owns_client:
            await self.client.aclose()
