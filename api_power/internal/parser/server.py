"""
Локальный сервер, отдающий данные адаптера в формате YApi
"""

import logging
from typing import Any, Dict, List, Optional

from aiohttp import web

logger = logging.getLogger(__name__)

LOCAL_HOST = "127.0.0.1"


class CanonicalData:
    """Проект, категории и интерфейсы в формате YApi"""

    def __init__(
        self,
        project: Dict[str, Any],
        cats: List[Dict[str, Any]],
        interfaces: List[Dict[str, Any]],
    ):
        self.project = project
        self.cats = cats
        self.interfaces = interfaces

    def export(self) -> List[Dict[str, Any]]:
        return [
            {
                **cat,
                "list": [item for item in self.interfaces if item["catid"] == cat["_id"]],
            }
            for cat in self.cats
        ]


class CanonicalServer:
    """
    Сервер на время одного запуска: /api/project/get,
    /api/interface/getCatMenu и /api/plugin/export
    """

    def __init__(self, data: CanonicalData, host: str = LOCAL_HOST, port: int = 0):
        self.data = data
        self.host = host
        self.port = port
        self._runner: Optional[web.AppRunner] = None

    def _create_app(self) -> web.Application:
        app = web.Application()
        app.router.add_get("/api/project/get", self._project)
        app.router.add_get("/api/interface/getCatMenu", self._cat_menu)
        app.router.add_get("/api/plugin/export", self._export)
        return app

    async def _project(self, request: web.Request) -> web.Response:
        return web.json_response({"errcode": 0, "errmsg": "成功！", "data": self.data.project})

    async def _cat_menu(self, request: web.Request) -> web.Response:
        return web.json_response({"errcode": 0, "errmsg": "成功！", "data": self.data.cats})

    async def _export(self, request: web.Request) -> web.Response:
        return web.json_response(self.data.export())

    @property
    def url(self) -> str:
        return f"http://{self.host}:{self.port}"

    async def start(self) -> str:
        """Запуск сервера, возвращает его базовый адрес"""
        self._runner = web.AppRunner(self._create_app())
        await self._runner.setup()
        site = web.TCPSite(self._runner, self.host, self.port)
        await site.start()
        # При port=0 система выбирает свободный порт
        self.port = self._runner.addresses[0][1]
        logger.debug("Локальный сервер запущен: %s", self.url)
        return self.url

    async def stop(self) -> None:
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None
            logger.debug("Локальный сервер остановлен: %s", self.url)
