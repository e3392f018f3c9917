"""
Главный модуль генератора - чистый интерфейс
"""

import logging
import os
from typing import Dict, List, Optional, Union

from .config import ApiPowerConfig, ServerConfig, SyntheticalConfig
from .exceptions import ConfigError
from .internal.fetcher import RunContext
from .internal.generator.planner import OutputPlanner
from .internal.generator.strategies import load_strategy
from .internal.generator.writer import OutputWriter, clean_output_directory
from .internal.parser.apifox import ApifoxAdapter
from .internal.parser.swagger import SwaggerAdapter
from .internal.types.models import OutputBucket

logger = logging.getLogger(__name__)

Adapter = Union[SwaggerAdapter, ApifoxAdapter]


class Hooks:
    """Хуки запуска. Свой класс задается в конфиге ключом hooks = "module:attribute" """

    def success(self) -> None:
        pass

    def fail(self, error: Exception) -> None:
        pass

    def complete(self) -> None:
        pass


class ApiPowerGenerator:
    """Чистый интерфейс для генерации TypeScript клиентов"""

    def __init__(
        self,
        config: ApiPowerConfig,
        cwd: Optional[str] = None,
        context: Optional[RunContext] = None,
    ):
        self.config = config
        self.cwd = cwd or os.getcwd()
        self.context = context or RunContext()
        self.hooks: Hooks = load_strategy(config.hooks, Hooks)
        self.adapters: List[Adapter] = []
        self.server_urls: List[str] = []

    async def __aenter__(self) -> "ApiPowerGenerator":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.destroy()

    def _create_adapter(self, server: ServerConfig) -> Optional[Adapter]:
        if server.server_type == "yapi":
            return None

        if server.server_type == "apifox":
            tokens = [token for project in server.projects for token in project.tokens]
            if not tokens:
                raise ConfigError("Для Apifox нужен токен хотя бы одного проекта")
            return ApifoxAdapter(server.server_url, tokens[0], server.apifox_project_id, self.context)

        server_url = server.server_url
        if not server_url.startswith(("http://", "https://")):
            server_url = os.path.join(self.cwd, server_url)
        return SwaggerAdapter(server_url, self.context)

    async def prepare(self) -> List[str]:
        """Запуск адаптеров, возвращает адреса серверов в формате YApi"""
        self.server_urls = []
        for server in self.config.servers:
            adapter = self._create_adapter(server)
            if adapter is None:
                self.server_urls.append(server.server_url.rstrip("/"))
                continue
            self.adapters.append(adapter)
            self.server_urls.append((await adapter.start()).rstrip("/"))
        return self.server_urls

    async def generate(self) -> Dict[str, OutputBucket]:
        """Фрагменты кода, сгруппированные по выходным файлам"""
        if not self.server_urls:
            await self.prepare()
        planner = OutputPlanner(self.config, self.context, self.cwd, self.server_urls)
        return await planner.plan()

    async def write(self, buckets: Dict[str, OutputBucket]) -> List[str]:
        return await OutputWriter(buckets, self.cwd).write()

    async def destroy(self) -> None:
        """Остановка адаптеров и закрытие HTTP-клиента"""
        adapters, self.adapters = self.adapters, []
        for adapter in adapters:
            await adapter.stop()
        await self.context.aclose()

    def clean_output_directory(self) -> None:
        """Очистка каталогов вывода всех категорий"""
        for server in self.config.servers:
            for project in server.projects:
                for category in project.categories:
                    config = SyntheticalConfig.merge(server, project, category, "", 0)
                    request_path = config.request_function_file_path
                    clean_output_directory(
                        os.path.join(self.cwd, config.effective_output_dir),
                        os.path.join(self.cwd, request_path) if request_path else None,
                    )

    async def run(self) -> List[str]:
        """Полный цикл: адаптеры, генерация, запись, остановка адаптеров"""
        try:
            await self.prepare()
            buckets = await self.generate()
            written = await self.write(buckets)
            await self.destroy()
            self.hooks.success()
            return written
        except Exception as e:
            await self.destroy()
            self.hooks.fail(e)
            raise
        finally:
            self.hooks.complete()
