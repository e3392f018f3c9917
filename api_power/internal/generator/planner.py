"""
Обход серверов, проектов, категорий и интерфейсов с группировкой
фрагментов по выходным файлам
"""

import asyncio
import logging
import os
from typing import Dict, Iterable, List, Optional, Sequence

from ...config import ApiPowerConfig, CategoryConfig, ProjectConfig, ServerConfig, SyntheticalConfig
from ..fetcher import RunContext, YApiFetcher
from ..types.models import ExtendedInterface, Fragment, OutputBucket, ParsedPath, ProjectInfo, WeightVector
from ..utils.paths import to_unix_path
from .fragment import build_interface_code

logger = logging.getLogger(__name__)

REQUEST_FUNCTION_FILE_NAME = "request.ts"
REQUEST_HOOK_MAKER_FILE_NAME = "makeRequestHook.ts"


def resolve_category_ids(ids: Iterable[int], known_ids: Iterable[int]) -> List[int]:
    """
    Список id категорий по конфигу: 0 - все известные категории,
    отрицательный id исключает категорию, неизвестные id отбрасываются
    """
    known = set(known_ids)
    selected = set()
    excluded = set()
    for category_id in ids:
        if category_id == 0:
            selected |= known
        elif category_id < 0:
            excluded.add(-category_id)
        else:
            selected.add(category_id)
    return sorted((selected & known) - excluded)


def _category_ids(category: CategoryConfig) -> List[int]:
    return [category.id] if isinstance(category.id, int) else list(category.id)


def strip_path_prefix(path: str, path_prefix: Optional[str]) -> str:
    if not path_prefix or not path.startswith(path_prefix):
        return path
    return "/" + path[len(path_prefix):].lstrip("/")


class OutputPlanner:
    """Собирает фрагменты кода всех интерфейсов в бакеты по выходным путям"""

    def __init__(
        self,
        config: ApiPowerConfig,
        context: RunContext,
        cwd: Optional[str] = None,
        server_urls: Optional[Sequence[str]] = None,
    ):
        self.config = config
        self.fetcher = YApiFetcher(context)
        self.cwd = cwd or os.getcwd()
        # Адреса серверов после запуска адаптеров
        self.server_urls = list(server_urls) if server_urls else [
            server.server_url.rstrip("/") for server in config.servers
        ]
        self.buckets: Dict[str, OutputBucket] = {}

    async def plan(self) -> Dict[str, OutputBucket]:
        self.buckets = {}
        await asyncio.gather(
            *(
                self._plan_server(server_index, server)
                for server_index, server in enumerate(self.config.servers)
            )
        )
        return self.buckets

    async def _plan_server(self, server_index: int, server: ServerConfig) -> None:
        # Проект с несколькими токенами - несколько проектов
        projects = [(project, token) for project in server.projects for token in project.tokens]
        await asyncio.gather(
            *(
                self._plan_project(server_index, project_index, server, project, token)
                for project_index, (project, token) in enumerate(projects)
            )
        )

    async def _plan_project(
        self,
        server_index: int,
        project_index: int,
        server: ServerConfig,
        project: ProjectConfig,
        token: str,
    ) -> None:
        server_url = self.server_urls[server_index]
        project_info = await self.fetcher.fetch_project_info(server_url, token)
        known_ids = [cat.id for cat in project_info.cats]

        configs: List[SyntheticalConfig] = []
        for category in project.categories:
            for category_id in resolve_category_ids(_category_ids(category), known_ids):
                configs.append(
                    SyntheticalConfig.merge(server, project, category, token, category_id).model_copy(
                        update={"server_url": server_url}
                    )
                )

        await asyncio.gather(
            *(
                self._plan_category((server_index, project_index, category_index), project_info, config)
                for category_index, config in enumerate(configs)
            )
        )

    async def _plan_category(
        self, weights: Sequence[int], project_info: ProjectInfo, config: SyntheticalConfig
    ) -> None:
        interfaces = await self.fetcher.fetch_interface_list(config.server_url, config.token, config.id)
        preprocess = config.get_preprocess_strategy()

        prepared: List[ExtendedInterface] = []
        for interface in interfaces:
            copy = interface.model_copy(deep=True)
            copy.project = project_info
            copy = preprocess.preprocess(copy, config)
            if copy is None:
                continue
            copy.path = strip_path_prefix(copy.path, config.path_prefix)
            copy.parsed_path = ParsedPath.parse(copy.path)
            prepared.append(copy)
        prepared.sort(key=lambda item: item.id)

        await asyncio.gather(
            *(
                self._plan_interface((*weights, interface_index), interface, config)
                for interface_index, interface in enumerate(prepared)
            )
        )

    async def _plan_interface(
        self, weights: WeightVector, interface: ExtendedInterface, config: SyntheticalConfig
    ) -> None:
        output_file_path = self._resolve(
            config.get_output_path_strategy().output_file_path(interface, config)
        )
        bucket = self.buckets.setdefault(
            output_file_path, OutputBucket(output_file_path=output_file_path)
        )

        output_dir = os.path.dirname(output_file_path)
        request_function_file_path = (
            self._resolve(config.request_function_file_path)
            if config.request_function_file_path
            else to_unix_path(os.path.join(output_dir, REQUEST_FUNCTION_FILE_NAME))
        )
        request_hook_maker_file_path = ""
        if config.react_hooks.enabled:
            hook_path = config.react_hooks.request_hook_maker_file_path
            request_hook_maker_file_path = (
                self._resolve(hook_path)
                if hook_path
                else to_unix_path(os.path.join(output_dir, REQUEST_HOOK_MAKER_FILE_NAME))
            )

        project = interface.project
        bucket.add(
            Fragment(
                weights=weights,
                code=build_interface_code(interface, config),
                config=config,
                request_function_file_path=request_function_file_path,
                request_hook_maker_file_path=request_hook_maker_file_path,
                server_urls={
                    "prod": project.get_prod_url(config.prod_env_name) if project else "",
                    "dev": project.get_dev_url(config.dev_env_name) if project else "",
                    "mock": project.get_mock_url() if project else "",
                },
            )
        )
        logger.debug("%s %s -> %s", interface.method, interface.path, output_file_path)

    def _resolve(self, path: str) -> str:
        return to_unix_path(os.path.normpath(os.path.join(self.cwd, path)))
