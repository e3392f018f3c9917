"""
Загрузка проекта, категорий и интерфейсов в формате YApi
"""

import logging
import re
from typing import Any, Dict, List

import httpx
from pydantic import ValidationError

from ...exceptions import UpstreamError
from ..types.models import Category, CategoryExport, ExtendedInterface, ProjectInfo
from .context import RunContext

logger = logging.getLogger(__name__)


def normalize_basepath(basepath: str) -> str:
    """Базовый путь без завершающего слеша: api/ -> /api, / -> пустая строка"""
    return re.sub(r"^/+", "/", re.sub(r"/+$", "", f"/{basepath or '/'}"))


class YApiFetcher:
    """Клиент API YApi (или локального сервера адаптера)"""

    def __init__(self, context: RunContext):
        self.context = context

    async def fetch_api(self, url: str, params: Dict[str, Any]) -> Any:
        """GET-запрос к API, возвращает поле data ответа"""
        logger.debug("GET %s", url)
        try:
            response = await self.context.client.get(url, params=params)
        except httpx.HTTPError as e:
            raise UpstreamError(f"Ошибка запроса: {e}", url, params) from e

        if not response.is_success:
            raise UpstreamError(
                f"Сервер вернул статус {response.status_code}",
                url,
                params,
                response.status_code,
            )

        content_type = response.headers.get("content-type", "")
        if "json" not in content_type:
            raise UpstreamError(
                f"Неожиданный тип содержимого: {content_type or 'не указан'}",
                url,
                params,
                response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise UpstreamError(f"Некорректный JSON: {e}", url, params) from e

        if isinstance(payload, dict):
            if payload.get("errcode"):
                raise UpstreamError(
                    str(payload.get("errmsg") or f"errcode {payload['errcode']}"),
                    url,
                    params,
                    response.status_code,
                )
            if payload.get("data") is not None:
                return payload["data"]
        return payload

    async def fetch_project(self, server_url: str, token: str) -> ProjectInfo:
        """Информация о проекте (без категорий)"""

        async def load() -> ProjectInfo:
            url = f"{server_url}/api/project/get"
            data = await self.fetch_api(url, {"token": token})
            try:
                project = ProjectInfo.model_validate(data)
            except ValidationError as e:
                raise UpstreamError(f"Некорректный ответ: {e}", url) from e
            project.basepath = normalize_basepath(project.basepath)
            project.url = f"{server_url}/project/{project.id}/interface/api"
            project.server_url = server_url
            return project

        return await self.context.memoize(("project", server_url, token), load)

    async def fetch_export(self, server_url: str, token: str) -> List[CategoryExport]:
        """Полная выгрузка категорий с интерфейсами"""

        async def load() -> List[CategoryExport]:
            project = await self.fetch_project(server_url, token)
            url = f"{server_url}/api/plugin/export"
            data = await self.fetch_api(
                url,
                {"type": "json", "status": "all", "isWiki": "false", "token": token},
            )
            try:
                categories = [CategoryExport.model_validate(item) for item in data or []]
            except ValidationError as e:
                raise UpstreamError(f"Некорректный ответ: {e}", url) from e

            for category in categories:
                project_id = category.list[0].project_id if category.list else 0
                category_id = category.list[0].catid if category.list else 0
                category.url = (
                    f"{server_url}/project/{project_id}/interface/api/cat_{category_id}"
                )
                for interface in category.list:
                    interface.url = (
                        f"{server_url}/project/{project_id}/interface/api/{interface.id}"
                    )
                    interface.path = f"{project.basepath}{interface.path}"
            return categories

        return await self.context.memoize(("export", server_url, token), load)

    async def fetch_interface_list(
        self, server_url: str, token: str, category_id: int
    ) -> List[ExtendedInterface]:
        """Интерфейсы категории; неизвестная категория - пустой список"""
        for category in await self.fetch_export(server_url, token):
            if category.list and category.list[0].catid == category_id:
                owner = Category(
                    _id=category_id,
                    name=category.name,
                    desc=category.desc,
                    _url=category.url,
                )
                return [
                    ExtendedInterface.extend(interface, category=owner)
                    for interface in category.list
                ]
        return []

    async def fetch_project_info(self, server_url: str, token: str) -> ProjectInfo:
        """Проект вместе со списком категорий"""
        project = await self.fetch_project(server_url, token)
        url = f"{server_url}/api/interface/getCatMenu"
        data = await self.fetch_api(url, {"token": token, "project_id": project.id})
        try:
            cats = [Category.model_validate(item) for item in data or []]
        except ValidationError as e:
            raise UpstreamError(f"Некорректный ответ: {e}", url) from e
        return project.model_copy(update={"cats": cats})
