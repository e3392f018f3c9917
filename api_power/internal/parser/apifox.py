"""
Выгрузка проекта Apifox в формате OpenAPI
"""

import logging
from typing import Any, Dict, Optional

import httpx

from ...exceptions import ConfigError, UpstreamError
from ..fetcher.context import RunContext
from .swagger import SwaggerAdapter, parse_document

logger = logging.getLogger(__name__)

APIFOX_API_VERSION = "2024-03-28"

DEFAULT_EXPORT_OPTIONS: Dict[str, Any] = {
    "scope": {"type": "ALL"},
    "options": {
        "includeApifoxExtensionProperties": False,
        "addFoldersToTags": True,
    },
    "oasVersion": "3.1",
    "exportFormat": "JSON",
}


def get_export_url(server_url: str, project_id: str) -> str:
    # Адрес выгрузки может быть указан целиком
    if "/v1/projects/" in server_url and "/export-openapi" in server_url:
        return server_url
    return f"{server_url.rstrip('/')}/v1/projects/{project_id}/export-openapi"


async def fetch_apifox_openapi(
    client: httpx.AsyncClient,
    server_url: str,
    token: str,
    project_id: Optional[str],
    export_options: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Документ OpenAPI проекта Apifox"""
    if not project_id:
        raise ConfigError("Не указан apifox_project_id")

    url = get_export_url(server_url, project_id)
    params = {"locale": "zh-CN"}
    headers = {
        "X-Apifox-Api-Version": APIFOX_API_VERSION,
        "Authorization": f"Bearer {token}",
    }
    logger.debug("POST %s", url)

    try:
        response = await client.post(
            url,
            params=params,
            json={**DEFAULT_EXPORT_OPTIONS, **(export_options or {})},
            headers=headers,
        )
    except httpx.HTTPError as e:
        raise UpstreamError(f"Ошибка запроса к Apifox: {e}", url, params) from e

    if response.status_code != 200:
        raise UpstreamError(
            f"Apifox вернул статус {response.status_code}",
            url,
            params,
            response.status_code,
        )

    content_type = response.headers.get("content-type", "")
    if "application/json" not in content_type:
        raise UpstreamError(
            f"Apifox вернул не JSON: {content_type or 'тип не указан'}",
            url,
            params,
            response.status_code,
        )

    return parse_document(response.text, url)


class ApifoxAdapter(SwaggerAdapter):
    """Локальный сервер YApi по выгрузке Apifox"""

    def __init__(
        self,
        server_url: str,
        token: str,
        project_id: Optional[str],
        context: RunContext,
    ):
        super().__init__(server_url, context)
        self.token = token
        self.project_id = project_id

    async def load_document(self) -> Dict[str, Any]:
        return await fetch_apifox_openapi(
            self.context.client, self.server_url, self.token, self.project_id
        )
