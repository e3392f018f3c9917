"""
Общие фикстуры: поддельный сервер YApi поверх httpx.MockTransport
"""

import asyncio
import json
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest

YAPI_URL = "http://yapi.test"


def make_interface(
    interface_id: int,
    path: str,
    method: str = "GET",
    catid: int = 1,
    project_id: int = 11,
    res_body: Optional[Dict[str, Any]] = None,
    **extra: Any,
) -> Dict[str, Any]:
    """Интерфейс в формате выгрузки YApi"""
    interface = {
        "_id": interface_id,
        "method": method,
        "path": path,
        "title": f"Интерфейс {interface_id}",
        "catid": catid,
        "project_id": project_id,
        "tag": [],
        "req_query": [],
        "req_params": [],
        "req_body_form": [],
        "res_body_type": "json",
        "res_body_is_json_schema": True,
        "res_body": json.dumps(
            res_body
            or {
                "type": "object",
                "properties": {"id": {"type": "integer"}},
                "required": ["id"],
            }
        ),
    }
    interface.update(extra)
    return interface


class FakeYApi:
    """Ответы YApi по токену проекта"""

    def __init__(self):
        self.projects: Dict[str, Dict[str, Any]] = {}
        self.delays: Dict[Tuple[str, str], float] = {}
        self.errors: Dict[str, str] = {}
        self.calls: List[Tuple[str, str]] = []

    def add_project(
        self,
        token: str,
        project_id: int,
        categories: List[Tuple[int, str, List[Dict[str, Any]]]],
        basepath: str = "",
    ) -> None:
        self.projects[token] = {
            "project": {
                "_id": project_id,
                "name": f"project-{project_id}",
                "basepath": basepath,
                "env": [{"name": "production", "domain": "https://prod.example.com"}],
            },
            "cats": [{"_id": cat_id, "name": name} for cat_id, name, _ in categories],
            "export": [
                {"_id": cat_id, "name": name, "list": interfaces}
                for cat_id, name, interfaces in categories
            ],
        }

    def count(self, path: str) -> int:
        return len([call for call in self.calls if call[0] == path])

    async def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path
        token = request.url.params.get("token", "")
        self.calls.append((path, token))

        delay = self.delays.get((path, token))
        if delay:
            await asyncio.sleep(delay)

        if path in self.errors:
            return httpx.Response(200, json={"errcode": 40011, "errmsg": self.errors[path]})

        project = self.projects.get(token)
        if project is None:
            return httpx.Response(200, json={"errcode": 40011, "errmsg": "请登录..."})

        if path == "/api/project/get":
            return httpx.Response(200, json={"errcode": 0, "errmsg": "成功！", "data": project["project"]})
        if path == "/api/interface/getCatMenu":
            return httpx.Response(200, json={"errcode": 0, "errmsg": "成功！", "data": project["cats"]})
        if path == "/api/plugin/export":
            return httpx.Response(200, json=project["export"])
        return httpx.Response(404, text="not found")

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def fake_yapi() -> FakeYApi:
    return FakeYApi()


def yapi_config(**server: Any) -> Dict[str, Any]:
    """Конфигурация с одним сервером YApi"""
    return {
        "servers": [
            {
                "server_url": YAPI_URL,
                "projects": [{"token": "t1", "categories": [{"id": 0}]}],
                **server,
            }
        ]
    }
