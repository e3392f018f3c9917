"""
Преобразование Swagger 2 / OpenAPI 3 в формат YApi
"""

import json
import logging
import os
from typing import Any, Dict, List, Optional, Tuple

import httpx
import jsonref
import yaml

from ...exceptions import SchemaParseError, UpstreamError
from ..fetcher.context import RunContext
from .server import CanonicalData, CanonicalServer

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "post", "put", "delete", "patch", "head", "options")
DEFAULT_CATEGORY = "default"
FORM_MEDIA_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


def cut_cycles(node: Any, _active: Optional[set] = None, _path: Tuple[str, ...] = ()) -> Any:
    """
    Копия дерева без циклов: повторный вход в узел на текущем пути
    заменяется на {"type": "object"}
    """
    active = set() if _active is None else _active

    if isinstance(node, dict):
        if id(node) in active:
            logger.warning("Циклическая ссылка в схеме: /%s", "/".join(_path))
            return {"type": "object"}
        active.add(id(node))
        try:
            return {
                key: cut_cycles(value, active, (*_path, str(key)))
                for key, value in node.items()
            }
        finally:
            active.discard(id(node))

    if isinstance(node, list):
        if id(node) in active:
            logger.warning("Циклическая ссылка в схеме: /%s", "/".join(_path))
            return []
        active.add(id(node))
        try:
            return [
                cut_cycles(value, active, (*_path, str(index)))
                for index, value in enumerate(node)
            ]
        finally:
            active.discard(id(node))

    return node


def dereference(document: Dict[str, Any]) -> Dict[str, Any]:
    """Разрешение всех $ref документа"""
    resolved = jsonref.replace_refs(document, proxies=False)
    return cut_cycles(resolved)


def _is_json_media(media_type: str) -> bool:
    return "json" in media_type.lower()


def _required_flag(value: Any) -> str:
    return "1" if value else "0"


def _param_schema(param: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    if isinstance(param.get("schema"), dict):
        return param["schema"]
    # Swagger 2: тип описан прямо в параметре
    schema = {
        key: param[key]
        for key in ("type", "format", "items", "enum", "default")
        if key in param
    }
    return schema or None


class SwaggerConverter:
    """Документ Swagger/OpenAPI -> проект, категории и интерфейсы YApi"""

    def __init__(self, document: Dict[str, Any]):
        self.document = dereference(document)
        self.is_swagger2 = str(self.document.get("swagger", "")).startswith("2")
        self.cats: List[Dict[str, Any]] = []
        self._cat_ids: Dict[str, int] = {}

    def convert(self) -> CanonicalData:
        for tag in self.document.get("tags") or []:
            if isinstance(tag, dict) and tag.get("name"):
                self._category_id(tag["name"], tag.get("description", ""))

        interfaces = []
        for path, path_item in (self.document.get("paths") or {}).items():
            if not isinstance(path_item, dict):
                continue
            shared_params = path_item.get("parameters") or []
            for method in HTTP_METHODS:
                operation = path_item.get(method)
                if isinstance(operation, dict):
                    interfaces.append(
                        self._interface(
                            len(interfaces) + 1, path, method, operation, shared_params
                        )
                    )

        return CanonicalData(project=self._project(), cats=self.cats, interfaces=interfaces)

    def _project(self) -> Dict[str, Any]:
        info = self.document.get("info") or {}
        env = []
        if self.is_swagger2:
            basepath = self.document.get("basePath") or ""
            if self.document.get("host"):
                scheme = (self.document.get("schemes") or ["http"])[0]
                env.append({"name": "production", "domain": f"{scheme}://{self.document['host']}"})
        else:
            basepath = ""
            for index, server in enumerate(self.document.get("servers") or []):
                if isinstance(server, dict) and server.get("url"):
                    env.append(
                        {
                            "name": server.get("description") or f"server{index}",
                            "domain": server["url"],
                        }
                    )
        return {
            "_id": 0,
            "name": info.get("title", ""),
            "desc": info.get("description", ""),
            "basepath": basepath,
            "env": env,
        }

    def _category_id(self, name: str, description: str = "") -> int:
        if name not in self._cat_ids:
            self._cat_ids[name] = len(self.cats) + 1
            self.cats.append(
                {"_id": self._cat_ids[name], "name": name, "desc": description or ""}
            )
        return self._cat_ids[name]

    def _interface(
        self,
        interface_id: int,
        path: str,
        method: str,
        operation: Dict[str, Any],
        shared_params: List[Dict[str, Any]],
    ) -> Dict[str, Any]:
        tags = [tag for tag in operation.get("tags") or [] if isinstance(tag, str)]
        catid = self._category_id(tags[0] if tags else DEFAULT_CATEGORY)

        # Параметры операции переопределяют параметры пути
        params: Dict[Tuple[str, str], Dict[str, Any]] = {}
        for param in [*shared_params, *(operation.get("parameters") or [])]:
            if isinstance(param, dict) and param.get("name"):
                params[(param.get("in", ""), param["name"])] = param

        interface = {
            "_id": interface_id,
            "project_id": 0,
            "catid": catid,
            "method": method.upper(),
            "path": path,
            "title": operation.get("summary") or operation.get("operationId") or f"{method.upper()} {path}",
            "desc": operation.get("description", ""),
            "tag": tags,
            "up_time": 0,
            "req_query": [],
            "req_params": [],
            "req_body_type": None,
            "req_body_form": [],
            "req_body_other": None,
            "req_body_is_json_schema": False,
            "res_body_type": "json",
            "res_body": "",
            "res_body_is_json_schema": True,
        }

        for (location, name), param in params.items():
            schema = _param_schema(param)
            schema_type = (schema or {}).get("type")
            item = {
                "name": name,
                "desc": param.get("description", ""),
                "type": schema_type if isinstance(schema_type, str) else None,
                "schema": schema,
            }
            if location == "query":
                interface["req_query"].append({**item, "required": _required_flag(param.get("required"))})
            elif location == "path":
                interface["req_params"].append(item)

        if self.is_swagger2:
            self._swagger2_body(interface, params, operation)
        else:
            self._openapi3_body(interface, operation)
        self._response(interface, operation)
        return interface

    def _form_items(self, schema: Dict[str, Any]) -> List[Dict[str, Any]]:
        required = schema.get("required") or []
        items = []
        for name, prop in (schema.get("properties") or {}).items():
            prop = prop if isinstance(prop, dict) else {}
            is_file = prop.get("type") == "file" or prop.get("format") == "binary"
            items.append(
                {
                    "name": name,
                    "type": "file" if is_file else "text",
                    "required": _required_flag(name in required),
                    "desc": prop.get("description", ""),
                }
            )
        return items

    def _openapi3_body(self, interface: Dict[str, Any], operation: Dict[str, Any]) -> None:
        content = (operation.get("requestBody") or {}).get("content") or {}
        for media_type, media in content.items():
            schema = (media or {}).get("schema") or {}
            if _is_json_media(media_type):
                interface["req_body_type"] = "json"
                interface["req_body_other"] = json.dumps(schema, ensure_ascii=False)
                interface["req_body_is_json_schema"] = True
                return
            if media_type in FORM_MEDIA_TYPES:
                interface["req_body_type"] = "form"
                interface["req_body_form"] = self._form_items(schema)
                return
        if content:
            interface["req_body_type"] = "raw"

    def _swagger2_body(
        self,
        interface: Dict[str, Any],
        params: Dict[Tuple[str, str], Dict[str, Any]],
        operation: Dict[str, Any],
    ) -> None:
        for (location, _name), param in params.items():
            if location == "body":
                interface["req_body_type"] = "json"
                interface["req_body_other"] = json.dumps(param.get("schema") or {}, ensure_ascii=False)
                interface["req_body_is_json_schema"] = True
                return

        form = [param for (location, _name), param in params.items() if location == "formData"]
        if form:
            interface["req_body_type"] = "form"
            interface["req_body_form"] = [
                {
                    "name": param["name"],
                    "type": "file" if param.get("type") == "file" else "text",
                    "required": _required_flag(param.get("required")),
                    "desc": param.get("description", ""),
                }
                for param in form
            ]

    def _success_response(self, operation: Dict[str, Any]) -> Dict[str, Any]:
        responses = operation.get("responses") or {}
        codes = sorted(code for code in responses if str(code).startswith("2"))
        for code in [*codes, "default"]:
            if isinstance(responses.get(code), dict):
                return responses[code]
        return {}

    def _response(self, interface: Dict[str, Any], operation: Dict[str, Any]) -> None:
        response = self._success_response(operation)

        if self.is_swagger2:
            produces = operation.get("produces") or self.document.get("produces") or []
            schema = response.get("schema")
            binary = [media for media in produces if not _is_json_media(media)]
            if isinstance(schema, dict) and schema.get("type") == "file" and binary:
                schema = {"type": "object", "content": binary[0]}
            if isinstance(schema, dict):
                interface["res_body"] = json.dumps(schema, ensure_ascii=False)
            return

        content = response.get("content") or {}
        for media_type, media in content.items():
            if _is_json_media(media_type):
                interface["res_body"] = json.dumps((media or {}).get("schema") or {}, ensure_ascii=False)
                return
        for media_type in content:
            # Файловые ответы распознаются при генерации по полю content
            interface["res_body"] = json.dumps({"type": "object", "content": media_type})
            return


def parse_document(content: str, source: str) -> Dict[str, Any]:
    """Разбор документа в JSON или YAML"""
    try:
        document = json.loads(content)
    except ValueError:
        try:
            document = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise SchemaParseError(f"Не удалось разобрать документ {source}: {e}", content) from e
    if not isinstance(document, dict):
        raise SchemaParseError(f"Документ {source} не является объектом", content)
    return document


class SwaggerAdapter:
    """Поднимает локальный сервер YApi по документу Swagger/OpenAPI"""

    def __init__(self, server_url: str, context: RunContext):
        self.server_url = server_url
        self.context = context
        self.server: Optional[CanonicalServer] = None

    async def load_document(self) -> Dict[str, Any]:
        if not self.server_url.startswith(("http://", "https://")) and os.path.isfile(self.server_url):
            with open(self.server_url, "r", encoding="utf-8") as f:
                return parse_document(f.read(), self.server_url)

        try:
            response = await self.context.client.get(self.server_url)
        except httpx.HTTPError as e:
            raise UpstreamError(f"Ошибка запроса: {e}", self.server_url) from e
        if not response.is_success:
            raise UpstreamError(
                f"Сервер вернул статус {response.status_code}",
                self.server_url,
                status_code=response.status_code,
            )
        return parse_document(response.text, self.server_url)

    async def start(self) -> str:
        document = await self.load_document()
        self.server = CanonicalServer(SwaggerConverter(document).convert())
        return await self.server.start()

    async def stop(self) -> None:
        if self.server is not None:
            await self.server.stop()
            self.server = None
