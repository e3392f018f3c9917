"""
Вывод JSON Schema из примеров данных, mockjs-шаблонов и списков параметров
"""

import copy
import json
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .normalizer import TS_TYPE_KEY, process_json_schema

# Имя типа файла в сгенерированном коде
FILE_DATA_TYPE = "FileData"

# Ключ шаблона вида "field|rule", см. Mock.js RE_KEY
MOCK_KEY_RE = re.compile(r"(.+)\|(?:\+(\d+)|([+-]?\d+-?[+-]?\d*)?(?:\.(\d+-?\d*))?)")
MOCK_NUMBER_PATTERNS = ("natural", "integer", "float", "range", "increment")
MOCK_BOOL_PATTERNS = ("boolean", "bool")


@dataclass
class PropDefinition:
    """Описание одного параметра (поле формы, query или path)"""

    name: str
    type: Optional[str] = "string"
    required: bool = False
    comment: Optional[str] = None
    schema: Optional[Dict[str, Any]] = None


def _is_truthy(value: Any) -> bool:
    # Пустые массивы и объекты считаются заполненными
    if isinstance(value, (list, dict)):
        return True
    return bool(value)


def _to_literal(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, list):
        return [_to_literal(item) for item in value]
    if isinstance(value, dict):
        return {key: _to_literal(item) for key, item in value.items()}
    return value


def literal_json(value: Any) -> str:
    """Компактное JSON-представление значения"""
    return json.dumps(_to_literal(value), ensure_ascii=False, separators=(",", ":"))


def _infer(value: Any) -> Dict[str, Any]:
    if isinstance(value, bool):
        schema: Dict[str, Any] = {"type": "boolean"}
    elif value is None:
        schema = {"type": "null"}
    elif isinstance(value, int):
        schema = {"type": "integer"}
    elif isinstance(value, float):
        schema = {"type": "integer" if value.is_integer() else "number"}
    elif isinstance(value, str):
        schema = {"type": "string"}
    elif isinstance(value, list):
        schema = {"type": "array"}
        # Тип массива определяется по первому элементу
        if value:
            schema["items"] = _infer(value[0])
    elif isinstance(value, dict):
        schema = {
            "type": "object",
            "properties": {key: _infer(item) for key, item in value.items()},
            "additionalProperties": False,
        }
    else:
        schema = {}

    if (
        not schema.get("description")
        and _is_truthy(value)
        and schema.get("type") != "object"
    ):
        schema["description"] = literal_json(value)
    return schema


def json_to_json_schema(
    value: Any, custom_type_mapping: Optional[Dict[str, str]] = None
) -> Dict[str, Any]:
    """JSON Schema по примеру данных, листья подписаны своим значением"""
    schema = _infer(value)
    schema.pop("description", None)
    return process_json_schema(schema, custom_type_mapping)


def _normalize_mock_value(value: Any) -> Any:
    if isinstance(value, str) and value.startswith("@"):
        pattern = value[1:]
        if pattern.startswith(MOCK_NUMBER_PATTERNS):
            return 1
        if pattern.startswith(MOCK_BOOL_PATTERNS):
            return True
    return value


def _normalize_mock_template(template: Any) -> Any:
    if isinstance(template, dict):
        result = {}
        for key, value in template.items():
            name = MOCK_KEY_RE.sub(r"\1", key, count=1)
            result[name] = _normalize_mock_value(_normalize_mock_template(value))
        return result
    if isinstance(template, list):
        # Элементы массивов не подставляются, только значения ключей
        return [_normalize_mock_template(item) for item in template]
    return template


def mockjs_template_to_json_schema(
    template: Any, custom_type_mapping: Optional[Dict[str, str]] = None
) -> Dict[str, Any]:
    """JSON Schema по mockjs-шаблону"""
    return json_to_json_schema(_normalize_mock_template(template), custom_type_mapping)


def prop_definitions_to_json_schema(
    prop_definitions: List[PropDefinition],
    custom_type_mapping: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """Объектная схема по списку параметров"""
    properties: Dict[str, Any] = {}
    for prop in prop_definitions:
        # Полная схема параметра приоритетнее поля type
        if prop.schema:
            item = copy.deepcopy(prop.schema)
        else:
            item = {"type": prop.type}
        if prop.comment is not None:
            item["description"] = prop.comment
        if item.get("type") == "file":
            item[TS_TYPE_KEY] = FILE_DATA_TYPE
        properties[prop.name] = item

    return process_json_schema(
        {
            "type": "object",
            "required": [prop.name for prop in prop_definitions if prop.required],
            "properties": properties,
        },
        custom_type_mapping,
    )
