"""
Нормализация JSON Schema перед генерацией типов.

Все функции модуля работают на месте: узлы дерева изменяются, а не
копируются. Вызывающий код отвечает за копирование схемы, если исходник
нужно сохранить.
"""

import json
import posixpath
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Sequence, Tuple, Union

from ...exceptions import SchemaCycleError

# Сырой TypeScript-тип узла, компилятор выводит его как есть
TS_TYPE_KEY = "tsType"
# Явная ссылка на тип, разрешается отдельным проходом
REFERENCE_KEY = "x-type-reference"
# Маркер "тип неизвестен" для не-JSON ответов
ANY_MARKER = "__is_any__"

# Ключи в нижнем регистре
TYPE_MAPPING: Dict[str, str] = {
    "byte": "integer",
    "short": "integer",
    "int": "integer",
    "long": "integer",
    "float": "number",
    "double": "number",
    "bigdecimal": "number",
    "char": "string",
    "void": "null",
}

SchemaPath = Tuple[Union[str, int], ...]
Callback = Callable[[Dict[str, Any], SchemaPath], Any]


@dataclass(frozen=True)
class TypeReference:
    """Ссылка на тип вложенного узла той же схемы (синтаксис &relative/path)"""

    segments: Tuple[str, ...]

    @classmethod
    def parse(cls, value: str, current_path: Sequence) -> "TypeReference":
        relative = value[1:] if value.startswith("&") else value
        base = "/" + "/".join(str(segment) for segment in current_path)
        absolute = posixpath.normpath(
            posixpath.join(posixpath.dirname(base), relative)
        )
        return cls(segments=tuple(filter(None, absolute.split("/"))))

    def render(self, type_name: str) -> str:
        left = "NonNullable<" * len(self.segments)
        right = type_name + "".join(
            f"[{json.dumps(segment, ensure_ascii=False)}]>"
            for segment in self.segments
        )
        return left + right


def traverse_json_schema(
    schema: Any,
    callback: Callback,
    current_path: SchemaPath = (),
    _active: Optional[set] = None,
) -> Any:
    """Обход схемы: callback вызывается для узла до обхода его потомков"""
    if not isinstance(schema, dict):
        return schema

    active = set() if _active is None else _active
    if id(schema) in active:
        raise SchemaCycleError(current_path)
    active.add(id(schema))

    try:
        # Mock.toJSONSchema отдает properties списком {name, ...schema}
        if isinstance(schema.get("properties"), list):
            schema["properties"] = {
                item["name"]: item
                for item in schema["properties"]
                if isinstance(item, dict) and isinstance(item.get("name"), str)
            }

        callback(schema, current_path)

        properties = schema.get("properties")
        if isinstance(properties, dict):
            for key, item in list(properties.items()):
                traverse_json_schema(item, callback, (*current_path, key), active)

        items = schema.get("items")
        if items:
            for index, item in enumerate(items if isinstance(items, list) else [items]):
                traverse_json_schema(item, callback, (*current_path, index), active)

        for keyword in ("oneOf", "anyOf", "allOf"):
            for item in schema.get(keyword) or []:
                traverse_json_schema(item, callback, current_path, active)
    finally:
        active.discard(id(schema))

    return schema


def process_json_schema(
    schema: Any, custom_type_mapping: Optional[Dict[str, str]] = None
) -> Any:
    """Приведение схемы к стандартному виду (идемпотентно)"""
    type_mapping = {
        **TYPE_MAPPING,
        **{key.lower(): value for key, value in (custom_type_mapping or {}).items()},
    }

    def process(node: Dict[str, Any], _path: SchemaPath):
        # Остатки ссылок после конвертации из swagger
        node.pop("$ref", None)
        node.pop("$$ref", None)

        if node.get("type"):
            is_multiple = isinstance(node["type"], list)
            types = [
                type_mapping.get(item.lower(), item.lower())
                if isinstance(item, str)
                else item
                for item in (node["type"] if is_multiple else [node["type"]])
            ]
            node["type"] = types if is_multiple else types[0]

        # Кортеж сводится к первому элементу
        if (
            node.get("type") == "array"
            and isinstance(node.get("items"), list)
            and node["items"]
        ):
            node["items"] = node["items"][0]

        if isinstance(node.get("properties"), dict):
            node["properties"] = {
                key.strip(): value for key, value in node["properties"].items()
            }
            if isinstance(node.get("required"), list):
                node["required"] = [
                    name.strip() if isinstance(name, str) else name
                    for name in node["required"]
                ]

    return traverse_json_schema(schema, process)


def prepare_for_compile(schema: Any) -> Any:
    """Подготовка схемы к компиляции в TypeScript"""
    if isinstance(schema, dict):
        # Иначе описание корня станет комментарием к типу
        schema.pop("description", None)

    def prepare(node: Dict[str, Any], current_path: SchemaPath):
        # В старых версиях YApi title не настраивается, поэтому смотрим description
        ref_value = node.get("description") if node.get("title") is None else node["title"]
        if isinstance(ref_value, str) and ref_value.startswith("&"):
            node[REFERENCE_KEY] = TypeReference.parse(ref_value, current_path)

        # title и id компилятор принял бы за имена типов
        node.pop("title", None)
        node.pop("id", None)
        node.pop("minItems", None)
        node.pop("maxItems", None)
        # default сужал бы выводимый тип
        node.pop("default", None)

        if node.get("type") == "object":
            node["additionalProperties"] = False

    return traverse_json_schema(schema, prepare)


def resolve_type_references(schema: Any, type_name: str) -> Any:
    """Замена TypeReference на сырой TypeScript-тип относительно type_name"""

    def resolve(node: Dict[str, Any], _path: SchemaPath):
        reference = node.pop(REFERENCE_KEY, None)
        if isinstance(reference, TypeReference):
            node[TS_TYPE_KEY] = reference.render(type_name)

    return traverse_json_schema(schema, resolve)


def _segments(path: Union[str, Sequence[str]]) -> list:
    return [path] if isinstance(path, str) else list(path)


def reach_json_schema(schema: Dict[str, Any], path: Union[str, Sequence[str]]):
    """Узел по цепочке properties; если пути нет - исходная схема"""
    last = schema
    for segment in _segments(path):
        properties = last.get("properties") if isinstance(last, dict) else None
        found = properties.get(segment) if isinstance(properties, dict) else None
        if not isinstance(found, dict):
            return schema
        last = found
    return last


def wrap_json_schema(schema: Dict[str, Any], path: Union[str, Sequence[str]]):
    """Обратная операция к reach_json_schema"""
    for segment in reversed(_segments(path)):
        schema = {"type": "object", "properties": {segment: schema}}
    return schema
