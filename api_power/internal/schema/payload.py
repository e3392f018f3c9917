"""
Схемы данных запроса и ответа интерфейса
"""

import json
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

import json5

from ...exceptions import SchemaParseError
from ..types.models import Method, RawInterface, RequestBodyType, ResponseBodyType
from .inference import (
    PropDefinition,
    json_to_json_schema,
    mockjs_template_to_json_schema,
    prop_definitions_to_json_schema,
)
from .normalizer import ANY_MARKER, process_json_schema, reach_json_schema

GET_LIKE_METHODS = (Method.GET.value, Method.OPTIONS.value, Method.HEAD.value)


def is_get_like_method(method: str) -> bool:
    return (method or "").upper() in GET_LIKE_METHODS


def is_post_like_method(method: str) -> bool:
    return not is_get_like_method(method)


def _parse(source: str, loads: Callable[[str], Any], what: str) -> Any:
    try:
        return loads(source)
    except ValueError as e:
        raise SchemaParseError(f"Не удалось разобрать {what}: {e}", source) from e


def load_example(source: str) -> Any:
    """
    Пример данных: строгий JSON, иначе JSON5
    (ключи без кавычек, одинарные кавычки, комментарии, завершающие запятые)
    """
    try:
        return json.loads(source)
    except ValueError:
        return json5.loads(source)


def json_schema_string_to_json_schema(
    source: str, custom_type_mapping: Optional[Dict[str, str]] = None
) -> Dict[str, Any]:
    schema = _parse(source, json.loads, "JSON Schema")
    if not isinstance(schema, dict):
        raise SchemaParseError(
            f"JSON Schema должна быть объектом, получено: {type(schema).__name__}", source
        )
    return process_json_schema(schema, custom_type_mapping)


def _merge(target: Optional[Dict[str, Any]], extra: Dict[str, Any]) -> Dict[str, Any]:
    if target is None:
        return extra
    target["properties"] = {
        **(target.get("properties") or {}),
        **(extra.get("properties") or {}),
    }
    required: List[str] = []
    for source in (target.get("required"), extra.get("required")):
        for name in source if isinstance(source, list) else []:
            if name not in required:
                required.append(name)
    target["required"] = required
    return target


def get_request_data_json_schema(
    interface: RawInterface, custom_type_mapping: Optional[Dict[str, str]] = None
) -> Dict[str, Any]:
    """Схема данных запроса: тело, query и path параметры"""
    schema: Optional[Dict[str, Any]] = None

    # Тело запроса есть только у POST-подобных методов
    if is_post_like_method(interface.method):
        if interface.req_body_type == RequestBodyType.FORM.value:
            schema = prop_definitions_to_json_schema(
                [
                    PropDefinition(
                        name=item.name,
                        required=item.required == "1",
                        type="file" if item.type == "file" else "string",
                        comment=item.desc,
                    )
                    for item in interface.req_body_form
                ],
                custom_type_mapping,
            )
        elif (
            interface.req_body_type == RequestBodyType.JSON.value
            and interface.req_body_other
        ):
            if interface.req_body_is_json_schema:
                schema = json_schema_string_to_json_schema(
                    interface.req_body_other, custom_type_mapping
                )
            else:
                schema = json_to_json_schema(
                    _parse(interface.req_body_other, load_example, "тело запроса"),
                    custom_type_mapping,
                )

    if interface.req_query:
        schema = _merge(
            schema,
            prop_definitions_to_json_schema(
                [
                    PropDefinition(
                        name=item.name,
                        required=item.required == "1",
                        type=item.type or "string",
                        comment=item.desc,
                        schema=item.schema_,
                    )
                    for item in interface.req_query
                ],
                custom_type_mapping,
            ),
        )

    if interface.req_params:
        schema = _merge(
            schema,
            prop_definitions_to_json_schema(
                [
                    PropDefinition(
                        name=item.name,
                        required=True,
                        type=item.type or "string",
                        comment=item.desc,
                        schema=item.schema_,
                    )
                    for item in interface.req_params
                ],
                custom_type_mapping,
            ),
        )

    return schema or {}


def get_response_data_json_schema(
    interface: RawInterface,
    custom_type_mapping: Optional[Dict[str, str]] = None,
    data_key: Union[str, Sequence[str], None] = None,
) -> Dict[str, Any]:
    """Схема данных ответа с учетом data_key"""
    schema: Dict[str, Any] = {}

    if interface.res_body_type == ResponseBodyType.JSON.value:
        if interface.res_body:
            if interface.res_body_is_json_schema:
                schema = json_schema_string_to_json_schema(
                    interface.res_body, custom_type_mapping
                )
            else:
                schema = mockjs_template_to_json_schema(
                    _parse(interface.res_body, load_example, "тело ответа"),
                    custom_type_mapping,
                )
    else:
        schema = {ANY_MARKER: True}

    if data_key and schema:
        schema = reach_json_schema(schema, data_key)

    return schema
