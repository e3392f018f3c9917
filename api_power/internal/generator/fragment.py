"""
Код одного интерфейса: типы запроса и ответа, функция запроса, хук
"""

import json
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Tuple

from ...config import CommentConfig, SyntheticalConfig
from ..schema.payload import get_request_data_json_schema, get_response_data_json_schema
from ..types.models import ExtendedInterface
from .compiler import quote
from .naming import PATH_PARAM_RE
from .synthesizer import synthesize

DOWNLOAD_CONTENT_TYPES = ("application/octet-stream", "*/*")
INDENT = "    "


@dataclass
class InterfaceNames:
    request_function: str
    request_data_type: str
    response_data_type: str
    request_hook: str = ""


def resolve_names(interface: ExtendedInterface, config: SyntheticalConfig) -> InterfaceNames:
    strategy = config.get_name_strategy()
    request_function = strategy.request_function_name(interface)
    return InterfaceNames(
        request_function=request_function,
        request_data_type=strategy.request_data_type_name(interface),
        response_data_type=strategy.response_data_type_name(interface),
        request_hook=(
            strategy.request_hook_name(interface, request_function)
            if config.react_hooks.enabled
            else ""
        ),
    )


def is_file_download_interface(interface: ExtendedInterface) -> bool:
    """Ответ описан схемой {"type": "object", "content": <бинарный тип>}"""
    if not (
        interface.res_body_type == "json"
        and interface.res_body_is_json_schema
        and interface.res_body
    ):
        return False
    try:
        schema = json.loads(interface.res_body)
    except ValueError:
        return False
    return (
        isinstance(schema, dict)
        and schema.get("type") == "object"
        and schema.get("content") in DOWNLOAD_CONTENT_TYPES
    )


def render_path(path: str) -> Tuple[str, bool]:
    """
    Выражение пути для функции запроса.

    {id} превращается в ${params.id}, числовые имена - в ${params.param_N}.
    Возвращает выражение и признак наличия параметров пути.
    """
    names: List[str] = []

    def replace(match: re.Match) -> str:
        name = match.group(1)
        valid_name = f"param_{name}" if name.isdigit() else name
        names.append(valid_name)
        return "${params." + valid_name + "}"

    processed = PATH_PARAM_RE.sub(replace, path)
    if names:
        return f"`{processed}`", True
    return quote(path), False


def _comment_config(config: SyntheticalConfig) -> CommentConfig:
    # В документах Swagger нет тегов, времени обновления и ссылок
    if config.server_type == "swagger":
        return config.comment.model_copy(update={"tag": False, "update_time": False, "link": False})
    return config.comment


def render_comment(
    interface: ExtendedInterface,
    config: SyntheticalConfig,
    describe: Callable[[str], str],
) -> str:
    comment = _comment_config(config)
    if not comment.enabled:
        return ""

    summary: List[Tuple[str, str]] = []
    if comment.category and interface.category and interface.category.name:
        summary.append(("category", interface.category.name))
    if comment.tag and interface.tag:
        summary.append(("tags", ", ".join(str(tag) for tag in interface.tag)))
    if comment.request_header:
        summary.append(("method", interface.method.upper()))
        summary.append(("path", interface.path))
    if comment.update_time and interface.up_time:
        summary.append(
            ("updateTime", datetime.fromtimestamp(interface.up_time).strftime("%Y-%m-%d %H:%M:%S"))
        )
    if comment.link and interface.url:
        summary.append(("link", interface.url))

    lines = ["/**"]
    if comment.title:
        title = str(interface.title).replace("/", "\\/")
        lines.extend([f" * {describe(title)}", " *"])
    lines.extend(f" * @{label} {value}" for label, value in summary)
    lines.append(" */")
    return "\n".join(lines)


def _with_comment(comment: str, code: str) -> str:
    return f"{comment}\n{code}" if comment else code


def render_request_function(
    interface: ExtendedInterface, names: InterfaceNames, comment: str
) -> str:
    path, has_path_params = render_path(interface.path)
    if is_file_download_interface(interface):
        arguments = f"{path}, undefined, {{\n{INDENT * 2}responseType: 'blob'\n{INDENT}}}"
    elif has_path_params:
        arguments = path
    else:
        arguments = f"{path}, params"

    lines = [
        f"export const {names.request_function} = (params: {names.request_data_type}) => {{",
        f"{INDENT}return request.{interface.method.lower()}<{names.response_data_type}>({arguments})",
        "}",
    ]
    if names.request_hook:
        lines.append("")
        lines.append(f"export const {names.request_hook} = makeRequestHook({names.request_function})")
    return _with_comment(comment, "\n".join(lines))


def build_interface_code(interface: ExtendedInterface, config: SyntheticalConfig) -> str:
    """Фрагмент модуля для одного интерфейса"""
    names = resolve_names(interface, config)

    request_data_type = synthesize(
        get_request_data_json_schema(interface, config.custom_type_mapping),
        names.request_data_type,
    )
    response_data_type = synthesize(
        get_response_data_json_schema(interface, config.custom_type_mapping, config.data_key),
        names.response_data_type,
    )

    blocks = [
        _with_comment(
            render_comment(interface, config, lambda title: f"@description Интерфейс {title}: **тип запроса**"),
            request_data_type,
        ),
        _with_comment(
            render_comment(interface, config, lambda title: f"@description Интерфейс {title}: **тип ответа**"),
            response_data_type,
        ),
    ]
    if not config.types_only:
        blocks.append(
            render_request_function(
                interface,
                names,
                render_comment(interface, config, lambda title: f"@description Интерфейс {title}: **функция запроса**"),
            )
        )
    return "\n\n".join(blocks)
