"""
Компилятор JSON Schema в объявления TypeScript.

Стиль вывода: отступ 4 пробела, точка с запятой в конце объявлений,
строковые литералы в одинарных кавычках, без завершающих запятых.
"""

import json
import re
from typing import Any, Dict, List

from ..schema.normalizer import TS_TYPE_KEY

IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

PRIMITIVE_TYPES = {
    "string": "string",
    "number": "number",
    "integer": "number",
    "boolean": "boolean",
    "null": "null",
    "any": "any",
}


def quote(value: str) -> str:
    """Строковый литерал в одинарных кавычках"""
    escaped = json.dumps(value, ensure_ascii=False)[1:-1]
    return "'" + escaped.replace('\\"', '"').replace("'", "\\'") + "'"


def literal(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, str):
        return quote(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return json.dumps(value, ensure_ascii=False)


def property_key(key: str) -> str:
    return key if IDENTIFIER_RE.match(key) else quote(key)


def safe_type_name(name: str) -> str:
    """Имя типа, пригодное для TypeScript"""
    cleaned = re.sub(r"[^A-Za-z0-9_$]", "", name)
    if not cleaned:
        return "NoName"
    if cleaned[0].isdigit():
        cleaned = "_" + cleaned
    return cleaned[0].upper() + cleaned[1:]


def _has_top_level_operator(expression: str) -> bool:
    depth = 0
    in_string = False
    previous = ""
    for char in expression:
        if in_string:
            if char == "'" and previous != "\\":
                in_string = False
        elif char == "'":
            in_string = True
        elif char in "{[(<":
            depth += 1
        elif char in "}])>":
            depth -= 1
        elif char in "|&" and depth == 0:
            return True
        previous = char
    return False


def _wrap(expression: str) -> str:
    # Объединения и пересечения внутри массивов и пересечений берутся в скобки
    if _has_top_level_operator(expression):
        return f"({expression})"
    return expression


class TypeScriptCompiler:
    """Компиляция дерева JSON Schema в текст объявления"""

    def __init__(self, indent: str = "    "):
        self.indent = indent

    def compile(self, schema: Dict[str, Any], name: str) -> str:
        name = safe_type_name(name)
        lines: List[str] = self._comment(schema.get("description"), 0)

        if self._is_interface(schema):
            lines.append(f"export interface {name} {self._object(schema, 0)}")
        else:
            lines.append(f"export type {name} = {self.type_of(schema, 0)};")

        return "\n".join(lines) + "\n"

    def _is_interface(self, schema: Dict[str, Any]) -> bool:
        if any(
            key in schema
            for key in (TS_TYPE_KEY, "enum", "const", "anyOf", "oneOf", "allOf")
        ):
            return False
        schema_type = schema.get("type")
        return schema_type == "object" or (
            schema_type is None and isinstance(schema.get("properties"), dict)
        )

    def type_of(self, schema: Any, level: int) -> str:
        """TypeScript-выражение для узла схемы"""
        if not isinstance(schema, dict) or not schema:
            return "unknown"

        if schema.get(TS_TYPE_KEY):
            return str(schema[TS_TYPE_KEY])

        if "const" in schema:
            return literal(schema["const"])

        if isinstance(schema.get("enum"), list) and schema["enum"]:
            return " | ".join(literal(value) for value in schema["enum"])

        for keyword in ("anyOf", "oneOf"):
            if isinstance(schema.get(keyword), list) and schema[keyword]:
                return " | ".join(
                    self.type_of(item, level) for item in schema[keyword]
                )

        if isinstance(schema.get("allOf"), list) and schema["allOf"]:
            return " & ".join(
                _wrap(self.type_of(item, level)) for item in schema["allOf"]
            )

        schema_type = schema.get("type")
        if isinstance(schema_type, list):
            variants = [
                self.type_of({**schema, "type": item}, level) for item in schema_type
            ]
            return " | ".join(dict.fromkeys(variants)) or "unknown"

        if schema_type == "array":
            items = schema.get("items")
            if isinstance(items, list):
                items = items[0] if items else None
            if not isinstance(items, dict) or not items:
                return "unknown[]"
            return f"{_wrap(self.type_of(items, level))}[]"

        if schema_type == "object" or (
            schema_type is None and isinstance(schema.get("properties"), dict)
        ):
            return self._object(schema, level)

        return PRIMITIVE_TYPES.get(schema_type, "unknown")

    def _object(self, schema: Dict[str, Any], level: int) -> str:
        properties = schema.get("properties")
        properties = properties if isinstance(properties, dict) else {}
        required = schema.get("required")
        required = set(required) if isinstance(required, list) else set()
        additional = schema.get("additionalProperties")

        members: List[str] = []
        inner = self.indent * (level + 1)
        for key, item in properties.items():
            description = item.get("description") if isinstance(item, dict) else None
            members.extend(self._comment(description, level + 1))
            optional = "" if key in required else "?"
            members.append(
                f"{inner}{property_key(str(key))}{optional}: "
                f"{self.type_of(item, level + 1)};"
            )

        if additional is True:
            members.append(f"{inner}[k: string]: unknown;")
        elif isinstance(additional, dict):
            members.append(f"{inner}[k: string]: {self.type_of(additional, level + 1)};")

        if not members:
            return "{}"
        return "{\n" + "\n".join(members) + "\n" + self.indent * level + "}"

    def _comment(self, description: Any, level: int) -> List[str]:
        if not isinstance(description, str) or not description.strip():
            return []
        prefix = self.indent * level
        lines = [prefix + "/**"]
        for line in description.replace("*/", "*\\/").splitlines():
            lines.append(f"{prefix} * {line}".rstrip())
        lines.append(prefix + " */")
        return lines
