"""
Генерация объявления типа по JSON Schema
"""

import copy
from typing import Any, Dict, Optional

from ..schema.normalizer import (
    ANY_MARKER,
    prepare_for_compile,
    resolve_type_references,
)
from .compiler import TypeScriptCompiler

# Компилятор приводит имя типа к своему виду, поэтому
# компилируем под заглушкой и подставляем настоящее имя после
PLACEHOLDER_TYPE_NAME = "THISISAFAKETYPENAME"


def synthesize(
    schema: Optional[Dict[str, Any]],
    type_name: str,
    compiler: Optional[TypeScriptCompiler] = None,
) -> str:
    """Объявление типа type_name, исходная схема не изменяется"""
    if not schema:
        return f"export interface {type_name} {{}}"
    if schema.get(ANY_MARKER):
        return f"export type {type_name} = any"

    prepared = prepare_for_compile(copy.deepcopy(schema))
    resolve_type_references(prepared, type_name)
    code = (compiler or TypeScriptCompiler()).compile(prepared, PLACEHOLDER_TYPE_NAME)
    return code.replace(PLACEHOLDER_TYPE_NAME, type_name, 1).strip()
