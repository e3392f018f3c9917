"""
Имена функций запроса и типов по методу и пути интерфейса.

Примеры:
  GET /api/customer/v1/region/listDwg    -> getCustomerV1RegionListDwgApi
  GET /api/system/v1/menu/query/{menuId} -> getSystemV1MenuQueryByMenuIdApi
"""

import re
from typing import List

PATH_PARAM_RE = re.compile(r"\{([^}]+)\}")
SEPARATOR_RE = re.compile(r"[\W_]+")


def split_words(value: str) -> List[str]:
    """Разбиение строки на слова по границам регистра и разделителям"""
    words: List[str] = []
    for chunk in SEPARATOR_RE.split(value or ""):
        if not chunk:
            continue
        word = chunk[0]
        for index in range(1, len(chunk)):
            previous, char = chunk[index - 1], chunk[index]
            following = chunk[index + 1] if index + 1 < len(chunk) else ""
            # fooBar, v1Api
            lower_upper = char.isupper() and (previous.islower() or previous.isdigit())
            # XMLHttp
            upper_upper = char.isupper() and previous.isupper() and following.islower()
            if lower_upper or upper_upper:
                words.append(word)
                word = char
            else:
                word += char
        words.append(word)
    return words


def _pascal_word(word: str, index: int) -> str:
    first = word[0]
    # Цифра в начале не первого слова отделяется подчеркиванием
    initial = "_" + first if index > 0 and first.isdigit() else first.upper()
    return initial + word[1:].lower()


def pascal_case(value: str) -> str:
    return "".join(_pascal_word(word, index) for index, word in enumerate(split_words(value)))


def camel_case(value: str) -> str:
    return "".join(
        word.lower() if index == 0 else _pascal_word(word, index)
        for index, word in enumerate(split_words(value))
    )


def upper_case_first(value: str) -> str:
    return value[:1].upper() + value[1:]


def get_path_part(path: str) -> str:
    """Часть имени, получаемая из пути"""
    path = re.sub(r"^/+", "", path or "")
    path = re.sub(r"^api/+", "", path)
    path = PATH_PARAM_RE.sub(lambda match: "By" + pascal_case(match.group(1)), path)
    return "".join(pascal_case(segment) for segment in path.split("/") if segment)


def get_request_function_name(method: str, path: str) -> str:
    return f"{(method or 'get').lower()}{get_path_part(path)}Api"


def get_request_data_type_name(method: str, path: str) -> str:
    return f"{pascal_case((method or 'get').lower())}{get_path_part(path)}RequestType"


def get_response_data_type_name(method: str, path: str) -> str:
    return f"{pascal_case((method or 'get').lower())}{get_path_part(path)}ResponseType"


def get_request_hook_name(request_function_name: str) -> str:
    return f"use{pascal_case(request_function_name)}"
