"""
Работа с путями выходных файлов
"""

import os
import posixpath
import re
from typing import Iterable, List

from anyascii import anyascii

DEFAULT_OUTPUT_DIR = "src/service"
DEFAULT_CATEGORY_DIR = "Default"
ASCII_NAME_RE = re.compile(r"[A-Za-z0-9_-]")
SCRIPT_EXT_RE = re.compile(r"\.(ts|js)x?$", re.IGNORECASE)


def to_unix_path(path: str) -> str:
    return re.sub(r"[/\\]+", "/", path)


def get_normalized_relative_path(from_path: str, to_path: str) -> str:
    """Относительный путь импорта из файла from_path в файл to_path"""
    relative = to_unix_path(os.path.relpath(to_path, os.path.dirname(from_path)))
    if not relative.startswith("."):
        relative = "./" + relative
    return SCRIPT_EXT_RE.sub("", relative)


def get_alias_path(path: str) -> str:
    """Путь вида @/... для файлов внутри src, иначе исходный путь"""
    if path.startswith("@/"):
        return path
    normalized = path.replace("\\", "/")
    index = normalized.rfind("/src/")
    if index == -1:
        return path
    return "@/" + re.sub(r"\.(ts|js|tsx|jsx)$", "", normalized[index + len("/src/"):])


def get_normalized_path_with_alias(from_path: str, to_path: str) -> str:
    alias = get_alias_path(to_path)
    if alias.startswith("@/"):
        return alias
    return get_normalized_relative_path(from_path, to_path)


def romanize(segment: str) -> str:
    """Латинская запись сегмента имени категории"""
    parts: List[str] = []
    for char in segment:
        if ASCII_NAME_RE.match(char):
            parts.append(char)
        elif not char.isascii():
            # 客 -> Ke, неизвестные символы дают пустую строку
            syllable = "".join(filter(str.isalnum, anyascii(char))).lower()
            parts.append(syllable[:1].upper() + syllable[1:])
    return "".join(parts)


def get_output_file_path(category_name: str, output_dir: str = DEFAULT_OUTPUT_DIR) -> str:
    """
    Путь модуля категории: "客户管理/业务套餐" -> {output_dir}/KeHuGuanLi/YeWuTaoCan/index.ts
    """
    segments = [romanize(segment) for segment in (category_name or "").split("/")]
    directory = "/".join(filter(None, segments)) or DEFAULT_CATEGORY_DIR
    return f"{output_dir}/{directory}/index.ts"


def _split(path: str) -> List[str]:
    return posixpath.normpath(to_unix_path(path)).split("/")


def transform_paths(paths: Iterable[str], output_dir: str = DEFAULT_OUTPUT_DIR) -> List[str]:
    """Строки index-файла, реэкспортирующие модули каталогов"""
    target = [segment for segment in to_unix_path(output_dir).split("/") if segment]
    lines: List[str] = []
    for original in paths:
        segments = _split(original)
        index = -1
        for start in range(len(segments) - len(target) + 1):
            if segments[start:start + len(target)] == target:
                index = start
                break

        if index == -1:
            lines.append(f"// Не удалось обработать путь: {original}")
            continue

        relative = [segment for segment in segments[index + len(target):] if segment]
        if not relative:
            lines.append(f"// Корневой каталог: {original}")
            continue

        lines.append(f"export * from './{'/'.join(relative)}/index'")
    return lines
