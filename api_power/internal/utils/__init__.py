"""Утилиты для генератора"""

from .paths import (
    DEFAULT_OUTPUT_DIR,
    get_alias_path,
    get_normalized_path_with_alias,
    get_normalized_relative_path,
    get_output_file_path,
    to_unix_path,
    transform_paths,
)

__all__ = [
    "DEFAULT_OUTPUT_DIR",
    "get_alias_path",
    "get_normalized_path_with_alias",
    "get_normalized_relative_path",
    "get_output_file_path",
    "to_unix_path",
    "transform_paths",
]
