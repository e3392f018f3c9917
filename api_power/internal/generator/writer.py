"""
Запись сгенерированных модулей, файла функции запроса и index-файла
"""

import asyncio
import logging
import os
import shutil
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set

from ...exceptions import ApiPowerError
from ..types.models import OutputBucket
from ..utils.paths import get_normalized_path_with_alias, to_unix_path, transform_paths
from .templates import Templates

logger = logging.getLogger(__name__)

INDEX_FILE_NAME = "index.ts"
TSC_OPTIONS = (
    "--target", "ES2019",
    "--module", "ESNext",
    "--jsx", "preserve",
    "--declaration",
    "--esModuleInterop",
)


def _write_file(path: str, content: str) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(content)


def render_module(bucket: OutputBucket) -> str:
    """Содержимое модуля категории"""
    config = bucket.config
    parts = [Templates.module_header.format(notice=Templates.generated_notice)]
    if not config.types_only:
        parts.append(
            Templates.request_import.format(
                request_path=get_normalized_path_with_alias(
                    bucket.output_file_path, bucket.request_function_file_path
                )
            )
        )
        if config.react_hooks.enabled and bucket.request_hook_maker_file_path:
            parts.append(
                Templates.request_hook_maker_import.format(
                    request_hook_maker_path=get_normalized_path_with_alias(
                        bucket.output_file_path, bucket.request_hook_maker_file_path
                    )
                )
            )
    header = "\n".join(parts)
    return (
        f"{header}\n/* prettier-ignore-start */\n"
        f"{bucket.render()}\n"
        "/* prettier-ignore-end */\n"
    )


class OutputWriter:
    """Запись бакетов на диск"""

    def __init__(self, buckets: Dict[str, OutputBucket], cwd: Optional[str] = None):
        self.buckets = buckets
        self.cwd = cwd or os.getcwd()

    async def write(self) -> List[str]:
        """Запись всех файлов, возвращает пути записанных модулей"""
        written: List[str] = []
        for output_file_path, bucket in sorted(self.buckets.items()):
            if not bucket.fragments:
                continue
            config = bucket.config

            if not config.types_only:
                self._write_request_function_file(bucket)
                if config.react_hooks.enabled:
                    self._write_request_hook_maker_file(bucket)

            _write_file(output_file_path, render_module(bucket))
            logger.debug("Записан файл %s", output_file_path)

            if config.target == "javascript":
                await self.compile_to_javascript(output_file_path)
            written.append(output_file_path)

        self.write_index_files(
            item.config.effective_output_dir for item in self.buckets.values() if item.fragments
        )
        return written

    def _write_request_function_file(self, bucket: OutputBucket) -> None:
        path = bucket.request_function_file_path
        if not path or os.path.exists(path):
            return
        urls = bucket.server_urls
        _write_file(
            path,
            Templates.request.format(
                prod_url=urls.get("prod", ""),
                dev_url=urls.get("dev", ""),
                mock_url=urls.get("mock", ""),
            ),
        )
        logger.debug("Создан файл функции запроса %s", path)

    def _write_request_hook_maker_file(self, bucket: OutputBucket) -> None:
        path = bucket.request_hook_maker_file_path
        if not path or os.path.exists(path):
            return
        _write_file(path, Templates.request_hook_maker)
        logger.debug("Создан файл хуков %s", path)

    async def compile_to_javascript(self, output_file_path: str) -> None:
        """Компиляция модуля в JavaScript через tsc, исходный .ts удаляется"""
        try:
            process = await asyncio.create_subprocess_exec(
                "tsc",
                *TSC_OPTIONS,
                output_file_path,
                cwd=self.cwd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise ApiPowerError(f"Не удалось запустить tsc: {e}") from e

        stdout, stderr = await process.communicate()
        if process.returncode != 0:
            output = (stderr or stdout).decode("utf-8", "replace").strip()
            raise ApiPowerError(f"tsc завершился с кодом {process.returncode}: {output}")
        os.remove(output_file_path)

    def write_index_files(self, output_dirs: Iterable[str]) -> List[str]:
        """
        index.ts в каждом корневом каталоге вывода с реэкспортом
        всех подкаталогов, содержащих модуль
        """
        written = []
        for output_dir in sorted(set(output_dirs)):
            root = to_unix_path(os.path.normpath(os.path.join(self.cwd, output_dir)))
            directories = self._module_directories(root)
            if not directories:
                continue
            lines = transform_paths(directories, root)
            content = Templates.index_header.format(notice=Templates.generated_notice)
            content += "\n" + "\n".join(lines) + "\n\n/* prettier-ignore-end */\n"
            index_path = f"{root}/{INDEX_FILE_NAME}"
            _write_file(index_path, content)
            written.append(index_path)
            logger.debug("Записан index-файл %s", index_path)
        return written

    def _module_directories(self, root: str) -> List[str]:
        directories: Set[str] = set()
        for output_file_path in self.buckets:
            directory = to_unix_path(os.path.dirname(output_file_path))
            if directory != root and directory.startswith(root + "/"):
                directories.add(directory)

        try:
            for path in Path(root).rglob(INDEX_FILE_NAME):
                directory = to_unix_path(str(path.parent))
                if directory != root:
                    directories.add(directory)
        except OSError as e:
            logger.warning("Не удалось просмотреть каталог %s: %s", root, e)
        return sorted(directories)


def clean_output_directory(output_dir: str, request_function_file_path: Optional[str] = None) -> None:
    """
    Очистка каталога вывода. Файл функции запроса внутри каталога
    сохраняется вместе с содержимым
    """
    if not os.path.isdir(output_dir):
        return

    preserved: Optional[str] = None
    request_path = os.path.abspath(request_function_file_path) if request_function_file_path else None
    if request_path and request_path.startswith(os.path.abspath(output_dir) + os.sep):
        try:
            with open(request_path, "r", encoding="utf-8") as f:
                preserved = f.read()
        except OSError as e:
            logger.warning("Не удалось прочитать %s: %s", request_path, e)

    for entry in os.scandir(output_dir):
        try:
            if entry.is_dir(follow_symlinks=False):
                shutil.rmtree(entry.path)
            else:
                os.remove(entry.path)
        except OSError as e:
            logger.warning("Не удалось удалить %s: %s", entry.path, e)

    if preserved is not None:
        _write_file(request_path, preserved)
