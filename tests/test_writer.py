"""
Тесты записи файлов
"""

import os
import tempfile

import pytest

from api_power.config import SyntheticalConfig
from api_power.internal.generator.writer import OutputWriter, clean_output_directory, render_module
from api_power.internal.types.models import Fragment, OutputBucket


def make_bucket(root: str, category: str = "Users", **config) -> OutputBucket:
    output_dir = os.path.join(root, "src", "service")
    hook_maker_path = (
        os.path.join(output_dir, "makeRequestHook.ts")
        if config.get("react_hooks", {}).get("enabled")
        else ""
    )
    bucket = OutputBucket(output_file_path=os.path.join(output_dir, category, "index.ts"))
    bucket.add(
        Fragment(
            weights=(0, 0, 0, 1),
            code="export interface B {}",
            config=SyntheticalConfig(**config),
            request_function_file_path=os.path.join(output_dir, "request.ts"),
            request_hook_maker_file_path=hook_maker_path,
            server_urls={"prod": "https://prod.example.com", "dev": "", "mock": ""},
        )
    )
    bucket.add(
        Fragment(
            weights=(0, 0, 0, 0),
            code="export interface A {}",
            config=SyntheticalConfig(**config),
            request_function_file_path=os.path.join(output_dir, "request.ts"),
            request_hook_maker_file_path=hook_maker_path,
            server_urls={"prod": "https://prod.example.com", "dev": "", "mock": ""},
        )
    )
    return bucket


def read(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


class TestRenderModule:
    """Тесты содержимого модуля"""

    def test_module(self):
        """Тест заголовка, импорта и порядка фрагментов"""
        content = render_module(make_bucket("/project"))

        assert content.startswith("/* tslint:disable */\n/* eslint-disable */\n")
        assert "type FileData = File" in content
        assert "import request from '@/service/request'" in content
        assert "/* prettier-ignore-start */\nexport interface A {}\n\nexport interface B {}\n/* prettier-ignore-end */\n" in content

    def test_types_only(self):
        """Тест модуля только с типами"""
        content = render_module(make_bucket("/project", types_only=True))

        assert "import request" not in content
        assert "type FileData = File" in content


class TestOutputWriter:
    """Тесты записи на диск"""

    @pytest.mark.asyncio
    async def test_write(self):
        """Тест записи модулей, файла запроса и index-файла"""
        with tempfile.TemporaryDirectory() as temp_dir:
            users = make_bucket(temp_dir, "Users")
            orders = make_bucket(temp_dir, "Orders")
            buckets = {users.output_file_path: users, orders.output_file_path: orders}

            written = await OutputWriter(buckets, temp_dir).write()

            service_dir = os.path.join(temp_dir, "src", "service")
            assert sorted(written) == sorted(buckets)
            assert "export interface A {}" in read(users.output_file_path)

            request = read(os.path.join(service_dir, "request.ts"))
            assert "prod: 'https://prod.example.com'" in request
            assert "export default request" in request
            assert not os.path.exists(os.path.join(service_dir, "makeRequestHook.ts"))

            index = read(os.path.join(service_dir, "index.ts"))
            assert "export * from './Orders/index'" in index
            assert "export * from './Users/index'" in index
            assert index.startswith("/* prettier-ignore-start */")

    @pytest.mark.asyncio
    async def test_request_file_not_overwritten(self):
        """Тест сохранения существующего файла функции запроса"""
        with tempfile.TemporaryDirectory() as temp_dir:
            bucket = make_bucket(temp_dir)
            request_path = bucket.request_function_file_path
            os.makedirs(os.path.dirname(request_path), exist_ok=True)
            with open(request_path, "w", encoding="utf-8") as f:
                f.write("// свой request")

            await OutputWriter({bucket.output_file_path: bucket}, temp_dir).write()

            assert read(request_path) == "// свой request"

    @pytest.mark.asyncio
    async def test_react_hooks(self):
        """Тест файла создания хуков"""
        with tempfile.TemporaryDirectory() as temp_dir:
            bucket = make_bucket(temp_dir, react_hooks={"enabled": True})
            await OutputWriter({bucket.output_file_path: bucket}, temp_dir).write()

            hook_maker = read(os.path.join(temp_dir, "src", "service", "makeRequestHook.ts"))
            assert "export default function makeRequestHook" in hook_maker
            assert "import makeRequestHook from '@/service/makeRequestHook'" in read(bucket.output_file_path)

    @pytest.mark.asyncio
    async def test_types_only_skips_request_file(self):
        """Тест режима только типов"""
        with tempfile.TemporaryDirectory() as temp_dir:
            bucket = make_bucket(temp_dir, types_only=True)

            await OutputWriter({bucket.output_file_path: bucket}, temp_dir).write()

            assert not os.path.exists(bucket.request_function_file_path)
            assert os.path.exists(bucket.output_file_path)


class TestCleanOutputDirectory:
    """Тесты очистки каталога вывода"""

    def test_clean_keeps_request_file(self):
        """Тест сохранения файла функции запроса при очистке"""
        with tempfile.TemporaryDirectory() as temp_dir:
            output_dir = os.path.join(temp_dir, "src", "service")
            os.makedirs(os.path.join(output_dir, "Users"))
            with open(os.path.join(output_dir, "Users", "index.ts"), "w", encoding="utf-8") as f:
                f.write("old")
            request_path = os.path.join(output_dir, "request.ts")
            with open(request_path, "w", encoding="utf-8") as f:
                f.write("// свой request")

            clean_output_directory(output_dir, request_path)

            assert os.listdir(output_dir) == ["request.ts"]
            assert read(request_path) == "// свой request"

    def test_clean_missing_directory(self):
        """Тест очистки несуществующего каталога"""
        with tempfile.TemporaryDirectory() as temp_dir:
            clean_output_directory(os.path.join(temp_dir, "missing"))
            assert os.listdir(temp_dir) == []
