"""
Тесты генерации объявлений TypeScript
"""

import copy

from api_power.internal.generator.compiler import TypeScriptCompiler, quote, safe_type_name
from api_power.internal.generator.synthesizer import synthesize
from api_power.internal.schema.normalizer import ANY_MARKER


class TestSynthesize:
    """Тесты synthesize"""

    def test_empty_schema(self):
        """Тест пустой схемы"""
        assert synthesize({}, "Foo") == "export interface Foo {}"
        assert synthesize(None, "Foo") == "export interface Foo {}"

    def test_any_marker(self):
        """Тест маркера неизвестного типа"""
        assert synthesize({ANY_MARKER: True}, "Foo") == "export type Foo = any"

    def test_object(self):
        """Тест объектной схемы"""
        schema = {
            "type": "object",
            "properties": {"id": {"type": "integer"}, "name": {"type": "string"}},
            "required": ["id"],
        }

        assert synthesize(schema, "Foo") == (
            "export interface Foo {\n"
            "    id: number;\n"
            "    name?: string;\n"
            "}"
        )

    def test_schema_not_mutated(self):
        """Тест неизменности исходной схемы"""
        schema = {
            "type": "object",
            "title": "&a",
            "description": "Корень",
            "properties": {"a": {"type": "string", "default": "x"}},
        }
        original = copy.deepcopy(schema)

        synthesize(schema, "Foo")

        assert schema == original

    def test_nested_with_descriptions(self):
        """Тест вложенных объектов с комментариями"""
        schema = {
            "type": "object",
            "description": "не попадет в вывод",
            "properties": {
                "user": {
                    "type": "object",
                    "description": "Пользователь",
                    "properties": {"tags": {"type": "array", "items": {"type": "string"}}},
                    "required": ["tags"],
                }
            },
            "required": ["user"],
        }

        assert synthesize(schema, "Foo") == (
            "export interface Foo {\n"
            "    /**\n"
            "     * Пользователь\n"
            "     */\n"
            "    user: {\n"
            "        tags: string[];\n"
            "    };\n"
            "}"
        )

    def test_type_reference(self):
        """Тест ссылки на тип вложенного узла"""
        schema = {
            "type": "object",
            "properties": {
                "item": {"type": "object", "properties": {"id": {"type": "integer"}}},
                "copy": {"type": "object", "title": "&item"},
            },
        }

        code = synthesize(schema, "Foo")

        assert 'copy?: NonNullable<Foo["item"]>;' in code
        assert code.startswith("export interface Foo {")

    def test_non_object_root(self):
        """Тест схемы, не являющейся объектом"""
        assert synthesize({"type": "array", "items": {"type": "integer"}}, "Ids") == (
            "export type Ids = number[];"
        )
        assert synthesize({"type": "string", "enum": ["a", "b"]}, "Kind") == (
            "export type Kind = 'a' | 'b';"
        )


class TestTypeScriptCompiler:
    """Тесты компилятора схем"""

    def test_type_of(self):
        """Тест выражений типов"""
        compiler = TypeScriptCompiler()

        assert compiler.type_of({"type": ["string", "null"]}, 0) == "string | null"
        assert compiler.type_of({"type": "array"}, 0) == "unknown[]"
        assert compiler.type_of({"type": "array", "items": {"anyOf": [{"type": "string"}, {"type": "integer"}]}}, 0) == (
            "(string | number)[]"
        )
        assert compiler.type_of({"allOf": [{"tsType": "A"}, {"tsType": "B | C"}]}, 0) == "A & (B | C)"
        assert compiler.type_of({"const": 1}, 0) == "1"
        assert compiler.type_of({"type": "mystery"}, 0) == "unknown"
        assert compiler.type_of({}, 0) == "unknown"

    def test_object_keys_and_index(self):
        """Тест ключей, не являющихся идентификаторами, и индексной сигнатуры"""
        compiler = TypeScriptCompiler()
        code = compiler.type_of(
            {
                "type": "object",
                "properties": {"content-type": {"type": "string"}},
                "additionalProperties": {"type": "integer"},
            },
            0,
        )

        assert code == "{\n    'content-type'?: string;\n    [k: string]: number;\n}"

    def test_helpers(self):
        """Тест вспомогательных функций"""
        assert quote("it's") == "'it\\'s'"
        assert safe_type_name("1foo-bar") == "_1foobar"
        assert safe_type_name("") == "NoName"
