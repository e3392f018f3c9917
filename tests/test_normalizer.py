"""
Тесты нормализации JSON Schema
"""

import copy

import pytest

from api_power.exceptions import SchemaCycleError
from api_power.internal.schema.normalizer import (
    REFERENCE_KEY,
    TS_TYPE_KEY,
    TypeReference,
    prepare_for_compile,
    process_json_schema,
    reach_json_schema,
    resolve_type_references,
    traverse_json_schema,
    wrap_json_schema,
)


class TestProcessJsonSchema:
    """Тесты приведения схемы к стандартному виду"""

    def test_type_mapping(self):
        """Тест сопоставления типов без учета регистра"""
        schema = process_json_schema(
            {
                "type": "object",
                "properties": {
                    "a": {"type": "Int"},
                    "b": {"type": "DOUBLE"},
                    "c": {"type": "char"},
                    "d": {"type": "void"},
                    "e": {"type": ["Long", "null"]},
                },
            }
        )

        properties = schema["properties"]
        assert properties["a"] == {"type": "integer"}
        assert properties["b"] == {"type": "number"}
        assert properties["c"] == {"type": "string"}
        assert properties["d"] == {"type": "null"}
        assert properties["e"] == {"type": ["integer", "null"]}

    def test_custom_type_mapping_wins(self):
        """Тест приоритета пользовательского сопоставления"""
        schema = process_json_schema({"type": "int"}, {"INT": "string"})
        assert schema == {"type": "string"}

    def test_tuple_collapse(self):
        """Тест сведения кортежа к первому элементу"""
        schema = process_json_schema(
            {"type": "array", "items": [{"type": "string"}, {"type": "integer"}]}
        )
        assert schema == {"type": "array", "items": {"type": "string"}}

    def test_refs_removed(self):
        """Тест удаления остатков ссылок"""
        schema = process_json_schema(
            {"$ref": "#/definitions/A", "type": "object", "properties": {"x": {"$$ref": "B"}}}
        )
        assert "$ref" not in schema
        assert schema["properties"]["x"] == {}

    def test_keys_and_required_trimmed(self):
        """Тест обрезки пробелов в именах свойств и required"""
        schema = process_json_schema(
            {
                "type": "object",
                "properties": {" name ": {"type": "string"}},
                "required": [" name "],
            }
        )
        assert list(schema["properties"]) == ["name"]
        assert schema["required"] == ["name"]

    def test_list_properties_repaired(self):
        """Тест преобразования properties-списка в словарь"""
        schema = process_json_schema(
            {"type": "object", "properties": [{"name": "id", "type": "Int"}]}
        )
        assert schema["properties"]["id"]["type"] == "integer"

    def test_list_properties_without_name(self):
        """Тест элементов properties-списка без имени"""
        schema = process_json_schema(
            {
                "type": "object",
                "properties": [{"type": "string"}, {"name": 1}, {"name": " id ", "type": "Int"}],
            }
        )
        assert schema["properties"] == {"id": {"name": " id ", "type": "integer"}}

    def test_idempotence(self):
        """Тест идемпотентности нормализации"""
        source = {
            "type": "object",
            "properties": {
                " list ": {
                    "type": "Array",
                    "items": [{"type": "object", "properties": {"v": {"type": "float"}}}],
                },
                "flag": {"anyOf": [{"type": "Boolean"}, {"type": "null"}]},
            },
            "required": [" list "],
        }
        once = process_json_schema(copy.deepcopy(source))
        twice = process_json_schema(copy.deepcopy(once))
        assert once == twice


class TestTraverseJsonSchema:
    """Тесты обхода схемы"""

    def test_visit_order_and_paths(self):
        """Тест порядка обхода: узел раньше потомков"""
        visited = []
        traverse_json_schema(
            {
                "type": "object",
                "properties": {
                    "a": {"type": "array", "items": {"type": "string"}},
                    "b": {"oneOf": [{"type": "integer"}]},
                },
            },
            lambda node, path: visited.append(path),
        )
        assert visited == [(), ("a",), ("a", 0), ("b",), ("b",)]

    def test_cycle_detected(self):
        """Тест обнаружения цикла в схеме"""
        node = {"type": "object", "properties": {}}
        node["properties"]["self"] = node

        with pytest.raises(SchemaCycleError) as error:
            process_json_schema(node)
        assert error.value.path == ["self"]

    def test_shared_subtree_allowed(self):
        """Тест общего поддерева без цикла"""
        shared = {"type": "Int"}
        schema = process_json_schema(
            {"type": "object", "properties": {"x": shared, "y": shared}}
        )
        assert schema["properties"]["y"]["type"] == "integer"


class TestTypeReferences:
    """Тесты ссылок на типы вида &relative/path"""

    def test_parse_relative_path(self):
        """Тест разрешения пути относительно узла"""
        reference = TypeReference.parse("&a/b", ("c",))
        assert reference.segments == ("a", "b")

        reference = TypeReference.parse("&../x", ("list", "item"))
        assert reference.segments == ("x",)

    def test_render(self):
        """Тест вывода ссылки на тип"""
        reference = TypeReference(segments=("a", "b"))
        assert reference.render("Foo") == 'NonNullable<NonNullable<Foo["a"]>["b"]>'

    def test_prepare_and_resolve(self):
        """Тест подготовки схемы к компиляции и разрешения ссылок"""
        schema = {
            "type": "object",
            "description": "корень",
            "properties": {
                "a": {"type": "object", "properties": {"b": {"type": "string"}}},
                "c": {"type": "string", "title": "&a/b", "default": "x"},
                "d": {"type": "array", "minItems": 1, "items": {"type": "string"}},
                "e": {"type": "string", "description": "&a"},
            },
        }

        prepared = prepare_for_compile(schema)
        assert "description" not in prepared
        assert prepared["additionalProperties"] is False
        assert "title" not in prepared["properties"]["c"]
        assert "default" not in prepared["properties"]["c"]
        assert "minItems" not in prepared["properties"]["d"]
        assert prepared["properties"]["c"][REFERENCE_KEY].segments == ("a", "b")

        resolve_type_references(prepared, "Foo")
        c = prepared["properties"]["c"]
        assert REFERENCE_KEY not in c
        assert c[TS_TYPE_KEY] == 'NonNullable<NonNullable<Foo["a"]>["b"]>'
        assert prepared["properties"]["e"][TS_TYPE_KEY] == 'NonNullable<Foo["a"]>'


class TestReachJsonSchema:
    """Тесты поиска вложенной схемы по data_key"""

    SCHEMA = {
        "type": "object",
        "properties": {
            "data": {
                "type": "object",
                "properties": {"list": {"type": "array", "items": {"type": "string"}}},
            }
        },
    }

    def test_reach_existing(self):
        """Тест поиска существующего пути"""
        assert reach_json_schema(self.SCHEMA, "data")["type"] == "object"
        assert reach_json_schema(self.SCHEMA, ["data", "list"])["type"] == "array"

    def test_reach_missing_returns_original(self):
        """Тест несуществующего пути"""
        assert reach_json_schema(self.SCHEMA, "missing") is self.SCHEMA
        assert reach_json_schema(self.SCHEMA, ["data", "missing"]) is self.SCHEMA
        assert reach_json_schema({"type": "string"}, "data") == {"type": "string"}

    def test_wrap_then_reach(self):
        """Тест обратимости wrap и reach"""
        inner = {"type": "object", "properties": {"id": {"type": "integer"}}}
        wrapped = wrap_json_schema(inner, ["result", "data"])
        assert reach_json_schema(wrapped, ["result", "data"]) == inner
