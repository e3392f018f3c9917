"""
Тесты имен функций, типов и стратегий
"""

import pytest

from api_power.exceptions import ConfigError
from api_power.internal.generator.naming import (
    camel_case,
    get_path_part,
    get_request_data_type_name,
    get_request_function_name,
    get_request_hook_name,
    get_response_data_type_name,
    pascal_case,
    split_words,
)
from api_power.internal.generator.strategies import (
    NameStrategy,
    OutputPathStrategy,
    PreprocessStrategy,
    load_strategy,
)
from api_power.internal.types.models import Category, ExtendedInterface, RawInterface


class UpperNameStrategy(NameStrategy):
    def request_function_name(self, interface):
        return interface.path.strip("/").upper()


class TestNaming:
    """Тесты генерации имен"""

    def test_request_function_name(self):
        """Тест имени функции запроса"""
        assert get_request_function_name("GET", "/api/customer/v1/region/listDwg") == (
            "getCustomerV1RegionListDwgApi"
        )
        assert get_request_function_name("GET", "/api/system/v1/menu/query/{menuId}") == (
            "getSystemV1MenuQueryByMenuIdApi"
        )

    def test_type_names(self):
        """Тест имен типов запроса и ответа"""
        assert get_request_data_type_name("GET", "/api/customer/v1/region/listDwg") == (
            "GetCustomerV1RegionListDwgRequestType"
        )
        assert get_response_data_type_name("post", "/user/{user_id}/avatar") == (
            "PostUserByUserIdAvatarResponseType"
        )

    def test_empty_method(self):
        """Тест пустого метода"""
        assert get_request_function_name("", "/ping") == "getPingApi"

    def test_hook_name(self):
        """Тест имени хука"""
        assert get_request_hook_name("getUserApi") == "useGetUserApi"

    def test_case_transform(self):
        """Тест преобразования регистра"""
        assert split_words("XMLHttpRequest") == ["XML", "Http", "Request"]
        assert split_words("user_list-v2") == ["user", "list", "v2"]
        assert pascal_case("user_list") == "UserList"
        assert pascal_case("version 2") == "Version_2"
        assert camel_case("User-Name") == "userName"

    def test_path_part(self):
        """Тест части имени из пути"""
        assert get_path_part("/api/") == ""
        assert get_path_part("/apiary/list") == "ApiaryList"
        assert get_path_part("api/a/b") == "AB"


class TestStrategies:
    """Тесты стратегий"""

    def make_interface(self, category_name: str = "Users") -> ExtendedInterface:
        return ExtendedInterface.extend(
            RawInterface.model_validate({"_id": 1, "method": "GET", "path": "/users/list"}),
            category=Category(_id=1, name=category_name),
        )

    def test_defaults(self):
        """Тест стратегий по умолчанию"""
        interface = self.make_interface()

        names = load_strategy(None, NameStrategy)
        assert names.request_function_name(interface) == "getUsersListApi"
        assert names.request_hook_name(interface, "getUsersListApi") == "useGetUsersListApi"

        preprocess = load_strategy(None, PreprocessStrategy)
        assert preprocess.preprocess(interface, None) is interface

        output = load_strategy(None, OutputPathStrategy)
        assert output.output_file_path(interface, None) == "src/service/Users/index.ts"

    def test_parsed_path(self):
        """Тест разобранного пути интерфейса"""
        interface = self.make_interface()
        assert interface.parsed_path.dir == "/users"
        assert interface.parsed_path.name == "list"

    def test_load_by_reference(self):
        """Тест загрузки стратегии по строке module:attribute"""
        strategy = load_strategy(f"{__name__}:UpperNameStrategy", NameStrategy)
        assert strategy.request_function_name(self.make_interface()) == "USERS/LIST"

        assert isinstance(load_strategy(UpperNameStrategy, NameStrategy), UpperNameStrategy)

    def test_bad_reference(self):
        """Тест некорректной ссылки на стратегию"""
        with pytest.raises(ConfigError):
            load_strategy("no_colon", NameStrategy)
        with pytest.raises(ConfigError):
            load_strategy("module_that_does_not_exist:Strategy", NameStrategy)
        with pytest.raises(ConfigError):
            load_strategy(f"{__name__}:TestNaming", NameStrategy)
