"""
Точки расширения: имена, предобработка интерфейсов и пути выходных файлов.

Пользовательская стратегия задается в конфиге строкой "module:attribute",
где attribute - класс-наследник или готовый экземпляр стратегии.
"""

import importlib
from typing import Any, Optional, Type, TypeVar

from ...exceptions import ConfigError
from ..types.models import ExtendedInterface
from ..utils.paths import DEFAULT_OUTPUT_DIR, get_output_file_path
from . import naming

T = TypeVar("T")


class NameStrategy:
    """Имена функции запроса, типов данных и хука"""

    def request_function_name(self, interface: ExtendedInterface) -> str:
        return naming.get_request_function_name(interface.method, interface.path)

    def request_data_type_name(self, interface: ExtendedInterface) -> str:
        return naming.get_request_data_type_name(interface.method, interface.path)

    def response_data_type_name(self, interface: ExtendedInterface) -> str:
        return naming.get_response_data_type_name(interface.method, interface.path)

    def request_hook_name(
        self, interface: ExtendedInterface, request_function_name: str
    ) -> str:
        return naming.get_request_hook_name(request_function_name)


class PreprocessStrategy:
    """Предобработка интерфейса перед генерацией"""

    def preprocess(
        self, interface: ExtendedInterface, config: Any
    ) -> Optional[ExtendedInterface]:
        """
        Получает копию интерфейса. None исключает интерфейс из генерации
        """
        return interface


class OutputPathStrategy:
    """Путь выходного файла интерфейса относительно рабочей директории"""

    def output_file_path(self, interface: ExtendedInterface, config: Any) -> str:
        category_name = interface.category.name if interface.category else ""
        return get_output_file_path(
            category_name, getattr(config, "output_dir", None) or DEFAULT_OUTPUT_DIR
        )


def import_object(reference: str) -> Any:
    """Импорт объекта по строке "package.module:attribute" """
    module_name, _, attribute = reference.partition(":")
    if not module_name or not attribute:
        raise ConfigError(f"Ожидается строка вида 'module:attribute', получено: {reference!r}")
    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConfigError(f"Не удалось импортировать модуль {module_name}: {e}") from e
    try:
        return getattr(module, attribute)
    except AttributeError as e:
        raise ConfigError(f"В модуле {module_name} нет атрибута {attribute}") from e


def load_strategy(reference: Any, base: Type[T]) -> T:
    """Экземпляр стратегии по ссылке из конфига, по умолчанию - base()"""
    if reference is None:
        return base()

    target = import_object(reference) if isinstance(reference, str) else reference
    if isinstance(target, type) and issubclass(target, base):
        return target()
    if isinstance(target, base):
        return target
    raise ConfigError(f"{reference!r} не является стратегией {base.__name__}")
