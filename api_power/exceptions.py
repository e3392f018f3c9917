"""
Исключения генератора
"""

from typing import Any, Dict, Optional
from urllib.parse import urlencode


class ApiPowerError(Exception):
    """Базовая ошибка генератора"""


class ConfigError(ApiPowerError):
    """Ошибка конфигурации - прерывает запуск до любых запросов"""


class UpstreamError(ApiPowerError):
    def __init__(
        self,
        message: str,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        status_code: Optional[int] = None,
    ):
        self.message = message
        self.url = url
        self.params = params or {}
        self.status_code = status_code
        super().__init__(
            f"{message} [url: {url}] [params: {urlencode(self.params)}]"
        )


class SchemaParseError(ApiPowerError):
    """Не удалось разобрать JSON или нестрогий JSON тела запроса или ответа"""

    def __init__(self, message: str, source: str = ""):
        self.source = source
        super().__init__(message)


class SchemaCycleError(ApiPowerError):
    """В дереве схемы обнаружен цикл"""

    def __init__(self, path):
        self.path = list(path)
        super().__init__(
            "Цикл в схеме: /" + "/".join(str(segment) for segment in self.path)
        )
