"""
Конфигурация генератора (apipower.toml)
"""

import os
from typing import Any, Dict, List, Literal, Optional, Union

import toml
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from .exceptions import ConfigError
from .internal.generator.strategies import (
    NameStrategy,
    OutputPathStrategy,
    PreprocessStrategy,
    load_strategy,
)
from .internal.utils.paths import DEFAULT_OUTPUT_DIR

CONFIG_FILE_NAME = "apipower.toml"


class CommentConfig(BaseModel):
    """Что выводить в комментарии к интерфейсу"""

    enabled: bool = True
    title: bool = True
    category: bool = True
    tag: bool = True
    request_header: bool = True
    update_time: bool = True
    link: bool = True


class ReactHooksConfig(BaseModel):
    enabled: bool = False
    request_hook_maker_file_path: Optional[str] = None


class SharedConfig(BaseModel):
    """Настройки, которые можно задать на любом уровне"""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    output_dir: Optional[str] = None
    path_prefix: Optional[str] = None
    data_key: Union[str, List[str], None] = None
    custom_type_mapping: Dict[str, str] = {}
    types_only: bool = False
    target: Literal["typescript", "javascript"] = "typescript"
    react_hooks: ReactHooksConfig = ReactHooksConfig()
    request_function_file_path: Optional[str] = None
    prod_env_name: Optional[str] = None
    dev_env_name: Optional[str] = None
    comment: CommentConfig = CommentConfig()
    # "module:attribute" или объект стратегии
    name_strategy: Optional[Any] = None
    preprocess_strategy: Optional[Any] = None
    output_path_strategy: Optional[Any] = None


class CategoryConfig(SharedConfig):
    # 0 - все категории, отрицательные id исключаются
    id: Union[int, List[int]]


class ProjectConfig(SharedConfig):
    token: Union[str, List[str]]
    categories: List[CategoryConfig] = []

    @property
    def tokens(self) -> List[str]:
        return [self.token] if isinstance(self.token, str) else list(self.token)


class ServerConfig(SharedConfig):
    server_url: str = ""
    server_type: Literal["yapi", "swagger", "apifox"] = "yapi"
    apifox_project_id: Optional[str] = None
    projects: List[ProjectConfig] = []

    @field_validator("apifox_project_id", mode="before")
    def apifox_project_id_check(cls, value):
        return None if value is None else str(value)


class SyntheticalConfig(SharedConfig):
    """Итоговые настройки одной категории"""

    server_url: str = ""
    server_type: str = "yapi"
    token: str = ""
    id: int = 0

    @classmethod
    def merge(
        cls,
        server: ServerConfig,
        project: ProjectConfig,
        category: CategoryConfig,
        token: str,
        category_id: int,
    ) -> "SyntheticalConfig":
        """Поверхностное слияние уровней: явно заданные поля переопределяют"""
        data: Dict[str, Any] = {}
        data.update(server.model_dump(exclude_unset=True, exclude={"projects", "apifox_project_id"}))
        data.update(project.model_dump(exclude_unset=True, exclude={"categories", "token"}))
        data.update(category.model_dump(exclude_unset=True, exclude={"id"}))
        data.update(
            server_url=server.server_url,
            server_type=server.server_type,
            token=token,
            id=category_id,
        )
        return cls(**data)

    @property
    def effective_output_dir(self) -> str:
        return self.output_dir or DEFAULT_OUTPUT_DIR

    def get_name_strategy(self) -> NameStrategy:
        return load_strategy(self.name_strategy, NameStrategy)

    def get_preprocess_strategy(self) -> PreprocessStrategy:
        return load_strategy(self.preprocess_strategy, PreprocessStrategy)

    def get_output_path_strategy(self) -> OutputPathStrategy:
        return load_strategy(self.output_path_strategy, OutputPathStrategy)


class ApiPowerConfig(BaseModel):
    """Конфигурация генератора"""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    servers: List[ServerConfig] = []
    # "module:attribute" класса хуков запуска
    hooks: Optional[Any] = None

    @classmethod
    def from_file(cls, config_path: str = CONFIG_FILE_NAME) -> "ApiPowerConfig":
        """Загрузка конфигурации из файла"""
        if not os.path.exists(config_path):
            raise ConfigError(f"Не найден файл конфигурации: {config_path}")

        try:
            config_data = toml.load(config_path)
        except (toml.TomlDecodeError, OSError) as e:
            raise ConfigError(f"Не удалось прочитать {config_path}: {e}") from e

        return cls.from_dict(config_data)

    @classmethod
    def from_dict(cls, config_data: Dict[str, Any]) -> "ApiPowerConfig":
        try:
            config = cls.model_validate(config_data)
        except ValidationError as e:
            raise ConfigError(f"Некорректная конфигурация: {e}") from e
        config.validate_required()
        return config

    def validate_required(self) -> None:
        """Проверка обязательных параметров до любых запросов"""
        if not self.servers:
            raise ConfigError("В конфигурации не указан ни один сервер")

        for index, server in enumerate(self.servers):
            if not server.server_url:
                raise ConfigError(f"servers[{index}]: не указан server_url")
            if server.server_type == "apifox" and not server.apifox_project_id:
                raise ConfigError(f"servers[{index}]: не указан apifox_project_id")
            for project_index, project in enumerate(server.projects):
                if not project.tokens or not all(project.tokens):
                    raise ConfigError(
                        f"servers[{index}].projects[{project_index}]: не указан token"
                    )

    def save_to_file(self, config_path: str = CONFIG_FILE_NAME) -> None:
        """Сохранение конфигурации в файл"""
        config_data = self.model_dump(exclude_unset=True, exclude_none=True)

        with open(config_path, "w", encoding="utf-8") as f:
            toml.dump(config_data, f)

    @classmethod
    def default(cls) -> "ApiPowerConfig":
        """Стартовая конфигурация для команды init"""
        return cls(
            servers=[
                ServerConfig(
                    server_url="http://127.0.0.1:3000",
                    server_type="yapi",
                    types_only=False,
                    target="typescript",
                    react_hooks=ReactHooksConfig(enabled=False),
                    prod_env_name="production",
                    output_dir=DEFAULT_OUTPUT_DIR,
                    request_function_file_path=f"{DEFAULT_OUTPUT_DIR}/request.ts",
                    data_key="data",
                    projects=[
                        ProjectConfig(
                            token="hello",
                            categories=[CategoryConfig(id=0)],
                        )
                    ],
                )
            ]
        )
