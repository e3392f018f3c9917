from enum import Enum
from functools import cmp_to_key
from pathlib import PurePosixPath
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

WeightVector = Tuple[int, int, int, int]


class Method(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    PATCH = "PATCH"


class RequestBodyType(str, Enum):
    FORM = "form"
    JSON = "json"
    TEXT = "text"
    FILE = "file"
    RAW = "raw"


class ResponseBodyType(str, Enum):
    JSON = "json"
    TEXT = "text"
    XML = "xml"
    RAW = "raw"


def _required_flag(value) -> str:
    """YApi хранит обязательность как "1"/"0", адаптеры иногда отдают bool"""
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


class WireModel(BaseModel):
    """Базовая модель канонического формата - лишние поля сохраняются"""

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class FormItem(WireModel):
    name: str
    type: str = "text"
    required: str = "1"
    desc: Optional[str] = ""

    @field_validator("required", mode="before")
    def required_check(cls, value):
        return _required_flag(value)


class QueryItem(WireModel):
    name: str
    type: Optional[str] = None
    required: str = "1"
    desc: Optional[str] = ""
    schema_: Optional[Dict[str, Any]] = Field(default=None, alias="schema")

    @field_validator("required", mode="before")
    def required_check(cls, value):
        return _required_flag(value)


class ParamItem(WireModel):
    name: str
    type: Optional[str] = None
    desc: Optional[str] = ""
    schema_: Optional[Dict[str, Any]] = Field(default=None, alias="schema")


class Category(WireModel):
    id: int = Field(alias="_id")
    name: str = ""
    desc: Optional[str] = ""
    url: str = Field(default="", alias="_url")


class RawInterface(WireModel):
    id: int = Field(alias="_id")
    method: str = "GET"
    path: str = "/"
    title: str = ""
    tag: List[str] = []
    catid: int = 0
    project_id: int = 0
    desc: Optional[str] = ""
    up_time: int = 0
    url: str = Field(default="", alias="_url")

    req_body_type: Optional[str] = None
    req_body_form: List[FormItem] = []
    req_body_other: Optional[str] = None
    req_body_is_json_schema: bool = False
    req_query: List[QueryItem] = []
    req_params: List[ParamItem] = []

    res_body_type: Optional[str] = None
    res_body: Optional[str] = None
    res_body_is_json_schema: bool = False

    @field_validator("tag", mode="before")
    def tag_check(cls, value):
        # YApi иногда отдает null вместо пустого списка
        return value or []


class CategoryExport(WireModel):
    id: int = Field(default=0, alias="_id")
    name: str = ""
    desc: Optional[str] = ""
    url: str = Field(default="", alias="_url")
    list: List[RawInterface] = []


class Environment(WireModel):
    name: str = ""
    domain: str = ""


class ProjectInfo(WireModel):
    id: int = Field(alias="_id")
    name: str = ""
    basepath: str = ""
    env: List[Environment] = []
    url: str = Field(default="", alias="_url")
    server_url: str = ""
    cats: List[Category] = []

    def get_mock_url(self) -> str:
        return f"{self.server_url}/mock/{self.id}"

    def get_dev_url(self, dev_env_name: Optional[str]) -> str:
        return self._env_domain(dev_env_name)

    def get_prod_url(self, prod_env_name: Optional[str]) -> str:
        return self._env_domain(prod_env_name)

    def _env_domain(self, env_name: Optional[str]) -> str:
        for env in self.env:
            if env.name == env_name:
                return env.domain
        return ""


class ParsedPath(BaseModel):
    dir: str = ""
    name: str = ""
    ext: str = ""

    @classmethod
    def parse(cls, path: str) -> "ParsedPath":
        posix = PurePosixPath(path)
        return cls(dir=str(posix.parent), name=posix.stem, ext=posix.suffix)


class ExtendedInterface(RawInterface):
    """Интерфейс с производными полями: разобранный путь и обратные ссылки"""

    parsed_path: ParsedPath = ParsedPath()
    project: Optional[ProjectInfo] = None
    category: Optional[Category] = None

    @classmethod
    def extend(
        cls,
        interface: RawInterface,
        project: Optional[ProjectInfo] = None,
        category: Optional[Category] = None,
    ) -> "ExtendedInterface":
        data = interface.model_dump(by_alias=True)
        data.pop("parsed_path", None)
        data.pop("project", None)
        data.pop("category", None)
        return cls(
            **data,
            parsed_path=ParsedPath.parse(interface.path),
            project=project,
            category=category,
        )


class Fragment(BaseModel):
    """Код одного интерфейса и его позиция во вложенном обходе"""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    weights: WeightVector
    code: str
    config: Any = None
    request_function_file_path: str = ""
    request_hook_maker_file_path: str = ""
    # Адреса prod/dev/mock для файла функции запроса
    server_urls: Dict[str, str] = {}


def compare_weights(left, right) -> int:
    """Лексикографическое сравнение векторов весов с дополнением нулями"""
    size = max(len(left), len(right))
    left = list(left) + [0] * (size - len(left))
    right = list(right) + [0] * (size - len(right))
    for a, b in zip(left, right):
        if a != b:
            return a - b
    return 0


def sort_by_weights(items: list) -> list:
    """Сортировка на месте по полю weights"""
    items.sort(key=cmp_to_key(lambda a, b: compare_weights(a.weights, b.weights)))
    return items


class OutputBucket(BaseModel):
    """Выходной файл: фрагменты всех интерфейсов, попавших в один путь"""

    output_file_path: str
    fragments: List[Fragment] = []

    def add(self, fragment: Fragment) -> Fragment:
        self.fragments.append(fragment)
        return fragment

    @property
    def head(self) -> Optional[Fragment]:
        # Настройки бакета берутся у фрагмента с наименьшим весом,
        # поэтому не зависят от порядка завершения задач
        fragments = sort_by_weights(list(self.fragments))
        return fragments[0] if fragments else None

    @property
    def config(self) -> Any:
        return self.head.config if self.head else None

    @property
    def request_function_file_path(self) -> str:
        return self.head.request_function_file_path if self.head else ""

    @property
    def request_hook_maker_file_path(self) -> str:
        return self.head.request_hook_maker_file_path if self.head else ""

    @property
    def server_urls(self) -> Dict[str, str]:
        return dict(self.head.server_urls) if self.head else {}

    @property
    def content(self) -> List[str]:
        return [
            fragment.code
            for fragment in sort_by_weights(list(self.fragments))
            if fragment.code
        ]

    def render(self) -> str:
        return "\n\n".join(self.content)
