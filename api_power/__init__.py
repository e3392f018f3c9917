from .config import ApiPowerConfig
from .exceptions import ApiPowerError, ConfigError, SchemaCycleError, SchemaParseError, UpstreamError
from .generator import ApiPowerGenerator, Hooks

__all__ = [
    "ApiPowerConfig",
    "ApiPowerError",
    "ApiPowerGenerator",
    "ConfigError",
    "Hooks",
    "SchemaCycleError",
    "SchemaParseError",
    "UpstreamError",
]
