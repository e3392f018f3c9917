from .context import RunContext
from .yapi import YApiFetcher

__all__ = ["RunContext", "YApiFetcher"]
