"""Context object that grows a registry alongside its raw columns."""

from flagfield.build.builder import FlagBuilder

__all__ = [
    "FlagBuilder",
]
