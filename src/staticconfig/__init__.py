"""
Saves and loads configuration objects as JSON files keyed by their type.

The module-level functions operate on :data:`default_store`, a process-wide
:class:`ConfigurationStore`. Applications that need isolated settings can
create their own store instead.
"""

from __future__ import annotations

__all__ = [
    "__version__",
    "ConfigurationStore",
    "LoadResult",
    "SerializerSettings",
    "JsonSerializer",
    "LocalFileSystem",
    "StaticConfigError",
    "DeserializationError",
    "ConfigFormatError",
    "configuration_key",
    "default_store",
    "configuration_path",
    "exists",
    "has",
    "load",
    "get",
    "save",
    "set_root_dir",
    "set_serializer_settings",
]

from pathlib import Path
from typing import Any, TypeVar

from .errors import ConfigFormatError, DeserializationError, StaticConfigError
from .filesystem import LocalFileSystem
from .serializer import JsonSerializer
from .settings import SerializerSettings
from .store import ConfigurationStore, LoadResult, configuration_key
from .version import __version__ as __version__

T = TypeVar("T")

default_store = ConfigurationStore()


def set_root_dir(path: str | Path) -> None:
    """Change the directory searched by the module-level functions."""
    default_store.root_dir = path


def set_serializer_settings(settings: SerializerSettings) -> None:
    """Replace the serializer settings used by the module-level functions."""
    default_store.settings = settings


def configuration_path(cls: type[Any]) -> Path:
    return default_store.configuration_path(cls)


def exists(path: str | Path) -> bool:
    return default_store.exists(path)


def has(cls: type[Any]) -> bool:
    return default_store.has(cls)


def load(cls: type[T], path: str | Path | None = None) -> LoadResult[T]:
    return default_store.load(cls, path)


def get(cls: type[T], path: str | Path | None = None) -> T:
    return default_store.get(cls, path)


def save(cls: type[T], config: T | None = None, path: str | Path | None = None) -> bool:
    return default_store.save(cls, config, path)
