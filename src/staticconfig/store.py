"""
Type-keyed persistence of configuration objects.

A :class:`ConfigurationStore` maps a configuration class to a JSON file under
its root directory, named after the class's fully-qualified name. Loading a
class either decodes the existing file or writes a default instance, so a
backing file always exists once :meth:`ConfigurationStore.load` returns.
"""

from __future__ import annotations

__all__ = [
    "ConfigurationStore",
    "LoadResult",
    "configuration_key",
]

import logging
from pathlib import Path
from typing import Any, Generic, NamedTuple, TypeVar

from staticconfig.errors import DeserializationError
from staticconfig.filesystem import FileSystem, LocalFileSystem
from staticconfig.paths import CONFIG_SUFFIX, USER_CONFIG_DIR
from staticconfig.serializer import JsonSerializer, Serializer
from staticconfig.settings import SerializerSettings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LoadResult(NamedTuple, Generic[T]):
    """Outcome of :meth:`ConfigurationStore.load`.

    Attributes:
        config: The loaded or newly created configuration.
        is_new: True if no file existed and a default was written.
    """

    config: T
    is_new: bool


def configuration_key(cls: type[Any]) -> str:
    """Return the identifier used to name the file of ``cls``.

    Defaults to the fully-qualified class name. A class may declare a string
    ``__config_key__`` attribute to pick its own stable identifier; the
    attribute is not inherited, so subclasses get their own key.

    Classes defined inside a function have ``<locals>`` in their qualified
    name, which is not a portable file name. They must declare
    ``__config_key__``.

    Args:
        cls: Configuration class.

    Returns:
        str: The configuration key.

    Raises:
        TypeError: If ``__config_key__`` is set but is not a non-empty string,
            or if ``cls`` is a local class without ``__config_key__``.
    """
    key = cls.__dict__.get("__config_key__")
    if key is None:
        if "<" in cls.__qualname__:
            raise TypeError(
                f"{cls.__qualname__} is defined in a local scope; "
                "set __config_key__ to name its configuration file"
            )
        return f"{cls.__module__}.{cls.__qualname__}"
    if not isinstance(key, str) or not key.strip():
        raise TypeError(
            f"__config_key__ of {cls.__qualname__} must be a non-empty string"
        )
    return key.strip()


class ConfigurationStore:
    """Saves and loads configurations as JSON files under a root directory.

    ``root_dir`` and ``settings`` are read on every call, so changing them
    affects all subsequent operations. The store keeps no reference to the
    configurations it returns.
    """

    def __init__(
        self,
        root_dir: str | Path | None = None,
        settings: SerializerSettings | None = None,
        *,
        serializer: Serializer | None = None,
        filesystem: FileSystem | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            root_dir: Directory holding configuration files. Defaults to the
                per-user configuration directory.
            settings: Serializer options. Defaults to indented JSON with
                default values included and nested objects replaced on load.
            serializer: Encoder/decoder for configuration objects.
            filesystem: File access backend.
        """
        self.root_dir = root_dir if root_dir is not None else USER_CONFIG_DIR
        self.settings = settings or SerializerSettings()
        self._serializer: Serializer = serializer or JsonSerializer()
        self._fs: FileSystem = filesystem or LocalFileSystem()

    @property
    def root_dir(self) -> Path:
        return self._root_dir

    @root_dir.setter
    def root_dir(self, value: str | Path) -> None:
        self._root_dir = Path(value)

    def exists(self, path: str | Path) -> bool:
        """Check whether a configuration file is present at ``path``.

        Args:
            path: File path to check.

        Returns:
            True if a regular file exists at ``path``.
        """
        return self._fs.exists(Path(path))

    def has(self, cls: type[Any]) -> bool:
        """Check whether a configuration file exists for ``cls``.

        Args:
            cls: Configuration class.

        Returns:
            True if a file exists at the configuration path of ``cls``.
        """
        return self.exists(self.configuration_path(cls))

    def configuration_path(self, cls: type[Any]) -> Path:
        """Return the file path of ``cls`` under the current root directory.

        Args:
            cls: Configuration class.

        Returns:
            Path: ``<root_dir>/<key>.json``.
        """
        return self.root_dir / f"{configuration_key(cls)}{CONFIG_SUFFIX}"

    def load(self, cls: type[T], path: str | Path | None = None) -> LoadResult[T]:
        """Load a configuration, creating a default file if none exists.

        Args:
            cls: Configuration class with a no-argument constructor.
            path: Optional file path. Defaults to the configuration path of
                ``cls``.

        Returns:
            LoadResult[T]: The configuration and whether it was just created.

        Raises:
            DeserializationError: If the file decodes to no value.
            json.JSONDecodeError: If the file is not valid JSON.
            ConfigFormatError: If the JSON does not fit ``cls``.
            OSError: If the file cannot be read or written.
        """
        target = self._resolve(cls, path)

        if not self.exists(target):
            logger.debug("No configuration at %s, writing defaults", target)
            config = cls()
            self.save(cls, config, target)
            return LoadResult(config, True)

        logger.debug("Loading configuration from: %s", target)
        text = self._fs.read_text(target, self.settings.encoding)
        loaded = self._serializer.decode(text, cls, self.settings)
        if loaded is None:
            raise DeserializationError(
                "A configuration was found however attempting to deserialize "
                f"it resulted in a null object: {target}",
                path=target,
            )
        return LoadResult(loaded, False)

    def get(self, cls: type[T], path: str | Path | None = None) -> T:
        """Like :meth:`load`, but return only the configuration."""
        return self.load(cls, path).config

    def save(
        self,
        cls: type[T],
        config: T | None = None,
        path: str | Path | None = None,
    ) -> bool:
        """Write a configuration to disk, replacing any existing file.

        Args:
            cls: Configuration class.
            config: Instance to write. A default ``cls()`` is written if
                omitted.
            path: Optional file path. Defaults to the configuration path of
                ``cls``.

        Returns:
            bool: True if a file already existed at the path before writing.

        Raises:
            TypeError: If ``config`` is not an instance of ``cls``, or a
                value cannot be serialized.
            OSError: If the file cannot be written.
        """
        if config is not None and not isinstance(config, cls):
            raise TypeError(
                f"Expected an instance of {cls.__qualname__}, "
                f"got {type(config).__qualname__}"
            )

        target = self._resolve(cls, path)
        existed = self.exists(target)

        text = self._serializer.encode(
            config if config is not None else cls(), self.settings
        )
        self._fs.write_text(target, text, self.settings.encoding)

        logger.info("Configuration saved to: %s", target)
        return existed

    def _resolve(self, cls: type[Any], path: str | Path | None) -> Path:
        return Path(path) if path is not None else self.configuration_path(cls)
