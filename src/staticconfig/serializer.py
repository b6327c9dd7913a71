"""
JSON encoding and decoding of configuration objects.

:class:`JsonSerializer` turns dataclasses (and plain classes with a
no-argument constructor) into JSON text and back. Field type hints drive the
reconstruction of nested objects, collections, enums and paths, so a
configuration survives a round trip unchanged.
"""

from __future__ import annotations

__all__ = ["Serializer", "JsonSerializer"]

import dataclasses
import json
import logging
import types
from enum import Enum
from pathlib import PurePath
from typing import (
    Any,
    Literal,
    Protocol,
    TypeVar,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)

from staticconfig.errors import ConfigFormatError
from staticconfig.settings import SerializerSettings

logger = logging.getLogger(__name__)

T = TypeVar("T")

_PRIMITIVES = (str, int, float, bool)
_SEQUENCE_TYPES = (list, tuple, set, frozenset)


class Serializer(Protocol):
    """Protocol for converting configuration objects to text and back."""

    def encode(self, obj: Any, settings: SerializerSettings) -> str:
        """Serialize ``obj`` into text."""
        ...

    def decode(self, text: str, cls: type[T], settings: SerializerSettings) -> T | None:
        """Deserialize ``text`` into an instance of ``cls``.

        Returns ``None`` when the document holds no value at all.
        """
        ...


class JsonSerializer:
    """:class:`Serializer` built on the standard :mod:`json` module."""

    def encode(self, obj: Any, settings: SerializerSettings) -> str:
        """Serialize a configuration object into JSON text.

        Args:
            obj: Configuration instance to serialize.
            settings: Formatting and default-inclusion options.

        Returns:
            str: The JSON document.

        Raises:
            TypeError: If a value has no JSON representation.
        """
        data = _to_jsonable(obj, settings.include_defaults)
        return json.dumps(
            data,
            indent=settings.indent,
            ensure_ascii=settings.ensure_ascii,
            sort_keys=settings.sort_keys,
        )

    def decode(self, text: str, cls: type[T], settings: SerializerSettings) -> T | None:
        """Deserialize JSON text into an instance of ``cls``.

        Args:
            text: JSON document.
            cls: Target configuration class.
            settings: Controls whether nested objects replace or merge into
                the defaults of ``cls``.

        Returns:
            The decoded instance, or ``None`` if the document is ``null``.

        Raises:
            json.JSONDecodeError: If ``text`` is not valid JSON.
            ConfigFormatError: If the document does not fit ``cls``.
        """
        data = json.loads(text)
        if data is None:
            return None
        if not isinstance(data, dict):
            raise ConfigFormatError(
                f"Expected a JSON object for {cls.__qualname__}, "
                f"got {type(data).__name__}"
            )

        if settings.replace_objects:
            return _build(cls, data)
        return _populate(cls(), data)


# -----------------------------------------------------------------------------
# Encoding
# -----------------------------------------------------------------------------


def _to_jsonable(value: Any, include_defaults: bool) -> Any:
    """Recursively convert ``value`` into JSON-compatible primitives."""
    if value is None or isinstance(value, _PRIMITIVES):
        return value
    if isinstance(value, Enum):
        return _to_jsonable(value.value, include_defaults)
    if isinstance(value, PurePath):
        return str(value)
    if isinstance(value, dict):
        return {
            _key_to_str(k): _to_jsonable(v, include_defaults) for k, v in value.items()
        }
    if isinstance(value, _SEQUENCE_TYPES):
        return [_to_jsonable(v, include_defaults) for v in value]
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        out: dict[str, Any] = {}
        for f in dataclasses.fields(value):
            current = getattr(value, f.name)
            if not include_defaults and _is_field_default(f, current):
                continue
            out[f.name] = _to_jsonable(current, include_defaults)
        return out
    if hasattr(value, "__dict__"):
        attrs = _public_attrs(value)
        if not include_defaults:
            defaults = _public_attrs(type(value)())
            attrs = {
                k: v
                for k, v in attrs.items()
                if k not in defaults or defaults[k] != v
            }
        return {k: _to_jsonable(v, include_defaults) for k, v in attrs.items()}
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _key_to_str(key: Any) -> str:
    if isinstance(key, Enum):
        key = key.value
    if isinstance(key, bool):
        return "true" if key else "false"
    return str(key)


def _is_field_default(f: dataclasses.Field[Any], value: Any) -> bool:
    if f.default is not dataclasses.MISSING:
        return bool(value == f.default)
    if f.default_factory is not dataclasses.MISSING:
        return bool(value == f.default_factory())
    return False


def _public_attrs(obj: Any) -> dict[str, Any]:
    return {k: v for k, v in vars(obj).items() if not k.startswith("_")}


# -----------------------------------------------------------------------------
# Decoding
# -----------------------------------------------------------------------------


def _field_types(cls: type) -> dict[str, Any]:
    """Resolve the type hints of ``cls``.

    Hints that cannot be evaluated (forward references to names that are not
    importable) are left as strings. Callers replace them with the runtime
    type of the current or default value, see :func:`_runtime_hint`.
    """
    try:
        return get_type_hints(cls)
    except (NameError, TypeError):
        return dict(getattr(cls, "__annotations__", {}))


def _runtime_hint(hint: Any, value: Any) -> Any:
    """Fall back to ``type(value)`` for a missing or unresolved hint."""
    if hint is None or isinstance(hint, str):
        if value is not None:
            return type(value)
        return Any if hint is None else hint
    return hint


def _field_default(f: dataclasses.Field[Any]) -> Any:
    if f.default is not dataclasses.MISSING:
        return f.default
    if f.default_factory is not dataclasses.MISSING:
        return f.default_factory()
    return None


def _build(cls: type[T], data: dict[str, Any]) -> T:
    """Create a fresh instance of ``cls`` from a decoded JSON object."""
    hints = _field_types(cls)

    if dataclasses.is_dataclass(cls):
        init_args: dict[str, Any] = {}
        late: dict[str, Any] = {}
        names = set()
        for f in dataclasses.fields(cls):
            names.add(f.name)
            if f.name not in data:
                continue
            hint = hints.get(f.name, Any)
            if isinstance(hint, str):
                hint = _runtime_hint(hint, _field_default(f))
            value = _convert(data[f.name], hint)
            if f.init:
                init_args[f.name] = value
            else:
                late[f.name] = value
        _log_unknown(cls, data, names)

        obj = cls(**init_args)
        for name, value in late.items():
            object.__setattr__(obj, name, value)
        return obj

    obj = cls()
    for key, raw in data.items():
        if key.startswith("_"):
            continue
        hint = _runtime_hint(hints.get(key), getattr(obj, key, None))
        setattr(obj, key, _convert(raw, hint))
    return obj


def _populate(obj: T, data: dict[str, Any]) -> T:
    """Merge a decoded JSON object into an existing instance."""
    cls = type(obj)
    hints = _field_types(cls)

    if dataclasses.is_dataclass(obj):
        fields = {f.name: f for f in dataclasses.fields(obj)}
        _log_unknown(cls, data, fields.keys())

        changes: dict[str, Any] = {}
        late: dict[str, Any] = {}
        for name, raw in data.items():
            if name not in fields:
                continue
            current = getattr(obj, name)
            hint = _runtime_hint(hints.get(name, Any), current)
            merged = _merge(current, raw, hint)
            if fields[name].init:
                changes[name] = merged
            else:
                late[name] = merged

        result = dataclasses.replace(obj, **changes)
        for name, value in late.items():
            object.__setattr__(result, name, value)
        return result

    for key, raw in data.items():
        if key.startswith("_"):
            continue
        current = getattr(obj, key, None)
        hint = _runtime_hint(hints.get(key), current)
        setattr(obj, key, _merge(current, raw, hint))
    return obj


def _merge(current: Any, raw: Any, hint: Any) -> Any:
    """Combine a decoded value with the value already held by a field."""
    if isinstance(raw, dict):
        if _is_config_object(current):
            return _populate(current, raw)
        if isinstance(current, dict):
            merged = dict(current)
            merged.update(_convert(raw, hint))
            return merged
    if isinstance(raw, list) and isinstance(current, list):
        return current + list(_convert(raw, hint))
    return _convert(raw, hint)


def _is_config_object(value: Any) -> bool:
    if value is None or isinstance(value, type):
        return False
    if dataclasses.is_dataclass(value):
        return True
    return hasattr(value, "__dict__") and not isinstance(
        value, (Enum, PurePath, *_PRIMITIVES, *_SEQUENCE_TYPES, dict)
    )


def _convert(value: Any, hint: Any) -> Any:
    """Coerce a decoded JSON value to the type described by ``hint``."""
    if hint is Any:
        return value
    if isinstance(hint, str):
        if isinstance(value, dict):
            raise ConfigFormatError(
                f"Cannot resolve type {hint!r} to rebuild a nested object"
            )
        return value

    origin = get_origin(hint)
    args = get_args(hint)

    if origin is Union or origin is types.UnionType:
        if value is None:
            return None
        candidates = [a for a in args if a is not type(None)]
        if len(candidates) == 1:
            return _convert(value, candidates[0])
        # Ambiguous unions are left as decoded.
        return value

    if value is None or origin is Literal:
        return value

    if origin in _SEQUENCE_TYPES or hint in _SEQUENCE_TYPES:
        return _convert_sequence(value, origin or hint, args)

    if origin is dict or hint is dict:
        if not isinstance(value, dict):
            raise ConfigFormatError(f"Expected a JSON object, got {type(value).__name__}")
        key_hint, val_hint = args if args else (Any, Any)
        return {
            _convert_key(k, key_hint): _convert(v, val_hint) for k, v in value.items()
        }

    if not isinstance(hint, type):
        return value

    if issubclass(hint, Enum):
        try:
            return hint(value)
        except ValueError as e:
            raise ConfigFormatError(
                f"{value!r} is not a valid {hint.__qualname__}"
            ) from e
    if issubclass(hint, PurePath):
        return hint(value)
    if hint is float and isinstance(value, int) and not isinstance(value, bool):
        return float(value)
    if hint in _PRIMITIVES or hint.__module__ == "builtins":
        return value

    if not isinstance(value, dict):
        raise ConfigFormatError(
            f"Expected a JSON object for {hint.__qualname__}, "
            f"got {type(value).__name__}"
        )
    return _build(hint, value)


def _convert_sequence(value: Any, container: type, args: tuple[Any, ...]) -> Any:
    if not isinstance(value, list):
        raise ConfigFormatError(f"Expected a JSON array, got {type(value).__name__}")

    if container is tuple:
        if len(args) == 2 and args[1] is Ellipsis:
            return tuple(_convert(v, args[0]) for v in value)
        if args:
            if len(args) != len(value):
                raise ConfigFormatError(
                    f"Expected {len(args)} items in array, got {len(value)}"
                )
            return tuple(_convert(v, a) for v, a in zip(value, args, strict=True))
        return tuple(value)

    item_hint = args[0] if args else Any
    return container(_convert(v, item_hint) for v in value)


def _convert_key(key: str, hint: Any) -> Any:
    if hint is bool:
        if key == "true":
            return True
        if key == "false":
            return False
        raise ConfigFormatError(f"Invalid bool key: {key!r}")
    if hint is int or hint is float:
        try:
            return hint(key)
        except ValueError as e:
            raise ConfigFormatError(f"Invalid {hint.__name__} key: {key!r}") from e
    if isinstance(hint, type) and issubclass(hint, Enum):
        for member in hint:
            if _key_to_str(member) == key:
                return member
        raise ConfigFormatError(f"{key!r} is not a valid {hint.__qualname__}")
    return _convert(key, hint)


def _log_unknown(cls: type, data: dict[str, Any], known: Any) -> None:
    unknown = [k for k in data if k not in known]
    if unknown:
        logger.debug("Ignoring unknown keys for %s: %s", cls.__qualname__, unknown)
