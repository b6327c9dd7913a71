"""
Serializer settings shared by every encode/decode call of a store.
"""

from dataclasses import dataclass


@dataclass
class SerializerSettings:
    """Controls how configurations are written to and read from JSON.

    Attributes:
        indent: Indentation width; ``None`` writes compact single-line JSON.
        include_defaults: Whether fields equal to their declared default are
            written out. When False such fields are omitted.
        replace_objects: Whether decoded nested objects replace the defaults
            outright. When False, decoded values are merged into a default
            instance: nested objects are populated field by field, dicts are
            updated and lists are extended.
        ensure_ascii: Escape non-ASCII characters in the output.
        sort_keys: Sort object keys in the output.
        encoding: Text encoding of configuration files on disk.
    """

    indent: int | None = 2
    include_defaults: bool = True
    replace_objects: bool = True
    ensure_ascii: bool = False
    sort_keys: bool = False
    encoding: str = "utf-8"
