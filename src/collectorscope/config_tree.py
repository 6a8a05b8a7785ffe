# src/collectorscope/config_tree.py
"""Read-only view over a decoded collector configuration document.

Collector configuration is free-form: any key may be absent, null, or carry a
value of an unexpected type. ConfigTree wraps the decoded mapping and exposes
explicit accessors that return None (or MISSING) instead of raising, so
callers handle malformed shapes the same way they handle absent ones.

Usage:
    tree = load_collector_config(Path("collector.yaml"))
    exporters = tree.get_mapping("exporters")
    if exporters is not None:
        for name, block in exporters.items():
            ...
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any

import yaml

from collectorscope.errors import CollectorConfigError
from collectorscope.sentinels import MISSING, MissingSentinel


class ConfigTree(Mapping[Any, Any]):
    """Immutable mapping over untyped configuration data.

    Nested mappings are returned as ConfigTree instances; everything else is
    returned as decoded. ``None`` wraps as an empty tree.
    """

    __slots__ = ("_data",)

    def __init__(self, data: Mapping[Any, Any] | None = None) -> None:
        if data is None:
            data = {}
        elif isinstance(data, ConfigTree):
            data = data._data
        elif not isinstance(data, Mapping):
            raise TypeError(f"ConfigTree requires a mapping, got {type(data).__name__}")
        self._data: Mapping[Any, Any] = data

    @classmethod
    def wrap(cls, data: Mapping[Any, Any] | None) -> ConfigTree:
        """Return ``data`` unchanged if it is already a tree, else wrap it."""
        if isinstance(data, ConfigTree):
            return data
        return cls(data)

    def __getitem__(self, key: Any) -> Any:
        return _wrap_value(self._data[key])

    def __iter__(self) -> Iterator[Any]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"ConfigTree({dict(self._data)!r})"

    def lookup(self, key: Any) -> Any | MissingSentinel:
        """Return the value for ``key`` or MISSING when the key is absent."""
        if key not in self._data:
            return MISSING
        return self[key]

    def get_string(self, key: Any) -> str | None:
        value = self._data.get(key)
        if isinstance(value, str):
            return value
        return None

    def get_mapping(self, key: Any) -> ConfigTree | None:
        """Return the nested mapping at ``key``.

        A key present with a null value (``resolver:`` in YAML) yields an
        empty tree. Absent keys and non-mapping values yield None.
        """
        if key not in self._data:
            return None
        value = self._data[key]
        if value is None:
            return ConfigTree()
        if isinstance(value, Mapping):
            return ConfigTree(value)
        return None

    def get_sequence(self, key: Any) -> tuple[Any, ...] | None:
        value = self._data.get(key)
        if isinstance(value, list | tuple):
            return tuple(_wrap_value(item) for item in value)
        return None

    def to_dict(self) -> dict[Any, Any]:
        """Return a plain, recursively copied dict."""
        return {key: _unwrap_value(value) for key, value in self._data.items()}


def _wrap_value(value: Any) -> Any:
    if isinstance(value, Mapping) and not isinstance(value, ConfigTree):
        return ConfigTree(value)
    return value


def _unwrap_value(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _unwrap_value(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [_unwrap_value(item) for item in value]
    return value


def load_collector_config(path: Path) -> ConfigTree:
    """Load a collector configuration document from YAML.

    Args:
        path: Path to the collector configuration file

    Returns:
        ConfigTree over the decoded document (empty for an empty file)

    Raises:
        FileNotFoundError: If the file does not exist
        CollectorConfigError: If the YAML is invalid or the top level is not a mapping
    """
    if not path.exists():
        raise FileNotFoundError(f"Collector config not found: {path}")

    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise CollectorConfigError(str(path), f"invalid YAML: {e}") from e

    if data is None:
        return ConfigTree()
    if not isinstance(data, Mapping):
        raise CollectorConfigError(
            str(path),
            f"top level must be a mapping, got {type(data).__name__}",
        )
    return ConfigTree(data)
