"""Network configuration loaded from a YAML or JSON connection profile."""

from __future__ import annotations

import copy
import json
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

import yaml

from ..domain.exceptions import ConfigError, ConfigLookupError
from ..ports.network_config import NetworkConfigPort

logger = logging.getLogger(__name__)

_MISSING = object()


class YamlNetworkConfig(NetworkConfigPort):
    """Immutable, dotted-path view over a connection profile tree.

    Lookups follow the usual connection-profile conventions:

    - a mapping key may itself contain dots (``peer0.org1.example.com``);
      the longest matching run of path segments is tried first
    - exact-case keys win, otherwise keys match case-insensitively
    - numeric segments index into lists
    """

    def __init__(self, tree: Mapping[str, Any], base_dir: Path | None = None):
        if not isinstance(tree, Mapping):
            raise ConfigError(
                f"Network configuration root must be a mapping, got {type(tree).__name__}"
            )
        self._tree = copy.deepcopy(dict(tree))
        self._base_dir = base_dir

    @classmethod
    def from_file(cls, path: str | Path) -> YamlNetworkConfig:
        """Load a connection profile from disk.

        ``.json`` files are parsed as JSON; anything else as YAML.

        Raises:
            ConfigError: If the file is missing or cannot be parsed
        """
        config_path = Path(path)
        if not config_path.is_file():
            raise ConfigError(
                f"Network configuration file not found: {config_path}",
                details={"path": str(config_path)},
            )

        try:
            content = config_path.read_text(encoding="utf-8")
            if config_path.suffix == ".json":
                tree = json.loads(content)
            else:
                tree = yaml.safe_load(content)
        except (OSError, ValueError, yaml.YAMLError) as e:
            raise ConfigError(
                f"Invalid network configuration file {config_path}: {e}",
                details={"path": str(config_path)},
            ) from e

        logger.debug("Loaded network configuration from %s", config_path)
        return cls(tree or {}, base_dir=config_path.resolve().parent)

    @property
    def base_dir(self) -> Path | None:
        return self._base_dir

    def lookup(self, key_path: str) -> Any:
        parts = [p for p in key_path.split(".") if p]
        if not parts:
            raise ConfigLookupError(key_path, "empty key path")
        value = _search(self._tree, parts)
        if value is _MISSING:
            raise ConfigLookupError(key_path)
        return copy.deepcopy(value)

    def contains(self, key_path: str) -> bool:
        parts = [p for p in key_path.split(".") if p]
        return bool(parts) and _search(self._tree, parts) is not _MISSING


def _match_key(node: Mapping[Any, Any], key: str) -> Any:
    if key in node:
        return key
    folded = key.casefold()
    for candidate in node:
        if str(candidate).casefold() == folded:
            return candidate
    return _MISSING


def _search(node: Any, parts: list[str]) -> Any:
    if not parts:
        return node

    if isinstance(node, Mapping):
        for i in range(len(parts), 0, -1):
            key = _match_key(node, ".".join(parts[:i]))
            if key is _MISSING:
                continue
            value = _search(node[key], parts[i:])
            if value is not _MISSING:
                return value
        return _MISSING

    if isinstance(node, Sequence) and not isinstance(node, (str, bytes)):
        head = parts[0]
        if head.isdigit() and int(head) < len(node):
            return _search(node[int(head)], parts[1:])

    return _MISSING
