"""Source resolver — maps data-origin package identifiers to display names.

The table ships with the package as ``source_apps.yaml`` and is loaded once,
then exposed read-only.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType

import yaml

logger = logging.getLogger(__name__)

_TABLE_PATH = Path(__file__).resolve().parent / "source_apps.yaml"


def load_source_table(path: str | Path) -> Mapping[str, str]:
    """Parse a YAML mapping of package identifier to display name."""
    with open(path) as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Source table {path} must be a mapping, got {type(data).__name__}")

    table = {str(package): str(name) for package, name in data.items()}
    logger.debug("Loaded %d source app names from %s", len(table), path)
    return MappingProxyType(table)


@lru_cache(maxsize=1)
def source_table() -> Mapping[str, str]:
    """The bundled, process-wide source table."""
    return load_source_table(_TABLE_PATH)


def resolve(package_identifier: str) -> str:
    """Return the display name for a package, or the identifier itself."""
    return source_table().get(package_identifier, package_identifier)
