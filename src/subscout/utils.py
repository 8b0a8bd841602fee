from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml


TOKEN_SPLIT_PATTERN = re.compile(r"[^A-Za-z0-9]+")

# Boolean true/false string values
_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def split_tokens(value: str | None) -> list[str]:
    """Split a name on every run of non-alphanumeric characters.

    Empty fragments are dropped; case is preserved.
    """
    if not value:
        return []
    return [token for token in TOKEN_SPLIT_PATTERN.split(value) if token]


def lower_tokens(value: str | None) -> list[str]:
    """Return the lower-cased tokens of ``value`` in their original order."""
    return [token.lower() for token in split_tokens(value)]


def dedupe_casefold(values: List[str]) -> List[str]:
    """Drop case-insensitive duplicates while keeping the first spelling and order."""
    seen: set[str] = set()
    unique: List[str] = []
    for value in values:
        key = value.casefold()
        if key in seen:
            continue
        seen.add(key)
        unique.append(value)
    return unique


def ensure_directory(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def expand_env(value: Any) -> Any:
    if isinstance(value, str):
        return os.path.expandvars(value)
    if isinstance(value, list):
        return [expand_env(item) for item in value]
    if isinstance(value, dict):
        return {key: expand_env(val) for key, val in value.items()}
    return value


def load_yaml_file(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    return expand_env(data)


def parse_env_bool(value: Optional[str]) -> Optional[bool]:
    """Parse a boolean from an environment variable string.

    Returns None if value is None or not a recognized boolean string.
    """
    if value is None:
        return None
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return None


def env_bool(name: str) -> Optional[bool]:
    """Get a boolean from an environment variable.

    Returns None if not set or not a recognized boolean string.
    """
    return parse_env_bool(os.getenv(name))
