"""
Prototype feature flags for selecting the census hash backend.

WARNING: Every tree and every verifier in a deployment must resolve to the
same backend. Switching backends changes every root.
"""

from __future__ import annotations

import os
from typing import Final

from .config import DEFAULT_HASH_BACKEND, HASH_BACKENDS

_VALID_BACKENDS: Final[tuple[str, ...]] = HASH_BACKENDS
_DEFAULT_BACKEND: Final[str] = DEFAULT_HASH_BACKEND
_ENV_VAR_NAME: Final[str] = "ZK_CENSUS_HASH"

_backend_override: str | None = None


def _format_valid_options() -> str:
    return ", ".join(_VALID_BACKENDS)


def _normalize_backend(value: str | None) -> str | None:
    if value is None:
        return None

    if not isinstance(value, str):
        raise ValueError(
            f"Invalid hash backend: {value!r}. Valid options: {_format_valid_options()}"
        )

    if value == "":
        return None

    value = value.strip().lower()
    if value not in _VALID_BACKENDS:
        raise ValueError(
            f"Invalid hash backend: {value!r}. Valid options: {_format_valid_options()}"
        )

    return value


def get_hash_backend(prefer: str | None = None) -> str:
    """
    Resolve hash backend name in precedence order.

    Args:
        prefer: Optional preferred backend name.

    Returns:
        Backend name string.

    Raises:
        ValueError: If a provided backend value is invalid.
    """
    preferred = _normalize_backend(prefer)
    if preferred is not None:
        return preferred

    if _backend_override is not None:
        return _backend_override

    env_backend = _normalize_backend(os.getenv(_ENV_VAR_NAME))
    if env_backend is not None:
        return env_backend

    return _DEFAULT_BACKEND


def set_hash_backend(value: str | None) -> None:
    """
    Set in-memory backend override (testing only).

    Args:
        value: Backend name to force, or None to clear the override.

    Raises:
        ValueError: If the value is invalid.
    """
    global _backend_override
    _backend_override = _normalize_backend(value)
