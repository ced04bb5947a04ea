"""
Prototype factory for census hash backends.

WARNING: The factory does not check that the caller's peers use the same
backend. Compare ``HashFunction.fingerprint`` across the tree builder and the
verifier, or use ``InclusionCircuit.for_tree``.
"""

from __future__ import annotations

import importlib
import logging
from typing import Final

from .feature_flags import get_hash_backend
from .interfaces import HashFunction

logger = logging.getLogger(__name__)

BACKEND_REGISTRY: Final[dict[str, str]] = {
    "poseidon": "zk_census.census_protocol.hashes.poseidon.PoseidonHash",
    "mimc": "zk_census.census_protocol.hashes.mimc.MiMCHash",
}


def _format_valid_options() -> str:
    return ", ".join(sorted(BACKEND_REGISTRY.keys()))


def _normalize_backend_name(value: str | None, *, source: str) -> str | None:
    if value is None or value == "":
        return None

    if isinstance(value, str):
        value = value.strip().lower()
    if not isinstance(value, str) or value not in BACKEND_REGISTRY:
        raise ValueError(
            f"Invalid hash backend from {source}: {value!r}. "
            f"Valid options: {_format_valid_options()}"
        )

    return value


def _load_backend_class(backend_name: str) -> type[HashFunction]:
    import_path = BACKEND_REGISTRY[backend_name]
    module_path, _, class_name = import_path.rpartition(".")
    if not module_path or not class_name:
        raise ValueError(
            f"Invalid backend import path for {backend_name!r}: {import_path!r}"
        )

    try:
        module = importlib.import_module(module_path)
    except ModuleNotFoundError as exc:
        raise ImportError(
            f"Unable to import hash module {module_path!r} for {backend_name!r}"
        ) from exc

    try:
        backend_cls = getattr(module, class_name)
    except AttributeError as exc:
        raise ImportError(
            f"Hash class {class_name!r} not found in module {module_path!r}"
        ) from exc

    if not isinstance(backend_cls, type) or not issubclass(backend_cls, HashFunction):
        raise TypeError(
            f"Backend reference {import_path!r} does not implement HashFunction"
        )

    return backend_cls


def _resolve_backend_name(
    *, prefer: str | None = None, override: str | None = None
) -> str:
    resolved_override = _normalize_backend_name(override, source="override")
    if resolved_override is not None:
        return resolved_override

    resolved_prefer = _normalize_backend_name(prefer, source="prefer")
    if resolved_prefer is not None:
        return resolved_prefer

    resolved_flag = get_hash_backend()
    if resolved_flag not in BACKEND_REGISTRY:
        raise ValueError(
            f"Invalid hash backend from feature flags: {resolved_flag!r}. "
            f"Valid options: {_format_valid_options()}"
        )
    return resolved_flag


def get_hash_function(
    *, prefer: str | None = None, override: str | None = None
) -> HashFunction:
    """
    Return a hash backend instance based on feature flags.

    Args:
        prefer: Optional backend name hint.
        override: Optional backend name override (testing only).

    Returns:
        HashFunction: New backend instance with default parameters.

    Raises:
        ValueError: If a backend name is invalid.
        ImportError: If the backend class cannot be imported.
        TypeError: If the backend class does not implement HashFunction.
    """
    backend_name = _resolve_backend_name(prefer=prefer, override=override)
    backend_cls = _load_backend_class(backend_name)
    backend = backend_cls()
    logger.debug("Using %s hash backend (%s)", backend_name, backend.fingerprint[:16])
    return backend
