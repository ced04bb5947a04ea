"""Helpers for moving values in and out of the prime field."""

from __future__ import annotations

from typing import Any, Iterable, Tuple

from .config import FIELD_ELEMENT_BYTES, FIELD_MODULUS

# Field elements are plain ints in [0, modulus)
FieldElement = int


def to_field(value: Any, label: str = "value", modulus: int = FIELD_MODULUS) -> int:
    """
    Coerce a value into a canonical field element.

    Args:
        value: int, big-endian bytes, or a big-number object with ``binary()``
        label: Name used in error messages
        modulus: Field characteristic

    Returns:
        int in [0, modulus)

    Raises:
        TypeError: If the value has an unsupported type
        ValueError: If the value is not a canonical field element
    """
    if isinstance(value, bool):
        raise TypeError(f"{label} must be a field element, got bool")

    if isinstance(value, (bytes, bytearray)):
        value = _int_from_bytes(bytes(value), label)
    elif not isinstance(value, int):
        binary = getattr(value, "binary", None)
        if not callable(binary):
            raise TypeError(f"{label} must be int, bytes, or Bn-like")
        value = _int_from_bytes(binary(), label)

    if value < 0:
        raise ValueError(f"{label} must be non-negative")
    if value >= modulus:
        raise ValueError(f"{label} is not reduced modulo the field")
    return value


def to_field_tuple(
    values: Iterable[Any], label: str = "values", modulus: int = FIELD_MODULUS
) -> Tuple[int, ...]:
    return tuple(
        to_field(value, f"{label}[{idx}]", modulus) for idx, value in enumerate(values)
    )


def field_to_bytes(value: int) -> bytes:
    """Canonical 32-byte big-endian encoding."""
    return value.to_bytes(FIELD_ELEMENT_BYTES, byteorder="big")


def field_from_bytes(data: bytes, label: str = "value", modulus: int = FIELD_MODULUS) -> int:
    if len(data) != FIELD_ELEMENT_BYTES:
        raise ValueError(f"{label} must be exactly {FIELD_ELEMENT_BYTES} bytes")
    return to_field(data, label, modulus)


def field_to_hex(value: int) -> str:
    return field_to_bytes(value).hex()


def field_from_hex(text: str, label: str = "value", modulus: int = FIELD_MODULUS) -> int:
    """Parse a hex field element, with or without a ``0x`` prefix."""
    if not isinstance(text, str):
        raise TypeError(f"{label} must be a hex string")
    digits = text[2:] if text.lower().startswith("0x") else text
    try:
        value = int(digits, 16)
    except ValueError as exc:
        raise ValueError(f"{label} must be valid hex") from exc
    return to_field(value, label, modulus)


def _int_from_bytes(data: bytes, label: str) -> int:
    if not data:
        raise ValueError(f"{label} cannot be empty")
    if len(data) > FIELD_ELEMENT_BYTES:
        raise ValueError(f"{label} must be at most {FIELD_ELEMENT_BYTES} bytes")
    return int.from_bytes(data, byteorder="big")
