"""Ideograph classification, code-form rendering and variant lookup.

Simplified/traditional variants come from OpenCC. Orthographic variants that
OpenCC does not convert (``明``/``朙``) can be supplied as an extra mapping.
"""

from __future__ import annotations

from collections.abc import Mapping
import threading

import opencc


# Inclusive code point ranges treated as searchable ideographs
_IDEOGRAPH_RANGES: tuple[tuple[int, int], ...] = (
    (0x3400, 0x4DBF),  # Extension A
    (0x4E00, 0x9FFF),  # Unified Ideographs
    (0xF900, 0xFAFF),  # Compatibility Ideographs
    (0x20000, 0x2A6DF),  # Extension B
    (0x2A700, 0x2EBEF),  # Extensions C-F
    (0x2EBF0, 0x2EE5F),  # Extension I
    (0x2F800, 0x2FA1F),  # Compatibility Supplement
    (0x30000, 0x3134F),  # Extension G
    (0x31350, 0x323AF),  # Extension H
)

# OpenCC configurations consulted for every character, in result order
VARIANT_CONVERSIONS: tuple[str, ...] = ("t2s", "s2t", "s2tw", "s2hk")

_converters: dict[str, opencc.OpenCC] = {}
_converters_lock = threading.Lock()


def is_ideograph(codepoint: int) -> bool:
    """Return True when the code point lies in a CJK ideograph block."""
    return any(start <= codepoint <= end for start, end in _IDEOGRAPH_RANGES)


def to_code_form(char: str) -> str:
    """Render a character as the uppercase hexadecimal key used by the store."""
    return f"{ord(char):04X}"


def _get_converter(config: str) -> opencc.OpenCC:
    """Load an OpenCC converter once per process."""
    converter = _converters.get(config)
    if converter is None:
        with _converters_lock:
            converter = _converters.get(config)
            if converter is None:
                converter = opencc.OpenCC(f"{config}.json")
                _converters[config] = converter
    return converter


def converted_forms(char: str) -> list[str]:
    """Return ``char`` as rendered by each OpenCC conversion."""
    return [_get_converter(config).convert(char) for config in VARIANT_CONVERSIONS]


class VariantTable:
    """Variant lookup: the character, any extra variants, then its OpenCC forms."""

    def __init__(self, extra: Mapping[str, tuple[str, ...]] | None = None) -> None:
        self._extra = dict(extra) if extra is not None else {}

    def variants_of(self, char: str) -> tuple[str, ...]:
        candidates = [char, *self._extra.get(char, ()), *converted_forms(char)]
        return tuple(dict.fromkeys(candidates))
