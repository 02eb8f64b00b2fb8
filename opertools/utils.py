"""Small helpers for labels, string lookups, hashing and object keys."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any

_FNV32_OFFSET = 0x811C9DC5
_FNV32_PRIME = 0x01000193
_MASK32 = 0xFFFFFFFF


@dataclass(frozen=True)
class NamespacedName:
    """Identifies an object by namespace and name."""

    namespace: str = ""
    name: str = ""


def merge_labels(*args: Mapping[str, str] | None) -> dict[str, str]:
    """Merge label maps into a new dict; later maps win on key clashes."""
    merged: dict[str, str] = {}
    for labels in args:
        if labels:
            merged.update(labels)
    return merged


def contains(items: Iterable[str] | None, item: str) -> bool:
    """Return True if ``item`` is one of ``items``."""
    return item in (items or ())


def hash32(text: str) -> str:
    """Return the 32-bit FNV-1 hash of ``text`` as lower-case hex without padding."""
    value = _FNV32_OFFSET
    for byte in text.encode("utf-8"):
        value = (value * _FNV32_PRIME) & _MASK32
        value ^= byte
    return format(value, "x")


def ordered_string_map(original: Mapping[str, str] | None) -> dict[str, str]:
    """Return a copy of ``original`` whose keys are in sorted order."""
    if not original:
        return {}
    return {key: original[key] for key in sorted(original)}


def object_key_from_meta(obj: Mapping[str, Any]) -> NamespacedName:
    """Build a key from an object mapping, or from its ``metadata`` mapping directly."""
    meta = obj.get("metadata")
    if not isinstance(meta, Mapping):
        meta = obj
    return NamespacedName(
        namespace=meta.get("namespace") or "",
        name=meta.get("name") or "",
    )