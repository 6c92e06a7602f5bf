"""Helpers for demangling shader-composer names and mapping WGSL types."""

from __future__ import annotations

import base64
import binascii
import re
from pathlib import PurePosixPath

__all__ = [
    "DECORATION_PRE",
    "DECORATION_POST",
    "make_valid_import",
    "decode",
    "demangle",
    "mod_name_from_mangled",
    "rust_type_name",
    "alignment_of",
]

DECORATION_PRE = "X_naga_oil_mod_X"
DECORATION_POST = "X"

_UNDECORATE = re.compile(
    r"(\x1B\[\d+\w)?([\w\d_]+)"
    + re.escape(DECORATION_PRE)
    + r"([A-Z0-9]*)"
    + re.escape(DECORATION_POST)
)

_RUST_TYPES = {
    "i32": "i32",
    "u32": "u32",
    "f32": "f32",
    "atomic<u32>": "u32",
    "atomic<i32>": "i32",
    "vec2<f32>": "[f32; 2]",
    "vec4<f32>": "[f32; 4]",
    "mat4x4<f32>": "[[f32; 4]; 4]",
    "vec2<u32>": "[u32; 2]",
    "vec2<i32>": "[i32; 2]",
    "vec3<u32>": "[u32; 4]",
    "vec3<f32>": "[f32; 4]",
    "vec4<u32>": "[u32; 4]",
}

_ALIGNMENTS = {
    "i32": 4,
    "u32": 4,
    "f32": 4,
    "atomic<u32>": 4,
    "atomic<i32>": 4,
    "vec2<f32>": 8,
    "vec2<u32>": 8,
    "vec2<i32>": 8,
    "vec3<f32>": 16,
    "vec4<f32>": 16,
    "mat4x4<f32>": 16,
    "vec4<u32>": 16,
}


def make_valid_import(value: str) -> str:
    """Turn a (possibly quoted, relative) path into a bare module name."""
    cleaned = value.replace('"../', "").replace('"', "")
    name = PurePosixPath(cleaned).name
    if not name or name == "..":
        return cleaned
    return PurePosixPath(cleaned).stem


def decode(encoded: str) -> str:
    """Decode unpadded base32 text into a UTF-8 string."""
    padded = encoded + "=" * (-len(encoded) % 8)
    try:
        return base64.b32decode(padded.encode("ascii")).decode("utf-8")
    except (binascii.Error, UnicodeError) as exc:
        raise ValueError(f"invalid mangled module name {encoded!r}: {exc}") from None


def _replace(match: re.Match) -> str:
    escape = match.group(1) or ""
    module = make_valid_import(decode(match.group(3)))
    return f"{escape}{module}::{match.group(2)}"


def demangle(text: str) -> str:
    """Replace every decorated identifier with ``module::name``."""
    return _UNDECORATE.sub(_replace, text)


def mod_name_from_mangled(mangled: str) -> tuple[str, str]:
    """Split a mangled name into (module path, bare name)."""
    *modules, name = demangle(mangled).split("::")
    return "::".join(modules), name


def rust_type_name(wgsl_name: str) -> str:
    """Host-side type for a WGSL type name."""
    try:
        return _RUST_TYPES[wgsl_name]
    except KeyError:
        raise ValueError(f"unsupported type {wgsl_name}") from None


def alignment_of(wgsl_name: str) -> int:
    """Alignment in bytes of a WGSL type."""
    try:
        return _ALIGNMENTS[wgsl_name]
    except KeyError:
        raise ValueError(f"unsupported type {wgsl_name}") from None