from __future__ import annotations
from typing import List

from ..runtime.cache import LFUCache


def format_line(valid: bool, frequency: int, tag: int, data: bytes, tag_bits: int) -> str:
    """One cache line as `valid frequency 0xTAG b0 b1 ... ` (one trailing space per byte)."""
    tag_hex = format(tag, "x").zfill(tag_bits)
    return f"{int(valid)} {frequency} 0x{tag_hex} " + "".join(f"{byte:02x} " for byte in data)


def format_cache(cache: LFUCache) -> List[str]:
    """Renders every set as a `Set i` header followed by its lines in way order."""
    out = []
    for i, cache_set in enumerate(cache.sets):
        out.append(f"Set {i}")
        for line in cache_set:
            out.append(format_line(line.valid, line.frequency, line.tag, line.data, cache.tag_bits))
    return out


def print_cache(cache: LFUCache):
    for text in format_cache(cache):
        print(text)
