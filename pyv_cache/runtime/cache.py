from __future__ import annotations
from typing import Any, Callable, Dict, List, Tuple

from ..config import SimConfig
from ..utils.logging import get_logger
from .memory import MainMemory

logger = get_logger(__name__)


class CacheConstructionError(MemoryError):
    """Raised when the line table of a cache cannot be allocated."""


class CacheLine:
    """Represents a single line (way) in a cache set."""
    def __init__(self, line_size_bytes: int):
        self.valid = False
        self.frequency = 0
        self.tag = 0
        self.data = bytearray(line_size_bytes)

    def __repr__(self) -> str:
        return f"CacheLine(valid={self.valid}, frequency={self.frequency}, tag={self.tag:#x})"


def decompose_address(address: int, index_bits: int, offset_bits: int) -> Tuple[int, int, int]:
    """
    Decomposes an address into (tag, set_index, offset).

    address := (tag)(set)(offset), e.g. with s=6, b=4:
        0b010111_010101_1001 -> tag=0b010111, set=0b010101, offset=0b1001
    The tag is everything above the index bits; its width is not checked.
    """
    if address < 0:
        raise ValueError(f"Address must be non-negative, got {address}.")
    offset = address & ((1 << offset_bits) - 1)
    index = (address >> offset_bits) & ((1 << index_bits) - 1)
    tag = address >> (index_bits + offset_bits)
    return tag, index, offset


def find_least_frequent(lines: List[CacheLine]) -> int:
    """Returns the index of the line with the smallest frequency; the lowest index wins ties."""
    lfu_index = 0
    min_freq = lines[0].frequency
    for i, line in enumerate(lines):
        if line.frequency < min_freq:
            min_freq = line.frequency
            lfu_index = i
    return lfu_index


class LFUCache:
    """
    A set-associative, write-through cache with LFU replacement.

    The cache holds 2^s sets of E lines, each line caching a 2^b byte block.
    The tag width t is only used to size the tag when the cache is printed.
    Backing memory is owned by the caller and passed to every access.
    """
    def __init__(self, index_bits: int, tag_bits: int, offset_bits: int, associativity: int,
                 line_factory: Callable[[int], CacheLine] = CacheLine):
        for name, value in (("index_bits", index_bits), ("tag_bits", tag_bits), ("offset_bits", offset_bits)):
            if not isinstance(value, int) or value < 0:
                raise ValueError(f"{name} must be a non-negative integer, got {value!r}.")
        if not isinstance(associativity, int) or associativity < 1:
            raise ValueError(f"associativity must be a positive integer, got {associativity!r}.")

        self.index_bits = index_bits
        self.tag_bits = tag_bits
        self.offset_bits = offset_bits
        self.associativity = associativity
        self.num_sets = 1 << index_bits
        self.line_size = 1 << offset_bits

        # Build the whole table before attaching it so a failed allocation
        # leaves nothing behind.
        try:
            sets = [[line_factory(self.line_size) for _ in range(associativity)]
                    for _ in range(self.num_sets)]
        except MemoryError as e:
            raise CacheConstructionError(
                f"Could not allocate {self.num_sets} sets x {associativity} lines "
                f"of {self.line_size} bytes") from e
        self.sets: List[List[CacheLine]] = sets

        self.reads = 0
        self.writes = 0
        self.hits = 0
        self.misses = 0
        self.fills = 0
        self.evictions = 0

    @classmethod
    def from_config(cls, config: SimConfig) -> LFUCache:
        return cls(config.index_bits, config.tag_bits, config.offset_bits, config.associativity)

    def decompose(self, address: int) -> Tuple[int, int, int]:
        return decompose_address(address, self.index_bits, self.offset_bits)

    def probe(self, address: int) -> Tuple[bool, int | None, int, int, int]:
        """
        Looks the address up without touching any line.
        Returns (hit, way, tag, index, offset).
        """
        tag, index, offset = self.decompose(address)
        for way, line in enumerate(self.sets[index]):
            if line.valid and line.tag == tag:
                return True, way, tag, index, offset
        return False, None, tag, index, offset

    def read(self, memory: MainMemory, address: int) -> int:
        """Reads one byte through the cache. Memory is never modified."""
        hit, way, tag, index, offset = self.probe(address)

        if hit:
            line = self.sets[index][way]
            line.frequency += 1
            self.hits += 1
            self.reads += 1
            return line.data[offset]

        # Fetch before choosing a victim so an out-of-range block leaves the set untouched
        block_start = address - offset
        block = memory.read_block(block_start, self.line_size)
        line = self._allocate_line(index)
        self._fill_line(line, tag, block)
        self.reads += 1
        return line.data[offset]

    def write(self, memory: MainMemory, address: int, value: int):
        """Writes one byte through the cache to memory (write-through, write-allocate)."""
        if not isinstance(value, int) or not 0 <= value <= 0xFF:
            raise ValueError(f"Byte value must be in 0..255, got {value!r}.")
        hit, way, tag, index, offset = self.probe(address)

        if hit:
            memory.write_byte(address, value)
            line = self.sets[index][way]
            line.data[offset] = value
            line.frequency += 1
            self.hits += 1
            self.writes += 1
            return

        block_start = address - offset
        memory.check_range(block_start, self.line_size)
        memory.write_byte(address, value)
        # Refill after the memory write so the block already holds the new byte
        block = memory.read_block(block_start, self.line_size)
        line = self._allocate_line(index)
        self._fill_line(line, tag, block)
        self.writes += 1

    def _allocate_line(self, index: int) -> CacheLine:
        """Picks the line a miss in set `index` will fill: the first empty way, else the LFU way."""
        self.misses += 1
        cache_set = self.sets[index]
        for way, line in enumerate(cache_set):
            if not line.valid:
                self.fills += 1
                logger.debug(f"Miss in set {index}: filling empty way {way}")
                return line

        way = find_least_frequent(cache_set)
        victim = cache_set[way]
        self.evictions += 1
        logger.debug(f"Miss in set {index}: evicting way {way} "
                     f"(tag={victim.tag:#x}, frequency={victim.frequency})")
        return victim

    def _fill_line(self, line: CacheLine, tag: int, block_data: bytearray):
        """Fills a cache line with a block fetched from memory."""
        line.valid = True
        line.frequency = 1
        line.tag = tag
        line.data[:] = block_data

    def stats(self) -> Dict[str, Any]:
        accesses = self.hits + self.misses
        return {
            "reads": self.reads,
            "writes": self.writes,
            "hits": self.hits,
            "misses": self.misses,
            "fills": self.fills,
            "evictions": self.evictions,
            "hit_rate": self.hits / accesses if accesses else 0.0,
        }

    def snapshot(self) -> List[Dict[str, Any]]:
        """Returns the state of every line, set by set and way by way."""
        return [
            {
                "set": i,
                "way": j,
                "valid": line.valid,
                "frequency": line.frequency,
                "tag": line.tag,
                "data": line.data.hex(),
            }
            for i, cache_set in enumerate(self.sets)
            for j, line in enumerate(cache_set)
        ]


def initialize_cache(index_bits: int, tag_bits: int, offset_bits: int, associativity: int) -> LFUCache:
    """Builds an empty cache; raises CacheConstructionError if it cannot be allocated."""
    return LFUCache(index_bits, tag_bits, offset_bits, associativity)
