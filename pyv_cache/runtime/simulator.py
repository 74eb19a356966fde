from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Any, List, Tuple

from ..utils.logging import get_logger
from .cache import LFUCache
from .memory import MainMemory
from .trace import TraceOp

logger = get_logger(__name__)


@dataclass
class AccessRecord:
    """Outcome of one traced access."""
    op: str
    address: int
    value: int
    hit: bool
    set_index: int
    way: int


def run(cache: LFUCache, memory: MainMemory, trace: List[TraceOp]) -> Tuple[List[AccessRecord], Dict[str, Any]]:
    """
    Replays a trace against the cache and its backing memory.

    Returns one AccessRecord per access (the byte read, or the byte written)
    together with the cache's access statistics.
    """
    logger.info(f"Replaying {len(trace)} accesses on {cache.num_sets} set(s) x "
                f"{cache.associativity} way(s), {cache.line_size}-byte blocks")
    records: List[AccessRecord] = []
    for op in trace:
        hit, _, _, index, _ = cache.probe(op.address)
        if op.is_write:
            cache.write(memory, op.address, op.value)
            value = op.value
        else:
            value = cache.read(memory, op.address)
        # The line is resident after every access
        _, way, _, _, _ = cache.probe(op.address)
        records.append(AccessRecord(op.op, op.address, value, hit, index, way))
        logger.debug(f"{op.op} {op.address:#x} -> {value:#04x} ({'hit' if hit else 'miss'})")

    stats = cache.stats()
    logger.info(f"Hits: {stats['hits']}, misses: {stats['misses']}, evictions: {stats['evictions']}")
    return records, stats
