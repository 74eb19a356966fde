from __future__ import annotations
from pathlib import Path
from typing import Iterable
import numpy as np

from .trace import parse_int


class MemoryAccessError(IndexError):
    """Raised when an access falls outside the backing store."""


class MainMemory:
    """
    Flat byte-addressable backing store shared between the caller and the cache.

    The caller owns the buffer: a bytearray passed in is wrapped, not copied, so
    writes made through the cache are visible to the caller immediately.
    """

    def __init__(self, data: bytearray | int):
        if isinstance(data, int):
            if data < 0:
                raise ValueError("Memory size must be non-negative.")
            data = bytearray(data)
        elif not isinstance(data, bytearray):
            raise TypeError(f"MainMemory needs a bytearray or a size, got {type(data).__name__}")
        self.data = data

    @property
    def size(self) -> int:
        return len(self.data)

    def __len__(self) -> int:
        return len(self.data)

    def __getitem__(self, index):
        return self.data[index]

    def check_range(self, address: int, size: int = 1):
        """Raises MemoryAccessError unless [address, address + size) is inside the store."""
        if address < 0 or address + size > len(self.data):
            raise MemoryAccessError(
                f"Access to [{address:#x}, {address + size:#x}) is outside memory of {len(self.data)} bytes")

    def read_byte(self, address: int) -> int:
        self.check_range(address)
        return self.data[address]

    def write_byte(self, address: int, value: int):
        self.check_range(address)
        self.data[address] = value

    def read_block(self, address: int, size: int) -> bytearray:
        """Returns a copy of `size` bytes starting at `address`."""
        self.check_range(address, size)
        return self.data[address:address + size]

    @classmethod
    def from_values(cls, values: Iterable[int]) -> MainMemory:
        """Builds a memory from integers, keeping the low byte of each (so -1 becomes 0xff)."""
        masked = np.fromiter((v & 0xFF for v in values), dtype=np.uint8)
        return cls(bytearray(masked.tobytes()))

    @classmethod
    def load(cls, path: str) -> MainMemory:
        """
        Loads a memory image.
        `.bin` files are taken as raw bytes; anything else is read as
        whitespace-separated integers (decimal or 0x-prefixed hex).
        """
        image = Path(path)
        if not image.exists():
            raise FileNotFoundError(f"Memory image {path} not found.")
        if image.suffix == ".bin":
            return cls(bytearray(np.fromfile(str(image), dtype=np.uint8).tobytes()))

        tokens = image.read_text().split()
        try:
            values = [parse_int(tok) for tok in tokens]
        except ValueError as e:
            raise ValueError(f"Memory image {path} holds a non-integer value: {e}") from e
        return cls.from_values(values)
