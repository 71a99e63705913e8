from __future__ import annotations

import struct
from typing import Any, Iterator, List, Optional, Tuple, Union

from inip.core.arena import Arena, ArenaString
from inip.core.errors import ArenaClosedError, StaleReferenceError, TableFullError

FNV64_OFFSET_BASIS = 0xCBF29CE484222325
FNV64_PRIME = 0x100000001B3
_MASK64 = 0xFFFFFFFFFFFFFFFF

# occupied flag, key hash, key offset, key length
_SLOT = struct.Struct("<IQQQ")

Key = Union[str, bytes, bytearray, memoryview, ArenaString]


def fnv1a_64(data: bytes) -> int:
    """FNV-1a over raw bytes with the standard 64-bit basis and prime."""
    h = FNV64_OFFSET_BASIS
    for byte in data:
        h ^= byte
        h = (h * FNV64_PRIME) & _MASK64
    return h


def _key_bytes(key: Key) -> bytes:
    if isinstance(key, str):
        return key.encode("utf-8")
    if isinstance(key, ArenaString):
        return key.tobytes()
    return bytes(key)


def is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


class StringTable:
    """
    Fixed-capacity open-addressing map from strings to opaque values.

    The slot array is carved from the arena and relies on the arena handing
    out zeroed memory: an all-zero slot is empty. Keys are copied into the
    arena on first insert; overwriting a key keeps that one copy.

    Probing is linear and there is no deletion, so an empty slot always ends
    a collision run. The table never grows: the number of occupied slots
    must stay strictly below half the capacity and an insert that would
    reach it raises `TableFullError`.
    """

    def __init__(self, arena: Arena, capacity: int) -> None:
        if not is_power_of_two(capacity) or capacity < 2:
            raise ValueError(f"table capacity must be a power of two >= 2, got {capacity}")
        self._arena = arena
        self._capacity = capacity
        self._mask = capacity - 1
        self._slots = arena.alloc(capacity * _SLOT.size)
        self._generation = arena.generation
        self._values: List[Any] = [None] * capacity
        self._length = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def max_entries(self) -> int:
        return self._capacity // 2 - 1

    def __len__(self) -> int:
        return self._length

    # ----------------------------
    # Slot helpers
    # ----------------------------

    def _check_live(self) -> None:
        if self._arena.closed:
            raise ArenaClosedError()
        if self._arena.generation != self._generation:
            raise StaleReferenceError(self._generation, self._arena.generation)

    def _read_slot(self, index: int) -> Tuple[int, int, int, int]:
        return _SLOT.unpack_from(self._slots, index * _SLOT.size)

    def _slot_key(self, offset: int, length: int) -> ArenaString:
        return ArenaString(self._arena, offset, length, self._generation)

    def _find_slot(self, raw: bytes, h: int) -> Tuple[int, bool]:
        """Return (slot index, found). When not found the index is the first empty slot."""
        self._check_live()
        index = h & self._mask
        while True:
            occupied, slot_hash, offset, length = self._read_slot(index)
            if not occupied:
                return index, False
            if slot_hash == h and self._slot_key(offset, length).tobytes() == raw:
                return index, True
            index = (index + 1) & self._mask

    # ----------------------------
    # Public API
    # ----------------------------

    def set(self, key: Key, value: Any) -> ArenaString:
        """Insert or overwrite `key`; returns the table's own copy of the key."""
        raw = _key_bytes(key)
        h = fnv1a_64(raw)
        index, found = self._find_slot(raw, h)

        if found:
            _, _, offset, length = self._read_slot(index)
            self._values[index] = value
            return self._slot_key(offset, length)

        if self._length >= self.max_entries:
            raise TableFullError(self._length, self._capacity)

        stored = self._arena.strdup(raw)
        _SLOT.pack_into(self._slots, index * _SLOT.size, 1, h, stored.offset, stored.length)
        self._values[index] = value
        self._length += 1
        return stored

    def get(self, key: Key) -> Any:
        """Return the value stored under `key`; raises KeyError when absent."""
        raw = _key_bytes(key)
        index, found = self._find_slot(raw, fnv1a_64(raw))
        if not found:
            raise KeyError(raw.decode("utf-8", errors="replace"))
        return self._values[index]

    def lookup(self, key: Key, default: Optional[Any] = None) -> Any:
        try:
            return self.get(key)
        except KeyError:
            return default

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, (str, bytes, bytearray, memoryview, ArenaString)):
            return False
        raw = _key_bytes(key)
        _, found = self._find_slot(raw, fnv1a_64(raw))
        return found

    def items(self) -> Iterator[Tuple[ArenaString, Any]]:
        # slot order, not insertion order
        self._check_live()
        for index in range(self._capacity):
            occupied, _, offset, length = self._read_slot(index)
            if occupied:
                yield self._slot_key(offset, length), self._values[index]

    def __repr__(self) -> str:
        return f"StringTable(len={self._length}, capacity={self._capacity})"
