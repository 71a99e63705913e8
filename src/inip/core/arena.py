from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from inip.core.errors import ArenaClosedError, ArenaFullError, StaleReferenceError

ALIGNMENT = 8

BytesLike = Union[bytes, bytearray, memoryview]


def align_up(offset: int, alignment: int = ALIGNMENT) -> int:
    return (offset + (alignment - 1)) & ~(alignment - 1)


class Arena:
    """
    Bump-pointer allocator over one pre-allocated bytearray.

    Regions are carved sequentially at 8-byte aligned offsets. There is no
    per-region free: `reset()` rewinds the whole arena in O(1) and `destroy()`
    releases the backing buffer.

    Every region returned by `alloc()` is zero-filled. Bytes above the
    high-water mark have never been handed out and are still zero from the
    initial allocation, so only reused bytes are cleared.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError("arena capacity must be >= 0")
        self._buf: Optional[bytearray] = bytearray(capacity)
        self._capacity = capacity
        self._offset = 0
        self._high_water = 0
        self._generation = 0

    # ----------------------------
    # Introspection
    # ----------------------------

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def offset(self) -> int:
        return self._offset

    @property
    def remaining(self) -> int:
        return self._capacity - self._offset

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def closed(self) -> bool:
        return self._buf is None

    def _storage(self) -> bytearray:
        if self._buf is None:
            raise ArenaClosedError()
        return self._buf

    # ----------------------------
    # Allocation
    # ----------------------------

    def _reserve(self, size: int) -> int:
        if size < 0:
            raise ValueError("allocation size must be >= 0")
        buf = self._storage()

        start = align_up(self._offset)
        end = start + size
        if end > self._capacity:
            raise ArenaFullError(size, self._offset, self._capacity)

        dirty_end = min(end, self._high_water)
        if start < dirty_end:
            buf[start:dirty_end] = bytes(dirty_end - start)

        self._offset = end
        self._high_water = max(self._high_water, end)
        return start

    def alloc(self, size: int) -> memoryview:
        """Return a zero-filled, writable region of exactly `size` bytes."""
        start = self._reserve(size)
        return memoryview(self._storage())[start:start + size]

    def strdup(self, data: Union[BytesLike, str]) -> "ArenaString":
        """Copy `data` into arena memory and return an owning handle to the copy."""
        raw = data.encode("utf-8") if isinstance(data, str) else bytes(data)
        length = len(raw)
        start = self._reserve(length)
        self._storage()[start:start + length] = raw
        return ArenaString(self, start, length, self._generation)

    def reset(self) -> None:
        # O(1): reused bytes are cleared lazily by the next alloc
        self._storage()
        self._offset = 0
        self._generation += 1

    def destroy(self) -> None:
        if self._buf is None:
            return
        self._buf = None
        self._offset = 0
        self._high_water = 0
        self._generation += 1

    def __enter__(self) -> "Arena":
        return self

    def __exit__(self, *exc: object) -> None:
        self.destroy()

    def __repr__(self) -> str:
        state = "closed" if self.closed else f"{self._offset}/{self._capacity}"
        return f"Arena({state})"

    # ----------------------------
    # Access for ArenaString
    # ----------------------------

    def _read(self, offset: int, length: int, generation: int) -> bytes:
        buf = self._storage()
        if generation != self._generation:
            raise StaleReferenceError(generation, self._generation)
        return bytes(buf[offset:offset + length])


@dataclass(frozen=True, eq=False)
class ArenaString:
    """
    A string owned by an arena.

    The handle stays valid until the arena is reset or destroyed; reading it
    afterwards raises `StaleReferenceError` / `ArenaClosedError` instead of
    returning whatever now occupies those bytes.
    """

    arena: Arena
    offset: int
    length: int
    generation: int

    def tobytes(self) -> bytes:
        return self.arena._read(self.offset, self.length, self.generation)

    def __str__(self) -> str:
        return self.tobytes().decode("utf-8")

    def __len__(self) -> int:
        return self.length

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ArenaString):
            return self.tobytes() == other.tobytes()
        if isinstance(other, str):
            return self.tobytes() == other.encode("utf-8")
        if isinstance(other, (bytes, bytearray, memoryview)):
            return self.tobytes() == bytes(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.tobytes())

    def __repr__(self) -> str:
        try:
            text = repr(str(self))
        except (ArenaClosedError, StaleReferenceError):
            text = "<stale>"
        return f"ArenaString({text}, offset={self.offset})"
