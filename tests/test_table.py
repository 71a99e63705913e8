"""Unit tests for FNV-1a hashing and the fixed-capacity string table."""

from __future__ import annotations

from typing import List

import pytest

from inip.core.arena import Arena
from inip.core.errors import (
    ArenaClosedError,
    ArenaFullError,
    OutOfMemoryError,
    StaleReferenceError,
    TableFullError,
)
from inip.core.table import _SLOT, StringTable, fnv1a_64


@pytest.mark.parametrize(
    ("data", "expected"),
    [
        (b"", 0xCBF29CE484222325),
        (b"a", 0xAF63DC4C8601EC8C),
        (b"foobar", 0x85944171F73967E8),
    ],
)
def test_fnv1a_64_matches_reference_vectors(data: bytes, expected: int) -> None:
    """Hash values should match the published FNV-1a 64-bit test vectors."""

    assert fnv1a_64(data) == expected


def _colliding_keys(capacity: int, count: int) -> List[str]:
    """Find `count` keys whose home slot is the same in a table of `capacity`."""

    mask = capacity - 1
    home = fnv1a_64(b"k0") & mask
    out = ["k0"]
    i = 1
    while len(out) < count:
        candidate = f"k{i}"
        if fnv1a_64(candidate.encode()) & mask == home:
            out.append(candidate)
        i += 1
    return out


def test_set_then_get_returns_value() -> None:
    """A stored value should be retrievable by an equal key of any string type."""

    table = StringTable(Arena(4096), 16)
    table.set("db:host", "localhost")

    assert table.get("db:host") == "localhost"
    assert table.get(b"db:host") == "localhost"
    assert "db:host" in table
    assert len(table) == 1


def test_set_returns_arena_owned_copy_of_key() -> None:
    """The returned key is a copy in the arena, not the caller's object."""

    arena = Arena(4096)
    table = StringTable(arena, 16)
    source = bytearray(b"name")
    stored = table.set(source, 1)
    source[:] = b"XXXX"

    assert stored == "name"
    assert stored.arena is arena
    assert table.get("name") == 1


def test_overwrite_keeps_length_and_canonical_key() -> None:
    """Re-setting a key replaces the value without a new slot or key copy."""

    arena = Arena(4096)
    table = StringTable(arena, 16)
    first = table.set("port", "5432")
    offset_after_first = arena.offset

    second = table.set("port", "6543")

    assert len(table) == 1
    assert table.get("port") == "6543"
    assert second.offset == first.offset
    assert arena.offset == offset_after_first


def test_load_ceiling_rejects_half_capacity_insert() -> None:
    """capacity/2 - 1 keys fit; the capacity/2-th distinct insert fails."""

    table = StringTable(Arena(4096), 8)
    assert table.max_entries == 3
    for i in range(3):
        table.set(f"key{i}", i)

    with pytest.raises(TableFullError) as exc_info:
        table.set("key3", 3)

    assert isinstance(exc_info.value, OutOfMemoryError)
    assert len(table) == 3
    assert table.capacity == 8
    assert "key3" not in table


def test_overwrite_is_allowed_at_the_ceiling() -> None:
    """Updating an existing key never counts as an insertion."""

    table = StringTable(Arena(4096), 4)
    table.set("only", "a")
    table.set("only", "b")
    assert table.get("only") == "b"


def test_colliding_keys_land_in_distinct_slots() -> None:
    """Keys sharing a home slot should all be stored and found."""

    table = StringTable(Arena(4096), 16)
    keys = _colliding_keys(16, 4)
    for i, key in enumerate(keys):
        table.set(key, i)

    for i, key in enumerate(keys):
        assert table.get(key) == i
    assert len(table) == 4


def test_get_absent_key_raises_key_error() -> None:
    """Absent keys raise KeyError even when their search runs over present keys."""

    table = StringTable(Arena(4096), 16)
    for key in _colliding_keys(16, 3):
        table.set(key, key)

    for i in range(200):
        missing = f"missing{i}"
        assert missing not in table
        assert table.lookup(missing) is None
        assert table.lookup(missing, "fallback") == "fallback"
    with pytest.raises(KeyError):
        table.get("missing0")


def test_items_yields_every_entry() -> None:
    """items() should expose each stored key exactly once."""

    table = StringTable(Arena(4096), 16)
    expected = {"a": 1, "b": 2, "c": 3}
    for key, value in expected.items():
        table.set(key, value)

    assert {str(k): v for k, v in table.items()} == expected


@pytest.mark.parametrize("capacity", [0, 1, 3, 12, 100])
def test_capacity_must_be_power_of_two(capacity: int) -> None:
    """Non power-of-two capacities are rejected up front."""

    with pytest.raises(ValueError):
        StringTable(Arena(4096), capacity)


def test_slot_array_is_carved_from_the_arena() -> None:
    """The slot array consumes arena space and fails when the arena is too small."""

    arena = Arena(4096)
    StringTable(arena, 16)
    assert arena.offset > 0

    with pytest.raises(ArenaFullError):
        StringTable(Arena(8), 16)


def test_arena_exhaustion_during_insert_leaves_table_unchanged() -> None:
    """If the key copy does not fit, the slot stays empty."""

    arena = Arena(4096)
    table = StringTable(arena, 4)
    arena.alloc(arena.remaining)

    with pytest.raises(ArenaFullError):
        table.set("k", "v")
    assert len(table) == 0
    assert "k" not in table


def test_table_is_unusable_after_arena_reset_or_destroy() -> None:
    """A table must not be searched once its arena was rewound or released."""

    arena = Arena(4096)
    table = StringTable(arena, 16)
    table.set("k", "v")

    arena.reset()
    with pytest.raises(StaleReferenceError):
        table.get("k")

    arena.destroy()
    with pytest.raises(ArenaClosedError):
        table.set("k", "v")


def test_slot_layout_holds_offsets_beyond_32_bits() -> None:
    """Key offsets and lengths are stored as 64-bit fields."""

    buf = bytearray(_SLOT.size)
    _SLOT.pack_into(buf, 0, 1, fnv1a_64(b"k"), 2**32, 2**32 + 5)

    assert _SLOT.unpack_from(buf, 0) == (1, fnv1a_64(b"k"), 2**32, 2**32 + 5)
