from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


# ================================
# Defaults
# ================================

DEFAULT_ARENA_CAPACITY = 1_048_576
DEFAULT_TABLE_CAPACITY = 1024
DEFAULT_MAX_INPUT_BYTES = 524_288


# ================================
# Parser config (defaults only)
# ================================


class ArenaConfig(BaseModel):
    capacity: int = Field(
        default=DEFAULT_ARENA_CAPACITY,
        ge=0,
        description="Bytes reserved up front for the input buffer, table slots and every parsed string.",
    )


class TableConfig(BaseModel):
    capacity: int = Field(
        default=DEFAULT_TABLE_CAPACITY,
        ge=2,
        description="Slot count of the string table. Must be a power of two; at most capacity/2 - 1 keys fit.",
    )

    @field_validator("capacity")
    @classmethod
    def _capacity_must_be_power_of_two(cls, v: int) -> int:
        if v & (v - 1):
            raise ValueError("table.capacity must be a power of two")
        return v


class LimitsConfig(BaseModel):
    max_input_bytes: int = Field(default=DEFAULT_MAX_INPUT_BYTES, ge=0)


class InipConfig(BaseModel):
    """
    Defaults live here.
    Global/project/CLI overrides are merged by core/config.py (do NOT load config in defaults).
    """

    arena: ArenaConfig = Field(default_factory=ArenaConfig)
    table: TableConfig = Field(default_factory=TableConfig)
    limits: LimitsConfig = Field(default_factory=LimitsConfig)


# ================================
# Parse results
# ================================


class ParseStats(BaseModel):
    bytes_read: int = 0
    entries: int = 0
    keys: int = 0
    sections: int = 0
    arena_used: int = 0
    arena_capacity: int = 0
    table_capacity: int = 0
    duration_ms: int = 0


class ParseSource(BaseModel):
    name: str
    path: Optional[str] = None
    started_at: datetime
    finished_at: Optional[datetime] = None
