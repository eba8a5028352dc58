"""Two-dimensional execution weights and database access costs."""

from __future__ import annotations

from dataclasses import dataclass

U64_MAX = 2**64 - 1


def _saturate(value: int) -> int:
    return min(max(value, 0), U64_MAX)


def _check_u64(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    if not 0 <= value <= U64_MAX:
        raise ValueError(f"{name} must lie in [0, 2**64 - 1], got {value}")


@dataclass(frozen=True)
class Weight:
    """Computation time (picoseconds) and proof size (bytes) of an operation."""

    ref_time: int = 0
    proof_size: int = 0

    def __post_init__(self) -> None:
        _check_u64("ref_time", self.ref_time)
        _check_u64("proof_size", self.proof_size)

    @classmethod
    def from_parts(cls, ref_time: int, proof_size: int) -> Weight:
        return cls(ref_time, proof_size)

    @classmethod
    def zero(cls) -> Weight:
        return cls(0, 0)

    def saturating_add(self, other: Weight) -> Weight:
        """Add component-wise, clamping each component at the u64 maximum."""
        return Weight(
            _saturate(self.ref_time + other.ref_time),
            _saturate(self.proof_size + other.proof_size),
        )

    def saturating_mul(self, factor: int) -> Weight:
        """Multiply both components by ``factor``, clamping at the u64 maximum."""
        _check_u64("factor", factor)
        return Weight(
            _saturate(self.ref_time * factor),
            _saturate(self.proof_size * factor),
        )


@dataclass(frozen=True)
class RuntimeDbWeight:
    """Cost of a single database read and a single database write."""

    read: int
    write: int

    def __post_init__(self) -> None:
        _check_u64("read", self.read)
        _check_u64("write", self.write)

    def reads(self, count: int) -> Weight:
        _check_u64("count", count)
        return Weight(_saturate(self.read * count), 0)

    def writes(self, count: int) -> Weight:
        _check_u64("count", count)
        return Weight(_saturate(self.write * count), 0)

    def reads_writes(self, reads: int, writes: int) -> Weight:
        return self.reads(reads).saturating_add(self.writes(writes))


# 25 microseconds per read, 100 microseconds per write, in picoseconds.
ROCKS_DB_WEIGHT = RuntimeDbWeight(read=25_000_000, write=100_000_000)