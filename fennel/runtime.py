"""A small in-memory runtime: origins, storage, events and balances."""

from __future__ import annotations

import enum
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Hashable

DEFAULT_MAX_SIZE = 1024
EXISTENTIAL_DEPOSIT = 1
LOCK_PRICE = 10
CERTIFICATE_LOCK_ID = b"certlock"
INFOSTRATUS_LOCK_ID = b"infolock"

_U128_MAX = 2**128 - 1


class DispatchError(Exception):
    """Raised when a dispatched call fails."""


class BadOrigin(DispatchError):
    """The call was made from an origin that is not allowed."""


class OriginKind(enum.Enum):
    SIGNED = "signed"
    ROOT = "root"
    NONE = "none"


@dataclass(frozen=True)
class Origin:
    """Who a call is dispatched on behalf of."""

    kind: OriginKind
    account: Hashable | None = None

    @classmethod
    def signed(cls, account: Hashable) -> Origin:
        return cls(OriginKind.SIGNED, account)

    @classmethod
    def root(cls) -> Origin:
        return cls(OriginKind.ROOT)

    @classmethod
    def none(cls) -> Origin:
        return cls(OriginKind.NONE)


def ensure_signed(origin: Origin) -> Hashable:
    """Return the signing account of ``origin`` or raise :class:`BadOrigin`."""
    if origin.kind is not OriginKind.SIGNED:
        raise BadOrigin(f"expected a signed origin, got {origin.kind.value}")
    return origin.account


def bounded_bytes(data: bytes | bytearray | memoryview | Any, max_size: int) -> bytes:
    """Convert ``data`` to bytes, refusing anything longer than ``max_size``."""
    if isinstance(data, str):
        raise TypeError("bounded_bytes expects bytes, not str")
    value = bytes(data)
    if len(value) > max_size:
        raise ValueError(f"length {len(value)} exceeds the bound of {max_size}")
    return value


class Runtime:
    """Holds named storage maps and the event log; supports rollback."""

    def __init__(
        self, existential_deposit: int = EXISTENTIAL_DEPOSIT, block_number: int = 1
    ) -> None:
        self._storage: dict[str, dict[Any, Any]] = {}
        self._events: list[Any] = []
        self.block_number = block_number
        self.balances = Balances(self, existential_deposit)

    def storage(self, name: str) -> dict[Any, Any]:
        """Return the storage map called ``name``, creating it when absent."""
        return self._storage.setdefault(name, {})

    def deposit_event(self, event: Any) -> None:
        """Record ``event``; nothing is recorded at block zero (genesis)."""
        if self.block_number == 0:
            return
        self._events.append(event)

    def last_event(self) -> Any | None:
        return self._events[-1] if self._events else None

    @property
    def events(self) -> tuple[Any, ...]:
        return tuple(self._events)

    @contextmanager
    def transaction(self) -> Iterator[Runtime]:
        """Undo every storage change and event if the block raises."""
        storage_snapshot = {name: dict(m) for name, m in self._storage.items()}
        events_snapshot = list(self._events)
        try:
            yield self
        except BaseException:
            for name, current in self._storage.items():
                current.clear()
                current.update(storage_snapshot.get(name, {}))
            self._events[:] = events_snapshot
            raise


class Balances:
    """Free balances and named locks kept in the runtime's storage."""

    _ACCOUNTS = "Balances.Account"
    _LOCKS = "Balances.Locks"

    def __init__(self, runtime: Runtime, existential_deposit: int = EXISTENTIAL_DEPOSIT) -> None:
        self._runtime = runtime
        self._existential_deposit = existential_deposit

    @property
    def _accounts(self) -> dict[Any, int]:
        return self._runtime.storage(self._ACCOUNTS)

    @property
    def _locks(self) -> dict[tuple[Any, bytes], int]:
        return self._runtime.storage(self._LOCKS)

    def deposit_creating(self, who: Hashable, amount: int) -> int:
        """Add ``amount`` to ``who``; a new account below the deposit gets nothing."""
        if amount < 0:
            raise ValueError("amount must not be negative")
        accounts = self._accounts
        if who not in accounts and amount < self._existential_deposit:
            return 0
        current = accounts.get(who, 0)
        new = min(current + amount, _U128_MAX)
        accounts[who] = new
        return new - current

    def make_free_balance_be(self, who: Hashable, amount: int) -> None:
        """Set the free balance; below the existential deposit the account is reaped."""
        if amount < 0:
            raise ValueError("amount must not be negative")
        accounts = self._accounts
        if amount < self._existential_deposit:
            accounts.pop(who, None)
        else:
            accounts[who] = min(amount, _U128_MAX)

    def total_balance(self, who: Hashable) -> int:
        return self._accounts.get(who, 0)

    def free_balance(self, who: Hashable) -> int:
        return self._accounts.get(who, 0)

    def minimum_balance(self) -> int:
        return self._existential_deposit

    def set_lock(self, lock_id: bytes, who: Hashable, amount: int) -> None:
        """Create or replace the lock ``lock_id`` on ``who``."""
        if len(lock_id) != 8:
            raise ValueError("lock identifiers are exactly 8 bytes")
        if amount < 0:
            raise ValueError("amount must not be negative")
        if amount == 0:
            self.remove_lock(lock_id, who)
            return
        self._locks[(who, bytes(lock_id))] = amount

    def remove_lock(self, lock_id: bytes, who: Hashable) -> None:
        self._locks.pop((who, bytes(lock_id)), None)

    def locks(self, who: Hashable) -> dict[bytes, int]:
        """Return the locks held on ``who`` by identifier."""
        return {lock_id: amount for (owner, lock_id), amount in self._locks.items() if owner == who}