"""Numbered identities owned by accounts, each with key/value traits."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable

from fennel.runtime import (
    DEFAULT_MAX_SIZE,
    DispatchError,
    Origin,
    Runtime,
    bounded_bytes,
    ensure_signed,
)
from fennel.weight import ROCKS_DB_WEIGHT, RuntimeDbWeight, Weight

U32_MAX = 2**32 - 1

_NUMBER = "Identity.IdentityNumber"
_SIGNAL_COUNT = "Identity.SignalCount"
_LIST = "Identity.IdentityList"
_TRAITS = "Identity.IdentityTraitList"
_VALUE = "value"


@dataclass(frozen=True)
class IdentityCreated:
    """A new identity was created."""

    identity_id: int
    owner: Hashable


@dataclass(frozen=True)
class IdentityRevoked:
    """An identity was revoked by its owner."""

    identity_id: int
    owner: Hashable


@dataclass(frozen=True)
class IdentityUpdated:
    """A trait of an identity was added, changed or removed."""

    identity_id: int
    owner: Hashable


class IdentityError(DispatchError):
    """Base class for errors raised by the identity module."""


class StorageOverflow(IdentityError):
    """The identity counter cannot grow any further."""


class IdentityNotOwned(IdentityError):
    """The current account does not own the identity."""


class IdentityWeights:
    """Benchmarked weights of the identity calls."""

    def __init__(self, db_weight: RuntimeDbWeight = ROCKS_DB_WEIGHT) -> None:
        self.db_weight = db_weight

    def _cost(
        self, base: Weight, reads: int, writes: int
    ) -> Weight:
        return base.saturating_add(self.db_weight.reads(reads)).saturating_add(
            self.db_weight.writes(writes)
        )

    def create_identity(self) -> Weight:
        return self._cost(Weight.from_parts(17_073_000, 3517), 2, 2)

    def revoke_identity(self) -> Weight:
        return self._cost(Weight.from_parts(17_001_000, 3517), 1, 1)

    def add_or_update_identity_trait(self, length: int) -> Weight:
        base = Weight.from_parts(19_555_962, 5553).saturating_add(
            Weight.from_parts(3_852, 0).saturating_mul(length)
        )
        return self._cost(base, 2, 1)

    def remove_identity_trait(self, length: int) -> Weight:
        base = Weight.from_parts(20_651_638, 3517).saturating_add(
            Weight.from_parts(782, 0).saturating_mul(length)
        )
        return self._cost(base, 1, 1)

    def revoke_identity_heavy_storage(self) -> Weight:
        return self._cost(Weight.from_parts(43_092_000, 3517), 1, 1)

    def add_or_update_long_identity_trait(self) -> Weight:
        return self._cost(Weight.from_parts(22_958_000, 5553), 2, 1)

    def add_or_update_many_identity_traits(self) -> Weight:
        return self._cost(Weight.from_parts(67_841_000, 5553), 2, 1)

    def remove_identity_trait_heavy_storage(self) -> Weight:
        return self._cost(Weight.from_parts(56_402_000, 3517), 1, 1)

    def remove_long_identity_trait(self) -> Weight:
        return self._cost(Weight.from_parts(23_436_000, 3517), 1, 1)


class Identity:
    """Creates, revokes and annotates identities owned by accounts."""

    def __init__(
        self,
        runtime: Runtime,
        weights: IdentityWeights | None = None,
        max_size: int = DEFAULT_MAX_SIZE,
    ) -> None:
        self.runtime = runtime
        self.weights = weights if weights is not None else IdentityWeights()
        self.max_size = max_size

    @property
    def identity_number(self) -> int:
        """The number of identities created so far; also the next identity ID."""
        return self.runtime.storage(_NUMBER).get(_VALUE, 0)

    @identity_number.setter
    def identity_number(self, value: int) -> None:
        if not 0 <= value <= U32_MAX:
            raise ValueError(f"identity number must lie in [0, 2**32 - 1], got {value}")
        self.runtime.storage(_NUMBER)[_VALUE] = value

    @property
    def signal_count(self) -> int:
        """The number of signals transmitted to the network."""
        return self.runtime.storage(_SIGNAL_COUNT).get(_VALUE, 0)

    @property
    def _list(self) -> dict[int, Hashable]:
        return self.runtime.storage(_LIST)

    @property
    def _traits(self) -> dict[tuple[int, bytes], bytes]:
        return self.runtime.storage(_TRAITS)

    def _ensure_owner(self, who: Hashable, identity_id: int) -> None:
        if identity_id not in self._list or self._list[identity_id] != who:
            raise IdentityNotOwned(f"identity {identity_id} is not owned by {who!r}")

    def create_identity(self, origin: Origin) -> Weight:
        """Create a new identity owned by the signer; returns the call weight."""
        with self.runtime.transaction():
            who = ensure_signed(origin)
            current_id = self.identity_number
            if current_id >= U32_MAX:
                raise StorageOverflow("identity counter is exhausted")
            new_id = current_id + 1
            self.identity_number = new_id
            if current_id in self._list:
                raise StorageOverflow(f"identity {current_id} is already in use")
            self._list[current_id] = who
            self.runtime.deposit_event(IdentityCreated(identity_id=current_id, owner=who))
        return self.weights.create_identity()

    def revoke_identity(self, origin: Origin, identity_id: int) -> Weight:
        """Revoke ``identity_id`` if the signer owns it."""
        with self.runtime.transaction():
            who = ensure_signed(origin)
            self._ensure_owner(who, identity_id)
            del self._list[identity_id]
            self.runtime.deposit_event(IdentityRevoked(identity_id=identity_id, owner=who))
        return self.weights.revoke_identity()

    def add_or_update_identity_trait(
        self, origin: Origin, identity_id: int, key: bytes, value: bytes
    ) -> Weight:
        """Set the trait ``key`` of ``identity_id`` to ``value``."""
        key = bounded_bytes(key, self.max_size)
        value = bounded_bytes(value, self.max_size)
        with self.runtime.transaction():
            who = ensure_signed(origin)
            self._ensure_owner(who, identity_id)
            self._traits[(identity_id, key)] = value
            self.runtime.deposit_event(IdentityUpdated(identity_id=identity_id, owner=who))
        return self.weights.add_or_update_identity_trait(len(key))

    def remove_identity_trait(self, origin: Origin, identity_id: int, key: bytes) -> Weight:
        """Remove the trait ``key`` from ``identity_id``."""
        key = bounded_bytes(key, self.max_size)
        with self.runtime.transaction():
            who = ensure_signed(origin)
            self._ensure_owner(who, identity_id)
            self._traits.pop((identity_id, key), None)
            self.runtime.deposit_event(IdentityUpdated(identity_id=identity_id, owner=who))
        return self.weights.remove_identity_trait(len(key))

    def identity_list(self, identity_id: int) -> Hashable | None:
        """The owner of ``identity_id``, or None if there is none."""
        return self._list.get(identity_id)

    def identity_trait_list(self, identity_id: int, key: bytes) -> bytes:
        """The value of trait ``key``; empty when unset."""
        return self._traits.get((identity_id, bytes(key)), b"")