"""Public keys announced by accounts, and the encryption keys they issue."""

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

ENCRYPTION_KEY_LENGTH = 32

_ISSUED_KEYS = "Keystore.IssuedKeys"
_ENCRYPTION_KEYS = "Keystore.IssuedEncryptionKeys"


@dataclass(frozen=True)
class KeyAnnounced:
    """An account broadcast a new key."""

    key: bytes
    who: Hashable


@dataclass(frozen=True)
class KeyRevoked:
    """An account revoked one of its keys."""

    key: bytes
    who: Hashable


@dataclass(frozen=True)
class EncryptionKeyIssued:
    """An account issued an encryption key."""

    who: Hashable


class KeystoreError(DispatchError):
    """Base class for errors raised by the keystore module."""


class KeyExists(KeystoreError):
    """The specified key already exists."""


class KeyDoesNotExist(KeystoreError):
    """The specified key does not exist."""


class KeystoreWeights:
    """Benchmarked weights of the keystore calls."""

    def __init__(self, db_weight: RuntimeDbWeight = ROCKS_DB_WEIGHT) -> None:
        self.db_weight = db_weight

    def _cost(self, ref_time: int, proof_size: int, reads: int, writes: int) -> Weight:
        weight = Weight.from_parts(ref_time, proof_size)
        if reads:
            weight = weight.saturating_add(self.db_weight.reads(reads))
        return weight.saturating_add(self.db_weight.writes(writes))

    def announce_key(self) -> Weight:
        return self._cost(32_480_000, 5581, 1, 1)

    def announce_a_whole_lotta_keys(self) -> Weight:
        return self._cost(75_428_000, 5581, 1, 1)

    def announce_key_with_long_vectors(self) -> Weight:
        return self._cost(22_436_000, 5581, 1, 1)

    def announce_a_bunch_of_long_keys(self) -> Weight:
        return self._cost(84_066_000, 5581, 1, 1)

    def revoke_key(self) -> Weight:
        return self._cost(19_152_000, 5581, 1, 1)

    def revoke_one_of_many_keys(self) -> Weight:
        return self._cost(69_051_000, 5581, 1, 1)

    def issue_encryption_key(self) -> Weight:
        return self._cost(10_548_000, 0, 0, 1)

    def issue_a_ton_of_encryption_keys(self) -> Weight:
        return self._cost(18_492_000, 0, 0, 1)


class Keystore:
    """Maps accounts to the keys they have announced and not revoked."""

    def __init__(
        self,
        runtime: Runtime,
        weights: KeystoreWeights | None = None,
        max_size: int = DEFAULT_MAX_SIZE,
    ) -> None:
        self.runtime = runtime
        self.weights = weights if weights is not None else KeystoreWeights()
        self.max_size = max_size

    @property
    def _issued_keys(self) -> dict[tuple[Hashable, bytes], bytes]:
        return self.runtime.storage(_ISSUED_KEYS)

    @property
    def _encryption_keys(self) -> dict[Hashable, bytes]:
        return self.runtime.storage(_ENCRYPTION_KEYS)

    def announce_key(self, origin: Origin, fingerprint: bytes, location: bytes) -> Weight:
        """Record that the signer published the key ``fingerprint`` at ``location``."""
        fingerprint = bounded_bytes(fingerprint, self.max_size)
        location = bounded_bytes(location, self.max_size)
        with self.runtime.transaction():
            who = ensure_signed(origin)
            if (who, fingerprint) in self._issued_keys:
                raise KeyExists(f"{who!r} already announced {fingerprint!r}")
            self._issued_keys[(who, fingerprint)] = location
            self.runtime.deposit_event(KeyAnnounced(key=fingerprint, who=who))
        return self.weights.announce_key()

    def revoke_key(self, origin: Origin, key_index: bytes) -> Weight:
        """Remove the signer's key ``key_index`` from circulation."""
        key_index = bounded_bytes(key_index, self.max_size)
        with self.runtime.transaction():
            who = ensure_signed(origin)
            if (who, key_index) not in self._issued_keys:
                raise KeyDoesNotExist(f"{who!r} has no key {key_index!r}")
            del self._issued_keys[(who, key_index)]
            self.runtime.deposit_event(KeyRevoked(key=key_index, who=who))
        return self.weights.revoke_key()

    def issue_encryption_key(self, origin: Origin, key: bytes) -> Weight:
        """Set the signer's 32-byte encryption key, replacing any earlier one."""
        if isinstance(key, str):
            raise TypeError("encryption keys are bytes, not str")
        encryption_key = bytes(key)
        if len(encryption_key) != ENCRYPTION_KEY_LENGTH:
            raise ValueError(
                f"encryption keys are {ENCRYPTION_KEY_LENGTH} bytes, got {len(encryption_key)}"
            )
        with self.runtime.transaction():
            who = ensure_signed(origin)
            self._encryption_keys[who] = encryption_key
            self.runtime.deposit_event(EncryptionKeyIssued(who=who))
        return self.weights.issue_encryption_key()

    def key(self, who: Hashable, fingerprint: bytes) -> bytes | None:
        """The location of ``who``'s key ``fingerprint``, or None."""
        return self._issued_keys.get((who, bytes(fingerprint)))

    def encryption_key(self, who: Hashable) -> bytes | None:
        """The encryption key issued by ``who``, or None."""
        return self._encryption_keys.get(who)