"""Certificates sent from one account to another, backed by a balance lock."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable

from fennel.runtime import (
    CERTIFICATE_LOCK_ID,
    LOCK_PRICE,
    DispatchError,
    Origin,
    Runtime,
    ensure_signed,
)
from fennel.weight import ROCKS_DB_WEIGHT, RuntimeDbWeight, Weight

CERTIFICATE_EXISTS = True
_STORAGE = "Certificate.CertificateList"


@dataclass(frozen=True)
class CertificateSent:
    """A certificate was sent."""

    sender: Hashable
    recipient: Hashable


@dataclass(frozen=True)
class CertificateRevoked:
    """A certificate was revoked."""

    sender: Hashable
    recipient: Hashable


@dataclass(frozen=True)
class CertificateLock:
    """A certificate deposit lock was placed on an account."""

    account: Hashable
    amount: int


@dataclass(frozen=True)
class CertificateUnlock:
    """A certificate deposit lock was removed from an account."""

    account: Hashable
    amount: int


class CertificateError(DispatchError):
    """Base class for errors raised by the certificate module."""


class CertificateNotOwned(CertificateError):
    """The current account does not own the certificate."""


class CertificateExists(CertificateError):
    """The certificate already exists."""


class InsufficientBalance(CertificateError):
    """The account holds less than the minimum balance."""


class CertificateWeights:
    """Benchmarked weights of the certificate calls."""

    def __init__(self, db_weight: RuntimeDbWeight = ROCKS_DB_WEIGHT) -> None:
        self.db_weight = db_weight

    def _cost(self, ref_time: int, proof_size: int, reads: int, writes: int) -> Weight:
        return (
            Weight.from_parts(ref_time, proof_size)
            .saturating_add(self.db_weight.reads(reads))
            .saturating_add(self.db_weight.writes(writes))
        )

    def send_certificate(self) -> Weight:
        return self._cost(49_661_000, 4764, 3, 2)

    def revoke_certificate(self) -> Weight:
        return self._cost(51_129_000, 4764, 3, 2)

    def send_certificate_heavy_storage(self) -> Weight:
        return self._cost(93_159_000, 4764, 3, 2)

    def revoke_certificate_heavy_storage(self) -> Weight:
        return self._cost(96_624_000, 4764, 3, 2)


class Certificate:
    """Records which accounts have issued certificates to which recipients."""

    def __init__(
        self,
        runtime: Runtime,
        weights: CertificateWeights | None = None,
        lock_id: bytes = CERTIFICATE_LOCK_ID,
        lock_amount: int = LOCK_PRICE,
    ) -> None:
        self.runtime = runtime
        self.weights = weights if weights is not None else CertificateWeights()
        self.lock_id = lock_id
        self.lock_amount = lock_amount

    @property
    def _list(self) -> dict[tuple[Hashable, Hashable], bool]:
        return self.runtime.storage(_STORAGE)

    def _ensure_funded(self, who: Hashable) -> None:
        balances = self.runtime.balances
        if balances.total_balance(who) < balances.minimum_balance():
            raise InsufficientBalance(f"account {who!r} is below the minimum balance")

    def send_certificate(self, origin: Origin, recipient: Hashable) -> Weight:
        """Issue a certificate from the signer to ``recipient``; returns the call weight."""
        with self.runtime.transaction():
            who = ensure_signed(origin)
            self._ensure_funded(who)
            if (who, recipient) in self._list:
                raise CertificateExists(f"certificate {who!r} -> {recipient!r} already exists")
            balances = self.runtime.balances
            balances.set_lock(self.lock_id, who, self.lock_amount)
            self.runtime.deposit_event(
                CertificateLock(account=who, amount=balances.free_balance(who))
            )
            self._list[(who, recipient)] = CERTIFICATE_EXISTS
            self.runtime.deposit_event(CertificateSent(sender=who, recipient=recipient))
        return self.weights.send_certificate()

    def revoke_certificate(self, origin: Origin, recipient: Hashable) -> Weight:
        """Revoke the signer's certificate to ``recipient``; the entry stays, marked false."""
        with self.runtime.transaction():
            who = ensure_signed(origin)
            self._ensure_funded(who)
            if (who, recipient) not in self._list:
                raise CertificateNotOwned(f"no certificate {who!r} -> {recipient!r}")
            balances = self.runtime.balances
            balances.remove_lock(self.lock_id, who)
            self.runtime.deposit_event(
                CertificateUnlock(account=who, amount=balances.free_balance(who))
            )
            self._list[(who, recipient)] = not CERTIFICATE_EXISTS
            self.runtime.deposit_event(CertificateRevoked(sender=who, recipient=recipient))
        return self.weights.revoke_certificate()

    def certificate_list(self, sender: Hashable, recipient: Hashable) -> bool:
        """Whether ``sender`` holds a live certificate for ``recipient``."""
        return self._list.get((sender, recipient), False)