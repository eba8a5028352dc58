"""Submissions of online information and their assignment to verifiers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable

from fennel.runtime import (
    DEFAULT_MAX_SIZE,
    INFOSTRATUS_LOCK_ID,
    LOCK_PRICE,
    DispatchError,
    Origin,
    Runtime,
    bounded_bytes,
    ensure_signed,
)
from fennel.weight import ROCKS_DB_WEIGHT, RuntimeDbWeight, Weight

ASSIGNMENT_EXISTS = True
ASSIGNMENT_DOES_NOT_EXIST = False

_ASSIGNMENTS = "Infostratus.AssignmentsList"
_SUBMISSIONS = "Infostratus.SubmissionsList"


@dataclass(frozen=True)
class SubmissionSent:
    """An account submitted a resource for verification."""

    who: Hashable
    resource_location: bytes


@dataclass(frozen=True)
class SubmissionAssigned:
    """A submission was assigned to an account for verification."""

    resource_location: bytes
    who: Hashable


@dataclass(frozen=True)
class InfostratusLock:
    """A deposit lock was placed on an account."""

    account: Hashable
    amount: int


@dataclass(frozen=True)
class InfostratusUnlock:
    """A deposit lock was removed from an account."""

    account: Hashable
    amount: int


class InfostratusError(DispatchError):
    """Base class for errors raised by the infostratus module."""


class SubmissionDoesNotExist(InfostratusError):
    """No such submission has been made by the poster."""


class SubmissionExists(InfostratusError):
    """The submission has already been made."""


class SubmissionAlreadyAssigned(InfostratusError):
    """The submission is already assigned to a verifier."""


class InsufficientBalance(InfostratusError):
    """The account holds less than the minimum balance."""


class CannotAssignOwnSubmission(InfostratusError):
    """An account may not verify its own submission."""


class InfostratusWeights:
    """Benchmarked weights of the infostratus calls."""

    def __init__(self, db_weight: RuntimeDbWeight = ROCKS_DB_WEIGHT) -> None:
        self.db_weight = db_weight

    def _cost(self, ref_time: int, proof_size: int, reads: int, writes: int) -> Weight:
        return (
            Weight.from_parts(ref_time, proof_size)
            .saturating_add(self.db_weight.reads(reads))
            .saturating_add(self.db_weight.writes(writes))
        )

    def create_submission_entry(self) -> Weight:
        return self._cost(49_851_000, 4764, 3, 2)

    def create_submission_entry_heavy_storage(self) -> Weight:
        return self._cost(102_626_000, 4764, 3, 2)

    def request_submission_assignment(self) -> Weight:
        return self._cost(76_958_000, 4764, 4, 3)

    def request_submission_assignment_heavy_storage(self) -> Weight:
        return self._cost(152_604_000, 4764, 4, 3)


class Infostratus:
    """Tracks submitted resources and which accounts verify them."""

    def __init__(
        self,
        runtime: Runtime,
        weights: InfostratusWeights | None = None,
        max_size: int = DEFAULT_MAX_SIZE,
        lock_id: bytes = INFOSTRATUS_LOCK_ID,
        lock_amount: int = LOCK_PRICE,
    ) -> None:
        self.runtime = runtime
        self.weights = weights if weights is not None else InfostratusWeights()
        self.max_size = max_size
        self.lock_id = lock_id
        self.lock_amount = lock_amount

    @property
    def _assignments(self) -> dict[tuple[Hashable, bytes], bool]:
        return self.runtime.storage(_ASSIGNMENTS)

    @property
    def _submissions(self) -> dict[tuple[Hashable, bytes], bool]:
        return self.runtime.storage(_SUBMISSIONS)

    def _ensure_funded(self, who: Hashable) -> None:
        balances = self.runtime.balances
        if balances.total_balance(who) < balances.minimum_balance():
            raise InsufficientBalance(f"account {who!r} is below the minimum balance")

    def _lock(self, who: Hashable) -> None:
        balances = self.runtime.balances
        balances.set_lock(self.lock_id, who, self.lock_amount)
        self.runtime.deposit_event(
            InfostratusLock(account=who, amount=balances.free_balance(who))
        )

    def create_submission_entry(self, origin: Origin, resource_location: bytes) -> Weight:
        """Record that the signer wants ``resource_location`` verified."""
        resource = bounded_bytes(resource_location, self.max_size)
        with self.runtime.transaction():
            who = ensure_signed(origin)
            self._ensure_funded(who)
            if (who, resource) in self._submissions:
                raise SubmissionExists(f"{who!r} already submitted {resource!r}")
            self._lock(who)
            self._submissions[(who, resource)] = ASSIGNMENT_DOES_NOT_EXIST
            self.runtime.deposit_event(SubmissionSent(who=who, resource_location=resource))
        return self.weights.create_submission_entry()

    def request_submission_assignment(
        self, origin: Origin, poster: Hashable, resource_location: bytes
    ) -> Weight:
        """Assign ``poster``'s submission of ``resource_location`` to the signer."""
        resource = bounded_bytes(resource_location, self.max_size)
        with self.runtime.transaction():
            who = ensure_signed(origin)
            self._ensure_funded(who)
            if who == poster:
                raise CannotAssignOwnSubmission(f"{who!r} cannot verify its own submission")
            key = (poster, resource)
            if key not in self._submissions:
                raise SubmissionDoesNotExist(f"{poster!r} has not submitted {resource!r}")
            if self._submissions[key]:
                raise SubmissionAlreadyAssigned(f"{resource!r} from {poster!r} is assigned")
            self._lock(who)
            self._assignments[(who, resource)] = ASSIGNMENT_EXISTS
            self._submissions[key] = ASSIGNMENT_EXISTS
            self.runtime.deposit_event(SubmissionAssigned(resource_location=resource, who=who))
        return self.weights.request_submission_assignment()

    def assignments_list(self, who: Hashable, resource_location: bytes) -> bool:
        """Whether ``who`` has been assigned ``resource_location``."""
        return self._assignments.get((who, bytes(resource_location)), False)

    def submissions_list(self, who: Hashable, resource_location: bytes) -> bool:
        """Whether ``who``'s submission of ``resource_location`` is assigned."""
        return self._submissions.get((who, bytes(resource_location)), False)