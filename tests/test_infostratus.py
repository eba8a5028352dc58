import pytest

from fennel.infostratus import (
    CannotAssignOwnSubmission,
    Infostratus,
    InfostratusLock,
    InfostratusWeights,
    InsufficientBalance,
    SubmissionAlreadyAssigned,
    SubmissionAssigned,
    SubmissionDoesNotExist,
    SubmissionExists,
    SubmissionSent,
)
from fennel.runtime import INFOSTRATUS_LOCK_ID, BadOrigin, Origin, Runtime
from fennel.weight import Weight

RESOURCE = b"TEST"


@pytest.fixture
def runtime():
    return Runtime()


@pytest.fixture
def pallet(runtime):
    return Infostratus(runtime)


def test_create_submission_entry_works_and_emits_event(runtime, pallet):
    runtime.balances.deposit_creating(1, 100)
    pallet.create_submission_entry(Origin.signed(1), RESOURCE)
    assert runtime.last_event() == SubmissionSent(who=1, resource_location=RESOURCE)
    assert pallet.submissions_list(1, RESOURCE) is False


def test_create_submission_emits_lock_event_and_locks(runtime, pallet):
    runtime.balances.deposit_creating(1, 100)
    pallet.create_submission_entry(Origin.signed(1), RESOURCE)
    assert runtime.events[-2] == InfostratusLock(account=1, amount=100)
    assert runtime.balances.locks(1) == {INFOSTRATUS_LOCK_ID: 10}


def test_cannot_create_duplicate_submission(runtime, pallet):
    runtime.balances.deposit_creating(1, 100)
    pallet.create_submission_entry(Origin.signed(1), RESOURCE)
    before = runtime.events
    with pytest.raises(SubmissionExists):
        pallet.create_submission_entry(Origin.signed(1), RESOURCE)
    assert runtime.events == before


def test_request_submission_assignment_works_and_emits_event(runtime, pallet):
    runtime.balances.deposit_creating(1, 100)
    runtime.balances.deposit_creating(2, 100)
    pallet.create_submission_entry(Origin.signed(1), RESOURCE)
    pallet.request_submission_assignment(Origin.signed(2), 1, RESOURCE)
    assert runtime.last_event() == SubmissionAssigned(resource_location=RESOURCE, who=2)
    assert pallet.assignments_list(2, RESOURCE) is True
    assert pallet.submissions_list(1, RESOURCE) is True


def test_cannot_assign_nonexistent_submission(runtime, pallet):
    runtime.balances.deposit_creating(1, 100)
    runtime.balances.deposit_creating(2, 100)
    with pytest.raises(SubmissionDoesNotExist):
        pallet.request_submission_assignment(Origin.signed(2), 1, RESOURCE)
    assert pallet.assignments_list(2, RESOURCE) is False
    assert runtime.events == ()


def test_cannot_assign_already_assigned_submission(runtime, pallet):
    for account in (1, 2, 3):
        runtime.balances.deposit_creating(account, 100)
    pallet.create_submission_entry(Origin.signed(1), RESOURCE)
    pallet.request_submission_assignment(Origin.signed(2), 1, RESOURCE)
    before = runtime.events
    with pytest.raises(SubmissionAlreadyAssigned):
        pallet.request_submission_assignment(Origin.signed(3), 1, RESOURCE)
    assert runtime.events == before
    assert pallet.assignments_list(3, RESOURCE) is False
    assert runtime.balances.locks(3) == {}


def test_cannot_assign_own_submission(runtime, pallet):
    runtime.balances.deposit_creating(1, 100)
    pallet.create_submission_entry(Origin.signed(1), RESOURCE)
    with pytest.raises(CannotAssignOwnSubmission):
        pallet.request_submission_assignment(Origin.signed(1), 1, RESOURCE)
    assert pallet.submissions_list(1, RESOURCE) is False


def test_create_without_balance_fails(runtime, pallet):
    with pytest.raises(InsufficientBalance):
        pallet.create_submission_entry(Origin.signed(7), RESOURCE)
    assert runtime.events == ()


def test_assign_without_balance_fails(runtime, pallet):
    runtime.balances.deposit_creating(1, 100)
    pallet.create_submission_entry(Origin.signed(1), RESOURCE)
    with pytest.raises(InsufficientBalance):
        pallet.request_submission_assignment(Origin.signed(9), 1, RESOURCE)
    assert pallet.submissions_list(1, RESOURCE) is False


def test_unsigned_origin_is_rejected(runtime, pallet):
    with pytest.raises(BadOrigin):
        pallet.create_submission_entry(Origin.root(), RESOURCE)


def test_oversized_resource_is_rejected(runtime, pallet):
    runtime.balances.deposit_creating(1, 100)
    with pytest.raises(ValueError):
        pallet.create_submission_entry(Origin.signed(1), bytes(1025))


def test_weights_are_returned(runtime, pallet):
    runtime.balances.deposit_creating(1, 100)
    runtime.balances.deposit_creating(2, 100)
    created = pallet.create_submission_entry(Origin.signed(1), RESOURCE)
    assigned = pallet.request_submission_assignment(Origin.signed(2), 1, RESOURCE)
    assert created == Weight(324_851_000, 4764)
    assert assigned == Weight(476_958_000, 4764)


def test_heavy_storage_weights_exceed_plain_ones():
    weights = InfostratusWeights()
    assert (
        weights.create_submission_entry_heavy_storage().ref_time
        > weights.create_submission_entry().ref_time
    )
    assert (
        weights.request_submission_assignment_heavy_storage().ref_time
        > weights.request_submission_assignment().ref_time
    )
    assert weights.request_submission_assignment_heavy_storage().proof_size == 4764