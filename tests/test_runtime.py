import pytest

from fennel.runtime import (
    CERTIFICATE_LOCK_ID,
    DEFAULT_MAX_SIZE,
    EXISTENTIAL_DEPOSIT,
    INFOSTRATUS_LOCK_ID,
    BadOrigin,
    DispatchError,
    Origin,
    Runtime,
    bounded_bytes,
    ensure_signed,
)


def test_ensure_signed_returns_account():
    assert ensure_signed(Origin.signed(42)) == 42


@pytest.mark.parametrize("origin", [Origin.root(), Origin.none()])
def test_ensure_signed_rejects_unsigned(origin):
    with pytest.raises(BadOrigin):
        ensure_signed(origin)


def test_bad_origin_is_dispatch_error():
    with pytest.raises(DispatchError):
        ensure_signed(Origin.root())


def test_bounded_bytes_accepts_within_bound():
    assert bounded_bytes(b"Luke", DEFAULT_MAX_SIZE) == b"Luke"
    assert bounded_bytes(bytearray(b"TEST"), 4) == b"TEST"


def test_bounded_bytes_rejects_too_long():
    with pytest.raises(ValueError):
        bounded_bytes(b"\x00" * (DEFAULT_MAX_SIZE + 1), DEFAULT_MAX_SIZE)


def test_bounded_bytes_rejects_str():
    with pytest.raises(TypeError):
        bounded_bytes("name", DEFAULT_MAX_SIZE)


def test_lock_ids_from_mock():
    rt = Runtime()
    rt.balances.set_lock(CERTIFICATE_LOCK_ID, 1, 10)
    rt.balances.set_lock(INFOSTRATUS_LOCK_ID, 1, 20)
    assert rt.balances.locks(1) == {b"certlock": 10, b"infolock": 20}


def test_storage_map_persists():
    rt = Runtime()
    rt.storage("m")[1] = True
    assert rt.storage("m") == {1: True}
    assert rt.storage("other") == {}


def test_events_recorded_in_order():
    rt = Runtime()
    rt.deposit_event("first")
    rt.deposit_event("second")
    assert rt.last_event() == "second"
    assert rt.events == ("first", "second")


def test_no_events_at_genesis():
    rt = Runtime(block_number=0)
    rt.deposit_event("ignored")
    assert rt.events == ()
    assert rt.last_event() is None


def test_transaction_rolls_back_on_error():
    rt = Runtime()
    rt.storage("m")[1] = "a"
    rt.balances.deposit_creating(1, 100)
    rt.deposit_event("kept")
    with pytest.raises(DispatchError):
        with rt.transaction():
            rt.storage("m")[1] = "b"
            rt.storage("m")[2] = "c"
            rt.balances.set_lock(CERTIFICATE_LOCK_ID, 1, 10)
            rt.deposit_event("dropped")
            raise DispatchError("boom")
    assert rt.storage("m") == {1: "a"}
    assert rt.balances.locks(1) == {}
    assert rt.events == ("kept",)


def test_transaction_commits_on_success():
    rt = Runtime()
    with rt.transaction():
        rt.storage("m")[1] = "b"
        rt.deposit_event("ev")
    assert rt.storage("m") == {1: "b"}
    assert rt.last_event() == "ev"


def test_deposit_creating_credits_account():
    rt = Runtime()
    assert rt.balances.deposit_creating(1, 100) == 100
    assert rt.balances.free_balance(1) == 100
    assert rt.balances.total_balance(1) == 100


def test_deposit_creating_below_existential_deposit_is_ignored():
    rt = Runtime(existential_deposit=5)
    assert rt.balances.deposit_creating(1, 4) == 0
    assert rt.balances.total_balance(1) == 0


def test_minimum_balance_is_existential_deposit():
    assert Runtime().balances.minimum_balance() == EXISTENTIAL_DEPOSIT


def test_make_free_balance_be_sets_and_reaps():
    rt = Runtime()
    rt.balances.make_free_balance_be(7, 500)
    assert rt.balances.free_balance(7) == 500
    rt.balances.make_free_balance_be(7, 0)
    assert rt.balances.total_balance(7) == 0


def test_locks_set_and_remove_without_touching_balance():
    rt = Runtime()
    rt.balances.deposit_creating(1, 100)
    rt.balances.set_lock(CERTIFICATE_LOCK_ID, 1, 10)
    assert rt.balances.locks(1) == {CERTIFICATE_LOCK_ID: 10}
    assert rt.balances.free_balance(1) == 100
    rt.balances.remove_lock(CERTIFICATE_LOCK_ID, 1)
    assert rt.balances.locks(1) == {}


def test_set_lock_replaces_existing():
    rt = Runtime()
    rt.balances.set_lock(INFOSTRATUS_LOCK_ID, 2, 10)
    rt.balances.set_lock(INFOSTRATUS_LOCK_ID, 2, 20)
    assert rt.balances.locks(2) == {INFOSTRATUS_LOCK_ID: 20}


def test_set_lock_requires_eight_byte_id():
    with pytest.raises(ValueError):
        Runtime().balances.set_lock(b"short", 1, 10)