# fennel

Deterministic, in-memory models of four ledger modules:

- identities
- certificates
- key announcements
- submission review

Each module keeps its own storage maps in a shared `Runtime` and records events there. When it rejects a call, it raises a typed error. Every call runs inside `Runtime.transaction()`, so a rejected call leaves storage, balance locks and the event log unchanged. A successful call returns the benchmarked `Weight` of that call.

## Installation

```
pip install .
```

To run the test suite:

```
pip install .[test]
pytest
```

## Example

```python
from fennel.runtime import Runtime, Origin
from fennel.certificate import Certificate, CertificateSent
from fennel.identity import Identity

runtime = Runtime()                        # block number 1, existential deposit 1
runtime.balances.deposit_creating(1, 100)

certificates = Certificate(runtime)
certificates.send_certificate(Origin.signed(1), 2)
assert certificates.certificate_list(1, 2) is True
assert runtime.last_event() == CertificateSent(sender=1, recipient=2)
assert runtime.balances.locks(1) == {b"certlock": 10}

identities = Identity(runtime)
identities.create_identity(Origin.signed(1))         # identity 0
identities.add_or_update_identity_trait(Origin.signed(1), 0, b"name", b"Ada")
assert identities.identity_trait_list(0, b"name") == b"Ada"
```

## Building blocks

### `fennel.runtime`

- `Runtime` holds the named storage maps and the event log.
  - `storage(name)` returns a storage map.
  - `deposit_event`, `last_event` and `events` cover the event log. Nothing is recorded while `block_number` is 0.
  - `transaction()` is a context manager that rolls back on error.
  - `balances` is the runtime's `Balances` ledger.
- `Balances` keeps free balances and 8-byte named locks. It provides:
  - `deposit_creating` and `make_free_balance_be`
  - `total_balance`, `free_balance` and `minimum_balance`
  - `set_lock`, `remove_lock` and `locks`
- `Origin.signed(account)`, `Origin.root()` and `Origin.none()` describe who makes a call. `ensure_signed(origin)` returns the signing account or raises `BadOrigin`.
- `bounded_bytes(data, max_size)` converts its input to `bytes`. It raises `ValueError` if the result is longer than `max_size`, and `TypeError` if given a `str`.
- `DispatchError` is the base class of every call error. `BadOrigin` derives from it.

### `fennel.weight`

- `Weight(ref_time, proof_size)` has saturating `saturating_add` and `saturating_mul`, plus `from_parts` and `zero`.
- `RuntimeDbWeight(read, write)` provides `reads`, `writes` and `reads_writes`.
- `ROCKS_DB_WEIGHT` is the default database cost.

### The ledger modules

- `fennel.identity.Identity` creates identities with sequential IDs starting at 0. It also revokes them and adds, updates or removes key/value traits on them. Only the owner of an identity may change it.
  - `identity_list(id)` returns the owner of an identity.
  - `identity_trait_list(id, key)` returns a trait's value, or `b""` when the trait is unset.
  - `identity_number` holds the next identity ID.
- `fennel.certificate.Certificate` sends and revokes certificates between accounts. The sender must hold at least the minimum balance.
  - Sending places a lock of 10 on the sender. Revoking removes the lock and keeps the entry, marked `False`.
- `fennel.keystore.Keystore` announces and revokes key fingerprints, each with a location. It also stores one 32-byte encryption key per account. A key of any other length raises `ValueError`.
- `fennel.infostratus.Infostratus` records submissions of resource locations. Another funded account may request the assignment of a submission to itself. A submission can be assigned only once, and never to the account that posted it.
  - `assignments_list(who, resource)` tells whether `who` was assigned `resource`.
  - `submissions_list(poster, resource)` tells whether that submission has been assigned.

Keys, values, fingerprints and resource locations are limited to 1024 bytes by default. Pass `max_size` to a module's constructor to change the limit.

Each module also has a weights class: `IdentityWeights`, `CertificateWeights`, `KeystoreWeights` and `InfostratusWeights`. Each has one method per benchmarked call, and each accepts a custom `RuntimeDbWeight`.

## Errors

| Module | Errors (all derive from `DispatchError`) |
| --- | --- |
| identity | `StorageOverflow`, `IdentityNotOwned` |
| certificate | `CertificateExists`, `CertificateNotOwned`, `InsufficientBalance` |
| keystore | `KeyExists`, `KeyDoesNotExist` |
| infostratus | `SubmissionExists`, `SubmissionDoesNotExist`, `SubmissionAlreadyAssigned`, `CannotAssignOwnSubmission`, `InsufficientBalance` |

A call from an origin that is not signed raises `BadOrigin`.

## What this package does not do

This is a library of in-memory state machines only. It has:

- no network node and no consensus
- no block production and no transaction signing
- no RPC server and no command-line program
- no persistent storage

All state lives in a `Runtime` object and is lost when that object is discarded.