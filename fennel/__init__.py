"""In-memory ledger modules for identities, certificates, keys and submissions."""

__version__ = "0.1.0"