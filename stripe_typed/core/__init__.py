"""Core Layer — pure wire mapping and failure classification, no IO, no async.

Invariants:
    - No module in core/ imports from services/ or infrastructure/
    - All functions are pure and deterministic (except idempotency key generation)
"""
