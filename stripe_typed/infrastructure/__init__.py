"""Infrastructure Layer — HTTP transport, request execution, logging setup.

Invariants:
    - Exactly one network round-trip per executor call; no retry logic here
    - All transport failures mapped to TransportFailure (core/errors.py)
"""
