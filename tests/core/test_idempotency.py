"""Idempotency Key Source — fresh opaque UUID4 keys."""

import uuid

from stripe_typed.core.idempotency import new_key


def test_key_is_uuid4_string():
    key = new_key()
    assert isinstance(key, str)
    assert uuid.UUID(key).version == 4


def test_keys_are_unique():
    assert len({new_key() for _ in range(100)}) == 100
