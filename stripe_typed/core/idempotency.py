"""Idempotency Key Source — one opaque key per logical operation."""

import uuid

from stripe_typed.core.domain_types import IdempotencyKey


def new_key() -> IdempotencyKey:
    return IdempotencyKey(str(uuid.uuid4()))
