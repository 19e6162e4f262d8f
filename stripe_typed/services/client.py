"""Stripe Client — wires transport, executor and resilience controller together.

Usage:
    async with StripeClient(Settings(api_key="sk_test_...")) as stripe:
        charge = await stripe.run(operations.create_charge(charge_input))

Invariants:
    - One HttpxTransport per client, closed by aclose() / async with
    - A transport passed in by the caller is not closed by the client
    - configure_logging=True applies Settings.log_level / log_format to the
      `stripe_typed` logger; off by default
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from stripe_typed.config import Settings, get_settings
from stripe_typed.core.domain_types import IdempotencyKey
from stripe_typed.core.idempotency import new_key
from stripe_typed.infrastructure.executor import RequestExecutor
from stripe_typed.infrastructure.observability import setup_logging
from stripe_typed.infrastructure.transport import HttpxTransport
from stripe_typed.services.resilience import Operation, ResilienceController

T = TypeVar("T")


class StripeClient:
    def __init__(
        self,
        settings: Settings | None = None,
        *,
        transport: HttpxTransport | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        key_source: Callable[[], IdempotencyKey] = new_key,
        configure_logging: bool = False,
    ):
        self.settings = settings or get_settings()
        if configure_logging:
            setup_logging(self.settings.log_level, self.settings.log_format)
        self._owns_transport = transport is None
        self.transport = transport or HttpxTransport(
            timeout_seconds=self.settings.timeout_seconds,
        )
        self.executor = RequestExecutor(self.transport, self.settings)
        self.controller = ResilienceController(
            self.executor, self.settings, sleep=sleep, key_source=key_source,
        )

    async def run(self, operation: Operation[T], *, retry: bool = True) -> T:
        """Run an operation; retry=False makes exactly one attempt."""
        if retry:
            return await self.controller.run_with_retry(operation)
        return await self.controller.run_once(operation)

    async def aclose(self) -> None:
        if self._owns_transport:
            await self.transport.aclose()

    async def __aenter__(self) -> "StripeClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
