"""Resilience Controller — drives one logical operation to a typed value or one error.

Invariants:
    - One idempotency key per logical operation, reused on every physical attempt
    - Retries only on TransportFailure or a transient ApiError (API_FAILURE, RATE_LIMITED)
    - retries never exceed Settings.max_retries: K retries -> at most K+1 attempts
    - Non-transient ApiError / DecodeError surface unchanged, no retry consumed
    - Exhaustion raises MaxRetriesExceeded chained to the last error
    - CancelledError during backoff propagates immediately (logged, never swallowed)

Design Decisions:
    - Request bodies encoded once before the first attempt: every retry sends the same bytes
    - RetryState is local to one run_with_retry call: controllers are safe to share
    - sleep and key source injectable: tests drive the state machine without real time
"""

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from stripe_typed.config import Settings
from stripe_typed.core.codec import decode_from_wire, encode_form_params, encode_to_wire
from stripe_typed.core.domain_types import FailureCategory, HttpMethod, IdempotencyKey, RetryPhase
from stripe_typed.core.errors import (
    ApiError,
    ErrorContext,
    MaxRetriesExceeded,
    StripeClientError,
)
from stripe_typed.core.idempotency import new_key
from stripe_typed.infrastructure.executor import RequestExecutor

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Operation(Generic[T]):
    """One logical API call: where it goes, what it sends, what it decodes to.

    `params` is a typed input (or plain mapping): form body for POST, query
    string for GET and DELETE. `json_body` sends a raw JSON body instead.
    """
    method: HttpMethod
    path: str
    response_type: Any
    params: Any = None
    json_body: Any = None
    files: Mapping[str, Any] | None = None
    idempotent: bool = True
    idempotency_key: IdempotencyKey | None = None
    stripe_account: str | None = None


@dataclass
class RetryState:
    """Mutable bookkeeping for one run_with_retry call."""
    operation: Operation
    idempotency_key: IdempotencyKey | None
    attempts: int = 0
    retries: int = 0
    last_error: StripeClientError | None = None
    phase: RetryPhase = RetryPhase.START

    def transition(self, phase: RetryPhase) -> None:
        logger.debug(
            f"{self.operation.method.value} {self.operation.path}: "
            f"{self.phase.value} -> {phase.value}",
            extra={"attempt": self.attempts, "idempotency_key": self.idempotency_key},
        )
        self.phase = phase


class ResilienceController:
    """Runs operations through a RequestExecutor with retry and backoff."""

    def __init__(
        self,
        executor: RequestExecutor,
        settings: Settings,
        *,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        key_source: Callable[[], IdempotencyKey] = new_key,
    ):
        self.executor = executor
        self.settings = settings
        self._sleep = sleep
        self._key_source = key_source

    async def run_once(self, operation: Operation[T]) -> T:
        """Exactly one attempt; any failure surfaces as-is."""
        key = self._key_for(operation)
        tree = await self.executor.execute(
            operation.method,
            operation.path,
            idempotency_key=key,
            stripe_account=operation.stripe_account,
            attempt=1,
            **self._request_kwargs(operation),
        )
        return decode_from_wire(operation.response_type, tree)

    async def run_with_retry(self, operation: Operation[T]) -> T:
        """Attempt until success, a terminal failure, or the retry ceiling."""
        state = RetryState(operation=operation, idempotency_key=self._key_for(operation))
        request = self._request_kwargs(operation)

        while True:
            state.attempts += 1
            state.transition(RetryPhase.ATTEMPTING)
            try:
                tree = await self.executor.execute(
                    operation.method,
                    operation.path,
                    idempotency_key=state.idempotency_key,
                    stripe_account=operation.stripe_account,
                    attempt=state.attempts,
                    **request,
                )
            except StripeClientError as e:
                if not e.is_retryable:
                    state.transition(RetryPhase.FAILED_TERMINAL)
                    self._log_terminal(state, e)
                    raise
                state.last_error = e
                state.transition(RetryPhase.RETRYING)
                if state.retries >= self.settings.max_retries:
                    state.transition(RetryPhase.FAILED_TERMINAL)
                    logger.error(
                        f"Giving up on {operation.method.value} {operation.path} "
                        f"after {state.retries} retries: {e.message}",
                        extra=self._log_extra(state, error_code=e.code),
                    )
                    raise MaxRetriesExceeded(
                        state.retries, e, context=self._context(state),
                    ) from e
                await self._wait(state, self._delay_ms(e, state.retries))
                state.retries += 1
                continue

            try:
                value = decode_from_wire(operation.response_type, tree)
            except StripeClientError as e:
                state.transition(RetryPhase.FAILED_TERMINAL)
                self._log_terminal(state, e)
                raise
            state.transition(RetryPhase.SUCCEEDED)
            logger.info(
                f"{operation.method.value} {operation.path} succeeded",
                extra=self._log_extra(state),
            )
            return value

    def _key_for(self, operation: Operation) -> IdempotencyKey | None:
        if operation.idempotency_key is not None:
            return operation.idempotency_key
        if operation.idempotent and operation.method.has_side_effects:
            return self._key_source()
        return None

    def _request_kwargs(self, operation: Operation) -> dict[str, Any]:
        kwargs: dict[str, Any] = {}
        if operation.params is not None:
            params = encode_form_params(operation.params)
            logger.debug(
                f"Generated form parameters for {operation.path}: {params}",
                extra={"path": operation.path},
            )
            if operation.method is HttpMethod.POST:
                kwargs["form"] = params
            else:
                kwargs["query"] = params
        if operation.json_body is not None:
            kwargs["json_body"] = encode_to_wire(operation.json_body)
        if operation.files is not None:
            kwargs["files"] = operation.files
        return kwargs

    def _delay_ms(self, error: StripeClientError, retry: int) -> int:
        if (
            isinstance(error, ApiError)
            and error.category is FailureCategory.RATE_LIMITED
            and error.context.retry_after_ms
        ):
            return error.context.retry_after_ms
        return self._backoff(retry)

    def _backoff(self, retry: int) -> int:
        """Exponential backoff with ±25% jitter."""
        delay = min(self.settings.max_delay_ms, (2 ** retry) * self.settings.base_delay_ms)
        return int(delay * random.uniform(0.75, 1.25))  # nosec B311

    async def _wait(self, state: RetryState, delay_ms: int) -> None:
        error = state.last_error
        logger.warning(
            f"Retryable failure on {state.operation.method.value} {state.operation.path}, "
            f"retry after {delay_ms}ms (attempt {state.attempts}): {error.message}",
            extra=self._log_extra(state, delay_ms=delay_ms, error_code=error.code),
        )
        try:
            await self._sleep(delay_ms / 1000)
        except asyncio.CancelledError:
            logger.info(
                f"Cancelled during backoff for {state.operation.path}",
                extra=self._log_extra(state),
            )
            raise

    def _log_terminal(self, state: RetryState, error: StripeClientError) -> None:
        extra = self._log_extra(state, error_code=error.code)
        if isinstance(error, ApiError):
            extra["category"] = error.category.value
        logger.warning(
            f"{state.operation.method.value} {state.operation.path} failed: {error.message}",
            extra=extra,
        )

    def _context(self, state: RetryState) -> ErrorContext:
        return ErrorContext(
            method=state.operation.method.value,
            path=state.operation.path,
            idempotency_key=state.idempotency_key,
            attempt=state.attempts,
        )

    @staticmethod
    def _log_extra(state: RetryState, **fields: Any) -> dict[str, Any]:
        return {
            "method": state.operation.method.value,
            "path": state.operation.path,
            "attempt": state.attempts,
            "retries": state.retries,
            "idempotency_key": state.idempotency_key,
            **fields,
        }
