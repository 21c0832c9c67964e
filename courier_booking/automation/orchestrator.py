"""
Retry orchestrator: the public entry point for booking an order.

Each attempt gets a fresh, exclusively-owned browser session that is closed
on every exit path. Failures inside an attempt never escape this module
except as the final BookingFailedError once the attempt budget is spent.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, AsyncContextManager, Awaitable, Callable, Mapping, Optional, Union

from courier_booking.automation.session import BrowserSession
from courier_booking.automation.state_machine import (
    BookingState,
    BookingStateMachine,
    BookingTrigger,
)
from courier_booking.automation.steps import SequenceOutcome, StepSequencer
from courier_booking.config import AppConfig, BrowserConfig
from courier_booking.logging_context import get_order_logger, set_order_id
from courier_booking.schemas.order_schema import (
    BookingResult,
    OrderRequest,
    parse_order_request,
)
from courier_booking.tools.status_webhook import StatusNotifier, build_status_notifier

logger = get_order_logger(__name__)

SessionFactory = Callable[[BrowserConfig], AsyncContextManager[Any]]
Sleep = Callable[[float], Awaitable[None]]


class AttemptOutcome(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass
class BookingAttempt:
    """Per-retry record.

    ``session`` and ``page`` are set only while the attempt's browser is open
    and are cleared when it closes.
    """

    index: int
    started_at: datetime
    outcome: AttemptOutcome = AttemptOutcome.PENDING
    reason: Optional[str] = None
    finished_at: Optional[datetime] = None
    session: Optional[Any] = None
    page: Optional[Any] = None

    def finish(self, outcome: AttemptOutcome, reason: Optional[str] = None) -> None:
        self.outcome = outcome
        self.reason = reason
        self.finished_at = datetime.now(timezone.utc)


class BookingFailedError(Exception):
    """Every attempt failed; names the attempt count and the last reason."""

    def __init__(
        self,
        attempts: int,
        last_error: Optional[BaseException],
        attempt_log: Optional[list[BookingAttempt]] = None,
    ) -> None:
        self.attempts = attempts
        self.last_error = last_error
        self.attempt_log = attempt_log or []
        super().__init__(f"Booking failed after {attempts} attempts: {last_error}")


class BookingOrchestrator:
    """Books orders on the courier portal with bounded, fixed-delay retries."""

    def __init__(
        self,
        config: AppConfig,
        session_factory: SessionFactory = BrowserSession,
        notifier: Optional[StatusNotifier] = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self._config = config
        self._session_factory = session_factory
        self._notifier = notifier if notifier is not None else build_status_notifier(config.webhook)
        self._sleep = sleep

    async def _run_attempt(self, order: OrderRequest, attempt: BookingAttempt) -> SequenceOutcome:
        async with self._session_factory(self._config.browser) as session:
            attempt.session, attempt.page = session, session.page
            try:
                return await StepSequencer(session.page, self._config).run(order)
            finally:
                attempt.session = attempt.page = None

    async def book(self, order: Union[OrderRequest, Mapping[str, Any]]) -> BookingResult:
        """Book one order.

        Raises:
            InvalidOrderError: Before any session opens, if required fields are missing.
            BookingFailedError: After every attempt in the retry budget failed.
        """
        order = parse_order_request(order)
        set_order_id(order.order_id)

        machine = BookingStateMachine(self._config.retry.max_retries)
        attempts: list[BookingAttempt] = []
        last_error: Optional[BaseException] = None

        machine.transition(BookingTrigger.START)
        while machine.current_state == BookingState.ATTEMPTING:
            attempt = BookingAttempt(index=machine.attempt, started_at=datetime.now(timezone.utc))
            attempts.append(attempt)
            logger.info(
                "Booking attempt %d/%d for order %s",
                attempt.index, machine.max_attempts, order.order_id,
            )
            try:
                outcome = await self._run_attempt(order, attempt)
            except Exception as exc:
                last_error = exc
                attempt.finish(AttemptOutcome.FAILURE, str(exc))
                logger.warning("Booking attempt %d failed: %s", attempt.index, exc)
                if machine.record_failure() == BookingState.RETRYING:
                    await self._sleep(self._config.retry.retry_delay_sec)
                    machine.transition(BookingTrigger.BACKOFF_ELAPSED)
                continue

            attempt.finish(AttemptOutcome.SUCCESS)
            machine.transition(BookingTrigger.ATTEMPT_SUCCEEDED)
            return await self._succeed(order, outcome, attempt.index)

        logger.error(
            "Booking for order %s failed after %d attempts", order.order_id, machine.attempt
        )
        raise BookingFailedError(machine.attempt, last_error, attempts)

    async def _succeed(
        self, order: OrderRequest, outcome: SequenceOutcome, attempts: int
    ) -> BookingResult:
        extraction = outcome.extraction
        logger.info("Booking successful! Tracking Number: %s", extraction.tracking_number)

        if self._notifier is not None:
            try:
                await self._notifier.notify(order.order_id, extraction.tracking_number)
            except Exception:
                logger.exception("Status notifier raised for order %s", order.order_id)

        message = "Booking completed successfully"
        if extraction.is_placeholder:
            message += "; tracking number is a placeholder pending manual reconciliation"
        return BookingResult(
            success=True,
            tracking_number=extraction.tracking_number,
            message=message,
            is_placeholder=extraction.is_placeholder,
            order_id=order.order_id,
            attempts=attempts,
        )
