"""
Finite state machine for the lifecycle of one booking call.

    Idle -> Attempting(n) -> {Succeeded, Retrying, ExhaustedFailed}
    Retrying -> Attempting(n + 1)

Every transition must be explicitly defined; the orchestrator drives the
machine and the recorded history doubles as an audit trail of attempts.

Usage:
    sm = BookingStateMachine(max_attempts=3)
    sm.transition(BookingTrigger.START)
    assert sm.current_state == BookingState.ATTEMPTING
    assert sm.attempt == 1
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)


class BookingState(str, Enum):
    """All possible states of a booking call."""
    IDLE = "idle"
    ATTEMPTING = "attempting"
    RETRYING = "retrying"
    SUCCEEDED = "succeeded"
    EXHAUSTED_FAILED = "exhausted_failed"


class BookingTrigger(str, Enum):
    """Events that cause state transitions."""
    START = "start"
    ATTEMPT_SUCCEEDED = "attempt_succeeded"
    ATTEMPT_FAILED = "attempt_failed"
    RETRIES_EXHAUSTED = "retries_exhausted"
    BACKOFF_ELAPSED = "backoff_elapsed"


@dataclass
class Transition:
    """A single valid state transition."""
    from_state: BookingState
    to_state: BookingState
    trigger: BookingTrigger


@dataclass
class StateEntry:
    """Recorded history entry for a state visit."""
    state: BookingState
    entered_at: datetime
    attempt: int
    trigger: Optional[BookingTrigger] = None


class InvalidTransitionError(Exception):
    """Raised when a transition is not valid from the current state."""


class BookingStateMachine:
    """Tracks attempts and enforces the retry budget of one booking call."""

    TRANSITIONS: list[Transition] = [
        Transition(BookingState.IDLE, BookingState.ATTEMPTING, BookingTrigger.START),
        Transition(BookingState.ATTEMPTING, BookingState.SUCCEEDED,
                   BookingTrigger.ATTEMPT_SUCCEEDED),
        Transition(BookingState.ATTEMPTING, BookingState.RETRYING,
                   BookingTrigger.ATTEMPT_FAILED),
        Transition(BookingState.ATTEMPTING, BookingState.EXHAUSTED_FAILED,
                   BookingTrigger.RETRIES_EXHAUSTED),
        Transition(BookingState.RETRYING, BookingState.ATTEMPTING,
                   BookingTrigger.BACKOFF_ELAPSED),
    ]

    TERMINAL_STATES = frozenset({BookingState.SUCCEEDED, BookingState.EXHAUSTED_FAILED})

    def __init__(self, max_attempts: int) -> None:
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")
        self.max_attempts = max_attempts
        self._current_state = BookingState.IDLE
        self._attempt = 0
        self._history: list[StateEntry] = [
            StateEntry(state=BookingState.IDLE, entered_at=datetime.now(timezone.utc), attempt=0)
        ]

    @property
    def current_state(self) -> BookingState:
        return self._current_state

    @property
    def attempt(self) -> int:
        """1-based index of the current (or last) attempt; 0 before starting."""
        return self._attempt

    def has_budget(self) -> bool:
        return self._attempt < self.max_attempts

    def record_failure(self) -> BookingState:
        """Move out of a failed attempt, choosing retry or exhaustion by budget."""
        if self.has_budget():
            return self.transition(BookingTrigger.ATTEMPT_FAILED)
        return self.transition(BookingTrigger.RETRIES_EXHAUSTED)

    def transition(self, trigger: BookingTrigger) -> BookingState:
        """
        Execute a state transition.

        Raises:
            InvalidTransitionError: If no valid transition exists, or a
                failed attempt tries to retry past the budget.
        """
        if trigger == BookingTrigger.ATTEMPT_FAILED and not self.has_budget():
            raise InvalidTransitionError(
                f"Attempt budget of {self.max_attempts} exhausted; cannot retry"
            )

        for t in self.TRANSITIONS:
            if t.from_state == self._current_state and t.trigger == trigger:
                old_state = self._current_state
                self._current_state = t.to_state
                if t.to_state == BookingState.ATTEMPTING:
                    self._attempt += 1

                self._history.append(StateEntry(
                    state=self._current_state,
                    entered_at=datetime.now(timezone.utc),
                    attempt=self._attempt,
                    trigger=trigger,
                ))
                logger.debug(
                    "Booking transition: %s -> %s (trigger: %s, attempt %d)",
                    old_state.value, self._current_state.value, trigger.value, self._attempt,
                )
                return self._current_state

        valid = [t.value for t in self.get_valid_triggers()]
        raise InvalidTransitionError(
            f"No valid transition from '{self._current_state.value}' "
            f"with trigger '{trigger.value}'. Valid triggers: {valid}"
        )

    def get_valid_triggers(self) -> list[BookingTrigger]:
        """Return all triggers valid from the current state."""
        return [t.trigger for t in self.TRANSITIONS if t.from_state == self._current_state]

    def get_history(self) -> list[StateEntry]:
        """Return the full state transition history."""
        return list(self._history)

    def get_state_trace(self) -> list[str]:
        """Return ordered list of state names visited."""
        return [entry.state.value for entry in self._history]

    def is_terminal(self) -> bool:
        return self._current_state in self.TERMINAL_STATES
