from courier_booking.automation.extractor import ExtractionResult, ResultExtractor
from courier_booking.automation.fillers import (
    FieldOutcome,
    SectionReport,
    package_size_code,
)
from courier_booking.automation.locator import ElementLocator, first_success
from courier_booking.automation.orchestrator import (
    BookingFailedError,
    BookingOrchestrator,
)
from courier_booking.automation.session import BrowserSession
from courier_booking.automation.state_machine import (
    BookingState,
    BookingStateMachine,
    BookingTrigger,
)
from courier_booking.automation.steps import BookingStep, StepFailure, StepSequencer

__all__ = [
    "BookingOrchestrator",
    "BookingFailedError",
    "BrowserSession",
    "StepSequencer",
    "StepFailure",
    "BookingStep",
    "ElementLocator",
    "first_success",
    "ResultExtractor",
    "ExtractionResult",
    "FieldOutcome",
    "SectionReport",
    "package_size_code",
    "BookingStateMachine",
    "BookingState",
    "BookingTrigger",
]
