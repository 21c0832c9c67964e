"""
Selector candidates for every element the portal automation touches.

The portal's markup is not under our control, so each logical element is
described by an ordered list of candidates tried left to right. This module
is static data only; nothing here is mutated at runtime.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Action(str, Enum):
    """Interaction performed on a located element."""

    FILL = "fill"
    CLICK = "click"
    SELECT = "select"
    CHECK = "check"


@dataclass(frozen=True)
class SelectorSpec:
    """One way of locating an element.

    ``action`` overrides the caller's action for this candidate only, which
    lets a single cascade mix widget types (e.g. a radio input and a select).
    """

    selector: str
    action: Optional[Action] = None


def specs(*selectors: str, action: Optional[Action] = None) -> tuple[SelectorSpec, ...]:
    return tuple(SelectorSpec(s, action) for s in selectors)


# --- Login ---
LOGIN_FORM_SELECTOR = 'input[type="email"], input[name="email"], #email'
LOGIN_EMAIL = specs('input[type="email"]', 'input[name="email"]', "#email", ".email-input")
LOGIN_PASSWORD = specs(
    'input[type="password"]', 'input[name="password"]', "#password", ".password-input"
)
LOGIN_BUTTON = specs(
    'button[type="submit"]', ".login-button", "#login-btn", 'input[type="submit"]'
)
LOGGED_IN_MARKER = "text=/dashboard|booking|shipment/i"

# --- Booking form navigation ---
BOOKING_FORM_LINKS = specs(
    "text=/create.*shipment/i",
    "text=/new.*booking/i",
    "text=/book.*shipment/i",
    ".booking-btn",
    "#create-shipment",
    'a[href*="booking"]',
    'a[href*="shipment"]',
)
BOOKING_FORM_MARKER = "text=/sender|receiver|package|booking/i"

# --- Submission ---
SUBMIT_BUTTONS = specs(
    'button[type="submit"]',
    'input[type="submit"]',
    ".submit-btn",
    "#submit-booking",
    "text=/submit|book now|create/i",
)
SUBMISSION_ERROR_BANNERS = (
    ".alert-danger",
    ".error-message",
    '[role="alert"].error',
    ".ant-form-item-explain-error",
)

# --- Result extraction ---
TRACKING_NUMBER_PATTERN = re.compile(r"JT\d+")
TRACKING_LOCATIONS = specs(
    "text=/JT[0-9]+/",
    "text=/tracking.*number/i",
    ".tracking-number",
    "#tracking-number",
    '[class*="tracking"]',
    '[id*="tracking"]',
)


def text_field_candidates(field_name: str) -> tuple[SelectorSpec, ...]:
    """Candidates for a free-text field in the sender or receiver section."""
    return specs(
        f'input[name*="{field_name}"]',
        f'input[id*="{field_name}"]',
        f'input[class*="{field_name}"]',
        f'textarea[name*="{field_name}"]',
        f'textarea[id*="{field_name}"]',
    )


def package_field_candidates(field_name: str) -> tuple[SelectorSpec, ...]:
    """Candidates for a package-section field, which may be a dropdown."""
    return (
        SelectorSpec(f'input[name*="{field_name}"]'),
        SelectorSpec(f'input[id*="{field_name}"]'),
        SelectorSpec(f'select[name*="{field_name}"]', Action.SELECT),
        SelectorSpec(f'select[id*="{field_name}"]', Action.SELECT),
        SelectorSpec(f'textarea[name*="{field_name}"]'),
    )


def payment_method_candidates(method: str) -> tuple[SelectorSpec, ...]:
    """Radio/checkbox inputs first, then payment dropdowns."""
    return (
        SelectorSpec(f'input[value*="{method}"]', Action.CHECK),
        SelectorSpec('select[name*="payment"]', Action.SELECT),
        SelectorSpec('select[id*="payment"]', Action.SELECT),
    )
