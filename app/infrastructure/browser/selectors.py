"""
Selectors for the Calendly booking widget.

The markup is third-party and unversioned: prefer aria-* and data-* hooks, and fall back
to visible text only where the widget exposes nothing stable.
"""

import re

AVAILABLE_DATE = 'button[aria-label*="Times available"]:not([disabled])'
TIME_SLOT = 'button[data-container="time-button"]:not([disabled])'
TIME_SLOT_START_ATTR = "data-start-time"
NEXT_BUTTON = 'button[aria-label^="Next"]'

FORM = "form"
NAME_INPUT = 'input[name="full_name"]'
EMAIL_INPUT = 'input[name="email"]'
ADD_GUESTS_TEXT = re.compile(r"add\s+guests", re.IGNORECASE)
GUEST_INPUT = "#invitee_guest_input"
ADDED_GUEST = '[data-qa="added-guest"]'
NOTES_TEXTAREA = 'textarea[name="question_0"]'
SUBMIT_BUTTON = 'button[type="submit"]'

CONFIRMATION_URL = re.compile(r"/invitees/")
CONFIRMATION_TEXT = re.compile(r"you are scheduled|confirmed", re.IGNORECASE)

# Resolves once the guest input was cleared or the address shows up in the rendered guest list.
GUEST_ACCEPTED_JS = """
([inputSelector, listSelector, email]) => {
    const input = document.querySelector(inputSelector);
    if (input && input.value === '') return true;
    return Array.from(document.querySelectorAll(listSelector))
        .some((el) => (el.textContent || '').includes(email));
}
"""
