class AutomationError(RuntimeError):
    """Base class for failures while driving the scheduling page."""
    pass


class RetryableAutomationError(AutomationError):
    """Transient UI failure; safe to retry the step that raised it."""
    pass


class TerminalAutomationError(AutomationError):
    """Structural failure; retrying the same step cannot succeed."""
    pass


class ElementNotFoundError(RetryableAutomationError):
    """Raised when a required control has not rendered yet."""
    pass


class SessionNotInitializedError(TerminalAutomationError):
    """Raised when the browser page is used outside of its session lifetime."""
    pass


class NoSlotsAvailableError(TerminalAutomationError):
    """Raised when the page offers no selectable date or time slot."""
    pass


class MalformedSlotTimeError(TerminalAutomationError):
    """Raised when a captured date label or start time cannot be parsed."""
    pass


class NotesTooLongError(TerminalAutomationError):
    """Raised when booking notes exceed the form's length ceiling."""
    pass


class BookingNotConfirmedError(TerminalAutomationError):
    """Raised when no confirmation signal follows the form submission."""
    pass


class RecordNotFoundError(LookupError):
    """Raised when a booking record with the given id does not exist."""
    pass


class InvalidStatusTransitionError(ValueError):
    """Raised when a booking update would break the status lifecycle."""
    pass


class RunnerSaturatedError(RuntimeError):
    """Raised when the booking queue cannot accept more jobs."""
    pass
