"""Tracker error taxonomy."""


class TrackerError(Exception):
    """Base class for recoverable tracker errors."""


class ProfileValidationError(TrackerError):
    """Raised when a profile draft has missing or non-positive fields."""

    def __init__(self, errors: dict[str, str]) -> None:
        super().__init__("; ".join(errors.values()))
        self.errors = errors


class EmptyDataError(TrackerError):
    """Raised when a report is requested before any data was logged."""


class GenerationError(TrackerError):
    """Raised when the text-generation provider call fails."""


class GenerationInProgressError(TrackerError):
    """Raised when a report is requested while another one is pending."""


class PersistenceError(TrackerError):
    """Raised by state store adapters on read or write failures."""
