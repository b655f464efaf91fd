"""Exception hierarchy for the curation pipeline."""


class CurationError(Exception):
    """Base class for all errors raised by news_curation."""


class DomainValidationError(CurationError, ValueError):
    """A domain value failed validation on construction."""


class InvalidTierTransitionError(DomainValidationError):
    """A tier change is not allowed by the tier state machine."""


class InvalidCursorError(CurationError, ValueError):
    """A pagination cursor could not be decoded."""

    def __init__(self, message: str = "Invalid cursor") -> None:
        super().__init__(message)


class NotFoundError(CurationError, LookupError):
    """A persisted entity does not exist."""
