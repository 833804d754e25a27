"""Exception hierarchy raised by the optimization and experiment services."""

from __future__ import annotations

from dataclasses import dataclass


class ContentLabError(Exception):
    """Base class for all contentlab errors."""


@dataclass(frozen=True, slots=True)
class FieldError:
    """One violated constraint on an input field."""

    field: str
    message: str


class ExperimentValidationError(ContentLabError):
    """Experiment input violated one or more constraints.

    Carries every violation so callers can report them all at once.
    """

    def __init__(self, errors: list[FieldError]) -> None:
        self.errors = list(errors)
        super().__init__("; ".join(e.message for e in self.errors) or "Invalid experiment")

    @property
    def fields(self) -> list[str]:
        return [e.field for e in self.errors]


class ExperimentNotFoundError(ContentLabError):
    """No experiment exists with the requested id."""

    def __init__(self, experiment_id: str) -> None:
        self.experiment_id = experiment_id
        super().__init__(f"A/B test not found: {experiment_id}")


class ExternalServiceError(ContentLabError):
    """The text-generation service failed, timed out, or is unavailable."""


class ResponseParseError(ExternalServiceError):
    """The text-generation service answered with content that is not the expected JSON."""
