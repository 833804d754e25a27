"""contentlab: content optimization and A/B experimentation engine."""

from contentlab.errors import (
    ContentLabError,
    ExperimentNotFoundError,
    ExperimentValidationError,
    ExternalServiceError,
    FieldError,
    ResponseParseError,
)
from contentlab.optimizer import ContentOptimizer

__all__ = [
    "ContentLabError",
    "ContentOptimizer",
    "ExperimentNotFoundError",
    "ExperimentValidationError",
    "ExternalServiceError",
    "FieldError",
    "ResponseParseError",
]
