"""Exception hierarchy shared by the rule runtime pipeline stages."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable

if TYPE_CHECKING:  # pragma: no cover - imported for type checking only
    from .models import SubmissionResult


class ConfigRuleError(RuntimeError):
    """Base class for fatal rule invocation failures."""


class MissingFieldError(ConfigRuleError):
    """Raised when a required field is absent from an invocation payload."""

    def __init__(self, field_name: str, *, context: str | None = None) -> None:
        self.field_name = field_name
        self.context = context
        location = f" in {context}" if context else ""
        super().__init__(f"Required field '{field_name}' is not defined{location}")


class MalformedEventError(ConfigRuleError):
    """Raised when a serialized section of the payload cannot be decoded."""


class HistoryLookupError(ConfigRuleError, LookupError):
    """Raised when the configuration history service cannot supply a snapshot."""


class UnsupportedNotificationError(ConfigRuleError):
    """Raised for notification types the runtime does not evaluate."""


class EvaluatorError(ConfigRuleError):
    """Raised by evaluators that reject a snapshot or their parameters."""


class EvaluatorLoadError(ConfigRuleError):
    """Raised when an evaluator entry point cannot be imported."""


class EmptyBatchError(ConfigRuleError):
    """Raised when there are no valid report records to submit."""


class SubmissionError(ConfigRuleError):
    """Raised when the evaluation submission call itself fails."""


class PartialAcceptanceError(ConfigRuleError):
    """Raised when the submission succeeded but some evaluations were rejected."""

    def __init__(self, result: "SubmissionResult") -> None:
        self.result = result
        failed = len(result.failed_evaluations)
        super().__init__(
            f"{failed} of {len(result.records)} evaluations were rejected: "
            f"{list(result.failed_evaluations)}"
        )


class RuleManifestError(ConfigRuleError):
    """Raised when rule manifests cannot be loaded or parsed."""


class MalformedRecordWarning(UserWarning):
    """Issued when an evaluator candidate record is dropped."""

    def __init__(self, missing_fields: Iterable[str], *, index: int | None = None) -> None:
        self.missing_fields = tuple(missing_fields)
        self.index = index
        position = f" at index {index}" if index is not None else ""
        super().__init__(
            f"Dropping custom evaluation{position}: missing {', '.join(self.missing_fields)}"
        )


__all__ = [
    "ConfigRuleError",
    "EmptyBatchError",
    "EvaluatorError",
    "EvaluatorLoadError",
    "HistoryLookupError",
    "MalformedEventError",
    "MalformedRecordWarning",
    "MissingFieldError",
    "PartialAcceptanceError",
    "RuleManifestError",
    "SubmissionError",
    "UnsupportedNotificationError",
]
