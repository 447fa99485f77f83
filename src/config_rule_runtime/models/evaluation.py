"""Verdict, report record and submission result models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

RESOURCE_TYPE_FIELD = "ComplianceResourceType"
RESOURCE_ID_FIELD = "ComplianceResourceId"
COMPLIANCE_TYPE_FIELD = "ComplianceType"
ORDERING_TIMESTAMP_FIELD = "OrderingTimestamp"
ANNOTATION_FIELD = "Annotation"

REQUIRED_RECORD_FIELDS: Tuple[str, ...] = (
    RESOURCE_TYPE_FIELD,
    RESOURCE_ID_FIELD,
    COMPLIANCE_TYPE_FIELD,
    ORDERING_TIMESTAMP_FIELD,
)


class ComplianceType(str, Enum):
    """Compliance labels accepted by the evaluation service."""

    COMPLIANT = "COMPLIANT"
    NON_COMPLIANT = "NON_COMPLIANT"
    NOT_APPLICABLE = "NOT_APPLICABLE"
    INSUFFICIENT_DATA = "INSUFFICIENT_DATA"


class VerdictKind(str, Enum):
    """Shape of an evaluator's output."""

    LABEL = "label"
    RECORDS = "records"
    UNRECOGNIZED = "unrecognized"


@dataclass(frozen=True, slots=True)
class Verdict:
    """Evaluator output tagged with its shape."""

    kind: VerdictKind
    label: Optional[str] = None
    candidates: Tuple[Any, ...] = ()

    @classmethod
    def from_evaluator(cls, value: Any) -> "Verdict":
        """Tag a raw evaluator return value."""

        if isinstance(value, Enum) and isinstance(value.value, str):
            return cls(kind=VerdictKind.LABEL, label=value.value)
        if isinstance(value, str):
            return cls(kind=VerdictKind.LABEL, label=value)
        if isinstance(value, (list, tuple)):
            return cls(kind=VerdictKind.RECORDS, candidates=tuple(value))
        return cls(kind=VerdictKind.UNRECOGNIZED)

    @classmethod
    def not_applicable(cls) -> "Verdict":
        """Verdict used when the evaluator is skipped for an inapplicable resource."""

        return cls(kind=VerdictKind.LABEL, label=ComplianceType.NOT_APPLICABLE.value)


@dataclass(slots=True)
class ReportRecord:
    """A single evaluation destined for the compliance tracking service."""

    resource_type: str
    resource_id: str
    compliance_type: str
    ordering_timestamp: datetime | str
    annotation: Optional[str] = None

    def to_api(self) -> Dict[str, Any]:
        """Return the record in the shape expected by ``put_evaluations``."""

        payload: Dict[str, Any] = {
            RESOURCE_TYPE_FIELD: self.resource_type,
            RESOURCE_ID_FIELD: self.resource_id,
            COMPLIANCE_TYPE_FIELD: self.compliance_type,
            ORDERING_TIMESTAMP_FIELD: self.ordering_timestamp,
        }
        if self.annotation:
            payload[ANNOTATION_FIELD] = self.annotation
        return payload

    @classmethod
    def from_api(cls, payload: Mapping[str, Any]) -> "ReportRecord":
        """Build a record from a ``put_evaluations`` evaluation mapping."""

        compliance_type = payload[COMPLIANCE_TYPE_FIELD]
        if isinstance(compliance_type, ComplianceType):
            compliance_type = compliance_type.value
        return cls(
            resource_type=payload[RESOURCE_TYPE_FIELD],
            resource_id=payload[RESOURCE_ID_FIELD],
            compliance_type=compliance_type,
            ordering_timestamp=payload[ORDERING_TIMESTAMP_FIELD],
            annotation=payload.get(ANNOTATION_FIELD),
        )


@dataclass(slots=True)
class SubmissionResult:
    """Outcome of a ``put_evaluations`` call."""

    records: List[ReportRecord]
    failed_evaluations: Sequence[Mapping[str, Any]] = field(default_factory=list)
    response: Mapping[str, Any] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return not self.failed_evaluations
