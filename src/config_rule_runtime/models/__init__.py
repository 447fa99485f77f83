"""Data models for rule invocations, resource snapshots and evaluations."""

from .evaluation import (
    REQUIRED_RECORD_FIELDS,
    ComplianceType,
    ReportRecord,
    SubmissionResult,
    Verdict,
    VerdictKind,
)
from .notification import (
    ChangeNotification,
    ConfigurationItemSummary,
    MessageType,
    Notification,
    OversizedChangeNotification,
    RuleInvocation,
    ScheduledNotification,
)
from .snapshot import ItemStatus, Relationship, ResourceSnapshot

__all__ = [
    "REQUIRED_RECORD_FIELDS",
    "ChangeNotification",
    "ComplianceType",
    "ConfigurationItemSummary",
    "ItemStatus",
    "MessageType",
    "Notification",
    "OversizedChangeNotification",
    "Relationship",
    "ReportRecord",
    "ResourceSnapshot",
    "RuleInvocation",
    "ScheduledNotification",
    "SubmissionResult",
    "Verdict",
    "VerdictKind",
]
