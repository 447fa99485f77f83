"""Normalization of invocation payloads and evaluator results."""

from .applicability import is_applicable
from .invocation import parse_invocation
from .result_normalizer import ResultNormalizer
from .snapshot_resolver import NO_SNAPSHOT, SnapshotResolver

__all__ = [
    "NO_SNAPSHOT",
    "ResultNormalizer",
    "SnapshotResolver",
    "is_applicable",
    "parse_invocation",
]
