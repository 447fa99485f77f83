"""Conversion of evaluator verdicts into validated :class:`ReportRecord` lists."""

from __future__ import annotations

import logging
import warnings
from typing import Any, List, Mapping, Optional

from ..errors import MalformedRecordWarning
from ..models import (
    REQUIRED_RECORD_FIELDS,
    ComplianceType,
    ReportRecord,
    ResourceSnapshot,
    Verdict,
    VerdictKind,
)

logger = logging.getLogger(__name__)


class ResultNormalizer:
    """Normalize any verdict shape into an ordered list of report records."""

    def normalize(
        self, verdict: Verdict, snapshot: Optional[ResourceSnapshot]
    ) -> List[ReportRecord]:
        """Return the records to submit for ``verdict``."""

        if verdict.kind is VerdictKind.RECORDS:
            return self._normalize_candidates(verdict.candidates)

        if snapshot is None:
            return []

        if verdict.kind is VerdictKind.LABEL and verdict.label is not None:
            label = verdict.label
        else:
            logger.warning(
                "Evaluator returned an unrecognized verdict, reporting NOT_APPLICABLE",
                extra={"action": "normalize", "resource_id": snapshot.resource_id},
            )
            label = ComplianceType.NOT_APPLICABLE.value

        record = self._record_for(snapshot, label)
        missing = _missing_fields(record.to_api())
        if missing:
            self._drop(None, missing)
            return []
        return [record]

    # ------------------------------------------------------------------
    def _record_for(self, snapshot: ResourceSnapshot, label: str) -> ReportRecord:
        return ReportRecord(
            resource_type=snapshot.resource_type,
            resource_id=snapshot.resource_id,
            compliance_type=label,
            ordering_timestamp=snapshot.capture_time,
        )

    def _normalize_candidates(self, candidates: tuple[Any, ...]) -> List[ReportRecord]:
        records: List[ReportRecord] = []
        for index, candidate in enumerate(candidates):
            payload = candidate.to_api() if isinstance(candidate, ReportRecord) else candidate
            if not isinstance(payload, Mapping):
                self._drop(index, REQUIRED_RECORD_FIELDS)
                continue

            missing = _missing_fields(payload)
            if missing:
                self._drop(index, missing)
                continue

            records.append(ReportRecord.from_api(payload))

        return records

    def _drop(self, index: int | None, missing: tuple[str, ...] | list[str]) -> None:
        for field_name in missing:
            logger.warning(
                "Missing %s from custom evaluation.",
                field_name,
                extra={"action": "normalize", "candidate_index": index},
            )
        warnings.warn(MalformedRecordWarning(missing, index=index), stacklevel=3)


def _missing_fields(payload: Mapping[str, Any]) -> list[str]:
    """Return required record fields that are absent or empty in ``payload``."""

    return [name for name in REQUIRED_RECORD_FIELDS if not payload.get(name)]


__all__ = ["ResultNormalizer"]
