"""Submission of report records to the evaluation tracking service."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Protocol, Sequence

from botocore.exceptions import BotoCoreError, ClientError

from ..errors import EmptyBatchError, PartialAcceptanceError, SubmissionError
from ..models import ReportRecord, SubmissionResult

logger = logging.getLogger(__name__)


class PutEvaluationsAPI(Protocol):
    """Subset of the boto3 ``config`` client used to report evaluations."""

    def put_evaluations(self, **kwargs: Any) -> Mapping[str, Any]:
        ...


class ReportSubmitter:
    """Send a batch of report records in a single ``put_evaluations`` call.

    Rejected evaluations fail the whole submission even though the service
    call itself succeeded: callers have no way to resend only the rejected
    subset.
    """

    def __init__(self, client: PutEvaluationsAPI) -> None:
        self._client = client

    def submit(self, records: Sequence[ReportRecord], result_token: str) -> SubmissionResult:
        """Submit ``records`` with ``result_token`` and classify the outcome."""

        if not records:
            raise EmptyBatchError("No valid evaluations to report")

        evaluations = [record.to_api() for record in records]
        logger.info(
            "Submitting evaluations",
            extra={"action": "put_evaluations", "evaluation_count": len(evaluations)},
        )

        try:
            response = self._client.put_evaluations(
                Evaluations=evaluations,
                ResultToken=result_token,
            )
        except (BotoCoreError, ClientError) as exc:
            raise SubmissionError(f"put_evaluations failed: {exc}") from exc

        result = SubmissionResult(
            records=list(records),
            failed_evaluations=list(response.get("FailedEvaluations") or []),
            response=response,
        )

        if not result.succeeded:
            logger.error(
                "Evaluations rejected by the tracking service",
                extra={
                    "action": "put_evaluations",
                    "failed_count": len(result.failed_evaluations),
                    "evaluation_count": len(evaluations),
                },
            )
            raise PartialAcceptanceError(result)

        return result


__all__ = ["PutEvaluationsAPI", "ReportSubmitter"]
