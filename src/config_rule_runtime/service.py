"""Orchestration layer that runs a rule invocation end to end."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from .adapters import ConfigHistory, EvaluatorAdapter, ReportSubmitter
from .errors import ConfigRuleError, UnsupportedNotificationError
from .models import ReportRecord, ResourceSnapshot, RuleInvocation, SubmissionResult, Verdict
from .normalization import ResultNormalizer, SnapshotResolver, is_applicable, parse_invocation

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PreparedEvaluation:
    """Everything needed to submit an invocation's evaluations."""

    invocation: RuleInvocation
    snapshot: ResourceSnapshot
    applicable: bool
    verdict: Verdict
    records: List[ReportRecord]


class RuleService:
    """High level service responsible for resolving, evaluating and reporting."""

    def __init__(
        self,
        *,
        resolver: SnapshotResolver,
        evaluator_adapter: EvaluatorAdapter,
        normalizer: ResultNormalizer | None = None,
        submitter: ReportSubmitter | None = None,
        default_parameters: Mapping[str, Any] | None = None,
    ) -> None:
        self._resolver = resolver
        self._evaluator_adapter = evaluator_adapter
        self._normalizer = normalizer or ResultNormalizer()
        self._submitter = submitter
        self._default_parameters = dict(default_parameters or {})

    # ------------------------------------------------------------------
    def prepare(self, event: Mapping[str, Any]) -> PreparedEvaluation:
        """Resolve and evaluate ``event`` without reporting the result."""

        invocation = parse_invocation(event)
        snapshot = self._resolver.resolve(invocation.notification)
        if snapshot is None:
            raise UnsupportedNotificationError(
                f"{invocation.notification.message_type} invocations are not supported"
            )

        applicable = is_applicable(snapshot, invocation.event_left_scope)
        log_context = {
            "resource_type": snapshot.resource_type,
            "resource_id": snapshot.resource_id,
            "status": snapshot.status_value,
        }

        if applicable:
            parameters = self._merge_parameters(invocation.rule_parameters)
            logger.info("Evaluating resource", extra={"action": "evaluate", **log_context})
            verdict = self._evaluator_adapter.invoke(snapshot, parameters)
        else:
            logger.info(
                "Resource is not applicable, skipping evaluation",
                extra={
                    "action": "evaluate",
                    "event_left_scope": invocation.event_left_scope,
                    **log_context,
                },
            )
            verdict = Verdict.not_applicable()

        records = self._normalizer.normalize(verdict, snapshot)
        return PreparedEvaluation(
            invocation=invocation,
            snapshot=snapshot,
            applicable=applicable,
            verdict=verdict,
            records=records,
        )

    def handle(self, event: Mapping[str, Any]) -> SubmissionResult:
        """Run the full pipeline for ``event`` and report the evaluations."""

        if self._submitter is None:
            raise ConfigRuleError("No report submitter configured for rule service")

        prepared = self.prepare(event)
        result = self._submitter.submit(prepared.records, prepared.invocation.result_token)
        logger.info(
            "Evaluations reported",
            extra={"action": "handle", "evaluation_count": len(result.records)},
        )
        return result

    # ------------------------------------------------------------------
    def _merge_parameters(self, rule_parameters: Mapping[str, Any]) -> Dict[str, Any]:
        parameters = dict(self._default_parameters)
        parameters.update(rule_parameters)
        return parameters


def create_service(
    *,
    evaluator: Any,
    config_client: Any | None = None,
    default_parameters: Optional[Mapping[str, Any]] = None,
) -> RuleService:
    """Create a service wired to a boto3 ``config`` client.

    Without a client the service can still :meth:`RuleService.prepare`
    inline notifications but cannot fetch history or submit.
    """

    history = ConfigHistory(config_client) if config_client is not None else None
    submitter = ReportSubmitter(config_client) if config_client is not None else None
    return RuleService(
        resolver=SnapshotResolver(history),
        evaluator_adapter=EvaluatorAdapter(evaluator),
        submitter=submitter,
        default_parameters=default_parameters,
    )


__all__ = ["PreparedEvaluation", "RuleService", "create_service"]
