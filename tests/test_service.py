from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Callable, Mapping

import pytest

from config_rule_runtime.adapters import ConfigHistory, EvaluatorAdapter, ReportSubmitter
from config_rule_runtime.errors import (
    ConfigRuleError,
    EmptyBatchError,
    EvaluatorError,
    HistoryLookupError,
    PartialAcceptanceError,
    UnsupportedNotificationError,
)
from config_rule_runtime.models import ResourceSnapshot, SubmissionResult
from config_rule_runtime.normalization import SnapshotResolver
from config_rule_runtime.service import RuleService, create_service

CAPTURE = datetime(2017, 2, 17, 21, 34, 19, 353000, tzinfo=timezone.utc)


class DummyEvaluator:
    def __init__(self, result: Any = "COMPLIANT") -> None:
        self.result = result
        self.calls: list[tuple[ResourceSnapshot, Mapping[str, Any]]] = []

    def __call__(self, snapshot: ResourceSnapshot, parameters: Mapping[str, Any]) -> Any:
        self.calls.append((snapshot, dict(parameters)))
        return self.result


def make_service(client: Any, evaluator: DummyEvaluator, **kwargs: Any) -> RuleService:
    return RuleService(
        resolver=SnapshotResolver(ConfigHistory(client)),
        evaluator_adapter=EvaluatorAdapter(evaluator),
        submitter=ReportSubmitter(client),
        **kwargs,
    )


def test_compliant_change_notification_reports_one_record(
    fake_client: type, change_event: Callable[..., dict[str, Any]]
) -> None:
    client = fake_client()
    evaluator = DummyEvaluator("COMPLIANT")

    result = make_service(client, evaluator).handle(change_event())

    assert isinstance(result, SubmissionResult)
    assert result.succeeded
    assert client.put_calls == [
        {
            "Evaluations": [
                {
                    "ComplianceResourceType": "AWS::EC2::Instance",
                    "ComplianceResourceId": "i-00000000000000001",
                    "ComplianceType": "COMPLIANT",
                    "OrderingTimestamp": CAPTURE,
                }
            ],
            "ResultToken": "token-123",
        }
    ]
    assert len(evaluator.calls) == 1


@pytest.mark.parametrize("status", ["ResourceDeleted", "Deleted", "ResourceNotDiscovered"])
def test_deleted_resource_skips_evaluator(
    fake_client: type, change_event: Callable[..., dict[str, Any]], status: str
) -> None:
    client = fake_client()
    evaluator = DummyEvaluator("COMPLIANT")

    make_service(client, evaluator).handle(change_event(item={"configurationItemStatus": status}))

    assert evaluator.calls == []
    evaluations = client.put_calls[0]["Evaluations"]
    assert [evaluation["ComplianceType"] for evaluation in evaluations] == ["NOT_APPLICABLE"]
    assert evaluations[0]["ComplianceResourceId"] == "i-00000000000000001"


@pytest.mark.parametrize("event_left_scope", [True, None])
def test_left_scope_skips_evaluator(
    fake_client: type,
    change_event: Callable[..., dict[str, Any]],
    event_left_scope: bool | None,
) -> None:
    client = fake_client()
    evaluator = DummyEvaluator("COMPLIANT")

    prepared = make_service(client, evaluator).prepare(
        change_event(event_left_scope=event_left_scope)
    )

    assert prepared.applicable is False
    assert evaluator.calls == []
    assert [record.compliance_type for record in prepared.records] == ["NOT_APPLICABLE"]


def test_oversized_notification_with_empty_history_does_not_submit(
    fake_client: type, make_event: Callable[..., dict[str, Any]]
) -> None:
    client = fake_client(history_items=[])
    evaluator = DummyEvaluator()
    event = make_event(
        {
            "messageType": "OversizedConfigurationItemChangeNotification",
            "configurationItemSummary": {
                "resourceType": "AWS::EC2::Instance",
                "resourceId": "i-00000000000000001",
                "configurationItemCaptureTime": "2017-02-17T21:34:19.353Z",
            },
        }
    )

    with pytest.raises(HistoryLookupError):
        make_service(client, evaluator).handle(event)

    assert client.put_calls == []
    assert evaluator.calls == []


def test_oversized_notification_is_evaluated_from_history(
    fake_client: type, make_event: Callable[..., dict[str, Any]]
) -> None:
    history_item = {
        "accountId": "123456789012",
        "configurationItemCaptureTime": CAPTURE,
        "configurationItemStatus": "OK",
        "resourceType": "AWS::EC2::Instance",
        "resourceId": "i-00000000000000001",
        "relationships": [],
        "configuration": json.dumps({"instanceType": "t2.micro"}),
    }
    client = fake_client(history_items=[history_item])
    evaluator = DummyEvaluator("NON_COMPLIANT")
    event = make_event(
        {
            "messageType": "OversizedConfigurationItemChangeNotification",
            "configurationItemSummary": {
                "resourceType": "AWS::EC2::Instance",
                "resourceId": "i-00000000000000001",
                "configurationItemCaptureTime": "2017-02-17T21:34:19.353Z",
            },
        }
    )

    make_service(client, evaluator).handle(event)

    snapshot = evaluator.calls[0][0]
    assert snapshot.configuration == {"instanceType": "t2.micro"}
    assert snapshot.account_id == "123456789012"
    assert client.put_calls[0]["Evaluations"][0]["ComplianceType"] == "NON_COMPLIANT"


def test_scheduled_notification_is_unsupported(
    fake_client: type, make_event: Callable[..., dict[str, Any]]
) -> None:
    client = fake_client()
    evaluator = DummyEvaluator()

    with pytest.raises(UnsupportedNotificationError, match="ScheduledNotification"):
        make_service(client, evaluator).handle(make_event({"messageType": "ScheduledNotification"}))

    assert client.put_calls == []
    assert evaluator.calls == []


def test_partial_acceptance_surfaces_failure_detail(
    fake_client: type, change_event: Callable[..., dict[str, Any]]
) -> None:
    failure = {"EvaluationResultIdentifier": {}, "ComplianceType": "COMPLIANT"}
    client = fake_client(failed_evaluations=[failure])
    candidates = [
        {
            "ComplianceResourceType": "AWS::EC2::Volume",
            "ComplianceResourceId": f"vol-{index}",
            "ComplianceType": "COMPLIANT",
            "OrderingTimestamp": "2017-02-17T21:34:19.353Z",
        }
        for index in range(3)
    ]

    with pytest.raises(PartialAcceptanceError) as excinfo:
        make_service(client, DummyEvaluator(candidates)).handle(change_event())

    assert len(client.put_calls) == 1
    assert len(client.put_calls[0]["Evaluations"]) == 3
    assert list(excinfo.value.result.failed_evaluations) == [failure]


def test_all_candidates_malformed_raises_empty_batch(
    fake_client: type, change_event: Callable[..., dict[str, Any]]
) -> None:
    client = fake_client()
    evaluator = DummyEvaluator([{"ComplianceType": "COMPLIANT"}])

    with pytest.warns(UserWarning):
        with pytest.raises(EmptyBatchError):
            make_service(client, evaluator).handle(change_event())

    assert client.put_calls == []


def test_evaluator_error_propagates(
    fake_client: type, change_event: Callable[..., dict[str, Any]]
) -> None:
    client = fake_client()

    def failing(snapshot: ResourceSnapshot, parameters: Mapping[str, Any]) -> str:
        raise EvaluatorError("cannot evaluate")

    service = RuleService(
        resolver=SnapshotResolver(),
        evaluator_adapter=EvaluatorAdapter(failing),
        submitter=ReportSubmitter(client),
    )

    with pytest.raises(EvaluatorError, match="cannot evaluate"):
        service.handle(change_event())

    assert client.put_calls == []


def test_rule_parameters_override_defaults(
    fake_client: type, change_event: Callable[..., dict[str, Any]]
) -> None:
    evaluator = DummyEvaluator()
    service = make_service(
        fake_client(),
        evaluator,
        default_parameters={"desiredInstanceType": "t2.micro", "strict": "false"},
    )

    service.handle(change_event(rule_parameters={"strict": "true"}))

    assert evaluator.calls[0][1] == {"desiredInstanceType": "t2.micro", "strict": "true"}


def test_handle_without_submitter_raises(change_event: Callable[..., dict[str, Any]]) -> None:
    service = create_service(evaluator=DummyEvaluator())

    with pytest.raises(ConfigRuleError):
        service.handle(change_event())

    prepared = service.prepare(change_event())
    assert [record.compliance_type for record in prepared.records] == ["COMPLIANT"]


def test_empty_label_is_never_submitted(
    fake_client: type, change_event: Callable[..., dict[str, Any]]
) -> None:
    client = fake_client()

    with pytest.warns(UserWarning):
        with pytest.raises(EmptyBatchError):
            make_service(client, DummyEvaluator("")).handle(change_event())

    assert client.put_calls == []
