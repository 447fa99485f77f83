from __future__ import annotations

import copy
import json
import logging
from typing import Any, Callable

import pytest

from config_rule_runtime.logging_config import PACKAGE_LOGGER

CAPTURE_TIME = "2017-02-17T21:34:19.353Z"

CONFIGURATION_ITEM: dict[str, Any] = {
    "configurationItemVersion": "1.2",
    "configurationItemCaptureTime": CAPTURE_TIME,
    "configurationStateId": 1487367259353,
    "awsAccountId": "123456789012",
    "configurationItemStatus": "OK",
    "resourceType": "AWS::EC2::Instance",
    "resourceId": "i-00000000000000001",
    "resourceName": None,
    "ARN": "arn:aws:ec2:us-east-1:123456789012:instance/i-00000000000000001",
    "awsRegion": "us-east-1",
    "availabilityZone": "us-east-1a",
    "configurationStateMd5Hash": "b026324c6904b2a9cb4b88d6d61c81d1",
    "configuration": {"instanceType": "t2.micro", "state": {"name": "running"}},
    "tags": {"env": "dev"},
    "relationships": [
        {
            "resourceId": "sg-00000001",
            "resourceName": None,
            "resourceType": "AWS::EC2::SecurityGroup",
            "name": "Is associated with SecurityGroup",
        }
    ],
}


class FakeConfigClient:
    """In-memory stand-in for the boto3 ``config`` client."""

    def __init__(
        self,
        *,
        history_items: list[dict[str, Any]] | None = None,
        failed_evaluations: list[dict[str, Any]] | None = None,
        history_error: Exception | None = None,
        put_error: Exception | None = None,
    ) -> None:
        self.history_items = history_items or []
        self.failed_evaluations = failed_evaluations or []
        self.history_error = history_error
        self.put_error = put_error
        self.history_calls: list[dict[str, Any]] = []
        self.put_calls: list[dict[str, Any]] = []

    def get_resource_config_history(self, **kwargs: Any) -> dict[str, Any]:
        self.history_calls.append(kwargs)
        if self.history_error is not None:
            raise self.history_error
        return {"configurationItems": list(self.history_items)}

    def put_evaluations(self, **kwargs: Any) -> dict[str, Any]:
        self.put_calls.append(kwargs)
        if self.put_error is not None:
            raise self.put_error
        return {
            "FailedEvaluations": list(self.failed_evaluations),
            "ResponseMetadata": {"HTTPStatusCode": 200},
        }


@pytest.fixture(autouse=True)
def reset_package_logger() -> Any:
    logger = logging.getLogger(PACKAGE_LOGGER)
    handlers, propagate, level = list(logger.handlers), logger.propagate, logger.level
    yield
    logger.handlers = handlers
    logger.propagate = propagate
    logger.setLevel(level)


@pytest.fixture
def configuration_item() -> dict[str, Any]:
    return copy.deepcopy(CONFIGURATION_ITEM)


@pytest.fixture
def make_event() -> Callable[..., dict[str, Any]]:
    def factory(
        invoking_event: dict[str, Any],
        *,
        rule_parameters: dict[str, Any] | None = None,
        result_token: str = "token-123",
        event_left_scope: bool | None = False,
    ) -> dict[str, Any]:
        event: dict[str, Any] = {
            "invokingEvent": json.dumps(invoking_event),
            "ruleParameters": json.dumps(rule_parameters or {}),
            "resultToken": result_token,
        }
        if event_left_scope is not None:
            event["eventLeftScope"] = event_left_scope
        return event

    return factory


@pytest.fixture
def change_event(
    make_event: Callable[..., dict[str, Any]], configuration_item: dict[str, Any]
) -> Callable[..., dict[str, Any]]:
    def factory(**overrides: Any) -> dict[str, Any]:
        item = dict(configuration_item)
        item.update(overrides.pop("item", {}))
        invoking_event = {
            "messageType": "ConfigurationItemChangeNotification",
            "configurationItem": item,
            "notificationCreationTime": "2017-02-17T21:34:20.000Z",
        }
        return make_event(invoking_event, **overrides)

    return factory


@pytest.fixture
def fake_client() -> type[FakeConfigClient]:
    return FakeConfigClient
