"""Check that EC2 instances use the instance type named in the rule parameters.

Required parameter: ``desiredInstanceType`` (for example ``t2.micro``).
"""

from __future__ import annotations

from typing import Any, Mapping

from ..errors import EvaluatorError
from ..models import ComplianceType, ResourceSnapshot

EC2_INSTANCE = "AWS::EC2::Instance"


def evaluate(snapshot: ResourceSnapshot, parameters: Mapping[str, Any]) -> ComplianceType:
    if snapshot.resource_type != EC2_INSTANCE:
        return ComplianceType.NOT_APPLICABLE

    desired = parameters.get("desiredInstanceType")
    if not desired:
        raise EvaluatorError("Rule parameter 'desiredInstanceType' is required")

    if snapshot.configuration.get("instanceType") == desired:
        return ComplianceType.COMPLIANT
    return ComplianceType.NON_COMPLIANT
