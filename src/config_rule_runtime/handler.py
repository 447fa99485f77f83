"""AWS Lambda entry point for custom Config rules."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Mapping, Sequence

import boto3

from .adapters import load_evaluator
from .errors import RuleManifestError
from .logging_config import configure_logging
from .rules import RuleManifest, RuleManifestLoader
from .service import RuleService, create_service

MANIFEST_ENV = "CONFIG_RULE_MANIFEST"
LOG_LEVEL_ENV = "LOG_LEVEL"
DEFAULT_MANIFEST = "rule.yaml"

logger = logging.getLogger(__name__)


def load_manifest(manifests: Sequence[Path | str] | None = None) -> RuleManifest:
    """Load the rule manifest from ``manifests`` or ``$CONFIG_RULE_MANIFEST``."""

    if not manifests:
        manifests = [os.environ.get(MANIFEST_ENV) or DEFAULT_MANIFEST]
    return RuleManifestLoader().load(manifests)


def build_service(
    manifest: RuleManifest,
    *,
    config_client: Any | None = None,
    evaluator: str | None = None,
) -> RuleService:
    """Create a :class:`RuleService` for ``manifest``.

    ``evaluator`` overrides the manifest's entry point.
    """

    entry_point = evaluator or manifest.evaluator
    if not entry_point:
        raise RuleManifestError("Rule manifest does not name an evaluator")

    return create_service(
        evaluator=load_evaluator(entry_point),
        config_client=config_client,
        default_parameters=manifest.parameters,
    )


def lambda_handler(event: Mapping[str, Any], context: Any) -> Mapping[str, Any]:
    """Evaluate the invocation in ``event`` and return the submission response."""

    manifest = load_manifest()
    configure_logging(os.environ.get(LOG_LEVEL_ENV) or manifest.log_level or "INFO")
    logger.info(
        "Received rule invocation",
        extra={
            "action": "lambda_handler",
            "rule_name": manifest.name,
            "request_id": getattr(context, "aws_request_id", None),
        },
    )

    service = build_service(manifest, config_client=boto3.client("config"))
    result = service.handle(event)
    return dict(result.response)


__all__ = ["build_service", "lambda_handler", "load_manifest"]
