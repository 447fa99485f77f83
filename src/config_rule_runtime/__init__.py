"""Runtime for AWS Config custom rule evaluations."""

from .service import PreparedEvaluation, RuleService, create_service

__all__ = ["PreparedEvaluation", "RuleService", "create_service"]
