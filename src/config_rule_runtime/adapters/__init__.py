"""Adapter layer for the evaluator and the configuration service APIs."""

from .config_history import ConfigHistory
from .evaluator import Evaluator, EvaluatorAdapter, load_evaluator
from .report_submitter import ReportSubmitter

__all__ = [
    "ConfigHistory",
    "Evaluator",
    "EvaluatorAdapter",
    "ReportSubmitter",
    "load_evaluator",
]
