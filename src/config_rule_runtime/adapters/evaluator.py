"""Evaluator interface and the adapter that isolates it from the pipeline."""

from __future__ import annotations

import importlib
import inspect
from abc import ABC, abstractmethod
from typing import Any, Callable, Mapping, Union

from ..errors import EvaluatorLoadError
from ..models import ResourceSnapshot, Verdict


class Evaluator(ABC):
    """Abstract base class describing the evaluator contract."""

    @abstractmethod
    def evaluate(self, snapshot: ResourceSnapshot, parameters: Mapping[str, Any]) -> Any:
        """Return a compliance label or a list of candidate evaluations."""


EvaluatorFunction = Callable[[ResourceSnapshot, Mapping[str, Any]], Any]
EvaluatorLike = Union[Evaluator, EvaluatorFunction]


class EvaluatorAdapter:
    """Invoke a pluggable evaluator and tag its output shape.

    Errors raised by the evaluator are not caught here.
    """

    def __init__(self, evaluator: EvaluatorLike) -> None:
        if isinstance(evaluator, Evaluator):
            self._evaluate: EvaluatorFunction = evaluator.evaluate
        elif callable(evaluator):
            self._evaluate = evaluator
        else:
            raise TypeError(f"Evaluator must be callable, got {type(evaluator).__name__}")

    def invoke(self, snapshot: ResourceSnapshot, parameters: Mapping[str, Any]) -> Verdict:
        return Verdict.from_evaluator(self._evaluate(snapshot, parameters))


def load_evaluator(entry_point: str) -> EvaluatorLike:
    """Import ``package.module:attribute`` and return the evaluator it names.

    Classes are instantiated without arguments; other callables are returned
    unchanged.
    """

    module_name, _, attribute = entry_point.partition(":")
    if not module_name or not attribute:
        raise EvaluatorLoadError(
            f"Evaluator entry point must look like 'package.module:attribute': {entry_point!r}"
        )

    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise EvaluatorLoadError(f"Cannot import evaluator module '{module_name}'") from exc

    target: Any = module
    for part in attribute.split("."):
        try:
            target = getattr(target, part)
        except AttributeError as exc:
            raise EvaluatorLoadError(f"Evaluator '{entry_point}' not found") from exc

    if inspect.isclass(target):
        if not issubclass(target, Evaluator):
            raise EvaluatorLoadError(f"Evaluator class '{entry_point}' must subclass Evaluator")
        return target()

    if not callable(target):
        raise EvaluatorLoadError(f"Evaluator '{entry_point}' is not callable")

    return target


__all__ = ["Evaluator", "EvaluatorAdapter", "EvaluatorFunction", "EvaluatorLike", "load_evaluator"]
