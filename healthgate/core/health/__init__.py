"""Readiness state and evaluation."""

from healthgate.core.health.evaluator import ReadinessEvaluator
from healthgate.core.health.state import ReadinessState

__all__ = ["ReadinessEvaluator", "ReadinessState"]
