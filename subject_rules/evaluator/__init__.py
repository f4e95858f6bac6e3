"""
subject-rules Evaluator Package

Exports evaluator classes for evaluating rule sets.
"""

from .rule_evaluator import RuleEvaluator, evaluate

__all__ = ["RuleEvaluator", "evaluate"]
