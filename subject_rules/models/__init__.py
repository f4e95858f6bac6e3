"""
subject-rules Models Package

Exports all model classes for the rule evaluation engine.
"""

from .rule import (
    Operator,
    Rule,
    RuleSet,
    RuleOutcome,
    RuleSetEvaluation
)

__all__ = [
    "Operator",
    "Rule",
    "RuleSet",
    "RuleOutcome",
    "RuleSetEvaluation"
]
