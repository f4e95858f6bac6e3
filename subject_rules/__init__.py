"""
subject-rules

Evaluates declarative rule sets (field, operator, value) against arbitrary
subjects such as user objects.
"""

from .models import (
    Operator,
    Rule,
    RuleSet,
    RuleOutcome,
    RuleSetEvaluation
)
from .resolver import ValueResolver, resolve
from .comparator import Comparator, compare
from .evaluator import RuleEvaluator, evaluate
from .policies import ActionPolicyRegistry
from .exceptions import (
    SubjectRulesError,
    ConfigurationError,
    RuleSetError,
    InvalidRuleSetError,
    ActionNotFoundError
)

__all__ = [
    "Operator",
    "Rule",
    "RuleSet",
    "RuleOutcome",
    "RuleSetEvaluation",
    "ValueResolver",
    "resolve",
    "Comparator",
    "compare",
    "RuleEvaluator",
    "evaluate",
    "ActionPolicyRegistry",
    "SubjectRulesError",
    "ConfigurationError",
    "RuleSetError",
    "InvalidRuleSetError",
    "ActionNotFoundError"
]
