"""
Rule Models

Defines data models for rules, rule sets and evaluation diagnostics.
"""

from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field, field_validator


class Operator(str, Enum):
    """Operators supported by the comparator."""
    EQUALS = "=="
    NOT_EQUALS = "!="
    IN = "in"
    NOT_IN = "not_in"
    GREATER_THAN = ">"
    LESS_THAN = "<"
    CONTAINS = "contains"

    @classmethod
    def parse(cls, value: Any) -> Optional["Operator"]:
        """Return the matching operator, or None when the value is not supported."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except (ValueError, TypeError):
            return None


class Rule(BaseModel):
    """
    A single rule evaluated against a subject.

    Example:
        field: "profile.isActive()"
        operator: "=="
        value: true
    """
    field: str = Field(..., description="Dot path to resolve on the subject (e.g., 'role' or 'profile.isActive()')")
    operator: Operator = Field(default=Operator.EQUALS, description="Comparison operator")
    value: Any = Field(default=None, description="Expected value")

    @field_validator('field')
    @classmethod
    def validate_field(cls, v: str) -> str:
        """Validate field path."""
        if not v or not isinstance(v, str):
            raise ValueError("Field must be a non-empty string")
        return v

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "field": self.field,
            "operator": self.operator.value,
            "value": self.value
        }


class RuleSet(BaseModel):
    """
    Ordered rules combined with AND semantics, tagged with the action they guard.
    """
    action: Optional[str] = Field(None, description="Action the rules guard (e.g., 'submit_form')")
    rules: List[Rule] = Field(..., description="Rules that must all pass")

    @field_validator('rules')
    @classmethod
    def validate_rules(cls, v: List[Rule]) -> List[Rule]:
        """Ensure at least one rule is defined."""
        if not v:
            raise ValueError("At least one rule must be defined")
        return v

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "action": self.action,
            "rules": [r.to_dict() for r in self.rules]
        }


class RuleOutcome(BaseModel):
    """
    Result of evaluating one rule.
    """
    index: int
    field: Optional[str] = None
    operator: Optional[str] = None
    expected: Any = None
    actual: Any = None
    passed: bool
    reason: Optional[str] = None


class RuleSetEvaluation(BaseModel):
    """
    Diagnostic result of evaluating a rule set against a subject.

    Rules after the first failure are not evaluated and have no outcome.
    """
    action: Optional[str] = None
    passed: bool
    outcomes: List[RuleOutcome] = Field(default_factory=list)
    failed_index: Optional[int] = None
