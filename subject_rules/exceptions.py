"""
Custom Exception Hierarchy for subject-rules
Provides structured error handling with context preservation.
"""
from typing import Optional, Dict, Any


class SubjectRulesError(Exception):
    """Base exception for all subject-rules errors."""

    def __init__(
        self,
        message: str,
        component: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.component = component
        self.context = context or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for structured logging."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "component": self.component,
            "context": self.context
        }


# -------------------------------------------------------------------------
# CONFIGURATION ERRORS
# -------------------------------------------------------------------------

class ConfigurationError(SubjectRulesError):
    """Raised when configuration is invalid or missing."""
    pass


# -------------------------------------------------------------------------
# RULE SET ERRORS
# -------------------------------------------------------------------------

class RuleSetError(SubjectRulesError):
    """Base class for rule set errors."""
    pass


class InvalidRuleSetError(RuleSetError):
    """Raised when a rule set does not resolve to a non-empty list of rules."""
    pass


# -------------------------------------------------------------------------
# POLICY ERRORS
# -------------------------------------------------------------------------

class ActionNotFoundError(SubjectRulesError):
    """Raised when no rule set is registered for the requested action."""
    pass
