"""
Action Policies: rule sets keyed by the action they guard.

Rule sets are registered from records a provider has already decoded, e.g.

    {"action": "submit_form",
     "rules": [{"field": "role", "operator": "==", "value": "staff"}]}

and checked with can_perform(subject, action).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from subject_rules.evaluator import RuleEvaluator
from subject_rules.exceptions import ActionNotFoundError, InvalidRuleSetError
from subject_rules.models import RuleSet


logger = logging.getLogger(__name__)


def normalize_action(action: str) -> str:
    return str(action).strip().lower()


class ActionPolicyRegistry:
    """
    In-memory lookup of rule sets by action name.

    Action names are case-insensitive. Registering an action again replaces
    its rule set.
    """

    def __init__(self, evaluator: Optional[RuleEvaluator] = None):
        self.evaluator = evaluator or RuleEvaluator()
        self._policies: Dict[str, Any] = {}

    def register(self, action: str, rule_set: Any) -> None:
        key = normalize_action(action)
        if not key:
            raise InvalidRuleSetError(
                "Action name must be a non-empty string",
                component="ActionPolicyRegistry"
            )

        self._policies[key] = rule_set
        logger.debug("Registered policy for action '%s'", key)

    def register_many(self, records: Iterable[Any]) -> None:
        """
        Register decoded policy records.

        Each record carries an 'action' and its 'rules'.
        """
        for record in records:
            if isinstance(record, RuleSet):
                action = record.action
            elif isinstance(record, Mapping):
                action = record.get('action')
            else:
                raise InvalidRuleSetError(
                    "Policy record must be a mapping or RuleSet",
                    component="ActionPolicyRegistry",
                    context={"record_type": type(record).__name__}
                )
            if not action:
                raise InvalidRuleSetError(
                    "Policy record has no action",
                    component="ActionPolicyRegistry",
                    context={"record_keys": sorted(map(str, record.keys())) if isinstance(record, Mapping) else []}
                )
            self.register(action, record)

    def get(self, action: str) -> Optional[Any]:
        return self._policies.get(normalize_action(action))

    def has(self, action: str) -> bool:
        return normalize_action(action) in self._policies

    def actions(self) -> List[str]:
        return sorted(self._policies)

    def can_perform(self, subject: Any, action: str) -> bool:
        """
        Check whether a subject may perform an action.

        Args:
            subject: Subject the action's rules refer to
            action: Action name

        Returns:
            True if every rule of the action's rule set passes

        Raises:
            ActionNotFoundError: If no rule set is registered for the action
            InvalidRuleSetError: If the registered rule set has no rules
        """
        rule_set = self.get(action)
        if rule_set is None:
            raise ActionNotFoundError(
                f"Action {action} is not valid",
                component="ActionPolicyRegistry",
                context={"action": action, "known_actions": self.actions()}
            )

        allowed = self.evaluator.evaluate(subject, rule_set)
        logger.debug("Action '%s' %s", normalize_action(action), "allowed" if allowed else "denied")
        return allowed
