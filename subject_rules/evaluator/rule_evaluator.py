"""
Rule Evaluator

Evaluates rule sets against a subject.
"""

import logging
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from subject_rules.config import SubjectRulesConfig, EvaluatorConfig
from subject_rules.comparator import Comparator
from subject_rules.resolver import ValueResolver
from subject_rules.exceptions import InvalidRuleSetError
from subject_rules.models import (
    Operator,
    Rule,
    RuleSet,
    RuleOutcome,
    RuleSetEvaluation
)


class RuleEvaluator:
    """
    Evaluate rule sets against a subject.

    A rule set is a RuleSet model, a mapping with the rules under 'rules'
    (usually alongside an 'action' tag), or a plain list of rules. All rules
    must pass; evaluation stops at the first rule that fails.
    """

    def __init__(
        self,
        config: Optional[SubjectRulesConfig] = None,
        resolver: Optional[ValueResolver] = None,
        comparator: Optional[Comparator] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the rule evaluator.

        Args:
            config: Optional configuration (defaults are used when omitted)
            resolver: Optional value resolver
            comparator: Optional comparator
            logger: Optional logger instance
        """
        settings = config.evaluator if config else EvaluatorConfig()

        self.logger = logger or logging.getLogger(__name__)
        self.default_operator = settings.default_operator
        self.resolver = resolver or ValueResolver(
            capability_marker=settings.capability_marker,
            path_separator=settings.path_separator,
            logger=self.logger
        )
        self.comparator = comparator or Comparator(
            list_separator=settings.list_separator,
            max_collection_depth=settings.max_collection_depth,
            logger=self.logger
        )

    def evaluate(self, subject: Any, rule_set: Any) -> bool:
        """
        Evaluate a rule set against a subject.

        Args:
            subject: Object or mapping the rules refer to
            rule_set: RuleSet, envelope mapping or list of rules

        Returns:
            True if every rule passes

        Raises:
            InvalidRuleSetError: If the rule set has no rules
        """
        _, rules = self._extract_rules(rule_set)

        for index, rule in enumerate(rules):
            if not self._evaluate_rule(subject, rule, index).passed:
                return False

        return True

    def explain(self, subject: Any, rule_set: Any) -> RuleSetEvaluation:
        """
        Evaluate a rule set and report the outcome of each evaluated rule.

        Args:
            subject: Object or mapping the rules refer to
            rule_set: RuleSet, envelope mapping or list of rules

        Returns:
            RuleSetEvaluation

        Raises:
            InvalidRuleSetError: If the rule set has no rules
        """
        action, rules = self._extract_rules(rule_set)
        outcomes: List[RuleOutcome] = []

        for index, rule in enumerate(rules):
            outcome = self._evaluate_rule(subject, rule, index)
            outcomes.append(outcome)
            if not outcome.passed:
                return RuleSetEvaluation(
                    action=action,
                    passed=False,
                    outcomes=outcomes,
                    failed_index=index
                )

        return RuleSetEvaluation(action=action, passed=True, outcomes=outcomes)

    def evaluate_many(self, subjects: Iterable[Any], rule_set: Any) -> List[bool]:
        """
        Evaluate one rule set against several subjects.

        Args:
            subjects: Subjects to check
            rule_set: RuleSet, envelope mapping or list of rules

        Returns:
            One result per subject, in order

        Raises:
            InvalidRuleSetError: If the rule set has no rules
        """
        _, rules = self._extract_rules(rule_set)
        return [self.evaluate(subject, rules) for subject in subjects]

    def all_pass(self, subjects: Iterable[Any], rule_set: Any) -> bool:
        """True if every subject satisfies the rule set."""
        return all(self.evaluate_many(subjects, rule_set))

    def any_pass(self, subjects: Iterable[Any], rule_set: Any) -> bool:
        """True if at least one subject satisfies the rule set."""
        return any(self.evaluate_many(subjects, rule_set))

    def _extract_rules(self, rule_set: Any) -> Tuple[Optional[str], List[Any]]:
        """
        Unwrap a rule set into its action tag and rule list.

        Raises:
            InvalidRuleSetError: If no non-empty rule list can be found
        """
        action = None

        if isinstance(rule_set, RuleSet):
            action = rule_set.action
            rules = rule_set.rules
        elif isinstance(rule_set, Mapping):
            if 'rules' not in rule_set:
                self._reject("Rule set has no 'rules' key", rule_set)
            if rule_set.get('action') is not None:
                action = str(rule_set['action'])
            rules = rule_set['rules']
        else:
            rules = rule_set

        if not isinstance(rules, (list, tuple)) or len(rules) == 0:
            self._reject("Invalid rule set provided", rule_set)

        return action, list(rules)

    def _reject(self, message: str, rule_set: Any) -> None:
        self.logger.warning(f"{message}: {type(rule_set).__name__}")
        raise InvalidRuleSetError(
            message,
            component="RuleEvaluator",
            context={"rule_set_type": type(rule_set).__name__}
        )

    def _evaluate_rule(self, subject: Any, rule: Any, index: int) -> RuleOutcome:
        """
        Evaluate a single rule.

        Malformed rules fail closed instead of raising.
        """
        if isinstance(rule, Rule):
            field, operator, expected = rule.field, rule.operator, rule.value
        elif isinstance(rule, Mapping):
            field = rule.get('field')
            operator = rule.get('operator')
            if operator is None:
                operator = self.default_operator
            expected = rule.get('value')
        else:
            return self._fail(index, reason=f"Rule is not a mapping: {type(rule).__name__}")

        if not isinstance(field, str) or field == '':
            return self._fail(index, field=field, reason="Rule has no field")

        op = Operator.parse(operator)
        if op is None:
            return self._fail(
                index,
                field=field,
                operator=str(operator),
                expected=expected,
                reason=f"Unsupported operator: {operator!r}"
            )

        actual = self.resolver.resolve(subject, field)
        passed = self.comparator.compare(actual, op, expected)

        return RuleOutcome(
            index=index,
            field=field,
            operator=op.value,
            expected=expected,
            actual=actual,
            passed=passed
        )

    def _fail(self, index: int, field: Any = None, operator: Optional[str] = None,
              expected: Any = None, reason: str = "") -> RuleOutcome:
        self.logger.debug(f"Rule {index} failed closed: {reason}")
        return RuleOutcome(
            index=index,
            field=field if isinstance(field, str) else None,
            operator=operator,
            expected=expected,
            passed=False,
            reason=reason
        )


_default_evaluator: Optional[RuleEvaluator] = None


def evaluate(subject: Any, rule_set: Any) -> bool:
    """Evaluate a rule set with a default-configured evaluator."""
    global _default_evaluator
    if _default_evaluator is None:
        _default_evaluator = RuleEvaluator()
    return _default_evaluator.evaluate(subject, rule_set)
