import pytest

from subject_rules import (
    ActionNotFoundError,
    ActionPolicyRegistry,
    InvalidRuleSetError,
    Rule,
    RuleSet
)


@pytest.fixture
def registry():
    registry = ActionPolicyRegistry()
    registry.register_many([
        {
            "action": "submit_form",
            "rules": [
                {"field": "role", "operator": "==", "value": "staff"},
                {"field": "role", "operator": "!=", "value": None},
            ],
        },
        {
            "action": "login",
            "rules": [
                {"field": "role", "operator": "==", "value": "staff"},
                {"field": "name", "operator": "contains", "value": "Jon"},
            ],
        },
    ])
    return registry


def test_can_perform_registered_action(registry, make_user):
    assert registry.can_perform(make_user(role="staff"), "submit_form") is True
    assert registry.can_perform(make_user(role="guest"), "submit_form") is False


def test_action_names_are_case_insensitive(registry, make_user):
    assert registry.can_perform(make_user(role="staff"), "SUBMIT_FORM") is True
    assert registry.has("Login")


def test_denies_when_a_rule_fails(registry, make_user):
    assert registry.can_perform(make_user(role="staff", name="Jan Doe"), "login") is False
    assert registry.can_perform(make_user(role="staff", name="Jon Doe"), "login") is True


def test_unknown_action_raises(registry, make_user):
    with pytest.raises(ActionNotFoundError) as exc_info:
        registry.can_perform(make_user(role="staff"), "delete_account")

    assert exc_info.value.context["action"] == "delete_account"
    assert exc_info.value.context["known_actions"] == ["login", "submit_form"]


def test_stored_rule_set_without_rules_raises(registry, make_user):
    registry.register("verify_email", {"action": "verify_email", "rules": []})

    with pytest.raises(InvalidRuleSetError):
        registry.can_perform(make_user(), "verify_email")


def test_register_replaces_existing_policy(registry, make_user):
    registry.register("login", [{"field": "role", "value": "guest"}])

    assert registry.can_perform(make_user(role="guest"), "login") is True


def test_register_accepts_rule_set_models(make_user):
    registry = ActionPolicyRegistry()
    registry.register_many([
        RuleSet(action="Approve", rules=[Rule(field="isStaff()", value=True)]),
    ])

    assert registry.actions() == ["approve"]
    assert registry.can_perform(make_user(role="staff"), "approve") is True


def test_rejects_records_without_action():
    registry = ActionPolicyRegistry()

    with pytest.raises(InvalidRuleSetError):
        registry.register_many([{"rules": [{"field": "role", "value": "staff"}]}])

    with pytest.raises(InvalidRuleSetError):
        registry.register("  ", [{"field": "role", "value": "staff"}])


@pytest.mark.parametrize("record", [["submit_form"], "submit_form", None, 42])
def test_rejects_records_that_are_not_mappings(record):
    registry = ActionPolicyRegistry()

    with pytest.raises(InvalidRuleSetError) as exc_info:
        registry.register_many([record])

    assert exc_info.value.context["record_type"] == type(record).__name__
    assert registry.actions() == []


def test_get_returns_none_for_unknown(registry):
    assert registry.get("unknown") is None
    assert registry.get("login")["action"] == "login"
