"""
Tests for criteria evaluators

Tests the condition grammar, the all/any strategies and the criteria factory.
"""
import logging

import pytest

from timesheet_rules.criteria import (
    Condition, CriteriaRegistry, UnsupportedCriteria, create_criteria
)
from timesheet_rules.criteria.all_criteria import AllCriteria
from timesheet_rules.criteria.any_criteria import AnyCriteria


@pytest.fixture
def entry():
    """Sample timesheet entry using the configured physical layout."""
    return {
        "status": "Late",
        "duration_hours": 9.5,
        "notes": "Client meeting about invoices",
        "tags": ["billable", "urgent"],
        "project": {"name": "Apollo", "client": "Acme"},
        "approved": False,
    }


MAPPING = {
    "project": "project.name",
    "client": "project.client",
    "hours": "duration_hours",
    "note": "notes",
}


def condition(field, op, value=None):
    data = {"field": field, "op": op}
    if value is not None:
        data["value"] = value
    return data


class TestFactory:
    """Test create_criteria()."""

    def test_all_type(self):
        """Test that 'all' builds an AllCriteria."""
        criteria = create_criteria("all", [])
        assert isinstance(criteria, AllCriteria)
        assert criteria.type == "all"

    def test_any_type(self):
        """Test that 'any' builds an AnyCriteria."""
        criteria = create_criteria("any", [])
        assert isinstance(criteria, AnyCriteria)
        assert criteria.type == "any"

    @pytest.mark.parametrize("rule_type", [None, ""])
    def test_default_type(self, rule_type):
        """Test that a missing type selects the configured default."""
        criteria = create_criteria(rule_type, None)
        assert isinstance(criteria, AllCriteria)
        assert criteria.type == "all"
        assert criteria.active_criteria() == []

    def test_unknown_type(self):
        """Test that an unregistered type yields an unsupported evaluator."""
        criteria = create_criteria("sometimes", [condition("status", "eq", "late")])

        assert isinstance(criteria, UnsupportedCriteria)
        assert criteria.type == "sometimes"
        assert criteria.is_valid() is False
        assert criteria.error_messages() == ["criteria_error_type_invalid"]
        assert criteria.matches({"status": "late"}) is False
        assert len(criteria.active_criteria()) == 1

    def test_non_string_type(self):
        """Test that a non-string type does not raise."""
        criteria = create_criteria(["all"], [])
        assert isinstance(criteria, UnsupportedCriteria)

    def test_unknown_type_logs_warning(self, caplog):
        """Test that an unregistered type is logged."""
        with caplog.at_level(logging.WARNING, logger="timesheet_rules.criteria"):
            create_criteria("sometimes", [])
        assert "Unknown rule type 'sometimes'" in caplog.text

    def test_custom_registry(self):
        """Test that an explicit registry is honoured."""
        registry = CriteriaRegistry({
            "default_rule_type": "every",
            "criteria_types": {"every": "all_criteria.AllCriteria"},
        })

        criteria = create_criteria(None, [], registry=registry)

        assert isinstance(criteria, AllCriteria)
        assert criteria.type == "every"
        assert isinstance(create_criteria("any", [], registry=registry), UnsupportedCriteria)

    def test_registry_mapping_reaches_evaluator(self):
        """Test that the registry's field mapping is used when matching."""
        registry = CriteriaRegistry({
            "criteria_types": {"all": "all_criteria.AllCriteria"},
            "entry_field_mapping": {"state": "meta.state"},
        })

        criteria = create_criteria("all", [condition("state", "eq", "late")], registry=registry)

        assert criteria.matches({"meta": {"state": "late"}}) is True
        assert criteria.matches({"meta": {"state": "early"}}) is False

    def test_default_registry_uses_bundled_mapping(self):
        """Test that evaluators from the default registry read physical paths."""
        criteria = create_criteria("all", [condition("hours", "gt", 8)])
        assert criteria.matches({"duration_hours": 9}) is True

    def test_direct_construction_reads_by_name(self):
        """Test that an evaluator built without a mapping reads fields by name."""
        criteria = AllCriteria("all", [condition("hours", "gt", 8)])
        assert criteria.matches({"duration_hours": 9}) is False
        assert criteria.matches({"hours": 9}) is True


class TestConditions:
    """Test condition normalisation and activity."""

    def test_active_criteria_skips_blank(self):
        """Test that blank conditions are not active but are preserved."""
        data = [condition("status", "eq", "late"), {"field": "", "op": ""}, {}]
        criteria = AllCriteria("all", data)

        assert len(criteria.active_criteria()) == 1
        assert criteria.criteria_data() == data

    def test_none_condition_inactive(self):
        """Test that a None descriptor is inactive."""
        assert Condition(None).is_active() is False

    def test_single_mapping_wrapped(self):
        """Test that a bare condition mapping is treated as a one-item list."""
        criteria = AllCriteria("all", condition("status", "eq", "late"))
        assert criteria.criteria_data() == [condition("status", "eq", "late")]

    def test_non_list_conditions_reported(self):
        """Test that a non-list conditions value surfaces as invalid."""
        criteria = AllCriteria("all", "status is late")

        assert len(criteria.active_criteria()) == 1
        assert criteria.is_valid() is False
        assert criteria.error_messages() == ["criteria_error_condition_invalid"]

    def test_criteria_data_copies(self):
        """Test that criteria_data returns copies of descriptors."""
        data = [condition("status", "eq", "late")]
        criteria = AllCriteria("all", data)

        criteria.criteria_data()[0]["value"] = "early"

        assert criteria.criteria_data() == [condition("status", "eq", "late")]


class TestValidity:
    """Test evaluator is_valid()."""

    def test_well_formed(self):
        """Test that well-formed conditions are valid."""
        criteria = AllCriteria("all", [
            condition("status", "eq", "late"),
            condition("hours", "gte", "8"),
            condition("note", "empty"),
            condition("tags", "contains", "billable"),
        ])
        assert criteria.is_valid() is True
        assert criteria.has_errors() is False

    def test_no_conditions_is_valid(self):
        """Test that an evaluator with no conditions is internally valid."""
        assert AllCriteria("all", []).is_valid() is True

    @pytest.mark.parametrize("data, message", [
        (condition("status", "between", "a"), "criteria_error_operator_invalid"),
        (condition("status", "eq"), "criteria_error_value_required"),
        (condition("status", "eq", ""), "criteria_error_value_required"),
        (condition("hours", "lt", "soon"), "criteria_error_value_numeric"),
        (condition("hours", "gt", True), "criteria_error_value_numeric"),
        ({"field": 5, "op": "eq", "value": "x"}, "criteria_error_condition_invalid"),
        ({"field": "status", "op": "eq", "value": {"a": 1}}, "criteria_error_condition_invalid"),
    ])
    def test_malformed(self, data, message):
        """Test that malformed conditions are reported."""
        criteria = AnyCriteria("any", [condition("status", "eq", "late"), data])

        assert criteria.is_valid() is False
        assert criteria.error_messages() == [message]

    def test_blank_conditions_ignored(self):
        """Test that inactive conditions do not affect validity."""
        criteria = AllCriteria("all", [condition("status", "eq", "late"), {"field": ""}])
        assert criteria.is_valid() is True

    def test_messages_reset_each_run(self):
        """Test that validation does not accumulate messages."""
        criteria = AllCriteria("all", [condition("status", "eq")])
        criteria.is_valid()
        criteria.is_valid()
        assert criteria.error_messages() == ["criteria_error_value_required"]


class TestOperators:
    """Test individual operators against an entry."""

    @pytest.mark.parametrize("data, expected", [
        (condition("status", "eq", "late"), True),
        (condition("status", "eq", "LATE "), True),
        (condition("status", "eq", "onTime"), False),
        (condition("status", "neq", "onTime"), True),
        (condition("status", "neq", "late"), False),
        (condition("hours", "eq", "9.5"), True),
        (condition("hours", "eq", 9.5), True),
        (condition("hours", "gt", 8), True),
        (condition("hours", "gt", "9.5"), False),
        (condition("hours", "gte", "9.5"), True),
        (condition("hours", "lt", 10), True),
        (condition("hours", "lte", 9), False),
        (condition("note", "contains", "MEETING"), True),
        (condition("note", "not_contains", "holiday"), True),
        (condition("tags", "contains", "urgent"), True),
        (condition("tags", "contains", "urg"), False),
        (condition("tags", "not_contains", "internal"), True),
        (condition("project", "eq", "apollo"), True),
        (condition("client", "eq", "Acme"), True),
        (condition("approved", "eq", False), True),
        (condition("note", "not_empty"), True),
        (condition("comment", "empty"), True),
        (condition("comment", "not_empty"), False),
        (condition("comment", "gt", 1), False),
        (condition("comment", "eq", "x"), False),
        (condition("status", "gt", 1), False),
    ])
    def test_operator(self, entry, data, expected):
        """Test operator outcome for a single condition."""
        assert AllCriteria("all", [data], MAPPING).matches(entry) is expected

    @pytest.mark.parametrize("data, value, expected", [
        (condition("hours", "eq", 8), "8", True),
        (condition("hours", "eq", 8), " 8.0 ", True),
        (condition("hours", "eq", "8"), 8, True),
        (condition("hours", "eq", 8), "eight", False),
        (condition("hours", "neq", 8), "8", False),
        (condition("hours", "neq", 8), "9", True),
        (condition("hours", "gte", 8), "8", True),
        (condition("hours", "lte", "8"), 8, True),
    ])
    def test_numeric_comparison_either_side(self, data, value, expected):
        """Test that numeric equality coerces whichever side is a string."""
        criteria = AllCriteria("all", [data], MAPPING)
        assert criteria.matches({"duration_hours": value}) is expected

    def test_boolean_not_coerced_to_number(self):
        """Test that booleans are compared as booleans, not as 1/0."""
        criteria = AllCriteria("all", [condition("approved", "eq", 1)])
        assert criteria.matches({"approved": True}) is False

    def test_whitespace_is_empty(self):
        """Test that whitespace-only strings count as empty."""
        criteria = AllCriteria("all", [condition("note", "empty")], MAPPING)
        assert criteria.matches({"notes": "   "}) is True

    def test_malformed_condition_never_matches(self, entry):
        """Test that a malformed condition does not match."""
        criteria = AllCriteria("all", [condition("status", "between", "late")])
        assert criteria.matches(entry) is False


class TestStrategies:
    """Test all/any combination."""

    def test_all_requires_every_condition(self, entry):
        """Test that 'all' needs every active condition."""
        criteria = AllCriteria("all", [
            condition("status", "eq", "late"),
            condition("hours", "gt", 10),
        ], MAPPING)
        assert criteria.matches(entry) is False

        entry["duration_hours"] = 11
        assert criteria.matches(entry) is True

    def test_any_requires_one_condition(self, entry):
        """Test that 'any' needs one active condition."""
        criteria = AnyCriteria("any", [
            condition("status", "eq", "onTime"),
            condition("hours", "gt", 8),
        ], MAPPING)
        assert criteria.matches(entry) is True

        entry["duration_hours"] = 4
        assert criteria.matches(entry) is False

    def test_blank_conditions_ignored_when_matching(self, entry):
        """Test that inactive conditions do not block 'all'."""
        criteria = AllCriteria("all", [condition("status", "eq", "late"), {"field": "", "op": ""}])
        assert criteria.matches(entry) is True

    @pytest.mark.parametrize("criteria_class", [AllCriteria, AnyCriteria])
    def test_no_active_conditions_never_match(self, entry, criteria_class):
        """Test that evaluators without active conditions match nothing."""
        assert criteria_class(None, [{"field": ""}]).matches(entry) is False

    def test_attribute_entries(self):
        """Test matching against an object with attributes."""
        class Entry:
            status = "late"

        criteria = AllCriteria("all", [condition("status", "eq", "late")])
        assert criteria.matches(Entry()) is True

    def test_none_entry(self):
        """Test that a None entry is treated as having no fields."""
        criteria = AnyCriteria("any", [condition("status", "empty")])
        assert criteria.matches(None) is True
