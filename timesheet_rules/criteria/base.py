"""
Base classes for criteria evaluators.

A criteria evaluator owns the conditions of one rule and decides whether a
timesheet entry matches them. Concrete evaluators (AllCriteria, AnyCriteria)
only decide how individual condition results combine; the condition grammar
lives here.

Condition descriptors are plain dicts:

    {"field": "status", "op": "eq", "value": "late"}

A condition is active when it names both a field and an operator. Inactive
(blank) conditions are kept for serialization but ignored by matching and
validation.
"""

import logging
import operator
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Dict, Iterable, List, Optional

from jsonschema import Draft7Validator

from ..entry_helpers import create_entry_helper
from ..errors import Errors

logger = logging.getLogger(__name__)

VALUELESS_OPERATORS = {"empty", "not_empty"}
NUMERIC_OPERATORS = {"gt", "gte", "lt", "lte"}
OPERATORS = {"eq", "neq", "contains", "not_contains"} | NUMERIC_OPERATORS | VALUELESS_OPERATORS

CONDITION_SCHEMA = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "properties": {
        "field": {"type": "string", "minLength": 1},
        "op": {"type": "string", "minLength": 1},
        "value": {"type": ["string", "number", "boolean", "null", "array"]},
    },
    "required": ["field", "op"],
}

_condition_validator = Draft7Validator(CONDITION_SCHEMA)


def _to_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def _normalize(value: str) -> str:
    return value.strip().casefold()


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _equals(actual: Any, expected: Any) -> bool:
    if _is_number(actual) or _is_number(expected):
        actual_number = _to_number(actual)
        expected_number = _to_number(expected)
        if actual_number is None or expected_number is None:
            return False
        return actual_number == expected_number
    if isinstance(actual, str) and isinstance(expected, str):
        return _normalize(actual) == _normalize(expected)
    return actual == expected


def _contains(actual: Any, expected: Any) -> bool:
    if isinstance(actual, str):
        return _normalize(str(expected)) in _normalize(actual)
    if isinstance(actual, (list, tuple, set)):
        return any(_equals(item, expected) for item in actual)
    return False


def _is_empty(actual: Any) -> bool:
    if actual is None:
        return True
    if isinstance(actual, str):
        return not actual.strip()
    if isinstance(actual, (list, tuple, set, dict)):
        return not actual
    return False


def _numeric(compare):
    def check(actual: Any, expected: Any) -> bool:
        actual_number = _to_number(actual)
        expected_number = _to_number(expected)
        if actual_number is None or expected_number is None:
            return False
        return compare(actual_number, expected_number)
    return check


_OPERATOR_FUNCS = {
    "eq": _equals,
    "neq": lambda actual, expected: not _equals(actual, expected),
    "contains": _contains,
    "not_contains": lambda actual, expected: not _contains(actual, expected),
    "gt": _numeric(operator.gt),
    "gte": _numeric(operator.ge),
    "lt": _numeric(operator.lt),
    "lte": _numeric(operator.le),
    "empty": lambda actual, expected: _is_empty(actual),
    "not_empty": lambda actual, expected: not _is_empty(actual),
}


class Condition:
    """A single field/operator/value test against an entry."""

    def __init__(self, data: Any):
        self._data = data

    def _get(self, key: str) -> Any:
        if isinstance(self._data, Mapping):
            return self._data.get(key)
        return None

    @property
    def field(self) -> Optional[str]:
        return self._get("field")

    @property
    def op(self) -> Optional[str]:
        return self._get("op")

    @property
    def value(self) -> Any:
        return self._get("value")

    def is_active(self) -> bool:
        """
        Whether this condition takes part in matching.

        Blank conditions (no field or no operator) are inactive. Descriptors that
        are not mappings at all count as active so they surface as invalid
        rather than being silently dropped.
        """
        if self._data is None:
            return False
        if not isinstance(self._data, Mapping):
            return True
        return bool(self.field) and bool(self.op)

    def problems(self) -> List[str]:
        """
        Return message keys describing why this condition is malformed.

        Returns:
            Empty list when the condition is well-formed
        """
        if not _condition_validator.is_valid(self._data):
            return ["criteria_error_condition_invalid"]

        op = self.op
        if op not in OPERATORS:
            return ["criteria_error_operator_invalid"]

        if op in VALUELESS_OPERATORS:
            return []

        value = self.value
        if value is None or value == "" or value == []:
            return ["criteria_error_value_required"]

        if op in NUMERIC_OPERATORS and _to_number(value) is None:
            return ["criteria_error_value_numeric"]

        return []

    def is_valid(self) -> bool:
        return not self.problems()

    def matches(self, entry) -> bool:
        """
        Test this condition against an entry helper.

        Malformed conditions never match.
        """
        if not self.is_valid():
            return False
        actual = entry.get(self.field)
        return _OPERATOR_FUNCS[self.op](actual, self.value)

    def to_json(self) -> Any:
        """Return a copy of the condition descriptor."""
        if isinstance(self._data, Mapping):
            return dict(self._data)
        return self._data

    def __repr__(self) -> str:
        return f"Condition({self._data!r})"


def _as_condition_list(conditions: Any) -> list:
    if conditions is None:
        return []
    if isinstance(conditions, Mapping):
        return [conditions]
    if isinstance(conditions, (list, tuple)):
        return list(conditions)
    # Kept as one malformed condition so validation reports it
    logger.debug(
        "Conditions are not a list",
        extra={'conditions_type': type(conditions).__name__}
    )
    return [conditions]


class Criteria(ABC):
    """
    Abstract base class for criteria evaluators.

    Subclasses set type_tag and implement combine(), which folds the results
    of the active conditions into a single match decision.
    """

    type_tag: Optional[str] = None

    def __init__(self, rule_type: Any = None, conditions: Any = None,
                 field_mapping: Optional[Dict[str, str]] = None):
        """
        Initialize the evaluator.

        Args:
            rule_type: Rule type tag this evaluator was selected for
            conditions: Sequence of condition descriptors (may be None)
            field_mapping: Logical entry field -> physical path mapping used
                when wrapping raw entries
        """
        self._type = rule_type if rule_type is not None else self.type_tag
        self._conditions = [Condition(c) for c in _as_condition_list(conditions)]
        self._field_mapping = dict(field_mapping or {})
        self.errors = Errors(["conditions"])

    @property
    def type(self) -> Any:
        """Canonical rule type tag."""
        return self._type

    @property
    def conditions(self) -> List[Condition]:
        return list(self._conditions)

    def active_criteria(self) -> List[Condition]:
        """Return the conditions that take part in matching, in order."""
        return [c for c in self._conditions if c.is_active()]

    def criteria_data(self) -> list:
        """Return the condition descriptors, in order."""
        return [c.to_json() for c in self._conditions]

    def is_valid(self) -> bool:
        """
        Whether every active condition is well-formed.

        Records one message key per malformed condition, readable through
        error_messages() until the next call.
        """
        self.errors.clear()
        for condition in self.active_criteria():
            for message_key in condition.problems():
                self.errors.add("conditions", message_key)
        return self.errors.empty()

    def has_errors(self) -> bool:
        return self.errors.has_errors()

    def error_messages(self) -> List[str]:
        return self.errors.error_messages()

    def matches(self, entry: Any) -> bool:
        """
        Decide whether an entry satisfies these criteria.

        Args:
            entry: Raw entry data or a TimesheetEntry helper

        Returns:
            False when there are no active conditions
        """
        active = self.active_criteria()
        if not active:
            return False
        helper = create_entry_helper(entry, self._field_mapping)
        return self.combine(condition.matches(helper) for condition in active)

    @abstractmethod
    def combine(self, results: Iterable[bool]) -> bool:
        """Fold per-condition results into one decision."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(type={self._type!r}, conditions={self.criteria_data()!r})"


class UnsupportedCriteria(Criteria):
    """Evaluator for rule types with no registered implementation. Never valid, never matches."""

    def is_valid(self) -> bool:
        self.errors.clear()
        self.errors.add("type", "criteria_error_type_invalid")
        return False

    def matches(self, entry: Any) -> bool:
        return False

    def combine(self, results: Iterable[bool]) -> bool:
        return False
