"""
Timesheet rule entity.

A rule pairs a row color with criteria. It decides whether it applies to a
timesheet entry by delegating to its criteria evaluator, and validates its
own definition before callers trust it.

Example:
    rule = Rule({
        "color": "#ff0000",
        "ruleType": "all",
        "conditions": [{"field": "status", "op": "eq", "value": "late"}],
    })

    if rule.is_valid() and rule.matches(entry):
        style_row(entry, rule.color())
"""

import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from .criteria import CriteriaRegistry, create_criteria
from .errors import Errors
from .uid import uid

logger = logging.getLogger(__name__)

COLOR_PATTERN = re.compile(r"#[a-f0-9]{6}", re.IGNORECASE)

COLOR_INVALID = "rule_error_color_invalid"
CRITERIA_REQUIRED = "criteria_error_criteria_required"


@dataclass(frozen=True)
class ValidationResult:
    """Snapshot of one validation run."""

    valid: bool
    messages: Tuple[str, ...] = ()

    def __bool__(self) -> bool:
        return self.valid


class Rule:
    """
    A timesheet rule which contains styles and conditions.

    The rule owns exactly one criteria evaluator and one error accumulator,
    both created at construction and never replaced.
    """

    def __init__(self, data: Optional[Dict[str, Any]] = None,
                 id_generator: Optional[Callable[[], Any]] = None,
                 registry: Optional[CriteriaRegistry] = None):
        """
        Initialize the rule from plain configuration data.

        Args:
            data: Rule options:
                - color: Row color ("#rrggbb")
                - ruleType: Type of condition testing (e.g., "all", "any")
                - conditions: List of condition descriptors
                Anything other than a mapping is treated as empty data.
            id_generator: Callable producing unique ids (process-wide uid() by default)
            registry: Criteria registry used to pick the evaluator
        """
        if not isinstance(data, Mapping):
            if data is not None:
                logger.debug(
                    "Rule data is not a mapping, treating as empty",
                    extra={'data_type': type(data).__name__}
                )
            data = {}
        self.data = data

        self._criteria = create_criteria(
            self.data.get("ruleType"), self.data.get("conditions"), registry=registry
        )
        self._id = (id_generator or uid)()
        self._errors = Errors(["color"])

    @property
    def id(self) -> Any:
        """Unique identifier for this rule."""
        return self._id

    @property
    def criteria(self):
        """Criteria evaluator this rule delegates to."""
        return self._criteria

    @property
    def errors(self) -> Errors:
        """Errors recorded by the last validation run."""
        return self._errors

    def color(self) -> Any:
        """The row color, as configured."""
        return self.data.get("color")

    def has_errors(self) -> bool:
        """Whether rule has any errors after validation."""
        return self._errors.has_errors()

    def error_messages(self) -> List[str]:
        """Message keys recorded by the last validation run."""
        return self._errors.error_messages()

    def to_json(self) -> Dict[str, Any]:
        """
        Convert rule data to a plain dict.

        ruleType and conditions come from the criteria evaluator, so the result
        reflects its canonical form rather than the raw input.
        """
        return {
            "color": self.color(),
            "ruleType": self._criteria.type,
            "conditions": self._criteria.criteria_data(),
        }

    def matches(self, entry: Any) -> bool:
        """
        Compare criteria to a timesheet entry.

        Does not validate the rule first; callers that care should check
        is_valid() separately.

        Args:
            entry: The entry to test against (dict or TimesheetEntry)

        Returns:
            Whether the entry can be said to match this rule's criteria
        """
        return bool(self._criteria.matches(entry))

    def is_valid(self) -> bool:
        """
        Whether the rule is well-formed.

        Discards errors from any previous run, then checks the color and that
        at least one condition is active. Valid only if those checks pass and
        the criteria evaluator reports itself valid.
        """
        self._errors.clear()

        color = self.color()
        if not isinstance(color, str) or not COLOR_PATTERN.fullmatch(color):
            self._errors.add("color", COLOR_INVALID)

        if len(self._criteria.active_criteria()) == 0:
            self._errors.add("base", CRITERIA_REQUIRED)

        criteria_valid = self._criteria.is_valid()

        logger.debug(
            f"Validated rule {self._id}",
            extra={
                'rule_id': self._id,
                'criteria_valid': criteria_valid,
                'errors': self._errors.error_messages()
            }
        )

        return criteria_valid and self._errors.empty()

    def validate(self) -> ValidationResult:
        """Run is_valid() and return an immutable snapshot of the outcome."""
        valid = self.is_valid()
        return ValidationResult(valid, tuple(self.error_messages()))

    def __repr__(self) -> str:
        return f"Rule(id={self._id!r}, color={self.color()!r}, type={self._criteria.type!r})"
