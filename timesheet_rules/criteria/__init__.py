"""
Criteria evaluators for timesheet rules.

Each rule owns one evaluator, selected by the rule's type tag through the
criteria registry.
"""

import logging
from typing import Any, Optional

from .base import Condition, Criteria, UnsupportedCriteria
from .registry import CriteriaRegistry, get_registry, reset_registry

__all__ = ['Condition', 'Criteria', 'UnsupportedCriteria', 'CriteriaRegistry',
           'create_criteria', 'get_registry', 'reset_registry']

logger = logging.getLogger(__name__)


def create_criteria(rule_type: Any = None, conditions: Any = None,
                    registry: Optional[CriteriaRegistry] = None) -> Criteria:
    """
    Factory function to create the evaluator for a rule type.

    Args:
        rule_type: Rule type tag; None or "" selects the configured default
        conditions: Sequence of condition descriptors (may be None)
        registry: Registry to resolve against (process-wide registry by default)

    Returns:
        Criteria instance. Unregistered tags yield an UnsupportedCriteria,
        which is never valid and never matches.
    """
    if registry is None:
        registry = get_registry()

    if rule_type is None or rule_type == "":
        rule_type = registry.default_type

    criteria_class = registry.get_criteria_class(rule_type)
    if criteria_class is None:
        logger.warning(
            f"Unknown rule type {rule_type!r}",
            extra={'registered_types': registry.registered_types()}
        )
        return UnsupportedCriteria(rule_type, conditions, registry.entry_field_mapping)

    return criteria_class(rule_type, conditions, registry.entry_field_mapping)
