"""
Public API for timesheet-rules

This is the "front door" - builds rules from plain dicts, validates them and
tests them against timesheet entries, reporting plain dict results.
"""

import logging
from typing import Any, Dict, List, Optional

from .config_loader import ConfigLoader
from .criteria import CriteriaRegistry
from .rule import Rule
from .uid import UidGenerator

logger = logging.getLogger(__name__)


class RuleService:
    """
    Main rule service class.

    Example:
        from timesheet_rules import RuleService

        service = RuleService()
        result = service.validate_rule({
            "color": "#ff0000",
            "ruleType": "all",
            "conditions": [{"field": "status", "op": "eq", "value": "late"}],
        })
        if not result["valid"]:
            print(result["errors"])
    """

    def __init__(self, config_path: Optional[str] = None,
                 id_generator: Optional[UidGenerator] = None):
        """
        Initialize rule service.

        Args:
            config_path: Optional YAML config path (bundled local-config.yaml by default)
            id_generator: Optional id generator for rules built by this service

        Raises:
            RuntimeError: If config loading fails
        """
        self.config_loader = ConfigLoader(config_path)
        self.registry = CriteriaRegistry(self.config_loader)
        self.field_mapping = self.registry.entry_field_mapping
        self.id_generator = id_generator

        logger.info(
            "Rule service initialized",
            extra={
                'config_path': self.config_loader.config_path,
                'rule_types': self.registry.registered_types(),
                'default_rule_type': self.registry.default_type
            }
        )

    def build_rule(self, rule_data: Optional[Dict[str, Any]]) -> Rule:
        """Construct a Rule wired to this service's registry and id generator."""
        return Rule(rule_data, id_generator=self.id_generator, registry=self.registry)

    def validate_rule(self, rule_data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Validate a single rule definition.

        Args:
            rule_data: Rule dict with color, ruleType and conditions

        Returns:
            Dict containing:
                - id: Identifier assigned to the rule
                - valid: Whether the rule is well-formed
                - errors: Rule-level message keys (e.g. "rule_error_color_invalid")
                - criteria_errors: Condition-level message keys from the evaluator
                - rule: Canonical rule dict (see Rule.to_json)
        """
        rule = self.build_rule(rule_data)
        result = rule.validate()

        if not result.valid:
            logger.debug(
                f"Rule {rule.id} is invalid",
                extra={'errors': list(result.messages)}
            )

        return {
            "id": rule.id,
            "valid": result.valid,
            "errors": list(result.messages),
            "criteria_errors": rule.criteria.error_messages(),
            "rule": rule.to_json(),
        }

    def batch_validate(self, rules_data: List[Optional[Dict[str, Any]]]) -> List[Dict[str, Any]]:
        """
        Validate multiple rule definitions.

        Returns:
            List of per-rule results (same format as validate_rule()), in input order
        """
        results = [self.validate_rule(rule_data) for rule_data in rules_data]

        invalid = sum(1 for r in results if not r["valid"])
        logger.info(
            f"Validated {len(results)} rules ({invalid} invalid)",
            extra={'total': len(results), 'invalid': invalid}
        )
        return results

    def matches(self, rule_data: Optional[Dict[str, Any]], entry: Any) -> bool:
        """
        Test whether a rule's criteria match a timesheet entry.

        The rule is not validated first; an invalid rule simply reports its
        criteria's decision.

        Args:
            rule_data: Rule dict
            entry: Raw entry dict (or TimesheetEntry helper)

        Returns:
            Whether the entry matches
        """
        rule = self.build_rule(rule_data)
        return rule.matches(entry)
