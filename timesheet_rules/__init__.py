"""
timesheet-rules: Conditional row styling rules for timesheet entries

This library provides:
- A Rule entity pairing a row color with match conditions
- Self-validation of rule definitions, reported as message keys
- Pluggable criteria evaluators selected by rule type
- Config-driven entry field mapping

Example:
    from timesheet_rules import Rule

    rule = Rule({"color": "#ff0000", "ruleType": "all",
                 "conditions": [{"field": "status", "op": "eq", "value": "late"}]})
    if rule.is_valid():
        rule.matches({"status": "late"})
"""

from .api import RuleService
from .errors import Errors
from .rule import Rule, ValidationResult
from .uid import UidGenerator, uid

__version__ = "0.1.0"
__all__ = ["Rule", "RuleService", "ValidationResult", "Errors", "UidGenerator", "uid"]
