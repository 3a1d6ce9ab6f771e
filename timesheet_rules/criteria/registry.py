"""
Criteria Registry - Rule Type Routing

Maps rule type tags to criteria evaluator classes via config, so new matching
strategies can be added without touching the Rule entity.

## Configuration Format

```yaml
default_rule_type: all   # Used when a rule does not declare a ruleType

criteria_types:
  all: "all_criteria.AllCriteria"
  any: "any_criteria.AnyCriteria"

entry_field_mapping:     # Handed to every evaluator built through the registry
  hours: duration_hours
```

Class paths are relative to the `timesheet_rules.criteria` package.

## Usage

```python
from timesheet_rules.criteria.registry import get_registry

registry = get_registry()
criteria_class = registry.get_criteria_class("any")
criteria = criteria_class("any", conditions)
```

**Testing:**
```python
from timesheet_rules.criteria.registry import reset_registry

# Reset singleton between tests
reset_registry()
registry = CriteriaRegistry({"criteria_types": {...}})
```
"""

import importlib
import logging
from typing import Any, Dict, List, Optional, Type

logger = logging.getLogger(__name__)


class CriteriaRegistry:
    """Maps rule type tags to criteria evaluator classes via config."""

    def __init__(self, config):
        """
        Initialize criteria registry.

        Args:
            config: Either a dict (config) or a ConfigLoader instance
        """
        # Handle both dict config and ConfigLoader instance
        if hasattr(config, 'get_config'):
            settings = config.get_config()
        elif isinstance(config, dict):
            settings = config
        else:
            raise ValueError("config must be a dict or ConfigLoader instance")

        self._type_map: Dict[str, str] = settings.get("criteria_types") or {}
        self._default_type: str = settings.get("default_rule_type", "all")
        self._field_mapping: Dict[str, str] = settings.get("entry_field_mapping") or {}
        self._loaded: Dict[str, Type] = {}

    @property
    def default_type(self) -> str:
        """Rule type used when a rule does not declare one."""
        return self._default_type

    @property
    def entry_field_mapping(self) -> Dict[str, str]:
        """Logical entry field -> physical path mapping handed to evaluators."""
        return self._field_mapping

    def registered_types(self) -> List[str]:
        return list(self._type_map.keys())

    def get_criteria_class(self, rule_type: Any) -> Optional[Type]:
        """
        Resolve the criteria class for a rule type tag.

        Args:
            rule_type: Rule type tag (e.g., "all", "any")

        Returns:
            Criteria class, or None if the tag is not registered

        Raises:
            ImportError: If the configured module cannot be imported
            AttributeError: If the configured class is missing from its module
        """
        if not isinstance(rule_type, str):
            return None

        if rule_type in self._loaded:
            return self._loaded[rule_type]

        class_path = self._type_map.get(rule_type)
        if not class_path:
            return None

        criteria_class = self._load_criteria_class(class_path)
        self._loaded[rule_type] = criteria_class
        return criteria_class

    def _load_criteria_class(self, class_path: str) -> Type:
        """
        Dynamically load a criteria class from a dotted path.

        Args:
            class_path: e.g., "all_criteria.AllCriteria"
        """
        module_name, class_name = class_path.rsplit(".", 1)
        # Import from criteria package
        module = importlib.import_module(f"timesheet_rules.criteria.{module_name}")
        if not hasattr(module, class_name):
            raise AttributeError(
                f"Criteria class '{class_name}' not found in {module.__name__}"
            )
        logger.debug(f"Loaded criteria class {class_path}")
        return getattr(module, class_name)


_registry: Optional[CriteriaRegistry] = None


def get_registry(config=None) -> CriteriaRegistry:
    """Get or initialize the singleton CriteriaRegistry (from bundled config by default)."""
    global _registry
    if _registry is None:
        if config is None:
            from ..config_loader import ConfigLoader
            config = ConfigLoader()
        _registry = CriteriaRegistry(config)
    return _registry


def reset_registry():
    """Reset the singleton registry (for testing)."""
    global _registry
    _registry = None
