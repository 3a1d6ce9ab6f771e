"""
Timesheet entry helper - logical field access over raw entry data.

Conditions name entry fields by logical name ("project", "hours", "status").
The helper maps each logical name to a physical dotted path in the raw data
using the configured entry_field_mapping, e.g.:

- project → project.name
- client → project.client
- hours → duration_hours

Logical names with no mapping are looked up by their own name, and a mapped
path that is absent from the data falls back to the logical name as well, so
flat entries like {"status": "late", "project": "Apollo"} work unchanged.
"""

from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Tuple

_MISSING = object()

# Values whose attributes are never entry fields
_SCALARS = (str, bytes, int, float, bool, list, tuple, set)


class TimesheetEntry:
    """Helper class providing a stable, field-name based interface to entry data."""

    def __init__(self, data: Any, field_mapping: Optional[Dict[str, str]] = None,
                 track_access: bool = False):
        self._data = data if data is not None else {}
        self._field_mapping = dict(field_mapping or {})
        self._track_access = track_access
        self._accesses: dict = {}  # (logical, physical) → None, ordered + deduplicated

    def _record_access(self, logical_name: str, model_path: str = None):
        """Record field access for dependency tracking."""
        if self._track_access:
            self._accesses[(logical_name, model_path)] = None

    def get_accesses(self) -> List[Tuple[str, str]]:
        """Return list of (logical_name, physical_path) pairs, ordered by first access."""
        return list(self._accesses.keys())

    def get(self, field: str) -> Any:
        """
        Read a logical field from the entry.

        Args:
            field: Logical field name

        Returns:
            The field value, or None when the entry has no such field
        """
        path = self._field_mapping.get(field, field)
        value = self._resolve(path)
        if value is _MISSING and path != field:
            path = field
            value = self._resolve(field)

        self._record_access(field, path)
        return None if value is _MISSING else value

    def has(self, field: str) -> bool:
        """Whether the entry carries a value for the logical field."""
        path = self._field_mapping.get(field, field)
        if self._resolve(path) is not _MISSING:
            return True
        return path != field and self._resolve(field) is not _MISSING

    def _resolve(self, path: str) -> Any:
        """Walk a dotted path through nested mappings or attributes."""
        if isinstance(self._data, Mapping) and path in self._data:
            return self._data[path]

        value = self._data
        for part in path.split("."):
            if isinstance(value, Mapping):
                if part not in value:
                    return _MISSING
                value = value[part]
            elif part and not isinstance(value, _SCALARS) and hasattr(value, part):
                value = getattr(value, part)
            else:
                return _MISSING
        return value

    @property
    def data(self) -> Any:
        """Raw entry data."""
        return self._data

    def __repr__(self) -> str:
        return f"TimesheetEntry({self._data!r})"
