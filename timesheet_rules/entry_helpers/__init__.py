"""
Entry helper classes for criteria matching.

Provides a stable interface to timesheet entry data that shields conditions
from the physical layout of the entry dict.
"""

from typing import Any, Dict, Optional

from .timesheet_entry import TimesheetEntry

__all__ = ['TimesheetEntry', 'create_entry_helper']


def create_entry_helper(entry: Any, field_mapping: Optional[Dict[str, str]] = None,
                        track_access: bool = False) -> TimesheetEntry:
    """
    Factory function wrapping raw entry data in a TimesheetEntry helper.

    Args:
        entry: Raw entry (dict or attribute-bearing object), or an existing helper
        field_mapping: Logical field -> physical path mapping (none by default)
        track_access: If True, track which fields are accessed

    Returns:
        TimesheetEntry instance. Existing helpers are returned unchanged.
    """
    if isinstance(entry, TimesheetEntry):
        return entry
    return TimesheetEntry(entry, field_mapping, track_access=track_access)
