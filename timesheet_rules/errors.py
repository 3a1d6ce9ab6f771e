"""
Field-scoped error accumulator.

Collects validation failures as (field, message_key) pairs. Message keys are
opaque identifiers (e.g. "rule_error_color_invalid") resolved to human text by
the caller's localization layer.

The declared fields are informational only: add() accepts any field key, so
rule-level failures can be recorded under "base" without declaring it.
"""

from typing import Iterable, List, Optional, Tuple


class Errors:
    """Ordered collection of validation message keys grouped by field."""

    def __init__(self, fields: Optional[Iterable[str]] = None):
        """
        Initialize an empty accumulator.

        Args:
            fields: Field keys this accumulator is expected to track
        """
        self.fields = list(fields or [])
        self._errors: List[Tuple[str, str]] = []

    def add(self, field: str, message_key: str) -> None:
        """Record an error under a field (declared or not)."""
        self._errors.append((field, message_key))

    def clear(self) -> None:
        """Discard all recorded errors."""
        self._errors = []

    def has_errors(self) -> bool:
        return bool(self._errors)

    def empty(self) -> bool:
        return not self._errors

    def error_messages(self) -> List[str]:
        """Return all message keys in insertion order across fields."""
        return [message_key for _, message_key in self._errors]

    def on(self, field: str) -> List[str]:
        """Return the message keys recorded for one field."""
        return [message_key for f, message_key in self._errors if f == field]

    def __len__(self) -> int:
        return len(self._errors)

    def __repr__(self) -> str:
        return f"Errors(fields={self.fields!r}, errors={self._errors!r})"
