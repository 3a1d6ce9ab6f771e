"""Criteria evaluator matching entries that satisfy at least one active condition."""

from typing import Iterable

from .base import Criteria


class AnyCriteria(Criteria):
    """Matches when any active condition matches."""

    type_tag = "any"

    def combine(self, results: Iterable[bool]) -> bool:
        return any(results)
