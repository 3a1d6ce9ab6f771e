"""Criteria evaluator matching entries that satisfy every active condition."""

from typing import Iterable

from .base import Criteria


class AllCriteria(Criteria):
    """Matches when all active conditions match."""

    type_tag = "all"

    def combine(self, results: Iterable[bool]) -> bool:
        return all(results)
