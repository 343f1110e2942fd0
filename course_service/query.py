# course_service/query.py
import math
import re
from typing import Any, Dict, List, Optional, Tuple

from pymongo import ASCENDING, DESCENDING

from course_service.models import SortOption

ALL_CATEGORIES = "all"

SortSpec = List[Tuple[str, int]]

# "popular" sorts on the embedded array field. For a descending sort MongoDB
# compares the largest currentStudents of each course, not the batch total.
SORT_OPTIONS: Dict[SortOption, SortSpec] = {
    SortOption.NEWEST: [("createdAt", DESCENDING)],
    SortOption.PRICE_LOW: [("price", ASCENDING)],
    SortOption.PRICE_HIGH: [("price", DESCENDING)],
    SortOption.POPULAR: [("batches.currentStudents", DESCENDING), ("createdAt", DESCENDING)],
}


class CourseQuery:
    """Accumulates named predicate clauses and renders a MongoDB filter.

    Clauses are keyed by name so each filter is set at most once; the rendered
    document ANDs them together.
    """

    def __init__(self):
        self._clauses: Dict[str, Dict[str, Any]] = {}

    def search(self, text: Optional[str]) -> "CourseQuery":
        """Case-insensitive substring match on title OR instructor."""
        if text:
            pattern = {"$regex": re.escape(text), "$options": "i"}
            self._clauses["search"] = {
                "$or": [
                    {"title": pattern},
                    {"instructor": pattern},
                ]
            }
        return self

    def category(self, category: Optional[str]) -> "CourseQuery":
        if category and category != ALL_CATEGORIES:
            self._clauses["category"] = {"category": category}
        return self

    @property
    def clauses(self) -> Dict[str, Dict[str, Any]]:
        return dict(self._clauses)

    def build(self) -> Dict[str, Any]:
        query: Dict[str, Any] = {}
        for clause in self._clauses.values():
            query.update(clause)
        return query


def resolve_sort(sort: Optional[str]) -> SortSpec:
    """Sort keys for a sort option; anything unrecognized sorts newest first."""
    try:
        option = SortOption(sort)
    except ValueError:
        option = SortOption.NEWEST
    return SORT_OPTIONS[option]


def total_pages(total_count: int, limit: int) -> int:
    return math.ceil(total_count / limit)


def total_students(course: Dict[str, Any]) -> int:
    return sum((batch.get("currentStudents") or 0) for batch in (course.get("batches") or []))
