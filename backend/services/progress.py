"""
progress.py
===========
Aggregate a user's stored predictions against the curriculum quotas.

A character counts as completed once the user has a stored prediction for
its (category, character) pair. Records outside the curriculum are ignored.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Set

from backend.schemas.response import CategoryProgress, ProgressReport
from backend.services.curriculum import CATEGORY_CHARACTERS

OVERALL = "overall"


def percentage(completed: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return round(completed / total * 100, 2)


def _entry(category: str, completed: int, total: int) -> CategoryProgress:
    pct = percentage(completed, total)
    return CategoryProgress(
        category             = category,
        completed_characters = completed,
        total_characters     = total,
        percentage           = pct,
        is_complete          = pct == 100.0,
    )


def compute_progress(
    records: Iterable[dict],
    curriculum: Dict[str, List[str]] = CATEGORY_CHARACTERS,
) -> ProgressReport:
    done: Dict[str, Set[str]] = {category: set() for category in curriculum}
    for record in records:
        category = record.get("category")
        character = record.get("character")
        if category in curriculum and character in curriculum[category]:
            done[category].add(character)

    entries = [
        _entry(category, len(done[category]), len(set(characters)))
        for category, characters in curriculum.items()
    ]
    overall = _entry(
        OVERALL,
        sum(e.completed_characters for e in entries),
        sum(e.total_characters for e in entries),
    )
    return ProgressReport(categories=entries, overall=overall)
