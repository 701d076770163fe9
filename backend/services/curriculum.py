"""
curriculum.py
=============
Hard-coded practice curriculum: category → ordered list of characters the
learner must complete. Progress percentages are computed against these
quotas.
"""

from typing import Dict, List

CATEGORY_CHARACTERS: Dict[str, List[str]] = {
    "basic-strokes": ["一", "丁", "七"],
    "numbers":       ["一", "二", "三", "四", "五", "六", "七", "八", "九", "十"],
    "nature":        ["日", "月", "山", "水", "火", "木"],
    "people":        ["人", "大", "口", "女", "子"],
}


def is_known_category(category: str) -> bool:
    return category in CATEGORY_CHARACTERS


def category_contains(category: str, character: str) -> bool:
    return character in CATEGORY_CHARACTERS.get(category, [])
