"""
labels.py
=========
Fixed class-label set for the handwritten character classifier and the
static label → explanation lookup table returned alongside each prediction.

The index of each label in CLASS_LABELS must match the output index of the
trained network (see architecture.py / predictor.py).
"""

from typing import Dict, List

# ---------------------------------------------------------------------------
# Ordered class labels; index must stay fixed
# ---------------------------------------------------------------------------
CLASS_LABELS: List[str] = [
    "一",   # yī, one
    "丁",   # dīng, nail
    "七",   # qī, seven
]

# ---------------------------------------------------------------------------
# Canned stroke-order feedback shown to the learner for each label
# ---------------------------------------------------------------------------
EXPLANATIONS: Dict[str, str] = {
    "一": (
        "一 (yī, 'one') is a single horizontal stroke. Write it from left to "
        "right with steady pressure and a slight press at the end."
    ),
    "丁": (
        "丁 (dīng) has two strokes: first the horizontal 一, then the vertical "
        "hook 亅 starting at the centre of the horizontal and ending with a "
        "small hook to the left."
    ),
    "七": (
        "七 (qī, 'seven') has two strokes: a rising horizontal that slants up "
        "to the right, then a vertical-bend-hook that cuts through it and "
        "turns to the right at the bottom."
    ),
}

UNKNOWN_EXPLANATION = "No feedback is available for this character yet."


def explain(label: str) -> str:
    """Return the canned explanation for *label*."""
    return EXPLANATIONS.get(label, UNKNOWN_EXPLANATION)
