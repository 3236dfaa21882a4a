# File: app/services/scoring.py
import math
from typing import Union

from app.models.issue import Severity

SEVERITY_SCORES = {
    Severity.low: 1,
    Severity.medium: 2,
    Severity.high: 3,
}
DESCRIPTION_CHARS_PER_POINT = 100
MAX_DESCRIPTION_SCORE = 2.0


def score(severity: Union[Severity, str], description: str) -> float:
    """Priority rating used to order the triage queue.

    Severity contributes 1-3 points and the description one point per hundred
    characters, up to two. The sum is rounded half-up to one decimal place.
    `severity` must already be a known value; anything else raises ValueError.
    """
    severity_score = SEVERITY_SCORES[Severity(severity)]
    description_score = min(len(description or "") / DESCRIPTION_CHARS_PER_POINT, MAX_DESCRIPTION_SCORE)
    return math.floor((severity_score + description_score) * 10 + 0.5) / 10
