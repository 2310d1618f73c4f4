"""Birthdate heuristic.

Flags `M-D-YYYY` style dates whose year puts the person at 18 or older
relative to a reference date. The reference date is injected so the rule is
reproducible in tests; at runtime it is the date the registry is built.
"""

from __future__ import annotations
import re
from datetime import date
from typing import List, Pattern
from ..base import PatternRule

MIN_AGE_YEARS = 18
EARLIEST_YEAR = 1900


def year_range_pattern(upper: int, lower: int = EARLIEST_YEAR) -> str:
    """Regex alternation matching exactly the four-digit years lower..upper.

    `lower` must sit on a century boundary (1900, 2000, ...).
    """
    if lower % 100:
        raise ValueError(f"lower bound must be a century start, got {lower}")
    if upper < lower:
        raise ValueError(f"upper bound {upper} is before {lower}")
    century, rem = divmod(upper, 100)
    tens, ones = divmod(rem, 10)
    parts = [rf"{c}\d{{2}}" for c in range(lower // 100, century)]
    if tens:
        parts.append(rf"{century}[0-{tens - 1}]\d")
    parts.append(rf"{century}{tens}[0-{ones}]")
    return "(?:" + "|".join(parts) + ")"


def compile_birthdate(today: date) -> Pattern[str]:
    upper = today.year - MIN_AGE_YEARS
    return re.compile(rf"\b\d{{1,2}}[-.\s]\d{{1,2}}[-.\s]{year_range_pattern(upper)}\b")


def rules(today: date) -> List[PatternRule]:
    return [PatternRule("possible birthdate", compile_birthdate(today))]
