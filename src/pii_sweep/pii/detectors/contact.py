from __future__ import annotations
import re
from typing import List
from ..base import PatternRule

EMAIL_RE = re.compile(r"\b[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}\b")

# US-style "City ST 12345", single separator between parts
CITY_STATE_ZIP_RE = re.compile(r"\b[A-Z][a-z]{2,15}[\s\t,][A-Z]{2}[\s\t,]\d{5}\b")

INTERNATIONAL_PHONE_RE = re.compile(r"\+\d{9,14}")

# NANP-like: area code cannot start with 0/1
DOMESTIC_PHONE_RE = re.compile(r"\b(?:[2-9]\d{2}[-.\s]?)\d{3}[-.\s]?\d{4}\b")


def rules() -> List[PatternRule]:
    return [
        PatternRule("email address", EMAIL_RE),
        PatternRule("city/state/zip", CITY_STATE_ZIP_RE),
        PatternRule("international phone", INTERNATIONAL_PHONE_RE),
        PatternRule("domestic phone", DOMESTIC_PHONE_RE),
    ]
