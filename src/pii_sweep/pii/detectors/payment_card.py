from __future__ import annotations
import re
from typing import List
from ..base import PatternRule

MASTERCARD_RE = re.compile(
    r"\b(?:5[1-5][0-9]{2}|222[1-9]|22[3-9][0-9]|2[3-6][0-9]{2}|27[01][0-9]|2720)[0-9]{12}\b"
)

# Same separator throughout: space, dash, dot, or none
VISA_RE = re.compile(
    r"\b(?:4\d{3}\s\d{4}\s\d{4}\s\d{4}"
    r"|4\d{3}-\d{4}-\d{4}-\d{4}"
    r"|4\d{3}\.\d{4}\.\d{4}\.\d{4}"
    r"|4\d{15})\b"
)

AMEX_RE = re.compile(r"\b3[47][0-9]{13}\b")


def rules() -> List[PatternRule]:
    return [
        PatternRule("MC detected", MASTERCARD_RE),
        PatternRule("VISA detected", VISA_RE),
        PatternRule("AMEX detected", AMEX_RE),
    ]
