from __future__ import annotations
import re
from typing import List
from ..base import PatternRule

SSN_RE = re.compile(r"\b\d{3}-\d{2}-\d{4}\b")

# Used for JSON keys and SQL column names alike
SENSITIVE_LABEL_RE = re.compile(r"\b(?:nationalID|SSN)\b")


def rules() -> List[PatternRule]:
    return [
        PatternRule("national/ssn id", SSN_RE),
        PatternRule("sensitive label", SENSITIVE_LABEL_RE),
    ]
