from __future__ import annotations
import re
from typing import List
from ..base import PatternRule

# Lazy body so two adjacent PEM blocks are reported separately
PRIVATE_KEY_RE = re.compile(
    r"-----BEGIN (?:RSA PRIVATE|EC PRIVATE|PRIVATE) KEY-----"
    r".*?"
    r"-----END (?:RSA PRIVATE|EC PRIVATE|PRIVATE) KEY-----",
    re.DOTALL,
)


def rules() -> List[PatternRule]:
    return [PatternRule("TLS private key", PRIVATE_KEY_RE)]
