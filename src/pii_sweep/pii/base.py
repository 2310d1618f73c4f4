"""Pattern rule primitives.

A rule is just a name plus a compiled expression. Rules carry no state, so a
single registry instance is shared by every scan worker without locking.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Iterator, List, Pattern, Match


@dataclass(frozen=True)
class PatternRule:
    name: str             # e.g., "email address", "sensitive label"
    matcher: Pattern[str]

    def finditer(self, text: str) -> Iterator[Match[str]]:
        return self.matcher.finditer(text)

    def find_all(self, text: str) -> List[str]:
        """All non-overlapping matches as full-match strings (groups ignored)."""
        return [m.group(0) for m in self.matcher.finditer(text)]

    @property
    def pattern(self) -> str:
        return self.matcher.pattern
