"""Pattern rule registry.

The registry is built once, before any file is scanned, by `build_registry()`.
After construction it is a read-only mapping from rule name to PatternRule.

Adding a rule:
1) add a compiled expression + `rules()` entry under `pii_sweep.pii.detectors.*`
2) include it in `_builtin_rules()` below
or, without code changes, list it under `rules.extra` in scan.yaml.

The birthdate rule depends on the reference date, which is injected here
instead of being read from the wall clock at import time.
"""

from __future__ import annotations
import logging
import re
from datetime import date
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from ..errors import ConfigError, MissingRuleError
from .base import PatternRule
from .detectors import birthdate, contact, national_id, payment_card, private_key

log = logging.getLogger("pii_sweep.pii.registry")

SENSITIVE_LABEL = "sensitive label"


def _builtin_rules(today: date) -> List[PatternRule]:
    out: List[PatternRule] = []
    out.extend(contact.rules())
    out.extend(birthdate.rules(today))
    out.extend(national_id.rules())
    out.extend(payment_card.rules())
    out.extend(private_key.rules())
    return out


class RuleRegistry(Mapping[str, PatternRule]):
    """Immutable name -> PatternRule mapping shared by all scan workers."""

    def __init__(self, rules: Iterable[PatternRule], *, reference_date: date):
        table: Dict[str, PatternRule] = {}
        for rule in rules:
            if rule.name in table:
                raise ConfigError(f"Duplicate pattern rule name: {rule.name}")
            table[rule.name] = rule
        self._rules = MappingProxyType(table)
        self.reference_date = reference_date

    def __getitem__(self, name: str) -> PatternRule:
        return self._rules[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)

    def get_rule(self, name: str) -> PatternRule:
        """Like `registry[name]`, but raises MissingRuleError (a config error)."""
        rule = self._rules.get(name)
        if rule is None:
            raise MissingRuleError(name)
        return rule

    def rules(self) -> List[PatternRule]:
        return list(self._rules.values())

    def describe(self) -> List[Tuple[str, str]]:
        return [(r.name, r.pattern) for r in self._rules.values()]


def build_registry(
    today: Optional[date] = None,
    *,
    disabled: Iterable[str] = (),
    extra: Optional[Mapping[str, str]] = None,
) -> RuleRegistry:
    """Build the rule registry.

    Args:
        today: reference date for the birthdate rule (defaults to date.today())
        disabled: rule names to leave out
        extra: additional {name: regex} rules from configuration

    Raises:
        ConfigError: an extra rule does not compile or reuses an existing name
    """
    today = today or date.today()
    disabled = set(disabled)
    rules = [r for r in _builtin_rules(today) if r.name not in disabled]

    unknown = disabled - {r.name for r in _builtin_rules(today)} - set(extra or {})
    for name in sorted(unknown):
        log.warning(f"Disabled rule '{name}' is not a known rule, ignoring")

    for name, expr in (extra or {}).items():
        if name in disabled:
            continue
        try:
            rules.append(PatternRule(str(name), re.compile(str(expr))))
        except re.error as e:
            raise ConfigError(f"Invalid regex for rule '{name}': {e}") from e

    registry = RuleRegistry(rules, reference_date=today)
    log.debug(f"Pattern registry built with {len(registry)} rules (reference date {today.isoformat()})")
    return registry
