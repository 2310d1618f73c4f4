"""Exception types.

Only ScanRootError is fatal for a run. Everything else is local to a file
or to a single rule check.
"""


class SweepError(Exception):
    """Base exception for pii_sweep errors."""


class ConfigError(SweepError):
    """Raised when scan configuration is invalid (bad YAML, unknown mode, bad rule)."""


class MissingRuleError(ConfigError, KeyError):
    """Raised when an extractor looks up a rule that is not registered."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Pattern rule '{self.name}' is not registered"


class ScanRootError(SweepError):
    """Raised when traversal cannot start at the configured root."""
