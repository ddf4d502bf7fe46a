"""Error types raised while loading credential documents and resolving cluster aliases."""

from __future__ import annotations

from pathlib import Path


class ParseError(ValueError):
    """A credentials document is malformed or references something that does not exist."""

    def __init__(self, path: str | Path, detail: str) -> None:
        self.path = str(path)
        self.detail = detail
        msg = f"{self.path}: {detail}"
        super().__init__(msg)


class ConfigError(RuntimeError):
    """The combination of cluster sources cannot produce a valid alias map.

    Subclasses name the violated rule through ``rule``; the message is fixed per rule.
    """

    rule = "invalid cluster configuration"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        msg = self.rule if detail is None else f"{self.rule}: {detail}"
        super().__init__(msg)


class NoClusterConfiguredError(ConfigError):
    rule = "no cluster configured"


class OverridesRequireLocalError(ConfigError):
    rule = "overrides require a local cluster"


class OverridesMissingDefaultError(ConfigError):
    rule = "overrides missing default"


class CurrentContextRequiredError(ConfigError):
    rule = "current context required"
