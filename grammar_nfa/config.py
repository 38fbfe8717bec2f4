"""
Settings for the grammar_nfa command, read from a TOML file.

Example (grammar_nfa.toml):

    [grammar_nfa]
    start_rule = 0
    transitions_path = "transitions.txt"   # "" disables the dump
    strict_references = false
    matcher = "backtrack"                  # or "simulate"
    verbose = false
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any, Mapping, Optional

import toml

from .matcher import MATCHERS

SECTION = "grammar_nfa"


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class Settings:
    start_rule: int = 0
    transitions_path: str = "transitions.txt"
    strict_references: bool = False
    matcher: str = "backtrack"
    verbose: bool = False

    def with_overrides(self, **overrides: Any) -> "Settings":
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return _validated(replace(self, **changes))


def settings_from_mapping(data: Mapping[str, Any]) -> Settings:
    section = data.get(SECTION, {})
    if not isinstance(section, Mapping):
        raise ConfigError(f"[{SECTION}] must be a table")

    known = {f.name: f for f in fields(Settings)}
    values = {}
    for key, value in section.items():
        if key not in known:
            raise ConfigError(f"Unknown setting '{key}' in [{SECTION}]")
        values[key] = value

    return _validated(Settings(**values))


def load_settings(path: Optional[str] = None) -> Settings:
    if path is None:
        return Settings()
    try:
        data = toml.load(path)
    except toml.TomlDecodeError as ex:
        raise ConfigError(f"Invalid TOML in {path}: {ex}") from ex
    return settings_from_mapping(data)


def _validated(s: Settings) -> Settings:
    # bool is a subclass of int, so check it explicitly.
    if not isinstance(s.start_rule, int) or isinstance(s.start_rule, bool) or s.start_rule < 0:
        raise ConfigError(f"start_rule must be a non-negative integer, got {s.start_rule!r}")
    if not isinstance(s.transitions_path, str):
        raise ConfigError(f"transitions_path must be a string, got {s.transitions_path!r}")
    if not isinstance(s.strict_references, bool):
        raise ConfigError(f"strict_references must be true or false, got {s.strict_references!r}")
    if not isinstance(s.verbose, bool):
        raise ConfigError(f"verbose must be true or false, got {s.verbose!r}")
    if s.matcher not in MATCHERS:
        raise ConfigError(f"matcher must be one of {sorted(MATCHERS)}, got {s.matcher!r}")
    return s
