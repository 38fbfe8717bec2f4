# grammar.py
#
# Rule grammar for "monster message" inputs:
#
#   0: 4 1 5
#   1: 2 3 | 3 2
#   4: "a"
#
#   ababbb
#   bababa
#
# Rules come first, one per line, then a blank line, then candidate messages.
# Rule ids are dense integers and may be referenced before they are defined.

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple, Union


# =============================================================================
# Rule definitions
# =============================================================================

@dataclass(frozen=True)
class Void:
    pass


@dataclass(frozen=True)
class Terminal:
    symbol: str


@dataclass(frozen=True)
class Sequence:
    items: Tuple[int, ...]


@dataclass(frozen=True)
class Choice:
    first: Tuple[int, ...]
    second: Tuple[int, ...]


Rule = Union[Void, Terminal, Sequence, Choice]

VOID = Void()


# =============================================================================
# Errors
# =============================================================================

class GrammarError(Exception):
    pass


class GrammarParseError(GrammarError, ValueError):
    def __init__(self, message: str, line: str, line_number: Optional[int] = None) -> None:
        where = f"line {line_number}" if line_number is not None else "rule"
        super().__init__(f"{message} ({where}: {line!r})")
        self.reason = message
        self.line = line
        self.line_number = line_number


# =============================================================================
# Line parser
# =============================================================================

def parse_rule(line: str) -> Tuple[int, Rule]:
    text = line.strip()
    colon = text.find(":")
    if colon < 0:
        raise GrammarParseError("Missing ':' after rule id", line)

    rule_id = _parse_id(text[:colon], line)
    body = text[colon + 1:].strip()

    if body.startswith('"'):
        return rule_id, _parse_terminal(body, line)

    bar = body.find("|")
    if bar >= 0:
        first = _parse_sequence(body[:bar], line)
        second = _parse_sequence(body[bar + 1:], line)
        return rule_id, Choice(first, second)

    return rule_id, Sequence(_parse_sequence(body, line))


def _parse_id(text: str, line: str) -> int:
    s = text.strip()
    # isdigit alone admits characters like "²" that int() rejects.
    if not (s.isascii() and s.isdigit()):
        raise GrammarParseError(f"Invalid rule id {s!r}", line)
    return int(s)


def _parse_terminal(body: str, line: str) -> Terminal:
    # Exactly one character between double quotes.
    if len(body) != 3 or body[0] != '"' or body[2] != '"' or body[1] == '"':
        raise GrammarParseError(f"Unrecognized terminal {body}", line)
    return Terminal(body[1])


def _parse_sequence(text: str, line: str) -> Tuple[int, ...]:
    parts = text.split()
    if not parts:
        raise GrammarParseError("Empty sequence", line)
    return tuple(_parse_id(p, line) for p in parts)


# =============================================================================
# Rule table
# =============================================================================

class RuleTable:
    def __init__(self) -> None:
        self.rules: List[Rule] = []

    @classmethod
    def from_rules(cls, rules: Iterable[Rule]) -> "RuleTable":
        table = cls()
        table.rules = list(rules)
        return table

    def __len__(self) -> int:
        return len(self.rules)

    def __getitem__(self, rule_id: int) -> Rule:
        return self.rules[rule_id]

    def __iter__(self) -> Iterator[Rule]:
        return iter(self.rules)

    def get(self, rule_id: int) -> Rule:
        # Ids past the end behave like rules that were never defined.
        if 0 <= rule_id < len(self.rules):
            return self.rules[rule_id]
        return VOID

    def define(self, rule_id: int, rule: Rule) -> None:
        if rule_id < 0:
            raise ValueError("rule_id must be >= 0")
        if len(self.rules) <= rule_id:
            self.rules.extend([VOID] * (rule_id + 1 - len(self.rules)))
        self.rules[rule_id] = rule

    def add(self, line: str) -> int:
        rule_id, rule = parse_rule(line)
        self.define(rule_id, rule)
        return rule_id

    def undefined_references(self) -> List[int]:
        missing = set()
        for rule in self.rules:
            for ref in references_of(rule):
                if isinstance(self.get(ref), Void):
                    missing.add(ref)
        return sorted(missing)


def references_of(rule: Rule) -> Tuple[int, ...]:
    if isinstance(rule, Sequence):
        return rule.items
    if isinstance(rule, Choice):
        return rule.first + rule.second
    return ()


def parse_grammar(lines: Iterable[str]) -> RuleTable:
    table = RuleTable()
    for idx, line in enumerate(lines, start=1):
        try:
            table.add(line)
        except GrammarParseError as ex:
            raise GrammarParseError(ex.reason, line, idx) from ex
    return table


# =============================================================================
# Input file
# =============================================================================

@dataclass
class GrammarFile:
    rules: RuleTable
    messages: List[str]


def read_input(path: str) -> GrammarFile:
    table = RuleTable()
    messages: List[str] = []
    in_grammar = True

    with open(path, "r", encoding="utf-8") as f:
        for idx, raw in enumerate(f, start=1):
            line = raw.rstrip("\r\n")
            if not line.strip():
                in_grammar = False
            elif in_grammar:
                try:
                    table.add(line)
                except GrammarParseError as ex:
                    raise GrammarParseError(ex.reason, line, idx) from ex
            else:
                messages.append(line)

    return GrammarFile(rules=table, messages=messages)
