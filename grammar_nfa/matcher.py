# matcher.py
#
# Two ways to run a compiled Nfa over a message:
#   - is_match: depth-first backtracking over (state, position), no memoization
#   - simulate: state-set simulation with worklist epsilon closures
#
# Both expect an acyclic automaton, which is what compile_rules produces.

from __future__ import annotations

from typing import Callable, Iterable

from .nfa import ACCEPT_STATE, EPSILON, START_STATE, Nfa

Matcher = Callable[[Nfa, str], bool]


def is_match(nfa: Nfa, text: str) -> bool:
    return _match_from(nfa, START_STATE, text, 0)


def _match_from(nfa: Nfa, state: int, text: str, pos: int) -> bool:
    if pos == len(text):
        return _match_end(nfa, state)

    ch = text[pos]
    transitions = nfa.transitions
    begin, end = nfa.transition_range(state)
    for i in range(begin, end):
        t = transitions[i]
        if t.symbol == ch and _match_from(nfa, t.target, text, pos + 1):
            return True
        if t.symbol == EPSILON and _match_from(nfa, t.target, text, pos):
            return True
    return False


def _match_end(nfa: Nfa, state: int) -> bool:
    if state == ACCEPT_STATE:
        return True
    transitions = nfa.transitions
    begin, end = nfa.transition_range(state)
    for i in range(begin, end):
        t = transitions[i]
        if t.symbol == EPSILON and _match_end(nfa, t.target):
            return True
    return False


def simulate(nfa: Nfa, text: str) -> bool:
    current = nfa.epsilon_closure({START_STATE})
    for ch in text:
        current = nfa.epsilon_closure(nfa.move(current, ch))
        if not current:
            return False
    return ACCEPT_STATE in current


MATCHERS = {
    "backtrack": is_match,
    "simulate": simulate,
}


def get_matcher(name: str) -> Matcher:
    try:
        return MATCHERS[name]
    except KeyError:
        raise ValueError(f"Unknown matcher {name!r} (expected one of: {', '.join(sorted(MATCHERS))})") from None


def count_matches(nfa: Nfa, messages: Iterable[str], matcher: Matcher = is_match) -> int:
    return sum(1 for m in messages if matcher(nfa, m))
