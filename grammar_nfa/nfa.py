# nfa.py
#
# Compiles a rule table into an epsilon-NFA by walking the rule tree from the
# start rule and allocating states on demand. Every occurrence of a rule gets
# its own states, so the automaton is a tree of paths joined at choice exits.
#
# States are plain integers. Transitions live in one flat sorted list and each
# state owns a (begin, end) slice of it.

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, NamedTuple, Sequence as Seq, Set, Tuple, Union

from .grammar import Choice, GrammarError, Rule, RuleTable, Sequence, Terminal, Void

EPSILON = ""

START_STATE = 0
ACCEPT_STATE = 1


class UndefinedRuleError(GrammarError):
    def __init__(self, rule_id: int, path: Seq[int]) -> None:
        chain = " -> ".join(str(r) for r in path)
        super().__init__(f"Rule {rule_id} is referenced but never defined (via {chain})")
        self.rule_id = rule_id
        self.path = tuple(path)


class CyclicGrammarError(GrammarError):
    def __init__(self, path: Seq[int]) -> None:
        chain = " -> ".join(str(r) for r in path)
        super().__init__(f"Grammar contains a cycle: {chain}")
        self.path = tuple(path)


class Transition(NamedTuple):
    source: int
    symbol: str  # EPSILON for epsilon transitions
    target: int


# =============================================================================
# NFA representation
# =============================================================================

class Nfa:
    def __init__(self) -> None:
        self.state_count = 2
        self.transitions: List[Transition] = []
        self.ranges: List[Tuple[int, int]] = []

    def new_state(self) -> int:
        sid = self.state_count
        self.state_count += 1
        return sid

    def add_transition(self, source: int, symbol: str, target: int) -> None:
        self.transitions.append(Transition(source, symbol, target))

    def finalize(self) -> None:
        # Sort so transitions are grouped by source, then record each group's slice.
        self.transitions.sort()
        self.ranges = [(0, 0)] * self.state_count

        begin = 0
        for i in range(1, len(self.transitions) + 1):
            if i == len(self.transitions) or self.transitions[i].source != self.transitions[begin].source:
                self.ranges[self.transitions[begin].source] = (begin, i)
                begin = i

    def transition_range(self, state: int) -> Tuple[int, int]:
        return self.ranges[state]

    def transitions_from(self, state: int) -> Iterator[Transition]:
        begin, end = self.ranges[state]
        for i in range(begin, end):
            yield self.transitions[i]

    def alphabet(self) -> Set[str]:
        return {t.symbol for t in self.transitions if t.symbol != EPSILON}

    def epsilon_closure(self, states: Iterable[int]) -> Set[int]:
        closure = set(states)
        stack = list(closure)
        while stack:
            s = stack.pop()
            for t in self.transitions_from(s):
                if t.symbol == EPSILON and t.target not in closure:
                    closure.add(t.target)
                    stack.append(t.target)
        return closure

    def move(self, states: Iterable[int], symbol: str) -> Set[int]:
        out: Set[int] = set()
        for s in states:
            for t in self.transitions_from(s):
                if t.symbol == symbol:
                    out.add(t.target)
        return out

    def write_transitions(self, path: str) -> None:
        with open(path, "w", encoding="utf-8", newline="\n") as f:
            for t in self.transitions:
                f.write(f"{t.source}, {t.symbol}, {t.target}\n")

    def dump_table(self) -> str:
        rows: List[List[str]] = []
        for s in range(self.state_count):
            markers = []
            if s == START_STATE:
                markers.append("START")
            if s == ACCEPT_STATE:
                markers.append("ACCEPT")
            mark = ",".join(markers)

            out = list(self.transitions_from(s))
            if not out:
                rows.append([str(s), mark, "", ""])
                continue

            first_row = True
            for t in out:
                s_col = str(s) if first_row else ""
                m_col = mark if first_row else ""
                sym = "ε" if t.symbol == EPSILON else repr(t.symbol)
                rows.append([s_col, m_col, sym, str(t.target)])
                first_row = False

        return _make_table(rows, ["State", "Markers", "Symbol", "Dest"])


def _make_table(rows: List[List[str]], headers: List[str]) -> str:
    widths = [len(h) for h in headers]
    for r in rows:
        for c, cell in enumerate(r):
            widths[c] = max(widths[c], len(cell))

    def fmt_row(r: List[str]) -> str:
        return " | ".join(cell.ljust(widths[c]) for c, cell in enumerate(r)).rstrip()

    line = "-+-".join("-" * w for w in widths)
    out = [fmt_row(headers), line]
    out.extend(fmt_row(r) for r in rows)
    return "\n".join(out)


# =============================================================================
# Construction
# =============================================================================

class NfaBuilder:
    def __init__(self, rules: Union[RuleTable, Iterable[Rule]], strict: bool = False) -> None:
        self.rules = rules if isinstance(rules, RuleTable) else RuleTable.from_rules(rules)
        self.strict = strict
        self.nfa = Nfa()
        self._active: List[int] = []

    def build(self, start_rule: int = 0) -> Nfa:
        exit_state = self._add_rule(start_rule, START_STATE)
        self.nfa.add_transition(exit_state, EPSILON, ACCEPT_STATE)
        self.nfa.finalize()
        return self.nfa

    def _add_rule(self, rule_id: int, prev_state: int) -> int:
        if rule_id in self._active:
            cycle_start = self._active.index(rule_id)
            raise CyclicGrammarError(self._active[cycle_start:] + [rule_id])

        rule: Rule = self.rules.get(rule_id)

        if isinstance(rule, Void):
            if self.strict:
                raise UndefinedRuleError(rule_id, self._active + [rule_id])
            # Nothing to traverse; the rule contributes no states.
            return prev_state

        if isinstance(rule, Terminal):
            new_state = self.nfa.new_state()
            self.nfa.add_transition(prev_state, rule.symbol, new_state)
            return new_state

        self._active.append(rule_id)
        try:
            if isinstance(rule, Sequence):
                return self._add_sequence(rule.items, prev_state)

            if isinstance(rule, Choice):
                # Both alternatives leave from prev_state, which is where the
                # automaton becomes nondeterministic.
                end1 = self._add_sequence(rule.first, prev_state)
                end2 = self._add_sequence(rule.second, prev_state)
                join = self.nfa.new_state()
                self.nfa.add_transition(end1, EPSILON, join)
                self.nfa.add_transition(end2, EPSILON, join)
                return join
        finally:
            self._active.pop()

        raise TypeError(f"Unsupported rule: {type(rule).__name__}")

    def _add_sequence(self, rule_ids: Seq[int], prev_state: int) -> int:
        last_state = prev_state
        for rule_id in rule_ids:
            last_state = self._add_rule(rule_id, last_state)
        return last_state


def compile_rules(rules: Union[RuleTable, Iterable[Rule]], start_rule: int = 0, strict: bool = False) -> Nfa:
    return NfaBuilder(rules, strict=strict).build(start_rule)


def state_summary(nfa: Nfa) -> Dict[str, int]:
    eps = sum(1 for t in nfa.transitions if t.symbol == EPSILON)
    return {
        "states": nfa.state_count,
        "transitions": len(nfa.transitions),
        "epsilon": eps,
    }

