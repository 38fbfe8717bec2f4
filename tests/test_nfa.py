from __future__ import annotations

import pytest

from grammar_nfa.grammar import RuleTable, Sequence, Terminal, parse_grammar
from grammar_nfa.matcher import is_match
from grammar_nfa.nfa import (
    ACCEPT_STATE,
    EPSILON,
    START_STATE,
    CyclicGrammarError,
    Transition,
    UndefinedRuleError,
    compile_rules,
    state_summary,
)


def test_sequence_transitions():
    nfa = compile_rules(parse_grammar(["0: 1 2", '1: "a"', '2: "b"']))
    assert nfa.state_count == 4
    assert nfa.transitions == [
        Transition(0, "a", 2),
        Transition(2, "b", 3),
        Transition(3, EPSILON, ACCEPT_STATE),
    ]


def test_choice_transitions_are_grouped_by_source():
    nfa = compile_rules(parse_grammar(["0: 1 | 2", '1: "a"', '2: "b"']))
    assert nfa.state_count == 5
    assert list(nfa.transitions_from(START_STATE)) == [
        Transition(0, "a", 2),
        Transition(0, "b", 3),
    ]
    assert list(nfa.transitions_from(2)) == [Transition(2, EPSILON, 4)]
    assert list(nfa.transitions_from(4)) == [Transition(4, EPSILON, ACCEPT_STATE)]
    assert list(nfa.transitions_from(ACCEPT_STATE)) == []


def test_every_state_has_a_range():
    nfa = compile_rules(parse_grammar(["0: 1 | 2", '1: "a"', '2: "b"']))
    assert len(nfa.ranges) == nfa.state_count
    for state in range(nfa.state_count):
        assert all(t.source == state for t in nfa.transitions_from(state))


def test_alphabet():
    nfa = compile_rules(parse_grammar(["0: 1 | 2", '1: "a"', '2: "b"']))
    assert nfa.alphabet() == {"a", "b"}


def test_shared_rule_gets_fresh_states():
    nfa = compile_rules(parse_grammar(["0: 1 1", '1: "a"']))
    assert nfa.transitions[:2] == [Transition(0, "a", 2), Transition(2, "a", 3)]
    assert is_match(nfa, "aa")
    assert not is_match(nfa, "a")


def test_compile_accepts_plain_rule_list():
    nfa = compile_rules([Sequence((1, 2)), Terminal("a"), Terminal("b")])
    assert is_match(nfa, "ab")
    assert not is_match(nfa, "ba")


def test_compiling_twice_is_equivalent(sample_text):
    rules = parse_grammar(sample_text.split("\n\n")[0].splitlines())
    first = compile_rules(rules)
    second = compile_rules(rules)
    for text in ["ababbb", "bababa", "abbbab", "aaabbb", "aaaabbb", ""]:
        assert is_match(first, text) == is_match(second, text)


def test_start_rule(sample_text):
    rules = parse_grammar(sample_text.split("\n\n")[0].splitlines())
    nfa = compile_rules(rules, start_rule=3)
    assert is_match(nfa, "ab")
    assert is_match(nfa, "ba")
    assert not is_match(nfa, "aa")


def test_undefined_rule_is_skipped():
    rules = parse_grammar(["0: 1 5 2", '1: "a"', '2: "b"'])
    nfa = compile_rules(rules)
    assert is_match(nfa, "ab")


def test_reference_past_end_is_skipped():
    rules = parse_grammar(["0: 1 9", '1: "a"'])
    assert is_match(compile_rules(rules), "a")


def test_empty_table_accepts_only_empty_string():
    nfa = compile_rules(RuleTable())
    assert nfa.transitions == [Transition(START_STATE, EPSILON, ACCEPT_STATE)]
    assert is_match(nfa, "")
    assert not is_match(nfa, "a")


def test_strict_rejects_undefined_rule():
    rules = parse_grammar(["0: 1 5 2", '1: "a"', '2: "b"'])
    with pytest.raises(UndefinedRuleError) as exc_info:
        compile_rules(rules, strict=True)
    assert exc_info.value.rule_id == 5
    assert exc_info.value.path == (0, 5)


def test_strict_ignores_unreachable_undefined_rule():
    rules = parse_grammar(["0: 1", '1: "a"', "2: 9"])
    assert is_match(compile_rules(rules, strict=True), "a")


def test_cycle_is_reported():
    rules = parse_grammar(["0: 1", "1: 2 | 2 1", '2: "a"'])
    with pytest.raises(CyclicGrammarError) as exc_info:
        compile_rules(rules)
    assert exc_info.value.path == (1, 1)


def test_write_transitions(tmp_path):
    nfa = compile_rules(parse_grammar(["0: 1 2", '1: "a"', '2: "b"']))
    path = tmp_path / "transitions.txt"
    nfa.write_transitions(str(path))
    assert path.read_text(encoding="utf-8") == "0, a, 2\n2, b, 3\n3, , 1\n"


def test_dump_table():
    nfa = compile_rules(parse_grammar(["0: 1 | 2", '1: "a"', '2: "b"']))
    table = nfa.dump_table()
    lines = table.splitlines()
    assert lines[0].split(" | ") == ["State", "Markers", "Symbol", "Dest"]
    assert "START" in lines[2]
    assert "ACCEPT" in table
    assert "ε" in table


def test_state_summary():
    nfa = compile_rules(parse_grammar(["0: 1 | 2", '1: "a"', '2: "b"']))
    assert state_summary(nfa) == {"states": 5, "transitions": 5, "epsilon": 3}


def test_transition_range_indexes_the_sorted_list():
    nfa = compile_rules(parse_grammar(["0: 1 | 2", '1: "a"', '2: "b"']))
    assert nfa.transition_range(START_STATE) == (0, 2)
    assert nfa.transition_range(ACCEPT_STATE) == (0, 0)
    for state in range(nfa.state_count):
        begin, end = nfa.transition_range(state)
        found = list(nfa.transitions_from(state))
        assert len(found) == end - begin
        assert all(t is nfa.transitions[begin + i] for i, t in enumerate(found))
