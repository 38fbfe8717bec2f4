from .grammar import (
    Choice,
    GrammarError,
    GrammarFile,
    GrammarParseError,
    Rule,
    RuleTable,
    Sequence,
    Terminal,
    Void,
    parse_grammar,
    parse_rule,
    read_input,
)
from .nfa import ACCEPT_STATE, EPSILON, START_STATE, CyclicGrammarError, Nfa, Transition, UndefinedRuleError, compile_rules
from .matcher import count_matches, is_match, simulate
from .config import ConfigError, Settings, load_settings

__all__ = [
    "Choice",
    "GrammarError",
    "GrammarFile",
    "GrammarParseError",
    "Rule",
    "RuleTable",
    "Sequence",
    "Terminal",
    "Void",
    "parse_grammar",
    "parse_rule",
    "read_input",
    "ACCEPT_STATE",
    "EPSILON",
    "START_STATE",
    "CyclicGrammarError",
    "Nfa",
    "Transition",
    "UndefinedRuleError",
    "compile_rules",
    "count_matches",
    "is_match",
    "simulate",
    "ConfigError",
    "Settings",
    "load_settings",
]
