r"""
Command line front end.

RUN
---
    grammar-nfa input.txt
    grammar-nfa input.txt --config grammar_nfa.toml --dump
    python -m grammar_nfa input.txt --matcher simulate --no-transitions

Reads the rules and messages from the input file, compiles the rules into an
NFA, writes the transitions dump and prints how many messages matched.
"""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from .config import ConfigError, Settings, load_settings
from .grammar import GrammarError, GrammarParseError, read_input
from .matcher import Matcher, count_matches, get_matcher
from .nfa import Nfa, compile_rules, state_summary


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="grammar-nfa",
        description="Match messages against a numbered rule grammar via an NFA",
    )
    p.add_argument("input", help="Path to the input file (rules, blank line, messages)")
    p.add_argument("--config", metavar="TOML", help="Path to a TOML settings file")
    p.add_argument("--start-rule", type=int, help="Rule id to match from (default: 0)")
    p.add_argument("--transitions", metavar="PATH", help="Where to write the transitions dump")
    p.add_argument("--no-transitions", action="store_true", help="Do not write the transitions dump")
    strict = p.add_mutually_exclusive_group()
    strict.add_argument("--strict", dest="strict", action="store_true",
                        help="Treat references to undefined rules as errors")
    strict.add_argument("--no-strict", dest="strict", action="store_false",
                        help="Skip undefined rules even if the config enables strict mode")
    p.add_argument("--matcher", choices=["backtrack", "simulate"], help="Matching algorithm")
    verbosity = p.add_mutually_exclusive_group()
    verbosity.add_argument("--verbose", dest="verbose", action="store_true", help="Print the result for every message")
    verbosity.add_argument("--quiet", dest="verbose", action="store_false",
                           help="Print only the summary even if the config enables verbose output")
    p.add_argument("--dump", action="store_true", help="Print the NFA transition table")
    # None means "not given on the command line", so the config value stands.
    p.set_defaults(strict=None, verbose=None)
    return p


def resolve_settings(args: argparse.Namespace) -> Settings:
    settings = load_settings(args.config)
    transitions = "" if args.no_transitions else args.transitions
    return settings.with_overrides(
        start_rule=args.start_rule,
        transitions_path=transitions,
        strict_references=args.strict,
        matcher=args.matcher,
        verbose=args.verbose,
    )


def run(args: argparse.Namespace) -> int:
    settings = resolve_settings(args)
    data = read_input(args.input)

    nfa = compile_rules(data.rules, start_rule=settings.start_rule, strict=settings.strict_references)
    if settings.transitions_path:
        nfa.write_transitions(settings.transitions_path)

    if args.dump:
        print(nfa.dump_table())
        print()

    if settings.verbose:
        summary = state_summary(nfa)
        print(f"NFA states:      {summary['states']}")
        print(f"Transitions:     {summary['transitions']} ({summary['epsilon']} epsilon)")
        missing = data.rules.undefined_references()
        if missing:
            print(f"Undefined rules: {', '.join(str(r) for r in missing)}")

    matcher = get_matcher(settings.matcher)
    if settings.verbose:
        matcher = _reporting(matcher)
    match_count = count_matches(nfa, data.messages, matcher)

    print(f"Matched {match_count} of {len(data.messages)}")
    return 0


def _reporting(matcher: Matcher) -> Matcher:
    def report(nfa: Nfa, line: str) -> bool:
        ok = matcher(nfa, line)
        print(f"{line} -> {ok}")
        return ok
    return report


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        return run(args)
    except GrammarParseError as ex:
        print(f"[!] PARSE ERROR: {ex}", file=sys.stderr)
        return 1
    except GrammarError as ex:
        print(f"[!] GRAMMAR ERROR: {ex}", file=sys.stderr)
        return 2
    except ConfigError as ex:
        print(f"[!] CONFIG ERROR: {ex}", file=sys.stderr)
        return 3
    except OSError as ex:
        print(f"[!] I/O ERROR: {ex}", file=sys.stderr)
        return 4


if __name__ == "__main__":
    sys.exit(main())
