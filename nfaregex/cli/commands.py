"""Implementation of the commands for the nfaregex tool."""

# SPDX-License-Identifier: GPL-3.0-or-later

# Copyright (C) 2022 Paolo Bonzini
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

import argparse
from ..automata.nfa import NFA
from ..automata.regex import NFAGenerator
from ..errors import PatternError
from ..search import search_file
from ..util import Stopwatch
import glob
import os
import sys
import typing


GENERATOR = NFAGenerator()


class Session:
    """The automaton that "test" runs against."""
    pattern: typing.Optional[str] = None
    automaton: typing.Optional[NFA] = None


SESSION = Session()


class Completer:
    def try_to_expand(self, text: str) -> str:
        return text

    def get_completions(self, text: str) -> typing.Iterable[str]:
        return []


class FileCompleter(Completer):
    def __init__(self, glob_patterns: list[str] = ['*']) -> None:
        self.glob_patterns = glob_patterns

    def try_to_expand(self, text: str) -> str:
        expanded = text
        if text.startswith('~'):
            expanded = os.path.expanduser(expanded)
        if not expanded.endswith("/") and os.path.isdir(expanded):
            expanded += "/"
        return expanded

    def get_completions(self, text: str) -> typing.Iterable[str]:
        result = glob.glob(text + "*/")
        path = os.path.dirname(text)
        if path:
            path += "/"
        for i in self.glob_patterns:
            expanded = glob.glob(path + i)
            result += (x for x in expanded if not os.path.isdir(x))
        return result


class StringsCompleter(Completer):
    def __init__(self, strings: list[str]) -> None:
        self.strings = strings

    def get_completions(self, text: str) -> typing.Iterable[str]:
        return self.strings


class RegexCommand:

    NAME: typing.Optional[tuple[str, ...]] = None

    @staticmethod
    def eat(*args: list[typing.Any]) -> None:
        pass

    @staticmethod
    def print_stderr(*args: list[typing.Any]) -> None:
        print(*args, file=sys.stderr)

    @staticmethod
    def print_error(e: PatternError) -> None:
        print(f"{e.kind}: {e}", file=sys.stderr)

    @classmethod
    def args(self, parser: argparse.ArgumentParser) -> None:
        """Setup argument parser"""
        pass

    @classmethod
    def get_completer(cls, nwords: int) -> Completer:
        return Completer()

    def run(self, args: argparse.Namespace) -> None:
        pass

    @staticmethod
    def compile(pattern: str, verbose: typing.Callable[..., None]) -> typing.Optional[NFA]:
        try:
            with Stopwatch() as sw:
                automaton = GENERATOR.generate(pattern)
        except PatternError as e:
            RegexCommand.print_error(e)
            return None
        verbose(f"Compiled {GENERATOR.pattern_processor.elongate(pattern)} in {sw.format()}")
        return automaton

    @staticmethod
    def test(automaton: NFA, strings: list[str]) -> None:
        for s in strings or [""]:
            with Stopwatch() as sw:
                accepted = automaton.accepts(s)
            result = "accepted" if accepted else "rejected"
            print(f"{s!r}: {result} ({sw.format()})")


class CompileCommand(RegexCommand):
    """Compiles a pattern; "test" runs against the last compiled pattern."""
    NAME = ("compile",)

    @classmethod
    def args(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("--verbose", action="store_const",
                            const=RegexCommand.print_stderr, default=RegexCommand.eat,
                            help="Report the canonical pattern and compile time")
        parser.add_argument("pattern", metavar="PATTERN",
                            help="Pattern to be compiled")

    def run(self, args: argparse.Namespace) -> None:
        automaton = self.compile(args.pattern, args.verbose)
        if automaton is not None:
            SESSION.pattern = args.pattern
            SESSION.automaton = automaton


class TestCommand(RegexCommand):
    """Checks whether strings match the last compiled pattern.
       Without arguments, checks the empty string."""
    NAME = ("test", "t")

    @classmethod
    def args(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("strings", metavar="STRING", nargs="*",
                            help="Strings to be tested")

    def run(self, args: argparse.Namespace) -> None:
        if SESSION.automaton is None:
            raise argparse.ArgumentError(None, "no pattern compiled yet")
        self.test(SESSION.automaton, args.strings)


class MatchCommand(RegexCommand):
    """Compiles a pattern and checks whether strings match it."""
    NAME = ("match",)

    @classmethod
    def args(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("--verbose", action="store_const",
                            const=RegexCommand.print_stderr, default=RegexCommand.eat,
                            help="Report the canonical pattern and compile time")
        parser.add_argument("pattern", metavar="PATTERN",
                            help="Pattern to be compiled")
        parser.add_argument("strings", metavar="STRING", nargs="*",
                            help="Strings to be tested")

    def run(self, args: argparse.Namespace) -> None:
        automaton = self.compile(args.pattern, args.verbose)
        if automaton is not None:
            self.test(automaton, args.strings)


class ElongateCommand(RegexCommand):
    """Prints the canonical form of a pattern."""
    NAME = ("elongate",)

    @classmethod
    def args(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("pattern", metavar="PATTERN",
                            help="Pattern to be processed")

    def run(self, args: argparse.Namespace) -> None:
        try:
            print(GENERATOR.pattern_processor.elongate(args.pattern))
        except PatternError as e:
            self.print_error(e)


class SearchCommand(RegexCommand):
    """Prints the lines of the files that contain a phrase."""
    NAME = ("search", "grep")

    @classmethod
    def args(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("--literal", action="store_true",
                            help="Escape the characters outside the alphabet")
        parser.add_argument("phrase", metavar="PHRASE",
                            help="Pattern to look for")
        parser.add_argument("files", metavar="FILE", nargs="+",
                            help="Files to be searched")

    @classmethod
    def get_completer(cls, nwords: int) -> Completer:
        return FileCompleter() if nwords > 1 else Completer()

    def run(self, args: argparse.Namespace) -> None:
        for fn in args.files:
            try:
                for n, line in search_file(GENERATOR, os.path.expanduser(fn), args.phrase, args.literal):
                    print(f"{fn}:{n}: {line}")
            except PatternError as e:
                self.print_error(e)
                return


class CacheCommand(RegexCommand):
    """Enables, disables or clears the caches."""
    NAME = ("cache",)

    @classmethod
    def args(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("action", metavar="ACTION", nargs="?",
                            choices=["on", "off", "clear"],
                            help="on, off or clear; print the cache status if absent")

    @classmethod
    def get_completer(cls, nwords: int) -> Completer:
        return StringsCompleter(["on", "off", "clear"]) if nwords == 1 else Completer()

    def run(self, args: argparse.Namespace) -> None:
        automaton = SESSION.automaton
        if args.action == "on":
            GENERATOR.cache_enabled = True
            GENERATOR.transition_caching = True
            GENERATOR.dfa_generator.enable_caching()
            if automaton is not None and not automaton.is_dfa():
                automaton.enable_caching()
        elif args.action == "off":
            GENERATOR.cache_enabled = False
            GENERATOR.transition_caching = False
            GENERATOR.dfa_generator.disable_caching()
            if automaton is not None:
                automaton.disable_caching()
        elif args.action == "clear":
            GENERATOR.cache.clear()
            GENERATOR.pattern_processor.cache.clear()
            GENERATOR.dfa_generator.cache.clear()
            if automaton is not None:
                automaton.clear_cache()
        else:
            print(f"patterns: {len(GENERATOR.cache)} cached, "
                  f"{'enabled' if GENERATOR.cache_enabled else 'disabled'}")
            if automaton is not None:
                print(f"transitions: {len(automaton.transition_cache)} cached, "
                      f"{'enabled' if automaton.cache_enabled else 'disabled'}"
                      f"{' (DFA)' if automaton.is_dfa() else ''}")
