"""Implementation of the REPL for the nfaregex tool."""

# SPDX-License-Identifier: GPL-3.0-or-later

# Copyright (C) 2022 Paolo Bonzini
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

import argparse
import logging
import os
import readline
import shlex
import sys
import typing

from .commands import RegexCommand, CacheCommand, Completer, FileCompleter


class NoUsageFormatter(argparse.HelpFormatter):
    def add_usage(self, usage: typing.Optional[str], actions: typing.Iterable[argparse.Action],
                  groups: typing.Iterable[argparse._ArgumentGroup], prefix: typing.Optional[str] = None) -> None:
        pass


class CommandParser(argparse.ArgumentParser):
    """Parser for a line of the REPL.  Errors are reported as exceptions
       instead of terminating the program."""
    def __init__(self, *args: list[typing.Any], **kwargs: dict[typing.Any, typing.Any]) -> None:
        super().__init__(exit_on_error=False, add_help=False, formatter_class=NoUsageFormatter)

    def format_usage(self) -> str:
        return ""

    def error(self, message: str) -> typing.NoReturn:
        raise argparse.ArgumentError(None, f"{self.prog}: error: {message}")


PARSER = CommandParser()
COMMANDS: dict[str, typing.Type[RegexCommand]] = {}


def execute(line: str) -> bool:
    """Run one line of input.  Return False if the line could not
       be parsed or the command failed."""
    line = line.strip()
    if not line or line.startswith('#'):
        return True

    try:
        argv = shlex.split(line)
        args = PARSER.parse_args(argv)
    except ValueError as e:
        # shlex reports unbalanced quotes this way
        print(f"syntax error: {e}", file=sys.stderr)
        return False
    except argparse.ArgumentError as e:
        print(e, file=sys.stderr)
        return False

    try:
        args.cmdclass().run(args)
    except argparse.ArgumentError as e:
        print(e, file=sys.stderr)
        return False
    except OSError as e:
        print(e)
        return False
    return True


class QuitCommand(RegexCommand):
    """Exits nfaregex."""
    NAME = ("q", "quit")

    @classmethod
    def run(self, args: argparse.Namespace) -> None:
        sys.exit(0)


class SourceCommand(RegexCommand):
    """Processes the commands in a file."""
    NAME = ("source", ".")

    @classmethod
    def args(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("file", metavar="FILE", nargs="+")

    @classmethod
    def get_completer(cls, nwords: int) -> Completer:
        return FileCompleter()

    def run(self, args: argparse.Namespace) -> None:
        for fn in args.file:
            with open(os.path.expanduser(fn), "r") as f:
                self.do_source(f, exit_first=True)

    @staticmethod
    def do_source(inf: typing.Iterator[str], exit_first: bool) -> None:
        """Execute each line of ``inf``.  If ``exit_first`` is True,
           stop at the first line that fails."""
        while True:
            try:
                line = next(inf)
            except (KeyboardInterrupt, StopIteration):
                break
            if not execute(line) and exit_first:
                break


class HelpCommand(RegexCommand):
    """Prints the list of commands, or the syntax of a command."""
    NAME = ("help",)
    PARSERS: dict[str, argparse.ArgumentParser] = {}

    @classmethod
    def args(self, parser: argparse.ArgumentParser) -> None:
        parser.add_argument("command", metavar="COMMAND", nargs="?",
                            help="Show help for given command.")

    @classmethod
    def get_completer(cls, nwords: int) -> Completer:
        return CommandCompleter() if nwords == 1 else Completer()

    def run(self, args: argparse.Namespace) -> None:
        if args.command and args.command in self.PARSERS:
            self.PARSERS[args.command].print_help()
        else:
            PARSER.print_help()


class CommandCompleter(Completer):
    def get_completions(self, text: str) -> typing.Iterable[str]:
        return COMMANDS.keys()


class ReadlineInput:
    """Iterator over the lines typed at an interactive prompt, with
       tab completion of command names, options and arguments."""
    def __init__(self, prompt: str) -> None:
        self.prompt = prompt
        self.matches: list[str] = []
        readline.parse_and_bind("tab: complete")
        readline.set_completer(self.complete)
        readline.set_completer_delims(' \t')

    def __iter__(self) -> typing.Iterator[str]:
        return self

    def __next__(self) -> str:
        try:
            return input(self.prompt)
        except EOFError:
            print()
            raise StopIteration

    def complete(self, text: str, state: int) -> typing.Optional[str]:
        if state == 0:
            self.matches = self.candidates(readline.get_line_buffer(), text)
        return self.matches[state] if state < len(self.matches) else None

    def candidates(self, line: str, text: str) -> list[str]:
        words = line.split()
        if text:
            # the last word is the one being completed
            words = words[:-1]

        if not words:
            completer: Completer = CommandCompleter()
        elif words[0] not in COMMANDS:
            return []
        elif text.startswith('-'):
            options = HelpCommand.PARSERS[words[0]]._option_string_actions
            return sorted(o + " " for o in options if o.startswith(text))
        else:
            positional = [w for w in words[1:] if not w.startswith('--')]
            completer = COMMANDS[words[0]].get_completer(len(positional) + 1)

        expanded = completer.try_to_expand(text)
        found = sorted(x for x in completer.get_completions(expanded) if x.startswith(expanded))
        if len(found) == 1 and not found[0].endswith("/"):
            return [found[0] + " "]
        if len(found) > 1 and expanded != text:
            return [expanded]
        return found


def main() -> None:
    parser = argparse.ArgumentParser(prog='nfaregex',
                                     description='Regular expressions compiled into finite automata')
    parser.add_argument('--debug', action='store_true',
                        help='Log the internals of pattern compilation to stderr')
    parser.add_argument('--no-cache', action='store_true',
                        help='Start with all caches disabled')
    parser.add_argument('scripts', metavar='FILE', nargs='*',
                        help='Process the commands in FILE before reading standard input')
    args = parser.parse_args()

    if args.debug:
        logging.basicConfig(level=logging.DEBUG,
                            format='%(asctime)s %(name)s %(levelname)s: %(message)s')
    if args.no_cache:
        CacheCommand().run(argparse.Namespace(action='off'))

    for fn in args.scripts:
        try:
            with open(fn, "r") as f:
                SourceCommand.do_source(f, exit_first=True)
        except OSError as e:
            print(f"Could not load {fn}:", e, file=sys.stderr)
            sys.exit(1)

    inf: typing.Iterator[str]
    if os.isatty(0):
        inf = ReadlineInput("(nfaregex) ")
    else:
        inf = sys.stdin

    SourceCommand.do_source(inf, exit_first=False)


def init_subparsers() -> None:
    subparsers = PARSER.add_subparsers(title="subcommands", help=None, parser_class=CommandParser)
    for cls in RegexCommand.__subclasses__():
        for n in cls.NAME:  # type: ignore
            subp = subparsers.add_parser(n, help=cls.__doc__)
            cls.args(subp)
            subp.set_defaults(cmdclass=cls)
            HelpCommand.PARSERS[n] = subp
            COMMANDS[n] = cls


init_subparsers()
