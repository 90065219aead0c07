"""Line-oriented search of text files."""

# SPDX-License-Identifier: GPL-3.0-or-later

# Copyright (C) 2022 Paolo Bonzini
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

import typing

from .automata import Automaton
from .automata.regex import NFAGenerator
from .pattern import escape

Match = typing.Tuple[int, str]


def wrap_phrase(phrase: str) -> str:
    """Return a pattern that matches any line containing ``phrase``."""
    return '.*(' + phrase + ').*'


def search_lines(automaton: Automaton[typing.Any], lines: typing.Iterable[str]) -> typing.Iterator[Match]:
    """Yield the line number and text of the lines accepted by ``automaton``.
       Line numbers start at 1."""
    for n, line in enumerate(lines, 1):
        line = line.rstrip('\r\n')
        if automaton.accepts(line):
            yield n, line


def search_file(generator: NFAGenerator, filename: str, phrase: str,
                literal: bool = False) -> typing.Iterator[Match]:
    if literal:
        phrase = escape(phrase, generator.alphabet)
    automaton = generator.generate(wrap_phrase(phrase))
    with open(filename, 'r') as f:
        yield from search_lines(automaton, f)
