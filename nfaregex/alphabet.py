#! /usr/bin/env python3

# SPDX-License-Identifier: GPL-3.0-or-later

# Copyright (C) 2022 Paolo Bonzini
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

import string
import typing

EPSILON = '#'
WILDCARD = '.'
ESCAPE = '/'

CONCAT = '&'
UNION = '|'
STAR = '*'
NOT = '!'
OPEN = '('
CLOSE = ')'

#: Characters that can appear unescaped as literals in a pattern.
DEFAULT_ALPHABET: frozenset[str] = frozenset(string.ascii_letters + string.digits + ' ')

#: Operators understood by the NFA generator.
OPERATORS: frozenset[str] = frozenset((CONCAT, UNION, STAR, NOT, OPEN, CLOSE))

#: Operators that are desugared by the pattern processor.
SHORTHANDS: frozenset[str] = frozenset('?+[]-,')

#: Shorthands that start a replacement; the others only appear inside one.
SHORTHAND_TRIGGERS: frozenset[str] = frozenset('?+[-')

SPECIAL: frozenset[str] = frozenset((EPSILON, WILDCARD, ESCAPE))


def operating_alphabet(alphabet: typing.Iterable[str] = DEFAULT_ALPHABET) -> frozenset[str]:
    """Return every symbol that the engine can see: ``alphabet`` plus all
       the operator, shorthand and special symbols, which can appear in
       the input as escaped literals."""
    return frozenset(alphabet) | OPERATORS | SHORTHANDS | SPECIAL
