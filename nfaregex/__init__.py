"""Regular expressions compiled into finite automata."""

# SPDX-License-Identifier: GPL-3.0-or-later

# Copyright (C) 2022 Paolo Bonzini
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

import typing

from .automata.dfa import DFAGenerator
from .automata.nfa import NFA, State
from .automata.regex import NFAGenerator
from .errors import (
    PatternError, UnbalancedParentheses, InvalidRepetitionRange,
    InvalidCharacterRange, EmptyOperandStack, UnsupportedSymbol
)
from .pattern import PatternProcessor, escape

__all__ = [
    'compile', 'complement', 'escape',
    'NFA', 'State', 'NFAGenerator', 'DFAGenerator', 'PatternProcessor',
    'PatternError', 'UnbalancedParentheses', 'InvalidRepetitionRange',
    'InvalidCharacterRange', 'EmptyOperandStack', 'UnsupportedSymbol',
]

GENERATOR = NFAGenerator()


def compile(pattern: str) -> NFA:
    """Compile ``pattern`` with the shared generator."""
    return GENERATOR.generate(pattern)


def complement(automaton: NFA, alphabet: typing.Optional[typing.Iterable[str]] = None) -> NFA:
    """Return an automaton that accepts the strings rejected by ``automaton``.
       Without an ``alphabet``, the shared generator's alphabet is used."""
    if alphabet is None:
        return GENERATOR.dfa_generator.complement(automaton)
    return DFAGenerator(alphabet).complement(automaton)
