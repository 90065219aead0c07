#! /usr/bin/env python3

# SPDX-License-Identifier: GPL-3.0-or-later

# Copyright (C) 2022 Paolo Bonzini
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

from abc import ABCMeta, abstractmethod
from .dfa import DFAGenerator
from .nfa import NFA, State
from ..alphabet import DEFAULT_ALPHABET, EPSILON, ESCAPE, WILDCARD
from ..errors import EmptyOperandStack, PatternError, UnbalancedParentheses, UnsupportedSymbol
from ..pattern import PatternProcessor
import dataclasses
import enum
import itertools
import logging
import typing

logger = logging.getLogger(__name__)


class Operator(enum.Enum):
    CONCAT = '&'
    UNION = '|'
    STAR = '*'
    NOT = '!'
    OPEN = '('
    CLOSE = ')'

    def has_precedence(self, other: 'Operator') -> bool:
        """Return True if ``self``, found on top of the operator stack,
           must be evaluated before ``other`` is pushed."""
        if self is Operator.STAR and other is not Operator.STAR:
            return True
        if self is Operator.CONCAT and other is Operator.UNION:
            return True
        if other is Operator.OPEN:
            return False
        if self is Operator.CLOSE:
            return True
        if self is Operator.NOT:
            return True
        return False

    @property
    def arity(self) -> int:
        if self is Operator.CONCAT or self is Operator.UNION:
            return 2
        return 1


@dataclasses.dataclass(frozen=True)
class Atom(metaclass=ABCMeta):
    @abstractmethod
    def link(self, source: State, dest: State) -> None:
        """Add to ``source`` the transition that matches ``self``."""
        pass


@dataclasses.dataclass(frozen=True)
class Empty(Atom):
    def link(self, source: State, dest: State) -> None:
        source.add_epsilon_transition(dest)


@dataclasses.dataclass(frozen=True)
class One(Atom):
    symbol: str

    def link(self, source: State, dest: State) -> None:
        source.add_transition(self.symbol, dest)


@dataclasses.dataclass(frozen=True)
class Any(Atom):
    def link(self, source: State, dest: State) -> None:
        source.add_wildcard_transition(dest)


Token = typing.Union[Atom, Operator]


def tokenize(pattern: str, alphabet: typing.Container[str] = DEFAULT_ALPHABET) \
        -> typing.Iterator[typing.Tuple[int, Token]]:
    """Yield the position and token for each element of a canonical
       pattern."""
    i = 0
    while i < len(pattern):
        c = pattern[i]
        if c == ESCAPE:
            if i + 1 == len(pattern):
                raise UnsupportedSymbol('dangling escape marker', pattern, i)
            yield i, One(pattern[i + 1])
            i += 2
            continue

        if c == EPSILON:
            yield i, Empty()
        elif c == WILDCARD:
            yield i, Any()
        elif c in alphabet:
            yield i, One(c)
        else:
            try:
                yield i, Operator(c)
            except ValueError:
                raise UnsupportedSymbol(f"unsupported symbol '{c}'", pattern, i) from None
        i += 1


class NFAGenerator:
    """Compiles patterns into automata.  Each pattern goes through the
       :class:`PatternProcessor` first, and the canonical pattern is then
       evaluated with an operator stack and an operand stack.  Operands
       are automata built with Thompson's construction; negation is
       delegated to a :class:`DFAGenerator`.

       Compiled automata are cached by canonical pattern."""
    alphabet: frozenset[str]
    cache: dict[str, NFA]
    cache_enabled: bool
    transition_caching: bool

    def __init__(self, alphabet: typing.Optional[typing.Iterable[str]] = None,
                 cache_enabled: bool = True, transition_caching: bool = True) -> None:
        self.alphabet = frozenset(DEFAULT_ALPHABET if alphabet is None else alphabet)
        self.cache = dict()
        self.cache_enabled = cache_enabled
        self.transition_caching = transition_caching
        self.pattern_processor = PatternProcessor(self.alphabet)
        self.dfa_generator = DFAGenerator(self.alphabet, cache_enabled)
        self._ids = itertools.count()

    def generate(self, pattern: str) -> NFA:
        """Return an automaton that accepts the language of ``pattern``."""
        canonical = self.pattern_processor.elongate(pattern)
        if self.cache_enabled and canonical in self.cache:
            logger.debug('automaton cache hit for %r', canonical)
            return self.cache[canonical]

        result = self.evaluate_pattern(canonical)
        if not self.transition_caching:
            result.disable_caching()
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug('compiled %r into %d states', canonical, len(result.states()))

        if self.cache_enabled:
            self.cache[canonical] = result
        return result

    def evaluate_pattern(self, pattern: str) -> NFA:
        """Build the automaton for a canonical pattern."""
        self._ids = itertools.count()
        operators: list[typing.Tuple[int, Operator]] = []
        operands: list[NFA] = []

        for pos, token in tokenize(pattern, self.alphabet):
            if isinstance(token, Atom):
                operands.append(self.generate_from_atom(token))
            elif token is Operator.CLOSE:
                self._close_group(operators, operands, pattern, pos)
            else:
                while operators and operators[-1][1].has_precedence(token):
                    self.evaluate(operators, operands, pattern)
                operators.append((pos, token))

        while operators:
            pos, op = operators[-1]
            if op is Operator.OPEN:
                raise UnbalancedParentheses('unclosed parenthesis', pattern, pos)
            self.evaluate(operators, operands, pattern)

        if not operands:
            raise EmptyOperandStack('empty expression', pattern)
        if len(operands) > 1:
            raise PatternError('missing operator between operands', pattern)
        return operands[0]

    def _close_group(self, operators: list[typing.Tuple[int, Operator]],
                     operands: list[NFA], pattern: str, pos: int) -> None:
        while operators and operators[-1][1] is not Operator.OPEN:
            self.evaluate(operators, operands, pattern)
        if not operators:
            raise UnbalancedParentheses('unmatched closing parenthesis', pattern, pos)
        operators.pop()

    def evaluate(self, operators: list[typing.Tuple[int, Operator]],
                 operands: list[NFA], pattern: str) -> None:
        """Pop the topmost operator and apply it to the operand stack."""
        pos, op = operators.pop()
        if len(operands) < op.arity:
            raise EmptyOperandStack(f"missing operand for '{op.value}'", pattern, pos)

        if op is Operator.CONCAT:
            second = operands.pop()
            first = operands.pop()
            operands.append(self.concatenate(first, second))
        elif op is Operator.UNION:
            second = operands.pop()
            first = operands.pop()
            operands.append(self.union(first, second))
        elif op is Operator.STAR:
            operands.append(self.star(operands.pop()))
        elif op is Operator.NOT:
            operands.append(self.negate(operands.pop()))
        else:
            raise UnbalancedParentheses('unmatched parenthesis', pattern, pos)

    def _new_state(self) -> State:
        return State(next(self._ids))

    def concatenate(self, first: NFA, second: NFA) -> NFA:
        first = first.uninverted()
        second = second.uninverted()
        for state in first.accepting:
            state.add_epsilon_transition(second.start)
        return NFA(first.start, second.accepting)

    def union(self, first: NFA, second: NFA) -> NFA:
        first = first.uninverted()
        second = second.uninverted()
        start = self._new_state()
        final = self._new_state()
        start.add_epsilon_transition(first.start)
        start.add_epsilon_transition(second.start)
        for state in itertools.chain(first.accepting, second.accepting):
            state.add_epsilon_transition(final)
        return NFA(start, {final})

    def star(self, operand: NFA) -> NFA:
        operand = operand.uninverted()
        start = self._new_state()
        final = self._new_state()
        start.add_epsilon_transition(operand.start)
        start.add_epsilon_transition(final)
        for state in operand.accepting:
            state.add_epsilon_transition(operand.start)
            state.add_epsilon_transition(final)
        return NFA(start, {final})

    def negate(self, operand: NFA) -> NFA:
        return self.dfa_generator.complement(operand)

    def generate_from_atom(self, atom: Atom) -> NFA:
        start = self._new_state()
        final = self._new_state()
        atom.link(start, final)
        return NFA(start, {final})

    def generate_from_symbol(self, symbol: str) -> NFA:
        return self.generate_from_atom(One(symbol))

    def generate_from_epsilon(self) -> NFA:
        return self.generate_from_atom(Empty())

    def generate_from_wildcard(self) -> NFA:
        return self.generate_from_atom(Any())

    def generate_from_empty_string(self) -> NFA:
        """Return a one-state automaton that only accepts the empty string."""
        state = self._new_state()
        return NFA(state, {state})
