#! /usr/bin/env python3

# SPDX-License-Identifier: GPL-3.0-or-later

# Copyright (C) 2022 Paolo Bonzini
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

from . import Automaton
from ..util import _dataclass_args
import dataclasses
import typing


StateSet = frozenset['State']


@dataclasses.dataclass(eq=False, repr=False, **_dataclass_args)
class State:
    """A node of the automaton graph.  Equality and hashing only look
       at ``id``, so that sets of states can be compared by value no
       matter how the transitions are filled in."""
    id: int
    transitions: dict[str, set['State']] = dataclasses.field(default_factory=dict)
    epsilon: set['State'] = dataclasses.field(default_factory=set)
    wildcard: set['State'] = dataclasses.field(default_factory=set)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, State):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __repr__(self) -> str:
        return f'State({self.id})'

    def add_transition(self, symbol: str, dest: 'State') -> None:
        """Add a transition to ``dest`` that consumes ``symbol``."""
        self.transitions.setdefault(symbol, set()).add(dest)

    def add_epsilon_transition(self, dest: 'State') -> None:
        """Add a transition to ``dest`` that does not consume input."""
        self.epsilon.add(dest)

    def add_wildcard_transition(self, dest: 'State') -> None:
        """Add a transition to ``dest`` that consumes any one symbol."""
        self.wildcard.add(dest)

    def next_states(self, symbol: str) -> set['State']:
        """Return the states reached by consuming ``symbol``, not
           including the epsilon closure."""
        literal = self.transitions.get(symbol)
        if literal is None:
            return self.wildcard
        return literal | self.wildcard

    def neighbors(self) -> typing.Iterator['State']:
        yield from self.epsilon
        yield from self.wildcard
        for dests in self.transitions.values():
            yield from dests


def epsilon_closure(states: typing.Iterable[State]) -> StateSet:
    """Return the states that can be reached from ``states`` without
       consuming input, including ``states`` themselves."""
    curr: StateSet = frozenset()
    closure = set(states)
    while True:
        prev = curr
        curr = frozenset(closure)
        for state in curr:
            if state not in prev:
                closure.update(state.epsilon)
        if len(closure) == len(curr):
            return curr


@dataclasses.dataclass(eq=False)
class NFA(Automaton[StateSet]):
    """Nondeterministic finite automaton built out of :class:`State`
       objects.

       While simulating, the automaton remembers which set of states
       it reaches from a given set of states and symbol; this lazily
       builds the DFA that corresponds to the NFA.  An automaton that
       is known to be a DFA does not need the cache, so marking it as
       such disables caching.

       If ``inverted`` is True, the roles of accepting and non-accepting
       states are swapped."""
    start: State
    accepting: set[State]
    is_confirmed_dfa: bool = False
    cache_enabled: bool = True
    inverted: bool = False
    transition_cache: dict[StateSet, dict[str, StateSet]] = \
        dataclasses.field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        if self.is_confirmed_dfa:
            self.cache_enabled = False

    def enable_caching(self) -> None:
        self.cache_enabled = True

    def disable_caching(self) -> None:
        """Stop using the transition cache.  Existing entries are kept
           and will be used again by ``enable_caching``."""
        self.cache_enabled = False

    def clear_cache(self) -> None:
        self.transition_cache.clear()

    def is_dfa(self) -> bool:
        """Return True if the automaton is certain to be a DFA.  An
           automaton can be deterministic even if this returns False."""
        return self.is_confirmed_dfa

    def mark_dfa(self, is_dfa: bool = True) -> None:
        self.is_confirmed_dfa = is_dfa
        if is_dfa:
            self.disable_caching()
        else:
            self.enable_caching()

    def invert(self) -> None:
        """Swap accepting and non-accepting states."""
        self.inverted = not self.inverted

    def epsilon_closure(self, states: typing.Iterable[State]) -> StateSet:
        return epsilon_closure(states)

    def states(self) -> set[State]:
        """Return all the states reachable from the starting state."""
        found = {self.start}
        queue = [self.start]
        while queue:
            for dest in queue.pop().neighbors():
                if dest not in found:
                    found.add(dest)
                    queue.append(dest)
        return found

    def uninverted(self) -> 'NFA':
        """Return an automaton for the same language whose ``inverted``
           flag is False.  Only a DFA can be uninverted, because each
           visit of a DFA is in exactly one state."""
        if not self.inverted:
            return self
        if not self.is_confirmed_dfa:
            raise ValueError('only a DFA can be uninverted')
        accepting = {s for s in self.states() if s not in self.accepting}
        return NFA(self.start, accepting, is_confirmed_dfa=True)

    def initial(self) -> StateSet:
        """Return the initial state of a visit on the NFA."""
        return epsilon_closure((self.start,))

    def advance(self, source: StateSet, symbol: str) -> StateSet:
        """Return the states reached by the NFA when fed the given symbol
           from the current state of the visit."""
        if self.cache_enabled:
            known = self.transition_cache.get(source)
            if known is not None and symbol in known:
                return known[symbol]

        dest: set[State] = set()
        for state in source:
            dest.update(state.next_states(symbol))
        result = epsilon_closure(dest)

        if self.cache_enabled:
            self.transition_cache.setdefault(source, {})[symbol] = result
        return result

    def is_failure(self, states: StateSet) -> bool:
        return not states

    def is_final(self, states: StateSet) -> bool:
        accepting = self.accepting
        inverted = self.inverted
        for state in states:
            if inverted != (state in accepting):
                return True
        return False
