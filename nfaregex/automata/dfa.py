#! /usr/bin/env python3

# SPDX-License-Identifier: GPL-3.0-or-later

# Copyright (C) 2022 Paolo Bonzini
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

from .nfa import NFA, State, StateSet, epsilon_closure
from ..alphabet import DEFAULT_ALPHABET, operating_alphabet
import dataclasses
import itertools
import logging
import typing
import weakref

logger = logging.getLogger(__name__)

# States built by the subset construction have negative ids, so that they
# never collide with the ones minted by the NFA generator.
_subset_ids = itertools.count(-1, -1)


class DFAGenerator:
    """Builds complement automata.  The result of complementing an
       automaton is cached for as long as the automaton is alive."""
    alphabet: frozenset[str]
    cache: typing.MutableMapping[NFA, NFA]
    cache_enabled: bool

    def __init__(self, alphabet: typing.Optional[typing.Iterable[str]] = None,
                 cache_enabled: bool = True) -> None:
        self.alphabet = operating_alphabet(DEFAULT_ALPHABET if alphabet is None else alphabet)
        self.cache = weakref.WeakKeyDictionary()
        self.cache_enabled = cache_enabled

    def enable_caching(self) -> None:
        self.cache_enabled = True

    def disable_caching(self) -> None:
        self.cache_enabled = False

    def complement(self, nfa: NFA) -> NFA:
        """Return an automaton that accepts exactly the strings over
           ``self.alphabet`` that ``nfa`` rejects."""
        if self.cache_enabled:
            result = self.cache.get(nfa)
            if result is not None:
                logger.debug('complement cache hit for %r', nfa.start)
                return result

        if nfa.is_confirmed_dfa:
            # every visit of a DFA ends in exactly one state, so it is enough
            # to swap the meaning of the accepting set
            result = dataclasses.replace(nfa, accepting=set(nfa.accepting),
                                         inverted=not nfa.inverted,
                                         transition_cache={})
        else:
            result = self._subset_construction(nfa)

        if self.cache_enabled:
            self.cache[nfa] = result
        return result

    def _subset_construction(self, nfa: NFA) -> NFA:
        initial = nfa.initial()
        start = State(next(_subset_ids))
        accepting: set[State] = set()

        # the two maps are the bijection between DFA states and the
        # sets of NFA states that they stand for
        statemap: dict[StateSet, State] = {initial: start}
        subsets: dict[State, StateSet] = {start: initial}
        if not nfa.is_final(initial):
            accepting.add(start)

        # DFA states whose transitions have not been filled yet
        queue = [start]
        symbols = sorted(self.alphabet)
        while queue:
            source = queue.pop()
            sources = subsets[source]
            for sym in symbols:
                reached: set[State] = set()
                for state in sources:
                    reached.update(state.next_states(sym))
                dest = epsilon_closure(reached)

                s = statemap.get(dest)
                if s is None:
                    # create new DFA state
                    s = State(next(_subset_ids))
                    statemap[dest] = s
                    subsets[s] = dest
                    if not nfa.is_final(dest):
                        accepting.add(s)
                    queue.append(s)

                source.add_transition(sym, s)

        logger.debug('subset construction produced %d states over %d symbols',
                     len(statemap), len(symbols))
        return NFA(start, accepting, is_confirmed_dfa=True)
