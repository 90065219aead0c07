"""Generic interface of automata that read strings one symbol at a time."""

# SPDX-License-Identifier: GPL-3.0-or-later

# Copyright (C) 2022 Paolo Bonzini
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

import abc
import typing

T = typing.TypeVar('T')


class Visitor(typing.Generic[T]):
    """Incremental visit of an automaton.  Once the visit reaches a
       failure state, further symbols are ignored."""
    def __init__(self, automaton: 'Automaton[T]') -> None:
        self.automaton = automaton
        self.state = automaton.initial()

    def visit(self, symbol: str) -> None:
        if not self.failed():
            self.state = self.automaton.advance(self.state, symbol)

    def feed(self, symbols: typing.Iterable[str]) -> 'Visitor[T]':
        for symbol in symbols:
            self.visit(symbol)
        return self

    def failed(self) -> bool:
        return self.automaton.is_failure(self.state)

    def success(self) -> bool:
        return not self.failed() and self.automaton.is_final(self.state)


class Automaton(typing.Generic[T], metaclass=abc.ABCMeta):
    """An automaton whose visits are described by values of type T;
       for example an NFA is visited one set of states at a time."""

    @abc.abstractmethod
    def initial(self) -> T:
        pass

    @abc.abstractmethod
    def advance(self, source: T, symbol: str) -> T:
        """Return where the visit goes from ``source`` after
           reading ``symbol``."""
        pass

    def is_failure(self, state: T) -> bool:
        """Return True if no string can be accepted from ``state``
           onwards.  Automata that cannot tell return False."""
        return False

    @abc.abstractmethod
    def is_final(self, state: T) -> bool:
        pass

    def accepts(self, feed: typing.Iterable[str]) -> bool:
        """Return True if the automaton accepts the sequence of symbols
           in ``feed``, stopping early if the visit fails."""
        state = self.initial()
        for symbol in feed:
            state = self.advance(state, symbol)
            if self.is_failure(state):
                return False
        return self.is_final(state)

    def visit(self) -> Visitor[T]:
        return Visitor(self)
