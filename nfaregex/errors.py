"""Errors raised while compiling a pattern."""

# SPDX-License-Identifier: GPL-3.0-or-later

# Copyright (C) 2022 Paolo Bonzini
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

import typing


class PatternError(Exception):
    def __init__(self, message: str, pattern: typing.Optional[str] = None,
                 position: typing.Optional[int] = None) -> None:
        super().__init__(message)
        self.pattern = pattern
        self.position = position

    @property
    def message(self) -> str:
        return str(self.args[0])

    @property
    def kind(self) -> str:
        return self.__class__.__name__

    def __str__(self) -> str:
        if self.pattern is None:
            return self.message
        if self.position is None:
            return f"{self.message} in '{self.pattern}'"
        return f"{self.message} at position {self.position} of '{self.pattern}'"


class UnbalancedParentheses(PatternError):
    pass


class InvalidRepetitionRange(PatternError):
    pass


class InvalidCharacterRange(PatternError):
    pass


class EmptyOperandStack(PatternError):
    pass


class UnsupportedSymbol(PatternError):
    pass
