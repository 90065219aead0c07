"""Desugaring of human-written patterns into the canonical operator set."""

# SPDX-License-Identifier: GPL-3.0-or-later

# Copyright (C) 2022 Paolo Bonzini
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.

import compynator.core         # type: ignore
import logging
import typing

from .alphabet import (
    DEFAULT_ALPHABET, OPERATORS, SHORTHANDS, SHORTHAND_TRIGGERS,
    CLOSE, CONCAT, EPSILON, ESCAPE, NOT, OPEN, STAR, UNION, WILDCARD
)
from .errors import (
    EmptyOperandStack, InvalidCharacterRange, InvalidRepetitionRange,
    UnbalancedParentheses, UnsupportedSymbol
)

logger = logging.getLogger(__name__)

Parser = typing.Callable[[str], typing.Union[compynator.core.Success, compynator.core.Failure]]

Bounds = typing.Tuple[typing.Optional[int], typing.Optional[int]]


@typing.no_type_check
def _repetition_parser() -> Parser:
    from compynator.core import One, Terminal, Succeed

    Space = One.where(str.isspace)
    Spaces = Space.repeat(lower=0, reducer=lambda x, y: None)

    Digits = One.where(lambda c: '0' <= c <= '9').repeat(lower=1)
    Bound = Spaces.then(Digits.value(int) | Succeed(None)).skip(Spaces)

    Range = Terminal('[').then(Bound).skip(Terminal(','))
    Range = Range.then(Bound, reducer=lambda lower, upper: (lower, upper))
    return Range.skip(Terminal(']'))


Repetition = _repetition_parser()


def _escaped_positions(text: str) -> set[int]:
    """Return the indices of the characters that follow an escape marker."""
    result = set()
    i = 0
    while i < len(text):
        if text[i] == ESCAPE:
            result.add(i + 1)
            i += 2
        else:
            i += 1
    return result


def _units(text: str) -> typing.Iterator[str]:
    """Split ``text`` into characters, keeping escaped pairs together."""
    i = 0
    while i < len(text):
        if text[i] == ESCAPE:
            yield text[i:i + 2]
            i += 2
        else:
            yield text[i]
            i += 1


def escape(text: str, alphabet: typing.Iterable[str] = DEFAULT_ALPHABET) -> str:
    """Return a pattern that matches ``text`` literally."""
    alphabet = frozenset(alphabet)
    return ''.join(c if c in alphabet else ESCAPE + c for c in text)


class PatternProcessor:
    """Turns a pattern that is easy to write into one that is easy to
       compile.  The result only contains symbols from the alphabet,
       escaped literals, ``#``, ``.`` and the canonical operators
       ``( ) | & * !``."""
    alphabet: frozenset[str]
    cache: dict[str, str]

    def __init__(self, alphabet: typing.Optional[typing.Iterable[str]] = None) -> None:
        self.alphabet = frozenset(DEFAULT_ALPHABET if alphabet is None else alphabet)
        self.cache = dict()

    def elongate(self, pattern: str) -> str:
        """Replace shorthands, drop double negations and make concatenation
           explicit.  The empty pattern becomes the empty symbol ``#``."""
        result = self.cache.get(pattern)
        if result is not None:
            logger.debug('pattern cache hit for %r', pattern)
            return result

        if not pattern:
            result = EPSILON
        else:
            result = self.replace_shorthands(pattern)
            result = self.remove_unnecessary_negations(result)
            result = self.add_concatenation_symbols(result)

        logger.debug('elongated %r to %r', pattern, result)
        self.cache[pattern] = result
        return result

    def replace_shorthands(self, pattern: str) -> str:
        """Replace ``+``, ``?``, ``-`` and ``[min,max]`` with the basic
           operations.  Escaped literals are wrapped in parentheses, so
           that later steps treat them as a single operand."""
        text = pattern
        i = 0
        while i < len(text):
            c = text[i]
            if c == ESCAPE:
                if i + 1 == len(text):
                    raise UnsupportedSymbol('dangling escape marker', text, i)
                text = text[:i] + OPEN + text[i:i + 2] + CLOSE + text[i + 2:]
                i += 4
            elif c in SHORTHAND_TRIGGERS:
                text, i = self._replace_shorthand(text, i)
            else:
                i += 1
        return text

    def _replace_shorthand(self, text: str, i: int) -> typing.Tuple[str, int]:
        """Replace the shorthand at index ``i``.  Return the new text and
           the index right after the replacement."""
        c = text[i]
        part = self.determine_affected_part(text, i - 1)
        begin = i - len(part)
        end = i + 1
        if c == '+':
            replacement = f'({part}{part}{STAR})'
        elif c == '?':
            replacement = f'({part}{UNION}{EPSILON})'
        elif c == '-':
            replacement, end = self._replace_range(text, i, part)
        else:
            (lower, upper), end = self._parse_repetition(text, i)
            replacement = self._repeat(part, lower, upper)

        return text[:begin] + replacement + text[end:], begin + len(replacement)

    def _literal(self, c: str) -> str:
        if c in self.alphabet:
            return c
        return f'({ESCAPE}{c})'

    def _range_endpoint(self, part: str) -> typing.Optional[str]:
        if len(part) == 1 and part not in OPERATORS and part not in SHORTHANDS \
                and part not in (EPSILON, WILDCARD, ESCAPE):
            return part
        if len(part) == 2 and part[0] == ESCAPE:
            return part[1]
        if len(part) == 4 and part[0] == OPEN and part[1] == ESCAPE and part[3] == CLOSE:
            return part[2]
        return None

    def _replace_range(self, text: str, i: int, part: str) -> typing.Tuple[str, int]:
        low = self._range_endpoint(part)
        if low is None:
            raise InvalidCharacterRange(f"invalid lower bound '{part}' for range", text, i)

        if text[i + 1:i + 2] == ESCAPE:
            high = self._range_endpoint(text[i + 1:i + 3])
            end = i + 3
        else:
            high = self._range_endpoint(text[i + 1:i + 2])
            end = i + 2
        if high is None:
            raise InvalidCharacterRange('invalid upper bound for range', text, i)
        if low > high:
            raise InvalidCharacterRange(f"descending range '{low}-{high}'", text, i)

        options = [self._literal(chr(code)) for code in range(ord(high), ord(low) - 1, -1)]
        return OPEN + UNION.join(options) + CLOSE, end

    def _parse_repetition(self, text: str, i: int) -> typing.Tuple[Bounds, int]:
        results = Repetition(text[i:])
        if not isinstance(results, compynator.core.Success):
            raise InvalidRepetitionRange('malformed repetition range', text, i)
        result = next(iter(results))
        lower, upper = result.value
        if lower is not None and upper is not None and lower > upper:
            raise InvalidRepetitionRange(f'minimum {lower} exceeds maximum {upper}', text, i)
        return (lower, upper), len(text) - len(result.remain)

    @staticmethod
    def _repeat(part: str, lower: typing.Optional[int], upper: typing.Optional[int]) -> str:
        lower = lower or 0
        if upper is None:
            return OPEN + part * lower + part + STAR + CLOSE

        options = [part * n if n else EPSILON for n in range(upper, lower - 1, -1)]
        return OPEN + UNION.join(options) + CLOSE

    def determine_affected_part(self, text: str, idx: int) -> str:
        """Return the operand of a shorthand, whose last character is
           at index ``idx`` of ``text``.

           If the character is a closing parenthesis, the operand extends
           to the matching opening parenthesis; escaped parentheses are
           not counted.  A Kleene star extends the operand to whatever
           the star applies to."""
        if idx < 0:
            raise EmptyOperandStack(f"'{text[idx + 1]}' has no operand", text, idx + 1)

        escaped = _escaped_positions(text)
        if idx in escaped:
            return text[idx - 1:idx + 1]

        c = text[idx]
        if c == STAR:
            return self.determine_affected_part(text, idx - 1) + STAR

        if c == CLOSE:
            depth = 0
            for j in range(idx, -1, -1):
                if j in escaped:
                    continue
                if text[j] == CLOSE:
                    depth += 1
                elif text[j] == OPEN:
                    depth -= 1
                    if depth == 0:
                        return text[j:idx + 1]
            raise UnbalancedParentheses('unmatched closing parenthesis', text, idx)

        if c in OPERATORS or c in SHORTHANDS or c == ESCAPE:
            raise EmptyOperandStack(f"'{text[idx + 1]}' has no operand", text, idx + 1)
        return c

    def remove_unnecessary_negations(self, pattern: str) -> str:
        """Drop every pair of consecutive ``!``, since negating twice
           does not change the language.  Escaped characters are never
           considered."""
        result = []
        units = list(_units(pattern))
        i = 0
        while i < len(units):
            if units[i] == NOT and i + 1 < len(units) and units[i + 1] == NOT:
                i += 2
                continue
            result.append(units[i])
            i += 1
        return ''.join(result)

    def add_concatenation_symbols(self, pattern: str) -> str:
        """Insert an explicit ``&`` wherever two operands are adjacent."""
        def ends_operand(unit: str) -> bool:
            return unit not in OPERATORS or unit in (STAR, CLOSE)

        def starts_operand(unit: str) -> bool:
            return unit not in OPERATORS or unit in (OPEN, NOT)

        result = []
        prev: typing.Optional[str] = None
        for unit in _units(pattern):
            if prev is not None and ends_operand(prev) and starts_operand(unit):
                result.append(CONCAT)
            result.append(unit)
            prev = unit
        return ''.join(result)
