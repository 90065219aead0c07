import pytest

import nfaregex
from nfaregex.automata.regex import Any, Empty, NFAGenerator, One, Operator, tokenize
from nfaregex.errors import (
    EmptyOperandStack, PatternError, UnbalancedParentheses, UnsupportedSymbol
)


class TestTokenize:
    def test_tokens(self) -> None:
        assert list(tokenize("a&(/!|#)*.")) == [
            (0, One("a")),
            (1, Operator.CONCAT),
            (2, Operator.OPEN),
            (3, One("!")),
            (5, Operator.UNION),
            (6, Empty()),
            (7, Operator.CLOSE),
            (8, Operator.STAR),
            (9, Any()),
        ]

    def test_alphabet(self) -> None:
        assert list(tokenize("x", "xy")) == [(0, One("x"))]
        with pytest.raises(UnsupportedSymbol):
            list(tokenize("a", "xy"))

    def test_unsupported(self) -> None:
        with pytest.raises(UnsupportedSymbol) as e:
            list(tokenize("a&%"))
        assert e.value.position == 2
        with pytest.raises(UnsupportedSymbol):
            list(tokenize("a/"))


class TestPrecedence:
    def test_star(self) -> None:
        assert Operator.STAR.has_precedence(Operator.CONCAT)
        assert Operator.STAR.has_precedence(Operator.UNION)
        assert not Operator.STAR.has_precedence(Operator.STAR)

    def test_concat_union(self) -> None:
        assert Operator.CONCAT.has_precedence(Operator.UNION)
        assert not Operator.UNION.has_precedence(Operator.CONCAT)
        assert not Operator.UNION.has_precedence(Operator.UNION)

    def test_open(self) -> None:
        assert not Operator.NOT.has_precedence(Operator.OPEN)
        assert not Operator.CONCAT.has_precedence(Operator.OPEN)
        assert not Operator.OPEN.has_precedence(Operator.CONCAT)

    def test_not(self) -> None:
        assert Operator.NOT.has_precedence(Operator.CONCAT)
        assert Operator.NOT.has_precedence(Operator.STAR)
        assert not Operator.CONCAT.has_precedence(Operator.NOT)

    def test_arity(self) -> None:
        assert Operator.CONCAT.arity == 2
        assert Operator.UNION.arity == 2
        assert Operator.STAR.arity == 1
        assert Operator.NOT.arity == 1


class TestGenerator:
    def test_concatenation(self, generator: NFAGenerator) -> None:
        nfa = generator.generate("ab")
        assert nfa.accepts("ab")
        assert not nfa.accepts("a")
        assert not nfa.accepts("abb")

    def test_union(self, generator: NFAGenerator) -> None:
        nfa = generator.generate("a|b")
        assert nfa.accepts("a")
        assert nfa.accepts("b")
        assert not nfa.accepts("ab")
        assert not nfa.accepts("")

    def test_star(self, generator: NFAGenerator) -> None:
        nfa = generator.generate("a*")
        assert nfa.accepts("")
        assert nfa.accepts("aaaa")
        assert not nfa.accepts("b")

    def test_precedence(self, generator: NFAGenerator) -> None:
        nfa = generator.generate("ab|cd*")
        assert nfa.accepts("ab")
        assert nfa.accepts("c")
        assert nfa.accepts("cddd")
        assert not nfa.accepts("abd")
        assert not nfa.accepts("cdcd")

    def test_plus(self, generator: NFAGenerator) -> None:
        nfa = generator.generate("a+")
        assert nfa.accepts("a")
        assert nfa.accepts("aa")
        assert not nfa.accepts("")

    def test_optional(self, generator: NFAGenerator) -> None:
        nfa = generator.generate("a?")
        assert nfa.accepts("")
        assert nfa.accepts("a")
        assert not nfa.accepts("aa")

    def test_repetition(self, generator: NFAGenerator) -> None:
        nfa = generator.generate("a[2,3]")
        assert nfa.accepts("aa")
        assert nfa.accepts("aaa")
        assert not nfa.accepts("a")
        assert not nfa.accepts("aaaa")

        nfa = generator.generate("(ab)[2,]")
        assert nfa.accepts("abab")
        assert nfa.accepts("ababab")
        assert not nfa.accepts("ab")

    def test_character_range(self, generator: NFAGenerator) -> None:
        nfa = generator.generate("a-c+")
        assert nfa.accepts("abcab")
        assert not nfa.accepts("")
        assert not nfa.accepts("abd")

    def test_spaces(self, generator: NFAGenerator) -> None:
        nfa = generator.generate(" w?ay ")
        assert nfa.accepts(" way ")
        assert nfa.accepts(" ay ")
        assert not nfa.accepts("way")

    def test_epsilon_and_wildcard(self, generator: NFAGenerator) -> None:
        assert generator.generate("#").accepts("")
        assert not generator.generate("#").accepts("a")
        assert generator.generate("a#b").accepts("ab")

        nfa = generator.generate(".*x")
        assert nfa.accepts("x")
        assert nfa.accepts("a!cx")
        assert not nfa.accepts("xa")

    def test_empty_pattern(self, generator: NFAGenerator) -> None:
        nfa = generator.generate("")
        assert nfa.accepts("")
        assert not nfa.accepts("a")

    def test_negation(self, generator: NFAGenerator) -> None:
        nfa = generator.generate("!a")
        assert not nfa.accepts("a")
        assert nfa.accepts("")
        assert nfa.accepts("bb")

    def test_negation_binds_tighter_than_star(self, generator: NFAGenerator) -> None:
        assert generator.generate("!a*").accepts("aa")
        assert not generator.generate("!(a*)").accepts("aa")

    def test_double_negation(self, generator: NFAGenerator) -> None:
        nfa = generator.generate("!(!(ab))")
        assert nfa.accepts("ab")
        assert not nfa.accepts("a")
        assert not nfa.accepts("")

        nfa = generator.generate("!!ab")
        assert nfa.accepts("ab")
        assert not nfa.accepts("b")

    def test_inverted_operand(self, generator: NFAGenerator) -> None:
        nfa = generator.generate("!(!a)b")
        assert nfa.accepts("ab")
        assert not nfa.accepts("b")
        assert not nfa.accepts("aab")

        nfa = generator.generate("(!(!a))*")
        assert nfa.accepts("")
        assert nfa.accepts("aaa")
        assert not nfa.accepts("ab")

    def test_escapes(self, generator: NFAGenerator) -> None:
        assert generator.generate("/a").accepts("a")
        nfa = generator.generate("/*")
        assert nfa.accepts("*")
        assert not nfa.accepts("")
        assert generator.generate("/(a/)").accepts("(a)")
        assert generator.generate("/!a").accepts("!a")
        assert generator.generate("x/?").accepts("x?")
        assert not generator.generate("x/?").accepts("x")

    def test_end_to_end(self, generator: NFAGenerator) -> None:
        nfa = generator.generate("(a|cd*)!(a*)")
        assert not nfa.accepts("aa")
        assert nfa.accepts("aba")
        assert nfa.accepts("cruntti")
        assert not nfa.accepts("a")
        assert not nfa.accepts("b")

    def test_idempotent(self, generator: NFAGenerator) -> None:
        first = generator.generate("(a|b)*!(ab)")
        second = generator.generate("(a|b)*!(ab)")
        for s in ["", "a", "ab", "ba", "abab", "bbb", "abc"]:
            assert first.accepts(s) == second.accepts(s)
        if generator.cache_enabled:
            assert first is second
        else:
            assert first is not second

    def test_transition_caching(self, generator: NFAGenerator) -> None:
        nfa = generator.generate("(a|b)*abb")
        assert nfa.accepts("babb")
        assert nfa.cache_enabled == generator.transition_caching
        assert bool(nfa.transition_cache) == generator.transition_caching

    def test_fragments(self, generator: NFAGenerator) -> None:
        assert generator.generate_from_symbol("a").accepts("a")
        assert not generator.generate_from_symbol("a").accepts("")
        assert generator.generate_from_epsilon().accepts("")
        assert generator.generate_from_wildcard().accepts("!")
        nfa = generator.generate_from_empty_string()
        assert nfa.accepts("")
        assert not nfa.accepts("a")
        assert len(nfa.states()) == 1


class TestErrors:
    def test_unbalanced(self, generator: NFAGenerator) -> None:
        with pytest.raises(UnbalancedParentheses):
            generator.generate("(ab")
        with pytest.raises(UnbalancedParentheses):
            generator.generate("ab)")

    def test_missing_operand(self, generator: NFAGenerator) -> None:
        for pattern in ["()", "a|", "|a", "*", "!", "a()"]:
            with pytest.raises(EmptyOperandStack):
                generator.generate(pattern)

    def test_unsupported(self, generator: NFAGenerator) -> None:
        with pytest.raises(UnsupportedSymbol):
            generator.generate("a%b")

    def test_not_cached(self, generator: NFAGenerator) -> None:
        with pytest.raises(PatternError):
            generator.generate("(ab")
        assert not generator.cache


class TestPublicAPI:
    def test_compile(self) -> None:
        nfa = nfaregex.compile("ab")
        assert nfa.accepts("ab")
        assert nfaregex.compile("ab") is nfa

    def test_complement(self) -> None:
        nfa = nfaregex.compile("ab|c")
        comp = nfaregex.complement(nfa)
        assert not comp.accepts("ab")
        assert not comp.accepts("c")
        assert comp.accepts("a")
        assert comp.accepts("")

    def test_double_complement(self) -> None:
        nfa = nfaregex.compile("(a|cd*)!(a*)")
        twice = nfaregex.complement(nfaregex.complement(nfa))
        for s in ["", "a", "aa", "aba", "cruntti", "cdd", "cdda", "b"]:
            assert twice.accepts(s) == nfa.accepts(s)

    def test_complement_alphabet(self) -> None:
        nfa = nfaregex.compile("a")
        comp = nfaregex.complement(nfa, "ab")
        assert comp.accepts("b")
        assert not comp.accepts("a")
        assert not comp.accepts("z")

    def test_cache_independence(self) -> None:
        cached = NFAGenerator().generate("(a|b)*!(b*)a?")
        uncached = NFAGenerator(transition_caching=False).generate("(a|b)*!(b*)a?")
        for s in ["", "a", "b", "ab", "ba", "bba", "abab", "bbbb"]:
            assert cached.accepts(s) == uncached.accepts(s)
            assert cached.accepts(s) == uncached.accepts(s)
