import gc
import unittest
from nfaregex.automata.dfa import DFAGenerator
from nfaregex.automata.nfa import NFA, State


class DFATest(unittest.TestCase):
    @staticmethod
    def sample_nfa() -> NFA:
        """Return an NFA for ``ab|a``."""
        s1, s2, s3, s4 = State(1), State(2), State(3), State(4)
        s1.add_transition("a", s2)
        s1.add_transition("a", s3)
        s2.add_transition("b", s4)
        return NFA(s1, {s3, s4})

    def test_complement(self) -> None:
        nfa = self.sample_nfa()
        dfa = DFAGenerator().complement(nfa)
        self.assertTrue(dfa.is_dfa())
        self.assertFalse(dfa.cache_enabled)
        self.assertFalse(dfa.accepts("a"))
        self.assertFalse(dfa.accepts("ab"))
        self.assertTrue(dfa.accepts(""))
        self.assertTrue(dfa.accepts("b"))
        self.assertTrue(dfa.accepts("aa"))
        self.assertTrue(dfa.accepts("abb"))
        self.assertTrue(dfa.accepts("a|b"))

    def test_subset_states(self) -> None:
        dfa = DFAGenerator().complement(self.sample_nfa())
        states = dfa.states()
        self.assertTrue(all(s.id < 0 for s in states))
        # start, {2,3}, {4} and the sink
        self.assertEqual(len(states), 4)
        for s in states:
            self.assertFalse(s.epsilon)
            self.assertFalse(s.wildcard)
            self.assertTrue(all(len(dests) == 1 for dests in s.transitions.values()))

    def test_wildcard(self) -> None:
        s1, s2 = State(1), State(2)
        s1.add_wildcard_transition(s2)
        dfa = DFAGenerator().complement(NFA(s1, {s2}))
        self.assertTrue(dfa.accepts(""))
        self.assertFalse(dfa.accepts("x"))
        self.assertFalse(dfa.accepts("*"))
        self.assertTrue(dfa.accepts("xy"))

    def test_double_complement(self) -> None:
        generator = DFAGenerator()
        once = generator.complement(self.sample_nfa())
        twice = generator.complement(once)
        self.assertIs(twice.start, once.start)
        self.assertTrue(twice.inverted)
        self.assertFalse(once.inverted)
        self.assertTrue(twice.is_dfa())
        for s in ["", "a", "ab", "b", "aa", "abb"]:
            self.assertNotEqual(once.accepts(s), twice.accepts(s))
        self.assertTrue(twice.accepts("ab"))

    def test_custom_alphabet(self) -> None:
        dfa = DFAGenerator("ab").complement(self.sample_nfa())
        self.assertTrue(dfa.accepts("b"))
        self.assertTrue(dfa.accepts("a!"))
        self.assertFalse(dfa.accepts("c"))

    def test_cache(self) -> None:
        generator = DFAGenerator()
        nfa = self.sample_nfa()
        dfa = generator.complement(nfa)
        self.assertIs(generator.complement(nfa), dfa)
        self.assertIs(generator.cache[nfa], dfa)

        generator.disable_caching()
        self.assertIsNot(generator.complement(nfa), dfa)
        self.assertIs(generator.cache[nfa], dfa)
        generator.enable_caching()
        self.assertIs(generator.complement(nfa), dfa)

    def test_cache_is_weak(self) -> None:
        generator = DFAGenerator()
        nfa = self.sample_nfa()
        generator.complement(nfa)
        self.assertEqual(len(generator.cache), 1)
        del nfa
        gc.collect()
        self.assertEqual(len(generator.cache), 0)
