# tests/test_rng.py

import unittest

from roomlogic.core.rng import SeededRng


class TestSeededRng(unittest.TestCase):
    """Детерминированный генератор: одинаковый seed -> одинаковый поток чисел."""

    def test_same_seed_same_stream(self):
        a, b = SeededRng("detective"), SeededRng("detective")
        self.assertEqual([a.next() for _ in range(50)], [b.next() for _ in range(50)])

    def test_different_seeds_diverge(self):
        a, b = SeededRng("seed-1"), SeededRng("seed-2")
        self.assertNotEqual([a.next() for _ in range(10)], [b.next() for _ in range(10)])

    def test_empty_seed_uses_offset_basis(self):
        self.assertEqual(SeededRng("").state, 2166136261)

    def test_next_in_unit_interval(self):
        rng = SeededRng("range")
        for _ in range(1000):
            value = rng.next()
            self.assertGreaterEqual(value, 0.0)
            self.assertLess(value, 1.0)

    def test_next_int_inclusive_bounds(self):
        rng = SeededRng("dice")
        seen = {rng.next_int(1, 6) for _ in range(600)}
        self.assertEqual(seen, {1, 2, 3, 4, 5, 6})
        self.assertEqual(rng.next_int(7, 7), 7)

    def test_next_int_empty_range_raises(self):
        with self.assertRaises(ValueError):
            SeededRng("x").next_int(3, 2)

    def test_pick_and_shuffle(self):
        rng = SeededRng("cards")
        items = list(range(10))
        self.assertIn(rng.pick(items), items)

        rng.shuffle(items)
        self.assertEqual(sorted(items), list(range(10)))

        with self.assertRaises(ValueError):
            rng.pick([])

    def test_shuffle_is_reproducible(self):
        first, second = list("abcdefgh"), list("abcdefgh")
        SeededRng("mix").shuffle(first)
        SeededRng("mix").shuffle(second)
        self.assertEqual(first, second)


if __name__ == '__main__':
    unittest.main()
