"""
Tests for the seeded Alea PRNG.
"""

import pytest

from py_hexmap.core.alea_prng import AleaPRNG, Mash


class TestAleaPRNG:
    def test_same_seed_same_stream(self):
        a = AleaPRNG(12345)
        b = AleaPRNG(12345)
        assert [a.random() for _ in range(20)] == [b.random() for _ in range(20)]

    def test_numeric_and_string_seed_match(self):
        assert AleaPRNG(42).random() == AleaPRNG("42").random()

    def test_single_part_sequence_matches_scalar(self):
        assert AleaPRNG([42]).random() == AleaPRNG(42).random()

    def test_part_order_matters(self):
        assert AleaPRNG([42, "rivers"]).random() != AleaPRNG(["rivers", 42]).random()

    def test_mash_is_stateful(self):
        mash = Mash()
        first = mash(" ")
        second = mash(" ")
        assert 0.0 <= first < 1.0 and 0.0 <= second < 1.0
        assert first != second
        assert Mash()(" ") == first

    def test_stage_labels_give_independent_streams(self):
        rivers = AleaPRNG([42, "rivers"])
        lakes = AleaPRNG([42, "lakes"])
        assert [rivers.random() for _ in range(5)] != [lakes.random() for _ in range(5)]

    def test_values_in_unit_interval(self):
        prng = AleaPRNG("range")
        for _ in range(1000):
            value = prng.random()
            assert 0.0 <= value < 1.0

    def test_call_count(self):
        prng = AleaPRNG(1)
        prng.random()
        prng.uniform(0, 10)
        prng.chance(0.5)
        assert prng.call_count == 3

    def test_uniform_bounds(self):
        prng = AleaPRNG(7)
        for _ in range(500):
            value = prng.uniform(-10000.0, 10000.0)
            assert -10000.0 <= value < 10000.0

    def test_randint_is_inclusive(self):
        prng = AleaPRNG(99)
        values = {prng.randint(1, 2) for _ in range(200)}
        assert values == {1, 2}

    def test_randint_empty_range(self):
        with pytest.raises(ValueError):
            AleaPRNG(1).randint(3, 2)

    def test_chance_extremes(self):
        prng = AleaPRNG(5)
        assert not any(prng.chance(0.0) for _ in range(100))
        assert all(prng.chance(1.0) for _ in range(100))

    def test_choice(self):
        prng = AleaPRNG(3)
        items = ["a", "b", "c"]
        assert all(prng.choice(items) in items for _ in range(50))
        with pytest.raises(IndexError):
            prng.choice([])

    def test_shuffle_is_a_permutation(self):
        prng = AleaPRNG(8)
        items = list(range(20))
        prng.shuffle(items)
        assert sorted(items) == list(range(20))

    def test_shuffle_deterministic(self):
        first = list(range(10))
        second = list(range(10))
        AleaPRNG(11).shuffle(first)
        AleaPRNG(11).shuffle(second)
        assert first == second
