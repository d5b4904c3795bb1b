"""Tests for the seeded random stream."""

import pytest

from galaxy_explorer.constants import DEFAULT_SEED
from galaxy_explorer.models.rng import SeededStream, normalize_seed


class TestSeededStream:
    """Test the mulberry32 stream."""

    def test_same_seed_same_sequence(self):
        """Two streams from one seed produce identical draws."""
        a = SeededStream(42)
        b = SeededStream(42)
        assert [a.next() for _ in range(100)] == [b.next() for _ in range(100)]

    def test_different_seeds_differ(self):
        """Neighbouring seeds give different sequences."""
        a = SeededStream(1)
        b = SeededStream(2)
        assert [a.next() for _ in range(10)] != [b.next() for _ in range(10)]

    def test_values_in_unit_interval(self):
        """Every draw is in [0, 1)."""
        stream = SeededStream(7)
        for _ in range(5000):
            value = stream.next()
            assert 0.0 <= value < 1.0

    def test_state_is_32_bit(self):
        """Negative and oversized seeds wrap into 32 bits."""
        assert SeededStream(-1).state == 0xFFFFFFFF
        assert SeededStream(2**32 + 5).state == 5

    def test_state_advances_by_increment(self):
        """Each draw adds the mulberry32 increment to the state."""
        stream = SeededStream(0)
        stream.next()
        assert stream.state == 0x6D2B79F5

    def test_helpers_consume_one_draw(self):
        """uniform, randint, choice and chance each take exactly one draw."""
        stream = SeededStream(99)
        stream.uniform(0, 10)
        stream.randint(1, 6)
        stream.choice(["a", "b", "c"])
        stream.chance(0.5)
        assert stream.draws == 4

    def test_randint_inclusive_bounds(self):
        """randint reaches both ends of its range and never beyond."""
        stream = SeededStream(3)
        seen = {stream.randint(0, 2) for _ in range(500)}
        assert seen == {0, 1, 2}

    def test_uniform_range(self):
        """uniform stays within its bounds."""
        stream = SeededStream(11)
        for _ in range(1000):
            assert -5.0 <= stream.uniform(-5.0, 5.0) < 5.0

    def test_chance_extremes(self):
        """Probability 0 never fires and probability 1 always does."""
        stream = SeededStream(5)
        assert not any(stream.chance(0.0) for _ in range(200))
        assert all(stream.chance(1.0) for _ in range(200))


class TestNormalizeSeed:
    """Test seed coercion."""

    @pytest.mark.parametrize("value, expected", [
        (42, 42),
        (0, 0),
        (-7, -7),
        (42.0, 42),
        ("123", 123),
        (" 8 ", 8),
    ])
    def test_valid_seeds(self, value, expected):
        """Integers and integral values are accepted."""
        assert normalize_seed(value) == expected

    @pytest.mark.parametrize("value", [None, True, 1.5, float("nan"), float("inf"), "abc", "", [1]])
    def test_invalid_seeds_use_default(self, value):
        """Anything else falls back to the default seed."""
        assert normalize_seed(value) == DEFAULT_SEED

    def test_fallback_is_logged(self, caplog):
        """Falling back logs a warning."""
        with caplog.at_level("WARNING"):
            normalize_seed("not a seed")
        assert "invalid galaxy seed" in caplog.text
