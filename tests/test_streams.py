import numpy as np
import pytest

from biaslab import RandomStream


class TestRandomStream:
    def test_same_seed_same_draws(self):
        a = RandomStream(7).normal(0.0, 1.0, 50)
        b = RandomStream(7).normal(0.0, 1.0, 50)
        np.testing.assert_array_equal(a, b)

    def test_different_seeds_differ(self):
        a = RandomStream(7).normal(0.0, 1.0, 50)
        b = RandomStream(8).normal(0.0, 1.0, 50)
        assert not np.array_equal(a, b)

    def test_repetition_streams_are_reproducible(self):
        a = RandomStream.for_repetition(3, 11).binomial(0.5, 100)
        b = RandomStream.for_repetition(3, 11).binomial(0.5, 100)
        np.testing.assert_array_equal(a, b)

    def test_repetition_streams_are_distinct(self):
        a = RandomStream.for_repetition(3, 0).normal(0.0, 1.0, 50)
        b = RandomStream.for_repetition(3, 1).normal(0.0, 1.0, 50)
        c = RandomStream(3).normal(0.0, 1.0, 50)
        assert not np.array_equal(a, b)
        assert not np.array_equal(a, c)

    def test_negative_index_raises(self):
        with pytest.raises(ValueError, match="non-negative"):
            RandomStream.for_repetition(3, -1)

    def test_binomial_is_binary(self):
        draws = RandomStream(0).binomial(0.3, 1000)
        assert set(np.unique(draws)) <= {0, 1}

    def test_categorical_respects_probabilities(self):
        draws = RandomStream(0).categorical([0.0, 1.0, 0.0], 100)
        assert set(draws) == {1}
