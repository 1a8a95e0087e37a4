"""
Tests for quartiles, Tukey outliers and grouped box statistics.
"""

import numpy as np
import pytest

from streamstats.pipeline.errors import InvalidInputError
from streamstats.stats.descriptive import (
    BoxStats,
    box_stats_by_group,
    compute_box_stats,
    explicit_box_stats,
    jitter_offsets,
    quantile_sorted,
)


class TestQuantileSorted:

    def test_interpolates_between_neighbours(self):
        assert quantile_sorted([1, 2, 3, 4], 0.5) == pytest.approx(2.5)
        assert quantile_sorted([1, 2, 3, 4], 0.25) == pytest.approx(1.75)

    def test_endpoints(self):
        assert quantile_sorted([3, 7, 9], 0.0) == 3
        assert quantile_sorted([3, 7, 9], 1.0) == 9

    def test_single_value(self):
        assert quantile_sorted([42], 0.75) == 42

    def test_empty_raises(self):
        with pytest.raises(InvalidInputError):
            quantile_sorted([], 0.5)

    def test_out_of_range_p(self):
        with pytest.raises(ValueError):
            quantile_sorted([1, 2], 1.5)


class TestComputeBoxStats:

    def test_flags_large_value_as_outlier(self):
        stats = compute_box_stats([1, 2, 3, 4, 5, 100])

        assert stats.median == pytest.approx(3.5)
        assert stats.q1 == pytest.approx(2.25)
        assert stats.q3 == pytest.approx(4.75)
        assert stats.outliers == [100.0]
        assert stats.max == 5
        assert stats.min == 1

    def test_input_order_does_not_matter(self):
        assert compute_box_stats([100, 5, 1, 4, 3, 2]) == compute_box_stats([1, 2, 3, 4, 5, 100])

    def test_does_not_mutate_input(self):
        values = [5, 1, 3]
        compute_box_stats(values)
        assert values == [5, 1, 3]

    def test_duplicate_outliers_preserved(self):
        stats = compute_box_stats([10, 10, 10, 10, 10, 10, 10, 10, 50, 50])
        assert stats.outliers == [50.0, 50.0]

    def test_low_outliers(self):
        stats = compute_box_stats([-100, 10, 11, 12, 13, 14])
        assert stats.outliers == [-100.0]
        assert stats.min == 10

    def test_zero_iqr_does_not_crash(self):
        stats = compute_box_stats([7, 7, 7, 7, 7, 7, 1])

        assert stats.iqr == 0
        assert stats.q1 == stats.median == stats.q3 == 7
        assert stats.outliers == [1.0]
        assert stats.min == 7
        assert stats.max == 7

    def test_single_value(self):
        stats = compute_box_stats([3.0])
        assert (stats.min, stats.q1, stats.median, stats.q3, stats.max) == (3.0,) * 5
        assert stats.outliers == []

    def test_whisker_never_inside_box(self):
        # 0 is an outlier and the nearest in-fence value (10) is above q1
        stats = compute_box_stats([0, 10, 10, 10])
        assert stats.q1 == pytest.approx(7.5)
        assert stats.outliers == [0.0]
        assert stats.min == stats.q1

    def test_empty_raises(self):
        with pytest.raises(InvalidInputError):
            compute_box_stats([])

    @pytest.mark.parametrize("seed", range(20))
    def test_ordering_invariant(self, seed):
        rng = np.random.default_rng(seed)
        size = int(rng.integers(1, 40))
        values = rng.lognormal(mean=10, sigma=2, size=size)
        if seed % 3 == 0:
            values = np.round(values, -4)

        stats = compute_box_stats(values)
        assert stats.min <= stats.q1 <= stats.median <= stats.q3 <= stats.max

    def test_to_dict(self):
        data = compute_box_stats([1, 2, 3]).to_dict()
        assert set(data) == {"q1", "median", "q3", "min", "max", "outliers"}


class TestGroupedBoxStats:

    def test_by_group_counts(self, sample_records):
        result = box_stats_by_group(sample_records, lambda r: r.artist, "spotify_streams")

        assert list(result) == ["Alpha", "Beta", "Gamma"]
        assert result["Alpha"]["count"] == 4
        assert result["Gamma"]["median"] == 400

    def test_explicit_split(self, sample_records):
        result = explicit_box_stats(sample_records, "spotify_streams")

        assert list(result) == ["non_explicit", "explicit"]
        assert result["explicit"]["count"] == 2
        assert result["explicit"]["median"] == pytest.approx(800)

    def test_explicit_split_omits_missing_group(self, sample_records):
        clean = [r for r in sample_records if not r.explicit_track]
        assert list(explicit_box_stats(clean, "spotify_streams")) == ["non_explicit"]


class TestJitter:

    def test_within_width(self):
        offsets = jitter_offsets(500, width=0.4, seed=1)
        assert offsets.shape == (500,)
        assert np.all(np.abs(offsets) <= 0.2)

    def test_seed_is_reproducible(self):
        assert np.array_equal(jitter_offsets(10, seed=7), jitter_offsets(10, seed=7))

    def test_accepts_generator(self):
        rng = np.random.default_rng(3)
        assert jitter_offsets(4, seed=rng).shape == (4,)
