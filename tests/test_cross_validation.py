"""Tests for the seeded train/test split and stratified folds."""

from __future__ import annotations

import numpy as np
import pytest

from headline_classifier.core.cross_validation import (
    Split,
    stratified_kfold_indices,
    train_test_indices,
)
from headline_classifier.errors import DegenerateSplitError, InvalidConfigurationError


class TestTrainTestIndices:
    @pytest.mark.parametrize("n", list(range(2, 60)))
    def test_disjoint_and_covering(self, n):
        split = train_test_indices(n, 0.8, seed=42)
        train, test = set(split.train.tolist()), set(split.test.tolist())

        assert not train & test
        assert train | test == set(range(n))
        assert len(train) == round(0.8 * n)
        assert split.n == n

    def test_same_seed_same_split(self):
        a = train_test_indices(500, 0.8, seed=42)
        b = train_test_indices(500, 0.8, seed=42)
        np.testing.assert_array_equal(a.train, b.train)
        np.testing.assert_array_equal(a.test, b.test)

    def test_different_seed_different_split(self):
        a = train_test_indices(500, 0.8, seed=1)
        b = train_test_indices(500, 0.8, seed=2)
        assert not np.array_equal(a.test, b.test)

    def test_indices_sorted(self):
        split = train_test_indices(100, 0.7, seed=3)
        assert np.all(np.diff(split.train) > 0)
        assert np.all(np.diff(split.test) > 0)

    def test_small_n(self):
        split = train_test_indices(1, 0.8, seed=0)
        assert split.train.tolist() == [0]
        assert split.test.size == 0

    @pytest.mark.parametrize("fraction", [0.0, 1.0, -0.1, 1.5])
    def test_invalid_fraction(self, fraction):
        with pytest.raises(InvalidConfigurationError):
            train_test_indices(10, fraction)

    def test_split_is_frozen(self):
        split = train_test_indices(10)
        assert isinstance(split, Split)
        with pytest.raises(AttributeError):
            split.train = np.arange(3)


class TestStratifiedKFold:
    def test_every_index_validated_exactly_once(self):
        y = np.array([1] * 23 + [0] * 77)
        folds = stratified_kfold_indices(y, k=10, seed=0)

        assert len(folds) == 10
        seen = np.concatenate([val for _, val in folds])
        assert sorted(seen.tolist()) == list(range(100))
        for train, val in folds:
            assert not set(train.tolist()) & set(val.tolist())
            assert train.size + val.size == 100

    def test_folds_keep_both_classes(self):
        y = np.array([1] * 30 + [0] * 70)
        for train, val in stratified_kfold_indices(y, k=10, seed=5):
            assert set(y[val].tolist()) == {0, 1}
            assert 2 <= y[val].sum() <= 4

    def test_fold_sizes_balanced(self):
        y = np.array([1] * 13 + [0] * 14)
        sizes = [val.size for _, val in stratified_kfold_indices(y, k=5, seed=1)]
        assert max(sizes) - min(sizes) <= 1

    def test_deterministic(self):
        y = np.array([0, 1] * 25)
        a = stratified_kfold_indices(y, k=5, seed=9)
        b = stratified_kfold_indices(y, k=5, seed=9)
        for (ta, va), (tb, vb) in zip(a, b):
            np.testing.assert_array_equal(va, vb)

    def test_k_too_small(self):
        with pytest.raises(InvalidConfigurationError):
            stratified_kfold_indices([0, 1, 0, 1], k=1)

    def test_fewer_samples_than_folds(self):
        with pytest.raises(DegenerateSplitError):
            stratified_kfold_indices([0, 1, 0], k=5)
