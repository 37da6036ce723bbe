"""Tests for the elastic-net logistic regression wrapper."""

from __future__ import annotations

import warnings

import numpy as np
import pytest
from scipy import sparse

from headline_classifier.errors import DegenerateSplitError, DimensionMismatchError
from headline_classifier.models.logistic_regression import (
    ElasticNetLogisticRegression,
    FittedModel,
    column_scale,
    create_logistic_regression_factory,
)


class TestFittedModel:
    def test_zero_coefficients_give_one_half(self):
        model = FittedModel(coef=np.zeros(3), intercept=0.0, lam=0.1, alpha=1.0)
        p = model.predict_proba(np.ones((4, 3)))
        np.testing.assert_allclose(p, 0.5)

    def test_probability_in_unit_interval(self):
        model = FittedModel(coef=np.array([50.0, -50.0]), intercept=1.0, lam=0.1, alpha=1.0)
        X = np.random.default_rng(0).normal(size=(50, 2))
        p = model.predict_proba(X)
        assert np.all((p >= 0) & (p <= 1))

    def test_accepts_sparse_input(self):
        model = FittedModel(coef=np.array([1.0, -1.0]), intercept=0.0, lam=0.1, alpha=1.0)
        X = sparse.csr_matrix(np.array([[1.0, 0.0], [0.0, 1.0]]))
        p = model.predict_proba(X)
        assert p[0] > 0.5 > p[1]

    def test_feature_count_mismatch(self):
        model = FittedModel(coef=np.zeros(3), intercept=0.0, lam=0.1, alpha=1.0)
        with pytest.raises(DimensionMismatchError):
            model.predict_proba(np.ones((2, 4)))

    def test_top_features_skips_zeros(self):
        model = FittedModel(
            coef=np.array([0.0, -2.0, 0.5, 0.0]),
            intercept=0.0,
            lam=0.1,
            alpha=1.0,
            feature_names=("a", "b", "c", "d"),
        )
        assert model.top_features(3) == [("b", -2.0), ("c", 0.5)]
        assert model.n_nonzero == 2


class TestElasticNetLogisticRegression:
    def test_fits_separable_data(self, separable_data):
        X, y = separable_data
        est = ElasticNetLogisticRegression(lam=0.001, alpha=1.0, random_state=0).fit(X, y)
        assert np.mean(est.predict(X) == y) >= 0.95
        assert est.model.coef[0] >= 0 >= est.model.coef[1]
        assert est.model.n_nonzero >= 1

    def test_large_lambda_zeroes_lasso_coefficients(self, separable_data):
        X, y = separable_data
        est = ElasticNetLogisticRegression(lam=10.0, alpha=1.0).fit(X, y)
        assert est.model.n_nonzero == 0

    def test_keeps_feature_names(self, separable_data):
        X, y = separable_data
        est = ElasticNetLogisticRegression(lam=0.01).fit(X, y, feature_names=["pos", "neg"])
        assert est.model.feature_names == ("pos", "neg")
        assert est.model.lam == 0.01

    def test_single_class_raises(self):
        with pytest.raises(DegenerateSplitError):
            ElasticNetLogisticRegression(lam=0.1).fit(np.ones((5, 2)), np.zeros(5))

    def test_row_mismatch_raises(self):
        with pytest.raises(DimensionMismatchError):
            ElasticNetLogisticRegression(lam=0.1).fit(np.ones((5, 2)), [0, 1, 0])

    def test_predict_before_fit(self):
        with pytest.raises(RuntimeError):
            ElasticNetLogisticRegression(lam=0.1).predict(np.ones((1, 2)))

    def test_factory_merges_defaults(self):
        factory = create_logistic_regression_factory({"alpha": 0.5, "lam": 1.0})
        est = factory({"lam": 0.2})
        assert est.p == {"alpha": 0.5, "lam": 0.2}


class TestStandardization:
    def test_column_scale(self):
        X = np.array([[0.0, 5.0, 1.0], [2.0, 5.0, 3.0]])
        np.testing.assert_allclose(column_scale(X), [1.0, 1.0, 1.0])
        np.testing.assert_allclose(column_scale(X * 4), [4.0, 1.0, 4.0])

    def test_column_scale_sparse_matches_dense(self):
        X = np.random.default_rng(1).normal(size=(30, 4)) * [1.0, 10.0, 0.1, 3.0]
        np.testing.assert_allclose(column_scale(sparse.csr_matrix(X)), column_scale(X))

    def test_predictions_do_not_depend_on_column_units(self, separable_data):
        X, y = separable_data
        stretched = X * np.array([1000.0, 1.0])
        a = ElasticNetLogisticRegression(lam=0.01, random_state=0).fit(X, y)
        b = ElasticNetLogisticRegression(lam=0.01, random_state=0).fit(stretched, y)

        np.testing.assert_allclose(a.predict_proba(X), b.predict_proba(stretched), atol=1e-2)
        assert b.model.coef[0] == pytest.approx(a.model.coef[0] / 1000.0, rel=0.05, abs=1e-6)

    def test_fit_records_convergence(self, separable_data):
        X, y = separable_data
        assert ElasticNetLogisticRegression(lam=0.01).fit(X, y).model.converged
        capped = ElasticNetLogisticRegression(lam=1e-4, max_iter=1, tol=1e-12).fit(X, y)
        assert not capped.model.converged

    def test_fit_emits_no_future_warning(self, separable_data):
        X, y = separable_data
        with warnings.catch_warnings():
            warnings.simplefilter("error", FutureWarning)
            ElasticNetLogisticRegression(lam=0.01, alpha=0.5).fit(X, y)
