#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Hyperparameter Tuning Implementation

Selects the regularization strength (lambda) of the elastic-net logistic
regression by k-fold cross-validation, then refits on the whole training
partition at the selected lambda.

Features:
- Geometric lambda grid, given by bounds or derived from the data
- Stratified k-fold CV, one independent task per (lambda, fold) fit
- Parallel fan-out with joblib, joined before selection
- lambda.min and lambda.1se selection; non-converging lambdas are excluded
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from joblib import Parallel, delayed

from ..core.cross_validation import stratified_kfold_indices
from ..core.metrics import CV_LOSSES
from ..errors import (
    DegenerateSplitError,
    DimensionMismatchError,
    InvalidConfigurationError,
    NonConvergenceError,
)
from ..models.logistic_regression import (
    FittedModel,
    column_scale,
    create_logistic_regression_factory,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegularizationPath:
    """Candidate lambdas, strictly decreasing."""

    lambdas: Tuple[float, ...]

    def __post_init__(self):
        lams = tuple(float(v) for v in self.lambdas)
        if not lams:
            raise InvalidConfigurationError("lambda grid is empty")
        if not all(np.isfinite(v) and v > 0 for v in lams):
            raise InvalidConfigurationError("lambdas must be finite and > 0")
        object.__setattr__(self, "lambdas", tuple(sorted(set(lams), reverse=True)))

    def __len__(self) -> int:
        return len(self.lambdas)

    def __iter__(self):
        return iter(self.lambdas)

    @classmethod
    def geometric(cls, lambda_max: float, lambda_min: float, n: int) -> "RegularizationPath":
        if n < 1:
            raise InvalidConfigurationError(f"n_lambda must be >= 1, got {n}")
        if not 0 < lambda_min <= lambda_max:
            raise InvalidConfigurationError(
                f"need 0 < lambda_min <= lambda_max, got {lambda_min}, {lambda_max}"
            )
        if n == 1:
            return cls((lambda_max,))
        return cls(tuple(np.geomspace(lambda_max, lambda_min, n)))

    @classmethod
    def from_data(
        cls,
        X,
        y,
        alpha: float = 1.0,
        n: int = 30,
        min_ratio: float = 1e-3,
        standardize: bool = True,
    ) -> "RegularizationPath":
        """
        Grid from the smallest lambda that zeroes every coefficient,
        max|X^T (y - mean(y))| / (N * alpha), down to min_ratio times that.
        With standardize the columns are taken at unit variance, matching
        the fit.
        """
        y = np.asarray(y, dtype=float)
        grad = np.abs(np.asarray(X.T @ (y - y.mean())).ravel())
        if standardize and grad.size:
            grad = grad / column_scale(X)
        lambda_max = float(grad.max()) / (len(y) * alpha) if grad.size else 0.0
        if not lambda_max > 0:
            raise InvalidConfigurationError(
                "cannot derive a lambda grid: features carry no signal"
            )
        return cls.geometric(lambda_max, lambda_max * min_ratio, n)


@dataclass
class TrainingResult:
    model: FittedModel
    path: RegularizationPath
    cv_mean: np.ndarray
    cv_se: np.ndarray
    excluded: List[float]
    lambda_min: float
    lambda_1se: float
    n_folds: int
    cv_metric: str
    fold_errors: np.ndarray = field(repr=False, default=None)

    def cv_table(self) -> pd.DataFrame:
        """One row per candidate lambda."""
        return pd.DataFrame(
            {
                "lambda": list(self.path.lambdas),
                "cv_mean": self.cv_mean,
                "cv_se": self.cv_se,
                "excluded": [lam in self.excluded for lam in self.path.lambdas],
            }
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lambda_min": self.lambda_min,
            "lambda_1se": self.lambda_1se,
            "cv_metric": self.cv_metric,
            "n_folds": self.n_folds,
            "n_lambda": len(self.path),
            "excluded_lambdas": list(self.excluded),
            "best_cv_error": float(np.nanmin(self.cv_mean)),
            "intercept": self.model.intercept,
            "n_nonzero": self.model.n_nonzero,
            "converged": bool(getattr(self.model, "converged", True)),
            "top_features": self.model.top_features(10),
        }


def _fit_fold(factory, lam, X_tr, y_tr, X_va, y_va, loss) -> Optional[float]:
    """Out-of-fold error for one (lambda, fold); None if the fit diverged."""
    est = factory({"lam": lam})
    try:
        est.fit(X_tr, y_tr)
    except NonConvergenceError:
        return None
    return loss(y_va, est.predict_proba(X_va))


class ModelTrainer:
    """
    Cross-validated elastic-net logistic regression.

    For every lambda of the path and every fold, fit on k-1 folds and score
    the held-out fold; the lambda with the lowest mean error (lambda.min) is
    refit on the whole training set.
    """

    def __init__(
        self,
        n_folds: int = 10,
        alpha: float = 1.0,
        cv_metric: str = "deviance",
        random_state: int = 42,
        n_jobs: int = 1,
        max_iter: int = 1000,
        threshold: float = 0.5,
        model_factory: Optional[Callable] = None,
    ):
        """
        Initialize model trainer.

        Args:
            n_folds: Number of CV folds
            alpha: Elastic-net mixing (1.0 = lasso)
            cv_metric: "deviance" or "misclassification"
            random_state: Seed for fold assignment and the solver
            n_jobs: joblib workers for the (lambda, fold) fits
            max_iter: Solver iteration cap
            threshold: Decision cutoff for the misclassification loss
            model_factory: params -> estimator; defaults to elastic-net LR
        """
        if n_folds < 2:
            raise InvalidConfigurationError(f"n_folds must be >= 2, got {n_folds}")
        if cv_metric not in CV_LOSSES:
            raise InvalidConfigurationError(
                f"cv_metric must be one of {sorted(CV_LOSSES)}, got {cv_metric!r}"
            )
        if not 0.0 < threshold < 1.0:
            raise InvalidConfigurationError(
                f"threshold must be in (0, 1), got {threshold}"
            )
        self.n_folds = n_folds
        self.alpha = alpha
        self.cv_metric = cv_metric
        self.random_state = random_state
        self.n_jobs = n_jobs
        self.threshold = threshold
        self.factory = model_factory or create_logistic_regression_factory(
            {"alpha": alpha, "max_iter": max_iter, "random_state": random_state}
        )

    def fit(
        self,
        X,
        y: np.ndarray,
        path: RegularizationPath,
        feature_names: Optional[Sequence[str]] = None,
    ) -> TrainingResult:
        y = np.asarray(y).astype(int)
        if X.shape[0] != y.shape[0]:
            raise DimensionMismatchError(
                f"X has {X.shape[0]} rows but y has {y.shape[0]} labels"
            )
        if np.unique(y).size < 2:
            raise DegenerateSplitError(
                "training labels contain a single class; cannot fit a binomial model"
            )

        folds = stratified_kfold_indices(y, k=self.n_folds, seed=self.random_state)
        for tr, _ in folds:
            if np.unique(y[tr]).size < 2:
                raise DegenerateSplitError(
                    f"a {self.n_folds}-fold training split holds a single class"
                )

        lambdas = path.lambdas
        loss = CV_LOSSES[self.cv_metric]
        if self.cv_metric == "misclassification":
            loss = partial(loss, threshold=self.threshold)
        logger.info(
            "cross-validating %d lambdas x %d folds on %d rows (n_jobs=%d)",
            len(lambdas), self.n_folds, X.shape[0], self.n_jobs,
        )

        # one copy of each fold, shared by every lambda
        fold_data = [(X[tr], y[tr], X[va], y[va]) for tr, va in folds]
        tasks = [
            delayed(_fit_fold)(self.factory, lam, *data, loss)
            for lam in lambdas
            for data in fold_data
        ]
        flat = Parallel(n_jobs=self.n_jobs)(tasks)

        # join: rows = lambdas, cols = folds
        fold_errors = np.full((len(lambdas), self.n_folds), np.nan)
        excluded = []
        for li, lam in enumerate(lambdas):
            errs = flat[li * self.n_folds:(li + 1) * self.n_folds]
            if any(e is None for e in errs):
                excluded.append(lam)
                logger.warning("lambda=%.6g excluded: fit did not converge", lam)
                continue
            fold_errors[li] = errs

        if len(excluded) == len(lambdas):
            raise NonConvergenceError("no lambda on the path converged")

        ok = ~np.isnan(fold_errors).any(axis=1)
        cv_mean = np.full(len(lambdas), np.nan)
        cv_se = np.full(len(lambdas), np.nan)
        cv_mean[ok] = fold_errors[ok].mean(axis=1)
        cv_se[ok] = fold_errors[ok].std(axis=1, ddof=1) / np.sqrt(self.n_folds)

        # nanargmin takes the first minimum, i.e. the larger lambda on ties
        i_min = int(np.nanargmin(cv_mean))
        bound = cv_mean[i_min] + cv_se[i_min]
        i_1se = int(np.flatnonzero(ok & (cv_mean <= bound))[0])
        lambda_min, lambda_1se = lambdas[i_min], lambdas[i_1se]
        logger.info(
            "lambda.min=%.6g (cv %s %.4f), lambda.1se=%.6g",
            lambda_min, self.cv_metric, cv_mean[i_min], lambda_1se,
        )

        final = self.factory({"lam": lambda_min}).fit(X, y, feature_names=feature_names)
        if not getattr(final.model, "converged", True):
            logger.warning(
                "final fit at lambda=%.6g stopped at the iteration cap", lambda_min
            )
        return TrainingResult(
            model=final.model,
            path=path,
            cv_mean=cv_mean,
            cv_se=cv_se,
            excluded=excluded,
            lambda_min=lambda_min,
            lambda_1se=lambda_1se,
            n_folds=self.n_folds,
            cv_metric=self.cv_metric,
            fold_errors=fold_errors,
        )
