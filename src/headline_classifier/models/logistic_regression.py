# logistic_regression.py
from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple

import numpy as np
import sklearn
from scipy import sparse
from scipy.special import expit
from sklearn.exceptions import ConvergenceWarning
from sklearn.linear_model import LogisticRegression
from sklearn.utils.fixes import parse_version

from ..errors import DegenerateSplitError, DimensionMismatchError, NonConvergenceError

logger = logging.getLogger(__name__)

# scikit-learn 1.8 deprecates `penalty`; the penalty is then implied by l1_ratio
_PENALTY_DEPRECATED = parse_version(sklearn.__version__) >= parse_version("1.8.dev0")


def column_scale(X) -> np.ndarray:
    """
    Population standard deviation of each column (glmnet's standardize).

    Constant columns get scale 1 so they are left untouched. Works on dense
    arrays and scipy.sparse matrices without densifying.
    """
    if sparse.issparse(X):
        mean = np.asarray(X.mean(axis=0)).ravel()
        sq = np.asarray(X.multiply(X).mean(axis=0)).ravel()
    else:
        X = np.asarray(X, dtype=float)
        mean = X.mean(axis=0)
        sq = (X * X).mean(axis=0)
    std = np.sqrt(np.clip(sq - mean**2, 0.0, None))
    std[std < 1e-12] = 1.0
    return std


def scale_columns(X, factors: np.ndarray):
    if sparse.issparse(X):
        return (X @ sparse.diags(factors)).tocsr()
    return np.asarray(X, dtype=float) * factors


@dataclass(frozen=True)
class FittedModel:
    """Binomial model at a single lambda: P(y=1|x) = sigmoid(x . coef + intercept)."""

    coef: np.ndarray
    intercept: float
    lam: float
    alpha: float
    feature_names: Optional[Tuple[str, ...]] = None
    converged: bool = True

    @property
    def n_features(self) -> int:
        return int(self.coef.shape[0])

    @property
    def n_nonzero(self) -> int:
        return int(np.count_nonzero(self.coef))

    def decision_function(self, X) -> np.ndarray:
        if X.shape[1] != self.n_features:
            raise DimensionMismatchError(
                f"model expects {self.n_features} features, got {X.shape[1]}"
            )
        return np.asarray(X @ self.coef).ravel() + self.intercept

    def predict_proba(self, X) -> np.ndarray:
        """Probability of the positive class, one value per row."""
        return expit(self.decision_function(X))

    def top_features(self, n: int = 10):
        """(name, weight) pairs with the largest |weight|, nonzero only."""
        names = self.feature_names or tuple(str(i) for i in range(self.n_features))
        order = np.argsort(-np.abs(self.coef), kind="stable")
        return [(names[i], float(self.coef[i])) for i in order[:n] if self.coef[i] != 0]


class ElasticNetLogisticRegression:
    """Binomial regression with elastic-net penalty at a fixed lambda.

    Minimizes  mean log-loss + lam * (alpha * |b|_1 + (1 - alpha) / 2 * |b|_2^2)
    (glmnet's parameterization), solved with scikit-learn's saga solver using
    C = 1 / (n_samples * lam). The intercept is not penalized.

    With standardize (default, as in glmnet) the penalty applies to the
    coefficients of unit-variance columns; the returned coefficients are on
    the original scale, so the model scores raw feature rows.

    params:
      - lam:      regularization strength (> 0)
      - alpha:    elastic-net mixing, 1.0 = lasso, towards 0 = ridge
      - standardize: scale columns to unit variance before fitting
      - max_iter, tol: saga stopping rule
      - random_state: seed for saga's sample order
    """

    def __init__(self, **params: Dict[str, Any]):
        self.p = params
        self.model: Optional[FittedModel] = None

    def _estimator(self, n_samples: int, lam: float, alpha: float) -> LogisticRegression:
        kw = dict(
            solver="saga",
            l1_ratio=alpha,
            C=1.0 / (n_samples * lam),
            max_iter=self.p.get("max_iter", 1000),
            tol=self.p.get("tol", 1e-4),
            random_state=self.p.get("random_state", 0),
        )
        if not _PENALTY_DEPRECATED:
            kw["penalty"] = "elasticnet"
        return LogisticRegression(**kw)

    def fit(self, X, y, feature_names: Optional[Sequence[str]] = None):
        y = np.asarray(y).astype(int)
        if X.shape[0] != y.shape[0]:
            raise DimensionMismatchError(
                f"X has {X.shape[0]} rows but y has {y.shape[0]} labels"
            )
        if np.unique(y).size < 2:
            raise DegenerateSplitError("training labels contain a single class")

        lam = float(self.p["lam"])
        alpha = float(self.p.get("alpha", 1.0))
        scale = column_scale(X) if self.p.get("standardize", True) else np.ones(X.shape[1])

        cls = self._estimator(X.shape[0], lam, alpha)
        with warnings.catch_warnings(), np.errstate(over="ignore", invalid="ignore"):
            # recorded below through n_iter_
            warnings.simplefilter("ignore", ConvergenceWarning)
            cls.fit(scale_columns(X, 1.0 / scale), y)

        coef = cls.coef_.ravel().astype(float) / scale
        intercept = float(cls.intercept_[0])
        if not (np.all(np.isfinite(coef)) and np.isfinite(intercept)):
            raise NonConvergenceError(
                f"non-finite coefficients at lambda={lam:.6g}", lam=lam
            )
        converged = bool(np.max(cls.n_iter_) < cls.max_iter)
        if not converged:
            logger.debug("saga hit max_iter=%d at lambda=%.6g", cls.max_iter, lam)

        self.model = FittedModel(
            coef=coef,
            intercept=intercept,
            lam=lam,
            alpha=alpha,
            feature_names=tuple(feature_names) if feature_names is not None else None,
            converged=converged,
        )
        return self

    def predict_proba(self, X) -> np.ndarray:
        if self.model is None:
            raise RuntimeError("Model has not been fitted. Call fit() first.")
        return self.model.predict_proba(X)

    def predict(self, X, threshold: float = 0.5) -> np.ndarray:
        return (self.predict_proba(X) >= threshold).astype(int)


def create_logistic_regression_factory(defaults: Optional[Dict[str, Any]] = None):
    defaults = dict(defaults or {})

    def factory(params: Dict[str, Any]):
        return ElasticNetLogisticRegression(**{**defaults, **params})

    return factory
