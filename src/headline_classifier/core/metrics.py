#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Binary classification metrics implemented from scratch.

- Confusion matrix (TP, FP, TN, FN) for labels {0, 1}
- Accuracy, precision, recall, specificity, F1, balanced accuracy
- Cohen's kappa
- Binomial deviance and misclassification error (cross-validation losses)

Ratios whose denominator is zero are undefined and returned as nan rather
than replaced with 0 or 1.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict

import numpy as np

from ..errors import DimensionMismatchError

# probabilities are clipped to [EPS, 1 - EPS] before taking logs (glmnet uses 1e-5)
DEVIANCE_EPS = 1e-5


def _ratio(num: float, den: float) -> float:
    return float(num / den) if den else float("nan")


@dataclass(frozen=True)
class ConfusionMatrix:
    tp: int
    fp: int
    tn: int
    fn: int

    @property
    def total(self) -> int:
        return self.tp + self.fp + self.tn + self.fn

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


def confusion_matrix(y_true: np.ndarray, y_pred: np.ndarray) -> ConfusionMatrix:
    """
    Tabulate binary predictions against ground truth.

    Args:
        y_true: Ground truth labels (0/1)
        y_pred: Predicted labels (0/1)

    Returns:
        ConfusionMatrix with positive class 1
    """
    y_true = np.asarray(y_true).astype(int)
    y_pred = np.asarray(y_pred).astype(int)
    if y_true.shape != y_pred.shape:
        raise DimensionMismatchError("y_true and y_pred must have the same length")

    return ConfusionMatrix(
        tp=int(np.sum((y_true == 1) & (y_pred == 1))),
        fp=int(np.sum((y_true == 0) & (y_pred == 1))),
        tn=int(np.sum((y_true == 0) & (y_pred == 0))),
        fn=int(np.sum((y_true == 1) & (y_pred == 0))),
    )


def accuracy_score(cm: ConfusionMatrix) -> float:
    return _ratio(cm.tp + cm.tn, cm.total)


def precision_score(cm: ConfusionMatrix) -> float:
    return _ratio(cm.tp, cm.tp + cm.fp)


def recall_score(cm: ConfusionMatrix) -> float:
    """Sensitivity / true positive rate."""
    return _ratio(cm.tp, cm.tp + cm.fn)


def specificity_score(cm: ConfusionMatrix) -> float:
    return _ratio(cm.tn, cm.tn + cm.fp)


def f1_score(cm: ConfusionMatrix) -> float:
    # 2TP / (2TP + FP + FN) equals the harmonic mean of precision and recall
    return _ratio(2 * cm.tp, 2 * cm.tp + cm.fp + cm.fn)


def cohen_kappa_score(cm: ConfusionMatrix) -> float:
    """
    Agreement between predictions and truth beyond chance.

    kappa = (p_o - p_e) / (1 - p_e), with p_e computed from the row and
    column marginals of the confusion matrix.
    """
    n = cm.total
    if n == 0:
        return float("nan")
    p_o = (cm.tp + cm.tn) / n
    p_e = ((cm.tp + cm.fp) * (cm.tp + cm.fn) + (cm.fn + cm.tn) * (cm.fp + cm.tn)) / n**2
    return _ratio(p_o - p_e, 1.0 - p_e)


def compute_all_metrics(cm: ConfusionMatrix) -> Dict[str, float]:
    """
    Compute all reported metrics from a confusion matrix.

    Returns:
        Dictionary containing all metrics
    """
    recall = recall_score(cm)
    specificity = specificity_score(cm)
    return {
        "accuracy": accuracy_score(cm),
        "precision": precision_score(cm),
        "recall": recall,
        "specificity": specificity,
        "f1": f1_score(cm),
        "kappa": cohen_kappa_score(cm),
        "balanced_accuracy": (recall + specificity) / 2.0,
        "prevalence": _ratio(cm.tp + cm.fn, cm.total),
    }


def binomial_deviance(y_true: np.ndarray, proba: np.ndarray) -> float:
    """Mean binomial deviance, -2 * mean log-likelihood."""
    y = np.asarray(y_true, dtype=float)
    p = np.clip(np.asarray(proba, dtype=float), DEVIANCE_EPS, 1.0 - DEVIANCE_EPS)
    if y.shape != p.shape:
        raise DimensionMismatchError("y_true and proba must have the same length")
    return float(-2.0 * np.mean(y * np.log(p) + (1.0 - y) * np.log(1.0 - p)))


def misclassification_error(
    y_true: np.ndarray, proba: np.ndarray, threshold: float = 0.5
) -> float:
    y = np.asarray(y_true).astype(int)
    pred = (np.asarray(proba) >= threshold).astype(int)
    if y.shape != pred.shape:
        raise DimensionMismatchError("y_true and proba must have the same length")
    return float(np.mean(y != pred))


CV_LOSSES = {
    "deviance": binomial_deviance,
    "misclassification": misclassification_error,
}
