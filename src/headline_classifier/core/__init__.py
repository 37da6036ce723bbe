# Core components: data partitioning and metrics

from .cross_validation import Split, stratified_kfold_indices, train_test_indices
from .metrics import (
    ConfusionMatrix,
    accuracy_score,
    binomial_deviance,
    cohen_kappa_score,
    compute_all_metrics,
    confusion_matrix,
    f1_score,
    misclassification_error,
    precision_score,
    recall_score,
    specificity_score,
)

__all__ = [
    "Split",
    "train_test_indices",
    "stratified_kfold_indices",
    "ConfusionMatrix",
    "confusion_matrix",
    "accuracy_score",
    "precision_score",
    "recall_score",
    "specificity_score",
    "f1_score",
    "cohen_kappa_score",
    "compute_all_metrics",
    "binomial_deviance",
    "misclassification_error",
]
