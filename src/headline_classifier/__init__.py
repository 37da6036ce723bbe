"""
Predicts whether a news headline belongs to a target category from tf-idf
term features and a lexicon sentiment score.

Key modules:
- prepare_dataset: text normalization, labels, Document records
- extract_features: sentiment scoring, vocabulary/tf-idf, feature assembly
- core.cross_validation: seeded train/test split and stratified k-fold
- core.metrics: confusion matrix and binary metrics from scratch
- models.logistic_regression: elastic-net logistic regression at one lambda
- experiments: lambda search, test evaluation, end-to-end pipeline
"""

__version__ = "0.1.0"

from .errors import (
    DegenerateSplitError,
    DimensionMismatchError,
    EmptyVocabularyError,
    HeadlineClassifierError,
    InvalidConfigurationError,
    NonConvergenceError,
)

__all__ = [
    "HeadlineClassifierError",
    "EmptyVocabularyError",
    "DegenerateSplitError",
    "DimensionMismatchError",
    "NonConvergenceError",
    "InvalidConfigurationError",
]
