# -*- coding: utf-8 -*-
"""
Exception types raised by the headline classification pipeline.

Everything derives from HeadlineClassifierError so callers can catch the
whole family; each subclass also derives from the builtin it refines.
"""


class HeadlineClassifierError(Exception):
    """Base class for pipeline errors."""


class InvalidConfigurationError(HeadlineClassifierError, ValueError):
    """Configuration value outside its valid range; checked at pipeline entry."""


class EmptyVocabularyError(HeadlineClassifierError, ValueError):
    """Sparsity pruning removed every term from the vocabulary."""


class DegenerateSplitError(HeadlineClassifierError, ValueError):
    """A training partition holds only one label class."""


class DimensionMismatchError(HeadlineClassifierError, ValueError):
    """Feature matrix rows disagree with the label vector or another matrix."""


class NonConvergenceError(HeadlineClassifierError, RuntimeError):
    """Regression fit produced non-finite coefficients."""

    def __init__(self, message: str, lam: float = None):
        super().__init__(message)
        self.lam = lam
