# -*- coding: utf-8 -*-
"""
Feature extraction for normalized headlines.

- SentimentScorer: sum of lexicon valences over whitespace tokens (AFINN)
- TermWeighter:    pruned vocabulary + sparse tf * ln(N / df) weights
- assemble_features: term weights + sentiment column, row order preserved

All matrices are scipy.sparse CSR; rows follow the order of the input texts.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Sequence, Tuple

import numpy as np
from afinn import Afinn
from scipy import sparse
from sklearn.feature_extraction.text import CountVectorizer

from .errors import DimensionMismatchError, EmptyVocabularyError

logger = logging.getLogger(__name__)

SENTIMENT_COLUMN = "sentiment_score"


# ---------- sentiment ----------
class SentimentScorer:
    """
    Lexicon sentiment score of a normalized text.

    Tokens are split on whitespace, each token's integer valence is looked up
    and the valences are summed. Tokens missing from the lexicon count 0, so
    the empty string (or text without lexicon words) scores exactly 0.0.

    Args:
        lexicon: word -> valence mapping; default is the AFINN English lexicon
        overrides: entries that take precedence over the lexicon
    """

    def __init__(
        self,
        lexicon: Optional[Mapping[str, int]] = None,
        overrides: Optional[Mapping[str, int]] = None,
    ):
        self.lexicon = dict(lexicon) if lexicon is not None else None
        self.overrides = {k.lower(): int(v) for k, v in (overrides or {}).items()}
        self._afinn = Afinn(language="en") if lexicon is None else None

    def valence(self, token: str) -> int:
        if token in self.overrides:
            return self.overrides[token]
        if self.lexicon is not None:
            return int(self.lexicon.get(token, 0))
        return int(self._afinn.score(token))  # 0 if unknown

    def score(self, text: str) -> float:
        return float(sum(self.valence(tok) for tok in text.split()))

    def score_corpus(self, texts: Sequence[str]) -> np.ndarray:
        return np.array([self.score(t) for t in texts], dtype=float)


# ---------- vocabulary / tf-idf ----------
def minimum_support(n_docs: int, max_sparsity: float) -> int:
    """
    Smallest document frequency a term needs to survive pruning.

    A term may be absent from at most max_sparsity of the documents, so it
    must appear in at least ceil((1 - max_sparsity) * N) of them (never
    fewer than one). The product is rounded first so 0.99 with N=100 gives
    1, not 2.
    """
    need = round((1.0 - max_sparsity) * n_docs, 9)
    return max(1, int(math.ceil(need)))


@dataclass(frozen=True)
class Vocabulary:
    terms: Tuple[str, ...]
    document_frequency: np.ndarray
    n_docs: int
    min_support: int

    def __len__(self) -> int:
        return len(self.terms)

    def __contains__(self, term: str) -> bool:
        return term in self.index

    @property
    def index(self) -> Dict[str, int]:
        return {t: i for i, t in enumerate(self.terms)}

    @property
    def idf(self) -> np.ndarray:
        return np.log(self.n_docs / self.document_frequency)


@dataclass(frozen=True)
class FeatureMatrix:
    """Sparse document x feature matrix with ordered column names."""

    matrix: sparse.csr_matrix
    columns: Tuple[str, ...]

    def __post_init__(self):
        if self.matrix.shape[1] != len(self.columns):
            raise DimensionMismatchError(
                f"matrix has {self.matrix.shape[1]} columns but "
                f"{len(self.columns)} names were given"
            )

    @property
    def shape(self) -> Tuple[int, int]:
        return self.matrix.shape

    @property
    def n_rows(self) -> int:
        return self.matrix.shape[0]

    def take(self, rows) -> "FeatureMatrix":
        """Subset of rows, in the given order."""
        return FeatureMatrix(self.matrix[np.asarray(rows, dtype=int)], self.columns)

    def toarray(self) -> np.ndarray:
        return self.matrix.toarray()


class TermWeighter:
    """
    Builds a pruned term vocabulary and tf-idf weighted features.

    weight(t, d) = tf(t, d) * ln(N / df(t)), no smoothing constant: a term
    present in every document gets weight 0. N is the number of documents
    the vocabulary was fitted on. With normalize_tf, tf is divided by the
    document's token count.

    Terms with df < minimum_support(N, max_sparsity) are dropped; columns are
    ordered lexicographically by term.
    """

    def __init__(self, max_sparsity: float = 0.99, normalize_tf: bool = False):
        self.max_sparsity = max_sparsity
        self.normalize_tf = normalize_tf
        self.vocabulary_: Optional[Vocabulary] = None

    def _counter(self, **kw) -> CountVectorizer:
        return CountVectorizer(analyzer=str.split, dtype=np.float64, **kw)

    def fit(self, texts: Sequence[str]) -> Vocabulary:
        n_docs = len(texts)
        min_df = minimum_support(n_docs, self.max_sparsity)
        cv = self._counter(min_df=min_df)
        try:
            counts = cv.fit_transform(texts)
        except ValueError as e:
            # raised by sklearn for an empty or fully pruned vocabulary
            raise EmptyVocabularyError(
                f"no term reaches document frequency {min_df} "
                f"over {n_docs} documents (max_sparsity={self.max_sparsity})"
            ) from e

        terms = tuple(cv.get_feature_names_out())
        df = np.asarray((counts > 0).sum(axis=0)).ravel()
        self.vocabulary_ = Vocabulary(
            terms=terms, document_frequency=df, n_docs=n_docs, min_support=min_df
        )
        logger.info(
            "vocabulary: %d terms kept (min support %d of %d docs)",
            len(terms), min_df, n_docs,
        )
        return self.vocabulary_

    def transform(self, texts: Sequence[str]) -> FeatureMatrix:
        if self.vocabulary_ is None:
            raise RuntimeError("TermWeighter has not been fitted. Call fit() first.")
        vocab = self.vocabulary_
        cv = self._counter(vocabulary=vocab.index)
        tf = cv.transform(texts).tocsr()

        if self.normalize_tf and tf.shape[0]:
            lengths = np.array([len(t.split()) for t in texts], dtype=float)
            inv = np.divide(1.0, lengths, out=np.zeros_like(lengths), where=lengths > 0)
            tf = sparse.diags(inv) @ tf

        weights = (tf @ sparse.diags(vocab.idf)).tocsr()
        return FeatureMatrix(weights, vocab.terms)

    def fit_transform(self, texts: Sequence[str]) -> FeatureMatrix:
        self.fit(texts)
        return self.transform(texts)


# ---------- assembly ----------
def assemble_features(term_features: FeatureMatrix, sentiment) -> FeatureMatrix:
    """Append the sentiment score as the last column; rows keep their order."""
    col = np.asarray(sentiment, dtype=float).reshape(-1, 1)
    if col.shape[0] != term_features.n_rows:
        raise DimensionMismatchError(
            f"term matrix has {term_features.n_rows} rows, "
            f"sentiment vector has {col.shape[0]}"
        )
    X = sparse.hstack([term_features.matrix, sparse.csr_matrix(col)], format="csr")
    return FeatureMatrix(X, term_features.columns + (SENTIMENT_COLUMN,))
