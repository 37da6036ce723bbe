#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Prepare news headline records for the classification pipeline:
- Normalize text (lowercase, punctuation/digit removal, stop-words, lemmas)
- Map category to a binary label {other:0, target:1}
- Build immutable Document records in corpus order

Reading the line-delimited JSON corpus is provided as a convenience
(read_records); the pipeline itself only needs (text, category) records.
"""
from __future__ import annotations

import html
import logging
import re
import unicodedata
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Callable, Iterable, List, Mapping, Optional, Sequence

import nltk
import numpy as np
import pandas as pd
from nltk.corpus import stopwords
from nltk.stem import PorterStemmer

logger = logging.getLogger(__name__)

PUNCT_RE = re.compile(r"[^\w\s]|_")
DIGIT_RE = re.compile(r"\d+")
SPACE_RE = re.compile(r"\s+")

# lemma function is re-applied until the token stops changing
_MAX_LEMMA_PASSES = 10


def english_stop_words() -> frozenset:
    """NLTK English stop-word list, fetched on first use if missing."""
    try:
        words = stopwords.words("english")
    except LookupError:
        logger.info("NLTK stopwords corpus not found locally, downloading")
        nltk.download("stopwords", quiet=True)
        words = stopwords.words("english")
    return frozenset(words)


def porter_lemma() -> Callable[[str], str]:
    stemmer = PorterStemmer()
    return stemmer.stem


class TextNormalizer:
    """
    Deterministic text-cleaning transform.

    HTML entities are decoded and the text NFKC-normalized first, then
    (fixed order): lowercase -> strip punctuation -> strip digits ->
    remove stop-words -> collapse whitespace -> lemmatize tokens.

    A lemma that is itself a stop-word is dropped as well, and each lemma is
    taken to its fixed point, so normalize(normalize(x)) == normalize(x).
    The result may be the empty string.

    Args:
        stop_words: Words to remove (default: NLTK English list)
        lemmatize: token -> base form (default: NLTK Porter stemmer)
    """

    def __init__(
        self,
        stop_words: Optional[Iterable[str]] = None,
        lemmatize: Optional[Callable[[str], str]] = None,
    ):
        if stop_words is None:
            stop_words = english_stop_words()
        self.stop_words = frozenset(w.lower() for w in stop_words)
        self._lemma_fn = lemmatize or porter_lemma()
        self._lemma = lru_cache(maxsize=None)(self._lemma_fixed_point)

    def _lemma_fixed_point(self, token: str) -> str:
        for _ in range(_MAX_LEMMA_PASSES):
            lemma = self._lemma_fn(token)
            if lemma == token:
                break
            token = lemma
        return token

    def normalize(self, text: str) -> str:
        s = unicodedata.normalize("NFKC", html.unescape(str(text)))
        s = s.lower()
        s = PUNCT_RE.sub("", s)
        s = DIGIT_RE.sub("", s)
        tokens = [t for t in s.split() if t not in self.stop_words]
        s = SPACE_RE.sub(" ", " ".join(tokens)).strip()
        if not s:
            return ""
        lemmas = (self._lemma(t) for t in s.split(" "))
        return " ".join(t for t in lemmas if t and t not in self.stop_words)

    __call__ = normalize

    def normalize_corpus(self, texts: Sequence[str]) -> List[str]:
        return [self.normalize(t) for t in texts]


def derive_labels(categories: Sequence[str], target_category: str) -> np.ndarray:
    """1 where category equals the target category, else 0 (same order)."""
    return np.array([1 if c == target_category else 0 for c in categories], dtype=int)


@dataclass(frozen=True)
class Document:
    id: str
    raw_text: str
    category: str
    normalized_text: str
    sentiment_score: float
    label: int
    # row of this document in every feature matrix built from the corpus
    row: int


def build_documents(
    records: Sequence[Mapping[str, str]],
    target_category: str,
    normalizer: TextNormalizer,
    scorer,
) -> List[Document]:
    """
    Turn (text, category) records into Documents, preserving order.

    Args:
        records: Mappings with at least "text" and "category" keys
        target_category: Category mapped to label 1
        normalizer: TextNormalizer instance
        scorer: Object with score(normalized_text) -> float

    Returns:
        List of Document in record order
    """
    categories = [str(rec["category"]) for rec in records]
    labels = derive_labels(categories, target_category)
    docs = []
    for i, (rec, category) in enumerate(zip(records, categories)):
        raw = str(rec["text"])
        norm = normalizer.normalize(raw)
        docs.append(
            Document(
                id=str(rec.get("id", i)),
                raw_text=raw,
                category=category,
                normalized_text=norm,
                sentiment_score=float(scorer.score(norm)),
                label=int(labels[i]),
                row=i,
            )
        )
    return docs


def read_records(
    src_path: str | Path,
    text_field: str = "headline",
    category_field: str = "category",
    description_field: Optional[str] = None,
) -> List[dict]:
    """
    Read line-delimited JSON news records into {id, text, category} dicts.

    Rows with missing text or category are dropped. When description_field
    is given, its value is appended to the headline.
    """
    src = Path(src_path)
    df = pd.read_json(src, lines=True)
    missing = [c for c in (text_field, category_field) if c not in df.columns]
    if missing:
        raise KeyError(f"{src} has no column(s) {missing}")

    before = len(df)
    df = df.dropna(subset=[text_field, category_field])
    dropped = before - len(df)
    if dropped:
        logger.info("dropped %d records with missing text/category", dropped)

    text = df[text_field].astype(str)
    if description_field and description_field in df.columns:
        text = text + " " + df[description_field].fillna("").astype(str)
        text = text.str.strip()

    return [
        {"id": str(idx), "text": t, "category": str(c)}
        for idx, t, c in zip(df.index, text, df[category_field])
    ]
