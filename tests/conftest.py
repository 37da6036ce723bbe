"""Shared test fixtures for headline-classifier tests."""

from __future__ import annotations

import numpy as np
import pytest

from headline_classifier.extract_features import SentimentScorer
from headline_classifier.prepare_dataset import TextNormalizer

# small fixed list so tests never need the NLTK corpus download
STOP_WORDS = {
    "a", "an", "the", "and", "or", "on", "in", "of", "for", "to", "is",
    "are", "was", "with", "at", "by", "it", "this", "that", "be", "as",
}

LEXICON = {"good": 3, "bad": -3, "win": 4, "kill": -3, "love": 3, "crisi": -3}

POLITICS_WORDS = ["senate", "vote", "bill", "election", "congress", "president", "governor"]
FOOD_WORDS = ["recipe", "brunch", "cake", "pasta", "cookie", "dinner", "salad"]
MOOD_WORDS = ["good", "bad", "win", "love", "kill", "today", "week"]


@pytest.fixture
def normalizer() -> TextNormalizer:
    return TextNormalizer(stop_words=STOP_WORDS)


@pytest.fixture
def scorer() -> SentimentScorer:
    return SentimentScorer(lexicon=LEXICON)


@pytest.fixture
def nltk_normalizer() -> TextNormalizer:
    """Normalizer with the default NLTK stop-words; skipped when unavailable."""
    try:
        return TextNormalizer()
    except LookupError:
        pytest.skip("NLTK stopwords corpus not available")


@pytest.fixture
def toy_corpus() -> list[str]:
    """Four normalized documents with hand-computable tf-idf weights."""
    return ["appl banana", "appl cherri", "banana banana", "date"]


@pytest.fixture
def headline_records() -> list[dict]:
    """120 synthetic headlines, half POLITICS, half FOOD."""
    rng = np.random.default_rng(0)
    records = []
    for i in range(120):
        if i % 2 == 0:
            category, words = "POLITICS", POLITICS_WORDS
        else:
            category, words = "FOOD", FOOD_WORDS
        picked = list(rng.choice(words, size=3, replace=False))
        picked.append(str(rng.choice(MOOD_WORDS)))
        text = f"The {picked[0].title()} and {picked[1]}: {picked[2]} on a {picked[3]} day 2024!"
        records.append({"id": f"doc-{i}", "text": text, "category": category})
    return records


@pytest.fixture
def separable_data():
    """100 rows, 50 positive / 50 negative, two features that determine the label."""
    rng = np.random.default_rng(7)
    y = np.array([1] * 50 + [0] * 50)
    X = np.column_stack(
        [
            y + rng.normal(0.0, 0.05, size=100),
            (1 - y) + rng.normal(0.0, 0.05, size=100),
        ]
    )
    return X, y
