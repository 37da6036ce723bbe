#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Main Experimental Pipeline for headline category classification

Question: does a lexicon sentiment score add anything to TF-IDF term
features when predicting whether a headline belongs to a target category?

The pipeline coordinates:
1. Text normalization and sentiment scoring
2. Vocabulary construction and tf-idf weighting
3. One seeded train/test split shared by both variants
4. Cross-validated training of the baseline (terms only) and combined
   (terms + sentiment) models as two independent runs
5. Test set evaluation of each variant
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence

import numpy as np
import pandas as pd

from ..core.cross_validation import Split, train_test_indices
from ..errors import DegenerateSplitError
from ..extract_features import (
    FeatureMatrix,
    SentimentScorer,
    TermWeighter,
    Vocabulary,
    assemble_features,
)
from ..prepare_dataset import Document, TextNormalizer, build_documents
from .config import PipelineConfig
from .hyperparameter_tuning import ModelTrainer, RegularizationPath, TrainingResult
from .test_evaluation import EvaluationReport, Evaluator

logger = logging.getLogger(__name__)

VARIANTS = ("baseline", "combined")


@dataclass
class VariantResult:
    name: str
    features: FeatureMatrix
    training: TrainingResult
    evaluation: EvaluationReport

    def to_dict(self) -> Dict[str, Any]:
        return {
            "n_features": len(self.features.columns),
            "training": self.training.to_dict(),
            "evaluation": self.evaluation.to_dict(),
        }


@dataclass
class PipelineResult:
    config: PipelineConfig
    documents: List[Document]
    vocabulary: Vocabulary
    split: Split
    variants: Dict[str, VariantResult]

    @property
    def labels(self) -> np.ndarray:
        return np.array([d.label for d in self.documents], dtype=int)

    def summary_frame(self) -> pd.DataFrame:
        rows = []
        for name, v in self.variants.items():
            m = v.evaluation.metrics
            rows.append(
                {
                    "variant": name,
                    "lambda_min": v.training.lambda_min,
                    "n_nonzero": v.training.model.n_nonzero,
                    **{k: m[k] for k in ("accuracy", "precision", "recall", "specificity", "f1", "kappa")},
                }
            )
        return pd.DataFrame(rows)

    def to_dict(self) -> Dict[str, Any]:
        y = self.labels
        return {
            "config": self.config.to_dict(),
            "n_documents": len(self.documents),
            "n_positive": int(y.sum()),
            "n_empty_documents": sum(1 for d in self.documents if not d.normalized_text),
            "vocabulary_size": len(self.vocabulary),
            "min_support": self.vocabulary.min_support,
            "n_train": int(self.split.train.size),
            "n_test": int(self.split.test.size),
            "variants": {k: v.to_dict() for k, v in self.variants.items()},
        }


class ExperimentalPipeline:
    """
    Single-pass pipeline from (text, category) records to evaluated models.

    Every stage returns a new value; nothing is shared or mutated between
    the baseline and combined runs apart from the read-only split.
    """

    def __init__(
        self,
        config: PipelineConfig,
        normalizer: Optional[TextNormalizer] = None,
        scorer: Optional[SentimentScorer] = None,
    ):
        self.config = config.validate()
        self.normalizer = normalizer or TextNormalizer()
        self.scorer = scorer or SentimentScorer()

    def build_term_features(self, texts: Sequence[str], split: Split):
        cfg = self.config
        weighter = TermWeighter(max_sparsity=cfg.max_sparsity, normalize_tf=cfg.normalize_tf)
        if cfg.vocabulary_scope == "train":
            vocab = weighter.fit([texts[i] for i in split.train])
        else:
            vocab = weighter.fit(texts)
        return vocab, weighter.transform(texts)

    def regularization_path(self, X_train, y_train) -> RegularizationPath:
        cfg = self.config
        if cfg.lambda_max is not None:
            lo = cfg.lambda_min if cfg.lambda_min is not None else cfg.lambda_max * cfg.lambda_min_ratio
            return RegularizationPath.geometric(cfg.lambda_max, lo, cfg.n_lambda)
        return RegularizationPath.from_data(
            X_train, y_train, alpha=cfg.alpha, n=cfg.n_lambda, min_ratio=cfg.lambda_min_ratio
        )

    def run_variant(
        self, name: str, features: FeatureMatrix, y: np.ndarray, split: Split
    ) -> VariantResult:
        cfg = self.config
        logger.info("training %s variant on %d features", name, len(features.columns))
        X_train = features.matrix[split.train]
        y_train = y[split.train]

        trainer = ModelTrainer(
            n_folds=cfg.n_folds,
            alpha=cfg.alpha,
            cv_metric=cfg.cv_metric,
            random_state=cfg.seed,
            n_jobs=cfg.n_jobs,
            max_iter=cfg.max_iter,
            threshold=cfg.threshold,
        )
        path = self.regularization_path(X_train, y_train)
        training = trainer.fit(X_train, y_train, path, feature_names=features.columns)

        evaluation = Evaluator(cfg.threshold).evaluate(
            training.model, features.matrix[split.test], y[split.test]
        )
        logger.info(
            "%s: accuracy=%.4f f1=%.4f kappa=%.4f",
            name,
            evaluation.metrics["accuracy"],
            evaluation.metrics["f1"],
            evaluation.metrics["kappa"],
        )
        return VariantResult(name, features, training, evaluation)

    def run(self, records: Sequence[Mapping[str, str]]) -> PipelineResult:
        cfg = self.config
        documents = build_documents(records, cfg.target_category, self.normalizer, self.scorer)
        texts = [d.normalized_text for d in documents]
        y = np.array([d.label for d in documents], dtype=int)
        sentiment = np.array([d.sentiment_score for d in documents], dtype=float)
        logger.info(
            "%d documents, %d in %s", len(documents), int(y.sum()), cfg.target_category
        )

        split = train_test_indices(len(documents), cfg.train_fraction, cfg.seed)
        for part, idx in (("training", split.train), ("test", split.test)):
            if np.unique(y[idx]).size < 2:
                raise DegenerateSplitError(
                    f"{part} partition holds a single class for target {cfg.target_category!r}"
                )
        vocab, term_features = self.build_term_features(texts, split)
        combined = assemble_features(term_features, sentiment)

        variants = {
            "baseline": self.run_variant("baseline", term_features, y, split),
            "combined": self.run_variant("combined", combined, y, split),
        }
        return PipelineResult(cfg, documents, vocab, split, variants)
