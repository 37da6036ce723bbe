# -*- coding: utf-8 -*-
"""Pipeline configuration and its validation."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from ..core.metrics import CV_LOSSES
from ..errors import InvalidConfigurationError

VOCABULARY_SCOPES = ("corpus", "train")


@dataclass(frozen=True)
class PipelineConfig:
    """
    Everything the pipeline reads besides the corpus.

    vocabulary_scope="corpus" builds the vocabulary and document frequencies
    over every document before splitting, so test documents influence which
    terms survive pruning; "train" restricts both to the training partition.
    """

    target_category: str = "POLITICS"
    train_fraction: float = 0.8
    seed: int = 42
    n_folds: int = 10
    # lambda grid: explicit bounds, or derived from the data when lambda_max is None
    lambda_max: Optional[float] = None
    lambda_min: Optional[float] = None
    lambda_min_ratio: float = 1e-3
    n_lambda: int = 30
    alpha: float = 1.0
    cv_metric: str = "deviance"
    max_sparsity: float = 0.99
    normalize_tf: bool = False
    threshold: float = 0.5
    vocabulary_scope: str = "corpus"
    n_jobs: int = 1
    max_iter: int = 1000

    def validate(self) -> "PipelineConfig":
        def bad(msg):
            raise InvalidConfigurationError(msg)

        if not self.target_category:
            bad("target_category must be a non-empty string")
        if not 0.0 < self.train_fraction < 1.0:
            bad(f"train_fraction must be in (0, 1), got {self.train_fraction}")
        if self.n_folds < 2:
            bad(f"n_folds must be >= 2, got {self.n_folds}")
        if self.n_lambda < 1:
            bad(f"n_lambda must be >= 1 (empty lambda grid), got {self.n_lambda}")
        if self.lambda_max is not None:
            lo = self.lambda_min if self.lambda_min is not None else self.lambda_max * self.lambda_min_ratio
            if not 0 < lo <= self.lambda_max:
                bad(f"lambda bounds must satisfy 0 < min <= max, got {lo}, {self.lambda_max}")
        elif self.lambda_min is not None:
            bad("lambda_min given without lambda_max")
        if not 0.0 < self.lambda_min_ratio <= 1.0:
            bad(f"lambda_min_ratio must be in (0, 1], got {self.lambda_min_ratio}")
        if not 0.0 < self.alpha <= 1.0:
            bad(f"alpha must be in (0, 1], got {self.alpha}")
        if self.cv_metric not in CV_LOSSES:
            bad(f"cv_metric must be one of {sorted(CV_LOSSES)}, got {self.cv_metric!r}")
        if not 0.0 <= self.max_sparsity < 1.0:
            bad(f"max_sparsity must be in [0, 1), got {self.max_sparsity}")
        if not 0.0 < self.threshold < 1.0:
            bad(f"threshold must be in (0, 1), got {self.threshold}")
        if self.vocabulary_scope not in VOCABULARY_SCOPES:
            bad(f"vocabulary_scope must be one of {VOCABULARY_SCOPES}, got {self.vocabulary_scope!r}")
        if self.max_iter < 1:
            bad(f"max_iter must be >= 1, got {self.max_iter}")
        return self

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PipelineConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise InvalidConfigurationError(f"unknown config keys: {sorted(unknown)}")
        return cls(**data)

    @classmethod
    def from_json(cls, path: str | Path) -> "PipelineConfig":
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_dict(json.load(f))
