# cross_validation.py
from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

import numpy as np

from ..errors import DegenerateSplitError, InvalidConfigurationError


@dataclass(frozen=True)
class Split:
    """Disjoint train/test index sets covering range(n)."""

    train: np.ndarray
    test: np.ndarray

    @property
    def n(self) -> int:
        return int(self.train.size + self.test.size)


def train_test_indices(n: int, train_fraction: float = 0.8, seed: int = 42) -> Split:
    """
    Seeded random partition of range(n).

    |train| == round(train_fraction * n) (Python's round). The same (n, seed)
    always gives the same split, so several feature matrices over the same
    documents can share one held-out set. Both index arrays are sorted.
    """
    if not 0.0 < train_fraction < 1.0:
        raise InvalidConfigurationError(
            f"train_fraction must be in (0, 1), got {train_fraction}"
        )
    if n < 0:
        raise InvalidConfigurationError(f"n must be >= 0, got {n}")

    rng = np.random.default_rng(seed)
    perm = rng.permutation(n)
    n_train = int(round(train_fraction * n))
    return Split(train=np.sort(perm[:n_train]), test=np.sort(perm[n_train:]))


def stratified_kfold_indices(
    y: Sequence[int], k: int = 10, seed: int = 42
) -> List[Tuple[np.ndarray, np.ndarray]]:
    """
    Stratified k-fold (train_idx, val_idx) pairs over positions of y.

    Each class is shuffled with a seeded generator and dealt into k
    contiguous chunks whose sizes differ by at most one, so every fold keeps
    roughly the class balance of y.
    """
    if k < 2:
        raise InvalidConfigurationError(f"k must be >= 2, got {k}")
    if len(y) < k:
        raise DegenerateSplitError(f"cannot make {k} folds from {len(y)} samples")

    rng = random.Random(seed)
    buckets: Dict[int, List[int]] = {}
    for i, yi in enumerate(y):
        buckets.setdefault(int(yi), []).append(i)
    for v in buckets.values():
        rng.shuffle(v)

    val_splits: List[List[int]] = [[] for _ in range(k)]
    offset = 0
    for cls in sorted(buckets):
        idxs = buckets[cls]
        size, r = divmod(len(idxs), k)
        start = 0
        for j in range(k):
            # rotate which folds get the remainder so small classes spread out
            fold = (j + offset) % k
            take = size + (1 if j < r else 0)
            val_splits[fold].extend(idxs[start:start + take])
            start += take
        offset += r

    all_idx = np.arange(len(y))
    out = []
    for j in range(k):
        val_idx = np.array(sorted(val_splits[j]), dtype=int)
        train_idx = np.setdiff1d(all_idx, val_idx)
        out.append((train_idx, val_idx))
    return out
