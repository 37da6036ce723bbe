#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Runner for the headline category experiment.

- Run from project root (or after `pip install -e .`).
- Reads a line-delimited JSON news corpus (headline, category, ...).
- Trains the baseline (terms only) and combined (terms + sentiment) models
  on one shared split and writes a JSON summary.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).parent.resolve()
SRC_DIR = ROOT / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from headline_classifier.errors import HeadlineClassifierError  # noqa: E402
from headline_classifier.experiments import ExperimentalPipeline, PipelineConfig  # noqa: E402
from headline_classifier.prepare_dataset import read_records  # noqa: E402


def _build_config(args: argparse.Namespace) -> PipelineConfig:
    """Config file first, then any CLI flag that was given explicitly."""
    base = PipelineConfig.from_json(args.config).to_dict() if args.config else {}
    overrides = {
        "target_category": args.target,
        "train_fraction": args.train_fraction,
        "seed": args.seed,
        "n_folds": args.folds,
        "n_lambda": args.n_lambda,
        "lambda_max": args.lambda_max,
        "lambda_min": args.lambda_min,
        "alpha": args.alpha,
        "cv_metric": args.cv_metric,
        "max_sparsity": args.max_sparsity,
        "threshold": args.threshold,
        "vocabulary_scope": args.vocabulary_scope,
        "n_jobs": args.n_jobs,
    }
    base.update({k: v for k, v in overrides.items() if v is not None})
    return PipelineConfig.from_dict(base)


def _print_summary_table(summary) -> None:
    print("\n" + "=" * 60)
    print("MODEL SUMMARY (test partition)")
    print("=" * 60)
    header = f"{'Variant':10} | {'Acc':>6} | {'Prec':>6} | {'Rec':>6} | {'F1':>6} | {'Kappa':>6}"
    print(header)
    print("-" * len(header))
    for _, row in summary.iterrows():
        print(
            f"{row['variant']:10} | {row['accuracy']:.4f} | {row['precision']:.4f} | "
            f"{row['recall']:.4f} | {row['f1']:.4f} | {row['kappa']:.4f}"
        )
    print("=" * 60)


def main() -> int:
    ap = argparse.ArgumentParser(description="Headline category classifier experiment")
    ap.add_argument("--data", type=Path, required=True, help="Line-delimited JSON corpus")
    ap.add_argument("--config", type=Path, default=None, help="JSON file with PipelineConfig fields")
    ap.add_argument("--results-dir", type=Path, default=Path("results"))
    ap.add_argument("--text-field", default="headline")
    ap.add_argument("--category-field", default="category")
    ap.add_argument("--description-field", default=None, help="Append this field to the headline")
    ap.add_argument("--target", default=None, help="Target category (label 1)")
    ap.add_argument("--train-fraction", type=float, default=None)
    ap.add_argument("--seed", type=int, default=None)
    ap.add_argument("--folds", type=int, default=None)
    ap.add_argument("--n-lambda", type=int, default=None)
    ap.add_argument("--lambda-max", type=float, default=None)
    ap.add_argument("--lambda-min", type=float, default=None)
    ap.add_argument("--alpha", type=float, default=None, help="Elastic-net mixing, 1.0 = lasso")
    ap.add_argument("--cv-metric", choices=["deviance", "misclassification"], default=None)
    ap.add_argument("--max-sparsity", type=float, default=None)
    ap.add_argument("--threshold", type=float, default=None)
    ap.add_argument("--vocabulary-scope", choices=["corpus", "train"], default=None)
    ap.add_argument("--n-jobs", type=int, default=None)
    ap.add_argument("-v", "--verbose", action="store_true")
    args = ap.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="[%(levelname)s] %(name)s: %(message)s",
    )

    try:
        config = _build_config(args)

        print("=" * 60)
        print("STEP 1: Loading Data")
        print("=" * 60)
        records = read_records(
            args.data,
            text_field=args.text_field,
            category_field=args.category_field,
            description_field=args.description_field,
        )
        print(f"[data] rows={len(records)}, target={config.target_category}")

        print("\n" + "=" * 60)
        print("STEP 2: Features, Cross-Validation and Evaluation")
        print("=" * 60)
        result = ExperimentalPipeline(config).run(records)
    except HeadlineClassifierError as e:
        print(f"[error] {type(e).__name__}: {e}", file=sys.stderr)
        return 1

    _print_summary_table(result.summary_frame())

    args.results_dir.mkdir(parents=True, exist_ok=True)
    out_path = args.results_dir / "experiment_summary.json"
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(result.to_dict(), f, ensure_ascii=False, indent=2, allow_nan=False)
    print(f"Saved summary: {out_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
