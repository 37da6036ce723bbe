# Experimental components: lambda search, evaluation, orchestration

from .config import PipelineConfig
from .hyperparameter_tuning import ModelTrainer, RegularizationPath, TrainingResult
from .test_evaluation import EvaluationReport, Evaluator
from .experimental_pipeline import ExperimentalPipeline, PipelineResult, VariantResult

__all__ = [
    "PipelineConfig",
    "ModelTrainer",
    "RegularizationPath",
    "TrainingResult",
    "Evaluator",
    "EvaluationReport",
    "ExperimentalPipeline",
    "PipelineResult",
    "VariantResult",
]
