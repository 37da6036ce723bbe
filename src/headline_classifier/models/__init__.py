# Model implementations

from .logistic_regression import (
    ElasticNetLogisticRegression,
    FittedModel,
    create_logistic_regression_factory,
)

__all__ = [
    "ElasticNetLogisticRegression",
    "FittedModel",
    "create_logistic_regression_factory",
]
