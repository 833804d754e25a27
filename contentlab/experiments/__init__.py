"""A/B experiments: variant generation, storage and result analysis."""

from contentlab.experiments.analyzer import analyze_experiment_results, significance
from contentlab.experiments.store import ExperimentStore, validate_request
from contentlab.experiments.variants import VariantGenerator

__all__ = [
    "ExperimentStore",
    "VariantGenerator",
    "analyze_experiment_results",
    "significance",
    "validate_request",
]
