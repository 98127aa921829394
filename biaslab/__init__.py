import logging

from ._exceptions import BiasLabError, ConfigurationError
from .config import ComplianceType, DiDScenario, IVScenario
from .dataset import Dataset
from .diagnostics import Assumption, DiagnosticCheck
from .estimators import (
    AsTreated,
    DiDRegression,
    EstimationResult,
    Method,
    SimpleDiD,
    TwoStageLeastSquares,
    estimate,
)
from .generators import generate, generate_did, generate_iv
from .montecarlo import BiasResult, MonteCarloRunner, summarize
from .streams import RandomStream
from .study import DEFAULT_STUDY, bias_table, run_study
from .worlds import WORLDS, get_world

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "BiasLabError", "ConfigurationError",
    "ComplianceType", "DiDScenario", "IVScenario",
    "Dataset", "RandomStream",
    "Assumption", "DiagnosticCheck",
    "generate", "generate_did", "generate_iv",
    "DiDRegression", "SimpleDiD", "AsTreated", "TwoStageLeastSquares",
    "EstimationResult", "Method", "estimate",
    "MonteCarloRunner", "BiasResult", "summarize",
    "run_study", "bias_table", "DEFAULT_STUDY",
    "WORLDS", "get_world",
]
