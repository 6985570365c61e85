"""
Numerical utilities for Bayesian calibration, emulation, and sampling.

The main functionalities are:
 - extract_training_points() pairs parameter and output ensembles from an iterative ensemble process
 - to_zscore() / from_zscore() standardize values and invert the standardization
 - sample_observation() selects one (reproducible) realization of the observations
 - correct_to_positive_definite() repairs a covariance matrix so it's symmetric and positive-definite
"""
from __future__ import annotations

from bayesian_calibration.data_containers import PairedDataset  # noqa: F401
from bayesian_calibration.ensemble_process import EnsembleHistory, IterativeProcessState  # noqa: F401
from bayesian_calibration.linalg import correct_to_positive_definite  # noqa: F401
from bayesian_calibration.observations import Observation, sample_observation  # noqa: F401
from bayesian_calibration.standardization import (  # noqa: F401
    StandardizationParameters,
    ZeroStandardDeviationError,
    from_zscore,
    to_zscore,
)
from bayesian_calibration.training_points import Explicit, LastK, extract_training_points  # noqa: F401
