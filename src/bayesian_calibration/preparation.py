""" Prepare the inputs for building an emulator and running the MCMC.

This steers the numerical utilities for the common case:
 - extract the training points from the ensemble process,
 - select one fixed realization of the observations for the MCMC,
 - ensure that the observational noise covariance is positive-definite.

A configuration class PreparationConfig provides simple access to the settings.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import attrs
import numpy as np
import yaml

from bayesian_calibration import common_base, linalg, training_points
from bayesian_calibration.ensemble_process import IterativeProcessState
from bayesian_calibration.observations import Observation, sample_observation

logger = logging.getLogger(__name__)


def prepare_emulation_inputs(
    preparation_config: PreparationConfig,
    state: IterativeProcessState,
    observation: Observation,
    rng: np.random.Generator | None = None,
) -> dict[str, Any]:
    """ Prepare the training points, observation sample, and noise covariance.

    Args:
        preparation_config: Configuration for the preparation.
        state: Iterative process state holding the ensembles.
        observation: Observations, optionally including the noise covariance.
        rng: Random generator used to select the observation sample. Default: process-wide default generator.

    Returns:
        Dict with keys "training_points" (PairedDataset), "observation_sample" (np.ndarray), and
            "noise_cov" (np.ndarray, only if the observation provides a noise covariance).
    """
    output: dict[str, Any] = {}

    logger.info("Extracting training points...")
    output["training_points"] = training_points.extract_training_points(
        state=state,
        selector=preparation_config.iteration_selector,
    )
    if output["training_points"].output_dim != observation.output_dim:
        msg = (
            f"Mismatch between the output dimension of the training points ({output['training_points'].output_dim})"
            f" and the observations ({observation.output_dim})"
        )
        raise ValueError(msg)

    logger.info("Selecting observation sample...")
    output["observation_sample"] = sample_observation(
        observation,
        rng=rng,
        reseed=preparation_config.observation_seed,
    )

    if observation.noise_cov is not None:
        logger.info("Correcting noise covariance...")
        output["noise_cov"] = linalg.correct_to_positive_definite(
            observation.noise_cov,
            tol=preparation_config.positive_definite_tol,
        )
    else:
        logger.debug("No noise covariance provided, so skipping correction.")

    return output


@attrs.define
class PreparationConfig(common_base.CommonBase):
    config_file: Path = attrs.field(converter=Path)
    config: dict[str, Any] = attrs.field(init=False)
    iteration_selector: training_points.IterationSelector = attrs.field(init=False)
    observation_seed: int | None = attrs.field(init=False)
    positive_definite_tol: float = attrs.field(init=False)

    def __attrs_post_init__(self) -> None:
        with self.config_file.open() as stream:
            self.config = yaml.safe_load(stream)

        # Retrieve parameters from the config
        try:
            preparation_parameters = self.config["preparation"]
        except (KeyError, TypeError) as e:
            msg = f"Missing 'preparation' section in {self.config_file}"
            raise ValueError(msg) from e
        if not isinstance(preparation_parameters, dict):
            msg = f"The 'preparation' section in {self.config_file} must be a mapping, but received {preparation_parameters!r}"
            raise ValueError(msg)

        if "train_iterations" not in preparation_parameters:
            msg = f"Must specify 'train_iterations' in the 'preparation' section of {self.config_file}"
            raise ValueError(msg)
        self.iteration_selector = training_points.iteration_selector_from_config(
            preparation_parameters["train_iterations"]
        )
        self.observation_seed = preparation_parameters.get("observation_seed", None)
        if self.observation_seed is not None:
            self.observation_seed = int(self.observation_seed)
        self.positive_definite_tol = float(
            preparation_parameters.get("positive_definite_tol", linalg.DEFAULT_POSITIVE_DEFINITE_TOL)
        )
        # Validation
        if self.positive_definite_tol < 0:
            msg = f"positive_definite_tol must be non-negative, but received {self.positive_definite_tol}"
            raise ValueError(msg)
