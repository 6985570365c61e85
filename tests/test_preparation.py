"""Tests for preparing the emulation inputs from a configuration file.

"""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np
import pytest

from bayesian_calibration import ensemble_process, linalg, observations, preparation, training_points

logger = logging.getLogger(__name__)


def _write_config(tmp_path: Path, contents: str) -> Path:
    config_file = tmp_path / "config.yaml"
    config_file.write_text(contents)
    return config_file


def _history() -> ensemble_process.EnsembleHistory:
    rng = np.random.default_rng(123)
    history = ensemble_process.EnsembleHistory()
    for _ in range(4):
        history.append_parameters(rng.normal(size=(2, 6)))
        history.append_outputs(rng.normal(size=(3, 6)))
    history.append_parameters(rng.normal(size=(2, 6)))
    return history


def test_config_last_k(tmp_path: Path) -> None:
    config_file = _write_config(tmp_path, """
preparation:
  train_iterations: 2
  observation_seed: 2413798
  positive_definite_tol: 1.0e-6
""")
    config = preparation.PreparationConfig(config_file=config_file)

    assert config.iteration_selector == training_points.LastK(2)
    assert config.observation_seed == 2413798
    assert config.positive_definite_tol == pytest.approx(1e-6)
    assert "PreparationConfig" in str(config)


def test_config_defaults(tmp_path: Path) -> None:
    config_file = _write_config(tmp_path, """
preparation:
  train_iterations: [0, 2]
""")
    config = preparation.PreparationConfig(config_file=str(config_file))

    assert config.iteration_selector == training_points.Explicit((0, 2))
    assert config.observation_seed is None
    assert config.positive_definite_tol == linalg.DEFAULT_POSITIVE_DEFINITE_TOL


@pytest.mark.parametrize(
    "contents",
    [
        "other: 1\n",
        "preparation:\n",
        "preparation:\n  - 1\n",
        "preparation:\n  observation_seed: 1\n",
        "preparation:\n  train_iterations: abc\n",
        "preparation:\n  train_iterations: 2\n  positive_definite_tol: -1.0\n",
    ],
    ids=["missing_section", "empty_section", "section_is_list", "missing_train_iterations", "invalid_selector", "negative_tol"],
)
def test_config_invalid(tmp_path: Path, contents: str) -> None:
    config_file = _write_config(tmp_path, contents)
    with pytest.raises(ValueError):
        preparation.PreparationConfig(config_file=config_file)


def test_prepare_emulation_inputs(tmp_path: Path) -> None:
    config_file = _write_config(tmp_path, """
preparation:
  train_iterations: 3
  observation_seed: 42
""")
    config = preparation.PreparationConfig(config_file=config_file)
    # Slightly asymmetric and indefinite noise covariance
    noise_cov = np.array([
        [1.0, 2.0, 0.0],
        [2.0 + 1e-12, 1.0, 0.0],
        [0.0, 0.0, 1.0],
    ])
    observation = observations.Observation(samples=np.arange(15, dtype=np.float64).reshape(5, 3), noise_cov=noise_cov)

    output = preparation.prepare_emulation_inputs(config, _history(), observation, rng=np.random.default_rng())

    assert output["training_points"].n_samples == 3 * 6
    assert output["observation_sample"].shape == (3,)
    np.testing.assert_array_equal(output["noise_cov"], output["noise_cov"].T)
    assert np.all(np.linalg.eigvalsh(output["noise_cov"]) > 0)

    # Reproducible due to the seed
    repeated = preparation.prepare_emulation_inputs(config, _history(), observation, rng=np.random.default_rng())
    np.testing.assert_array_equal(output["observation_sample"], repeated["observation_sample"])


def test_prepare_without_noise_cov(tmp_path: Path) -> None:
    config_file = _write_config(tmp_path, "preparation:\n  train_iterations: 1\n")
    config = preparation.PreparationConfig(config_file=config_file)
    observation = observations.Observation(samples=np.zeros((2, 3)))

    output = preparation.prepare_emulation_inputs(config, _history(), observation, rng=np.random.default_rng(0))

    assert "noise_cov" not in output
    assert output["training_points"].n_samples == 6


def test_prepare_output_dim_mismatch(tmp_path: Path) -> None:
    config_file = _write_config(tmp_path, "preparation:\n  train_iterations: 1\n")
    config = preparation.PreparationConfig(config_file=config_file)
    observation = observations.Observation(samples=np.zeros((2, 4)))

    with pytest.raises(ValueError, match="output dimension"):
        preparation.prepare_emulation_inputs(config, _history(), observation, rng=np.random.default_rng(0))
