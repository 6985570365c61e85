"""Tests for selecting observation samples.

"""

from __future__ import annotations

import logging

import numpy as np
import pytest

from bayesian_calibration import observations, random_state

logger = logging.getLogger(__name__)


@pytest.fixture
def observation() -> observations.Observation:
    # Each row is distinct, so we can identify which one was selected
    samples = np.arange(20, dtype=np.float64).reshape(10, 2)
    return observations.Observation(samples=samples, noise_cov=np.eye(2), names=["a", "b"])


def test_reseed_is_reproducible(observation: observations.Observation) -> None:
    first = observations.sample_observation(observation, rng=np.random.default_rng(), reseed=2413798)
    second = observations.sample_observation(observation, rng=np.random.default_rng(), reseed=2413798)

    np.testing.assert_array_equal(first, second)


def test_reseed_modifies_generator_in_place(observation: observations.Observation) -> None:
    rng = np.random.default_rng(1)
    observations.sample_observation(observation, rng=rng, reseed=5)

    # The generator continues from the reseeded state
    reference = np.random.default_rng(5)
    reference.choice(observation.n_samples, size=1, replace=False)
    assert rng.random() == reference.random()


def test_selected_row_is_from_table(observation: observations.Observation) -> None:
    rng = np.random.default_rng(12345)
    for _ in range(20):
        row = observations.sample_observation(observation, rng=rng)
        assert row.shape == (2,)
        assert any(np.array_equal(row, s) for s in observation.samples)


def test_returns_copy() -> None:
    samples = np.array([[1., 2.], [3., 4.]])
    row = observations.sample_observation(samples, rng=np.random.default_rng(0))

    row[:] = -1.

    np.testing.assert_array_equal(samples, [[1., 2.], [3., 4.]])


def test_observation_samples_are_read_only(observation: observations.Observation) -> None:
    with pytest.raises(ValueError, match="read-only"):
        observation.samples[0, 0] = 100.


def test_default_rng_is_used(observation: observations.Observation) -> None:
    random_state.reset_default_rng(seed=7)
    first = observation.sample(reseed=None)
    random_state.reset_default_rng(seed=7)
    second = observations.sample_observation(observation)

    np.testing.assert_array_equal(first, second)


def test_default_rng_is_a_singleton() -> None:
    assert random_state.default_rng() is random_state.default_rng()
    rng = random_state.reset_default_rng(seed=3)
    assert random_state.default_rng() is rng


def test_single_row() -> None:
    row = observations.sample_observation(np.array([[1., 2., 3.]]), rng=np.random.default_rng(0))
    np.testing.assert_array_equal(row, [1., 2., 3.])


@pytest.mark.parametrize("samples", [np.zeros((0, 3)), np.zeros(3)], ids=["empty", "vector"])
def test_invalid_samples_raise(samples: np.ndarray) -> None:
    with pytest.raises(ValueError, match="observation samples|Observation samples"):
        observations.sample_observation(samples, rng=np.random.default_rng(0))


def test_observation_validation() -> None:
    with pytest.raises(ValueError, match="Noise covariance"):
        observations.Observation(samples=np.zeros((3, 2)), noise_cov=np.eye(3))
    with pytest.raises(ValueError, match="2D"):
        observations.Observation(samples=np.zeros(3))
