""" Observations and selecting a noisy realization of them.

For the MCMC, we need one fixed realization of the observed data. It's selected at random from the available
observation samples, and the selection can be made reproducible by providing a seed.
"""
from __future__ import annotations

import logging

import attrs
import numpy as np
import numpy.typing as npt

from bayesian_calibration import random_state
from bayesian_calibration.data_containers import to_readonly_array

logger = logging.getLogger(__name__)


def _optional_readonly_array(value: npt.ArrayLike | None) -> npt.NDArray[np.float64] | None:
    if value is None:
        return None
    return to_readonly_array(value)


def _optional_names(value: list[str] | tuple[str, ...] | None) -> tuple[str, ...] | None:
    if value is None:
        return None
    return tuple(value)


@attrs.frozen(eq=False)
class Observation:
    """ Samples of the observed data.

    Attributes:
        samples: Observation samples. One realization of the observed quantity per row, (n_samples, output_dim).
        noise_cov: Observational noise covariance, (output_dim, output_dim). Optional.
        names: Names of the observables. Optional.
    """
    samples: npt.NDArray[np.float64] = attrs.field(converter=to_readonly_array)
    noise_cov: npt.NDArray[np.float64] | None = attrs.field(default=None, converter=_optional_readonly_array)
    names: tuple[str, ...] | None = attrs.field(default=None, converter=_optional_names)

    def __attrs_post_init__(self) -> None:
        if self.samples.ndim != 2:
            msg = f"Observation samples must be a 2D matrix (n_samples, output_dim), but received shape {self.samples.shape}"
            raise ValueError(msg)
        if self.noise_cov is not None and self.noise_cov.shape != (self.output_dim, self.output_dim):
            msg = f"Noise covariance must be ({self.output_dim}, {self.output_dim}), but received shape {self.noise_cov.shape}"
            raise ValueError(msg)

    @property
    def n_samples(self) -> int:
        return int(self.samples.shape[0])

    @property
    def output_dim(self) -> int:
        return int(self.samples.shape[1])

    def sample(self, rng: np.random.Generator | None = None, reseed: int | None = None) -> npt.NDArray[np.float64]:
        """ Select one observation sample. See `sample_observation`. """
        return sample_observation(self, rng=rng, reseed=reseed)


def sample_observation(
    observations: Observation | npt.ArrayLike,
    rng: np.random.Generator | None = None,
    reseed: int | None = None,
) -> npt.NDArray[np.float64]:
    """ Select one observation sample (ie. row) at random.

    Args:
        observations: Observation, or a matrix with one observation sample per row.
        rng: Random generator used to select the sample. Default: the process-wide default generator.
        reseed: If provided, `rng` is reseeded in place with this value before selecting the
            sample, which makes the selection reproducible.

    Returns:
        Copy of the selected observation sample.
    """
    samples = observations.samples if isinstance(observations, Observation) else np.asarray(observations)
    if samples.ndim != 2:
        msg = f"Observation samples must be a 2D matrix (n_samples, output_dim), but received shape {samples.shape}"
        raise ValueError(msg)
    n_rows = samples.shape[0]
    if n_rows == 0:
        msg = "No observation samples are available to select from."
        raise ValueError(msg)

    if rng is None:
        rng = random_state.default_rng()
    # Only reseed if we're explicitly given a seed. Otherwise, we continue with the current stream.
    if reseed is not None:
        random_state.reseed(rng, reseed)

    # Only one row is drawn, so without replacement is trivially satisfied
    row_index = int(rng.choice(n_rows, size=1, replace=False)[0])
    logger.debug(f"Selected observation sample {row_index} of {n_rows}")
    return np.array(samples[row_index], copy=True)
