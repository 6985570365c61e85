""" Standardize values by converting to and from z-scores.

The mean and standard deviation are provided by the caller (ie. they are not estimated here). For a matrix,
the features are along the columns, so each column is transformed with its own (mean, std).
"""
from __future__ import annotations

import logging

import attrs
import numpy as np
import numpy.typing as npt

logger = logging.getLogger(__name__)


class ZeroStandardDeviationError(ValueError):
    """ Error raised when a feature has a standard deviation of zero.

    This usually means that the feature has no variance in the collected data, which needs
    to be addressed upstream rather than papered over with inf or nan.
    """


def _validate_inputs(
    values: npt.ArrayLike,
    mean: npt.ArrayLike,
    std: npt.ArrayLike,
) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64], npt.NDArray[np.float64]]:
    values = np.asarray(values, dtype=np.float64)
    mean = np.asarray(mean, dtype=np.float64)
    std = np.asarray(std, dtype=np.float64)

    if values.ndim not in (1, 2):
        msg = f"Can only standardize a vector or a matrix, but received shape {values.shape}"
        raise ValueError(msg)
    n_features = values.shape[-1]
    for name, arr in [("mean", mean), ("std", std)]:
        if arr.shape != (n_features,):
            msg = f"{name} must be a vector with one entry per feature ({n_features}), but received shape {arr.shape}"
            raise ValueError(msg)

    zero_std_indices = np.flatnonzero(std == 0)
    if zero_std_indices.size > 0:
        msg = f"Standard deviation is zero for feature(s) {zero_std_indices.tolist()}, so cannot standardize."
        raise ZeroStandardDeviationError(msg)

    return values, mean, std


def to_zscore(
    values: npt.ArrayLike,
    mean: npt.ArrayLike,
    std: npt.ArrayLike,
) -> npt.NDArray[np.float64]:
    """ Convert values to z-scores, (x - mean) / std.

    Args:
        values: Vector of shape (n_features,) or matrix of shape (n_samples, n_features).
        mean: Mean of each feature, (n_features,).
        std: Standard deviation of each feature, (n_features,).

    Returns:
        Newly allocated z-scores with the same shape as values.

    Raises:
        ValueError: If the shapes are inconsistent.
        ZeroStandardDeviationError: If any std entry is zero.
    """
    values, mean, std = _validate_inputs(values, mean, std)
    # Broadcasting along the last axis applies each (mean, std) to its own column
    return (values - mean) / std


def from_zscore(
    z_scores: npt.ArrayLike,
    mean: npt.ArrayLike,
    std: npt.ArrayLike,
) -> npt.NDArray[np.float64]:
    """ Convert z-scores back to the original values, z * std + mean.

    See `to_zscore` for the expected shapes and raised errors.
    """
    z_scores, mean, std = _validate_inputs(z_scores, mean, std)
    return z_scores * std + mean


def _to_vector(value: npt.ArrayLike) -> npt.NDArray[np.float64]:
    arr = np.array(value, dtype=np.float64, copy=True, ndmin=1)
    arr.flags.writeable = False
    return arr


@attrs.frozen(eq=False)
class StandardizationParameters:
    """ Mean and standard deviation for each feature.

    Attributes:
        mean: Mean of each feature.
        std: Standard deviation of each feature. Must be non-zero.
    """
    mean: npt.NDArray[np.float64] = attrs.field(converter=_to_vector)
    std: npt.NDArray[np.float64] = attrs.field(converter=_to_vector)

    def __attrs_post_init__(self) -> None:
        if self.mean.ndim != 1 or self.mean.shape != self.std.shape:
            msg = f"mean and std must be vectors of the same length. Received {self.mean.shape=}, {self.std.shape=}"
            raise ValueError(msg)
        zero_std_indices = np.flatnonzero(self.std == 0)
        if zero_std_indices.size > 0:
            msg = f"Standard deviation is zero for feature(s) {zero_std_indices.tolist()}."
            raise ZeroStandardDeviationError(msg)

    @property
    def n_features(self) -> int:
        return int(self.mean.shape[0])

    def to_zscore(self, values: npt.ArrayLike) -> npt.NDArray[np.float64]:
        return to_zscore(values, self.mean, self.std)

    def from_zscore(self, z_scores: npt.ArrayLike) -> npt.NDArray[np.float64]:
        return from_zscore(z_scores, self.mean, self.std)
