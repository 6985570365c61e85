""" Containers for paired input-output data.

The emulators are trained on matched (inputs, outputs) samples. Depending on where the data comes from,
samples may be stored along the columns (eg. ensembles, which are (n_parameters, n_ensemble)) or along
the rows (eg. the usual (n_samples, n_features) convention), so we keep track of the orientation explicitly.
"""
from __future__ import annotations

import logging

import attrs
import numpy as np
import numpy.typing as npt

logger = logging.getLogger(__name__)


def to_readonly_array(value: npt.ArrayLike) -> npt.NDArray[np.float64]:
    """ Copy the values into a float64 array which can't be modified in place. """
    arr = np.array(value, dtype=np.float64, copy=True)
    arr.flags.writeable = False
    return arr


@attrs.frozen(eq=False)
class PairedDataset:
    """ Matched input and output samples.

    Attributes:
        inputs: Input (parameter) samples. Shape: (input_dim, n_samples) if data_are_columns, else (n_samples, input_dim).
        outputs: Output samples. Shape: (output_dim, n_samples) if data_are_columns, else (n_samples, output_dim).
        data_are_columns: True if each column is one sample.
    """
    inputs: npt.NDArray[np.float64] = attrs.field(converter=to_readonly_array)
    outputs: npt.NDArray[np.float64] = attrs.field(converter=to_readonly_array)
    data_are_columns: bool = attrs.field(default=True, kw_only=True)

    def __attrs_post_init__(self) -> None:
        for name, arr in [("inputs", self.inputs), ("outputs", self.outputs)]:
            if arr.ndim != 2:
                msg = f"{name} must be a 2D matrix, but received shape {arr.shape}"
                raise ValueError(msg)
        sample_axis = self._sample_axis
        if self.inputs.shape[sample_axis] != self.outputs.shape[sample_axis]:
            msg = (
                f"Mismatch in number of samples between inputs ({self.inputs.shape[sample_axis]})"
                f" and outputs ({self.outputs.shape[sample_axis]}). {self.data_are_columns=}"
            )
            raise ValueError(msg)

    @property
    def _sample_axis(self) -> int:
        return 1 if self.data_are_columns else 0

    @property
    def n_samples(self) -> int:
        return int(self.inputs.shape[self._sample_axis])

    @property
    def input_dim(self) -> int:
        return int(self.inputs.shape[1 - self._sample_axis])

    @property
    def output_dim(self) -> int:
        return int(self.outputs.shape[1 - self._sample_axis])

    def as_columns(self) -> PairedDataset:
        """ Dataset with one sample per column. Returns self if it's already in that orientation. """
        if self.data_are_columns:
            return self
        return type(self)(self.inputs.T, self.outputs.T, data_are_columns=True)

    def as_rows(self) -> PairedDataset:
        """ Dataset with one sample per row. Returns self if it's already in that orientation. """
        if not self.data_are_columns:
            return self
        return type(self)(self.inputs.T, self.outputs.T, data_are_columns=False)
