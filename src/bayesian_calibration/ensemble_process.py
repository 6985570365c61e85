""" Read-only view of an iterative ensemble process (eg. ensemble Kalman inversion).

The process itself (ie. the ensemble update) lives elsewhere. All that we need here is access to the
parameter ensemble and the corresponding model output ensemble for each iteration.

Iterations are zero-indexed. Note that the process stores one more parameter ensemble than output ensembles:
the parameters produced by the most recent update haven't been evaluated by the forward model yet.
"""
from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

import attrs
import numpy as np
import numpy.typing as npt

from bayesian_calibration.data_containers import to_readonly_array

logger = logging.getLogger(__name__)


@runtime_checkable
class IterativeProcessState(Protocol):
    """ Interface for accessing the ensembles of an iterative process. """

    def parameter_ensemble(self, i: int) -> npt.NDArray[np.float64]:
        """ Parameter ensemble for iteration i. Shape: (n_parameters, n_ensemble). """
        ...

    def output_ensemble(self, i: int) -> npt.NDArray[np.float64]:
        """ Model output ensemble for iteration i. Shape: (n_outputs, n_ensemble). """
        ...

    def n_iterations_with_outputs(self) -> int:
        """ Number of iterations for which there is an output ensemble. """
        ...


@attrs.define(eq=False)
class EnsembleHistory:
    """ In-memory history of the parameter and output ensembles of an iterative process.

    Attributes:
        parameters: Parameter ensembles, one per iteration. Each is (n_parameters, n_ensemble).
        outputs: Output ensembles, one per evaluated iteration. Each is (n_outputs, n_ensemble).
    """
    _parameters: list[npt.NDArray[np.float64]] = attrs.field(factory=list)
    _outputs: list[npt.NDArray[np.float64]] = attrs.field(factory=list)

    def __attrs_post_init__(self) -> None:
        # Go through the append methods so that we validate the bookkeeping in one place.
        parameters, outputs = self._parameters, self._outputs
        self._parameters, self._outputs = [], []
        for i, u in enumerate(parameters):
            self.append_parameters(u)
            if i < len(outputs):
                self.append_outputs(outputs[i])
        if len(outputs) > len(parameters):
            msg = f"Received more output ensembles ({len(outputs)}) than parameter ensembles ({len(parameters)})."
            raise ValueError(msg)

    def append_parameters(self, u: npt.ArrayLike) -> None:
        """ Store the parameter ensemble for the next iteration.

        :param u: Parameter ensemble, (n_parameters, n_ensemble).
        """
        if len(self._parameters) > len(self._outputs):
            msg = (
                f"Cannot store parameters for iteration {len(self._parameters)} before the outputs"
                f" for iteration {len(self._parameters) - 1} are available."
            )
            raise ValueError(msg)
        u = to_readonly_array(u)
        if u.ndim != 2:
            msg = f"Parameter ensemble must be 2D (n_parameters, n_ensemble), but received shape {u.shape}"
            raise ValueError(msg)
        self._parameters.append(u)

    def append_outputs(self, g: npt.ArrayLike) -> None:
        """ Store the output ensemble for the most recent parameter ensemble.

        :param g: Output ensemble, (n_outputs, n_ensemble).
        """
        i = len(self._outputs)
        if i >= len(self._parameters):
            msg = f"No parameter ensemble is available for iteration {i}, so can't store its outputs."
            raise ValueError(msg)
        g = to_readonly_array(g)
        if g.ndim != 2:
            msg = f"Output ensemble must be 2D (n_outputs, n_ensemble), but received shape {g.shape}"
            raise ValueError(msg)
        n_ensemble = self._parameters[i].shape[1]
        if g.shape[1] != n_ensemble:
            msg = f"Output ensemble for iteration {i} has {g.shape[1]} members, but the parameter ensemble has {n_ensemble}"
            raise ValueError(msg)
        self._outputs.append(g)

    def _validate_index(self, i: int, n_available: int, kind: str) -> None:
        # NOTE: We explicitly don't allow negative indices. They would silently wrap around
        #       to the most recent iterations.
        if not 0 <= i < n_available:
            msg = f"Iteration {i} is out of range for the {kind} ensembles (available: 0..{n_available - 1})"
            raise IndexError(msg)

    def parameter_ensemble(self, i: int) -> npt.NDArray[np.float64]:
        self._validate_index(i, len(self._parameters), "parameter")
        return self._parameters[i]

    def output_ensemble(self, i: int) -> npt.NDArray[np.float64]:
        self._validate_index(i, len(self._outputs), "output")
        return self._outputs[i]

    def n_iterations_with_outputs(self) -> int:
        return len(self._outputs)

    @property
    def n_iterations(self) -> int:
        """ Number of stored parameter ensembles (which may be one more than the number of outputs). """
        return len(self._parameters)
