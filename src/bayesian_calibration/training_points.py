""" Extract training points for the emulator from an iterative ensemble process.

The iterations to use are selected either as the most recent k iterations (LastK) or as an explicit list of
iteration indices (Explicit). The parameter ensembles and output ensembles for those iterations are then
concatenated into a single PairedDataset, with one sample per column.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Union

import attrs
import numpy as np

from bayesian_calibration.data_containers import PairedDataset
from bayesian_calibration.ensemble_process import IterativeProcessState

logger = logging.getLogger(__name__)


def _validate_count(instance: LastK, attribute: attrs.Attribute[int], value: int) -> None:
    # NOTE: bool is a subclass of int, but it's almost certainly a configuration mistake
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        msg = f"Number of iterations must be an integer, but received {value!r}"
        raise ValueError(msg)
    if value < 1:
        msg = f"Need to select at least one iteration, but received {attribute.name}={value}"
        raise ValueError(msg)


@attrs.frozen
class LastK:
    """ Select the most recent `count` iterations which have model outputs.

    Attributes:
        count: Number of iterations.
    """
    count: int = attrs.field(validator=_validate_count)


def _to_indices(value: Sequence[int]) -> tuple[int, ...]:
    return tuple(value)


@attrs.frozen
class Explicit:
    """ Select iterations by their (zero-based) index. Used verbatim and in the given order.

    Attributes:
        indices: Iteration indices.
    """
    indices: tuple[int, ...] = attrs.field(converter=_to_indices)

    @indices.validator
    def _check_indices(self, attribute: attrs.Attribute[tuple[int, ...]], value: tuple[int, ...]) -> None:
        if len(value) == 0:
            msg = "Need to select at least one iteration, but no indices were provided."
            raise ValueError(msg)
        invalid = [v for v in value if isinstance(v, bool) or not isinstance(v, (int, np.integer))]
        if invalid:
            msg = f"Iteration indices must be integers, but received {invalid!r}"
            raise ValueError(msg)


IterationSelector = Union[LastK, Explicit]


def iteration_selector_from_config(value: Any) -> IterationSelector:
    """ Convert a configuration value into an iteration selector.

    :param value: Either an int (number of most recent iterations) or a list of iteration indices.
    :return: The corresponding selector.
    """
    if isinstance(value, (LastK, Explicit)):
        return value
    if isinstance(value, bool):
        msg = f"Unrecognized iteration selection {value!r}. Provide the number of iterations or a list of indices."
        raise ValueError(msg)
    if isinstance(value, (int, np.integer)):
        return LastK(count=int(value))
    if isinstance(value, (list, tuple)) and all(isinstance(v, (int, np.integer)) and not isinstance(v, bool) for v in value):
        return Explicit(indices=value)
    msg = f"Unrecognized iteration selection {value!r}. Provide the number of iterations or a list of indices."
    raise ValueError(msg)


def selected_iterations(state: IterativeProcessState, selector: IterationSelector) -> list[int]:
    """ Determine the iteration indices which are selected.

    For LastK, we only consider iterations with outputs. The final parameter ensemble doesn't have
    corresponding outputs yet, so it's never included.

    :param state: Iterative process state.
    :param selector: Which iterations to select.
    :return: Iteration indices, in the order in which they should be used.
    """
    if isinstance(selector, LastK):
        n_iterations = state.n_iterations_with_outputs()
        # NOTE: If count > n_iterations, the first index will be negative. We intentionally pass it
        #       along so that the state raises an IndexError when it's accessed.
        return list(range(n_iterations - selector.count, n_iterations))
    if isinstance(selector, Explicit):
        return list(selector.indices)
    msg = f"Unrecognized iteration selector {selector!r}"
    raise TypeError(msg)


def extract_training_points(state: IterativeProcessState, selector: IterationSelector) -> PairedDataset:
    """ Extract the training points needed to train the emulator.

    Args:
        state: Iterative process state holding the parameter and output ensembles for each iteration.
        selector: Which iterations to train on.

    Returns:
        Training points, with one sample per column. The inputs are (n_parameters, n_selected_iterations * n_ensemble),
            and the outputs are (n_outputs, n_selected_iterations * n_ensemble).
    """
    iterations = selected_iterations(state, selector)
    logger.debug(f"Extracting training points from iterations {iterations}")

    u_training_points = []
    g_training_points = []
    for i in iterations:
        u_training_points.append(state.parameter_ensemble(i))  # (n_parameters, n_ensemble)
        g_training_points.append(state.output_ensemble(i))  # (n_outputs, n_ensemble)

    training_points = PairedDataset(
        # (n_parameters, n_iterations * n_ensemble)
        np.concatenate(u_training_points, axis=1),
        # (n_outputs, n_iterations * n_ensemble)
        np.concatenate(g_training_points, axis=1),
        data_are_columns=True,
    )
    logger.info(
        f"Extracted {training_points.n_samples} training points from {len(iterations)} iterations"
        f" (input_dim={training_points.input_dim}, output_dim={training_points.output_dim})"
    )
    return training_points
