""" Process-wide default random generator.

The generator is created on first use and then reused for the lifetime of the process, so that
callers who don't pass a generator still get a continuous pseudo-random stream. Anything which
needs to be reproducible (tests, a fixed observation for an MCMC run) should pass an explicit
generator or a seed.

Not thread safe: callers sharing the default generator across threads need to serialize access.
"""
from __future__ import annotations

import logging

import numpy as np

logger = logging.getLogger(__name__)


_default_rng: np.random.Generator | None = None


def default_rng() -> np.random.Generator:
    """ Retrieve the process-wide default generator, creating it if needed. """
    global _default_rng  # noqa: PLW0603
    if _default_rng is None:
        _default_rng = np.random.default_rng()
    return _default_rng


def reset_default_rng(seed: int | None = None) -> np.random.Generator:
    """ Replace the process-wide default generator with a freshly created one.

    :param seed: Seed for the new generator. If None, it is seeded from fresh OS entropy.
    :return: The new default generator.
    """
    global _default_rng  # noqa: PLW0603
    _default_rng = np.random.default_rng(seed)
    return _default_rng


def reseed(rng: np.random.Generator, seed: int) -> np.random.Generator:
    """ Reseed a generator in place.

    The generator keeps its bit generator type, but its state is replaced by the state of a
    new bit generator of the same type seeded with `seed`. Since it's modified in place, everyone
    holding a reference to `rng` sees the new stream.

    :param rng: Generator to reseed.
    :param seed: Seed value.
    :return: The same (now reseeded) generator, for convenience.
    """
    bit_generator = rng.bit_generator
    bit_generator.state = type(bit_generator)(seed).state
    logger.debug(f"Reseeded {type(bit_generator).__name__} generator with {seed=}")
    return rng
