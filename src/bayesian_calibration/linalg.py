""" Linear algebra helpers for covariance matrices.

The main functionality is correct_to_positive_definite(), which repairs a covariance matrix which has picked up
asymmetry and/or non-positive eigenvalues (eg. due to numerical noise) before it's used in a likelihood.
"""
from __future__ import annotations

import logging

import numpy as np
import numpy.typing as npt
import scipy.linalg
from scipy.linalg import lapack

logger = logging.getLogger(__name__)


DEFAULT_POSITIVE_DEFINITE_TOL = 1e8 * np.finfo(np.float64).eps


def _validate_square_matrix(mat: npt.ArrayLike) -> npt.NDArray[np.float64]:
    """ Convert to a float64 copy, and check that it's a non-empty, finite square matrix. """
    mat = np.array(mat, dtype=np.float64, copy=True)
    if mat.ndim != 2 or mat.shape[0] != mat.shape[1]:
        msg = f"Require a square matrix, but received shape {mat.shape}"
        raise ValueError(msg)
    if mat.size == 0:
        msg = "Require a non-empty matrix."
        raise ValueError(msg)
    if not np.all(np.isfinite(mat)):
        msg = "Matrix contains non-finite values (nan or inf)."
        raise ValueError(msg)
    return mat


def is_symmetric(mat: npt.ArrayLike) -> bool:
    """ Whether the matrix is exactly equal to its transpose (ie. no tolerance). """
    mat = np.asarray(mat)
    return mat.ndim == 2 and mat.shape[0] == mat.shape[1] and bool(np.array_equal(mat, mat.T))


def is_positive_definite(mat: npt.ArrayLike) -> bool:
    """ Whether the matrix is symmetric and positive-definite.

    Checked by attempting a Cholesky decomposition. We use the bare LAPACK function to avoid
    the scipy.linalg wrapper overhead, since we only care whether it succeeds.
    """
    if not is_symmetric(mat):
        return False
    mat = np.asarray(mat, dtype=np.float64)
    _, info = lapack.dpotrf(mat, clean=False)
    if info < 0:
        msg = 'lapack dpotrf error: '
        msg += f'the {-info}-th argument had an illegal value'
        raise ValueError(msg)
    # info > 0 means that the leading minor of order info is not positive definite
    return info == 0


def correct_to_positive_definite(
    mat: npt.ArrayLike,
    tol: float = DEFAULT_POSITIVE_DEFINITE_TOL,
) -> npt.NDArray[np.float64]:
    """ Make a square matrix symmetric and positive-definite.

    The matrix is first symmetrized as 0.5 * (mat + mat.T) if needed. Quite often, small numerical
    errors are the only source of asymmetry, so if the symmetrized matrix is positive-definite, it's
    returned as is. Otherwise, the minimum eigenvalue is bounded from below by tol by adding
    |min(eigenvalues)| + tol to the diagonal.

    Note:
        The symmetrized matrix is returned without the tol margin when it's already positive-definite,
        while the diagonal shift always includes it. So a matrix which only needed symmetrizing may have
        a minimum eigenvalue smaller than tol.

        tol is absolute, so it can be lost to rounding when it's added to a much larger nugget. eg. for
        diag(1e10, -1e10), the shifted minimum eigenvalue rounds to 0. In that case, the result is only
        positive semi-definite, and tol needs to be scaled to the magnitude of the matrix.

    Args:
        mat: Square matrix to correct.
        tol: Margin added to the diagonal on top of the nugget. Default: 1e8 * machine epsilon.

    Returns:
        Newly allocated symmetric matrix. It's positive-definite as long as tol isn't lost to rounding
            against the nugget (see the note above).

    Raises:
        ValueError: If mat is not a finite square matrix or tol is negative.
        numpy.linalg.LinAlgError: If the eigenvalue computation doesn't converge.
    """
    if tol < 0:
        msg = f"tol must be non-negative, but received {tol=}"
        raise ValueError(msg)
    out = _validate_square_matrix(mat)

    if not is_symmetric(out):
        out = 0.5 * (out + out.T)
        if is_positive_definite(out):
            logger.debug("Symmetrizing was sufficient to make the matrix positive-definite.")
            return out

    eigenvalues = scipy.linalg.eigvalsh(out)
    nugget = np.abs(np.min(eigenvalues))
    logger.debug(f"Adding nugget to diagonal: {nugget=}, {tol=}")
    out[np.diag_indices_from(out)] += nugget + tol
    return out
