"""Random source and weighted index sampling."""

import numpy as np
from sklearn.utils import check_random_state

from .exceptions import DegenerateInputError


def make_random_source(deterministic=True, seed=0):
    """Create the random generator used for one clustering run.

    Parameters
    ----------
    deterministic : bool, default=True
        If ``True`` the generator is seeded with ``seed`` so repeated runs
        draw the same sequence. If ``False`` it is seeded from OS entropy.
    seed : int, default=0
        Seed used in deterministic mode.

    Returns
    -------
    rng : numpy.random.RandomState
        A fresh generator; never the global numpy singleton.
    """
    if deterministic:
        return check_random_state(int(seed))
    return np.random.RandomState()


def select_weighted_index(weights, random_state=None):
    """Draw an index with probability proportional to its weight.

    The normalised weights are accumulated in their original index order and
    the first index whose cumulative sum exceeds a uniform draw ``r`` in
    ``[0, 1)`` is returned. If floating point rounding leaves no cumulative
    value above ``r``, the last index with non-zero weight is returned.

    Parameters
    ----------
    weights : array-like of shape (n,)
        Non-negative, finite weights, not all zero.
    random_state : int, RandomState instance or None, default=None
        Source of the uniform draw.

    Returns
    -------
    index : int
        Selected position in ``weights``.

    Raises
    ------
    DegenerateInputError
        If the weights are empty, negative, non-finite or all zero.
    """
    weights = np.asarray(weights, dtype=np.float64).ravel()
    if weights.size == 0:
        raise DegenerateInputError("Cannot sample from an empty weight vector.")
    if not np.all(np.isfinite(weights)) or np.any(weights < 0):
        raise DegenerateInputError("Weights must be finite and non-negative.")
    total = weights.sum()
    if total <= 0:
        raise DegenerateInputError(
            "All weights are zero; every candidate already coincides with a "
            "chosen center."
        )
    rng = check_random_state(random_state)
    cumulative = np.cumsum(weights / total)
    r = rng.random_sample()
    index = int(np.searchsorted(cumulative, r, side="right"))
    if index >= weights.size:
        # rounding left cumulative[-1] <= r
        index = int(np.flatnonzero(weights)[-1])
    return index
