"""Initial cluster center strategies.

Both strategies draw from a :class:`numpy.random.RandomState` in a fixed
order, so a seeded generator reproduces the same centers.
"""

import numpy as np
from sklearn.utils import check_random_state

from ._sampling import select_weighted_index


def random_init(X, n_clusters, random_state=None):
    """Place centers uniformly inside the bounding box of ``X``.

    For every center and every feature ``d`` the coordinate is
    ``min[d] + u * (max[d] - min[d])`` with ``u`` uniform in ``[0, 1)``.
    The centers need not coincide with samples.

    Parameters
    ----------
    X : ndarray of shape (n_samples, n_features)
        Data used for the per-feature bounds.
    n_clusters : int
        Number of centers.
    random_state : int, RandomState instance or None, default=None
        Source of the uniform draws.

    Returns
    -------
    centers : ndarray of shape (n_clusters, n_features)
    """
    rng = check_random_state(random_state)
    lower = X.min(axis=0)
    span = X.max(axis=0) - lower
    n_features = X.shape[1]
    centers = np.empty((n_clusters, n_features), dtype=X.dtype)
    for k in range(n_clusters):
        centers[k] = lower + rng.random_sample(n_features) * span
    return centers


def kmeans_plusplus_init(X, n_clusters, random_state=None):
    """Choose initial centers among the samples with k-means++ seeding.

    The first center is a uniformly chosen sample. Each following center is
    drawn with probability proportional to the squared distance of a sample
    to its nearest already chosen center.

    Parameters
    ----------
    X : ndarray of shape (n_samples, n_features)
        Data to pick centers from.
    n_clusters : int
        Number of centers.
    random_state : int, RandomState instance or None, default=None
        Source of the draws.

    Returns
    -------
    centers : ndarray of shape (n_clusters, n_features)
        Initial centers.
    indices : ndarray of shape (n_clusters,)
        Row of ``X`` each center was copied from.

    Raises
    ------
    DegenerateInputError
        If ``X`` holds fewer distinct samples than ``n_clusters``.
    """
    rng = check_random_state(random_state)
    n_samples, n_features = X.shape
    centers = np.empty((n_clusters, n_features), dtype=X.dtype)
    indices = np.empty(n_clusters, dtype=np.intp)

    first = rng.randint(n_samples)
    centers[0] = X[first]
    indices[0] = first
    # squared distance of every sample to its closest chosen center
    closest_d2 = np.sum((X - centers[0]) ** 2, axis=1)
    for c in range(1, n_clusters):
        idx = select_weighted_index(closest_d2, rng)
        centers[c] = X[idx]
        indices[c] = idx
        closest_d2 = np.minimum(closest_d2, np.sum((X - centers[c]) ** 2, axis=1))
    return centers, indices
