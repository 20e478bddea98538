"""Label queries and brute-force nearest point lookups.

All functions scan the full input; no spatial index is built.
"""

import numpy as np


def indices_with_label(labels, label):
    """Return the ascending sample indices carrying ``label``.

    Parameters
    ----------
    labels : array-like of shape (n_samples,)
        Cluster label of every sample.
    label : int
        Label to look up.

    Returns
    -------
    indices : ndarray of shape (n_matches,)
    """
    return np.flatnonzero(np.asarray(labels) == label)


def points_with_label(X, labels, label):
    """Gather the rows of ``X`` whose label equals ``label``.

    Rows keep the order of their sample index. The result has shape
    ``(0, n_features)`` when no sample carries ``label``.
    """
    X = np.asarray(X)
    return X[indices_with_label(labels, label)]


def _distances_to(X, query):
    X = np.asarray(X, dtype=float)
    query = np.asarray(query, dtype=float).ravel()
    if X.ndim != 2 or X.shape[1] != query.shape[0]:
        raise ValueError(
            f"query has {query.shape[0]} features, expected points of shape "
            f"(n_points, {query.shape[0]}); got {X.shape}."
        )
    return np.linalg.norm(X - query, axis=1)


def closest_point_index(X, query):
    """Index of the row of ``X`` nearest to ``query``.

    Ties resolve to the lowest index.
    """
    distances = _distances_to(X, query)
    if distances.size == 0:
        raise ValueError("Cannot search an empty point set.")
    return int(np.argmin(distances))


def closest_point_distance(X, query, excluded_ids=None):
    """Euclidean distance from ``query`` to the nearest row of ``X``.

    Parameters
    ----------
    X : array-like of shape (n_points, n_features)
        Candidate points.
    query : array-like of shape (n_features,)
        Query point.
    excluded_ids : iterable of int or None, default=None
        Row indices to skip. Each must be in ``[0, n_points)``; negative
        indices are rejected rather than counted from the end.

    Returns
    -------
    distance : float
        ``inf`` when every row is excluded.
    """
    distances = _distances_to(X, query)
    if excluded_ids is not None:
        excluded = np.asarray(list(excluded_ids), dtype=np.intp)
        if np.any(excluded < 0) or np.any(excluded >= distances.shape[0]):
            raise ValueError(
                f"excluded_ids must lie in [0, {distances.shape[0]}); got "
                f"{excluded.tolist()}."
            )
        keep = np.ones(distances.shape[0], dtype=bool)
        keep[excluded] = False
        distances = distances[keep]
    if distances.size == 0:
        return float("inf")
    return float(distances.min())


def closest_point_distance_excluding_id(X, query, excluded_id):
    """Same as :func:`closest_point_distance` with one excluded row."""
    return closest_point_distance(X, query, excluded_ids=[excluded_id])
