"""Dispersion statistic over finished clusters."""

import numpy as np


def compute_mle_variance(X, labels, centers, squared=False):
    """Sum of the per-cluster mean distances to the cluster center.

    For every cluster the distances of its members to the center are
    averaged, and the per-cluster averages are summed without weighting by
    cluster size. By default plain Euclidean distances are averaged, so the
    value has the scale of a distance rather than of a variance. With
    ``squared=True`` squared distances are averaged, which gives the
    maximum-likelihood estimate of the spread of a spherical Gaussian
    cluster (summed over features).

    Parameters
    ----------
    X : array-like of shape (n_samples, n_features)
        Clustered data.
    labels : array-like of shape (n_samples,)
        Cluster label of every sample.
    centers : array-like of shape (n_clusters, n_features)
        Cluster centers.
    squared : bool, default=False
        Average squared distances instead of distances.

    Returns
    -------
    variance : float
        Clusters without members contribute 0.
    """
    X = np.asarray(X, dtype=float)
    labels = np.asarray(labels)
    centers = np.asarray(centers, dtype=float)
    if labels.shape[0] != X.shape[0]:
        raise ValueError(
            f"labels has {labels.shape[0]} entries but X has {X.shape[0]} samples."
        )

    overall = 0.0
    for k in range(centers.shape[0]):
        members = X[labels == k]
        if members.shape[0] == 0:
            continue
        d = np.linalg.norm(members - centers[k], axis=1)
        if squared:
            d = d**2
        overall += float(d.mean())
    return overall
