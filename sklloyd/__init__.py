"""Public API for the :mod:`sklloyd` package.

The package exposes a k-means estimator running Lloyd's algorithm and the
numeric building blocks it is made of:

* :class:`~sklloyd.LloydKMeans` – k-means with k-means++, random-box or
    manual initialization and exact label convergence.
* :func:`~sklloyd.kmeans_plusplus_init`, :func:`~sklloyd.random_init` –
    initial center strategies.
* :func:`~sklloyd.select_weighted_index` – draw an index proportionally to
    non-negative weights.
* :func:`~sklloyd.indices_with_label`, :func:`~sklloyd.points_with_label`,
    :func:`~sklloyd.closest_point_index`,
    :func:`~sklloyd.closest_point_distance` – label and nearest point
    queries.
* :func:`~sklloyd.compute_mle_variance` – per-cluster dispersion summary.

The estimator follows the scikit-learn estimator API (``fit``, ``predict``,
``transform``).
"""

from ._initialization import kmeans_plusplus_init, random_init
from ._label_index import (
    closest_point_distance,
    closest_point_distance_excluding_id,
    closest_point_index,
    indices_with_label,
    points_with_label,
)
from ._lloyd import LloydKMeans
from ._sampling import make_random_source, select_weighted_index
from ._variance import compute_mle_variance
from .exceptions import DegenerateInputError, InvalidConfigurationError

__all__ = [
    "LloydKMeans",
    "kmeans_plusplus_init",
    "random_init",
    "make_random_source",
    "select_weighted_index",
    "indices_with_label",
    "points_with_label",
    "closest_point_index",
    "closest_point_distance",
    "closest_point_distance_excluding_id",
    "compute_mle_variance",
    "InvalidConfigurationError",
    "DegenerateInputError",
]

__version__ = "0.1.0"
