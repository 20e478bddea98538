"""K-means clustering with Lloyd's algorithm.

This module implements :class:`LloydKMeans`, a k-means estimator that
alternates nearest-center assignment and center re-estimation until the
label vector stops changing. Initial centers come from k-means++ seeding,
uniform draws inside the data bounding box, or a caller supplied matrix.

The estimator follows the scikit-learn estimator API. Unlike
:class:`sklearn.cluster.KMeans` it stops on an exact fixed point of the
labels rather than on a center-shift tolerance, keeps the previous center of
a cluster that loses all its members, and records the objective of every
iteration in ``inertia_history_``.

References
----------

.. [1] S. Lloyd. *Least squares quantization in PCM*, IEEE Transactions on
   Information Theory, 1982.
.. [2] D. Arthur and S. Vassilvitskii. *k-means++: The Advantages of
   Careful Seeding*, SODA, 2007.
"""

from __future__ import annotations

import warnings
from numbers import Integral

import numpy as np
from sklearn.base import BaseEstimator, ClusterMixin, TransformerMixin, _fit_context
from sklearn.exceptions import ConvergenceWarning
from sklearn.metrics.pairwise import euclidean_distances
from sklearn.utils._param_validation import Interval, InvalidParameterError, StrOptions
from sklearn.utils.validation import _num_samples, check_is_fitted, validate_data

from ._initialization import kmeans_plusplus_init, random_init
from ._label_index import indices_with_label, points_with_label
from ._sampling import make_random_source
from ._variance import compute_mle_variance
from .exceptions import InvalidConfigurationError

# Optional numba acceleration (soft dependency)
try:  # pragma: no cover - optional path
    from numba import njit, prange, set_num_threads  # type: ignore

    _NUMBA_AVAILABLE = True
except Exception:  # pragma: no cover - optional path
    _NUMBA_AVAILABLE = False

###############################################################################
# Helper utilities


def _squared_distances(X, centers):
    # explicit differences: identical points give exactly 0
    diff = X[:, np.newaxis, :] - centers[np.newaxis, :, :]
    return np.einsum("ijk,ijk->ij", diff, diff)


def _assign_labels_numpy(X, centers):
    # argmin returns the first minimum, i.e. the lowest center index on ties
    return np.argmin(_squared_distances(X, centers), axis=1).astype(np.int32)


if _NUMBA_AVAILABLE:  # pragma: no cover - exercised only when numba present

    @njit(parallel=True)
    def _assign_labels_numba(X, centers):  # type: ignore
        n_samples, n_features = X.shape
        n_clusters = centers.shape[0]
        labels = np.empty(n_samples, dtype=np.int32)
        for i in prange(n_samples):
            best = np.inf
            pos = 0
            for k in range(n_clusters):
                d2 = 0.0
                for j in range(n_features):
                    diff = X[i, j] - centers[k, j]
                    d2 += diff * diff
                if d2 < best:
                    best = d2
                    pos = k
            labels[i] = pos
        return labels


def _estimate_new_centers(X, labels, centers):
    """Move every center to the mean of its members.

    A cluster without members keeps its current center.
    """
    new_centers = centers.copy()
    for k in range(centers.shape[0]):
        members = X[labels == k]
        if members.shape[0] > 0:
            new_centers[k] = members.mean(axis=0)
    return new_centers


def _inertia(X, labels, centers):
    return float(np.sum((X - centers[labels]) ** 2))


###############################################################################
# Core estimator: Lloyd's k-means


class LloydKMeans(TransformerMixin, ClusterMixin, BaseEstimator):
    """K-means clustering using Lloyd's algorithm.

    Each iteration assigns every sample to its nearest center (ties go to
    the lowest center index) and then moves every center to the mean of its
    members. Iterations stop once the labels equal those of the previous
    iteration, or after ``max_iter`` iterations.

    Parameters
    ----------
    n_clusters : int, default=8
        The number of clusters to form as well as the number of centroids
        to generate. Must not exceed the number of samples passed to
        :meth:`fit`.
    init : {'k-means++', 'random', 'manual'} or array-like of shape (n_clusters, n_features), default='k-means++'
        Method for initialization.

        * 'k-means++' : pick samples as centers, each new one drawn with
          probability proportional to its squared distance to the nearest
          center already chosen.
        * 'random' : draw each center uniformly inside the per-feature
          bounding box of the data. Centers need not be samples.
        * 'manual' : start from the centers placed with
          :meth:`set_cluster_centers` or left by a previous fit.
        * array-like : user provided initial centers.
    max_iter : int, default=300
        Maximum number of assignment / update iterations. If the labels
        still change after ``max_iter`` iterations a
        :class:`~sklearn.exceptions.ConvergenceWarning` is raised and the
        labeling with the lowest inertia seen is kept.
    deterministic : bool, default=True
        If ``True`` the random generator is seeded with ``random_state`` so
        repeated fits are reproducible. If ``False`` it is seeded from OS
        entropy and ``random_state`` is ignored.
    random_state : int, default=0
        Seed used when ``deterministic=True``.
    use_numba : bool, default=False
        If ``True`` and :mod:`numba` is installed (see ``[speed]`` extra),
        run the assignment step in a JIT-compiled kernel parallel over
        samples.
    numba_threads : int or None, default=None
        If provided sets the number of threads used by numba parallel
        sections. Ignored if numba is unavailable or ``use_numba`` is
        ``False``.
    verbose : int, default=0
        Verbosity level. ``0`` is silent; higher values print progress
        each iteration.

    Attributes
    ----------
    cluster_centers_ : ndarray of shape (n_clusters, n_features)
        Final cluster centers.
    labels_ : ndarray of shape (n_samples,)
        Label of each training sample.
    inertia_ : float
        Sum of squared distances of samples to their assigned center.
    n_iter_ : int
        Number of iterations run.
    converged_ : bool
        Whether the labels reached a fixed point before ``max_iter``.
    inertia_history_ : list of float
        Inertia after each center update. Non-increasing up to floating
        point rounding.
    n_features_in_ : int
        Number of features seen during :meth:`fit`.
    feature_names_in_ : ndarray of shape (`n_features_in_`,)
        Names of features seen during :term:`fit`. Defined only when `X`
        has feature names that are all strings.

    See Also
    --------
    sklearn.cluster.KMeans : Tolerance-based k-means with Elkan and
        multiple restarts.

    Notes
    -----
    The cost of one iteration is :math:`O(n k d)` for ``n`` samples, ``k``
    clusters and ``d`` features. Invalid parameters, including an
    ``n_clusters`` larger than the number of samples, raise
    :class:`~sklloyd.exceptions.InvalidConfigurationError` before any fitted
    attribute is changed.

    Examples
    --------

    >>> from sklloyd import LloydKMeans
    >>> import numpy as np
    >>> X = np.array([[1, 2], [1, 4], [1, 0],
    ...               [10, 2], [10, 4], [10, 0]])
    >>> km = LloydKMeans(n_clusters=2).fit(X)
    >>> km.labels_
    array([1, 1, 1, 0, 0, 0], dtype=int32)
    >>> km.predict([[0, 0], [12, 3]])
    array([1, 0], dtype=int32)
    >>> km.cluster_centers_
    array([[10.,  2.],
           [ 1.,  2.]])
    """

    _parameter_constraints = {
        "n_clusters": [Interval(Integral, 1, None, closed="left")],
        "init": [StrOptions({"k-means++", "random", "manual"}), "array-like"],
        "max_iter": [Interval(Integral, 1, None, closed="left")],
        "deterministic": ["boolean"],
        "random_state": [Interval(Integral, 0, 2**32 - 1, closed="both")],
        "use_numba": ["boolean"],
        "numba_threads": [None, Interval(Integral, 1, None, closed="left")],
        "verbose": ["verbose"],
    }

    def __init__(
        self,
        n_clusters=8,
        *,
        init="k-means++",
        max_iter=300,
        deterministic=True,
        random_state=0,
        use_numba=False,
        numba_threads=None,
        verbose=0,
    ):
        self.n_clusters = n_clusters
        self.init = init
        self.max_iter = max_iter
        self.deterministic = deterministic
        self.random_state = random_state
        self.use_numba = use_numba
        self.numba_threads = numba_threads
        self.verbose = verbose

    def _validate_params(self):
        try:
            super()._validate_params()
        except InvalidParameterError as exc:
            raise InvalidConfigurationError(str(exc)) from exc

    # ------------------------------------------------------------------
    def _check_centers(self, centers, n_features, dtype):
        centers = np.array(centers, dtype=dtype)
        expected = (self.n_clusters, n_features)
        if centers.shape != expected:
            raise InvalidConfigurationError(
                f"The shape of the initial centers {centers.shape} does not "
                f"match (n_clusters, n_features) = {expected}."
            )
        if not np.all(np.isfinite(centers)):
            raise InvalidConfigurationError("Initial centers must be finite.")
        return centers

    def _init_centers(self, X, rng):
        """Initialise cluster centers according to the chosen strategy.

        Parameters
        ----------
        X : ndarray of shape (n_samples, n_features)
            Data matrix.
        rng : RandomState
            Random generator instance.

        Returns
        -------
        centers : ndarray of shape (n_clusters, n_features)
            Initial cluster centers, always a new array.
        """
        n_features = X.shape[1]
        if not isinstance(self.init, str):
            return self._check_centers(self.init, n_features, X.dtype)
        if self.init == "k-means++":
            centers, _ = kmeans_plusplus_init(X, self.n_clusters, random_state=rng)
        elif self.init == "random":
            centers = random_init(X, self.n_clusters, random_state=rng)
        elif self.init == "manual":
            manual = getattr(self, "_manual_centers", None)
            if manual is None:
                manual = getattr(self, "cluster_centers_", None)
            if manual is None:
                raise InvalidConfigurationError(
                    "init='manual' requires cluster centers; call "
                    "set_cluster_centers before fit."
                )
            centers = self._check_centers(manual, n_features, X.dtype)
        else:  # pragma: no cover - guarded by param validation
            raise InvalidConfigurationError(f"Unknown init method {self.init!r}.")
        return centers

    def _assign_labels(self, X, centers):
        if self.use_numba and _NUMBA_AVAILABLE:
            if self.numba_threads is not None:
                set_num_threads(int(self.numba_threads))  # type: ignore
            return _assign_labels_numba(X, centers)  # type: ignore
        return _assign_labels_numpy(X, centers)

    # ------------------------------------------------------------------
    @_fit_context(prefer_skip_nested_validation=True)
    def fit(self, X, y=None):
        """Compute k-means clustering.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_features)
            Training instances.
        y : Ignored
            Present for API consistency.

        Returns
        -------
        self : object
            Fitted estimator.
        """
        n_samples = _num_samples(X)
        if n_samples < self.n_clusters:
            raise InvalidConfigurationError(
                f"n_samples={n_samples} should be >= n_clusters={self.n_clusters}."
            )
        # validate_data(reset=True) rewrites these before initialisation can fail
        input_attrs = ("n_features_in_", "feature_names_in_")
        previous_input = {a: self.__dict__[a] for a in input_attrs if a in self.__dict__}
        try:
            X = validate_data(
                self,
                X,
                accept_sparse=False,
                reset=True,
                dtype=[np.float64, np.float32],
                order="C",
                accept_large_sparse=False,
            )
            rng = make_random_source(self.deterministic, self.random_state)
            centers = self._init_centers(X, rng)
        except Exception:
            for a in input_attrs:
                self.__dict__.pop(a, None)
            self.__dict__.update(previous_input)
            raise
        verbose = self.verbose
        if verbose:
            print("Initialization complete")

        history = []
        best_inertia = np.inf
        best_labels = best_centers = None
        labels_prev = None
        converged = False
        for it in range(self.max_iter):
            labels = self._assign_labels(X, centers)
            centers = _estimate_new_centers(X, labels, centers)
            inertia = _inertia(X, labels, centers)
            history.append(inertia)
            if inertia < best_inertia:
                best_inertia = inertia
                best_labels = labels
                best_centers = centers

            if labels_prev is None:
                n_changed = n_samples
            else:
                n_changed = int(np.count_nonzero(labels != labels_prev))
            if verbose:
                print(f"Iteration {it}, inertia {inertia:<.3e}, {n_changed} labels changed.")
            if labels_prev is not None and n_changed == 0:
                converged = True
                if verbose:
                    print(f"Converged at iteration {it}: strict convergence.")
                break
            labels_prev = labels

        if converged:
            best_labels, best_centers, best_inertia = labels, centers, inertia
        else:
            if verbose:
                print(f"Reached max_iter {self.max_iter} without convergence.")
            warnings.warn(
                "Number of iterations reached max_iter ({}) before the labels "
                "stabilised. Keeping the labeling with the lowest inertia; "
                "consider increasing max_iter.".format(self.max_iter),
                ConvergenceWarning,
                stacklevel=2,
            )

        distinct_clusters = len(np.unique(best_labels))
        if distinct_clusters < self.n_clusters:
            warnings.warn(
                "Number of distinct clusters ({}) found smaller than "
                "n_clusters ({}). Possibly due to duplicate points "
                "in X.".format(distinct_clusters, self.n_clusters),
                ConvergenceWarning,
                stacklevel=2,
            )

        self.cluster_centers_ = best_centers
        self.labels_ = best_labels
        self.inertia_ = float(best_inertia)
        self.n_iter_ = it + 1
        self.converged_ = converged
        self.inertia_history_ = history
        # placed centers are consumed; a later manual fit resumes from these
        self._manual_centers = None
        return self

    def predict(self, X):
        """Predict the closest cluster index for each sample in ``X``.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_features)
            New samples.

        Returns
        -------
        labels : ndarray of shape (n_samples,)
            Index of the closest learned cluster center for each sample.
        """
        check_is_fitted(self, "cluster_centers_")
        X = validate_data(
            self,
            X,
            accept_sparse=False,
            reset=False,
            dtype=[np.float64, np.float32],
            order="C",
            accept_large_sparse=False,
        )
        return self._assign_labels(X, self.cluster_centers_.astype(X.dtype, copy=False))

    def transform(self, X):
        """Compute Euclidean distances of samples to each cluster center.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_features)
            Samples to transform.

        Returns
        -------
        distances : ndarray of shape (n_samples, n_clusters)
        """
        check_is_fitted(self, "cluster_centers_")
        X = validate_data(
            self,
            X,
            accept_sparse=False,
            reset=False,
            dtype=[np.float64, np.float32],
            order="C",
            accept_large_sparse=False,
        )
        return euclidean_distances(X, self.cluster_centers_)

    def fit_predict(self, X, y=None):
        """Fit the model to ``X`` and return cluster indices.

        Equivalent to calling ``fit(X)`` followed by ``predict(X)`` but
        more efficient.
        """
        return self.fit(X, y).labels_

    # ------------------------------------------------------------------
    def set_cluster_centers(self, centers):
        """Place the centers used by the next fit with ``init='manual'``.

        The array is copied. Its shape is checked against ``n_clusters`` and
        the data at fit time. The estimator does not count as fitted until
        :meth:`fit` has run.

        Returns
        -------
        self : object
        """
        self._manual_centers = np.array(centers, dtype=float)
        return self

    def get_indices_with_label(self, label):
        """Return the training sample indices assigned to ``label``."""
        check_is_fitted(self, "labels_")
        return indices_with_label(self.labels_, label)

    def get_points_with_label(self, X, label):
        """Return the rows of the training data ``X`` assigned to ``label``."""
        check_is_fitted(self, "labels_")
        X = np.asarray(X)
        if X.shape[0] != self.labels_.shape[0]:
            raise ValueError(
                f"X has {X.shape[0]} samples but the model was fitted on "
                f"{self.labels_.shape[0]}."
            )
        return points_with_label(X, self.labels_, label)

    def compute_mle_variance(self, X, squared=False):
        """Dispersion of the fitted clusters over the training data ``X``.

        See :func:`sklloyd.compute_mle_variance`; by default the per-cluster
        mean of unsquared distances is summed over clusters.
        """
        check_is_fitted(self, "labels_")
        return compute_mle_variance(X, self.labels_, self.cluster_centers_, squared=squared)
