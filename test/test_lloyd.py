import numpy as np
import pytest
from numpy.testing import assert_allclose, assert_array_equal
from sklearn.datasets import make_blobs
from sklearn.exceptions import ConvergenceWarning, NotFittedError

from sklloyd import DegenerateInputError, InvalidConfigurationError, LloydKMeans
from sklloyd._lloyd import _estimate_new_centers


def _toy_data():
    rng = np.random.RandomState(0)
    X1 = rng.normal(loc=0.0, scale=0.3, size=(30, 2))
    X2 = rng.normal(loc=5.0, scale=0.3, size=(10, 2))  # imbalance
    return np.vstack([X1, X2])


def _four_points():
    return np.array([[0.0, 0.0], [0.0, 1.0], [10.0, 0.0], [10.0, 1.0]])


def test_lloyd_basic_fit_predict():
    X = _toy_data()
    km = LloydKMeans(n_clusters=2, verbose=1)
    km.fit(X)
    assert km.cluster_centers_.shape == (2, 2)
    assert km.labels_.shape == (X.shape[0],)
    assert km.converged_
    assert km.n_iter_ == len(km.inertia_history_)
    # at a fixed point the labels are the nearest-center assignment
    assert_array_equal(km.predict(X), km.labels_)
    assert km.transform(X).shape == (X.shape[0], 2)
    assert_array_equal(km.fit_predict(X), km.labels_)


@pytest.mark.parametrize("init", ["k-means++", "random"])
@pytest.mark.parametrize("n_clusters", [1, 2, 3, 5])
def test_labels_cover_range(init, n_clusters):
    X = _toy_data()
    km = LloydKMeans(n_clusters=n_clusters, init=init).fit(X)
    assert km.labels_.shape == (X.shape[0],)
    assert km.labels_.min() >= 0
    assert km.labels_.max() < n_clusters
    assert km.cluster_centers_.shape == (n_clusters, X.shape[1])
    assert np.all(np.isfinite(km.cluster_centers_))


def test_n_clusters_equal_to_n_samples():
    X = _four_points()
    km = LloydKMeans(n_clusters=4).fit(X)
    assert sorted(km.labels_) == [0, 1, 2, 3]
    assert km.inertia_ == pytest.approx(0.0)


def test_inertia_non_increasing():
    X, _ = make_blobs(n_samples=300, centers=5, random_state=3)
    km = LloydKMeans(n_clusters=5, init="random").fit(X)
    history = np.asarray(km.inertia_history_)
    assert history.shape[0] == km.n_iter_
    assert np.all(np.diff(history) <= 1e-9 * history[0])
    assert km.inertia_ == pytest.approx(history[-1])


def test_manual_init_idempotent():
    X = _toy_data()
    init = X[[0, 35]].copy()
    labels_a = LloydKMeans(n_clusters=2, init=init).fit(X).labels_
    labels_b = LloydKMeans(n_clusters=2, init=init).fit(X).labels_
    assert_array_equal(labels_a, labels_b)
    assert_array_equal(init, X[[0, 35]])

    km = LloydKMeans(n_clusters=2, init="manual").set_cluster_centers(init)
    assert_array_equal(km.fit(X).labels_, labels_a)


def test_manual_init_requires_centers():
    X = _toy_data()
    with pytest.raises(InvalidConfigurationError, match="set_cluster_centers"):
        LloydKMeans(n_clusters=2, init="manual").fit(X)
    km = LloydKMeans(n_clusters=3, init="manual").set_cluster_centers(X[:2])
    with pytest.raises(InvalidConfigurationError, match="shape"):
        km.fit(X)
    with pytest.raises(InvalidConfigurationError, match="shape"):
        LloydKMeans(n_clusters=2, init=X[:3]).fit(X)


def test_four_point_scenario():
    X = _four_points()
    km = LloydKMeans(n_clusters=2, deterministic=True, random_state=0).fit(X)
    labels = km.labels_
    assert labels[0] == labels[1]
    assert labels[2] == labels[3]
    assert labels[0] != labels[2]
    centers = km.cluster_centers_[np.argsort(km.cluster_centers_[:, 0])]
    assert_allclose(centers, [[0.0, 0.5], [10.0, 0.5]])
    assert km.converged_


def test_deterministic_fits_repeat():
    X = _toy_data()
    a = LloydKMeans(n_clusters=3, init="random", random_state=7).fit(X)
    b = LloydKMeans(n_clusters=3, init="random", random_state=7).fit(X)
    assert_array_equal(a.labels_, b.labels_)
    assert_allclose(a.cluster_centers_, b.cluster_centers_)


def test_non_deterministic_mode():
    X = _toy_data()
    km = LloydKMeans(n_clusters=2)
    km.set_params(init="random", deterministic=False)
    km.fit(X)
    assert km.labels_.shape == (X.shape[0],)
    assert km.labels_.max() < 2


def test_max_iter_reports_not_converged():
    X = _toy_data()
    with pytest.warns(ConvergenceWarning, match="max_iter"):
        km = LloydKMeans(n_clusters=2, max_iter=1).fit(X)
    assert not km.converged_
    assert km.n_iter_ == 1
    assert km.labels_.shape == (X.shape[0],)
    assert km.inertia_ == pytest.approx(min(km.inertia_history_))


def test_empty_cluster_keeps_previous_center():
    X = _four_points()
    init = np.array([[0.0, 0.5], [10.0, 0.5], [100.0, 100.0]])
    with pytest.warns(ConvergenceWarning, match="distinct clusters"):
        km = LloydKMeans(n_clusters=3, init=init).fit(X)
    assert_array_equal(km.cluster_centers_[2], [100.0, 100.0])
    assert np.all(np.isfinite(km.cluster_centers_))
    assert set(km.labels_.tolist()) == {0, 1}


def test_estimate_new_centers_empty_cluster():
    X = _four_points()
    centers = np.array([[0.0, 0.0], [10.0, 0.0], [5.0, 5.0]])
    labels = np.array([0, 0, 1, 1], dtype=np.int32)
    new_centers = _estimate_new_centers(X, labels, centers)
    assert_allclose(new_centers[:2], [[0.0, 0.5], [10.0, 0.5]])
    assert_array_equal(new_centers[2], centers[2])
    # the previous centers are left untouched
    assert_array_equal(centers[0], [0.0, 0.0])


def test_invalid_configuration_leaves_state():
    X = _four_points()
    km = LloydKMeans(n_clusters=2).fit(X)
    labels = km.labels_.copy()
    centers = km.cluster_centers_.copy()
    with pytest.raises(InvalidConfigurationError, match="n_samples=4"):
        km.set_params(n_clusters=5).fit(X)
    assert_array_equal(km.labels_, labels)
    assert_array_equal(km.cluster_centers_, centers)


def test_invalid_init_method():
    X = _toy_data()
    with pytest.raises(InvalidConfigurationError, match="init"):
        LloydKMeans(n_clusters=2, init="kmeans").fit(X)
    with pytest.raises(ValueError):
        LloydKMeans(n_clusters=0).fit(X)


def test_degenerate_data_raises_without_fitting():
    X = np.ones((5, 2))
    km = LloydKMeans(n_clusters=2)
    with pytest.raises(DegenerateInputError):
        km.fit(X)
    assert not hasattr(km, "labels_")


def test_use_numba_matches_numpy():
    X = _toy_data()
    ref = LloydKMeans(n_clusters=3).fit(X)
    nb = LloydKMeans(n_clusters=3, use_numba=True, numba_threads=1).fit(X)
    assert_array_equal(ref.labels_, nb.labels_)
    assert_allclose(ref.cluster_centers_, nb.cluster_centers_)


def test_float32_input_keeps_dtype():
    X = _toy_data().astype(np.float32)
    km = LloydKMeans(n_clusters=2).fit(X)
    assert km.cluster_centers_.dtype == np.float32
    assert km.labels_.dtype == np.int32


def test_label_queries_and_variance():
    X = _four_points()
    km = LloydKMeans(n_clusters=2).fit(X)
    left = km.labels_[0]
    assert_array_equal(km.get_indices_with_label(left), [0, 1])
    assert_array_equal(km.get_points_with_label(X, left), X[:2])
    assert km.compute_mle_variance(X) == pytest.approx(1.0)
    assert km.compute_mle_variance(X, squared=True) == pytest.approx(0.5)
    with pytest.raises(ValueError):
        km.get_points_with_label(X[:3], left)


def test_set_cluster_centers_does_not_mark_fitted():
    km = LloydKMeans(n_clusters=2, init="manual")
    km.set_cluster_centers([[0.0, 0.0], [10.0, 0.0]])
    with pytest.raises(NotFittedError):
        km.predict([[0.0, 0.0]])
    with pytest.raises(NotFittedError):
        km.transform([[0.0, 0.0]])
    with pytest.raises(NotFittedError):
        km.get_indices_with_label(0)


def test_manual_init_resumes_from_previous_fit():
    X = _toy_data()
    km = LloydKMeans(n_clusters=2, init=X[[0, 35]].copy()).fit(X)
    labels = km.labels_.copy()
    km.set_params(init="manual").fit(X)
    assert_array_equal(km.labels_, labels)
    # explicitly placed centers take precedence over the fitted ones
    km.set_cluster_centers([[5.0, 5.0], [0.0, 0.0]])
    km.fit(X)
    assert_array_equal(km.labels_, 1 - labels)


def test_failed_fit_keeps_input_bookkeeping():
    X = _four_points()
    km = LloydKMeans(n_clusters=2).fit(X)
    labels = km.labels_.copy()
    X_wide = np.random.RandomState(0).normal(size=(10, 3))
    with pytest.raises(InvalidConfigurationError, match="shape"):
        km.set_params(init=np.zeros((3, 3))).fit(X_wide)
    assert km.n_features_in_ == 2
    assert_array_equal(km.predict(X), labels)

    with pytest.raises(DegenerateInputError):
        km.set_params(init="k-means++").fit(np.ones((5, 3)))
    assert km.n_features_in_ == 2
    assert_array_equal(km.predict(X), labels)


if __name__ == "__main__":
    test_lloyd_basic_fit_predict()
    test_inertia_non_increasing()
    test_manual_init_idempotent()
    test_four_point_scenario()
    test_max_iter_reports_not_converged()
    test_empty_cluster_keeps_previous_center()
    test_invalid_configuration_leaves_state()
