import numpy as np

from sklloyd import LloydKMeans, closest_point_index

# X is an (n_samples, n_features) matrix
X = np.random.rand(200, 2)
C_init = np.array([[1, 0], [0, 1]], dtype=np.float64)
model = LloydKMeans(n_clusters=2, init=C_init, verbose=1)
labels = model.fit_predict(X)
print("labels:", labels[:20])
print("centers:\n", model.cluster_centers_)
print("n_iter:", model.n_iter_, "converged:", model.converged_)
print("inertia per iteration:", model.inertia_history_)
print("samples in cluster 0:", model.get_indices_with_label(0)[:10])
print("variance summary:", model.compute_mle_variance(X))
# predict on new data
X_new = np.random.rand(5, 2)
print("predicted clusters:", model.predict(X_new))
# transform gives the distance matrix
print("distances:\n", model.transform(X_new))
print("sample closest to the first center:", closest_point_index(X, model.cluster_centers_[0]))

# ---- k-means++ seeding, non-deterministic ----
print("\n=== k-means++ demo ===")
X = np.random.rand(2000, 2)
pp_model = LloydKMeans(n_clusters=5, init="k-means++", deterministic=False, max_iter=100, verbose=1)
pp_model.fit(X)
print("centers:\n", pp_model.cluster_centers_)
