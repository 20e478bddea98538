"""Monte Carlo benchmark: scikit-learn KMeans vs LloydKMeans on 3 blobs.

This script repeatedly generates a Gaussian mixture and compares the
Adjusted Rand Index and the final inertia of scikit-learn's KMeans (single
k-means++ start) with LloydKMeans using k-means++ and random-box
initialisation. It also reports the iteration counts and plots the ARI
distributions when matplotlib is available.

Run:

    python benchmark/benchmark.py

"""

import numpy as np
from sklearn.cluster import KMeans
from sklearn.datasets import make_blobs
from sklearn.metrics import adjusted_rand_score

from sklloyd import LloydKMeans

try:
    import matplotlib.pyplot as plt
    _HAVE_PLT = True
except Exception:
    _HAVE_PLT = False

N_REPEATS = 30  # Monte Carlo repetitions
N_SAMPLES = [500, 300, 200]
CENTERS = [(-5, -2), (0, 0), (5, 5)]
STD = [1.0, 1.5, 1.0]
N_CLUSTERS = 3
MODELS = ["KMeans", "Lloyd k-means++", "Lloyd random"]
ari_results = {name: [] for name in MODELS}
inertia_results = {name: [] for name in MODELS}
n_iter_results = {name: [] for name in MODELS}

for seed in range(N_REPEATS):
    X, y_true = make_blobs(
        n_samples=N_SAMPLES,
        centers=CENTERS,
        cluster_std=STD,
        random_state=seed,
    )
    models = {
        "KMeans": KMeans(n_clusters=N_CLUSTERS, n_init=1, random_state=seed),
        "Lloyd k-means++": LloydKMeans(n_clusters=N_CLUSTERS, random_state=seed),
        "Lloyd random": LloydKMeans(n_clusters=N_CLUSTERS, init="random", random_state=seed),
    }
    for name, model in models.items():
        labels = model.fit_predict(X)
        ari_results[name].append(adjusted_rand_score(y_true, labels))
        inertia_results[name].append(model.inertia_)
        n_iter_results[name].append(model.n_iter_)


def stats(arr):
    return np.mean(arr), np.std(arr)


print("\n=== Monte Carlo Benchmark Results ({} runs) ===".format(N_REPEATS))
for name in MODELS:
    print("{:<16} ARI     : {:.3f} ± {:.3f}".format(name, *stats(ari_results[name])))
    print("{:<16} inertia : {:.1f} ± {:.1f}".format(name, *stats(inertia_results[name])))
    print("{:<16} n_iter  : {:.1f} ± {:.1f}".format(name, *stats(n_iter_results[name])))

if _HAVE_PLT:
    fig, ax = plt.subplots(figsize=(7, 5))
    ax.boxplot(
        [ari_results[name] for name in MODELS],
        tick_labels=MODELS,
        patch_artist=True,
        boxprops=dict(facecolor="lightblue"),
        medianprops=dict(color="red"),
    )
    ax.set_title("Adjusted Rand Index (ARI) Distribution")
    ax.set_ylabel("ARI Score")
    fig.suptitle("Monte Carlo Benchmark ({} runs)".format(N_REPEATS), fontsize=14)
    plt.show()
else:
    print("[Info] matplotlib not available; skipping plots.")
