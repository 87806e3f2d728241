"""
K-Means with Random Restarts.

Lloyd's algorithm (batch K-Means) repeated from `n_init` independent random
starts, keeping the run with the lowest within-cluster sum of squares. A
single run can settle in a poor local optimum; the restarts guard against it.

References
----------
[1] Lloyd, S.P., "Least squares quantization in PCM", 1982, IEEE Trans.
    Information Theory, 28(2): 129-137.
[2] MacQueen, J., "Some methods for classification and analysis of multivariate
    observations", 1967, Proc. 5th Berkeley Symp. Math. Stat. Prob., pp. 281-297.
"""

import numpy as np
import pandas as pd
from typing import Optional, Tuple, Union


class KMeans:
    """
    K-Means clustering with multiple random restarts.

    Parameters
    ----------
    n_clusters : int
        The number of clusters to form.
    n_init : int, default=50
        Number of independent restarts. The restart with the lowest
        inertia is kept.
    max_iters : int, default=300
        Maximum number of Lloyd iterations for a single restart.
    tol : float, default=1e-4
        Convergence threshold on the squared centroid shift.
    random_state : int, optional
        Seed for the generator shared by all restarts. Two fits with the
        same seed on the same data give identical results.

    Attributes
    ----------
    centroids : np.ndarray
        Centroids of the kept restart, row k-1 for label k.
    labels_ : np.ndarray
        Labels in 1..n_clusters.
    inertia_ : float
        Within-cluster sum of squares of the kept restart.
    n_degenerate_ : int
        Restarts discarded because a cluster ended up empty.
    """

    def __init__(
        self,
        n_clusters: int,
        n_init: int = 50,
        max_iters: int = 300,
        tol: float = 1e-4,
        random_state: Optional[int] = None
    ):
        if n_clusters < 1:
            raise ValueError("n_clusters must be at least 1.")
        if n_init < 1:
            raise ValueError("n_init must be at least 1.")

        self.n_clusters = n_clusters
        self.n_init = n_init
        self.max_iters = max_iters
        self.tol = tol
        self.random_state = random_state
        self.centroids = None
        self.labels_ = None
        self.inertia_ = None
        self.n_degenerate_ = 0

    def _initialize_centroids(self, X: np.ndarray, rng: np.random.RandomState) -> np.ndarray:
        """
        Picks `n_clusters` distinct data points as starting centroids.
        """
        n_samples, _ = X.shape
        indices = rng.choice(n_samples, size=self.n_clusters, replace=False)
        return X[indices].copy()

    def _compute_distances(self, X: np.ndarray, centroids: np.ndarray) -> np.ndarray:
        """
        Squared Euclidean distance from each point to each centroid.

        Returns
        -------
        np.ndarray
            Shape (n_samples, n_clusters).
        """
        return np.sum((X[:, np.newaxis, :] - centroids[np.newaxis, :, :]) ** 2, axis=2)

    def _assign_clusters(self, X: np.ndarray, centroids: np.ndarray) -> np.ndarray:
        """0-based index of the nearest centroid for each sample."""
        distances = self._compute_distances(X, centroids)
        return np.argmin(distances, axis=1)

    def _update_centroids(self, X: np.ndarray, labels: np.ndarray, centroids: np.ndarray) -> np.ndarray:
        """
        Recalculate centroids as the mean of points assigned to them.

        A cluster that lost all its points is re-seeded with the point that
        lies farthest from its current centroid.
        """
        new_centroids = np.zeros((self.n_clusters, X.shape[1]))
        counts = np.bincount(labels, minlength=self.n_clusters)

        for k in range(self.n_clusters):
            if counts[k] > 0:
                new_centroids[k] = np.mean(X[labels == k], axis=0)

        empty = np.flatnonzero(counts == 0)
        if len(empty) > 0:
            point_dists = np.sum((X - centroids[labels]) ** 2, axis=1)
            farthest = np.argsort(point_dists)[::-1]
            for k, idx in zip(empty, farthest):
                new_centroids[k] = X[idx]

        return new_centroids

    def _compute_inertia(self, X: np.ndarray, labels: np.ndarray, centroids: np.ndarray) -> float:
        """
        Within-cluster sum of squares: sum ||x_j - c_i||^2.
        """
        return float(np.sum((X - centroids[labels]) ** 2))

    def _single_run(self, X: np.ndarray, rng: np.random.RandomState) -> Tuple[np.ndarray, np.ndarray, float]:
        """
        One Lloyd run from one random start.

        Returns
        -------
        (centroids, labels, inertia); inertia is inf if a cluster is empty.
        """
        centroids = self._initialize_centroids(X, rng)

        for _ in range(self.max_iters):
            labels = self._assign_clusters(X, centroids)
            new_centroids = self._update_centroids(X, labels, centroids)

            centroid_shift = np.sum((new_centroids - centroids) ** 2)
            centroids = new_centroids

            if centroid_shift < self.tol:
                break

        labels = self._assign_clusters(X, centroids)
        if len(np.unique(labels)) < self.n_clusters:
            return centroids, labels, np.inf

        return centroids, labels, self._compute_inertia(X, labels, centroids)

    def fit(self, X: Union[np.ndarray, pd.DataFrame]):
        """
        Fit the model, keeping the best of `n_init` restarts.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_features)
            Training data (the scaled table).

        Returns
        -------
        self

        Raises
        ------
        RuntimeError
            If every restart ended with an empty cluster.
        """
        if isinstance(X, pd.DataFrame):
            X = X.values
        X = np.asarray(X, dtype=float)

        if self.n_clusters > X.shape[0]:
            raise ValueError(
                f"n_clusters={self.n_clusters} exceeds the number of samples ({X.shape[0]})."
            )

        rng = np.random.RandomState(self.random_state)

        best_centroids, best_labels, best_inertia = None, None, np.inf
        self.n_degenerate_ = 0

        for _ in range(self.n_init):
            centroids, labels, inertia = self._single_run(X, rng)
            if not np.isfinite(inertia):
                self.n_degenerate_ += 1
                continue
            # strict comparison keeps the earliest restart on ties
            if inertia < best_inertia:
                best_centroids, best_labels, best_inertia = centroids, labels, inertia

        if best_labels is None:
            raise RuntimeError(
                f"All {self.n_init} restarts left an empty cluster for k={self.n_clusters}."
            )

        self.centroids = best_centroids
        self.labels_ = best_labels + 1
        self.inertia_ = best_inertia

        return self

    def predict(self, X: Union[np.ndarray, pd.DataFrame]) -> np.ndarray:
        """
        Label of the closest centroid for each sample in X (1-based).
        """
        if self.centroids is None:
            raise ValueError("Model has not been fitted yet. Call fit() first.")

        if isinstance(X, pd.DataFrame):
            X = X.values
        X = np.asarray(X, dtype=float)

        return self._assign_clusters(X, self.centroids) + 1

    def fit_predict(self, X: Union[np.ndarray, pd.DataFrame]) -> np.ndarray:
        """
        Fit the model and return cluster assignments (1-based).
        """
        self.fit(X)
        return self.labels_
