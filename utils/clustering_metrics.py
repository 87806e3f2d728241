"""
Distance and cluster validation metrics for the segmentation report.

The pairwise distance matrix is built once per dataset variant and then
shared by the hierarchical clustering and by every silhouette computation
of both sweeps. Silhouette widths are scored by scikit-learn on that precomputed
matrix, which also provides the adjusted Rand index used to compare
partitions.

References
----------
[1] Rousseeuw, P.J., "Silhouettes: a graphical aid to the interpretation and
    validation of cluster analysis", 1987, J. Comput. Appl. Math., 20: 53-65.
[2] Hubert, L., Arabie, P., "Comparing partitions", 1985, J. Classification, 2: 193-218.
"""

import numpy as np
import pandas as pd
from scipy.spatial.distance import pdist, squareform
from sklearn.metrics import adjusted_rand_score, silhouette_samples
from typing import Dict, Any, Union


def build_distance_matrix(X: Union[np.ndarray, pd.DataFrame]) -> np.ndarray:
    """
    Computes the pairwise Euclidean distance between every pair of rows.

    Parameters
    ----------
    X : array-like of shape (n_samples, n_features)
        The scaled observation table.

    Returns
    -------
    np.ndarray
        Symmetric (n_samples, n_samples) matrix with a zero diagonal.
    """
    if isinstance(X, pd.DataFrame):
        X = X.values
    X = np.asarray(X, dtype=float)

    if X.ndim != 2 or X.shape[0] < 2:
        raise ValueError("Need a 2-D table with at least two rows to compute distances.")

    # squareform fills the diagonal with exact zeros and mirrors the upper triangle
    return squareform(pdist(X, metric="euclidean"))


def validate_partition(labels: np.ndarray, n_clusters: int) -> np.ndarray:
    """
    Checks that a partition uses exactly the labels 1..n_clusters.

    Parameters
    ----------
    labels : np.ndarray
        One integer label per observation.
    n_clusters : int
        The requested number of clusters.

    Returns
    -------
    np.ndarray
        The labels, as a 1-D integer array.

    Raises
    ------
    ValueError
        If any label is missing or out of range.
    """
    labels = np.asarray(labels).ravel()
    found = set(np.unique(labels).tolist())
    expected = set(range(1, n_clusters + 1))
    if found != expected:
        raise ValueError(
            f"Partition labels {sorted(found)} do not match the expected set 1..{n_clusters}."
        )
    return labels.astype(int)


def silhouette_widths(D: np.ndarray, labels: np.ndarray) -> np.ndarray:
    """
    Computes the silhouette width of every observation.

    Formula
    -------
    s(i) = (b(i) - a(i)) / max(a(i), b(i))
    where a(i) is the mean distance from i to the other members of its own
    cluster and b(i) is the smallest mean distance from i to the members of
    any other cluster.

    A member of a singleton cluster scores 0, as does an observation with
    a(i) = b(i) = 0 (duplicated points).

    Parameters
    ----------
    D : np.ndarray
        Precomputed (n_samples, n_samples) distance matrix.
    labels : np.ndarray
        Cluster label per observation.

    Returns
    -------
    np.ndarray
        Silhouette width per observation, in [-1, 1].
    """
    labels = np.asarray(labels).ravel()
    n_samples = D.shape[0]
    if D.shape != (n_samples, n_samples) or labels.shape[0] != n_samples:
        raise ValueError("Distance matrix and labels disagree on the number of observations.")

    clusters = np.unique(labels)
    n_clusters = len(clusters)
    if not 2 <= n_clusters <= n_samples - 1:
        raise ValueError(
            f"Silhouette needs 2 <= n_clusters <= n_samples - 1 (got {n_clusters} clusters "
            f"for {n_samples} observations)."
        )

    return silhouette_samples(D, labels, metric="precomputed")


def mean_silhouette_width(D: np.ndarray, labels: np.ndarray) -> float:
    """Average silhouette width of a whole partition."""
    return float(np.mean(silhouette_widths(D, labels)))


def compare_partitions(labels_a: np.ndarray, labels_b: np.ndarray) -> Dict[str, Any]:
    """
    Cross-tabulates two partitions of the same observations.

    Parameters
    ----------
    labels_a, labels_b : np.ndarray
        Cluster labels from two methods (or two runs). Label values need not
        correspond; only co-membership matters.

    Returns
    -------
    Dict[str, Any]
        'crosstab' (rows = labels_a, columns = labels_b) and 'ari'.
    """
    labels_a = np.asarray(labels_a).ravel()
    labels_b = np.asarray(labels_b).ravel()
    if labels_a.shape != labels_b.shape:
        raise ValueError("Partitions must cover the same observations.")

    crosstab = pd.crosstab(
        pd.Series(labels_a, name="a"),
        pd.Series(labels_b, name="b"),
    )

    return {
        "crosstab": crosstab,
        "ari": float(adjusted_rand_score(labels_a, labels_b)),
    }
