"""
Agglomerative (Hierarchical) Clustering Implementation.

The dendrogram is built once from the precomputed distance matrix with
complete linkage (cluster distance = largest pairwise distance between
members), and each candidate cluster count is obtained by cutting that same
tree. Cutting is linear in the number of observations, so a full sweep
over K never rebuilds the tree.

References
----------
[1] Sorensen, T., "A method of establishing groups of equal amplitude in plant
    sociology based on similarity of species content", 1948, Biol. Skr., 5: 1-34.
[2] Mullner, D., "Modern hierarchical, agglomerative clustering algorithms", 2011,
    arXiv:1109.2378.
"""

import numpy as np
from scipy.cluster.hierarchy import linkage, cut_tree
from scipy.spatial.distance import squareform


def build_dendrogram(D: np.ndarray, method: str = "complete") -> np.ndarray:
    """
    Builds the agglomerative merge tree over all observations.

    Parameters
    ----------
    D : np.ndarray
        Square, symmetric distance matrix with a zero diagonal.
    method : str, default="complete"
        Linkage criterion passed to scipy.

    Returns
    -------
    np.ndarray
        The (n_samples - 1, 4) linkage matrix.
    """
    # linkage() expects the condensed upper triangle, not the square matrix
    condensed = squareform(D, checks=False)
    return linkage(condensed, method=method)


def cut_dendrogram(Z: np.ndarray, n_clusters: int) -> np.ndarray:
    """
    Cuts the tree so that exactly `n_clusters` clusters remain.

    Parameters
    ----------
    Z : np.ndarray
        Linkage matrix from `build_dendrogram`.
    n_clusters : int
        Number of clusters to keep.

    Returns
    -------
    np.ndarray
        Labels in 1..n_clusters, one per observation.
    """
    n_samples = Z.shape[0] + 1
    if not 1 <= n_clusters <= n_samples:
        raise ValueError(f"Cannot cut {n_samples} observations into {n_clusters} clusters.")

    # cut_tree labels are 0-based
    return cut_tree(Z, n_clusters=n_clusters).ravel().astype(int) + 1

