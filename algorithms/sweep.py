"""
Cluster-count sweeps.

Each sweep maps a sequence of candidate cluster counts to a list of result
records, one per K, in candidate order:

    {"algorithm": str, "n_clusters": int, "silhouette": float,
     "labels": np.ndarray, ...}

The distance matrix is passed in, never rebuilt here: it is computed once per
dataset variant and reused for every K (and, for the hierarchical sweep, for
the single dendrogram as well).
"""

import numpy as np
import pandas as pd
from tqdm import tqdm
from typing import Any, Dict, Iterable, List, Optional, Union

from algorithms.agg_clustering import build_dendrogram, cut_dendrogram
from algorithms.kmeans import KMeans
from utils.clustering_metrics import mean_silhouette_width, validate_partition


def usable_k_values(k_values: Iterable[int], n_samples: int) -> List[int]:
    """
    Candidate counts for which a silhouette is defined (2 <= K <= N - 1).

    Dropped candidates are reported on the console.
    """
    k_values = list(k_values)
    usable = [k for k in k_values if 2 <= k <= n_samples - 1]
    skipped = [k for k in k_values if k not in usable]
    if skipped:
        print(f"  [Notice] Skipping k={skipped}: not valid for {n_samples} observations.")
    return usable


def sweep_hierarchical(
        D: np.ndarray,
        k_values: Iterable[int],
        linkage_method: str = "complete",
        progress: bool = True,
) -> List[Dict[str, Any]]:
    """
    Complete-linkage sweep: one dendrogram, cut once per candidate K.

    Parameters
    ----------
    D : np.ndarray
        Precomputed distance matrix of the scaled table.
    k_values : Iterable[int]
        Candidate cluster counts.
    linkage_method : str, default="complete"
    progress : bool, default=True
        Show a tqdm progress bar.

    Returns
    -------
    List[Dict[str, Any]]
        One record per usable K.
    """
    k_values = usable_k_values(k_values, D.shape[0])
    Z = build_dendrogram(D, method=linkage_method)

    results = []
    for k in tqdm(k_values, desc="Hierarchical sweep", unit="k", disable=not progress):
        labels = validate_partition(cut_dendrogram(Z, k), k)
        results.append({
            "algorithm": "Hierarchical",
            "linkage": linkage_method,
            "n_clusters": k,
            "silhouette": mean_silhouette_width(D, labels),
            "labels": labels,
        })

    return results


def sweep_kmeans(
        X: Union[np.ndarray, pd.DataFrame],
        D: np.ndarray,
        k_values: Iterable[int],
        n_init: int = 50,
        random_state: Optional[int] = None,
        progress: bool = True,
) -> List[Dict[str, Any]]:
    """
    K-Means sweep: an independent multi-restart fit for every candidate K.

    K-Means works on the coordinates of the scaled table `X`; the distance
    matrix `D` is only used to score each partition.

    Parameters
    ----------
    X : array-like of shape (n_samples, n_features)
        The scaled table.
    D : np.ndarray
        Precomputed distance matrix of `X`.
    k_values : Iterable[int]
        Candidate cluster counts.
    n_init : int, default=50
        Restarts per K.
    random_state : int, optional
        Seed used for every K, so each K's fit is reproducible on its own.
    progress : bool, default=True

    Returns
    -------
    List[Dict[str, Any]]
        One record per usable K, including the kept restart's "inertia".
        A K that every restart leaves with an empty cluster (the table has
        fewer distinct rows than K) is skipped with a notice.
    """
    if isinstance(X, pd.DataFrame):
        X = X.values
    if X.shape[0] != D.shape[0]:
        raise ValueError("Feature table and distance matrix disagree on the number of rows.")

    k_values = usable_k_values(k_values, D.shape[0])

    results = []
    for k in tqdm(k_values, desc="K-Means sweep", unit="k", disable=not progress):
        model = KMeans(n_clusters=k, n_init=n_init, random_state=random_state)
        try:
            labels = validate_partition(model.fit_predict(X), k)
        except RuntimeError as e:
            # fewer distinct rows than k: no restart can fill every cluster
            tqdm.write(f"  [Notice] Skipping k={k}: {e}")
            continue
        results.append({
            "algorithm": "KMeans",
            "n_clusters": k,
            "n_init": n_init,
            "silhouette": mean_silhouette_width(D, labels),
            "inertia": model.inertia_,
            "labels": labels,
        })

    return results
