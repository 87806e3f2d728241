"""
Stability check for the hierarchical segmentation.

Removes a small random share of customers, reruns the whole hierarchical
procedure (distance matrix, dendrogram, sweep, best-K selection) on what is
left, and compares the outcome with the full-data result. A segmentation
that is real should survive losing a few percent of the rows: the chosen K
should barely move and the cluster-size profile should look alike.
"""

import numpy as np
import pandas as pd
from typing import Any, Dict, Iterable, Optional, Union

from algorithms.sweep import sweep_hierarchical
from analysis.cluster_summary import select_best_k, relative_sizes
from utils.clustering_metrics import build_distance_matrix, compare_partitions


def sample_rows_to_drop(n_samples: int, drop_fraction: float, random_state: Optional[int]) -> np.ndarray:
    """
    Row positions to remove, drawn uniformly without replacement.

    Returns
    -------
    np.ndarray
        Sorted positions, round(drop_fraction * n_samples) of them.
    """
    if not 0 <= drop_fraction < 1:
        raise ValueError("drop_fraction must be in [0, 1).")

    n_drop = int(round(drop_fraction * n_samples))
    rng = np.random.RandomState(random_state)
    return np.sort(rng.choice(n_samples, size=n_drop, replace=False))


def run_stability_check(
        X_scaled: Union[np.ndarray, pd.DataFrame],
        full_best: Dict[str, Any],
        k_values: Iterable[int],
        drop_fraction: float = 0.05,
        random_state: Optional[int] = None,
        linkage_method: str = "complete",
        progress: bool = True,
) -> Dict[str, Any]:
    """
    Repeats the hierarchical sweep-and-select on a reduced table.

    Parameters
    ----------
    X_scaled : array-like of shape (n_samples, n_features)
        The full scaled table (not rescaled after the rows are removed).
    full_best : Dict[str, Any]
        `select_best_k` output of the full-data hierarchical sweep.
    k_values : Iterable[int]
        The same candidate cluster counts as the full sweep.
    drop_fraction : float, default=0.05
        Share of rows removed.
    random_state : int, optional
        Seed for the row sample.
    linkage_method : str, default="complete"
        Linkage of the full-data sweep, reused for the rerun.

    Returns
    -------
    Dict[str, Any]
        'dropped_rows', 'n_samples_reduced', 'full_k', 'reduced_k',
        'k_shift', 'full_silhouette', 'reduced_silhouette',
        'full_relative_sizes', 'reduced_relative_sizes', 'reduced_labels',
        'ari_on_retained' and the reduced 'sweep'.
    """
    if isinstance(X_scaled, pd.DataFrame):
        X_scaled = X_scaled.values
    n_samples = X_scaled.shape[0]

    dropped = sample_rows_to_drop(n_samples, drop_fraction, random_state)
    keep = np.ones(n_samples, dtype=bool)
    keep[dropped] = False
    X_reduced = X_scaled[keep]

    D_reduced = build_distance_matrix(X_reduced)
    sweep = sweep_hierarchical(D_reduced, k_values, linkage_method=linkage_method, progress=progress)
    reduced_best = select_best_k(sweep)

    full_labels = np.asarray(full_best["labels"])
    agreement = compare_partitions(full_labels[keep], reduced_best["labels"])

    return {
        "dropped_rows": dropped,
        "n_samples_reduced": int(keep.sum()),
        "full_k": full_best["n_clusters"],
        "reduced_k": reduced_best["n_clusters"],
        "k_shift": abs(reduced_best["n_clusters"] - full_best["n_clusters"]),
        "full_silhouette": full_best["silhouette"],
        "reduced_silhouette": reduced_best["silhouette"],
        "full_relative_sizes": relative_sizes(full_labels),
        "reduced_relative_sizes": relative_sizes(reduced_best["labels"]),
        "reduced_labels": reduced_best["labels"],
        "ari_on_retained": agreement["ari"],
        "sweep": sweep,
    }
