"""
Best-K selection and cluster summaries.

Turns a sweep (list of per-K records) into the final segmentation: the K
with the highest mean silhouette width, its partition, the cluster sizes and
the centroid table computed on the original, unscaled features so that the
numbers read in miles and days rather than in [0, 1] units.
"""

import numpy as np
import pandas as pd
from typing import Any, Dict, List


def silhouette_table(sweep: List[Dict[str, Any]]) -> pd.DataFrame:
    """
    Silhouette width by K, in sweep order.

    Returns
    -------
    pd.DataFrame
        Columns 'k' and 'silhouette' (plus 'inertia' for K-Means sweeps).
    """
    rows = []
    for rec in sweep:
        row = {"k": rec["n_clusters"], "silhouette": rec["silhouette"]}
        if "inertia" in rec:
            row["inertia"] = rec["inertia"]
        rows.append(row)
    return pd.DataFrame(rows)


def select_best_k(sweep: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Picks the record with the strictly highest mean silhouette width.

    Ties go to the earliest candidate in sweep order.

    Parameters
    ----------
    sweep : List[Dict[str, Any]]
        Output of `sweep_hierarchical` or `sweep_kmeans`. Not modified.

    Returns
    -------
    Dict[str, Any]
        'algorithm', 'n_clusters', 'silhouette' and 'labels' of the winner.
    """
    if not sweep:
        raise ValueError("Cannot select a cluster count from an empty sweep.")

    best = sweep[0]
    for rec in sweep[1:]:
        if rec["silhouette"] > best["silhouette"]:
            best = rec

    return {
        "algorithm": best["algorithm"],
        "n_clusters": best["n_clusters"],
        "silhouette": best["silhouette"],
        "labels": best["labels"].copy(),
    }


def cluster_sizes(labels: np.ndarray) -> pd.Series:
    """Number of observations per cluster label, ordered by label."""
    sizes = pd.Series(np.asarray(labels).ravel()).value_counts().sort_index()
    sizes.index.name = "cluster"
    sizes.name = "size"
    return sizes


def relative_sizes(labels: np.ndarray) -> np.ndarray:
    """
    Cluster shares, largest first.

    Labels are arbitrary across runs, so sizes are compared as a sorted
    profile rather than label by label.
    """
    sizes = cluster_sizes(labels).to_numpy(dtype=float)
    return np.sort(sizes / sizes.sum())[::-1]


def compute_centroids(df: pd.DataFrame, labels: np.ndarray) -> pd.DataFrame:
    """
    Mean of every original feature, grouped by cluster label.

    Parameters
    ----------
    df : pd.DataFrame
        The unscaled observation table. Not modified.
    labels : np.ndarray
        One label per row of `df`.

    Returns
    -------
    pd.DataFrame
        Indexed by cluster label ('cluster'), one column per feature.
    """
    labels = np.asarray(labels).ravel()
    if len(labels) != len(df):
        raise ValueError("Need exactly one label per observation.")

    centroids = df.groupby(pd.Series(labels, index=df.index, name="cluster")).mean()
    return centroids.sort_index()


def describe_segments(
        centroids: pd.DataFrame,
        overall_mean: pd.Series,
        sizes: pd.Series,
        top_n: int = 3,
) -> List[str]:
    """
    One plain-language sentence per cluster for the report narrative.

    Each cluster is described by its size and the `top_n` features on which
    its centroid departs most from the population mean, expressed as a ratio
    ("high Balance (2.4x avg)"). Features whose population mean is zero or
    negative are skipped since a ratio to the mean does not read as more or less.

    Returns
    -------
    List[str]
        Sentences in cluster-label order.
    """
    total = sizes.sum()
    usable = overall_mean[overall_mean > 0]

    sentences = []
    for cluster, row in centroids.iterrows():
        ratios = row[usable.index] / usable
        # distance from 1.0 on a log scale treats 2x and 0.5x alike
        strength = np.abs(np.log(ratios.abs().clip(lower=1e-12)))
        top = strength.sort_values(ascending=False).index[:top_n]

        traits = []
        for feature in top:
            ratio = ratios[feature]
            direction = "high" if ratio >= 1 else "low"
            traits.append(f"{direction} {feature} ({ratio:.1f}x avg)")

        share = 100.0 * sizes[cluster] / total
        sentences.append(
            f"Cluster {cluster}: {sizes[cluster]} customers ({share:.1f}%), "
            + (", ".join(traits) if traits else "close to the population average")
            + "."
        )

    return sentences
