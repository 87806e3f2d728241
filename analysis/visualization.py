"""
Optional figures for the segmentation report.

Only produced when plotting is switched on in the run configuration; the
console report does not depend on them.
"""

import os
import numpy as np
import pandas as pd
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import seaborn as sns
from scipy.cluster.hierarchy import dendrogram
from typing import Any, Dict, List

from analysis.cluster_summary import silhouette_table


def plot_silhouette_curves(sweeps: Dict[str, List[Dict[str, Any]]], output_dir: str,
                           filename: str = "silhouette_by_k.png"):
    """
    Mean silhouette width against K, one line per method.
    """
    frames = []
    for method, sweep in sweeps.items():
        table = silhouette_table(sweep)
        table["method"] = method
        frames.append(table)
    df_plot = pd.concat(frames, ignore_index=True)

    plt.figure(figsize=(8, 5))
    sns.lineplot(data=df_plot, x="k", y="silhouette", hue="method", marker="o")
    plt.title("Average Silhouette Width by Number of Clusters")
    plt.xlabel("Number of Clusters (k)")
    plt.ylabel("Average Silhouette Width")
    plt.grid(True, linestyle="--", alpha=0.3)
    plt.tight_layout()
    save_path = os.path.join(output_dir, filename)
    plt.savefig(save_path, dpi=150)
    plt.close()
    print(f"  [Saved] {filename}")


def plot_centroid_heatmap(centroids: pd.DataFrame, title: str, output_dir: str, filename: str):
    """
    Heatmap of centroids relative to the column means (1.0 = average).
    """
    col_means = centroids.mean().replace(0, np.nan)
    relative = (centroids / col_means).fillna(0.0)

    plt.figure(figsize=(12, 0.6 * len(relative) + 2))
    sns.heatmap(relative, annot=True, fmt=".2f", cmap="RdBu_r", center=1.0, cbar=True)
    plt.title(title)
    plt.ylabel("Cluster")
    plt.tight_layout()
    save_path = os.path.join(output_dir, filename)
    plt.savefig(save_path, dpi=150)
    plt.close()
    print(f"  [Saved] {filename}")


def plot_dendrogram(Z: np.ndarray, n_clusters: int, output_dir: str,
                    filename: str = "dendrogram_complete.png"):
    """
    Truncated complete-linkage dendrogram with the cut for `n_clusters`.
    """
    plt.figure(figsize=(12, 6))
    dendrogram(Z, truncate_mode="lastp", p=30, no_labels=True)
    # the cut sits between the merge heights that leave n_clusters and n_clusters - 1 groups
    heights = Z[:, 2]
    if 1 < n_clusters <= len(heights):
        cut = (heights[-n_clusters] + heights[-(n_clusters - 1)]) / 2
        plt.axhline(cut, color="red", linestyle="--", label=f"k={n_clusters}")
        plt.legend()
    plt.title("Complete-Linkage Dendrogram")
    plt.ylabel("Euclidean Distance (scaled features)")
    plt.tight_layout()
    save_path = os.path.join(output_dir, filename)
    plt.savefig(save_path, dpi=150)
    plt.close()
    print(f"  [Saved] {filename}")
