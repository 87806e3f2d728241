"""
Frequent-Flyer Segmentation Report.

Runs the whole analysis once, top to bottom:
1. Loads the customer table and drops the identifier column.
2. Min-max scales every feature and builds one Euclidean distance matrix.
3. Sweeps complete-linkage hierarchical clustering over k = 2..10 and keeps
   the k with the highest average silhouette width.
4. Does the same with K-Means (50 random restarts per k).
5. Reruns the hierarchical procedure with 5% of customers removed.
6. Compares the two segmentations.

Usage:
    Run from project root: python main.py
"""

import os
import sys
import time
from typing import Any, Dict

# Utilities
from utils.parser import load_table, preprocess_table, scale_features, summarize_scaled
from utils.clustering_metrics import build_distance_matrix, compare_partitions

# Algorithms
from algorithms.agg_clustering import build_dendrogram
from algorithms.sweep import sweep_hierarchical, sweep_kmeans

# Analysis
from analysis.cluster_summary import select_best_k
from analysis.stability import run_stability_check
from analysis import report_generator as report

# ---------------------------------------------------------
# CONFIGURATION
# ---------------------------------------------------------
RUN_CONFIG = {
    "dataset_path": "datasets/EastWestAirlines.csv",
    "id_column": "ID#",         # None -> first column
    "linkage": "complete",
    "stability_check": True,
    "save_plots": False,        # Figures are optional; the report is the console output
    "plots_directory": "plots",
}

SEED = 123
N_CLUSTERS_LIST = list(range(2, 11))
KMEANS_N_INIT = 50
STABILITY_DROP_FRACTION = 0.05


def run_pipeline(config: Dict[str, Any], progress: bool = True) -> Dict[str, Any]:
    """
    Computes every result of the report without printing it.

    Parameters
    ----------
    config : Dict[str, Any]
        A RUN_CONFIG-shaped dictionary.
    progress : bool, default=True
        Show tqdm progress bars for the sweeps.

    Returns
    -------
    Dict[str, Any]
        All intermediate tables and results, keyed by name.
    """
    raw = load_table(config["dataset_path"])

    id_column = config.get("id_column")
    if id_column is not None and id_column not in raw.columns:
        print(f"  [Notice] Identifier column '{id_column}' not found; dropping '{raw.columns[0]}' instead.")
        id_column = None
    features, prep_info = preprocess_table(raw, id_column=id_column)

    scaled, scale_info = scale_features(features)
    D = build_distance_matrix(scaled)

    hier_sweep = sweep_hierarchical(D, N_CLUSTERS_LIST, linkage_method=config["linkage"], progress=progress)
    hier_best = select_best_k(hier_sweep)

    km_sweep = sweep_kmeans(scaled, D, N_CLUSTERS_LIST, n_init=KMEANS_N_INIT, random_state=SEED,
                            progress=progress)
    km_best = select_best_k(km_sweep)

    stability = None
    if config.get("stability_check", True):
        stability = run_stability_check(
            scaled, hier_best, N_CLUSTERS_LIST,
            drop_fraction=STABILITY_DROP_FRACTION, random_state=SEED,
            linkage_method=config["linkage"], progress=progress,
        )

    return {
        "features": features,
        "prep_info": prep_info,
        "scaled": scaled,
        "scale_info": scale_info,
        "distance_matrix": D,
        "hier_sweep": hier_sweep,
        "hier_best": hier_best,
        "km_sweep": km_sweep,
        "km_best": km_best,
        "stability": stability,
        "comparison": compare_partitions(hier_best["labels"], km_best["labels"]),
    }


def save_plots(results: Dict[str, Any], hier_centroids, km_centroids, config: Dict[str, Any]):
    from analysis.visualization import plot_silhouette_curves, plot_centroid_heatmap, plot_dendrogram

    out_dir = config["plots_directory"]
    os.makedirs(out_dir, exist_ok=True)
    print(f"\nSaving figures to '{out_dir}/'...")

    plot_silhouette_curves({"Hierarchical": results["hier_sweep"], "KMeans": results["km_sweep"]}, out_dir)
    plot_dendrogram(build_dendrogram(results["distance_matrix"], method=config["linkage"]),
                    results["hier_best"]["n_clusters"], out_dir)
    plot_centroid_heatmap(hier_centroids, "Hierarchical Centroids (relative to mean)", out_dir,
                          "centroids_hierarchical.png")
    plot_centroid_heatmap(km_centroids, "K-Means Centroids (relative to mean)", out_dir,
                          "centroids_kmeans.png")


def main():
    print("Frequent-Flyer Segmentation Report")
    start = time.perf_counter()

    try:
        results = run_pipeline(RUN_CONFIG)
    except FileNotFoundError as e:
        print(f"Error loading {RUN_CONFIG['dataset_path']}: {e}")
        sys.exit(1)

    report.report_data_overview(results["features"], results["prep_info"], results["scale_info"],
                                summarize_scaled(results["scaled"]))

    report.report_sweep(f"Hierarchical Clustering ({RUN_CONFIG['linkage']} linkage)",
                        results["hier_sweep"], results["hier_best"])
    hier_centroids = report.report_segments(results["features"], results["hier_best"])

    report.report_sweep(f"K-Means Clustering ({KMEANS_N_INIT} restarts, seed {SEED})",
                        results["km_sweep"], results["km_best"])
    km_centroids = report.report_segments(results["features"], results["km_best"])

    if results["stability"] is not None:
        report.report_stability(results["stability"])

    report.report_method_comparison(results["comparison"], results["hier_best"], results["km_best"])

    if RUN_CONFIG["save_plots"]:
        save_plots(results, hier_centroids, km_centroids, RUN_CONFIG)

    print(f"\nReport complete in {time.perf_counter() - start:.1f}s")


if __name__ == "__main__":
    main()
