"""
Console Report Generator.

Prints the tables and narrative of the segmentation report: scaled-data
summary, silhouette width by K, cluster sizes, centroid tables, segment
descriptions, the stability check and the comparison of the two methods.
Nothing is written to disk here; the reader is a person at a terminal.
"""

import numpy as np
import pandas as pd
from typing import Any, Dict, List

from analysis.cluster_summary import (
    silhouette_table,
    cluster_sizes,
    compute_centroids,
    describe_segments,
)

DISPLAY_OPTIONS = (
    "display.max_columns", 50,
    "display.width", 160,
    "display.float_format", "{:,.3f}".format,
)


def print_section(title: str):
    print("\n" + "=" * 70)
    print(title)
    print("=" * 70)


def print_table(df: pd.DataFrame):
    with pd.option_context(*DISPLAY_OPTIONS):
        print(df.to_string())


def report_data_overview(features: pd.DataFrame, prep_info: Dict[str, Any], scale_info: Dict[str, Any],
                         scaled_summary: pd.DataFrame):
    """
    Prints what was loaded and how it was scaled.
    """
    print_section("Data Overview")
    print(f"Customers: {features.shape[0]}   Features: {features.shape[1]}")
    print(f"Identifier column dropped: '{prep_info['id_column']}'")
    if prep_info["dropped_columns"]:
        print(f"Non-numeric columns dropped: {prep_info['dropped_columns']}")
    if prep_info["imputed_columns"]:
        print(f"Missing values imputed (median): {prep_info['imputed_columns']}")
    if scale_info["constant_columns"]:
        print(f"[Notice] Constant columns scaled to 0: {scale_info['constant_columns']}")

    print("\nScaled data summary (min-max, per column):")
    print_table(scaled_summary)


def report_sweep(title: str, sweep: List[Dict[str, Any]], best: Dict[str, Any]):
    """
    Prints the silhouette-by-K table and the chosen K.
    """
    print_section(title)
    table = silhouette_table(sweep)
    table["best"] = np.where(table["k"] == best["n_clusters"], "<--", "")
    print_table(table.set_index("k"))
    print(
        f"\nThe average silhouette width is highest at k={best['n_clusters']} "
        f"({best['silhouette']:.3f}), so the {best['algorithm']} segmentation "
        f"uses {best['n_clusters']} clusters."
    )


def report_segments(features: pd.DataFrame, best: Dict[str, Any]) -> pd.DataFrame:
    """
    Prints cluster sizes, centroid table and segment descriptions.

    Returns
    -------
    pd.DataFrame
        The centroid table, for later use (plots).
    """
    sizes = cluster_sizes(best["labels"])
    centroids = compute_centroids(features, best["labels"])

    print(f"\nCluster sizes ({best['algorithm']}, k={best['n_clusters']}):")
    print_table(sizes.to_frame())

    print("\nCluster centroids (original units):")
    print_table(centroids)

    print("\nSegment interpretation:")
    for sentence in describe_segments(centroids, features.mean(), sizes):
        print(f"  - {sentence}")

    return centroids


def report_stability(result: Dict[str, Any]):
    """
    Prints how the hierarchical result changed on the reduced table.
    """
    print_section("Stability Check (Hierarchical, rows removed at random)")
    print(f"Rows removed: {len(result['dropped_rows'])}   Rows kept: {result['n_samples_reduced']}")
    print(f"Best k: full data = {result['full_k']} ({result['full_silhouette']:.3f}), "
          f"reduced data = {result['reduced_k']} ({result['reduced_silhouette']:.3f})")

    full_sizes = np.round(result["full_relative_sizes"], 3)
    reduced_sizes = np.round(result["reduced_relative_sizes"], 3)
    print(f"Relative cluster sizes (largest first): full = {full_sizes.tolist()}, "
          f"reduced = {reduced_sizes.tolist()}")
    print(f"Adjusted Rand index on retained rows: {result['ari_on_retained']:.3f}")

    if result["k_shift"] == 0:
        print("The same number of clusters is selected without those rows.")
    elif result["k_shift"] == 1:
        print("The selected number of clusters moves by one; the structure is broadly stable.")
    else:
        print(f"The selected number of clusters moves by {result['k_shift']}; "
              f"the segmentation is sensitive to the sample.")


def report_method_comparison(comparison: Dict[str, Any], hier_best: Dict[str, Any], km_best: Dict[str, Any]):
    """
    Prints the crosstab of hierarchical vs. K-Means labels.
    """
    print_section("Hierarchical vs. K-Means")
    crosstab = comparison["crosstab"].copy()
    crosstab.index.name = f"hier (k={hier_best['n_clusters']})"
    crosstab.columns.name = f"kmeans (k={km_best['n_clusters']})"
    print_table(crosstab)
    print(f"\nAdjusted Rand index between the two segmentations: {comparison['ari']:.3f}")
