"""
Utilities package initialization.

Exposes the loading, scaling and validation functions to the top-level
utils package for cleaner imports throughout the project.
"""

from .parser import (
    load_table,
    preprocess_table,
    scale_features,
    summarize_scaled
)

from .clustering_metrics import (
    build_distance_matrix,
    validate_partition,
    silhouette_widths,
    mean_silhouette_width,
    compare_partitions
)
