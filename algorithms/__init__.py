"""
Clustering Algorithms Package.

This package contains the two clustering methods compared in the segmentation
report and the sweeps that run them over a range of cluster counts.

Modules
-------
- agg_clustering: Complete-linkage dendrogram built once, cut per K (scipy).
- kmeans: K-Means (Lloyd's Algorithm) with multiple random restarts.
- sweep: Silhouette sweeps over candidate cluster counts for both methods.
"""

from .agg_clustering import build_dendrogram, cut_dendrogram
from .kmeans import KMeans
from .sweep import sweep_hierarchical, sweep_kmeans
