"""
Analysis Package.

Turns sweep results into the segmentation report.

Modules
-------
- cluster_summary: Best-K selection, cluster sizes, centroids, segment narrative.
- stability: Hierarchical rerun on a randomly reduced table.
- report_generator: Console tables and narrative.
- visualization: Optional silhouette, dendrogram and centroid figures.
"""
