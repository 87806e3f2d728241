"""
End-to-End Tests for the Report Pipeline
"""

import numpy as np
import pandas as pd
import pytest

import main
from analysis.cluster_summary import compute_centroids
from tests.conftest import assert_groups_intact


@pytest.fixture
def config(csv_path):
    cfg = dict(main.RUN_CONFIG)
    cfg["dataset_path"] = csv_path
    return cfg


class TestRunPipeline:
    """Test the computed results of a full run"""

    def test_selects_three_segments(self, config, three_groups):
        _, groups = three_groups
        results = main.run_pipeline(config, progress=False)

        for key in ("hier_best", "km_best"):
            assert results[key]["n_clusters"] == 3
            assert results[key]["silhouette"] > 0.7
            assert_groups_intact(results[key]["labels"], groups)

        assert results["comparison"]["ari"] == pytest.approx(1.0)
        assert results["stability"]["k_shift"] <= 1

    def test_same_seed_same_report(self, config):
        first = main.run_pipeline(config, progress=False)
        second = main.run_pipeline(config, progress=False)

        for key in ("hier_best", "km_best"):
            assert first[key]["n_clusters"] == second[key]["n_clusters"]
            assert np.array_equal(first[key]["labels"], second[key]["labels"])
            pd.testing.assert_frame_equal(
                compute_centroids(first["features"], first[key]["labels"]),
                compute_centroids(second["features"], second[key]["labels"]),
            )

    def test_repeated_customer_profiles(self, config, repeated_profiles, tmp_path):
        raw, n_profiles = repeated_profiles(5, 4)
        path = tmp_path / "repeated.csv"
        raw.to_csv(path, index=False)
        config["dataset_path"] = str(path)

        results = main.run_pipeline(config, progress=False)

        assert max(rec["n_clusters"] for rec in results["km_sweep"]) == n_profiles
        assert results["km_best"]["n_clusters"] == n_profiles
        assert results["hier_best"]["n_clusters"] == n_profiles

    def test_stability_rerun_uses_configured_linkage(self, config):
        config["linkage"] = "average"
        results = main.run_pipeline(config, progress=False)

        assert {rec["linkage"] for rec in results["hier_sweep"]} == {"average"}
        assert {rec["linkage"] for rec in results["stability"]["sweep"]} == {"average"}

    def test_missing_identifier_falls_back_to_first_column(self, config):
        config["id_column"] = "customer_id"
        results = main.run_pipeline(config, progress=False)

        assert results["prep_info"]["id_column"] == "ID#"


class TestMain:
    """Test the console entry point"""

    def test_prints_report(self, config, monkeypatch, capsys):
        monkeypatch.setattr(main, "RUN_CONFIG", config)
        main.main()
        out = capsys.readouterr().out

        assert "Hierarchical Clustering (complete linkage)" in out
        assert "highest at k=3" in out
        assert "Cluster 1:" in out
        assert "Stability Check" in out

    def test_missing_file_exits(self, tmp_path, monkeypatch, capsys):
        cfg = dict(main.RUN_CONFIG)
        cfg["dataset_path"] = str(tmp_path / "missing.csv")
        monkeypatch.setattr(main, "RUN_CONFIG", cfg)

        with pytest.raises(SystemExit) as exc:
            main.main()

        assert exc.value.code == 1
        assert "Error loading" in capsys.readouterr().out
