"""
Unit Tests for Loading, Preprocessing and Scaling

Tests:
- Table loading and missing-file handling
- Identifier removal, numeric coercion and median imputation
- Min-max scaling and the zero-variance policy
"""

import numpy as np
import pandas as pd
import pytest

from utils.parser import (
    load_table,
    preprocess_table,
    scale_features,
    summarize_scaled,
)
from tests.conftest import FEATURES


class TestLoadTable:
    """Test reading the customer table from disk"""

    def test_reads_csv(self, csv_path, three_groups):
        raw, _ = three_groups
        df = load_table(csv_path)

        assert df.shape == raw.shape
        assert list(df.columns) == list(raw.columns)

    def test_reads_arff_and_decodes_nominal_values(self, tmp_path):
        path = tmp_path / "customers.arff"
        path.write_text(
            "@relation customers\n"
            "@attribute id numeric\n"
            "@attribute Balance numeric\n"
            "@attribute Bonus_miles numeric\n"
            "@attribute tier {gold,silver}\n"
            "@data\n"
            "1,100,20,gold\n"
            "2,250,0,silver\n"
            "3,75,10,gold\n"
        )
        df = load_table(str(path))

        assert list(df.columns) == ["id", "Balance", "Bonus_miles", "tier"]
        assert df["tier"].tolist() == ["gold", "silver", "gold"]
        assert df["Balance"].tolist() == [100.0, 250.0, 75.0]

        features, info = preprocess_table(df)
        assert list(features.columns) == ["Balance", "Bonus_miles"]
        assert info["dropped_columns"] == ["tier"]

    def test_missing_file_raises(self, tmp_path):
        missing = str(tmp_path / "nope.csv")

        with pytest.raises(FileNotFoundError, match="nope.csv"):
            load_table(missing)


class TestPreprocessTable:
    """Test turning the raw table into numeric features"""

    def test_drops_named_identifier(self, three_groups):
        raw, _ = three_groups
        features, info = preprocess_table(raw, id_column="ID#")

        assert "ID#" not in features.columns
        assert list(features.columns) == FEATURES
        assert info["id_column"] == "ID#"

    def test_defaults_to_first_column(self, three_groups):
        raw, _ = three_groups
        features, info = preprocess_table(raw)

        assert info["id_column"] == "ID#"
        assert features.shape == (len(raw), len(FEATURES))

    def test_unknown_identifier_raises(self, three_groups):
        raw, _ = three_groups

        with pytest.raises(KeyError):
            preprocess_table(raw, id_column="customer_id")

    def test_median_imputation(self):
        raw = pd.DataFrame({
            "ID#": [1, 2, 3, 4],
            "Balance": [10.0, np.nan, 30.0, 50.0],
            "Award": [0, 1, 1, 0],
        })
        features, info = preprocess_table(raw)

        assert features["Balance"].tolist() == [10.0, 30.0, 30.0, 50.0]
        assert info["imputed_columns"] == ["Balance"]

    def test_text_numbers_coerced_and_text_dropped(self):
        raw = pd.DataFrame({
            "ID#": [1, 2, 3],
            "Balance": ["1,000", "2,500", "400"],
            "Segment": ["gold", "silver", "gold"],
        })
        features, info = preprocess_table(raw)

        assert features["Balance"].tolist() == [1000.0, 2500.0, 400.0]
        assert info["dropped_columns"] == ["Segment"]
        assert "Segment" not in features.columns

    def test_does_not_modify_input(self, three_groups):
        raw, _ = three_groups
        before = raw.copy()
        preprocess_table(raw)

        pd.testing.assert_frame_equal(raw, before)


class TestScaleFeatures:
    """Test min-max scaling"""

    def test_columns_span_unit_interval(self, random_features):
        scaled, info = scale_features(random_features)

        assert np.allclose(scaled.min().values, 0.0)
        assert np.allclose(scaled.max().values, 1.0)
        assert info["constant_columns"] == []

    def test_shape_index_and_columns_preserved(self, random_features):
        scaled, _ = scale_features(random_features)

        assert scaled.shape == random_features.shape
        assert list(scaled.columns) == list(random_features.columns)
        assert scaled.index.equals(random_features.index)

    def test_formula(self):
        df = pd.DataFrame({"x": [2.0, 4.0, 6.0, 10.0]})
        scaled, _ = scale_features(df)

        assert np.allclose(scaled["x"].values, [0.0, 0.25, 0.5, 1.0])

    def test_constant_column_becomes_zero(self, constant_column_table):
        raw, _ = constant_column_table
        features, _ = preprocess_table(raw)
        scaled, info = scale_features(features)

        assert info["constant_columns"] == ["Qual_miles"]
        assert (scaled["Qual_miles"] == 0.0).all()
        assert not scaled.isnull().values.any()
        assert np.allclose(scaled[FEATURES].max().values, 1.0)

    def test_empty_table_raises(self):
        with pytest.raises(ValueError):
            scale_features(pd.DataFrame({"x": []}))

    def test_summary_has_one_row_per_feature(self, random_features):
        scaled, _ = scale_features(random_features)
        summary = summarize_scaled(scaled)

        assert list(summary.index) == list(random_features.columns)
        assert {"mean", "min", "max"}.issubset(summary.columns)
