"""
Pytest Configuration and Fixtures

Shared synthetic customer tables:
- three well-separated groups (20 rows)
- the same groups plus a constant column
- a larger three-group table for the stability check
"""

import numpy as np
import pandas as pd
import pytest

FEATURES = ["Balance", "Bonus_miles", "Flight_miles_12mo"]
CENTERS = np.array([
    [0.0, 0.0, 0.0],
    [10.0, 10.0, 0.0],
    [0.0, 10.0, 10.0],
])


def make_groups(sizes, noise=0.3, seed=42):
    """Rows scattered around CENTERS; returns (values, group index per row)."""
    rng = np.random.RandomState(seed)
    values, groups = [], []
    for g, size in enumerate(sizes):
        values.append(CENTERS[g] + rng.normal(scale=noise, size=(size, CENTERS.shape[1])))
        groups.extend([g] * size)
    return np.vstack(values), np.array(groups)


def with_id_column(values, columns):
    df = pd.DataFrame(values, columns=columns)
    df.insert(0, "ID#", np.arange(1, len(df) + 1))
    return df


@pytest.fixture
def three_groups():
    """20 rows in three far-apart groups (7, 7, 6)."""
    values, groups = make_groups([7, 7, 6])
    return with_id_column(values, FEATURES), groups


@pytest.fixture
def constant_column_table(three_groups):
    raw, groups = three_groups
    raw = raw.copy()
    raw["Qual_miles"] = 0.0
    return raw, groups


@pytest.fixture
def stability_table():
    """120 rows in three far-apart groups of 40."""
    values, groups = make_groups([40, 40, 40], noise=0.8, seed=7)
    return with_id_column(values, FEATURES), groups


@pytest.fixture
def repeated_profiles():
    """Rows that repeat a few distinct customer profiles; returns (table, n_profiles)."""
    def build(n_profiles, copies):
        profiles = np.vstack([CENTERS, [[10.0, 0.0, 10.0], [5.0, 5.0, 5.0]]])[:n_profiles]
        values = np.repeat(profiles, copies, axis=0)
        return with_id_column(values, FEATURES), n_profiles
    return build


@pytest.fixture
def random_features():
    """Unstructured table for property checks."""
    rng = np.random.RandomState(0)
    return pd.DataFrame(rng.uniform(0, 100, size=(40, 4)), columns=list("abcd"))


@pytest.fixture
def csv_path(tmp_path, three_groups):
    raw, _ = three_groups
    path = tmp_path / "customers.csv"
    raw.to_csv(path, index=False)
    return str(path)


@pytest.fixture
def config_with_plots(tmp_path, csv_path):
    import main

    cfg = dict(main.RUN_CONFIG)
    cfg["dataset_path"] = csv_path
    cfg["save_plots"] = True
    cfg["stability_check"] = False
    cfg["plots_path"] = tmp_path / "plots"
    cfg["plots_directory"] = str(cfg["plots_path"])
    return cfg


def assert_groups_intact(labels, groups):
    """Every synthetic group maps to exactly one label, and labels differ across groups."""
    mapping = {}
    for g in np.unique(groups):
        group_labels = np.unique(labels[groups == g])
        assert len(group_labels) == 1, f"Group {g} split across labels {group_labels}"
        mapping[g] = group_labels[0]
    assert len(set(mapping.values())) == len(mapping), "Two groups share a label"
