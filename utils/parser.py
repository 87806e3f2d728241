"""
Loading and preprocessing utilities for the frequent-flyer segmentation report.

This module reads the customer table from disk, separates the behavioural
feature columns from the customer identifier, and rescales every feature to
the [0, 1] range so that no single mileage column dominates the Euclidean
distances used by both clustering methods.

Zero-variance policy
--------------------
A constant feature column has no range to rescale. Such a column is mapped
to all zeros (it then contributes nothing to any distance) and its name is
reported in the scaling metadata, instead of being divided by zero.
"""

import os
from scipy.io import arff
import pandas as pd
import numpy as np
from sklearn.preprocessing import MinMaxScaler
from typing import List, Tuple, Dict, Any, Optional

# ---------------------------------------------------------------------
# Basic helpers
# ---------------------------------------------------------------------

def load_arff(filepath: str) -> pd.DataFrame:
    """
    Loads an .arff file from the given path into a pandas DataFrame.

    Byte strings produced by scipy's reader are decoded to Python strings.

    Parameters
    ----------
    filepath : str
        The relative or absolute path to the .arff file.

    Returns
    -------
    df : pd.DataFrame
        The loaded table.
    """
    data, meta = arff.loadarff(filepath)
    df = pd.DataFrame(data)

    for col in df.columns:
        if df[col].dtype == object:
            df[col] = df[col].apply(
                lambda v: v.decode("utf-8") if isinstance(v, (bytes, bytearray)) else v
            )

    return df


def load_table(filepath: str) -> pd.DataFrame:
    """
    Reads the whole customer table into memory.

    Parameters
    ----------
    filepath : str
        Path to a .csv or .arff file.

    Returns
    -------
    pd.DataFrame
        The raw table, identifier column included.

    Raises
    ------
    FileNotFoundError
        If `filepath` does not exist.
    """
    if not os.path.isfile(filepath):
        raise FileNotFoundError(f"Input table not found: '{filepath}'")

    if filepath.lower().endswith(".arff"):
        return load_arff(filepath)
    return pd.read_csv(filepath)


def identify_numeric_columns(
    df: pd.DataFrame,
) -> Tuple[List[str], List[str]]:
    """
    Separates columns into numeric and non-numeric lists.

    Returns
    -------
    numeric_cols : List[str]
    other_cols : List[str]
    """
    numeric_cols: List[str] = []
    other_cols: List[str] = []

    for col in df.columns:
        if pd.api.types.is_numeric_dtype(df[col]) and not pd.api.types.is_bool_dtype(df[col]):
            numeric_cols.append(col)
        else:
            other_cols.append(col)

    return numeric_cols, other_cols


def handle_missing_values(df: pd.DataFrame, numeric_cols: List[str]) -> pd.DataFrame:
    """
    Imputes missing numeric values with the column median.

    A column that is entirely missing is filled with 0.
    """
    df = df.copy()

    for col in numeric_cols:
        if df[col].isnull().any():
            median_value = df[col].median()
            if pd.isna(median_value):
                median_value = 0.0
            df[col] = df[col].fillna(median_value)

    return df


# ---------------------------------------------------------------------
# Table preprocessing
# ---------------------------------------------------------------------

def preprocess_table(
        df: pd.DataFrame,
        id_column: Optional[str] = None,
) -> Tuple[pd.DataFrame, Dict[str, Any]]:
    """
    Turns the raw customer table into the numeric observation table.

    Steps: drop the identifier column, coerce the remaining columns to
    numbers, drop whatever is still non-numeric, and impute missing values.

    Parameters
    ----------
    df : pd.DataFrame
        The raw table as returned by `load_table`.
    id_column : str, optional
        Name of the identifier column. If None, the first column is used.

    Returns
    -------
    features : pd.DataFrame
        One row per customer, one numeric column per behavioural feature.
    info : Dict[str, Any]
        Metadata: the dropped identifier, the non-numeric columns that were
        discarded, and the columns that needed imputation.
    """
    if df.shape[1] < 2:
        raise ValueError("Expected an identifier column plus at least one feature column.")

    if id_column is None:
        id_column = df.columns[0]
    elif id_column not in df.columns:
        raise KeyError(f"Identifier column '{id_column}' not found in table.")

    features = df.drop(columns=[id_column])

    # Numbers stored as text (e.g. "1,234" exported from spreadsheets) are coerced;
    # a column is only converted when most of its values parse.
    for col in features.columns:
        if pd.api.types.is_numeric_dtype(features[col]):
            continue
        converted = pd.to_numeric(
            features[col].astype(str).str.replace(",", "", regex=False),
            errors="coerce",
        )
        if converted.notna().mean() > 0.5:
            features[col] = converted

    numeric_cols, other_cols = identify_numeric_columns(features)
    if not numeric_cols:
        raise ValueError("No numeric feature columns left after dropping the identifier.")

    imputed_cols = [col for col in numeric_cols if features[col].isnull().any()]
    features = handle_missing_values(features[numeric_cols], numeric_cols)
    features = features.astype(float)

    info: Dict[str, Any] = {
        "id_column": id_column,
        "dropped_columns": other_cols,
        "imputed_columns": imputed_cols,
        "feature_names": list(features.columns),
    }

    return features, info


# ---------------------------------------------------------------------
# Scaling
# ---------------------------------------------------------------------

def scale_features(df: pd.DataFrame) -> Tuple[pd.DataFrame, Dict[str, Any]]:
    """
    Min-max scales every column independently to the [0, 1] range.

    Each column `c` becomes (x - min(c)) / (max(c) - min(c)). Constant
    columns become all zeros (see the module docstring).

    Parameters
    ----------
    df : pd.DataFrame
        The numeric observation table. Not modified.

    Returns
    -------
    scaled : pd.DataFrame
        Same shape, index and column names as `df`.
    info : Dict[str, Any]
        The fitted scaler and the list of constant columns.
    """
    if df.empty:
        raise ValueError("Cannot scale an empty table.")

    values = df.to_numpy(dtype=float)
    data_range = values.max(axis=0) - values.min(axis=0)
    constant_mask = data_range == 0

    scaler = MinMaxScaler(feature_range=(0, 1))
    scaled_values = scaler.fit_transform(values)

    # MinMaxScaler leaves a zero-range column at (x - min) * 1, i.e. 0 already;
    # set it explicitly so the policy does not hinge on that implementation detail.
    scaled_values[:, constant_mask] = 0.0

    scaled = pd.DataFrame(scaled_values, index=df.index, columns=df.columns)

    info: Dict[str, Any] = {
        "scaler": scaler,
        "constant_columns": [col for col, flag in zip(df.columns, constant_mask) if flag],
    }

    return scaled, info


def summarize_scaled(scaled: pd.DataFrame) -> pd.DataFrame:
    """Per-column summary statistics of the scaled table (one row per feature)."""
    return scaled.describe().T
