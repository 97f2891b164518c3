"""
Tabular data source adapters.

Convert pandas DataFrames (or CSV text) into the rows and column schema the
resolver and validator consume.
"""

import io
from typing import Any, Dict, List
import pandas as pd

from campaign_builder.hierarchy.models import DataSourceColumn
from campaign_builder.patterns.engine import to_text


def _column_type(series: pd.Series) -> str:
    if pd.api.types.is_bool_dtype(series):
        return "boolean"
    if pd.api.types.is_numeric_dtype(series):
        return "number"
    if pd.api.types.is_datetime64_any_dtype(series):
        return "date"
    return "string"


def rows_from_dataframe(df: pd.DataFrame) -> List[Dict[str, Any]]:
    """
    Convert a DataFrame into data rows.

    Missing values become None; column names are stringified.

    Args:
        df: Source data

    Returns:
        List[Dict[str, Any]]: One mapping per row
    """
    cleaned = df.astype(object).where(pd.notna(df), None)
    cleaned.columns = [str(column) for column in cleaned.columns]
    return cleaned.to_dict("records")


def columns_from_dataframe(df: pd.DataFrame, sample_size: int = 5) -> List[DataSourceColumn]:
    """
    Derive the column schema of a DataFrame.

    Args:
        df: Source data
        sample_size: Number of distinct non-empty sample values per column

    Returns:
        List[DataSourceColumn]: Columns in DataFrame order
    """
    columns = []
    for name in df.columns:
        series = df[name]
        samples = [to_text(value) for value in series.dropna().unique()[:sample_size]]
        columns.append(DataSourceColumn(
            name=str(name),
            type=_column_type(series),
            sample_values=samples
        ))
    return columns


def rows_from_csv(text: str) -> List[Dict[str, Any]]:
    """Parse pasted CSV text into data rows. All values are kept as strings."""
    if not text or not text.strip():
        return []
    df = pd.read_csv(io.StringIO(text), dtype=str, keep_default_na=False)
    return rows_from_dataframe(df)
