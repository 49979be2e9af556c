# =============================================================================
# aggregates.py
# Daily totals and averages over tracked health records
# Pure functions over the record lists returned by repository reads
# =============================================================================

from __future__ import annotations
from typing import Dict, Iterable, List, Sequence

import numpy as np
import pandas as pd

from lifetrack_core.domain.entities import Entity


NUTRIENT_FIELDS = ["calories", "proteins", "carbs", "fats"]


def records_frame(records: Iterable[Entity]) -> pd.DataFrame:
    """
    Build a DataFrame from entity records.

    Columns use attribute (snake_case) names; the id column holds the
    serialized id.
    """
    rows = []
    for record in records:
        row = {name: getattr(record, name) for name in record.field_names()}
        row["id"] = record.id.serialize() if record.id is not None else None
        rows.append(row)
    return pd.DataFrame(rows)


def total(records: Iterable[Entity], field: str) -> float:
    df = records_frame(records)
    if df.empty or field not in df.columns:
        return 0
    return df[field].sum().item()


def daily_totals(records: Iterable[Entity], field: str = "amount") -> Dict[str, int]:
    """
    Sum a field per day.

    Args:
        records: Records with ``date`` (YYYY-MM-DD) attributes
        field: Numeric attribute to sum

    Returns:
        Dict of date -> total, in date order
    """
    df = records_frame(records)
    if df.empty:
        return {}
    grouped = df.groupby("date", sort=True)[field].sum()
    return {str(day): value.item() for day, value in grouped.items()}


def average(records: Iterable[Entity], field: str) -> float:
    """Mean of a field; 0.0 when there are no records."""
    df = records_frame(records)
    if df.empty:
        return 0.0
    value = df[field].astype(float).mean()
    return 0.0 if np.isnan(value) else float(value)


def nutrition_totals(records: Sequence[Entity], fields: List[str] = None) -> Dict[str, float]:
    """Total calories and macronutrients for a list of nutrition entries."""
    fields = fields or NUTRIENT_FIELDS
    df = records_frame(records)
    if df.empty:
        return {name: 0.0 for name in fields}
    return {name: float(df[name].sum()) for name in fields}
