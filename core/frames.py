"""Helpers for grouping ORM rows in memory with pandas."""
import numpy as np
import pandas as pd

from .constants import blood_group_order


def frame_from_queryset(queryset, fields):
    """Materialise ``fields`` of every row into a DataFrame with those columns"""
    return pd.DataFrame(list(queryset.values(*fields)), columns=list(fields))


def to_native(value):
    """Convert numpy scalars to Python types so responses stay JSON serializable"""
    if value is None or (np.isscalar(value) and pd.isna(value)):
        return 0
    if isinstance(value, (np.bool_, bool)):
        return bool(value)
    if isinstance(value, np.integer):
        return int(value)
    if isinstance(value, np.floating):
        return float(value)
    return value


def per_blood_group(df, reducer):
    """Apply ``reducer`` to each blood group slice, in canonical group order"""
    if df.empty:
        return []

    rows = []
    for blood_group, group in df.groupby('blood_group', sort=False):
        row = {'blood_group': blood_group}
        row.update({key: to_native(value) for key, value in reducer(group).items()})
        rows.append(row)
    return sorted(rows, key=lambda row: blood_group_order(row['blood_group']))
