"""
Dashboard analytics — totals, status/category breakdowns and top groups for a RecordSet.

Everything is recomputed from the records passed in; nothing is cached or mutated.
"""
from __future__ import annotations

import datetime as dt
from typing import Iterable, Optional

import pandas as pd

from fleetboard.analytics.common import pct_of_total, safe_divide, sanitize_for_json
from fleetboard.analytics.window import select_window
from fleetboard.config import TOP_N
from fleetboard.data.datasets import Dataset
from fleetboard.data.schemas import ReportingWindow


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def records_frame(records: Iterable, dataset: Dataset) -> pd.DataFrame:
    """RecordSet → DataFrame with one column per record field, source order kept."""
    columns = dataset.record_type.field_names()
    return pd.DataFrame([r.to_dict() for r in records], columns=columns)


def _count_breakdown(df: pd.DataFrame, column: Optional[str], key: str, fixed: tuple[str, ...] = ()) -> list[dict]:
    """Counts per distinct value, most frequent first, with whole-number shares.

    ``fixed`` lists values that are always reported (zero counts included), in order.
    Otherwise blank values are not listed, like blank names in top_groups; shares
    stay relative to every record passed in.
    """
    if column is None:
        return []
    total = len(df)
    if fixed:
        counts = df[column].value_counts() if total else pd.Series(dtype="int64")
        return [
            {key: value, "count": int(counts.get(value, 0)), "pct": pct_of_total(counts.get(value, 0), total)}
            for value in fixed
        ]
    named = df[df[column] != ""]
    if named.empty:
        return []
    counts = named.groupby(column, sort=False).size().sort_values(ascending=False, kind="stable")
    return [
        {key: name, "count": int(n), "pct": pct_of_total(n, total)}
        for name, n in counts.items()
    ]


def top_groups(df: pd.DataFrame, dataset: Dataset, n: int = TOP_N) -> list[dict]:
    """Top ``n`` groups (e.g. vessels) by summed value; ties keep first-seen order."""
    f = dataset.stat_fields
    if df.empty:
        return []
    named = df[df[f.group] != ""]
    if named.empty:
        return []
    grouped = named.groupby(f.group, sort=False).agg(
        value=(f.value, "sum"),
        cost=(f.cost, "sum"),
        profit=(f.profit, "sum"),
        count=(f.value, "count"),
    )
    grouped = grouped.sort_values("value", ascending=False, kind="stable").head(n)

    rows = []
    for name, r in grouped.iterrows():
        rows.append({
            "name": name,
            "value": float(r["value"]),
            "cost": float(r["cost"]),
            "profit": float(r["profit"]),
            "count": int(r["count"]),
        })
    return rows


# ---------------------------------------------------------------------------
# Stats
# ---------------------------------------------------------------------------

def compute_stats(records: Iterable, dataset: Dataset) -> dict:
    """Aggregate a RecordSet (or a window subset of one).

    Defaulted fields are 0, so they never skew sums; an empty input yields
    zero totals and 0% shares.
    """
    f = dataset.stat_fields
    df = records_frame(records, dataset)
    empty = df.empty

    total_value = 0.0 if empty else float(df[f.value].sum())
    total_cost = 0.0 if empty else float(df[f.cost].sum())
    total_profit = 0.0 if empty else float(df[f.profit].sum())

    return sanitize_for_json({
        "record_count": int(len(df)),
        "total_value": total_value,
        "total_cost": total_cost,
        "total_profit": total_profit,
        "margin_pct": round(safe_divide(total_profit, total_value) * 100, 1),
        "status_counts": _count_breakdown(df, f.status, "status", f.status_values),
        "category_counts": _count_breakdown(df, f.category, "category"),
        "top_groups": top_groups(df, dataset),
        "totals": {col: (0.0 if empty else float(df[col].sum())) for col in f.sums},
        "averages": {col: (0.0 if empty else round(float(df[col].mean()), 2)) for col in f.means},
    })


def dashboard_payload(
    records: Iterable,
    dataset: Dataset,
    reference: dt.date | dt.datetime | None = None,
) -> dict:
    """Window subset + its stats for the given reference instant (default: now)."""
    reference = reference or dt.datetime.now()
    records = tuple(records)
    window = ReportingWindow.from_reference(reference)
    subset = select_window(records, reference)

    return sanitize_for_json({
        "dataset": dataset.name,
        "title": dataset.title,
        "window": {
            "label": window.label,
            "today": window.today.label,
            "yesterday": window.yesterday.label,
        },
        "total_records": len(records),
        "window_subset": [r.to_dict() for r in subset],
        "stats": compute_stats(subset, dataset),
    })
