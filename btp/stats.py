# btp/stats.py
# Descriptive statistics over the historical set.

from typing import Dict, Optional, Sequence

import pandas as pd

from .ingest import projects_to_frame
from .schemas import EstimationResult, HistoricalProject, HistoricalStats, TypeStats


def summarize_history(
    historical: Sequence[HistoricalProject],
) -> Optional[HistoricalStats]:
    """Totals and per-type averages; None when there is no data."""
    if not historical:
        return None

    df = projects_to_frame(list(historical))
    df["total_cost"] = df["materials_cost"] + df["labor_cost"]

    grouped = df.groupby("project_type", sort=False).agg(
        count=("project_type", "size"),
        total_cost=("total_cost", "sum"),
        average_duration_days=("estimated_duration_days", "mean"),
        average_delay_days=("delay_days", "mean"),
    )
    by_type: Dict[str, TypeStats] = {
        str(project_type): TypeStats(
            count=int(row["count"]),
            total_cost=float(row["total_cost"]),
            average_duration_days=float(row["average_duration_days"]),
            average_delay_days=float(row["average_delay_days"]),
        )
        for project_type, row in grouped.iterrows()
    }

    return HistoricalStats(
        total_projects=int(len(df)),
        total_investment=float(df["total_cost"].sum()),
        average_duration_days=int(round(df["estimated_duration_days"].mean())),
        average_delay_days=int(round(df["delay_days"].mean())),
        by_type=by_type,
    )


def stats_by_type_df(stats: HistoricalStats) -> pd.DataFrame:
    """One row per project type, for display."""
    rows = [
        {"Type": project_type, **type_stats.model_dump()}
        for project_type, type_stats in stats.by_type.items()
    ]
    return pd.DataFrame(
        rows,
        columns=[
            "Type",
            "count",
            "total_cost",
            "average_duration_days",
            "average_delay_days",
        ],
    )


def compare_to_history(result: EstimationResult, stats: HistoricalStats) -> dict:
    """
    Position an estimate against the historical mean duration.
    Returns the duration as a percent of the mean and a longer/shorter label.
    """
    mean = stats.average_duration_days
    ratio_pct = (result.duration_estimate_days / mean * 100.0) if mean else 0.0
    return {
        "duration_ratio_pct": ratio_pct,
        "label": "longer" if result.duration_estimate_days > mean else "shorter",
    }
