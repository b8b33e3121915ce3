# service/estimate_lib.py
# Small library that exposes estimation and import functions for the UI and the assistant.

from typing import Any, Optional, Sequence, Tuple

import pandas as pd
from pydantic import ValidationError

from btp.estimator import estimate
from btp.ingest import load_historical_file, normalize_frame, parse_historical_table
from btp.schemas import (
    EstimationRequest,
    EstimationResult,
    EstimatorOptions,
    HistoricalProject,
)
from btp.store import HistoricalStore

REQUEST_FIELDS = list(EstimationRequest.model_fields)
OUTPUT_COLUMNS = [
    "total_cost",
    "materials_cost_estimate",
    "labor_cost_estimate",
    "duration_estimate_days",
    "delay_risk_percent",
    "fallback",
]


def estimate_with_store(
    request: EstimationRequest,
    store: HistoricalStore,
    options: Optional[EstimatorOptions] = None,
) -> EstimationResult:
    """Estimate against the store's current snapshot."""
    return estimate(request, store.snapshot(), options)


def import_text(store: HistoricalStore, raw_text: str) -> Tuple[int, int]:
    """Parse delimited text and merge it; returns (added, total)."""
    added = store.merge(parse_historical_table(raw_text))
    return added, len(store)


def import_file(
    store: HistoricalStore,
    source: Any,
    filename: Optional[str] = None,
) -> Tuple[int, int]:
    """Load an uploaded CSV/XLSX and merge it; returns (added, total)."""
    added = store.merge(load_historical_file(source, filename))
    return added, len(store)


def estimate_requests_df(
    df_in: pd.DataFrame,
    historical: Sequence[HistoricalProject],
    options: Optional[EstimatorOptions] = None,
) -> pd.DataFrame:
    """
    Batch estimation for a DataFrame of candidate projects.
    Accepts the same column spellings as the historical import and adds the
    estimate columns. Rows without a type or with invalid values are left empty.
    """
    df = df_in.copy()
    df.columns = [str(c).strip().lower() for c in df.columns]
    df = df.loc[:, ~df.columns.duplicated(keep="last")]
    requests = normalize_frame(df)[REQUEST_FIELDS]

    results = []
    for row in requests.to_dict("records"):
        if not row["project_type"]:
            results.append(None)
            continue
        try:
            request = EstimationRequest(**row)
        except ValidationError:
            results.append(None)
            continue
        results.append(estimate(request, historical, options))

    out = df_in.copy()
    for col in OUTPUT_COLUMNS:
        out[col] = [getattr(r, col) if r is not None else pd.NA for r in results]
    out["recommendations"] = [
        " | ".join(r.recommendations) if r is not None else "" for r in results
    ]
    return out
