#!/usr/bin/env python3
"""End-to-end smoke test: import synthetic history, run single + batch estimates and a chat."""

from __future__ import annotations

import random
import sys
import warnings
from pathlib import Path

import numpy as np
import pandas as pd

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from btp.config import PROJECT_TYPES, TEMPLATE_HEADER  # noqa: E402
from btp.errors import DegenerateInputWarning, InsufficientDataError  # noqa: E402
from btp.estimator import estimate  # noqa: E402
from btp.log import configure_logging  # noqa: E402
from btp.schemas import EstimationRequest, EstimatorOptions  # noqa: E402
from btp.stats import summarize_history  # noqa: E402
from btp.store import HistoricalStore  # noqa: E402
from service.assistant import Assistant, Conversation  # noqa: E402
from service.estimate_lib import estimate_requests_df, import_text  # noqa: E402


def _make_synthetic_csv(rows: int) -> str:
    rng = np.random.default_rng(42)
    surface = rng.uniform(80, 3000, size=rows).round(0)
    df = pd.DataFrame(
        {
            "type": rng.choice(PROJECT_TYPES, size=rows),
            "surface": surface,
            "ouvriers": rng.integers(3, 40, size=rows),
            "temperature": rng.uniform(18, 38, size=rows).round(1),
            "pluie": rng.integers(0, 15, size=rows),
            "cout_materiaux": (surface * rng.uniform(120_000, 200_000, size=rows)).round(0),
            "cout_main_oeuvre": (surface * rng.uniform(60_000, 120_000, size=rows)).round(0),
            "duree_estimee": rng.integers(60, 360, size=rows),
            "retards": rng.integers(0, 30, size=rows),
        },
        columns=TEMPLATE_HEADER,
    )
    return df.to_csv(index=False)


def main() -> None:
    configure_logging("WARNING")

    store = HistoricalStore()
    try:
        estimate(EstimationRequest(project_type="commercial", surface_area=100), store.snapshot())
    except InsufficientDataError:
        pass
    else:
        raise AssertionError("Empty history should raise InsufficientDataError.")

    added, total = import_text(store, _make_synthetic_csv(rows=40))
    assert added == 40 and total == 40, f"Expected 40 imported rows, got {added}/{total}."

    for options in (EstimatorOptions.simple(), EstimatorOptions.rich()):
        for project_type in PROJECT_TYPES:
            request = EstimationRequest(
                project_type=project_type,
                surface_area=450,
                worker_count=12,
                average_temperature=36,
                rain_days=12,
            )
            with warnings.catch_warnings():
                warnings.simplefilter("ignore", DegenerateInputWarning)
                result = estimate(request, store.snapshot(), options)
            assert (
                result.total_cost
                == result.materials_cost_estimate + result.labor_cost_estimate
            ), "Total cost is not the sum of its parts."
            assert 0 <= result.delay_risk_percent <= 100, "Risk out of range."
            assert result.duration_estimate_days >= options.min_duration_days
            assert not result.fallback, "Known type should not fall back."

    batch = pd.DataFrame(
        {
            "type": ["résidentiel", "hangar", ""],
            "surface": [200, 300, 100],
            "ouvriers": [8, 10, 5],
        }
    )
    df_out = estimate_requests_df(batch, store.snapshot())
    assert bool(df_out.loc[1, "fallback"]), "Unknown type should fall back."
    assert pd.isna(df_out.loc[2, "total_cost"]), "Row without type should stay empty."

    stats = summarize_history(store.snapshot())
    assert stats is not None and stats.total_projects == 40

    assistant = Assistant(store, rng=random.Random(0))
    conversation = Conversation()
    reply = assistant.respond(conversation, "Je veux construire une maison de 200 m² avec 8 ouvriers")
    assert reply.estimate is not None, "Assistant did not produce an estimate."

    print(
        "OK: imported synthetic history, "
        f"projects={total} total_investment={stats.total_investment:.0f} "
        f"chat_rule={reply.rule}."
    )


if __name__ == "__main__":
    main()
