# btp/estimator.py
# Similarity-based cost/duration/risk estimate from historical projects.

import math
import warnings
from typing import List, Optional, Sequence

import numpy as np
import structlog

from .config import (
    COLD_FACTOR,
    COLD_TEMPERATURE_C,
    EXTREME_HEAT_C,
    HEAVY_RAIN_DAYS,
    HEAVY_RAIN_FACTOR,
    HOT_FACTOR,
    HOT_TEMPERATURE_C,
    LARGE_SURFACE_M2,
    LONG_PROJECT_DAYS,
    MODERATE_RAIN_DAYS,
    MODERATE_RAIN_FACTOR,
    REC_FALLBACK,
    REC_HEAT,
    REC_LARGE_SURFACE,
    REC_LONG_PROJECT,
    REC_RAIN,
    REC_RISK_MARGIN,
    REC_SMALL_CREW,
    RISK_MARGIN_THRESHOLD,
    SMALL_CREW_SURFACE_M2,
    SMALL_CREW_WORKERS,
)
from .errors import DegenerateInputWarning, InsufficientDataError
from .schemas import (
    EstimationRequest,
    EstimationResult,
    EstimatorOptions,
    HistoricalProject,
)

logger = structlog.get_logger()


def _safe_ratio(num: float, denom: float) -> float:
    """num / denom, or 0.0 when the division is undefined or not finite."""
    if denom == 0:
        return 0.0
    try:
        value = num / denom
    except OverflowError:
        return 0.0
    if not math.isfinite(value):
        return 0.0
    return value


def _whole(value: float) -> int:
    """Round to whole units; non-finite amounts become 0."""
    if not math.isfinite(value):
        return 0
    return int(round(value))


def temperature_factor(average_temperature: float) -> float:
    if average_temperature > HOT_TEMPERATURE_C:
        return HOT_FACTOR
    if average_temperature < COLD_TEMPERATURE_C:
        return COLD_FACTOR
    return 1.0


def rain_factor(rain_days: float) -> float:
    if rain_days > HEAVY_RAIN_DAYS:
        return HEAVY_RAIN_FACTOR
    if rain_days > MODERATE_RAIN_DAYS:
        return MODERATE_RAIN_FACTOR
    return 1.0


def _clamp_risk(value: float, floor: float) -> int:
    if not math.isfinite(value):
        value = 0.0
    return int(round(min(100.0, max(floor, 0.0, value))))


def _apply_duration_floor(days: int, options: EstimatorOptions) -> int:
    if options.min_duration_days is not None:
        return max(days, options.min_duration_days)
    return days


def _recommendations(
    request: EstimationRequest,
    duration_days: int,
    delay_risk: int,
    options: EstimatorOptions,
) -> List[str]:
    """Advisory strings in fixed priority order; each trigger is independent."""
    recs: List[str] = []
    if request.rain_days > HEAVY_RAIN_DAYS:
        recs.append(REC_RAIN)
    if request.average_temperature > HOT_TEMPERATURE_C:
        recs.append(REC_HEAT)
    if request.surface_area > LARGE_SURFACE_M2:
        recs.append(REC_LARGE_SURFACE)
    if delay_risk > RISK_MARGIN_THRESHOLD:
        recs.append(REC_RISK_MARGIN)
    if options.rich_recommendations:
        if (
            request.worker_count < SMALL_CREW_WORKERS
            and request.surface_area > SMALL_CREW_SURFACE_M2
        ):
            recs.append(REC_SMALL_CREW)
        if duration_days > LONG_PROJECT_DAYS:
            recs.append(REC_LONG_PROJECT)
    return recs


def _column_means(projects: Sequence[HistoricalProject]) -> dict:
    data = np.array(
        [
            (
                p.materials_cost,
                p.labor_cost,
                p.estimated_duration_days,
                p.delay_days,
                p.surface_area,
                p.worker_count,
            )
            for p in projects
        ],
        dtype=float,
    )
    means = data.mean(axis=0)
    return {
        "materials": float(means[0]),
        "labor": float(means[1]),
        "duration": float(means[2]),
        "delay": float(means[3]),
        "surface": float(means[4]),
        "workers": float(means[5]),
    }


def _estimate_from_all(
    request: EstimationRequest,
    historical: Sequence[HistoricalProject],
    options: EstimatorOptions,
) -> EstimationResult:
    """Fallback mode: plain surface scaling over every record, no weather factors."""
    means = _column_means(historical)
    surface_factor = _safe_ratio(request.surface_area, means["surface"])

    materials = _whole(means["materials"] * surface_factor)
    labor = _whole(means["labor"] * surface_factor)
    duration = _apply_duration_floor(
        _whole(means["duration"] * surface_factor), options
    )

    return EstimationResult(
        total_cost=materials + labor,
        materials_cost_estimate=materials,
        labor_cost_estimate=labor,
        duration_estimate_days=duration,
        delay_risk_percent=_clamp_risk(
            options.fallback_delay_risk, options.min_delay_risk
        ),
        recommendations=[REC_FALLBACK],
        fallback=True,
        low_confidence=means["surface"] == 0,
        sample_size=len(historical),
    )


def _estimate_from_similar(
    request: EstimationRequest,
    similar: Sequence[HistoricalProject],
    options: EstimatorOptions,
) -> EstimationResult:
    means = _column_means(similar)

    degenerate = len(similar) == 1 or means["surface"] == 0
    if degenerate:
        warnings.warn(
            f"Estimate for {request.project_type!r} relies on "
            f"{len(similar)} project(s) with mean surface {means['surface']:g}",
            DegenerateInputWarning,
            stacklevel=3,
        )

    surface_factor = _safe_ratio(request.surface_area, means["surface"])
    env_factor = temperature_factor(request.average_temperature) * rain_factor(
        request.rain_days
    )

    worker_factor = 1.0
    if options.worker_scaling:
        worker_factor = _safe_ratio(request.worker_count, means["workers"])
        if worker_factor <= 0:
            worker_factor = 1.0

    scale = surface_factor * env_factor
    materials = _whole(means["materials"] * scale)
    labor = _whole(means["labor"] * scale * worker_factor)
    duration = _apply_duration_floor(
        _whole(means["duration"] * scale / worker_factor), options
    )

    raw_risk = (
        (request.rain_days / 10.0) * options.rain_risk_weight
        + (options.heat_risk_weight if request.average_temperature > EXTREME_HEAT_C else 0.0)
        + _safe_ratio(means["delay"], means["duration"]) * 100.0
    )
    delay_risk = _clamp_risk(raw_risk, options.min_delay_risk)

    return EstimationResult(
        total_cost=materials + labor,
        materials_cost_estimate=materials,
        labor_cost_estimate=labor,
        duration_estimate_days=duration,
        delay_risk_percent=delay_risk,
        recommendations=_recommendations(request, duration, delay_risk, options),
        fallback=False,
        low_confidence=degenerate,
        sample_size=len(similar),
    )


def estimate(
    request: EstimationRequest,
    historical: Sequence[HistoricalProject],
    options: Optional[EstimatorOptions] = None,
) -> EstimationResult:
    """
    Estimate cost, duration and delay risk for a candidate project.

    Averages the historical projects of the same type (or every project when
    none matches), scales by surface, weather and optionally crew size, and
    attaches recommendations. Pure: same inputs give the same result.

    Raises InsufficientDataError when the historical set is empty.
    """
    if not historical:
        raise InsufficientDataError(
            details={"project_type": request.project_type}
        )

    options = options or EstimatorOptions.simple()
    similar = [p for p in historical if p.project_type == request.project_type]

    if similar:
        result = _estimate_from_similar(request, similar, options)
    else:
        result = _estimate_from_all(request, historical, options)

    logger.info(
        "estimate_complete",
        project_type=request.project_type,
        surface_area=request.surface_area,
        fallback=result.fallback,
        sample_size=result.sample_size,
        total_cost=result.total_cost,
        duration_days=result.duration_estimate_days,
        delay_risk=result.delay_risk_percent,
    )
    return result
