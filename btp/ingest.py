# btp/ingest.py
# Historical-data import: convert a raw CSV/Excel export into HistoricalProject records.

import io
import os
import zipfile
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd
import structlog
from pydantic import ValidationError

from .config import (
    FIELD_DEFAULTS,
    FLOAT_FIELDS,
    HEADER_SYNONYMS,
    INT_FIELDS,
    SAMPLE_PROJECTS,
    SUPPORTED_SHEET_EXTENSIONS,
    SUPPORTED_TEXT_EXTENSIONS,
    TEMPLATE_HEADER,
)
from .errors import UnsupportedFileError
from .schemas import HistoricalProject

logger = structlog.get_logger()

PROJECT_FIELDS = list(HistoricalProject.model_fields)


def _split_table(raw_text: str) -> pd.DataFrame:
    """
    Split comma-separated text into a string DataFrame keyed by lower-cased headers.
    Blank lines and rows with fewer values than headers are dropped; extra values
    are ignored. A repeated header keeps its last value.
    """
    lines = raw_text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
    if not lines or not lines[0].strip():
        return pd.DataFrame()

    headers = [h.strip().lower() for h in lines[0].split(",")]

    rows: List[Dict[str, str]] = []
    for line in lines[1:]:
        line = line.strip()
        if not line:
            continue
        values = [v.strip() for v in line.split(",")]
        if len(values) < len(headers):
            continue
        rows.append(dict(zip(headers, values)))

    return pd.DataFrame(rows, columns=list(dict.fromkeys(headers)))


def _blank_to_nan(series: pd.Series) -> pd.Series:
    s = series.astype(object)
    blank = s.isna() | s.map(lambda v: isinstance(v, str) and not v.strip())
    return s.mask(blank, np.nan)


def _first_present(df: pd.DataFrame, field: str) -> pd.Series:
    """Per row, take the first non-blank value among the field's accepted headers."""
    result = pd.Series(np.nan, index=df.index, dtype=object)
    for name in [field] + HEADER_SYNONYMS.get(field, []):
        if name in df.columns:
            result = result.combine_first(_blank_to_nan(df[name]))
    return result


def normalize_frame(df: pd.DataFrame) -> pd.DataFrame:
    """Map any accepted header spelling onto the canonical HistoricalProject columns."""
    out = pd.DataFrame(index=df.index)

    out["project_type"] = (
        _first_present(df, "project_type").fillna("").astype(str).str.strip()
    )

    for col in FLOAT_FIELDS + INT_FIELDS:
        raw = _first_present(df, col)
        if raw.dtype == object:
            raw = raw.map(lambda v: v.strip() if isinstance(v, str) else v)
        values = pd.to_numeric(raw, errors="coerce")
        values = values.replace([np.inf, -np.inf], np.nan).fillna(FIELD_DEFAULTS[col])
        if col in INT_FIELDS:
            values = np.trunc(values).astype(int)
        out[col] = values

    return out


def _records_from_frame(df: pd.DataFrame) -> List[HistoricalProject]:
    if df.empty:
        return []

    df = normalize_frame(df)
    df = df[(df["project_type"] != "") & (df["surface_area"] > 0)]

    projects: List[HistoricalProject] = []
    for row in df.to_dict("records"):
        try:
            projects.append(HistoricalProject(**row))
        except ValidationError:
            continue
    return projects


def parse_historical_table(raw_text: str) -> List[HistoricalProject]:
    """
    Parse a header row + comma-separated data rows into HistoricalProject records.
    Never raises: malformed rows, rows without a type and rows with a
    non-positive surface are skipped.
    """
    if not raw_text:
        return []
    df = _split_table(raw_text)
    projects = _records_from_frame(df)
    logger.info(
        "historical_import",
        source="text",
        rows_raw=int(len(df)),
        rows_admitted=len(projects),
    )
    return projects


def parse_historical_frame(df_raw: pd.DataFrame) -> List[HistoricalProject]:
    """Same mapping as parse_historical_table for an already-tabular source."""
    df = df_raw.copy()
    df.columns = [str(c).strip().lower() for c in df.columns]
    df = df.loc[:, ~df.columns.duplicated(keep="last")]
    projects = _records_from_frame(df)
    logger.info(
        "historical_import",
        source="frame",
        rows_raw=int(len(df)),
        rows_admitted=len(projects),
    )
    return projects


def _read_bytes(source: Any) -> bytes:
    if isinstance(source, (bytes, bytearray)):
        return bytes(source)
    if hasattr(source, "getvalue"):
        return source.getvalue()
    if hasattr(source, "read"):
        return source.read()
    with open(source, "rb") as fh:
        return fh.read()


def load_historical_file(
    source: Any,
    filename: Optional[str] = None,
    sheet_name: Any = 0,
) -> List[HistoricalProject]:
    """
    Import an uploaded file (bytes, file-like object or path).
    CSV/TXT is decoded as UTF-8 and parsed as text; XLSX is read with pandas.
    """
    name = filename or getattr(source, "name", None) or str(source)
    ext = os.path.splitext(name)[1].lower()

    if ext in SUPPORTED_TEXT_EXTENSIONS:
        data = _read_bytes(source)
        try:
            text = data.decode("utf-8-sig")
        except UnicodeDecodeError:
            logger.warning("historical_import_undecodable", filename=name)
            return []
        return parse_historical_table(text)

    if ext in SUPPORTED_SHEET_EXTENSIONS:
        data = _read_bytes(source)
        try:
            df_raw = pd.read_excel(io.BytesIO(data), sheet_name=sheet_name)
        except (ValueError, zipfile.BadZipFile) as exc:
            logger.warning("historical_import_unreadable", filename=name, error=str(exc))
            return []
        return parse_historical_frame(df_raw)

    raise UnsupportedFileError(name)


def projects_to_frame(projects: List[HistoricalProject]) -> pd.DataFrame:
    """Tabular view of the historical set, one column per HistoricalProject field."""
    return pd.DataFrame(
        [p.model_dump() for p in projects],
        columns=PROJECT_FIELDS,
    )


def template_csv() -> str:
    """Downloadable import template: header row plus three reference projects."""
    df = pd.DataFrame(SAMPLE_PROJECTS[:3], columns=PROJECT_FIELDS)
    df.columns = TEMPLATE_HEADER
    return df.to_csv(index=False, lineterminator="\n")
