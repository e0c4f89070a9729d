"""Load historical work logs into training records.

Work logs are exported from the asset-management store as CSV or JSON.
Only ``status`` and ``issueSummary`` matter for training; ``itemType`` is
kept when present.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Union

import pandas as pd

from asset_triage.models.features import UNKNOWN_CATEGORY, TrainingRecord

logger = logging.getLogger(__name__)

COLUMN_ALIASES = {
    "issue_summary": "issueSummary",
    "summary": "issueSummary",
    "item_type": "itemType",
}


def normalize_frame(df: pd.DataFrame) -> pd.DataFrame:
    rename = {src: tgt for src, tgt in COLUMN_ALIASES.items() if src in df.columns and tgt not in df.columns}
    df = df.rename(columns=rename)
    out = pd.DataFrame(index=df.index)
    for col in ("status", "issueSummary", "itemType"):
        out[col] = df[col] if col in df.columns else None
    return out


def records_from_frame(df: pd.DataFrame) -> List[TrainingRecord]:
    frame = normalize_frame(df).astype(object)
    # missing cells become None so TrainingRecord applies its defaults
    frame = frame.where(frame.notna(), None)
    return [TrainingRecord.from_mapping(row) for row in frame.to_dict(orient="records")]


def read_frame(path: Union[str, Path]) -> pd.DataFrame:
    p = Path(path)
    suffix = p.suffix.lower()
    if suffix == ".csv":
        return pd.read_csv(p)
    if suffix == ".json":
        return pd.read_json(p, orient="records")
    raise ValueError(f"Unsupported work log format: {p.suffix!r} (expected .csv or .json)")


def load_work_logs(path: Union[str, Path]) -> List[TrainingRecord]:
    df = read_frame(path)
    records = records_from_frame(df)
    unknown = sum(1 for r in records if r.status == UNKNOWN_CATEGORY)
    logger.info("Loaded %d work logs from %s", len(records), path)
    if unknown:
        logger.warning("%d work logs had no status; counted as %s", unknown, UNKNOWN_CATEGORY)
    return records


__all__ = ["load_work_logs", "records_from_frame", "read_frame", "normalize_frame"]
