"""Feature extraction over historical work logs.

Turns raw training records into the counts the Naive Bayes trainer needs:

 - category counts, ordered by first appearance in the history
 - the vocabulary of whitespace tokens, also in first-seen order
 - for every token and category, how many of that category's records
   contain the token

Tokenization is deliberately naive: lower-case, split on runs of
whitespace, nothing else. Punctuation stays attached to words.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

UNKNOWN_CATEGORY = "UNKNOWN"


@dataclass(frozen=True)
class TrainingRecord:
    """One historical work-log entry."""

    status: str = UNKNOWN_CATEGORY
    issue_summary: str = ""
    item_type: Optional[str] = None

    @classmethod
    def from_mapping(cls, row: Mapping[str, Any]) -> "TrainingRecord":
        status = row.get("status")
        summary = row.get("issueSummary", row.get("issue_summary"))
        item_type = row.get("itemType", row.get("item_type"))
        return cls(
            status=str(status) if status else UNKNOWN_CATEGORY,
            issue_summary=str(summary) if summary else "",
            item_type=str(item_type) if item_type else None,
        )


def coerce_record(record: Any) -> TrainingRecord:
    if isinstance(record, TrainingRecord):
        return TrainingRecord(
            status=record.status or UNKNOWN_CATEGORY,
            issue_summary=record.issue_summary or "",
            item_type=record.item_type,
        )
    if isinstance(record, Mapping):
        return TrainingRecord.from_mapping(record)
    # pydantic models and other attribute-style rows
    return TrainingRecord(
        status=getattr(record, "status", None) or UNKNOWN_CATEGORY,
        issue_summary=getattr(record, "issue_summary", None) or "",
        item_type=getattr(record, "item_type", None),
    )


def tokenize(text: Optional[str]) -> List[str]:
    if not text:
        return []
    return text.lower().split()


def count_categories(records: Iterable[TrainingRecord]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for record in records:
        counts[record.status] = counts.get(record.status, 0) + 1
    return counts


def build_vocabulary(records: Iterable[TrainingRecord]) -> Tuple[str, ...]:
    # dict preserves first-seen order, a set would not
    seen: Dict[str, None] = {}
    for record in records:
        for token in tokenize(record.issue_summary):
            seen.setdefault(token, None)
    return tuple(seen)


@dataclass(frozen=True)
class ExtractedFeatures:
    categories: Tuple[str, ...]
    category_counts: Dict[str, int]
    vocabulary: Tuple[str, ...]
    # token -> category -> number of category records whose text contains the token
    document_counts: Dict[str, Dict[str, int]]
    total_records: int


def extract_features(records: Iterable[Any]) -> ExtractedFeatures:
    records = [coerce_record(r) for r in records]
    category_counts = count_categories(records)
    categories = tuple(category_counts)
    vocabulary = build_vocabulary(records)

    texts_by_category: Dict[str, List[str]] = {c: [] for c in categories}
    for record in records:
        texts_by_category[record.status].append(record.issue_summary.lower())

    document_counts: Dict[str, Dict[str, int]] = {}
    for token in vocabulary:
        # substring containment, so "fail" also counts records mentioning "failed"
        document_counts[token] = {
            category: sum(1 for text in texts_by_category[category] if token in text)
            for category in categories
        }

    return ExtractedFeatures(
        categories=categories,
        category_counts=category_counts,
        vocabulary=vocabulary,
        document_counts=document_counts,
        total_records=len(records),
    )


__all__ = [
    "UNKNOWN_CATEGORY",
    "TrainingRecord",
    "ExtractedFeatures",
    "coerce_record",
    "tokenize",
    "count_categories",
    "build_vocabulary",
    "extract_features",
]
