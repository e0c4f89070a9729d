"""Multinomial-style Naive Bayes over work-log statuses.

``train`` is a pure function: it consumes the full history and returns an
immutable :class:`TrainedModel`. ``score`` / ``best_category`` /
``confidence`` read that model without touching it, so one model can serve
any number of concurrent classification calls.

Category iteration order everywhere is the order in which each status first
appears in the training history. Exact score ties resolve to the earliest
category in that order.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Tuple

import numpy as np

from asset_triage.models.features import extract_features, tokenize

logger = logging.getLogger(__name__)

DEFAULT_PRIOR_FLOOR = 0.001


class EmptyTrainingSetError(ValueError):
    """Raised when a classifier is trained on an empty history."""

    def __init__(self, message: str = "Cannot train issue classifier on an empty training set"):
        super().__init__(message)


@dataclass(frozen=True)
class TrainedModel:
    categories: Tuple[str, ...]
    category_counts: Mapping[str, int]
    priors: Mapping[str, float]
    # token -> category -> P(token | category)
    feature_table: Mapping[str, Mapping[str, float]]
    total_records: int

    @property
    def vocabulary_size(self) -> int:
        return len(self.feature_table)


def train(records: Iterable[Any]) -> TrainedModel:
    features = extract_features(records)
    total = features.total_records
    if total == 0:
        raise EmptyTrainingSetError()

    n_categories = len(features.categories)
    priors = {c: features.category_counts[c] / total for c in features.categories}

    feature_table = {}
    for token in features.vocabulary:
        doc_counts = features.document_counts[token]
        feature_table[token] = MappingProxyType({
            c: (doc_counts[c] + 1) / (features.category_counts[c] + n_categories)
            for c in features.categories
        })

    logger.debug(
        "Trained issue classifier: %d records, %d categories, %d tokens",
        total, n_categories, len(feature_table),
    )
    return TrainedModel(
        categories=features.categories,
        category_counts=MappingProxyType(dict(features.category_counts)),
        priors=MappingProxyType(priors),
        feature_table=MappingProxyType(feature_table),
        total_records=total,
    )


def score(model: TrainedModel, text: str, prior_floor: float = DEFAULT_PRIOR_FLOOR) -> Dict[str, float]:
    """Log-probability score for every category, in category order."""
    tokens = tokenize(text)
    scores = {}
    for category in model.categories:
        prior = model.priors.get(category) or prior_floor
        total = math.log(prior)
        for token in tokens:
            probs = model.feature_table.get(token)
            if probs is None:
                continue  # out-of-vocabulary
            total += math.log(probs[category])
        scores[category] = total
    return scores


def best_category(scores: Mapping[str, float]) -> Tuple[str, float]:
    categories = list(scores)
    values = np.fromiter(scores.values(), dtype=float, count=len(categories))
    # argmax returns the first index on ties
    idx = int(np.argmax(values))
    return categories[idx], float(values[idx])


def confidence(best_score: float, scores: Mapping[str, float]) -> float:
    values = np.fromiter(scores.values(), dtype=float, count=len(scores))
    high = float(values.max())
    low = float(values.min())
    if high == low:
        return 0.5
    return (best_score - low) / (high - low)


__all__ = [
    "DEFAULT_PRIOR_FLOOR",
    "EmptyTrainingSetError",
    "TrainedModel",
    "train",
    "score",
    "best_category",
    "confidence",
]
