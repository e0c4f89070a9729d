"""IssueClassifier: Naive Bayes issue triage trained on work-log history.

Pipeline:
 - features.py extracts category counts and token statistics
 - naive_bayes.train builds an immutable TrainedModel at construction
 - naive_bayes.score / best_category / confidence pick the category
 - estimator.py derives severity, resolution time, technician and priority

The classifier is retrained from scratch every time it is constructed and
nothing is written to disk. The only mutable piece is the technician
chooser, which can be injected for reproducible picks.

``item_type`` is accepted by :meth:`IssueClassifier.classify` for API
compatibility with the asset-management frontend but is not used in
scoring or severity detection.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Tuple

from asset_triage.models.estimator import (
    Chooser,
    Severity,
    calculate_priority,
    determine_severity,
    estimate_resolution_time,
    suggest_technician,
)
from asset_triage.models.naive_bayes import (
    DEFAULT_PRIOR_FLOOR,
    TrainedModel,
    best_category,
    confidence,
    score,
    train,
)


@dataclass(frozen=True)
class ClassificationResult:
    category: str
    confidence: float
    severity: Severity
    estimated_resolution_time: float
    suggested_technician: str
    priority: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "confidence": self.confidence,
            "severity": self.severity.value,
            "estimatedResolutionTime": self.estimated_resolution_time,
            "suggestedTechnician": self.suggested_technician,
            "priority": self.priority,
        }


class IssueClassifier:
    def __init__(
        self,
        training_data: Iterable[Any],
        rng: Optional[Chooser] = None,
        prior_floor: float = DEFAULT_PRIOR_FLOOR,
    ):
        self.model: TrainedModel = train(training_data)
        self.rng = rng
        self.prior_floor = prior_floor

    @property
    def categories(self) -> Tuple[str, ...]:
        return self.model.categories

    # ------------------------------ Public API ------------------------------
    def scores(self, issue_description: str) -> Dict[str, float]:
        return score(self.model, issue_description, prior_floor=self.prior_floor)

    def classify(self, issue_description: str, item_type: Optional[str] = None) -> ClassificationResult:
        issue_description = issue_description or ""
        all_scores = self.scores(issue_description)
        category, top = best_category(all_scores)

        severity = determine_severity(issue_description, item_type)
        hours = estimate_resolution_time(category, severity)

        return ClassificationResult(
            category=category,
            confidence=confidence(top, all_scores),
            severity=severity,
            estimated_resolution_time=hours,
            suggested_technician=suggest_technician(category, self.rng),
            priority=calculate_priority(severity, hours),
        )


__all__ = ["IssueClassifier", "ClassificationResult"]
