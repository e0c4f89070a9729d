from __future__ import annotations

from dataclasses import dataclass

from asset_triage.models.classifier import ClassificationResult
from asset_triage.models.estimator import Severity

ESCALATION_REASONS = {
    Severity.CRITICAL: "Critical issue requiring immediate expert attention",
    Severity.HIGH: "High severity issue requiring specialized expertise",
}
NO_ESCALATION_REASON = "Issue can be resolved by current user"


@dataclass(frozen=True)
class EscalationAdvice:
    should_escalate: bool
    recommended_technician: str
    reason: str


def advise_escalation(result: ClassificationResult) -> EscalationAdvice:
    """Escalate HIGH and CRITICAL issues to the suggested technician."""
    reason = ESCALATION_REASONS.get(result.severity)
    return EscalationAdvice(
        should_escalate=reason is not None,
        recommended_technician=result.suggested_technician,
        reason=reason or NO_ESCALATION_REASON,
    )


__all__ = ["EscalationAdvice", "advise_escalation", "NO_ESCALATION_REASON"]
