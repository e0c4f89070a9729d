from __future__ import annotations

import random
from enum import Enum
from typing import Dict, List, Optional, Protocol, Sequence


class Severity(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


# Checked in this order; first hit wins
SEVERITY_KEYWORDS: List[tuple] = [
    (Severity.CRITICAL, ("crash", "error", "fail", "broken", "not working", "dead")),
    (Severity.HIGH, ("slow", "lag", "freeze", "problem", "issue")),
    (Severity.MEDIUM, ("performance", "optimization", "maintenance")),
]

BASE_RESOLUTION_HOURS: Dict[str, float] = {
    "HARDWARE": 4,
    "SOFTWARE": 2,
    "NETWORK": 3,
    "PERFORMANCE": 1.5,
    "MAINTENANCE": 1,
}
DEFAULT_BASE_HOURS = 2

SEVERITY_MULTIPLIERS: Dict[Severity, float] = {
    Severity.LOW: 0.5,
    Severity.MEDIUM: 1,
    Severity.HIGH: 2,
    Severity.CRITICAL: 4,
}

SEVERITY_WEIGHTS: Dict[Severity, int] = {
    Severity.LOW: 1,
    Severity.MEDIUM: 2,
    Severity.HIGH: 3,
    Severity.CRITICAL: 4,
}

TECHNICIAN_EXPERTISE: Dict[str, List[str]] = {
    "HARDWARE": ["tech1", "tech2"],
    "SOFTWARE": ["tech3", "tech4"],
    "NETWORK": ["tech5", "tech6"],
    "PERFORMANCE": ["tech1", "tech3"],
    "MAINTENANCE": ["tech2", "tech5"],
}
DEFAULT_TECHNICIANS = ["tech1"]


class Chooser(Protocol):
    def choice(self, seq: Sequence[str]) -> str: ...


def determine_severity(description: Optional[str], item_type: Optional[str] = None) -> Severity:
    # item_type is part of the signature but does not affect severity
    text = (description or "").lower()
    for severity, keywords in SEVERITY_KEYWORDS:
        if any(keyword in text for keyword in keywords):
            return severity
    return Severity.LOW


def estimate_resolution_time(category: str, severity: Severity) -> float:
    base = BASE_RESOLUTION_HOURS.get(category, DEFAULT_BASE_HOURS)
    return base * SEVERITY_MULTIPLIERS[severity]


def technician_candidates(category: str) -> List[str]:
    return list(TECHNICIAN_EXPERTISE.get(category, DEFAULT_TECHNICIANS))


def suggest_technician(category: str, rng: Optional[Chooser] = None) -> str:
    """Pick one expert for ``category`` uniformly at random.

    Pass a seeded ``random.Random`` (or anything with a ``choice`` method)
    to make the pick reproducible.
    """
    chooser = rng if rng is not None else random
    return chooser.choice(technician_candidates(category))


def calculate_priority(severity: Severity, resolution_hours: float) -> float:
    return SEVERITY_WEIGHTS[severity] * (resolution_hours / 2)


__all__ = [
    "Severity",
    "Chooser",
    "SEVERITY_KEYWORDS",
    "BASE_RESOLUTION_HOURS",
    "SEVERITY_MULTIPLIERS",
    "SEVERITY_WEIGHTS",
    "TECHNICIAN_EXPERTISE",
    "determine_severity",
    "estimate_resolution_time",
    "technician_candidates",
    "suggest_technician",
    "calculate_priority",
]
