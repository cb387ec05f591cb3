"""
Distance-duration plausibility rules.

A fixed table maps canonical race distances to the range of finishing
times that are physiologically plausible (elite to casual pace). A
submitted activity close to one of these distances must have a
duration inside that range; other distances are not constrained.

Pure functions only, so the same check can run anywhere.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class DurationRule:
    """Plausible duration bounds for one canonical distance."""

    distance_km: float
    min_seconds: int
    max_seconds: int


# Ordered: ties in nearest-distance lookup go to the earlier entry.
DURATION_RULES: tuple[DurationRule, ...] = (
    DurationRule(1, 180, 900),        # 3-15 min
    DurationRule(2, 360, 1800),       # 6-30 min
    DurationRule(5, 1200, 4500),      # 20-75 min
    DurationRule(10, 2100, 7200),     # 35-120 min
    DurationRule(15, 3600, 10800),    # 60-180 min
    DurationRule(21.1, 4800, 12600),  # 80-210 min
    DurationRule(42.2, 10800, 24000),  # 180-400 min
)

# How close a submission must be to a canonical distance to be checked
MATCH_TOLERANCE_KM = 0.5


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a plausibility check."""

    valid: bool
    message: Optional[str] = None
    rule: Optional[DurationRule] = None


def _format_number(value: float) -> str:
    """10.0 -> "10", 21.1 -> "21.1", 2.5 -> "2.5"."""
    if float(value).is_integer():
        return str(int(value))
    return f"{value:g}"


def find_nearest_rule(distance_km: float) -> DurationRule:
    """Canonical rule whose distance is closest to distance_km."""
    nearest = DURATION_RULES[0]
    for rule in DURATION_RULES[1:]:
        if abs(rule.distance_km - distance_km) < abs(nearest.distance_km - distance_km):
            nearest = rule
    return nearest


def validate_duration(distance_km: float, duration_seconds: float) -> ValidationResult:
    """
    Check whether a (distance, duration) pair is plausible.

    Args:
        distance_km: Reported distance in kilometers
        duration_seconds: Reported duration in seconds

    Returns:
        ValidationResult; invalid results carry a message naming the
        matched distance and the allowed range in minutes.
    """
    rule = find_nearest_rule(distance_km)

    if abs(rule.distance_km - distance_km) >= MATCH_TOLERANCE_KM:
        # Non-standard distance: no time constraint
        return ValidationResult(valid=True)

    if rule.min_seconds <= duration_seconds <= rule.max_seconds:
        return ValidationResult(valid=True, rule=rule)

    message = (
        f"Invalid duration for {_format_number(rule.distance_km)}KM. "
        f"Duration must be between {_format_number(rule.min_seconds / 60)}-"
        f"{_format_number(rule.max_seconds / 60)} minutes."
    )
    return ValidationResult(valid=False, message=message, rule=rule)
