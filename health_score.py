"""Automatic health score for a family member.

The score is derived from objective data only (age, recorded conditions,
medication count, checkup and appointment dates), never self-reported.
Everything here is pure: pass ``today`` to pin the clock.
"""

from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from typing import Any, List, Mapping, Optional

BASE_SCORE = 100

# Condition tiers, checked in order; first substring hit wins.
CONDITION_TIERS = [
    (("diabetes", "heart", "cancer"), -20, "major condition"),
    (("hypertension", "high blood pressure", "asthma", "arthritis"), -15, "chronic condition"),
    (("allergy", "migraine", "anxiety", "depression"), -10, "moderate condition"),
]
MINOR_CONDITION_PENALTY = -5

STATUS_THRESHOLDS = [(90, "excellent"), (75, "good"), (60, "fair")]


@dataclass
class HealthScoreBreakdown:
    base_score: int = BASE_SCORE
    age_adjustment: int = 0
    condition_penalty: int = 0
    medication_penalty: int = 0
    checkup_bonus: int = 0
    appointment_bonus: int = 0
    final_score: int = BASE_SCORE
    factors: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)


def parse_date(d) -> Optional[date]:
    if not d:
        return None
    if isinstance(d, (date, datetime)):
        return d.date() if isinstance(d, datetime) else d
    if not isinstance(d, str):
        return None
    d = d.strip()
    try:
        return datetime.fromisoformat(d.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    for fmt in ("%Y-%m-%d", "%m/%d/%Y", "%d/%m/%Y"):
        try:
            return datetime.strptime(d, fmt).date()
        except ValueError:
            pass
    return None


def calculate_age(dob, today: Optional[date] = None) -> Optional[int]:
    d = parse_date(dob)
    if not d:
        return None
    today = today or date.today()
    return today.year - d.year - ((today.month, today.day) < (d.month, d.day))


def _member_age(member: Mapping[str, Any], today: date) -> Optional[float]:
    age = member.get("age")
    if isinstance(age, (int, float)) and not isinstance(age, bool):
        return age
    return calculate_age(member.get("dob"), today)


def _age_adjustment(age: Optional[int]):
    if age is None:
        return 0, None
    if age > 70:
        return -15, "Age 70+: -15 points"
    if age > 60:
        return -10, "Age 61-70: -10 points"
    if age > 50:
        return -5, "Age 51-60: -5 points"
    if age < 18:
        return 5, "Young age: +5 points"
    return 0, None


def classify_condition(condition: str):
    """Return ``(penalty, label)`` for a single condition name."""
    lowered = condition.lower()
    for keywords, penalty, label in CONDITION_TIERS:
        if any(k in lowered for k in keywords):
            return penalty, label
    return MINOR_CONDITION_PENALTY, "minor condition"


def _medication_penalty(count):
    # Only an explicit number counts; a missing count is not "zero medications".
    if not isinstance(count, (int, float)) or isinstance(count, bool):
        return 0, None
    if count > 5:
        return -20, f"{count} medications: -20 points (high medication count)"
    if count > 3:
        return -15, f"{count} medications: -15 points (moderate medication count)"
    if count > 1:
        return -10, f"{count} medications: -10 points (some medications)"
    return 0, None


def _checkup_bonus(last_checkup, today: date):
    if not last_checkup or (isinstance(last_checkup, str) and not last_checkup.strip()):
        return -15, "No checkup date recorded: -15 points"
    checked = parse_date(last_checkup)
    # An unreadable date is treated like a stale one.
    days = (today - checked).days if checked else None
    if days is not None and days < 365:
        return 10, "Recent checkup (< 1 year): +10 points"
    if days is not None and days < 730:
        return 5, "Checkup within 2 years: +5 points"
    return -10, "No recent checkup (> 2 years): -10 points"


def _appointment_bonus(next_appointment, today: date):
    when = parse_date(next_appointment)
    days = (when - today).days if when else 0
    if days > 0 and days < 90:
        return 5, "Upcoming appointment: +5 points"
    if days > 0:
        return 2, "Future appointment scheduled: +2 points"
    return -5, "No upcoming appointments: -5 points"


def compute_score(member: Mapping[str, Any], today: Optional[date] = None) -> HealthScoreBreakdown:
    """
    Calculates the health score of a family member.

    Args:
        member: A member record using the API field names (``age`` or ``dob``,
            ``conditions``, ``medications``, ``lastCheckup``, ``nextAppointment``).
        today: Reference date, defaults to the current date.

    Returns:
        HealthScoreBreakdown: every adjustment, the clamped final score and the
        factor lines in evaluation order.
    """
    today = today or date.today()
    breakdown = HealthScoreBreakdown()
    factors = breakdown.factors

    breakdown.age_adjustment, line = _age_adjustment(_member_age(member, today))
    if line:
        factors.append(line)

    for condition in member.get("conditions") or []:
        penalty, label = classify_condition(str(condition))
        breakdown.condition_penalty += penalty
        factors.append(f"{condition}: {penalty} points ({label})")

    breakdown.medication_penalty, line = _medication_penalty(member.get("medications"))
    if line:
        factors.append(line)

    breakdown.checkup_bonus, line = _checkup_bonus(member.get("lastCheckup"), today)
    factors.append(line)

    breakdown.appointment_bonus, line = _appointment_bonus(member.get("nextAppointment"), today)
    factors.append(line)

    total = (
        breakdown.base_score
        + breakdown.age_adjustment
        + breakdown.condition_penalty
        + breakdown.medication_penalty
        + breakdown.checkup_bonus
        + breakdown.appointment_bonus
    )
    breakdown.final_score = max(0, min(100, total))
    return breakdown


def health_status(score: float) -> str:
    for threshold, status in STATUS_THRESHOLDS:
        if score >= threshold:
            return status
    return "poor"


def recommendations(breakdown: HealthScoreBreakdown) -> List[str]:
    out = []
    if breakdown.condition_penalty < -30:
        out.append("Consider consulting with specialists for your medical conditions")
    if breakdown.medication_penalty < -15:
        out.append("Review medications with your doctor to optimize treatment")
    if breakdown.checkup_bonus <= 0:
        out.append("Schedule a routine health checkup")
    if breakdown.appointment_bonus <= 0:
        out.append("Book your next preventive care appointment")
    if breakdown.final_score < 70:
        out.append("Focus on lifestyle modifications and regular medical follow-ups")
    if not out:
        out.append("Continue maintaining your current health routine")
    return out


def explain(member: Mapping[str, Any], today: Optional[date] = None) -> str:
    breakdown = compute_score(member, today)
    status = health_status(breakdown.final_score)
    lines = [
        f"Health Score: {breakdown.final_score}% ({status})",
        f"Base Score: {breakdown.base_score} points",
        "",
        "Adjustments:",
        *breakdown.factors,
        "",
        "This score is calculated objectively based on:",
        "- Age and health risk factors",
        "- Number and severity of medical conditions",
        "- Medication complexity",
        "- Preventive care history",
        "- Upcoming medical appointments",
    ]
    return "\n".join(lines)
