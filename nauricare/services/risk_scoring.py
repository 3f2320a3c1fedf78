"""
Symptom self-assessment scoring.

The score is a plain sum of the severity ordinal, the number of selected
symptoms, and the duration ordinal. Fixed thresholds map it to a tier.
"""
from enum import Enum
from typing import Iterable, List

class Severity(str, Enum):
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"

class Duration(str, Enum):
    LESS_THAN_3 = "less-than-3"
    THREE_TO_SIX = "3-6"
    MORE_THAN_6 = "more-than-6"

class RiskLevel(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"

SEVERITY_SCORES = {
    Severity.MILD: 1,
    Severity.MODERATE: 2,
    Severity.SEVERE: 3,
}

DURATION_SCORES = {
    Duration.LESS_THAN_3: 1,
    Duration.THREE_TO_SIX: 2,
    Duration.MORE_THAN_6: 3,
}

HIGH_THRESHOLD = 10
MODERATE_THRESHOLD = 6

SYMPTOM_CATALOGUE = [
    "Irregular or absent periods",
    "Heavy menstrual bleeding",
    "Severe pelvic pain",
    "Lower back pain",
    "Pain during intercourse",
    "Frequent urination",
    "Unexplained weight gain",
    "Excessive hair growth (face, chest)",
    "Acne or oily skin",
    "Difficulty getting pregnant",
]

RISK_GUIDANCE = {
    RiskLevel.HIGH: (
        "Your symptoms suggest you should consult with a healthcare provider soon. "
        "We recommend booking an appointment with a specialist who can provide proper "
        "evaluation and treatment."
    ),
    RiskLevel.MODERATE: (
        "Your symptoms indicate it would be beneficial to speak with a healthcare provider. "
        "Consider booking an appointment to discuss your concerns and explore treatment options."
    ),
    RiskLevel.LOW: (
        "While your symptoms appear mild, it's still important to monitor them. "
        "If symptoms persist or worsen, please consult with a healthcare provider."
    ),
}

RISK_TITLES = {
    RiskLevel.HIGH: "High Concern Level",
    RiskLevel.MODERATE: "Moderate Concern Level",
    RiskLevel.LOW: "Low Concern Level",
}

MEDICAL_DISCLAIMER = (
    "NauriCare does not provide medical diagnosis or replace professional medical advice. "
    "This tool is for informational purposes only. Always consult with a qualified "
    "healthcare provider for proper diagnosis and treatment."
)

def normalize_symptoms(symptoms: Iterable[str]) -> List[str]:
    """Drop blanks and repeats, keeping first-seen order."""
    seen = []
    for symptom in symptoms:
        label = symptom.strip()
        if label and label not in seen:
            seen.append(label)
    return seen

def _coerce(enum_cls, value, label: str):
    if value is None or value == "":
        raise ValueError(f"{label} is required")
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValueError(f"Unknown {label} '{value}'. Expected one of: {allowed}")

def calculate_score(severity, symptom_count: int, duration) -> int:
    """Weighted sum of severity ordinal, symptom count and duration ordinal."""
    if symptom_count < 1:
        raise ValueError("At least one symptom must be selected")
    severity = _coerce(Severity, severity, "severity")
    duration = _coerce(Duration, duration, "duration")
    return SEVERITY_SCORES[severity] + symptom_count + DURATION_SCORES[duration]

def risk_level_for_score(score: int) -> RiskLevel:
    if score >= HIGH_THRESHOLD:
        return RiskLevel.HIGH
    if score >= MODERATE_THRESHOLD:
        return RiskLevel.MODERATE
    return RiskLevel.LOW

def calculate_risk_level(severity, symptoms: Iterable[str], duration) -> RiskLevel:
    return risk_level_for_score(
        calculate_score(severity, len(normalize_symptoms(symptoms)), duration)
    )
