"""Quick plausibility check for text extracted from a health report."""

MEDICAL_TERMS = [
    "hemoglobin", "cholesterol", "glucose", "cbc", "blood", "platelets", "wbc", "rbc",
    "prescription", "diagnosis", "patient", "doctor", "hospital", "mg/dl", "mmhg",
    "vitamin", "thyroid", "tsh", "t4", "dosage", "tablet", "capsule", "x-ray", "mri", "ct",
    "ultrasound", "report", "scan", "lab", "urine", "serum", "disease", "hypertension",
    "diabetes", "metformin", "lisinopril", "antibiotic", "bp", "pulse", "appointment",
]

# Number of distinct term hits that counts as a fully medical vocabulary.
HIT_SATURATION = 5
LENGTH_SATURATION = 500
VALID_THRESHOLD = 0.35


def score_medical_text(text: str) -> dict:
    """
    Scores how likely a piece of text is a medical document.

    Args:
        text (str): Raw report text.

    Returns:
        dict: ``valid``, ``score`` (0..1), ``hits`` and the ``matched`` terms.
    """
    lower = text.lower()
    matched = [term for term in MEDICAL_TERMS if term in lower]
    hit_ratio = min(1.0, len(matched) / HIT_SATURATION)
    length_weight = min(1.0, len(lower) / LENGTH_SATURATION)
    score = max(0.0, min(1.0, 0.8 * hit_ratio + 0.2 * length_weight))
    return {
        "valid": score >= VALID_THRESHOLD,
        "score": round(score, 4),
        "hits": len(matched),
        "matched": matched,
    }
