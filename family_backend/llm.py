import json
import logging

import requests

from . import config

logger = logging.getLogger(__name__)

API_URL = "https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"

SYSTEM_PROMPT = """
You are a careful assistant that reads medical report text for a family health record.
Return a single JSON object with one key, "insights", holding an array of objects.
Each object MUST have:
- "type": one of "recommendation", "alert", "trend", "prediction"
- "title": a short headline
- "description": one or two plain sentences
- "severity": one of "low", "medium", "high"
- "category": e.g. "medication", "lifestyle", "appointment", "test", "diet", "general"
- "actionItems": an array of short strings
Only use facts present in the text. Return an empty array if nothing is relevant.
"""


class InsightGenerationError(RuntimeError):
    pass


def generate_insights(report_text: str) -> list:
    """
    Sends report text to the Gemini API and returns the insights it suggests.

    Args:
        report_text (str): Raw text of the health report.

    Returns:
        list: Insight dictionaries ready for persistence.

    Raises:
        InsightGenerationError: If no API key is configured, the request fails
            or the response cannot be parsed.
    """
    if not config.GEMINI_API_KEY:
        raise InsightGenerationError("GEMINI_API_KEY is not configured")

    payload = {
        "contents": [{"parts": [{"text": report_text}]}],
        "systemInstruction": {"parts": [{"text": SYSTEM_PROMPT}]},
        "generationConfig": {"responseMimeType": "application/json"},
    }
    url = API_URL.format(model=config.GEMINI_MODEL)

    try:
        response = requests.post(
            url, params={"key": config.GEMINI_API_KEY}, json=payload, timeout=config.GEMINI_TIMEOUT
        )
        response.raise_for_status()
    except requests.exceptions.RequestException as e:
        logger.warning("Gemini request failed: %s", e)
        raise InsightGenerationError(f"API request failed: {e}") from e

    try:
        raw_json_string = response.json()["candidates"][0]["content"]["parts"][0]["text"]
        parsed = json.loads(raw_json_string)
    except (KeyError, IndexError, ValueError) as e:
        logger.warning("Error parsing Gemini response: %s", e)
        raise InsightGenerationError(f"Error parsing API response: {e}") from e

    insights = parsed.get("insights") if isinstance(parsed, dict) else parsed
    if not isinstance(insights, list):
        raise InsightGenerationError("Model response did not contain an insights list")
    return [i for i in insights if isinstance(i, dict)]
