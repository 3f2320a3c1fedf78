from typing import List, Tuple
import logging
import httpx

from ..core.config import settings

logger = logging.getLogger(__name__)

FALLBACK_ANALYSIS = (
    "We're unable to provide AI insights at this time, but based on your symptoms, "
    "we recommend consulting with a healthcare specialist for personalized guidance."
)

async def analyze_symptoms(symptoms: List[str], duration: str, severity: str) -> Tuple[str, bool]:
    """Ask the analysis function for insights.

    Returns ``(text, available)``. Any failure yields the fallback text so a
    symptom check is never blocked on this call.
    """
    if not settings.SYMPTOM_ANALYSIS_URL:
        return FALLBACK_ANALYSIS, False

    body = {"symptoms": symptoms, "duration": duration, "severity": severity}
    try:
        async with httpx.AsyncClient(timeout=settings.SYMPTOM_ANALYSIS_TIMEOUT_SECONDS) as client:
            response = await client.post(settings.SYMPTOM_ANALYSIS_URL, json=body)
        response.raise_for_status()
        analysis = response.json().get("analysis")
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"AI analysis error: {str(e)}")
        return FALLBACK_ANALYSIS, False

    if not analysis:
        return FALLBACK_ANALYSIS, False
    return analysis, True
